"""
Recipe model and its resource schema.

Recipe links to its neighbours through every relation nature the
resource layer knows about:

    cuisine    oneWay           FK without reverse accessor
    nutrition  oneToOne         OneToOneField
    author     manyToOne        ForeignKey
    reviews    oneToMany        reverse side of Review.recipe
    tags       manyToMany       ManyToManyField
    source     oneToManyMorph   GenericForeignKey (source_type, source_id)
    images     manyToManyMorph  GenericRelation to Image
"""

from django.contrib.contenttypes.fields import GenericForeignKey, GenericRelation
from django.contrib.contenttypes.models import ContentType
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords

from cookbook.schema import Attribute, Nature, Relation, ResourceSchema


class Recipe(models.Model):
    """
    A cooking recipe.

    Scalar fields are written by the resource layer in one save();
    relations are applied afterwards through the relation update path.
    """

    name = models.CharField(
        max_length=200,
        verbose_name=_("Name"),
    )
    description = models.TextField(
        blank=True,
        verbose_name=_("Description"),
    )
    instructions = models.TextField(
        blank=True,
        verbose_name=_("Instructions"),
    )

    calories = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_("Calories"),
        help_text=_("Per serving (kcal)"),
    )
    servings = models.PositiveSmallIntegerField(
        default=1,
        verbose_name=_("Servings"),
    )
    price = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_("Price"),
    )
    rating = models.FloatField(
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(5)],
        verbose_name=_("Rating"),
    )

    is_vegan = models.BooleanField(
        default=False,
        verbose_name=_("Vegan"),
    )
    is_published = models.BooleanField(
        default=True,
        verbose_name=_("Published"),
    )

    # Relations
    cuisine = models.ForeignKey(
        "cookbook.Cuisine",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name=_("Cuisine"),
    )
    nutrition = models.OneToOneField(
        "cookbook.NutritionInfo",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="recipe",
        verbose_name=_("Nutrition"),
    )
    author = models.ForeignKey(
        "cookbook.Author",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="recipes",
        verbose_name=_("Author"),
    )
    tags = models.ManyToManyField(
        "cookbook.Tag",
        blank=True,
        related_name="recipes",
        verbose_name=_("Tags"),
    )

    # Where the recipe came from (any model: Author, another Recipe...)
    source_type = models.ForeignKey(
        ContentType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name=_("Source type"),
    )
    source_id = models.PositiveBigIntegerField(
        null=True,
        blank=True,
        verbose_name=_("Source ID"),
    )
    source = GenericForeignKey("source_type", "source_id")

    images = GenericRelation(
        "cookbook.Image",
        content_type_field="content_type",
        object_id_field="object_id",
        related_query_name="recipe",
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    # History
    history = HistoricalRecords()

    class Meta:
        db_table = "cookbook_recipe"
        verbose_name = _("Recipe")
        verbose_name_plural = _("Recipes")
        ordering = ["id"]
        indexes = [
            models.Index(fields=["name"], name="cookbook_recipe_name_idx"),
            models.Index(fields=["is_published"], name="cookbook_recipe_published_idx"),
            models.Index(fields=["source_type", "source_id"], name="cookbook_recipe_source_idx"),
        ]

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.name


RECIPE_SCHEMA = ResourceSchema(
    name="recipe",
    attributes=(
        Attribute("name", "string"),
        Attribute("description", "text"),
        Attribute("instructions", "text"),
        Attribute("calories", "integer"),
        Attribute("servings", "integer"),
        Attribute("price", "decimal"),
        Attribute("rating", "float"),
        Attribute("is_vegan", "boolean"),
        Attribute("is_published", "boolean"),
        Attribute("created_at", "datetime", read_only=True),
        Attribute("updated_at", "datetime", read_only=True),
    ),
    relations=(
        Relation("cuisine", Nature.ONE_WAY),
        Relation("nutrition", Nature.ONE_TO_ONE),
        Relation("author", Nature.MANY_TO_ONE),
        Relation("reviews", Nature.ONE_TO_MANY),
        Relation("tags", Nature.MANY_TO_MANY),
        Relation("source", Nature.ONE_TO_MANY_MORPH, auto_populate=False),
        Relation("images", Nature.MANY_TO_MANY_MORPH),
    ),
)
