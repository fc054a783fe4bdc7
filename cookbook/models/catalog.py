"""
Catalog models a Recipe points to: Author, Cuisine, Tag, NutritionInfo.
"""

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class Author(models.Model):
    """Person (or brand) credited for recipes."""

    name = models.CharField(
        max_length=200,
        verbose_name=_("Name"),
    )
    bio = models.TextField(
        blank=True,
        verbose_name=_("Bio"),
    )

    class Meta:
        db_table = "cookbook_author"
        verbose_name = _("Author")
        verbose_name_plural = _("Authors")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Cuisine(models.Model):
    """
    Culinary tradition (Italian, Thai...).

    Recipes point to a cuisine but a cuisine does not list its recipes.
    """

    code = models.SlugField(
        unique=True,
        max_length=50,
        verbose_name=_("Code"),
    )
    name = models.CharField(
        max_length=100,
        verbose_name=_("Name"),
    )

    class Meta:
        db_table = "cookbook_cuisine"
        verbose_name = _("Cuisine")
        verbose_name_plural = _("Cuisines")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Tag(models.Model):
    name = models.CharField(
        max_length=100,
        unique=True,
        verbose_name=_("Name"),
    )

    class Meta:
        db_table = "cookbook_tag"
        verbose_name = _("Tag")
        verbose_name_plural = _("Tags")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class NutritionInfo(models.Model):
    """Macronutrients per serving, owned by at most one recipe."""

    protein_g = models.DecimalField(
        max_digits=6,
        decimal_places=1,
        default=Decimal("0"),
        verbose_name=_("Protein (g)"),
    )
    fat_g = models.DecimalField(
        max_digits=6,
        decimal_places=1,
        default=Decimal("0"),
        verbose_name=_("Fat (g)"),
    )
    carbohydrates_g = models.DecimalField(
        max_digits=6,
        decimal_places=1,
        default=Decimal("0"),
        verbose_name=_("Carbohydrates (g)"),
    )

    class Meta:
        db_table = "cookbook_nutrition_info"
        verbose_name = _("Nutrition Info")
        verbose_name_plural = _("Nutrition Info")

    def __str__(self) -> str:
        return f"P {self.protein_g}g / F {self.fat_g}g / C {self.carbohydrates_g}g"
