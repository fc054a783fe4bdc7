"""
Review and Image models.

Both can exist detached from a recipe: clearing a relation nulls the
link instead of deleting the row.
"""

from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class Review(models.Model):
    """Reader review of a recipe."""

    recipe = models.ForeignKey(
        "cookbook.Recipe",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviews",
        verbose_name=_("Recipe"),
    )
    author_name = models.CharField(
        max_length=100,
        verbose_name=_("Author"),
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        verbose_name=_("Rating"),
    )
    comment = models.TextField(
        blank=True,
        verbose_name=_("Comment"),
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))

    class Meta:
        db_table = "cookbook_review"
        verbose_name = _("Review")
        verbose_name_plural = _("Reviews")
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.author_name} ({self.rating}/5)"


class Image(models.Model):
    """
    Picture attachable to any model (polymorphic).

    Recipes reach their images through a GenericRelation.
    """

    url = models.URLField(
        max_length=500,
        verbose_name=_("URL"),
    )
    caption = models.CharField(
        max_length=200,
        blank=True,
        verbose_name=_("Caption"),
    )

    content_type = models.ForeignKey(
        ContentType,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        verbose_name=_("Content type"),
    )
    object_id = models.PositiveBigIntegerField(
        null=True,
        blank=True,
        verbose_name=_("Object ID"),
    )
    content_object = GenericForeignKey("content_type", "object_id")

    class Meta:
        db_table = "cookbook_image"
        verbose_name = _("Image")
        verbose_name_plural = _("Images")
        ordering = ["id"]
        indexes = [
            models.Index(fields=["content_type", "object_id"], name="cookbook_image_object_idx"),
        ]

    def __str__(self) -> str:
        return self.caption or self.url
