"""
Cookbook Models.

- Recipe: the resource served by cookbook.service
- Author, Cuisine, Tag, NutritionInfo: catalog entities a Recipe points to
- Review: one-to-many feedback rows
- Image: polymorphic pictures (generic foreign key)
"""

from cookbook.models.catalog import Author, Cuisine, NutritionInfo, Tag
from cookbook.models.feedback import Image, Review
from cookbook.models.recipe import RECIPE_SCHEMA, Recipe

__all__ = [
    "Recipe",
    "RECIPE_SCHEMA",
    "Author",
    "Cuisine",
    "Tag",
    "NutritionInfo",
    "Review",
    "Image",
]
