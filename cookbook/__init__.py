"""
Django Cookbook - REST resource layer for recipes.

Translates REST query parameters into ORM filters, splits scalar from
relational fields on writes and offers a dialect-aware free-text search.

Usage:
    from cookbook import recipes, CookbookError

    # Listing (REST-style params)
    soups = recipes.fetch_all({"name_contains": "soup", "_sort": "name:ASC"})
    total = recipes.count({"is_vegan": "true"})

    # Writes (scalar + relational fields in one payload)
    recipe = recipes.add({"name": "Soup", "calories": 120, "tags": [3, 4]})
    recipe = recipes.edit({"id": recipe.pk}, {"name": "Tomato Soup"})
    recipes.remove({"id": recipe.pk})

    # Free text
    hits = recipes.search({"_q": "tomato", "_limit": 10})
"""

from cookbook.exceptions import CookbookError


def __getattr__(name):
    """Lazy import to avoid AppRegistryNotReady errors."""
    if name == "recipes":
        from cookbook.service import recipes

        return recipes
    if name == "Resource":
        from cookbook.service import Resource

        return Resource
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["recipes", "Resource", "CookbookError"]
__version__ = "0.1.0"
