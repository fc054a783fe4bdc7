"""
Cookbook Admin.

Recipe uses SimpleHistoryAdmin so every change recorded by
HistoricalRecords can be browsed from the change page.
"""

from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from cookbook.models import Author, Cuisine, Image, NutritionInfo, Recipe, Review, Tag


# ── Recipe ──


class ReviewInline(admin.TabularInline):
    """Inline for recipe reviews."""

    model = Review
    extra = 0
    fields = ("author_name", "rating", "comment")


@admin.register(Recipe)
class RecipeAdmin(SimpleHistoryAdmin):
    """Admin for recipes."""

    list_display = ("name", "author", "cuisine", "calories", "rating", "is_vegan", "is_published")
    list_filter = ("is_vegan", "is_published", "cuisine")
    search_fields = ("name", "description")
    filter_horizontal = ("tags",)
    raw_id_fields = ("author", "nutrition")
    inlines = [ReviewInline]
    readonly_fields = ("created_at", "updated_at")


# ── Catalog ──


@admin.register(Author)
class AuthorAdmin(admin.ModelAdmin):
    list_display = ("name",)
    search_fields = ("name",)


@admin.register(Cuisine)
class CuisineAdmin(admin.ModelAdmin):
    list_display = ("code", "name")
    search_fields = ("code", "name")


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    search_fields = ("name",)


@admin.register(NutritionInfo)
class NutritionInfoAdmin(admin.ModelAdmin):
    list_display = ("id", "protein_g", "fat_g", "carbohydrates_g")


# ── Feedback ──


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("recipe", "author_name", "rating", "created_at")
    list_filter = ("rating",)
    raw_id_fields = ("recipe",)


@admin.register(Image)
class ImageAdmin(admin.ModelAdmin):
    list_display = ("url", "caption", "content_type", "object_id")
