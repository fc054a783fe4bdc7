"""
Cookbook API Serializers.

Output only: writes go through cookbook.service.Resource, which validates
with full_clean(). Relations render as nested summaries.
"""

from django.contrib.contenttypes.models import ContentType
from rest_framework import serializers

from cookbook.models import Author, Cuisine, Image, NutritionInfo, Recipe, Review, Tag


class AuthorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Author
        fields = ["id", "name"]


class CuisineSerializer(serializers.ModelSerializer):
    class Meta:
        model = Cuisine
        fields = ["id", "code", "name"]


class TagSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tag
        fields = ["id", "name"]


class NutritionInfoSerializer(serializers.ModelSerializer):
    class Meta:
        model = NutritionInfo
        fields = ["id", "protein_g", "fat_g", "carbohydrates_g"]


class ReviewSerializer(serializers.ModelSerializer):
    class Meta:
        model = Review
        fields = ["id", "author_name", "rating", "comment", "created_at"]


class ImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = Image
        fields = ["id", "url", "caption"]


class RecipeSerializer(serializers.ModelSerializer):
    """Serializer for Recipe model with populated relations."""

    cuisine = CuisineSerializer(read_only=True)
    nutrition = NutritionInfoSerializer(read_only=True)
    author = AuthorSerializer(read_only=True)
    reviews = ReviewSerializer(many=True, read_only=True)
    tags = TagSerializer(many=True, read_only=True)
    source = serializers.SerializerMethodField()
    images = ImageSerializer(many=True, read_only=True)

    class Meta:
        model = Recipe
        fields = [
            "id",
            "name",
            "description",
            "instructions",
            "calories",
            "servings",
            "price",
            "rating",
            "is_vegan",
            "is_published",
            "cuisine",
            "nutrition",
            "author",
            "reviews",
            "tags",
            "source",
            "images",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_source(self, obj) -> dict | None:
        """Polymorphic link as {"ref": "app_label.model", "id": pk}."""
        if obj.source_type_id is None:
            return None
        content_type = ContentType.objects.get_for_id(obj.source_type_id)
        return {"ref": f"{content_type.app_label}.{content_type.model}", "id": obj.source_id}
