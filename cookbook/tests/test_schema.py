"""
Tests for resource schema descriptors (cookbook.schema).
"""

import pytest

from cookbook.exceptions import CookbookError
from cookbook.models import RECIPE_SCHEMA
from cookbook.schema import Attribute, Nature, Relation, ResourceSchema


class TestRelation:
    """Tests for Relation natures."""

    def test_nature_accepts_member_or_value(self):
        assert Relation("tags", Nature.MANY_TO_MANY).nature == "manyToMany"
        assert Relation("tags", "manyToMany").nature == Nature.MANY_TO_MANY

    def test_unknown_nature_rejected(self):
        with pytest.raises(ValueError):
            Relation("friends", "sideways")

    @pytest.mark.parametrize(
        "nature, empty",
        [
            (Nature.ONE_WAY, None),
            (Nature.ONE_TO_ONE, None),
            (Nature.MANY_TO_ONE, None),
            (Nature.ONE_TO_MANY_MORPH, None),
            (Nature.ONE_TO_MANY, []),
            (Nature.MANY_TO_MANY, []),
            (Nature.MANY_TO_MANY_MORPH, []),
        ],
    )
    def test_empty_value_follows_nature(self, nature, empty):
        assert Relation("link", nature).empty_value == empty

    def test_morph_natures(self):
        assert Relation("source", Nature.ONE_TO_MANY_MORPH).is_morph
        assert Relation("images", Nature.MANY_TO_MANY_MORPH).is_morph
        assert not Relation("tags", Nature.MANY_TO_MANY).is_morph


class TestSplit:
    """Tests for ResourceSchema.split()."""

    def test_split_separates_scalars_from_relations(self):
        data, relations = RECIPE_SCHEMA.split(
            {"name": "Soup", "calories": 200, "tags": [3, 4], "author": 1}
        )

        assert data == {"name": "Soup", "calories": 200}
        assert relations == {"tags": [3, 4], "author": 1}

    def test_split_drops_primary_key_and_read_only(self):
        data, relations = RECIPE_SCHEMA.split(
            {"id": 9, "name": "Soup", "created_at": "2025-01-01T00:00:00Z"}
        )

        assert data == {"name": "Soup"}
        assert relations == {}

    def test_split_unknown_field(self):
        with pytest.raises(CookbookError) as exc:
            RECIPE_SCHEMA.split({"colour": "red"})

        assert exc.value.code == "UNKNOWN_FIELD"
        assert exc.value.details["field"] == "colour"

    def test_split_none(self):
        assert RECIPE_SCHEMA.split(None) == ({}, {})


class TestRecipeSchema:
    """Tests for the declared Recipe schema."""

    def test_fields_by_type(self):
        assert RECIPE_SCHEMA.fields_of_type("string", "text") == [
            "name",
            "description",
            "instructions",
        ]
        assert RECIPE_SCHEMA.fields_of_type("integer", "decimal", "float") == [
            "calories",
            "servings",
            "price",
            "rating",
        ]
        assert RECIPE_SCHEMA.fields_of_type("boolean") == ["is_vegan", "is_published"]

    def test_auto_populate_skips_source(self):
        assert RECIPE_SCHEMA.auto_populate() == [
            "cuisine",
            "nutrition",
            "author",
            "reviews",
            "tags",
            "images",
        ]

    def test_one_relation_per_nature(self):
        assert sorted(r.nature for r in RECIPE_SCHEMA.relations) == sorted(Nature.values)

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("id", True),
            ("name", True),
            ("author.name", True),
            ("tags.name", True),
            ("name.length", False),
            ("colour", False),
        ],
    )
    def test_is_filterable(self, path, expected):
        assert RECIPE_SCHEMA.is_filterable(path) is expected

    def test_custom_primary_key(self):
        schema = ResourceSchema(
            name="ingredient",
            attributes=(Attribute("code", "string"), Attribute("label", "string")),
            primary_key="code",
        )

        assert schema.fields_of_type("string") == ["label"]
        assert schema.split({"code": "egg", "label": "Egg"}) == ({"label": "Egg"}, {})
