"""
Tests for text search: sanitization, strategy selection and adapters.
"""

import re
from decimal import Decimal

import pytest

from django.db.models import Q

from cookbook.adapters import ContainsTextSearch, MySQLTextSearch, PostgresTextSearch
from cookbook.conf import get_search_backend, reset_search_backends
from cookbook.models import Recipe
from cookbook.protocols import TextSearchBackend
from cookbook.service import parse_number, sanitize_search_text

ALLOWED = re.compile(r"[a-zA-Z0-9.\-\s]*")


@pytest.fixture(autouse=True)
def fresh_backends():
    reset_search_backends()
    yield
    reset_search_backends()


# ═══════════════════════════════════════════════════════════════════
# Sanitization
# ═══════════════════════════════════════════════════════════════════


class TestSanitizeSearchText:
    def test_strips_sql_metacharacters(self):
        text = sanitize_search_text("abc'; DROP TABLE--")

        assert text == "abc DROP TABLE--"
        assert ALLOWED.fullmatch(text)

    def test_keeps_allowed_characters(self):
        assert sanitize_search_text("Pasta 4.5 low-fat") == "Pasta 4.5 low-fat"

    def test_strips_quotes_and_operators(self):
        text = sanitize_search_text('"soup" +tomato* (OR) 100%')

        assert text == "soup tomato OR 100"
        assert ALLOWED.fullmatch(text)

    def test_none(self):
        assert sanitize_search_text(None) == ""


class TestParseNumber:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("42", Decimal("42")),
            (" 4.5 ", Decimal("4.5")),
            ("-3", Decimal("-3")),
            ("1e3", Decimal("1000")),
        ],
    )
    def test_numbers(self, text, expected):
        assert parse_number(text) == expected

    @pytest.mark.parametrize("text", ["", "soup", "4.5.1", "NaN", "Infinity", "42 soup"])
    def test_not_numbers(self, text):
        assert parse_number(text) is None


# ═══════════════════════════════════════════════════════════════════
# Strategy selection
# ═══════════════════════════════════════════════════════════════════


class TestSearchBackendSelection:
    """Tests for conf.get_search_backend()."""

    @pytest.mark.parametrize(
        "vendor, backend_class",
        [
            ("sqlite", ContainsTextSearch),
            ("mysql", MySQLTextSearch),
            ("postgresql", PostgresTextSearch),
            ("oracle", ContainsTextSearch),
        ],
    )
    def test_backend_by_vendor(self, vendor, backend_class):
        assert isinstance(get_search_backend(vendor), backend_class)

    def test_explicit_backend_wins(self, settings):
        settings.COOKBOOK = {"SEARCH_BACKEND": "cookbook.adapters.mysql.MySQLTextSearch"}

        assert isinstance(get_search_backend("sqlite"), MySQLTextSearch)

    def test_flat_setting(self, settings):
        settings.COOKBOOK = {}
        settings.COOKBOOK_SEARCH_BACKEND = "cookbook.adapters.postgres.PostgresTextSearch"

        assert isinstance(get_search_backend("mysql"), PostgresTextSearch)

    def test_instances_are_cached(self):
        assert get_search_backend("sqlite") is get_search_backend("sqlite")

    @pytest.mark.parametrize(
        "backend", [ContainsTextSearch(), MySQLTextSearch(), PostgresTextSearch()]
    )
    def test_adapters_implement_protocol(self, backend):
        assert isinstance(backend, TextSearchBackend)


# ═══════════════════════════════════════════════════════════════════
# Adapters
# ═══════════════════════════════════════════════════════════════════


class TestMySQLTextSearch:
    def test_match_against_boolean_mode(self):
        q = MySQLTextSearch().condition(Recipe.objects.all(), ["name", "description"], "tomato soup")
        raw = q.children[0]

        assert raw.sql == (
            'MATCH("cookbook_recipe"."name", "cookbook_recipe"."description") '
            "AGAINST (%s IN BOOLEAN MODE) > 0"
        )
        assert raw.params == ["*tomato soup*"]

    def test_text_is_a_parameter(self):
        text = sanitize_search_text("abc'; DROP TABLE--")

        raw = MySQLTextSearch().condition(Recipe.objects.all(), ["name"], text).children[0]

        assert "DROP" not in raw.sql
        assert raw.params == ["*abc DROP TABLE--*"]

    def test_nothing_to_match(self):
        backend = MySQLTextSearch()

        assert backend.condition(Recipe.objects.all(), ["name"], "   ") is None
        assert backend.condition(Recipe.objects.all(), [], "soup") is None


class TestPostgresTextSearch:
    def test_vector_query(self):
        raw = PostgresTextSearch().condition(
            Recipe.objects.all(), ["name", "description"], "tomato  soup"
        ).children[0]

        assert raw.sql == (
            "(to_tsvector(coalesce(\"cookbook_recipe\".\"name\", '')) || "
            "to_tsvector(coalesce(\"cookbook_recipe\".\"description\", ''))) "
            "@@ to_tsquery(%s)"
        )
        assert raw.params == ["tomato & soup"]

    def test_text_search_config(self):
        raw = PostgresTextSearch(config="english").condition(
            Recipe.objects.all(), ["name"], "soup"
        ).children[0]

        assert raw.sql == (
            "(to_tsvector('english', coalesce(\"cookbook_recipe\".\"name\", ''))) "
            "@@ to_tsquery('english', %s)"
        )
        assert raw.params == ["soup"]


class TestContainsTextSearch:
    def test_or_of_icontains(self):
        q = ContainsTextSearch().condition(Recipe.objects.all(), ["name", "description"], " soup ")

        assert q == Q(name__icontains="soup") | Q(description__icontains="soup")

    def test_nothing_to_match(self):
        assert ContainsTextSearch().condition(Recipe.objects.all(), ["name"], "") is None

    @pytest.mark.django_db
    def test_matches_rows(self):
        Recipe.objects.create(name="Tomato soup")
        Recipe.objects.create(name="Green curry", description="Not a SOUP at all")
        Recipe.objects.create(name="Pancakes")

        q = ContainsTextSearch().condition(Recipe.objects.all(), ["name", "description"], "soup")

        assert Recipe.objects.filter(q).count() == 2
