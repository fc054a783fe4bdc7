"""
Tests for Cookbook API ViewSets (cookbook.api.views).
"""

import pytest

pytestmark = pytest.mark.urls("cookbook.tests.test_api_urls")

from django.contrib.auth import get_user_model

from rest_framework.test import APIClient

from cookbook.models import Author, Recipe, Review, Tag

User = get_user_model()

BASE = "/api/cookbook/recipes/"


# ═══════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def api_client(db):
    user = User.objects.create_user(username="api_user", password="test123")
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def author(db):
    return Author.objects.create(name="Ana Maria")


@pytest.fixture
def tags(db):
    return [Tag.objects.create(name="quick"), Tag.objects.create(name="vegan")]


@pytest.fixture
def soup(db, author, tags):
    recipe = Recipe.objects.create(name="Tomato soup", calories=42, author=author)
    recipe.tags.set([tags[0]])
    return recipe


@pytest.fixture
def stew(db):
    return Recipe.objects.create(name="Lentil stew", calories=250, is_vegan=True)


# ═══════════════════════════════════════════════════════════════════
# Read
# ═══════════════════════════════════════════════════════════════════


class TestRecipeList:
    """GET /api/cookbook/recipes/"""

    def test_list(self, api_client, soup, stew):
        response = api_client.get(BASE)

        assert response.status_code == 200
        assert [r["name"] for r in response.data] == ["Tomato soup", "Lentil stew"]

    def test_list_filters(self, api_client, soup, stew):
        response = api_client.get(BASE, {"is_vegan": "true"})

        assert response.status_code == 200
        assert [r["name"] for r in response.data] == ["Lentil stew"]

    def test_list_search(self, api_client, soup, stew):
        response = api_client.get(BASE, {"_q": "42"})

        assert response.status_code == 200
        assert [r["name"] for r in response.data] == ["Tomato soup"]

    def test_list_nested_relations(self, api_client, soup, author, tags):
        response = api_client.get(BASE, {"name": "Tomato soup"})

        [data] = response.data
        assert data["author"] == {"id": author.pk, "name": "Ana Maria"}
        assert data["tags"] == [{"id": tags[0].pk, "name": "quick"}]
        assert data["reviews"] == []
        assert data["source"] is None

    def test_list_invalid_sort(self, api_client, soup):
        response = api_client.get(BASE, {"_sort": "name:UP"})

        assert response.status_code == 400
        assert response.data["code"] == "INVALID_SORT"

    def test_list_unknown_filter(self, api_client, soup):
        response = api_client.get(BASE, {"colour": "red"})

        assert response.status_code == 400
        assert response.data == {
            "code": "UNKNOWN_FIELD",
            "message": "Field is neither an attribute nor a relation",
            "resource": "recipe",
            "field": "colour",
        }

    def test_list_filter_value_of_wrong_type(self, api_client, soup):
        response = api_client.get(BASE, {"calories": "abc"})

        assert response.status_code == 400
        assert response.data["code"] == "INVALID_VALUE"
        assert response.data["field"] == "calories"

    def test_count_filter_value_of_wrong_type(self, api_client, soup):
        response = api_client.get(f"{BASE}count/", {"price_gte": "cheap"})

        assert response.status_code == 400
        assert response.data["code"] == "INVALID_VALUE"

    def test_list_filter_on_tags_returns_each_recipe_once(self, api_client, soup, tags):
        soup.tags.set(tags)

        response = api_client.get(BASE, {"tags_in": ",".join(str(t.pk) for t in tags)})

        assert [r["name"] for r in response.data] == ["Tomato soup"]

    def test_requires_authentication(self, db):
        response = APIClient().get(BASE)

        assert response.status_code in (401, 403)


class TestRecipeCount:
    """GET /api/cookbook/recipes/count/"""

    def test_count(self, api_client, soup, stew):
        response = api_client.get(f"{BASE}count/", {"calories_lte": "100"})

        assert response.status_code == 200
        assert response.data == 1

    def test_count_search(self, api_client, soup, stew):
        response = api_client.get(f"{BASE}count/", {"_q": "stew"})

        assert response.data == 1


class TestRecipeRetrieve:
    """GET /api/cookbook/recipes/{id}/"""

    def test_retrieve(self, api_client, soup):
        response = api_client.get(f"{BASE}{soup.pk}/")

        assert response.status_code == 200
        assert response.data["id"] == soup.pk
        assert response.data["calories"] == 42

    def test_retrieve_missing(self, api_client, db):
        response = api_client.get(f"{BASE}404/")

        assert response.status_code == 404


# ═══════════════════════════════════════════════════════════════════
# Write
# ═══════════════════════════════════════════════════════════════════


class TestRecipeCreate:
    """POST /api/cookbook/recipes/"""

    def test_create(self, api_client, author, tags):
        response = api_client.post(
            BASE,
            {
                "name": "Pad thai",
                "calories": 600,
                "author": author.pk,
                "tags": [t.pk for t in tags],
                "source": {"ref": "cookbook.author", "id": author.pk},
            },
            format="json",
        )

        assert response.status_code == 201
        assert response.data["name"] == "Pad thai"
        assert [t["id"] for t in response.data["tags"]] == [t.pk for t in tags]
        assert response.data["source"] == {"ref": "cookbook.author", "id": author.pk}
        assert Recipe.objects.filter(name="Pad thai").exists()

    def test_create_invalid(self, api_client, db):
        response = api_client.post(BASE, {"name": "", "rating": 9}, format="json")

        assert response.status_code == 400
        assert "name" in response.data
        assert "rating" in response.data

    def test_create_invalid_relation(self, api_client, db):
        response = api_client.post(BASE, {"name": "Pad thai", "tags": [404]}, format="json")

        assert response.status_code == 400
        assert response.data["code"] == "INVALID_RELATION"
        assert not Recipe.objects.exists()


class TestRecipeUpdate:
    """PUT/PATCH /api/cookbook/recipes/{id}/"""

    def test_patch(self, api_client, soup, tags):
        response = api_client.patch(
            f"{BASE}{soup.pk}/", {"name": "Soup", "tags": [tags[1].pk]}, format="json"
        )

        assert response.status_code == 200
        assert response.data["name"] == "Soup"
        assert response.data["calories"] == 42
        assert [t["name"] for t in response.data["tags"]] == ["vegan"]

    def test_put_merges_like_patch(self, api_client, soup, author):
        response = api_client.put(f"{BASE}{soup.pk}/", {"calories": 80}, format="json")

        assert response.status_code == 200
        assert response.data["name"] == "Tomato soup"
        assert response.data["author"]["id"] == author.pk

    def test_update_missing(self, api_client, db):
        response = api_client.patch(f"{BASE}404/", {"name": "Soup"}, format="json")

        assert response.status_code == 404


class TestRecipeDestroy:
    """DELETE /api/cookbook/recipes/{id}/"""

    def test_destroy_returns_prior_representation(self, api_client, soup, tags):
        review = Review.objects.create(recipe=soup, author_name="Bia", rating=4)

        response = api_client.delete(f"{BASE}{soup.pk}/")

        assert response.status_code == 200
        assert response.data["name"] == "Tomato soup"
        assert [r["id"] for r in response.data["reviews"]] == [review.pk]
        assert api_client.get(f"{BASE}{soup.pk}/").status_code == 404

        review.refresh_from_db()
        assert review.recipe is None

    def test_destroy_missing(self, api_client, db):
        response = api_client.delete(f"{BASE}404/")

        assert response.status_code == 404
