"""
Cookbook API ViewSets.
"""

import logging

from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from cookbook.exceptions import CookbookError
from cookbook.service import recipes

from .serializers import RecipeSerializer

logger = logging.getLogger(__name__)


def _payload(data) -> dict:
    """Request body as a plain dict (QueryDict keeps the last value per key)."""
    if hasattr(data, "dict"):
        return data.dict()
    return dict(data)


class RecipeViewSet(viewsets.ViewSet):
    """
    ViewSet for Recipe.

    list: Filtered list, or free-text search when `_q` is given
    count: Number of matching recipes (`_q` aware)
    retrieve: Get a recipe by id
    create: Create a recipe (scalars + relations)
    update: Merge scalars and replace supplied relations (PUT and PATCH)
    destroy: Clear relations, delete, return the removed recipe
    """

    permission_classes = [IsAuthenticated]
    serializer_class = RecipeSerializer
    lookup_value_regex = r"\d+"
    resource = recipes

    def handle_exception(self, exc):
        if isinstance(exc, ObjectDoesNotExist):
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        if isinstance(exc, DjangoValidationError):
            detail = exc.message_dict if hasattr(exc, "error_dict") else {"non_field_errors": exc.messages}
            return Response(detail, status=status.HTTP_400_BAD_REQUEST)
        if isinstance(exc, CookbookError):
            logger.warning(f"Rejected recipe request: {exc}", extra={"code": exc.code, **exc.details})
            return Response(exc.as_dict(), status=status.HTTP_400_BAD_REQUEST)
        return super().handle_exception(exc)

    def _render(self, data, **kwargs):
        return RecipeSerializer(data, context={"request": self.request}, **kwargs).data

    def list(self, request):
        """
        GET /api/cookbook/recipes/?is_vegan=true&_sort=name:ASC
        GET /api/cookbook/recipes/?_q=tomato&_limit=10
        """
        params = request.query_params
        if "_q" in params:
            entries = self.resource.search(params)
        else:
            entries = self.resource.fetch_all(params)
        return Response(self._render(entries, many=True))

    @action(detail=False, methods=["get"])
    def count(self, request):
        """
        GET /api/cookbook/recipes/count/?calories_lte=400
        """
        params = request.query_params
        if "_q" in params:
            return Response(self.resource.count_search(params))
        return Response(self.resource.count(params))

    def retrieve(self, request, pk=None):
        return Response(self._render(self.resource.fetch({"id": pk})))

    def create(self, request):
        """
        POST /api/cookbook/recipes/
        {
            "name": "Tomato soup",
            "calories": 320,
            "tags": [1, 2],
            "source": {"ref": "cookbook.author", "id": 1}
        }
        """
        entry = self.resource.add(_payload(request.data))
        return Response(self._render(entry), status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        entry = self.resource.edit({"id": pk}, _payload(request.data))
        return Response(self._render(entry))

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        entry = self.resource.remove({"id": pk})
        return Response(self._render(entry))
