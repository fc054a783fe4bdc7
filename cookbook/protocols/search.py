"""
Text Search Protocol - Interface for full-text matching.

Cookbook defines this protocol. One adapter per storage engine implements
it (cookbook.adapters.mysql, cookbook.adapters.postgres, ...). The adapter
is selected by configuration:

    COOKBOOK = {
        "SEARCH_BACKEND": "cookbook.adapters.postgres.PostgresTextSearch",
    }

or, when SEARCH_BACKEND is unset, by the database vendor through
COOKBOOK["SEARCH_BACKENDS"].
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from django.db.models import Q, QuerySet


@runtime_checkable
class TextSearchBackend(Protocol):
    """
    Protocol for building a full-text match predicate.

    The returned Q is OR-combined by the caller with the numeric and
    boolean clauses of a search, so it must not filter the queryset itself.
    """

    def condition(self, queryset: QuerySet, fields: list[str], text: str) -> Q | None:
        """
        Return a predicate matching rows whose text fields contain `text`.

        Args:
            queryset: Queryset the predicate will be applied to (gives model and db alias)
            fields: Names of string/text attributes to search
            text: Sanitized search text (alphanumerics, '.', '-', whitespace)

        Returns:
            Q object, or None when there is nothing to match
        """
        ...
