"""
Contains Text Search -- portable substring matching.

Used for SQLite and for any database vendor without a native adapter.
No index support: every searched column is scanned with LIKE.

Configuration:
    COOKBOOK = {
        "SEARCH_BACKEND": "cookbook.adapters.contains.ContainsTextSearch",
    }
"""

from __future__ import annotations

from functools import reduce
from operator import or_

from django.db.models import Q, QuerySet


class ContainsTextSearch:
    """Case-insensitive substring match on any of the text columns."""

    def condition(self, queryset: QuerySet, fields: list[str], text: str) -> Q | None:
        text = text.strip()
        if not fields or not text:
            return None
        return reduce(or_, (Q(**{f"{name}__icontains": text}) for name in fields))
