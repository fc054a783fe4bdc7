"""
PostgreSQL Text Search -- to_tsvector(...) @@ to_tsquery(...).

Configuration:
    COOKBOOK = {
        "SEARCH_BACKEND": "cookbook.adapters.postgres.PostgresTextSearch",
    }
"""

from __future__ import annotations

from cookbook.adapters.base import RawTextSearch


class PostgresTextSearch(RawTextSearch):
    """
    Vector matching over the concatenated text columns.

    Every whitespace-separated token must match (tokens are AND-ed in
    the tsquery). NULL columns are coalesced so one empty column does
    not null the whole vector.
    """

    def __init__(self, config: str | None = None):
        self.config = config

    def _vector(self, column: str) -> str:
        if self.config:
            return f"to_tsvector('{self.config}', coalesce({column}, ''))"
        return f"to_tsvector(coalesce({column}, ''))"

    def sql(self, columns: list[str], text: str) -> tuple[str, list]:
        vectors = " || ".join(self._vector(column) for column in columns)
        query = " & ".join(text.split())
        if self.config:
            return f"({vectors}) @@ to_tsquery('{self.config}', %s)", [query]
        return f"({vectors}) @@ to_tsquery(%s)", [query]
