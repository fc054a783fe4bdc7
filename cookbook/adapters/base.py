"""
Shared plumbing for raw-SQL text search adapters.
"""

from __future__ import annotations

from django.db import connections
from django.db.models import BooleanField, Q, QuerySet
from django.db.models.expressions import RawSQL


class RawTextSearch:
    """
    Base for adapters that express the match as a raw SQL predicate.

    Subclasses implement sql(columns, text) and get back a Q wrapping a
    boolean RawSQL expression, which the ORM can OR with other clauses.
    """

    def columns(self, queryset: QuerySet, fields: list[str]) -> list[str]:
        """Quoted, table-qualified column names for the given attributes."""
        connection = connections[queryset.db]
        quote = connection.ops.quote_name
        opts = queryset.model._meta
        table = quote(opts.db_table)
        return [f"{table}.{quote(opts.get_field(name).column)}" for name in fields]

    def sql(self, columns: list[str], text: str) -> tuple[str, list]:
        raise NotImplementedError

    def condition(self, queryset: QuerySet, fields: list[str], text: str) -> Q | None:
        if not fields or not text.strip():
            return None
        sql, params = self.sql(self.columns(queryset, fields), text)
        return Q(RawSQL(sql, params, output_field=BooleanField()))
