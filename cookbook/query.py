"""
REST query parameters → ORM filters.

Query string conventions:

    name=Soup                 equality (default operator)
    calories_gte=100          comparison suffix
    tags.name_in=vegan,quick  dotted paths traverse relations
    _sort=name:ASC,rating:DESC
    _start=20                 offset
    _limit=10                 page size (-1 = no limit)
    _q=tomato                 free-text marker (handled by Resource.search)

Supported suffixes: eq, ne, lt, lte, gt, gte, in, nin, contains,
ncontains (case-insensitive), containss, ncontainss (case-sensitive), null.

Usage:
    filters = convert_rest_query_params(request.query_params)
    queryset = build_queryset(Recipe.objects.all(), filters, RECIPE_SCHEMA)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from django.core.exceptions import FieldDoesNotExist, ValidationError
from django.db.models import Max, Min, Q, QuerySet

from cookbook.conf import get_setting
from cookbook.exceptions import CookbookError
from cookbook.schema import ResourceSchema

# suffix → (Django lookup, negated)
OPERATORS = {
    "eq": ("exact", False),
    "ne": ("exact", True),
    "lt": ("lt", False),
    "lte": ("lte", False),
    "gt": ("gt", False),
    "gte": ("gte", False),
    "in": ("in", False),
    "nin": ("in", True),
    "contains": ("icontains", False),
    "ncontains": ("icontains", True),
    "containss": ("contains", False),
    "ncontainss": ("contains", True),
    "null": ("isnull", False),
}

SORT_ORDERS = ("ASC", "DESC")

# Lookups whose value is converted to the column type before querying
TYPED_LOOKUPS = ("exact", "lt", "lte", "gt", "gte", "in")

TRUE_VALUES = ("true", "t", "1")
FALSE_VALUES = ("false", "f", "0")


@dataclass(frozen=True)
class Condition:
    """One where clause: field, operator suffix, raw value."""

    field: str
    operator: str
    value: Any

    @property
    def path(self) -> str:
        return self.field.replace(".", "__")


@dataclass(frozen=True)
class Filters:
    """Storage-level criteria built from REST query parameters."""

    where: list[Condition] = field(default_factory=list)
    sort: list[tuple[str, str]] = field(default_factory=list)
    start: int = 0
    limit: int | None = None


# ══════════════════════════════════════════════════════════════
# CONVERSION
# ══════════════════════════════════════════════════════════════


def _as_dict(params) -> dict:
    """Flatten a QueryDict (repeated keys → list) or copy a plain mapping."""
    if params is None:
        return {}
    if hasattr(params, "lists"):
        return {key: values if len(values) > 1 else values[0] for key, values in params.lists()}
    return dict(params)


def _split_key(key: str) -> tuple[str, str]:
    field_name, sep, suffix = key.rpartition("_")
    if sep and field_name and suffix in OPERATORS:
        return field_name, suffix
    return key, "eq"


def convert_sort(value) -> list[tuple[str, str]]:
    """Parse "name:ASC,rating:DESC" into [("name", "ASC"), ("rating", "DESC")]."""
    parts = value if isinstance(value, (list, tuple)) else str(value).split(",")
    sort = []
    for part in parts:
        part = part.strip()
        if not part:
            continue
        key, _, order = part.partition(":")
        order = (order or "ASC").strip().upper()
        if not key.strip() or order not in SORT_ORDERS:
            raise CookbookError("INVALID_SORT", value=part)
        sort.append((key.strip(), order))
    return sort


def convert_start(value) -> int:
    try:
        start = int(value)
    except (TypeError, ValueError):
        raise CookbookError("INVALID_START", value=value)
    if start < 0:
        raise CookbookError("INVALID_START", value=value)
    return start


def convert_limit(value) -> int | None:
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise CookbookError("INVALID_LIMIT", value=value)
    if limit < -1:
        raise CookbookError("INVALID_LIMIT", value=value)
    return None if limit == -1 else limit


def convert_rest_query_params(params) -> Filters:
    """
    Convert REST query parameters into Filters.

    Args:
        params: dict or QueryDict of query parameters

    Returns:
        Filters with where conditions, sort, start and limit

    Raises:
        CookbookError: INVALID_SORT, INVALID_START, INVALID_LIMIT
    """
    params = _as_dict(params)

    where = []
    for key, value in params.items():
        if key.startswith("_"):
            continue
        field_name, operator = _split_key(key)
        where.append(Condition(field_name, operator, value))

    sort = convert_sort(params["_sort"]) if "_sort" in params else []
    start = convert_start(params["_start"]) if "_start" in params else 0

    if "_limit" in params:
        limit = convert_limit(params["_limit"])
    else:
        limit = get_setting("DEFAULT_LIMIT")

    return Filters(where=where, sort=sort, start=start, limit=limit)


# ══════════════════════════════════════════════════════════════
# QUERYSET BUILDING
# ══════════════════════════════════════════════════════════════


def _parse_bool(value, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise CookbookError("INVALID_VALUE", field=field_name, value=value)


def _target_field(schema: ResourceSchema, model, path: str):
    """
    Model field a (possibly dotted) path ends on.

    A path ending on a relation resolves to the related primary key.
    Generic foreign keys cannot be filtered or sorted on.
    """
    target = None
    try:
        for name in path.split("."):
            if target is not None:
                model = target.related_model
            target = model._meta.get_field(name)
            if target.is_relation and target.related_model is None:
                raise CookbookError("UNKNOWN_FIELD", resource=schema.name, field=path)
    except FieldDoesNotExist:
        raise CookbookError("UNKNOWN_FIELD", resource=schema.name, field=path)

    if target.is_relation:
        return target.related_model._meta.pk
    return target


def _to_python(target, value, field_name: str) -> Any:
    try:
        return target.to_python(value)
    except ValidationError:
        raise CookbookError("INVALID_VALUE", field=field_name, value=value)


def _cast(schema: ResourceSchema, condition: Condition, model=None) -> Any:
    value = condition.value
    lookup, _ = OPERATORS[condition.operator]
    target = None if model is None else _target_field(schema, model, condition.field)

    if lookup == "isnull":
        return _parse_bool(value, condition.field)

    if lookup == "in" and isinstance(value, str):
        value = [v for v in value.split(",") if v != ""]

    attribute = schema.attribute(condition.field)
    if attribute is not None and attribute.type == "boolean":
        if isinstance(value, (list, tuple)):
            return [_parse_bool(v, condition.field) for v in value]
        return _parse_bool(value, condition.field)

    if target is None or lookup not in TYPED_LOOKUPS:
        return value
    if isinstance(value, (list, tuple)):
        return [_to_python(target, v, condition.field) for v in value]
    return _to_python(target, value, condition.field)


def condition_to_q(schema: ResourceSchema, condition: Condition, model=None) -> tuple[Q, bool]:
    """
    Translate a Condition into (Q, negated).

    With `model`, the path is resolved against it and values are converted
    to the column type, so bad input fails here instead of in the database.
    """
    if condition.operator not in OPERATORS:
        raise CookbookError("INVALID_OPERATOR", operator=condition.operator)
    if not schema.is_filterable(condition.field):
        raise CookbookError("UNKNOWN_FIELD", resource=schema.name, field=condition.field)

    lookup, negated = OPERATORS[condition.operator]
    value = _cast(schema, condition, model)

    # eq with several values behaves like in
    if lookup == "exact" and isinstance(value, (list, tuple)):
        lookup = "in"

    return Q(**{f"{condition.path}__{lookup}": value}), negated


def _is_multiple(schema: ResourceSchema, path: str) -> bool:
    """Whether a path goes through a multi-valued relation (one row per link)."""
    relation = schema.relation(path.partition(".")[0])
    return relation is not None and relation.is_multiple


def build_queryset(
    queryset: QuerySet,
    filters: Filters,
    schema: ResourceSchema,
    *,
    where_only: bool = False,
) -> QuerySet:
    """
    Apply Filters to a queryset.

    Args:
        queryset: Base queryset (already populated, not sliced)
        filters: Output of convert_rest_query_params()
        schema: Resource schema used to validate field names
        where_only: Skip sort/start/limit (for counts)
    """
    for condition in filters.where:
        q, negated = condition_to_q(schema, condition, queryset.model)
        queryset = queryset.exclude(q) if negated else queryset.filter(q)

    if any(_is_multiple(schema, c.field) for c in filters.where):
        queryset = queryset.distinct()

    if where_only:
        return queryset

    return paginate(queryset, filters, schema)


def paginate(queryset: QuerySet, filters: Filters, schema: ResourceSchema) -> QuerySet:
    """
    Apply sort, start and limit.

    Sorting on a multi-valued relation orders by the smallest linked value
    (ASC) or the largest (DESC), keeping one row per entry.
    """
    if filters.sort:
        ordering = []
        for index, (key, order) in enumerate(filters.sort):
            if not schema.is_filterable(key):
                raise CookbookError("UNKNOWN_FIELD", resource=schema.name, field=key)
            _target_field(schema, queryset.model, key)
            path = key.replace(".", "__")
            if _is_multiple(schema, key):
                alias = f"sort_key_{index}"
                aggregate = Max if order == "DESC" else Min
                queryset = queryset.annotate(**{alias: aggregate(path)})
                path = alias
            ordering.append(f"-{path}" if order == "DESC" else path)
        queryset = queryset.order_by(*ordering)

    start = filters.start or 0
    if filters.limit is not None:
        return queryset[start:start + filters.limit]
    if start:
        return queryset[start:]
    return queryset
