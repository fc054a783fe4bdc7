"""
Cookbook Service - Resource access layer.

A Resource wraps one model and its static ResourceSchema. It converts REST
query parameters into ORM filters, delegates persistence to the ORM and
keeps relations consistent on writes:

- add / edit split the payload into scalar fields and relation fields,
  save the scalars, then apply the relations (one transaction)
- remove empties every relation according to its nature, then deletes
  the row (one transaction)
- search ORs numeric, boolean and full-text clauses built from `_q`

Usage:
    from cookbook import recipes

    recipes.fetch_all({"is_vegan": "true", "_sort": "name:ASC"})
    recipes.fetch({"id": 1})
    recipes.count({"calories_lte": 400})
    recipes.add({"name": "Soup", "tags": [3, 4]})
    recipes.edit({"id": 1}, {"name": "Soup", "tags": [3, 4]})
    recipes.remove({"id": 1})
    recipes.search({"_q": "soup", "_limit": 10})

Errors from the ORM (DoesNotExist, ValidationError, DatabaseError) are
never wrapped; they reach the caller as raised.
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal, InvalidOperation
from functools import reduce
from operator import or_

from django.contrib.contenttypes.models import ContentType
from django.core.exceptions import ObjectDoesNotExist
from django.db import DEFAULT_DB_ALIAS, connections, models, transaction
from django.db.models import Q, QuerySet

from cookbook.conf import get_search_backend
from cookbook.exceptions import CookbookError
from cookbook.models import RECIPE_SCHEMA, Recipe
from cookbook.query import build_queryset, convert_rest_query_params, paginate
from cookbook.schema import BOOLEAN_TYPES, NUMERIC_TYPES, TEXT_TYPES, Nature, ResourceSchema
from cookbook.signals import entry_removed, entry_saved

logger = logging.getLogger(__name__)

# Everything except letters, digits, '.', '-' and whitespace
SEARCH_SANITIZER = re.compile(r"[^a-zA-Z0-9.\-\s]+")


def sanitize_search_text(text) -> str:
    """Strip every character a search predicate must not contain."""
    return SEARCH_SANITIZER.sub("", str(text or ""))


def parse_number(text: str) -> Decimal | None:
    """Return the finite number spelled by text, or None."""
    try:
        number = Decimal(text.strip())
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


class Resource:
    """
    CRUD + search over one model.

    The storage handle (model + database alias) and the schema are given at
    construction; every operation reads and writes through them.

    Args:
        model: Django model class
        schema: Static description of attributes and relations
        using: Database alias (default: "default")
        search_backend: TextSearchBackend instance; None = configured per vendor
    """

    def __init__(
        self,
        model: type[models.Model],
        schema: ResourceSchema,
        *,
        using: str | None = None,
        search_backend=None,
    ):
        self.model = model
        self.schema = schema
        self.using = using or DEFAULT_DB_ALIAS
        self.search_backend = search_backend

    def __repr__(self) -> str:
        return f"<Resource {self.schema.name} using={self.using!r}>"

    @property
    def objects(self):
        return self.model._default_manager.db_manager(self.using)

    # ══════════════════════════════════════════════════════════════
    # READS
    # ══════════════════════════════════════════════════════════════

    def fetch_all(self, params=None, populate=None) -> list:
        """
        Fetch entries matching REST query parameters.

        Args:
            params: Query parameters (filters, _sort, _start, _limit)
            populate: Relation aliases to load; None = every auto_populate relation

        Returns:
            List of entries (empty when nothing matches)
        """
        aliases = self.schema.auto_populate() if populate is None else list(populate)
        filters = convert_rest_query_params(params)
        queryset = self._populate(self.objects.all(), aliases)
        return list(build_queryset(queryset, filters, self.schema))

    def fetch(self, params):
        """
        Fetch one entry by primary key with its relations populated.

        Raises:
            model.DoesNotExist: no row has this primary key
        """
        queryset = self._populate(self.objects.all(), self.schema.auto_populate())
        return queryset.get(pk=self._primary_key_from(params))

    def count(self, params=None) -> int:
        """Count entries matching the where part of the query parameters."""
        filters = convert_rest_query_params(params)
        return build_queryset(self.objects.all(), filters, self.schema, where_only=True).count()

    # ══════════════════════════════════════════════════════════════
    # WRITES
    # ══════════════════════════════════════════════════════════════

    def add(self, values: dict):
        """
        Create an entry.

        Scalar fields are saved as a new row, then relations are linked
        using the new primary key. Both steps commit together.
        """
        data, relations = self.schema.split(values)

        with transaction.atomic(using=self.using):
            entry = self.model(**data)
            entry.save(using=self.using)
            self.update_relations(entry, relations)
            self._notify_saved(entry, created=True)

        logger.info(
            f"Created {self.schema.name} {entry.pk}",
            extra={
                "resource": self.schema.name,
                "pk": entry.pk,
                "fields": sorted(data),
                "relations": sorted(relations),
            },
        )

        return self.fetch({self.schema.primary_key: entry.pk})

    def edit(self, params, values: dict):
        """
        Update an entry.

        Only the supplied scalar fields are written; supplied relations
        replace the current links.

        Raises:
            model.DoesNotExist: no row has this primary key
        """
        data, relations = self.schema.split(values)

        with transaction.atomic(using=self.using):
            entry = self.objects.get(pk=self._primary_key_from(params))

            if data:
                for name, value in data.items():
                    setattr(entry, name, value)
                entry.save(using=self.using, update_fields=self._update_fields(data))

            self.update_relations(entry, relations)
            self._notify_saved(entry, created=False)

        logger.info(
            f"Updated {self.schema.name} {entry.pk}",
            extra={
                "resource": self.schema.name,
                "pk": entry.pk,
                "fields": sorted(data),
                "relations": sorted(relations),
            },
        )

        return self.fetch({self.schema.primary_key: entry.pk})

    def remove(self, params):
        """
        Delete an entry.

        Every relation is emptied first (None for single-valued natures,
        [] for multi-valued ones) so no row keeps pointing at the deleted
        entry. Clearing and deletion commit together.

        Returns:
            The entry as it was before removal (relations populated)

        Raises:
            model.DoesNotExist: no row has this primary key
        """
        pk = self._primary_key_from(params)

        with transaction.atomic(using=self.using):
            snapshot = self.fetch({self.schema.primary_key: pk})
            entry = self.objects.get(pk=pk)

            self.update_relations(
                entry,
                {relation.alias: relation.empty_value for relation in self.schema.relations},
            )
            entry.delete(using=self.using)

            transaction.on_commit(
                lambda: entry_removed.send(sender=self.model, instance=snapshot),
                using=self.using,
            )

        logger.info(
            f"Removed {self.schema.name} {pk}",
            extra={"resource": self.schema.name, "pk": pk},
        )

        return snapshot

    # ══════════════════════════════════════════════════════════════
    # SEARCH
    # ══════════════════════════════════════════════════════════════

    def search(self, params) -> list:
        """
        Free-text search driven by the `_q` parameter.

        The text is sanitized, then matched as:
        - a number against every numeric attribute
        - "true" / "false" against every boolean attribute
        - full text against every string/text attribute (adapter per vendor)

        Clauses are OR-combined. _sort, _start and _limit apply; other
        filters are ignored.
        """
        filters = convert_rest_query_params(params)
        queryset = self._populate(self.objects.all(), self.schema.auto_populate())
        queryset = self._search_queryset(queryset, params)
        return list(paginate(queryset, filters, self.schema))

    def count_search(self, params) -> int:
        """Count entries matched by search(), ignoring pagination."""
        return self._search_queryset(self.objects.all(), params).count()

    def get_search_backend(self):
        if self.search_backend is not None:
            return self.search_backend
        return get_search_backend(connections[self.using].vendor)

    def _search_queryset(self, queryset: QuerySet, params) -> QuerySet:
        text = sanitize_search_text((params or {}).get("_q"))
        clauses = []

        number = parse_number(text)
        if number is not None:
            clauses.extend(self._numeric_clauses(number))

        if text in ("true", "false"):
            clauses.extend(
                Q(**{name: text == "true"})
                for name in self.schema.fields_of_type(*BOOLEAN_TYPES)
            )

        backend = self.get_search_backend()
        text_clause = backend.condition(
            queryset, self.schema.fields_of_type(*TEXT_TYPES), text
        )
        if text_clause is not None:
            clauses.append(text_clause)

        logger.debug(
            f"Search {self.schema.name} for {text!r} with {type(backend).__name__}",
            extra={"resource": self.schema.name, "clauses": len(clauses)},
        )

        if not clauses:
            return queryset.none()
        return queryset.filter(reduce(or_, clauses))

    def _numeric_clauses(self, number: Decimal) -> list[Q]:
        """Equality clauses for every numeric attribute able to hold `number`."""
        ops = connections[self.using].ops
        clauses = []
        for name in self.schema.fields_of_type(*NUMERIC_TYPES):
            kind = self.schema.attribute(name).type
            field = self.model._meta.get_field(name)
            if kind == "integer":
                if number != number.to_integral_value():
                    continue
                value = int(number)
                low, high = ops.integer_field_range(field.get_internal_type())
                if (low is not None and value < low) or (high is not None and value > high):
                    continue
            elif kind == "float":
                value = float(number)
            else:
                if not self._fits_decimal(number, field):
                    continue
                value = number
            clauses.append(Q(**{name: value}))
        return clauses

    @staticmethod
    def _fits_decimal(number: Decimal, field) -> bool:
        max_digits = getattr(field, "max_digits", None)
        decimal_places = getattr(field, "decimal_places", None)
        if max_digits is None or decimal_places is None:
            return True
        if number and number.adjusted() >= max_digits - decimal_places:
            return False
        return -number.normalize().as_tuple().exponent <= decimal_places

    # ══════════════════════════════════════════════════════════════
    # RELATIONS
    # ══════════════════════════════════════════════════════════════

    def update_relations(self, entry, relations: dict) -> None:
        """
        Replace the links of `entry` for every relation in `relations`.

        Single-valued relations take a primary key, a {"id": ...} mapping,
        a model instance or None. Multi-valued relations take a list of
        those. Morph relations (source) take a model instance or
        {"ref": "app_label.model", "id": ...}.
        """
        update_fields = []

        for alias, value in relations.items():
            relation = self.schema.relation(alias)
            if relation is None:
                raise CookbookError("UNKNOWN_FIELD", resource=self.schema.name, field=alias)
            field = self.model._meta.get_field(alias)

            if relation.nature in (Nature.ONE_WAY, Nature.MANY_TO_ONE, Nature.ONE_TO_ONE):
                update_fields.append(self._link_foreign_key(entry, field, relation, value))
            elif relation.nature == Nature.ONE_TO_MANY_MORPH:
                update_fields.extend(self._link_generic_foreign_key(entry, field, relation, value))
            elif relation.nature == Nature.ONE_TO_MANY:
                self._link_reverse_foreign_key(entry, field, relation, value)
            elif relation.nature == Nature.MANY_TO_MANY:
                self._link_many_to_many(entry, field, relation, value)
            elif relation.nature == Nature.MANY_TO_MANY_MORPH:
                self._link_generic_relation(entry, field, relation, value)

        if update_fields:
            entry.save(using=self.using, update_fields=self._update_fields(update_fields))

    def _link_foreign_key(self, entry, field, relation, value) -> str:
        pk = None if value is None else self._primary_key_of(value, relation, field.related_model)

        if pk is not None and not (
            field.related_model._default_manager.db_manager(self.using).filter(pk=pk).exists()
        ):
            raise CookbookError("INVALID_RELATION", relation=relation.alias, missing=[pk])

        if relation.nature == Nature.ONE_TO_ONE and pk is not None:
            # The target can belong to one entry only
            self.objects.filter(**{field.name: pk}).exclude(pk=entry.pk).update(**{field.name: None})

        setattr(entry, field.attname, pk)
        return field.name

    def _link_generic_foreign_key(self, entry, field, relation, value) -> list[str]:
        target = None if value is None else self._resolve_morph(value, relation)
        setattr(entry, field.name, target)
        return [field.ct_field, field.fk_field]

    def _link_reverse_foreign_key(self, entry, field, relation, value) -> None:
        related = field.related_model
        remote = field.field.name
        pks = self._primary_keys_of(value, relation, related)
        manager = related._default_manager.db_manager(self.using)

        manager.filter(**{remote: entry}).exclude(pk__in=pks).update(**{remote: None})
        if pks:
            manager.filter(pk__in=pks).update(**{remote: entry})

    def _link_many_to_many(self, entry, field, relation, value) -> None:
        pks = self._primary_keys_of(value, relation, field.related_model)
        getattr(entry, field.name).set(pks)

    def _link_generic_relation(self, entry, field, relation, value) -> None:
        related = field.related_model
        ct_name = field.content_type_field_name
        fk_name = field.object_id_field_name
        pks = self._primary_keys_of(value, relation, related)

        content_type = ContentType.objects.db_manager(self.using).get_for_model(
            entry, for_concrete_model=field.for_concrete_model
        )
        manager = related._default_manager.db_manager(self.using)

        # Detach, never delete: images may be reused elsewhere
        manager.filter(**{ct_name: content_type, fk_name: entry.pk}).exclude(
            pk__in=pks
        ).update(**{ct_name: None, fk_name: None})
        if pks:
            manager.filter(pk__in=pks).update(**{ct_name: content_type, fk_name: entry.pk})

    # ══════════════════════════════════════════════════════════════
    # HELPERS
    # ══════════════════════════════════════════════════════════════

    def _populate(self, queryset: QuerySet, aliases) -> QuerySet:
        select, prefetch = [], []
        for alias in aliases:
            if self.schema.relation(alias) is None:
                raise CookbookError("UNKNOWN_FIELD", resource=self.schema.name, field=alias)
            field = self.model._meta.get_field(alias)
            if field.concrete and (field.many_to_one or field.one_to_one):
                select.append(alias)
            else:
                prefetch.append(alias)

        if select:
            queryset = queryset.select_related(*select)
        if prefetch:
            queryset = queryset.prefetch_related(*prefetch)
        return queryset

    def _primary_key_from(self, params):
        if hasattr(params, "get"):
            return params.get(self.schema.primary_key)
        return params

    def _update_fields(self, names) -> list[str]:
        """Field names to save, plus auto_now timestamps."""
        auto_now = [
            f.name
            for f in self.model._meta.concrete_fields
            if getattr(f, "auto_now", False) and f.name not in names
        ]
        return [*names, *auto_now]

    def _primary_key_of(self, value, relation, model):
        if isinstance(value, models.Model):
            return value.pk
        if isinstance(value, dict):
            if "id" not in value:
                raise CookbookError("INVALID_RELATION", relation=relation.alias, value=value)
            value = value["id"]
        if isinstance(value, (list, tuple, set)):
            raise CookbookError("INVALID_RELATION", relation=relation.alias, value=value)
        return model._meta.pk.to_python(value)

    def _primary_keys_of(self, value, relation, model) -> list:
        if value is None:
            return []
        if not isinstance(value, (list, tuple, set)):
            raise CookbookError("INVALID_RELATION", relation=relation.alias, value=value)

        pks = [self._primary_key_of(item, relation, model) for item in value]
        found = set(
            model._default_manager.db_manager(self.using)
            .filter(pk__in=pks)
            .values_list("pk", flat=True)
        )
        missing = [pk for pk in pks if pk not in found]
        if missing:
            raise CookbookError("INVALID_RELATION", relation=relation.alias, missing=missing)
        return pks

    def _resolve_morph(self, value, relation):
        if isinstance(value, models.Model):
            return value
        if not isinstance(value, dict) or "ref" not in value or "id" not in value:
            raise CookbookError("INVALID_RELATION", relation=relation.alias, value=value)

        app_label, _, model_name = str(value["ref"]).partition(".")
        try:
            content_type = ContentType.objects.db_manager(self.using).get_by_natural_key(
                app_label, model_name.lower()
            )
            model = content_type.model_class()
            if model is None:
                raise CookbookError("INVALID_RELATION", relation=relation.alias, ref=value["ref"])
            return model._default_manager.db_manager(self.using).get(pk=value["id"])
        except ObjectDoesNotExist:
            raise CookbookError(
                "INVALID_RELATION", relation=relation.alias, ref=value["ref"], id=value["id"]
            )

    def _notify_saved(self, entry, created: bool) -> None:
        transaction.on_commit(
            lambda: entry_saved.send(sender=self.model, instance=entry, created=created),
            using=self.using,
        )


recipes = Resource(Recipe, RECIPE_SCHEMA)
