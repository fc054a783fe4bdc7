"""
Resource schema descriptors.

A ResourceSchema is declared next to its model and handed to the
Resource service at construction. It names the scalar attributes with
their types and every relation with its nature, so the service never
has to guess which keys of a payload are links and which are columns.

Usage:
    RECIPE_SCHEMA = ResourceSchema(
        name="recipe",
        attributes=(Attribute("name", "string"), Attribute("calories", "integer")),
        relations=(Relation("tags", Nature.MANY_TO_MANY),),
    )

    data, relations = RECIPE_SCHEMA.split({"name": "Soup", "tags": [3, 4]})
    # data == {"name": "Soup"}, relations == {"tags": [3, 4]}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from django.db import models
from django.utils.translation import gettext_lazy as _

from cookbook.exceptions import CookbookError


class Nature(models.TextChoices):
    """How a relation links the resource to its target."""

    ONE_WAY = "oneWay", _("One way")
    ONE_TO_ONE = "oneToOne", _("One to one")
    MANY_TO_ONE = "manyToOne", _("Many to one")
    ONE_TO_MANY = "oneToMany", _("One to many")
    MANY_TO_MANY = "manyToMany", _("Many to many")
    ONE_TO_MANY_MORPH = "oneToManyMorph", _("One to many (polymorphic)")
    MANY_TO_MANY_MORPH = "manyToManyMorph", _("Many to many (polymorphic)")


SINGLE_NATURES = frozenset({
    Nature.ONE_WAY.value,
    Nature.ONE_TO_ONE.value,
    Nature.MANY_TO_ONE.value,
    Nature.ONE_TO_MANY_MORPH.value,
})

MULTIPLE_NATURES = frozenset({
    Nature.ONE_TO_MANY.value,
    Nature.MANY_TO_MANY.value,
    Nature.MANY_TO_MANY_MORPH.value,
})

TEXT_TYPES = ("string", "text")
NUMERIC_TYPES = ("integer", "decimal", "float")
BOOLEAN_TYPES = ("boolean",)


@dataclass(frozen=True)
class Attribute:
    """Scalar column of a resource."""

    name: str
    type: str
    read_only: bool = False


@dataclass(frozen=True)
class Relation:
    """Link from a resource to another entity."""

    alias: str
    nature: str
    auto_populate: bool = True

    def __post_init__(self):
        # Store the plain string so set membership works for members and values
        object.__setattr__(self, "nature", Nature(self.nature).value)

    @property
    def is_single(self) -> bool:
        return self.nature in SINGLE_NATURES

    @property
    def is_multiple(self) -> bool:
        return self.nature in MULTIPLE_NATURES

    @property
    def is_morph(self) -> bool:
        return self.nature in (
            Nature.ONE_TO_MANY_MORPH.value,
            Nature.MANY_TO_MANY_MORPH.value,
        )

    @property
    def empty_value(self) -> Any:
        """Value that detaches every link of this relation."""
        return None if self.is_single else []


@dataclass(frozen=True)
class ResourceSchema:
    """Static description of a resource: attributes and relations."""

    name: str
    attributes: tuple[Attribute, ...]
    relations: tuple[Relation, ...] = ()
    primary_key: str = "id"

    @property
    def aliases(self) -> list[str]:
        return [relation.alias for relation in self.relations]

    def attribute(self, name: str) -> Attribute | None:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None

    def relation(self, alias: str) -> Relation | None:
        for relation in self.relations:
            if relation.alias == alias:
                return relation
        return None

    def auto_populate(self) -> list[str]:
        """Aliases loaded by default on reads."""
        return [r.alias for r in self.relations if r.auto_populate]

    def fields_of_type(self, *types: str) -> list[str]:
        """Scalar attribute names of the given types (primary key excluded)."""
        aliases = set(self.aliases)
        return [
            a.name
            for a in self.attributes
            if a.type in types and a.name != self.primary_key and a.name not in aliases
        ]

    def is_filterable(self, path: str) -> bool:
        """
        Whether a (possibly dotted) field path can be used in filters and sorts.

        The head of the path must be the primary key, an attribute, or a
        relation alias; only relations may be traversed.
        """
        head, _, rest = path.partition(".")
        if head == self.primary_key or self.attribute(head) is not None:
            return not rest
        return self.relation(head) is not None

    def split(self, values: dict) -> tuple[dict, dict]:
        """
        Split a payload into (scalar data, relation values).

        The primary key and read-only attributes are dropped. Unknown keys
        raise CookbookError('UNKNOWN_FIELD').
        """
        data = {}
        relations = {}

        for key, value in (values or {}).items():
            if key == self.primary_key:
                continue
            if self.relation(key) is not None:
                relations[key] = value
                continue
            attribute = self.attribute(key)
            if attribute is None:
                raise CookbookError("UNKNOWN_FIELD", resource=self.name, field=key)
            if attribute.read_only:
                continue
            data[key] = value

        return data, relations
