"""Read-only description of the entity model.

The declarative classes in :mod:`huddle.models.chat` are the single source of
truth; this module turns their mapper metadata into plain dataclasses so that
callers can reason about fields, keys and relationships without touching
SQLAlchemy internals.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy import Boolean, DateTime, Integer, String, Text, inspect
from sqlalchemy.orm import RelationshipDirection, configure_mappers
from sqlalchemy.sql.schema import Table

from huddle.models.base import Base

HAS_MANY = "has-many"
BELONGS_TO = "belongs-to"
MANY_TO_MANY = "many-to-many"

_RELATIONSHIP_KINDS: dict[RelationshipDirection, str] = {
    RelationshipDirection.ONETOMANY: HAS_MANY,
    RelationshipDirection.MANYTOONE: BELONGS_TO,
    RelationshipDirection.MANYTOMANY: MANY_TO_MANY,
}

# Text subclasses String, so it has to be matched first.
_SEMANTIC_TYPES: tuple[tuple[type, str], ...] = (
    (Boolean, "boolean"),
    (DateTime, "timestamp"),
    (Integer, "integer"),
    (Text, "text"),
    (String, "string"),
)


@dataclass(frozen=True, slots=True)
class RelationshipDescription:
    """One navigable relationship of an entity."""

    name: str
    kind: str
    target: str
    join: tuple[str, str]
    association: str | None = None
    association_join: tuple[str, str] | None = None


@dataclass(frozen=True, slots=True)
class EntityDescription:
    """Fields, keys and relationships of one mapped entity."""

    name: str
    table: str
    fields: dict[str, str]
    primary_key: tuple[str, ...]
    foreign_keys: dict[str, str] = field(default_factory=dict)
    relationships: tuple[RelationshipDescription, ...] = ()
    is_association: bool = False

    def relationship(self, name: str) -> RelationshipDescription:
        for item in self.relationships:
            if item.name == name:
                return item
        raise KeyError(name)


def _semantic_type(column_type: object) -> str:
    for sql_type, label in _SEMANTIC_TYPES:
        if isinstance(column_type, sql_type):
            return label
    return type(column_type).__name__.lower()


def _association_tables(registry) -> set[str]:
    names: set[str] = set()
    for mapper in registry.mappers:
        for prop in mapper.relationships:
            if isinstance(prop.secondary, Table):
                names.add(prop.secondary.name)
    return names


def _describe_relationship(prop) -> RelationshipDescription:
    kind = _RELATIONSHIP_KINDS[prop.direction]
    target = prop.mapper.class_.__name__
    if kind == MANY_TO_MANY:
        local, association_column = prop.synchronize_pairs[0]
        target_column, target_association_column = prop.secondary_synchronize_pairs[0]
        return RelationshipDescription(
            name=prop.key,
            kind=kind,
            target=target,
            join=(local.name, association_column.name),
            association=prop.secondary.name,
            association_join=(target_association_column.name, target_column.name),
        )
    local, remote = prop.local_remote_pairs[0]
    return RelationshipDescription(name=prop.key, kind=kind, target=target, join=(local.name, remote.name))


def describe_entity(model: type[Base]) -> EntityDescription:
    """Describe a single mapped entity class."""

    configure_mappers()
    mapper = inspect(model)
    table = mapper.local_table

    fields: dict[str, str] = {}
    foreign_keys: dict[str, str] = {}
    for attr in mapper.column_attrs:
        column = attr.columns[0]
        fields[attr.key] = _semantic_type(column.type)
        for fk in column.foreign_keys:
            foreign_keys[attr.key] = fk.target_fullname

    return EntityDescription(
        name=model.__name__,
        table=table.name,
        fields=fields,
        primary_key=tuple(column.name for column in mapper.primary_key),
        foreign_keys=foreign_keys,
        relationships=tuple(_describe_relationship(prop) for prop in mapper.relationships),
        is_association=table.name in _association_tables(model.registry),
    )


def describe_entities(base: type[Base] = Base) -> list[EntityDescription]:
    """Describe every entity registered on ``base`` in table declaration order."""

    configure_mappers()
    positions = {name: index for index, name in enumerate(base.metadata.tables)}
    models = sorted(
        (mapper.class_ for mapper in base.registry.mappers),
        key=lambda model: positions[model.__table__.name],
    )
    return [describe_entity(model) for model in models]
