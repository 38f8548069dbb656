"""Idempotent creation of the tables described by the entity model.

Every table is created in its own transaction with ``IF NOT EXISTS``
semantics, after checking that the tables it references are already present.
Failures are reported per table; with ``fail_fast`` the first failure is
raised instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from sqlalchemy import MetaData, Table, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.schema import CreateIndex, CreateTable

from huddle.errors import ProvisionError
from huddle.models import Base

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ProvisionReport:
    """Outcome of a provisioning run, keyed by table name."""

    created: list[str] = field(default_factory=list)
    existing: list[str] = field(default_factory=list)
    failed: dict[str, ProvisionError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def _dependencies(table: Table) -> set[str]:
    return {fk.column.table.name for fk in table.foreign_keys} - {table.name}


def creation_order(metadata: MetaData) -> list[Table]:
    """Order tables so that each one follows every table it references.

    Declaration order is kept wherever the foreign keys allow it.
    """

    pending = list(metadata.tables.values())
    ordered: list[Table] = []
    placed: set[str] = set()
    while pending:
        for table in pending:
            if _dependencies(table) <= placed:
                break
        else:
            names = ", ".join(table.name for table in pending)
            raise ProvisionError(pending[0].name, f"circular foreign key dependency among {names}")
        pending.remove(table)
        ordered.append(table)
        placed.add(table.name)
    return ordered


def _resolve_order(metadata: MetaData, order: Iterable[Table | str]) -> list[Table]:
    tables: list[Table] = []
    for item in order:
        if not isinstance(item, str):
            tables.append(item)
        elif item in metadata.tables:
            tables.append(metadata.tables[item])
        else:
            raise ProvisionError(item, "unknown table")
    return tables


def _create_table(engine: Engine, table: Table) -> bool:
    """Create ``table`` unless it exists; return whether it was created."""

    try:
        with engine.begin() as connection:
            inspector = inspect(connection)
            if inspector.has_table(table.name, schema=table.schema):
                return False
            missing = sorted(
                name
                for name in _dependencies(table)
                if not inspector.has_table(name, schema=table.schema)
            )
            if missing:
                raise ProvisionError(table.name, f"referenced table(s) missing: {', '.join(missing)}")
            connection.execute(CreateTable(table, if_not_exists=True))
            for index in sorted(table.indexes, key=lambda item: item.name or ""):
                connection.execute(CreateIndex(index, if_not_exists=True))
    except SQLAlchemyError as exc:
        raise ProvisionError(table.name, str(exc)) from exc
    return True


def provision(
    engine: Engine,
    metadata: MetaData | None = None,
    *,
    order: Iterable[Table | str] | None = None,
    fail_fast: bool = False,
) -> ProvisionReport:
    """Ensure every table of ``metadata`` exists in the store behind ``engine``."""

    metadata = metadata if metadata is not None else Base.metadata
    tables = creation_order(metadata) if order is None else _resolve_order(metadata, order)

    report = ProvisionReport()
    for table in tables:
        try:
            created = _create_table(engine, table)
        except ProvisionError as exc:
            logger.error("%s", exc)
            report.failed[table.name] = exc
            if fail_fast:
                raise
            continue
        if created:
            logger.info("Created table %s", table.name)
            report.created.append(table.name)
        else:
            logger.info("Table %s already exists", table.name)
            report.existing.append(table.name)

    if report.failed:
        logger.error(
            "Schema provisioning finished with %d failed table(s): %s",
            len(report.failed),
            ", ".join(report.failed),
        )
    return report
