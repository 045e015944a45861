"""
Migrations generator.

Generates one ``create_<table>`` migration per entity under ``app/migrations/``.

Migration file names start with a timestamp, so the path of a table's
migration cannot be derived from the draft alone. The generator looks the
table up in build state and rewrites the recorded file in place; only a
table with no recorded migration gets a freshly stamped path.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..core import ir
from ..core.fs import resolve_within
from ..core.strings import singularize, snake_case
from .base import Generator, GeneratorResult
from .columns import belongs_to_targets, sql_column

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y_%m_%d_%H%M%S"


class MigrationsGenerator(Generator):
    """Generate CREATE TABLE migrations, one per entity table."""

    name = "migration"
    description = "Database migrations"
    default_ownership = ir.FileOwnership.REGENERATE
    entity_scoped = True
    table_owning = True

    def supports(self, spec: ir.Specification) -> bool:
        return bool(spec.entities)

    def generate(self, spec: ir.Specification, draft_path: Path) -> GeneratorResult:
        result = GeneratorResult()
        stamp = self.context.clock().strftime(TIMESTAMP_FORMAT)
        for entity in spec.entities.values():
            path = self.migration_path(entity.table, stamp)
            self._write_file(result, path, self._build_migration(entity), table=entity.table)
        return result

    def migration_path(self, table: str, stamp: str) -> Path:
        """
        Recorded path for ``table`` if it still exists inside the output root,
        else a new one stamped with ``stamp``.
        """
        recorded = self.context.state.get_generated_path_for_table(table)
        if recorded:
            path = resolve_within(Path(recorded), self.context.output_root)
            if path is None:
                logger.warning("Ignoring recorded migration %s outside the output root", recorded)
            elif path.is_file():
                return path
            else:
                logger.debug("Recorded migration %s no longer exists", recorded)
        return self.output_path("app", "migrations", f"{stamp}_create_{table}.py")

    def _build_migration(self, entity: ir.EntityDef) -> str:
        targets = belongs_to_targets(entity)
        columns = [
            sql_column(name, field, targets.get(name)) for name, field in entity.fields.items()
        ]
        if "id" not in entity.fields:
            columns.insert(0, "id BIGINT PRIMARY KEY AUTOINCREMENT")
        if entity.timestamps:
            for name in ("created_at", "updated_at"):
                if name not in entity.fields:
                    columns.append(f"{name} TIMESTAMP NULL")
        if entity.soft_deletes and "deleted_at" not in entity.fields:
            columns.append("deleted_at TIMESTAMP NULL")

        statements = [self._create_table(entity.table, columns)]
        drops = [entity.table]
        for target in entity.relation_targets("belongsToMany"):
            pivot, pivot_columns = self._pivot(entity, target)
            statements.append(self._create_table(pivot, pivot_columns, if_not_exists=True))
            drops.insert(0, pivot)

        lines = [
            '"""',
            f"Create the {entity.table} table.",
            '"""',
            "",
            f'TABLE = "{entity.table}"',
            "",
            'UP = """',
            *"\n\n".join(statements).splitlines(),
            '"""',
            "",
            'DOWN = """',
            *(f"DROP TABLE IF EXISTS {table};" for table in drops),
            '"""',
            "",
            "",
            "def upgrade(connection):",
            "    connection.executescript(UP)",
            "",
            "",
            "def downgrade(connection):",
            "    connection.executescript(DOWN)",
            "",
        ]
        return "\n".join(lines)

    @staticmethod
    def _create_table(table: str, columns: list[str], if_not_exists: bool = False) -> str:
        head = "CREATE TABLE IF NOT EXISTS" if if_not_exists else "CREATE TABLE"
        body = ",\n".join(f"    {column}" for column in columns)
        return f"{head} {table} (\n{body}\n);"

    @staticmethod
    def _pivot(entity: ir.EntityDef, target: ir.RelationTarget) -> tuple[str, list[str]]:
        """Join table for a belongsToMany, named from both singular names in sorted order."""
        left = snake_case(singularize(entity.name))
        right = snake_case(singularize(target.entity))
        first, second = sorted((left, right))
        columns = [
            f"{first}_id BIGINT NOT NULL",
            f"{second}_id BIGINT NOT NULL",
            f"PRIMARY KEY ({first}_id, {second}_id)",
        ]
        return f"{first}_{second}", columns
