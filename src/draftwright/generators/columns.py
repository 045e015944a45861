"""
Column type mappings shared by the generators.

Maps a draft descriptor type (``string``, ``decimal``, ``foreignId`` ...)
to the Python model field, SQL column type and TypeScript type each
generator emits.
"""

from __future__ import annotations

from ..core import ir
from ..core.strings import pluralize, snake_case, studly_case, table_name

# descriptor type (lowercase) -> python field class
PYTHON_FIELD_MAP: dict[str, str] = {
    "bigincrements": "BigAutoField",
    "increments": "AutoField",
    "id": "BigAutoField",
    "string": "CharField",
    "char": "CharField",
    "text": "TextField",
    "mediumtext": "TextField",
    "longtext": "TextField",
    "integer": "IntegerField",
    "tinyinteger": "SmallIntegerField",
    "smallinteger": "SmallIntegerField",
    "biginteger": "BigIntegerField",
    "unsignedinteger": "PositiveIntegerField",
    "unsignedbiginteger": "PositiveBigIntegerField",
    "decimal": "DecimalField",
    "float": "FloatField",
    "double": "FloatField",
    "boolean": "BooleanField",
    "date": "DateField",
    "datetime": "DateTimeField",
    "timestamp": "DateTimeField",
    "time": "TimeField",
    "json": "JSONField",
    "uuid": "UUIDField",
    "enum": "CharField",
}

SQL_TYPE_MAP: dict[str, str] = {
    "bigincrements": "BIGINT PRIMARY KEY AUTOINCREMENT",
    "increments": "INTEGER PRIMARY KEY AUTOINCREMENT",
    "id": "BIGINT PRIMARY KEY AUTOINCREMENT",
    "string": "VARCHAR",
    "char": "CHAR",
    "text": "TEXT",
    "mediumtext": "TEXT",
    "longtext": "TEXT",
    "integer": "INTEGER",
    "tinyinteger": "SMALLINT",
    "smallinteger": "SMALLINT",
    "biginteger": "BIGINT",
    "unsignedinteger": "INTEGER",
    "unsignedbiginteger": "BIGINT",
    "decimal": "DECIMAL",
    "float": "REAL",
    "double": "DOUBLE PRECISION",
    "boolean": "BOOLEAN",
    "date": "DATE",
    "datetime": "TIMESTAMP",
    "timestamp": "TIMESTAMP",
    "time": "TIME",
    "json": "JSON",
    "uuid": "UUID",
    "enum": "VARCHAR(255)",
    "foreignid": "BIGINT",
    "foreignuuid": "UUID",
}

TS_TYPE_MAP: dict[str, str] = {
    "bigincrements": "number",
    "increments": "number",
    "integer": "number",
    "tinyinteger": "number",
    "smallinteger": "number",
    "biginteger": "number",
    "unsignedinteger": "number",
    "unsignedbiginteger": "number",
    "decimal": "number",
    "float": "number",
    "double": "number",
    "foreignid": "number",
    "boolean": "boolean",
    "json": "Record<string, unknown>",
}


PRIMARY_KEY_TYPES = frozenset({"id", "increments", "bigincrements"})

# Filled in by the database, never by factories or request input
MANAGED_COLUMNS = frozenset({"id", "created_at", "updated_at", "deleted_at", "remember_token"})


def _key(field: ir.FieldDescriptor) -> str:
    return field.type.lower()


def is_primary_key(field: ir.FieldDescriptor) -> bool:
    return _key(field) in PRIMARY_KEY_TYPES and not field.references


def input_fields(entity: ir.EntityDef) -> dict[str, ir.FieldDescriptor]:
    """Fields a user or factory supplies: no primary keys and no managed columns."""
    return {
        name: field
        for name, field in entity.fields.items()
        if name not in MANAGED_COLUMNS and not is_primary_key(field)
    }


def belongs_to_targets(entity: ir.EntityDef) -> dict[str, str]:
    """Foreign-key column -> referenced entity for the entity's belongsTo relations."""
    return {target.foreign_key: target.entity for target in entity.relation_targets("belongsTo")}


def _target_entity(name: str, field: ir.FieldDescriptor, target: str | None) -> str:
    if field.references:
        return field.references
    if target:
        return target
    return studly_case(name[:-3] if name.endswith("_id") else name)


def referenced_table(name: str, field: ir.FieldDescriptor, target: str | None = None) -> str:
    """Table a foreign key points at (``author_id`` -> ``authors``, ``id:User`` -> ``users``)."""
    return table_name(_target_entity(name, field, target))


def python_field(name: str, field: ir.FieldDescriptor, target: str | None = None) -> str:
    """Model field declaration, e.g. ``models.CharField(max_length=255, unique=True)``."""
    options: list[str] = []
    if field.is_foreign_key:
        on_delete = "SET_NULL" if field.is_nullable else "CASCADE"
        options.extend(
            [f'"{_target_entity(name, field, target)}"', f"on_delete=models.{on_delete}"]
        )
        field_class = "ForeignKey"
    else:
        field_class = PYTHON_FIELD_MAP.get(_key(field), "CharField")
        if field_class == "CharField":
            length = field.argument if field.argument and field.argument.isdigit() else "255"
            options.append(f"max_length={length}")
        elif field_class == "DecimalField":
            digits, _, places = (field.argument or "10,2").partition(",")
            options.extend([f"max_digits={digits or 10}", f"decimal_places={places or 2}"])
        elif field_class in ("BigAutoField", "AutoField"):
            options.append("primary_key=True")

    if field.is_nullable:
        options.extend(["null=True", "blank=True"])
    if field.is_unique:
        options.append("unique=True")
    return f"models.{field_class}({', '.join(options)})"


def sql_column(name: str, field: ir.FieldDescriptor, target: str | None = None) -> str:
    """Column definition for CREATE TABLE."""
    sql_type = SQL_TYPE_MAP.get(_key(field), "VARCHAR")
    if field.references:
        sql_type = "BIGINT"
    if sql_type in ("VARCHAR", "CHAR"):
        length = field.argument if field.argument and field.argument.isdigit() else 255
        sql_type = f"{sql_type}({length})"
    elif sql_type == "DECIMAL":
        sql_type = f"DECIMAL({field.argument or '10,2'})"

    parts = [name, sql_type]
    if "PRIMARY KEY" not in sql_type:
        parts.append("NULL" if field.is_nullable else "NOT NULL")
    if field.is_unique:
        parts.append("UNIQUE")
    if field.is_foreign_key:
        parts.append(f"REFERENCES {referenced_table(name, field, target)}(id)")
    return " ".join(parts)


def ts_type(field: ir.FieldDescriptor) -> str:
    if field.references:
        return "number"
    base = TS_TYPE_MAP.get(_key(field), "string")
    return f"{base} | null" if field.is_nullable else base


MANY_RELATION_KINDS = ("hasMany", "belongsToMany", "morphMany")


def relation_name(kind: str, target: ir.RelationTarget) -> str:
    """Accessor for a relation; to-many relations get a plural name unless aliased."""
    if kind in MANY_RELATION_KINDS and target.alias is None:
        return pluralize(target.method)
    return target.method


def module_name(entity_name: str) -> str:
    """File/module stem for an entity (``BlogPost`` -> ``blog_post``)."""
    return snake_case(entity_name)


__all__ = [
    "PYTHON_FIELD_MAP",
    "SQL_TYPE_MAP",
    "TS_TYPE_MAP",
    "MANAGED_COLUMNS",
    "MANY_RELATION_KINDS",
    "PRIMARY_KEY_TYPES",
    "belongs_to_targets",
    "input_fields",
    "is_primary_key",
    "module_name",
    "relation_name",
    "python_field",
    "referenced_table",
    "sql_column",
    "ts_type",
]
