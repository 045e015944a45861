"""
Specification types for draftwright IR.

The Specification is the parsed, normalized and validated form of a draft:
entities (the draft's ``models``), actions, pages and route hints. It is
rebuilt from the draft text on every parse and never mutated afterwards.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..strings import camel_case, singularize, snake_case, table_name
from .fields import FieldDescriptor

RELATION_KINDS = (
    "belongsTo",
    "hasOne",
    "hasMany",
    "belongsToMany",
    "morphTo",
    "morphOne",
    "morphMany",
)

# Boolean switches consumed by generators; never treated as fields
FEATURE_FLAGS = (
    "media",
    "searchable",
    "sluggable",
    "tags",
    "activity_log",
    "roles",
    "permissions",
    "api_tokens",
    "oauth",
    "notifiable",
    "billable",
    "admin",
    "exportable",
)

RESERVED_KEYS = ("relationships", "seeder", "softDeletes", "timestamps", "traits", *FEATURE_FLAGS)


class SeederCategory(str, Enum):
    """Which seeding group a seeder belongs to."""

    ESSENTIAL = "essential"
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class RelationTarget(BaseModel):
    """
    One ``Entity[:alias]`` reference inside a relationship list.

    ``belongsTo: User`` gives RelationTarget(entity="User"); ``belongsTo: User:author``
    gives RelationTarget(entity="User", alias="author").
    """

    entity: str
    alias: str | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def parse(cls, raw: str) -> RelationTarget:
        entity, _, alias = raw.strip().partition(":")
        return cls(entity=entity.strip(), alias=alias.strip() or None)

    @property
    def method(self) -> str:
        """Relation accessor name (``author`` or ``user``)."""
        return self.alias or camel_case(self.entity)

    @property
    def foreign_key(self) -> str:
        """Foreign-key column implied by a belongsTo on this target."""
        return f"{snake_case(singularize(self.method))}_id"


def split_relation_targets(value: Any) -> list[str]:
    """Split a comma-separated string or list of references into raw strings."""
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, list):
        items = [item for item in value if isinstance(item, str)]
    else:
        return []
    return [item.strip() for item in items if item.strip()]


class SeederConfig(BaseModel):
    """Seeder block of an entity."""

    category: SeederCategory = SeederCategory.DEVELOPMENT
    count: int = 5
    json_data: bool = Field(default=False, alias="json")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class EntityDef(BaseModel):
    """
    A named data record definition.

    Attributes:
        name: Entity name (StudlyCase singular)
        fields: Field name -> descriptor, in draft order
        relationships: Relation kind -> targets
        seeder: Optional seeder configuration
        soft_deletes: Whether records are soft deleted
        timestamps: Whether created/updated timestamps are maintained
        traits: Free-form trait names for generators
        features: Boolean feature flags (``searchable``, ``media`` ...)
    """

    name: str
    fields: dict[str, FieldDescriptor] = Field(default_factory=dict)
    relationships: dict[str, tuple[RelationTarget, ...]] = Field(default_factory=dict)
    seeder: SeederConfig | None = None
    soft_deletes: bool = False
    timestamps: bool = True
    traits: tuple[str, ...] = ()
    features: dict[str, bool] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_draft(cls, name: str, raw: dict[str, Any]) -> EntityDef:
        """Build an EntityDef from a normalized, validated draft mapping."""
        fields: dict[str, FieldDescriptor] = {}
        for key, value in raw.items():
            if key in RESERVED_KEYS or not isinstance(value, str):
                continue
            fields[key] = FieldDescriptor.parse(value)

        relationships: dict[str, tuple[RelationTarget, ...]] = {}
        for kind, targets in (raw.get("relationships") or {}).items():
            relationships[kind] = tuple(
                RelationTarget.parse(item) for item in split_relation_targets(targets)
            )

        seeder_raw = raw.get("seeder")
        seeder = None
        if isinstance(seeder_raw, dict):
            seeder = SeederConfig.model_validate(
                {**seeder_raw, "category": str(seeder_raw.get("category", "development")).lower()}
            )

        traits_raw = raw.get("traits") or []
        return cls(
            name=name,
            fields=fields,
            relationships=relationships,
            seeder=seeder,
            soft_deletes=bool(raw.get("softDeletes", False)),
            timestamps=bool(raw.get("timestamps", True)),
            traits=tuple(traits_raw) if isinstance(traits_raw, list) else (),
            features={flag: bool(raw[flag]) for flag in FEATURE_FLAGS if flag in raw},
        )

    @property
    def table(self) -> str:
        return table_name(self.name)

    def relation_targets(self, kind: str) -> tuple[RelationTarget, ...]:
        return self.relationships.get(kind, ())

    def foreign_keys(self) -> dict[str, FieldDescriptor]:
        return {name: field for name, field in self.fields.items() if field.is_foreign_key}

    def has_feature(self, flag: str) -> bool:
        return self.features.get(flag, False)


class ActionParam(BaseModel):
    """A single action parameter; ``type`` is None when the draft only names it."""

    name: str
    type: str | None = None

    model_config = ConfigDict(frozen=True)


class ActionDef(BaseModel):
    """
    A named unit of application behaviour.

    ``returns`` is ``void``, an entity name, or the literal ``model`` meaning
    the related entity.
    """

    name: str
    model: str | None = None
    params: tuple[ActionParam, ...] = ()
    returns: str = "void"

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_draft(cls, name: str, raw: dict[str, Any] | None) -> ActionDef:
        raw = raw or {}
        params: list[ActionParam] = []
        for item in raw.get("params") or []:
            if isinstance(item, str):
                params.append(ActionParam(name=item))
            elif isinstance(item, dict):
                params.append(ActionParam(name=str(item["name"]), type=item.get("type")))
        return cls(
            name=name,
            model=raw.get("model"),
            params=tuple(params),
            returns=str(raw.get("return", "void")),
        )

    def resolved_return(self) -> str:
        """Return type with ``model`` resolved to the related entity."""
        if self.returns == "model":
            return self.model or "void"
        return self.returns


class Specification(BaseModel):
    """
    Root of the parsed draft.

    At least one of entities, actions, pages is non-empty; the validator
    enforces this before a Specification is ever constructed.
    """

    entities: dict[str, EntityDef] = Field(default_factory=dict)
    actions: dict[str, ActionDef] = Field(default_factory=dict)
    pages: dict[str, dict[str, Any]] = Field(default_factory=dict)
    routes: dict[str, Any] = Field(default_factory=dict)
    schema_version: str = "1.0"

    model_config = ConfigDict(frozen=True)

    def entity_names(self) -> list[str]:
        return list(self.entities)

    def get_entity(self, name: str) -> EntityDef | None:
        return self.entities.get(name)

    def summary(self) -> dict[str, Any]:
        """Names and counts of everything the draft declares."""
        return {
            "schema_version": self.schema_version,
            "entities": self.entity_names(),
            "actions": list(self.actions),
            "pages": list(self.pages),
            "entity_count": len(self.entities),
            "action_count": len(self.actions),
            "page_count": len(self.pages),
        }
