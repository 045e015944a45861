"""
draftwright Intermediate Representation (IR) types.

The Specification model parsed from a draft, plus the bookkeeping types used
by generators, the orchestrator and the state store.

All types are re-exported from this package.
"""

# Build bookkeeping
from .build import (
    STATE_VERSION,
    BuildResult,
    BuildState,
    BuildStatus,
    DraftRecord,
    FileOwnership,
    GeneratedFileRecord,
    PlanStep,
    PlanStepKind,
    RevertResult,
)

# Fields
from .fields import FOREIGN_KEY_TYPES, FieldDescriptor

# Specification
from .specification import (
    FEATURE_FLAGS,
    RELATION_KINDS,
    RESERVED_KEYS,
    ActionDef,
    ActionParam,
    EntityDef,
    RelationTarget,
    SeederCategory,
    SeederConfig,
    Specification,
    split_relation_targets,
)

__all__ = [
    # Fields
    "FOREIGN_KEY_TYPES",
    "FieldDescriptor",
    # Specification
    "FEATURE_FLAGS",
    "RELATION_KINDS",
    "RESERVED_KEYS",
    "ActionDef",
    "ActionParam",
    "EntityDef",
    "RelationTarget",
    "SeederCategory",
    "SeederConfig",
    "Specification",
    "split_relation_targets",
    # Build bookkeeping
    "STATE_VERSION",
    "BuildResult",
    "BuildState",
    "BuildStatus",
    "DraftRecord",
    "FileOwnership",
    "GeneratedFileRecord",
    "PlanStep",
    "PlanStepKind",
    "RevertResult",
]
