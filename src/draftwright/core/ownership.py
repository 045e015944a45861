"""
File ownership policy.

Maps glob patterns (relative to the output root) to a FileOwnership value.
The policy is an explicit value handed to generators at construction time;
generators consult it to decide whether an existing file may be overwritten.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path

from .errors import ManifestError
from .fs import relative_posix
from .ir import FileOwnership

DEFAULT_OWNERSHIP_PATTERNS: dict[str, FileOwnership] = {
    "app/migrations/*": FileOwnership.REGENERATE,
    "app/factories/*": FileOwnership.REGENERATE,
    "app/seeders/*": FileOwnership.REGENERATE,
    "app/routes.py": FileOwnership.REGENERATE,
    "frontend/types/*": FileOwnership.REGENERATE,
    "app/models/*": FileOwnership.SCAFFOLD_ONLY,
    "app/actions/*": FileOwnership.SCAFFOLD_ONLY,
    "app/controllers/*": FileOwnership.SCAFFOLD_ONLY,
    "app/requests/*": FileOwnership.SCAFFOLD_ONLY,
    "templates/*": FileOwnership.SCAFFOLD_ONLY,
    "tests/*": FileOwnership.SCAFFOLD_ONLY,
}


@dataclass(frozen=True)
class OwnershipRule:
    """One ``pattern -> ownership`` entry."""

    pattern: str
    ownership: FileOwnership

    def matches(self, relative_path: str) -> bool:
        return fnmatchcase(relative_path, self.pattern.lstrip("/"))


@dataclass(frozen=True)
class OwnershipPolicy:
    """
    Ordered ownership rules; the first matching pattern wins.

    Example:
        >>> policy = OwnershipPolicy.from_mapping({"app/models/*": "scaffold_only"})
        >>> policy.resolve("app/models/post.py", FileOwnership.REGENERATE)
        <FileOwnership.SCAFFOLD_ONLY: 'scaffold_only'>
    """

    rules: tuple[OwnershipRule, ...] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str | FileOwnership]) -> OwnershipPolicy:
        """
        Compile a ``pattern -> value`` mapping, preserving its order.

        Raises:
            ManifestError: If a value is not a known ownership
        """
        rules = []
        for pattern, value in mapping.items():
            try:
                ownership = FileOwnership(value)
            except ValueError as e:
                allowed = ", ".join(o.value for o in FileOwnership)
                raise ManifestError(
                    f"Invalid ownership '{value}' for pattern '{pattern}'. "
                    f"Expected one of: {allowed}"
                ) from e
            rules.append(OwnershipRule(pattern=pattern, ownership=ownership))
        return cls(rules=tuple(rules))

    @classmethod
    def default(cls) -> OwnershipPolicy:
        return cls.from_mapping(DEFAULT_OWNERSHIP_PATTERNS)

    def extended(self, overrides: Mapping[str, str | FileOwnership]) -> OwnershipPolicy:
        """New policy where ``overrides`` are consulted before the existing rules."""
        return OwnershipPolicy(rules=self.from_mapping(overrides).rules + self.rules)

    def resolve(self, relative_path: str, default: FileOwnership) -> FileOwnership:
        """Ownership for a root-relative POSIX path, or ``default`` when nothing matches."""
        for rule in self.rules:
            if rule.matches(relative_path):
                return rule.ownership
        return default

    def resolve_path(self, path: Path, root: Path, default: FileOwnership) -> FileOwnership:
        return self.resolve(relative_posix(path, root), default)

    def patterns(self) -> Iterable[tuple[str, FileOwnership]]:
        return ((rule.pattern, rule.ownership) for rule in self.rules)


__all__ = [
    "DEFAULT_OWNERSHIP_PATTERNS",
    "OwnershipPolicy",
    "OwnershipRule",
]
