"""
Field descriptor type for draftwright IR.

A field descriptor is the compact column notation used in drafts:
``type[:argument] [modifier...]``, for example ``string:255 unique`` or
``id:User nullable``.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict

FOREIGN_KEY_TYPES = frozenset({"foreignId", "foreignUuid"})

_TYPE_TOKEN = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


class FieldDescriptor(BaseModel):
    """
    Parsed form of a field descriptor string.

    Examples:
        - ``string:255 unique``:
          FieldDescriptor(type="string", argument="255", modifiers=("unique",))
        - ``decimal:10,2``: FieldDescriptor(type="decimal", argument="10,2")
        - ``id:User``: FieldDescriptor(type="id", argument="User")
    """

    type: str
    argument: str | None = None
    modifiers: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    @classmethod
    def parse(cls, raw: str) -> FieldDescriptor:
        """Parse a descriptor string; the result may still be invalid (see ``is_valid``)."""
        parts = raw.split()
        if not parts:
            return cls(type="")
        head, modifiers = parts[0], tuple(parts[1:])
        type_, _, argument = head.partition(":")
        return cls(type=type_, argument=argument or None, modifiers=modifiers)

    @staticmethod
    def is_valid_type_token(raw: str) -> bool:
        """Return True if the leading ``type[:argument]`` token is well formed."""
        parts = raw.split()
        if not parts:
            return False
        type_, sep, argument = parts[0].partition(":")
        if not _TYPE_TOKEN.match(type_):
            return False
        return not (sep and not argument)

    @property
    def is_foreign_key(self) -> bool:
        if self.type in FOREIGN_KEY_TYPES:
            return True
        return self.type == "id" and self.argument is not None

    @property
    def references(self) -> str | None:
        """Entity referenced by an ``id:<Entity>`` descriptor."""
        if self.type == "id" and self.argument:
            return self.argument
        return None

    @property
    def is_nullable(self) -> bool:
        return "nullable" in self.modifiers

    @property
    def is_unique(self) -> bool:
        return "unique" in self.modifiers

    def __str__(self) -> str:
        head = f"{self.type}:{self.argument}" if self.argument else self.type
        return " ".join((head, *self.modifiers))
