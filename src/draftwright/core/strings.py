"""
String utility functions for draftwright.

Naming conventions shared by the normalizer, validator and generators:
entity names are StudlyCase singulars, table names are snake_case plurals.
"""

from __future__ import annotations

import re

# Irregular plurals that don't follow standard rules
_IRREGULAR_PLURALS = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
    "foot": "feet",
    "tooth": "teeth",
    "goose": "geese",
    "mouse": "mice",
    "ox": "oxen",
    "datum": "data",
    "medium": "media",
    "criterion": "criteria",
    "index": "indices",
    "matrix": "matrices",
    "status": "statuses",
    "address": "addresses",
    "alias": "aliases",
    "atlas": "atlases",
    "canvas": "canvases",
    "gas": "gases",
    "lens": "lenses",
    "bus": "buses",
}

_IRREGULAR_SINGULARS = {plural: singular for singular, plural in _IRREGULAR_PLURALS.items()}

# Same form in singular and plural
_UNCOUNTABLE = frozenset(
    {
        "news",
        "series",
        "species",
        "equipment",
        "information",
        "metadata",
        "feedback",
        "sheep",
        "fish",
    }
)

# Words that end in "s" but are already singular
_SINGULAR_S_ENDINGS = ("ss", "us", "is", "ws")


def _match_case(source: str, replacement: str) -> str:
    if source[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


def _split_camel(word: str) -> tuple[str, str]:
    """Split ``OrderItem`` into ``("Order", "Item")``; single words return ``("", word)``."""
    match = re.match(r"^(.+?)([A-Z][a-z0-9]*)$", word)
    if match and match.group(1):
        return match.group(1), match.group(2)
    return "", word


def pluralize(word: str) -> str:
    """
    Convert a singular English word to its plural form.

    Only the last CamelCase segment is pluralized.

    Examples:
        >>> pluralize("Post")
        'Posts'
        >>> pluralize("Category")
        'Categories'
        >>> pluralize("OrderItem")
        'OrderItems'
        >>> pluralize("person")
        'people'
    """
    if not word:
        return word

    prefix, last = _split_camel(word)
    if prefix:
        return prefix + pluralize(last)

    lower_word = word.lower()
    if lower_word in _UNCOUNTABLE:
        return word
    if lower_word in _IRREGULAR_PLURALS:
        return _match_case(word, _IRREGULAR_PLURALS[lower_word])

    if lower_word.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    if lower_word.endswith("y"):
        if len(word) > 1 and lower_word[-2] in "aeiou":
            return word + "s"
        return word[:-1] + "ies"
    if lower_word.endswith("fe"):
        return word[:-2] + "ves"
    if lower_word.endswith(("elf", "alf", "olf", "eaf", "oaf", "arf")):
        return word[:-1] + "ves"
    if lower_word.endswith(("hero", "potato", "tomato", "echo", "veto")):
        return word + "es"
    return word + "s"


def singularize(word: str) -> str:
    """
    Convert a plural English word to its singular form.

    Examples:
        >>> singularize("Posts")
        'Post'
        >>> singularize("Categories")
        'Category'
        >>> singularize("Status")
        'Status'
    """
    if not word:
        return word

    prefix, last = _split_camel(word)
    if prefix:
        return prefix + singularize(last)

    lower_word = word.lower()
    if lower_word in _UNCOUNTABLE:
        return word
    if lower_word in _IRREGULAR_SINGULARS:
        return _match_case(word, _IRREGULAR_SINGULARS[lower_word])
    if lower_word in _IRREGULAR_PLURALS:
        return word

    if lower_word.endswith("ies") and len(word) > 3:
        return word[:-3] + "y"
    if lower_word.endswith("ves") and len(word) > 3:
        return word[:-3] + "f"
    if lower_word.endswith(("sses", "xes", "zes", "ches", "shes")):
        return word[:-2]
    if lower_word.endswith(_SINGULAR_S_ENDINGS):
        return word
    if lower_word.endswith("s") and len(word) > 1:
        return word[:-1]
    return word


def is_singular(word: str) -> bool:
    """Return True if ``word`` is already in singular form."""
    return singularize(word) == word


def snake_case(value: str) -> str:
    """
    Convert StudlyCase, camelCase or kebab-case to snake_case.

    Examples:
        >>> snake_case("OrderItem")
        'order_item'
        >>> snake_case("authorProfile")
        'author_profile'
    """
    value = re.sub(r"[\s\-]+", "_", value.strip())
    value = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", value)
    value = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", value)
    return value.lower()


def studly_case(value: str) -> str:
    """Convert snake_case or kebab-case to StudlyCase (``order_item`` -> ``OrderItem``)."""
    parts = re.split(r"[_\-\s]+", value)
    return "".join(part[:1].upper() + part[1:] for part in parts if part)


def camel_case(value: str) -> str:
    """Convert to camelCase (``OrderItem`` -> ``orderItem``)."""
    studly = studly_case(value)
    return studly[:1].lower() + studly[1:]


def table_name(entity_name: str) -> str:
    """
    Convert an entity name to its table name.

    Examples:
        >>> table_name("Post")
        'posts'
        >>> table_name("OrderItem")
        'order_items'
    """
    return snake_case(pluralize(entity_name))
