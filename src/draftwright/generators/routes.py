"""
Routes generator.

Generates ``app/routes.py``: the seven resource routes for every entity plus
any custom routes declared under the draft's ``routes`` key.
"""

from __future__ import annotations

from pathlib import Path
from pprint import pformat

from ..core import ir
from ..core.strings import camel_case, pluralize, snake_case, singularize
from .base import Generator, GeneratorResult

# (method, path suffix, action)
RESOURCE_ROUTES = (
    ("GET", "", "index"),
    ("GET", "/create", "create"),
    ("POST", "", "store"),
    ("GET", "/{id}", "show"),
    ("GET", "/{id}/edit", "edit"),
    ("PUT", "/{id}", "update"),
    ("DELETE", "/{id}", "destroy"),
)


def resource_slug(entity_name: str) -> str:
    """URL segment for an entity (``BlogPost`` -> ``blog-posts``)."""
    return snake_case(pluralize(entity_name)).replace("_", "-")


class RoutesGenerator(Generator):
    """Generate the application route table."""

    name = "route"
    description = "Resource routes"
    default_ownership = ir.FileOwnership.REGENERATE

    def supports(self, spec: ir.Specification) -> bool:
        return bool(spec.entities) or bool(spec.routes)

    def generate(self, spec: ir.Specification, draft_path: Path) -> GeneratorResult:
        result = GeneratorResult()
        self._write_file(result, self.output_path("app", "routes.py"), self._build_routes(spec))
        return result

    def _build_routes(self, spec: ir.Specification) -> str:
        lines = [
            '"""',
            "Application routes generated from the draft.",
            "",
            "Each entry is (method, path, route name).",
            '"""',
            "",
            "ROUTES = [",
        ]
        for entity_name in spec.entity_names():
            slug = resource_slug(entity_name)
            route_name = camel_case(singularize(entity_name))
            for method, suffix, action in RESOURCE_ROUTES:
                lines.append(f'    ("{method}", "/{slug}{suffix}", "{route_name}.{action}"),')
        lines.append("]")

        if spec.routes:
            lines.extend(["", f"CUSTOM_ROUTES = {pformat(spec.routes, sort_dicts=True)}"])
        lines.append("")
        return "\n".join(lines)
