"""
Pages generator.

Generates ``templates/<page>/<view>.html`` for every draft page. A page
gets the four resource views unless its definition lists ``views``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ..core import ir
from ..core.strings import snake_case
from .base import Generator, GeneratorResult

RESOURCE_VIEWS = ("index", "create", "show", "edit")


class PagesGenerator(Generator):
    """Generate HTML page templates."""

    name = "page"
    description = "Page templates"
    default_ownership = ir.FileOwnership.SCAFFOLD_ONLY

    def supports(self, spec: ir.Specification) -> bool:
        return bool(spec.pages)

    def generate(self, spec: ir.Specification, draft_path: Path) -> GeneratorResult:
        result = GeneratorResult()
        for page_name, definition in spec.pages.items():
            slug = snake_case(page_name)
            for view in self.views_for(definition):
                path = self.output_path("templates", slug, f"{view}.html")
                self._write_file(result, path, self._build_page(page_name, view, definition))
        return result

    @staticmethod
    def views_for(definition: dict[str, Any]) -> tuple[str, ...]:
        views = definition.get("views")
        if isinstance(views, list) and views:
            return tuple(str(view) for view in views)
        return RESOURCE_VIEWS

    def _build_page(self, page_name: str, view: str, definition: dict[str, Any]) -> str:
        title = definition.get("title") or f"{page_name} {view.capitalize()}"
        lines = [
            '{% extends "base.html" %}',
            "",
            f"{{% block title %}}{title}{{% endblock %}}",
            "",
            "{% block content %}",
            f'<section class="page page-{snake_case(page_name)} view-{view}">',
            f"  <h1>{title}</h1>",
        ]
        model = definition.get("model")
        if isinstance(model, str) and view == "index":
            lines.extend(
                [
                    "  <ul>",
                    "    {% for item in items %}",
                    "    <li>{{ item }}</li>",
                    "    {% endfor %}",
                    "  </ul>",
                ]
            )
        lines.extend(["</section>", "{% endblock %}", ""])
        return "\n".join(lines)
