"""
Controllers generator.

Generates ``app/controllers/<entity>_controller.py`` for every entity. The
read views (index, create, show) are always present. The write views
(store, edit/update, destroy) appear only when the draft declares the
matching ``Create<Entity>``, ``Update<Entity>`` or ``Delete<Entity>`` action,
and validate their input with the generated request classes.
"""

from __future__ import annotations

from pathlib import Path

from ..core import ir
from ..core.strings import camel_case
from .base import Generator, GeneratorResult
from .columns import module_name
from .requests import crud_operations, request_class, request_module


class ControllersGenerator(Generator):
    """Generate resource controllers."""

    name = "controller"
    description = "Resource controllers"
    default_ownership = ir.FileOwnership.SCAFFOLD_ONLY
    entity_scoped = True

    def supports(self, spec: ir.Specification) -> bool:
        return bool(spec.entities)

    def generate(self, spec: ir.Specification, draft_path: Path) -> GeneratorResult:
        result = GeneratorResult()
        for entity in spec.entities.values():
            path = self.output_path(
                "app", "controllers", f"{module_name(entity.name)}_controller.py"
            )
            self._write_file(result, path, self._build_controller(spec, entity))
        return result

    def _build_controller(self, spec: ir.Specification, entity: ir.EntityDef) -> str:
        operations = crud_operations(spec, entity)
        variable = module_name(entity.name)
        route = camel_case(entity.name)
        templates = entity.table

        lines = [
            '"""',
            f"{entity.name} controller.",
            '"""',
            "from django.shortcuts import get_object_or_404, redirect, render",
            "",
            f"from app.models.{variable} import {entity.name}",
        ]
        for operation in operations:
            lines.append(
                f"from app.requests.{request_module(operation, entity.name)} "
                f"import {request_class(operation, entity.name)}"
            )
        lines.extend(
            [
                "",
                "",
                f"class {entity.name}Controller:",
                "    def index(self, request):",
                f"        {templates} = {entity.name}.objects.all()",
                f'        return render(request, "{templates}/index.html", '
                f'{{"{templates}": {templates}}})',
                "",
                "    def create(self, request):",
                f'        return render(request, "{templates}/create.html")',
            ]
        )

        if "store" in operations:
            lines.extend(
                [
                    "",
                    "    def store(self, request):",
                    f"        data = {request_class('store', entity.name)}(request.POST).validated()",
                    f"        # Create{entity.name}().handle(**data)",
                    f'        return redirect("{route}.index")',
                ]
            )

        lines.extend(
            [
                "",
                "    def show(self, request, id):",
                f"        {variable} = get_object_or_404({entity.name}, pk=id)",
                f'        return render(request, "{templates}/show.html", '
                f'{{"{variable}": {variable}}})',
            ]
        )

        if "update" in operations:
            lines.extend(
                [
                    "",
                    "    def edit(self, request, id):",
                    f"        {variable} = get_object_or_404({entity.name}, pk=id)",
                    f'        return render(request, "{templates}/edit.html", '
                    f'{{"{variable}": {variable}}})',
                    "",
                    "    def update(self, request, id):",
                    f"        {variable} = get_object_or_404({entity.name}, pk=id)",
                    f"        data = {request_class('update', entity.name)}(request.POST).validated()",
                    f"        # Update{entity.name}().handle({variable}, **data)",
                    f'        return redirect("{route}.show", id={variable}.pk)',
                ]
            )

        if "delete" in operations:
            lines.extend(
                [
                    "",
                    "    def destroy(self, request, id):",
                    f"        {variable} = get_object_or_404({entity.name}, pk=id)",
                    f"        {request_class('delete', entity.name)}(request.POST).validated()",
                    f"        # Delete{entity.name}().handle({variable})",
                    f'        return redirect("{route}.index")',
                ]
            )

        lines.append("")
        return "\n".join(lines)
