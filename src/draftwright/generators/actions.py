"""
Actions generator.

Generates one ``app/actions/<action>.py`` module per draft action, holding a
class with a typed ``handle`` method for the developer to fill in.
"""

from __future__ import annotations

from pathlib import Path

from ..core import ir
from ..core.strings import snake_case
from .base import Generator, GeneratorResult


class ActionsGenerator(Generator):
    """Generate action class stubs."""

    name = "action"
    description = "Action classes"
    default_ownership = ir.FileOwnership.SCAFFOLD_ONLY

    def supports(self, spec: ir.Specification) -> bool:
        return bool(spec.actions)

    def generate(self, spec: ir.Specification, draft_path: Path) -> GeneratorResult:
        result = GeneratorResult()
        for action in spec.actions.values():
            path = self.output_path("app", "actions", f"{snake_case(action.name)}.py")
            self._write_file(result, path, self._build_action(action))
        return result

    def _build_action(self, action: ir.ActionDef) -> str:
        lines = ['"""', f"{action.name} action.", '"""']
        if action.model:
            lines.append(f"from app.models.{snake_case(action.model)} import {action.model}")
        lines.extend(
            [
                "",
                "",
                f"class {action.name}:",
                f"    def handle({self._param_list(action)}){self._return_annotation(action)}:",
                f'        raise NotImplementedError("{action.name}.handle")',
                "",
            ]
        )
        return "\n".join(lines)

    @staticmethod
    def _param_list(action: ir.ActionDef) -> str:
        parts = ["self"]
        model_aliases = set()
        if action.model:
            lowered = action.model.lower()
            model_aliases = {"model", lowered, snake_case(action.model), f"{lowered}id"}
        for param in action.params:
            if param.type:
                parts.append(f"{param.name}: {param.type}")
            elif param.name.lower() in model_aliases:
                parts.append(f"{param.name}: {action.model}")
            else:
                parts.append(param.name)
        return ", ".join(parts)

    @staticmethod
    def _return_annotation(action: ir.ActionDef) -> str:
        returns = action.resolved_return()
        if returns in ("void", ""):
            return " -> None"
        return f" -> {returns}"
