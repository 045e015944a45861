"""Tests for build planning."""

from draftwright.core import ir
from draftwright.core.parser import parse_draft
from draftwright.core.planner import build_plan
from draftwright.generators import GeneratorContext, default_registry


class TestBuildPlan:
    def test_entity_steps_then_global_steps(
        self, blog_draft: str, generator_context: GeneratorContext
    ):
        spec = parse_draft(blog_draft)
        steps = build_plan(spec, default_registry(generator_context))

        assert [step.name for step in steps] == [
            "scaffold Post",
            "patch Post",
            "scaffold User",
            "patch User",
            "route",
            "typescript",
            "test",
        ]

    def test_scaffold_step_carries_command(
        self, blog_draft: str, generator_context: GeneratorContext
    ):
        spec = parse_draft(blog_draft)
        scaffold = build_plan(spec, default_registry(generator_context))[0]

        assert scaffold.kind is ir.PlanStepKind.SCAFFOLD
        assert scaffold.command == "draftwright build --only model"
        assert scaffold.generator is None

    def test_patch_step_lists_applicable_generators(self, generator_context: GeneratorContext):
        spec = parse_draft(
            """
models:
  Post:
    title: string
    seeder:
      count: 3
  Tag:
    name: string
"""
        )
        steps = {step.name: step for step in build_plan(spec, default_registry(generator_context))}

        assert steps["patch Post"].generator == "model, migration, factory, seeder, controller"
        assert steps["patch Post"].description == (
            "Apply draft to post (model, migration, factory, seeder, controller)"
        )
        assert steps["patch Tag"].generator == "model, migration, factory, controller"
        assert "seeder" not in steps

    def test_crud_actions_add_requests(self, generator_context: GeneratorContext):
        spec = parse_draft(
            """
models:
  Post:
    title: string
  Tag:
    name: string
actions:
  CreatePost:
    model: Post
"""
        )
        steps = {step.name: step for step in build_plan(spec, default_registry(generator_context))}

        assert steps["patch Post"].generator == "model, migration, factory, controller, request"
        assert "request" not in steps["patch Tag"].generator
        assert "action" in steps

    def test_actions_only_draft(self, generator_context: GeneratorContext):
        spec = parse_draft("actions:\n  SendDigest: {}\n")
        steps = build_plan(spec, default_registry(generator_context))

        assert [step.name for step in steps] == ["action", "test"]
        assert all(step.kind is ir.PlanStepKind.GENERATE for step in steps)

    def test_disabled_generators_are_not_planned(
        self, blog_draft: str, generator_context: GeneratorContext
    ):
        spec = parse_draft(blog_draft)
        registry = default_registry(generator_context, disabled=["test", "typescript"])

        names = [step.name for step in build_plan(spec, registry)]

        assert "test" not in names
        assert "typescript" not in names
        assert names[-1] == "route"

    def test_plan_does_not_touch_filesystem(
        self, blog_draft: str, generator_context: GeneratorContext
    ):
        build_plan(parse_draft(blog_draft), default_registry(generator_context))

        assert not generator_context.output_root.exists()
        assert not generator_context.state.state_path.exists()
