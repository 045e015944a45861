"""Tests for the IR types."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from draftwright.core import ir


class TestFieldDescriptor:
    @pytest.mark.parametrize(
        ("raw", "type_", "argument", "modifiers"),
        [
            ("string", "string", None, ()),
            ("string:255 unique", "string", "255", ("unique",)),
            ("decimal:10,2 nullable", "decimal", "10,2", ("nullable",)),
            ("id:User", "id", "User", ()),
        ],
    )
    def test_parse(self, raw: str, type_: str, argument, modifiers):
        field = ir.FieldDescriptor.parse(raw)

        assert field.type == type_
        assert field.argument == argument
        assert field.modifiers == modifiers
        assert str(field) == raw

    def test_foreign_keys(self):
        assert ir.FieldDescriptor.parse("foreignId").is_foreign_key
        assert ir.FieldDescriptor.parse("id:User").references == "User"
        assert not ir.FieldDescriptor.parse("id").is_foreign_key

    @pytest.mark.parametrize("raw", ["", "string:", "9lives", "str-ing"])
    def test_invalid_type_tokens(self, raw: str):
        assert not ir.FieldDescriptor.is_valid_type_token(raw)

    def test_is_frozen(self):
        field = ir.FieldDescriptor.parse("string")
        with pytest.raises(PydanticValidationError):
            field.type = "text"


class TestRelationTarget:
    def test_plain(self):
        target = ir.RelationTarget.parse("BlogPost")

        assert target.method == "blogPost"
        assert target.foreign_key == "blog_post_id"

    def test_alias(self):
        target = ir.RelationTarget.parse(" User:author ")

        assert target.entity == "User"
        assert target.method == "author"
        assert target.foreign_key == "author_id"

    def test_split_targets(self):
        assert ir.split_relation_targets("User, Post ,") == ["User", "Post"]
        assert ir.split_relation_targets(["User", 3, "Post"]) == ["User", "Post"]
        assert ir.split_relation_targets(None) == []


class TestEntityDef:
    def test_from_draft(self):
        entity = ir.EntityDef.from_draft(
            "Post",
            {
                "title": "string:255",
                "softDeletes": True,
                "searchable": True,
                "traits": ["HasSlug"],
                "relationships": {"belongsTo": "User:author", "hasMany": ["Comment"]},
                "seeder": {"category": "ESSENTIAL", "count": 2},
            },
        )

        assert list(entity.fields) == ["title"]
        assert entity.table == "posts"
        assert entity.soft_deletes
        assert entity.timestamps
        assert entity.has_feature("searchable")
        assert not entity.has_feature("media")
        assert entity.traits == ("HasSlug",)
        assert entity.relation_targets("hasMany")[0].entity == "Comment"
        assert entity.seeder == ir.SeederConfig(category=ir.SeederCategory.ESSENTIAL, count=2)

    def test_defaults(self):
        entity = ir.EntityDef.from_draft("Tag", {"name": "string"})

        assert entity.seeder is None
        assert entity.relation_targets("belongsTo") == ()
        assert entity.foreign_keys() == {}


class TestActionDef:
    def test_params_and_return(self):
        action = ir.ActionDef.from_draft(
            "PublishPost",
            {
                "model": "Post",
                "params": ["post", {"name": "at", "type": "datetime"}],
                "return": "model",
            },
        )

        assert [p.name for p in action.params] == ["post", "at"]
        assert action.params[1].type == "datetime"
        assert action.resolved_return() == "Post"

    def test_empty_definition(self):
        action = ir.ActionDef.from_draft("SendDigest", None)

        assert action.params == ()
        assert action.resolved_return() == "void"


class TestBuildTypes:
    def test_record_uses_hash_alias(self):
        record = ir.GeneratedFileRecord(
            path="/p/a.py", hash="abc", ownership=ir.FileOwnership.REGENERATE
        )

        assert record.content_hash == "abc"
        assert record.to_dict() == {"path": "/p/a.py", "hash": "abc", "ownership": "regenerate"}

    def test_state_round_trip(self):
        state = ir.BuildState(
            last_run="2024-01-02T03:04:05+00:00",
            drafts={"/p/draft.yaml": ir.DraftRecord(hash="d1")},
            last_build_backup={"/p/a.py": "old"},
        )

        restored = ir.BuildState.from_dict(state.to_dict())

        assert restored == state
        assert "lastRun" in state.to_dict()

    def test_path_for_table(self):
        record = ir.GeneratedFileRecord(
            path="/p/m.py", hash="h", ownership=ir.FileOwnership.REGENERATE, table="posts"
        )
        state = ir.BuildState(generated={record.path: record})

        assert state.path_for_table("posts") == "/p/m.py"
        assert state.path_for_table("users") is None

    @pytest.mark.parametrize(
        ("status", "errors", "success"),
        [
            (ir.BuildStatus.BUILT, [], True),
            (ir.BuildStatus.NO_CHANGES, [], True),
            (ir.BuildStatus.BUILT, ["x"], False),
            (ir.BuildStatus.FAILED, ["x"], False),
            (ir.BuildStatus.MISSING_DRAFT, ["x"], False),
        ],
    )
    def test_build_result_success(self, status, errors, success):
        assert ir.BuildResult(status=status, errors=errors).success is success


def test_specification_summary():
    spec = ir.Specification(
        entities={"Post": ir.EntityDef(name="Post")},
        actions={"PublishPost": ir.ActionDef(name="PublishPost")},
    )

    assert spec.summary() == {
        "schema_version": "1.0",
        "entities": ["Post"],
        "actions": ["PublishPost"],
        "pages": [],
        "entity_count": 1,
        "action_count": 1,
        "page_count": 0,
    }
