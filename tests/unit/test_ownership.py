"""Tests for the file ownership policy."""

from pathlib import Path

import pytest

from draftwright.core.errors import ManifestError
from draftwright.core.ir import FileOwnership
from draftwright.core.ownership import DEFAULT_OWNERSHIP_PATTERNS, OwnershipPolicy

REGEN = FileOwnership.REGENERATE
SCAFFOLD = FileOwnership.SCAFFOLD_ONLY


class TestDefaultPolicy:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("app/migrations/2024_01_01_000000_create_posts.py", REGEN),
            ("app/factories/post_factory.py", REGEN),
            ("app/seeders/development/post_seeder.py", REGEN),
            ("app/routes.py", REGEN),
            ("frontend/types/models.d.ts", REGEN),
            ("app/models/post.py", SCAFFOLD),
            ("app/actions/publish_post.py", SCAFFOLD),
            ("app/controllers/post_controller.py", SCAFFOLD),
            ("app/requests/store_post_request.py", SCAFFOLD),
            ("templates/posts/index.html", SCAFFOLD),
            ("tests/test_post.py", SCAFFOLD),
        ],
    )
    def test_default_patterns(self, path: str, expected: FileOwnership):
        # Pass the opposite default so only a pattern match can produce ``expected``
        fallback = REGEN if expected is SCAFFOLD else SCAFFOLD
        assert OwnershipPolicy.default().resolve(path, fallback) is expected

    def test_unmatched_path_uses_generator_default(self):
        policy = OwnershipPolicy.default()

        assert policy.resolve("docs/readme.md", SCAFFOLD) is SCAFFOLD
        assert policy.resolve("docs/readme.md", REGEN) is REGEN

    def test_patterns_listed_in_order(self):
        patterns = [pattern for pattern, _ in OwnershipPolicy.default().patterns()]
        assert patterns == list(DEFAULT_OWNERSHIP_PATTERNS)


class TestOverrides:
    def test_overrides_win_over_defaults(self):
        policy = OwnershipPolicy.default().extended({"app/models/*": "regenerate"})

        assert policy.resolve("app/models/post.py", SCAFFOLD) is REGEN

    def test_first_match_wins(self):
        policy = OwnershipPolicy.from_mapping(
            {"app/models/user.py": "regenerate", "app/models/*": "scaffold_only"}
        )

        assert policy.resolve("app/models/user.py", SCAFFOLD) is REGEN
        assert policy.resolve("app/models/post.py", REGEN) is SCAFFOLD

    def test_leading_slash_is_ignored(self):
        policy = OwnershipPolicy.from_mapping({"/app/routes.py": "scaffold_only"})

        assert policy.resolve("app/routes.py", REGEN) is SCAFFOLD

    def test_invalid_value(self):
        with pytest.raises(ManifestError, match="Invalid ownership 'sometimes'"):
            OwnershipPolicy.from_mapping({"app/*": "sometimes"})


def test_resolve_path_uses_root_relative_path(tmp_path: Path):
    policy = OwnershipPolicy.default()

    assert policy.resolve_path(tmp_path / "app" / "models" / "post.py", tmp_path, REGEN) is SCAFFOLD
