"""Tests for in-place apko.yaml version rewriting."""

import pytest

from manager.apko.update import update_dependency

APKO_YAML = """contents:
  repositories:
    - https://dl-cdn.alpinelinux.org/alpine/edge/main
  packages:
    - alpine-base
    - git=2.39.0-r0
    - gitea=1.20.0-r0
    - curl=8.4.0-r0

cmd: /bin/sh -l
"""


class TestUpdateDependency:
    """Test update_dependency resolution order."""

    def test_simple_line(self):
        result = update_dependency("- git=2.39.0-r0\n", "git", "2.39.0-r0", "2.40.0-r0")
        assert result == "- git=2.40.0-r0\n"

    def test_only_target_line_changes(self):
        result = update_dependency(APKO_YAML, "git", "2.39.0-r0", "2.40.0-r0")
        assert result == APKO_YAML.replace("- git=2.39.0-r0", "- git=2.40.0-r0")
        assert "gitea=1.20.0-r0" in result

    def test_idempotent(self):
        """Applying the same update twice returns unchanged text the second time."""
        first = update_dependency(APKO_YAML, "curl", "8.4.0-r0", "8.5.0-r0")
        second = update_dependency(first, "curl", "8.4.0-r0", "8.5.0-r0")
        assert second == first

    def test_already_updated_returns_same_text(self):
        content = "  - git=2.40.0-r0\n"
        assert update_dependency(content, "git", "2.39.0-r0", "2.40.0-r0") is content

    def test_prefix_is_not_mistaken_for_target(self):
        """A newer version sharing a prefix with new_value still gets updated."""
        content = "- git=2.40.0-r1\n"
        assert update_dependency(content, "git", "2.40.0-r1", "2.40.0") == "- git=2.40.0\n"

    def test_drifted_declaration_preferred(self):
        """The declaration line wins even when its version differs from current_value."""
        content = "contents:\n  packages:\n    - git=2.39.5-r0\n"
        result = update_dependency(content, "git", "2.39.0-r0", "2.40.0-r0")
        assert result == "contents:\n  packages:\n    - git=2.40.0-r0\n"

    def test_preserves_indentation_quotes_and_comments(self):
        content = "packages:\n\t-  \"git=2.39.0-r0\"  # pinned\n"
        result = update_dependency(content, "git", "2.39.0-r0", "2.40.0-r0")
        assert result == "packages:\n\t-  \"git=2.40.0-r0\"  # pinned\n"

    def test_regex_characters_in_name(self):
        content = "  - libstdc++=13.2.1-r0\n"
        result = update_dependency(content, "libstdc++", "13.2.1-r0", "13.2.1-r1")
        assert result == "  - libstdc++=13.2.1-r1\n"

    def test_fallback_literal_replace_first_only(self):
        """Without a list line, the first literal occurrence is replaced."""
        content = "packages: [git=2.39.0-r0]\n# git=2.39.0-r0\n"
        result = update_dependency(content, "git", "2.39.0-r0", "2.40.0-r0")
        assert result == "packages: [git=2.40.0-r0]\n# git=2.39.0-r0\n"

    def test_fallback_already_updated(self):
        content = "packages: [git=2.40.0-r0]\n"
        assert update_dependency(content, "git", "2.39.0-r0", "2.40.0-r0") is content

    def test_not_found(self):
        assert update_dependency(APKO_YAML, "nginx", "1.24.0", "1.25.0") is None

    @pytest.mark.parametrize(
        "dep_name, current_value, new_value",
        [("", "1", "2"), ("git", "", "2"), ("git", "1", ""), (None, "1", "2")],
    )
    def test_missing_fields(self, dep_name, current_value, new_value):
        assert update_dependency(APKO_YAML, dep_name, current_value, new_value) is None
