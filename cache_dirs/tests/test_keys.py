"""
Unit tests for cache key templating.
"""

import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from cache_dirs.app.keys import (
    extract_placeholders,
    resolve_template,
    restore_key_for,
    sanitize_path,
    save_key_for,
)


class TestPlaceholders:
    """Test cases for placeholder extraction."""

    def test_extract_in_template_order(self):
        assert extract_placeholders("{prefix}cargo-{path}{hash}") == ["{prefix}", "{path}", "{hash}"]

    def test_extract_keeps_duplicates(self):
        assert extract_placeholders("{a}-{b}-{a}") == ["{a}", "{b}", "{a}"]

    def test_extract_is_non_greedy(self):
        assert extract_placeholders("x{a}y{b}z") == ["{a}", "{b}"]

    def test_no_placeholders(self):
        assert extract_placeholders("static-key") == []


class TestResolveTemplate:
    """Test cases for run-wide placeholder resolution."""

    def test_prefix_defaults_to_platform(self):
        assert resolve_template("{prefix}", {}, "linux") == "linux-"

    def test_prefix_input_wins_over_default(self):
        assert resolve_template("{prefix}x", {"prefix": "ci-"}, "linux") == "ci-x"

    def test_every_occurrence_replaced(self):
        assert resolve_template("{os}/{os}", {"os": "win"}, "win32") == "win/win"

    def test_unknown_placeholder_becomes_empty(self):
        assert resolve_template("a{missing}b", {}, "linux") == "ab"

    def test_path_and_hash_left_for_per_path_step(self):
        assert resolve_template("{prefix}{path}{hash}", {}, "darwin") == "darwin-{path}{hash}"

    def test_path_input_is_substituted(self):
        assert resolve_template("{path}", {"path": "fixed"}, "linux") == "fixed"


class TestPathKeys:
    """Test cases for per-path restore and save keys."""

    @pytest.mark.parametrize("path,expected", [
        ("./build", "__build"),
        ("~/.cargo/registry", "___cargo_registry"),
        ("target_dir", "target_dir"),
        ("C:\\Users\\x y", "C__Users_x_y"),
        ("Build-42", "Build_42"),
    ])
    def test_sanitize_path(self, path, expected):
        assert sanitize_path(path) == expected

    def test_restore_key_fills_path_and_drops_hash(self):
        assert restore_key_for("linux-{path}{hash}", "./target") == "linux-__target"

    def test_only_first_path_and_hash_tokens_replaced(self):
        assert restore_key_for("linux-{path}-{path}{hash}{hash}", "b") == "linux-b-{path}{hash}"

    def test_save_key_appends_hash(self):
        assert save_key_for("linux-__target", "-abc") == "linux-__target--abc"
