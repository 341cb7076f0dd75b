"""Tests for logical path helpers."""

import pytest

from filebrowser.utils.paths import (
    base_name,
    has_path_prefix,
    is_root,
    join_path,
    normalize_path,
    path_components,
)


class TestNormalizePath:
    """Test cases for path normalization."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("", ""),
            ("/", ""),
            ("a", "a"),
            ("/a/b/", "a/b"),
            ("//a///b//c", "a/b/c"),
            ("a b/ c ", "a b/ c "),
        ],
    )
    def test_normalize(self, raw, expected):
        """Test separators are trimmed and collapsed, segments kept verbatim."""
        assert normalize_path(raw) == expected

    def test_normalize_is_idempotent(self):
        """Test normalizing a normalized path is a no-op."""
        path = normalize_path("/x//y/z/")
        assert normalize_path(path) == path

    def test_no_unicode_folding(self):
        """Test segments are compared byte for byte."""
        assert normalize_path("/Caf\u00e9/") != normalize_path("/Cafe\u0301/")
        assert normalize_path("a%2Fb") == "a%2Fb"


class TestPathHelpers:
    """Test cases for path decomposition helpers."""

    def test_components(self):
        """Test decomposition drops empty segments."""
        assert path_components("/a//b/") == ["a", "b"]
        assert path_components("") == []

    def test_join(self):
        """Test joining partial paths yields a normalized path."""
        assert join_path("a/", "/b", "c") == "a/b/c"
        assert join_path("", "a") == "a"
        assert join_path() == ""

    def test_base_name(self):
        """Test the base name of nested and root paths."""
        assert base_name("a/b/c.txt") == "c.txt"
        assert base_name("/") == ""

    def test_is_root(self):
        """Test the root is the empty path."""
        assert is_root("")
        assert is_root("///")
        assert not is_root("a")

    def test_prefix(self):
        """Test prefix comparison on normalized forms."""
        assert has_path_prefix("/a/b/c", "a/b")
        assert has_path_prefix("a/b", "")
        assert not has_path_prefix("a", "a/b")
