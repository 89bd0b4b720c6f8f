"""Tests for svg_text_anchor.classify module."""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from svg_text_anchor.classify import (
    ALIGNMENT_KEYWORDS,
    classify_identifier,
    strip_numeric_suffix,
)


class TestStripNumericSuffix:
    """Tests for strip_numeric_suffix function."""

    def test_no_suffix(self):
        assert strip_numeric_suffix("foo") == "foo"

    def test_digits_only_suffix(self):
        assert strip_numeric_suffix("foo1") == "foo"
        assert strip_numeric_suffix("foo123") == "foo"

    def test_underscore_and_digits(self):
        assert strip_numeric_suffix("foo_123") == "foo"

    def test_trailing_underscore(self):
        assert strip_numeric_suffix("foo_") == "foo"

    def test_only_one_underscore_removed(self):
        assert strip_numeric_suffix("foo__") == "foo_"
        assert strip_numeric_suffix("foo__7") == "foo_"

    def test_inner_underscore_kept(self):
        assert strip_numeric_suffix("f_oo_") == "f_oo"

    def test_all_digits(self):
        assert strip_numeric_suffix("12345") == ""

    def test_empty(self):
        assert strip_numeric_suffix("") == ""

    def test_non_ascii_digits_kept(self):
        """Only ASCII digits form the disambiguation suffix."""
        assert strip_numeric_suffix("foo٣") == "foo٣"


class TestClassifyIdentifier:
    """Tests for classify_identifier function."""

    @pytest.mark.parametrize(
        "identifier,expected",
        [
            ("title_left", "left"),
            ("title_center", "center"),
            ("title_right", "right"),
            ("title_left_2", "left"),
            ("label_center_3", "center"),
            ("far_left_12", "left"),
            ("price_right_", "right"),
            ("right", "right"),
            ("titleleft", "left"),
            ("titleright7", "right"),
        ],
    )
    def test_alignment_suffixes(self, identifier, expected):
        assert classify_identifier(identifier) == expected

    @pytest.mark.parametrize(
        "identifier",
        ["footer_99", "footer", "", "123", "left_side", "center_title", "_"],
    )
    def test_no_alignment(self, identifier):
        assert classify_identifier(identifier) is None

    def test_case_sensitive(self):
        assert classify_identifier("title_LEFT") is None
        assert classify_identifier("title_Center") is None

    def test_keyword_elsewhere_ignored(self):
        """Only the suffix decides, not keywords earlier in the id."""
        assert classify_identifier("left_column_right") == "right"
        assert classify_identifier("right_then_center_4") == "center"

    def test_keyword_order(self):
        assert ALIGNMENT_KEYWORDS == ("left", "center", "right")

    @pytest.mark.parametrize(
        "identifier", ["far_left_12", "a_center", "b_right_", "footer_99", "x7"]
    )
    def test_stable_under_stripping(self, identifier):
        assert classify_identifier(strip_numeric_suffix(identifier)) == (
            classify_identifier(identifier)
        )
