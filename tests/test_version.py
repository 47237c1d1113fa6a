"""Tests for version ordering."""

import pytest

from depmeta.version import Version, sort_versions


class TestVersionOrdering:
    """Ordering of numeric, pre-release and word components."""

    def test_numeric_components_compare_numerically(self):
        assert Version("1.9") < Version("1.10")
        assert Version("2.0.0") > Version("1.99.99")

    def test_pre_release_sorts_before_release(self):
        assert Version("1.0-SNAPSHOT") < Version("1.0-M1") < Version("1.0-RC1") < Version("1.0")

    def test_alpha_before_beta(self):
        assert Version("2.0.0-alpha.1") < Version("2.0.0-beta.1") < Version("2.0.0")

    def test_release_words_equal_plain_release(self):
        # Same ordering position; the raw string breaks the tie.
        assert Version("1.0") < Version("1.0.Final")
        assert Version("1.0.Final") < Version("1.0.1")

    def test_unknown_word_sorts_after_release_and_lexically(self):
        assert Version("1.0") < Version("1.0-bar") < Version("1.0-foo") < Version("1.0.1")

    def test_shorter_release_before_longer_numeric(self):
        assert Version("1.0") < Version("1.0.0")
        assert Version("1.0") != Version("1.0.0")

    def test_equality_and_hash_follow_string(self):
        assert Version("3.2.1") == Version("3.2.1")
        assert len({Version("3.2.1"), Version("3.2.1")}) == 1
        assert str(Version("3.2.1")) == "3.2.1"

    def test_comparison_with_other_types_is_unsupported(self):
        with pytest.raises(TypeError):
            _ = Version("1.0") < "1.1"


class TestSortVersions:
    """sort_versions returns distinct versions ascending."""

    def test_sorts_mixed_versions(self):
        raw = ["1.10.0", "1.2.0", "1.2.0-RC1", "1.2.0-SNAPSHOT", "1.9"]
        assert [str(v) for v in sort_versions(raw)] == [
            "1.2.0-SNAPSHOT",
            "1.2.0-RC1",
            "1.2.0",
            "1.9",
            "1.10.0",
        ]

    def test_removes_duplicates(self):
        assert [str(v) for v in sort_versions(["1.0", "1.1", "1.0"])] == ["1.0", "1.1"]

    def test_result_is_sorted_for_scala_style_versions(self):
        raw = ["2.13.0-M5", "2.12.10", "2.13.1", "2.13.0", "2.12.8", "2.13.0-RC3"]
        result = sort_versions(raw)
        assert result == sorted(result)
        assert str(result[0]) == "2.12.8"
        assert str(result[-1]) == "2.13.1"
