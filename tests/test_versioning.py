"""Tests for version ordering."""

import pytest

from modulehub.versioning import (
    compare_versions,
    parse_component,
    parse_version,
    version_key,
    LESS,
    EQUAL,
    GREATER,
)


class TestParseVersion:
    """Tests for the lenient parser."""

    def test_strips_single_v_prefix(self):
        assert parse_version("v1.2.3") == (1, 2, 3)
        assert parse_version("V1.2.3") == (1, 2, 3)

    def test_only_one_prefix_is_stripped(self):
        # Second 'v' is just a non-digit and is discarded
        assert parse_version("vv2") == (2,)

    def test_non_digits_are_discarded(self):
        assert parse_component("3-beta") == 3
        assert parse_component("rc12") == 12

    def test_component_without_digits_is_zero(self):
        assert parse_component("abc") == 0
        assert parse_component("") == 0

    def test_never_raises(self):
        assert parse_version("") == (0,)
        assert parse_version("...") == (0, 0, 0, 0)


class TestCompareVersions:
    """Tests for compare_versions()."""

    @pytest.mark.parametrize("version", ["1", "1.0", "v2.0.0", "10.20.30", "0.0.1"])
    def test_equal_to_itself(self, version):
        assert compare_versions(version, version) == EQUAL

    def test_greater(self):
        assert compare_versions("v2.0.0", "v1.8.3") == GREATER

    def test_less(self):
        assert compare_versions("v1.8.3", "v2.0.0") == LESS

    def test_trailing_zero_equivalence(self):
        assert compare_versions("1.2", "1.2.0") == EQUAL
        assert compare_versions("1.2.0.0", "1.2") == EQUAL

    def test_missing_component_counts_as_zero(self):
        assert compare_versions("1.2", "1.2.1") == LESS

    def test_numeric_not_lexicographic(self):
        assert compare_versions("1.10", "1.9") == GREATER

    def test_garbage_parses_to_zero(self):
        assert compare_versions("abc", "0.0.0") == EQUAL

    def test_prefix_mix(self):
        assert compare_versions("v1.5", "1.5") == EQUAL

    def test_most_significant_component_decides(self):
        assert compare_versions("2.0.0", "1.99.99") == GREATER

    def test_sort_key(self):
        tags = ["v1.10", "1.2", "v1.9.1", "0.9"]
        assert sorted(tags, key=version_key) == ["0.9", "1.2", "v1.9.1", "v1.10"]
