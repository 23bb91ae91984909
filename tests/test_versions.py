"""
Tests for version comparison and Java version selection.
"""

import pytest

from mc_launcher.versions import (
    DEFAULT_JAVA_VERSION,
    java_version_for,
    select_java_version,
    version_greater_or_equal,
)


class TestVersionGreaterOrEqual:

    def test_equal_versions(self):
        assert version_greater_or_equal("1.20.5", "1.20.5")

    def test_first_differing_segment_decides(self):
        assert version_greater_or_equal("1.21.0", "1.20.5")
        assert not version_greater_or_equal("1.20.5", "1.21.0")

    def test_shorter_lower_version(self):
        assert not version_greater_or_equal("1.19", "1.20.5")

    def test_missing_segments_are_zero(self):
        assert version_greater_or_equal("1.20", "1.20.0")
        assert version_greater_or_equal("1.20.0", "1.20")
        assert not version_greater_or_equal("1.20", "1.20.1")

    def test_numeric_not_lexicographic(self):
        assert version_greater_or_equal("1.10", "1.9")
        assert not version_greater_or_equal("1.9", "1.10")

    def test_malformed_segments_count_as_zero(self):
        assert version_greater_or_equal("1.x", "1.0")
        assert not version_greater_or_equal("1.20-pre1", "1.1")
        assert version_greater_or_equal("", "0")


class TestJavaVersionSelection:

    @pytest.mark.parametrize("mc,java", [
        ("1.16.5", "8"),
        ("1.17", "16"),
        ("1.17.1", "16"),
        ("1.18", "17"),
        ("1.18.2", "17"),
        ("1.20.4", "17"),
        ("1.20.5", "21"),
        ("1.20.6", "21"),
        ("1.21.4", "21"),
        ("1.8.9", "8"),
    ])
    def test_table(self, mc, java):
        assert java_version_for(mc) == java

    def test_unset_minecraft_version(self, make_settings):
        assert select_java_version(make_settings()) == DEFAULT_JAVA_VERSION == "8"

    def test_override_wins(self, make_settings):
        settings = make_settings(minecraft_version="1.16.5", java_version_override="23")
        assert select_java_version(settings) == "23"

    def test_override_is_not_validated(self, make_settings):
        settings = make_settings(java_version_override="not-a-version")
        assert select_java_version(settings) == "not-a-version"

    def test_from_settings(self, make_settings):
        assert select_java_version(make_settings(minecraft_version="1.18.2")) == "17"
