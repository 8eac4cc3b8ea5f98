"""Tests for APK version parsing and ordering."""

import pytest

from versioning import apk
from versioning.models import Ordering, ParsedVersion


class TestParse:
    """Test splitting versions into release and revision."""

    def test_splits_at_first_hyphen_only(self):
        """Only the first hyphen separates the revision."""
        parsed = apk.parse("1.2.3-r0-extra")
        assert parsed == ParsedVersion(release="1.2.3", revision="r0-extra", numeric_segments=(1, 2, 3, 0))

    def test_no_hyphen_has_empty_revision(self):
        """A version without hyphen has an empty revision."""
        parsed = apk.parse("2.39.0")
        assert parsed.release == "2.39.0"
        assert parsed.revision == ""

    def test_numeric_segments_cover_whole_string(self):
        """Digit runs are collected from release and revision."""
        assert apk.parse("6.5_p20250503-r0").numeric_segments == (6, 5, 20250503, 0)

    @pytest.mark.parametrize("raw", ["", None, 123])
    def test_unparseable_input(self, raw):
        """Empty and non-string input does not parse."""
        assert apk.parse(raw) is None


class TestIsValid:
    """Test version validity."""

    @pytest.mark.parametrize(
        "version, expected",
        [
            ("2.39.0-r0", True),
            ("2.39.0", True),
            ("2.39.0-rc1", True),
            ("foo", False),
            ("a.39.0-", False),
            ("6.5_p20250503-r0", True),
            ("", False),
        ],
    )
    def test_is_valid(self, version, expected):
        assert apk.is_valid(version) is expected


class TestIsStable:
    """Test pre-release detection."""

    @pytest.mark.parametrize(
        "version, expected",
        [
            ("2.39.0-r0", True),
            ("2.39.0_rc1-r0", False),
            ("2.39.0", True),
            ("2.39.0_rc2", False),
            ("2.39.0_rc10-r0", False),
            ("2.39.0_rc0", False),
            ("2.39.0-r0_rc1", False),
            ("2.39.0_rc", True),
        ],
    )
    def test_is_stable(self, version, expected):
        assert apk.is_stable(version) is expected

    def test_unparseable_is_not_stable(self):
        assert apk.is_stable("") is False


class TestOrdinals:
    """Test major/minor/patch accessors."""

    def test_major_minor_patch(self):
        assert apk.get_major("2.39.0-r0") == 2
        assert apk.get_minor("2.39.0_rc1-r0") == 39
        assert apk.get_patch("2.39.0_rc1-r0") == 0

    def test_patch_from_suffix_digits(self):
        """The third digit run may come from a suffix."""
        assert apk.get_patch("6.5_p20250503-r0") == 20250503

    def test_missing_segment_is_none(self):
        """Absent segments are reported as None, not zero."""
        assert apk.get_minor("7") is None
        assert apk.get_patch("1.2") is None
        assert apk.get_major("foo") is None


class TestCompare:
    """Test the total order over APK versions."""

    @pytest.mark.parametrize(
        "a, b, expected",
        [
            ("2.39.0-r1", "2.39.0-r0", Ordering.GREATER),
            ("2.39.1-r0", "2.39.0-r0", Ordering.GREATER),
            ("2.39.0-r0", "2.39.1-r0", Ordering.LESS),
            ("2.39.0-r0", "2.39.0-r1", Ordering.LESS),
            ("2.39.0", "2.39.0", Ordering.EQUAL),
            ("2.39.0", "2.39.1", Ordering.LESS),
            ("2.39.1", "2.39.0", Ordering.GREATER),
            ("2.39.0-r0", "2.39.0", Ordering.GREATER),
            ("2.39.0", "2.39.0-r0", Ordering.LESS),
            ("2.39.0~beta", "2.39.0", Ordering.LESS),
            ("2.39.0", "2.39.0~beta", Ordering.GREATER),
            ("1.0.1", "1.0", Ordering.GREATER),
            ("1.0~rc1", "1.0", Ordering.LESS),
            ("1.10", "1.9", Ordering.GREATER),
            ("1.010", "1.10", Ordering.EQUAL),
            ("1.0a", "1.0.1", Ordering.LESS),
            ("1.0_alpha", "1.0_beta", Ordering.LESS),
            ("1.0_1", "1.0.1", Ordering.EQUAL),
            ("1.0~~", "1.0~", Ordering.LESS),
            ("99999999999999999999.0", "99999999999999999998.0", Ordering.GREATER),
        ],
    )
    def test_compare(self, a, b, expected):
        assert apk.compare(a, b) == expected

    def test_release_outranks_revision(self):
        """A higher release wins regardless of the revision."""
        assert apk.compare("2.40.0-r0", "2.39.0-r99") == Ordering.GREATER

    def test_unparseable_side_is_greater(self):
        """Unparseable input falls back to GREATER and never raises."""
        assert apk.compare("", "1.0") == Ordering.GREATER
        assert apk.compare("1.0", None) == Ordering.GREATER

    @pytest.mark.parametrize("version", ["2.39.0-r0", "1.0~rc1", "6.5_p20250503-r0", "foo"])
    def test_reflexive(self, version):
        assert apk.compare(version, version) == Ordering.EQUAL

    @pytest.mark.parametrize(
        "a, b",
        [
            ("2.39.0-r1", "2.39.0-r0"),
            ("1.0~rc1", "1.0"),
            ("1.0.1", "1.0"),
            ("1.0a", "1.0.1"),
            ("3.0_rc1-r0", "3.0-r0"),
        ],
    )
    def test_antisymmetric(self, a, b):
        assert apk.compare(a, b) == -apk.compare(b, a)

    @pytest.mark.parametrize("base", ["1.0", "2.39.0", "6.5_p20250503"])
    def test_tilde_sorts_below_base(self, base):
        assert apk.compare(base + "~pre1", base) == Ordering.LESS


class TestHelpers:
    """Test equality, greater-than and sorting helpers."""

    @pytest.mark.parametrize(
        "a, b, expected",
        [
            ("2.39.0-r0", "2.39.0-r0", True),
            ("2.39.0", "2.39.0", True),
            ("2.39.0-r0", "2.39.0-r1", False),
            ("2.39.0", "2.39.1", False),
        ],
    )
    def test_equals(self, a, b, expected):
        assert apk.equals(a, b) is expected

    @pytest.mark.parametrize(
        "a, b, expected",
        [
            ("2.39.1-r0", "2.39.0-r0", True),
            ("2.39.0-r1", "2.39.0-r0", True),
            ("2.39.0-r0", "2.39.1-r0", False),
            ("2.39.0-r0", "2.39.0-r1", False),
        ],
    )
    def test_is_greater_than(self, a, b, expected):
        assert apk.is_greater_than(a, b) is expected

    def test_sort_versions(self):
        versions = ["2.39.0-r1", "2.39.0~rc1", "2.38.5-r0", "2.39.0", "2.39.0-r0"]
        assert apk.sort_versions(versions) == [
            "2.38.5-r0",
            "2.39.0~rc1",
            "2.39.0",
            "2.39.0-r0",
            "2.39.0-r1",
        ]

    def test_get_latest_skips_unstable(self):
        versions = ["2.39.0-r0", "2.40.0_rc1-r0", "foo"]
        assert apk.get_latest(versions) == "2.39.0-r0"
        assert apk.get_latest(versions, include_unstable=True) == "2.40.0_rc1-r0"
        assert apk.get_latest([]) is None
