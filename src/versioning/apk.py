"""APK (Alpine Package Keeper) version parsing and ordering.

APK versions look like ``<release>-<revision>``, for example ``2.39.0-r0``,
``2.39.0_rc1-r0`` or ``6.5_p20250503-r0``. Ordering follows the RPM-style
segment comparison: releases are compared first and the revision only
breaks ties.

References:
    https://wiki.alpinelinux.org/wiki/Package_policies
    https://wiki.alpinelinux.org/wiki/Alpine_Package_Keeper#Package_pinning
"""

from __future__ import annotations

import re
from functools import cmp_to_key
from typing import Iterable, List, Optional, Tuple

from .models import Ordering, ParsedVersion

VERSIONING_ID = "apk"
DISPLAY_NAME = "Alpine Package Keeper (APK)"
SUPPORTS_RANGES = False

_RELEASE_SEPARATOR = "-"
_DIGITS = re.compile(r"\d+", re.ASCII)
_SEGMENT = re.compile(r"[a-zA-Z]+|\d+|~", re.ASCII)
_PRERELEASE = re.compile(r"_rc\d+", re.ASCII)


def parse(raw: str) -> Optional[ParsedVersion]:
    """Split an APK version at its first hyphen.

    Args:
        raw: Version string such as "2.39.0-r0".

    Returns:
        ParsedVersion, or None when ``raw`` is not a non-empty string.
    """
    if not isinstance(raw, str) or not raw:
        return None
    release, _, revision = raw.partition(_RELEASE_SEPARATOR)
    numeric = tuple(int(m) for m in _DIGITS.findall(raw))
    return ParsedVersion(release=release, revision=revision, numeric_segments=numeric)


def _tokenize(part: str) -> List[str]:
    return _SEGMENT.findall(part)


def _compare_parts(left: str, right: str) -> int:
    """Compare two release (or revision) strings segment by segment."""
    if left == right:
        return 0

    left_tokens = _tokenize(left)
    right_tokens = _tokenize(right)
    common = min(len(left_tokens), len(right_tokens))

    for index in range(common):
        a = left_tokens[index]
        b = right_tokens[index]

        # ~ marks a pre-release and sorts below anything else
        a_tilde = a.startswith("~")
        b_tilde = b.startswith("~")
        if a_tilde != b_tilde:
            return -1 if a_tilde else 1

        a_digit = a.isdigit()
        b_digit = b.isdigit()
        if a_digit and b_digit:
            if int(a) != int(b):
                return 1 if int(a) > int(b) else -1
        elif a_digit:
            return 1
        elif b_digit:
            return -1
        elif a != b:
            return 1 if a > b else -1

    if len(left_tokens) == len(right_tokens):
        # same tokens, different separators
        return 0

    if len(left_tokens) > common and left_tokens[common].startswith("~"):
        return -1
    if len(right_tokens) > common and right_tokens[common].startswith("~"):
        return 1
    return 1 if len(left_tokens) > len(right_tokens) else -1


def compare(version: str, other: str) -> Ordering:
    """Order two APK versions.

    Identical strings are EQUAL without tokenizing. When either side cannot
    be parsed the result is GREATER; that fallback is defensive and not a
    real ordering (it is not antisymmetric).
    """
    if version == other:
        return Ordering.EQUAL

    parsed = parse(version)
    parsed_other = parse(other)
    if parsed is None or parsed_other is None:
        return Ordering.GREATER

    result = _compare_parts(parsed.release, parsed_other.release)
    if result == 0:
        result = _compare_parts(parsed.revision, parsed_other.revision)
    return Ordering(result)


def is_valid(version: str) -> bool:
    """APK versions must start with a digit."""
    parsed = parse(version)
    if parsed is None:
        return False
    return parsed.release[:1].isdigit() and parsed.release[:1].isascii()


def is_stable(version: str) -> bool:
    """Versions carrying an ``_rc<N>`` marker are not stable."""
    parsed = parse(version)
    if parsed is None:
        return False
    return not (_PRERELEASE.search(parsed.release) or _PRERELEASE.search(parsed.revision))


def _ordinal(version: str, index: int) -> Optional[int]:
    parsed = parse(version)
    if parsed is None or len(parsed.numeric_segments) <= index:
        return None
    return parsed.numeric_segments[index]


def get_major(version: str) -> Optional[int]:
    """First digit run of the version, or None when absent."""
    return _ordinal(version, 0)


def get_minor(version: str) -> Optional[int]:
    """Second digit run of the version, or None when absent."""
    return _ordinal(version, 1)


def get_patch(version: str) -> Optional[int]:
    """Third digit run of the version, or None when absent."""
    return _ordinal(version, 2)


def equals(version: str, other: str) -> bool:
    return compare(version, other) == Ordering.EQUAL


def is_greater_than(version: str, other: str) -> bool:
    return compare(version, other) == Ordering.GREATER


def sort_versions(versions: Iterable[str], reverse: bool = False) -> List[str]:
    """Return a new list of versions in ascending (or descending) order."""
    return sorted(versions, key=cmp_to_key(compare), reverse=reverse)


def get_latest(versions: Iterable[str], include_unstable: bool = False) -> Optional[str]:
    """Pick the highest valid version, skipping unstable ones unless asked."""
    candidates: Tuple[str, ...] = tuple(
        v for v in versions if is_valid(v) and (include_unstable or is_stable(v))
    )
    if not candidates:
        return None
    return sort_versions(candidates)[-1]
