"""Token parsing utilities for apko package declarations.

Each raw entry of ``contents.packages`` is classified by an ordered list of
matchers; the first matcher that accepts the token wins:

    1. ``name=version``        explicit pin
    2. ``name-version``        bare hyphen separator
    3. ``name<op>version``     range operator (<, <=, >, >=, ~, ^)
    4. anything else           unversioned
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterable, List, Optional, Sequence, Union

from constants import Constants
from .models import DependencyRecord, Pinned, RangeConstraint, SkipReason, Unversioned

logger = logging.getLogger(__name__)

Classified = Union[Pinned, RangeConstraint, Unversioned]
Matcher = Callable[[str], Optional[Classified]]

_NAME = r"[^\s=<>~^]+"
_PINNED = re.compile(rf"^(?P<name>{_NAME})=(?P<version>\d+\S*)$", re.ASCII)
# A hyphen only separates a version when at least major.minor follows it.
_HYPHEN_VERSION = re.compile(r"\d+\.\d+\S*$", re.ASCII)
_RANGE = re.compile(rf"^(?P<name>{_NAME})(?P<op><=|>=|<|>|~|\^)(?P<version>\d+\S*)$", re.ASCII)


def match_pinned(token: str) -> Optional[Pinned]:
    """Match ``name=version``."""
    match = _PINNED.match(token)
    if not match:
        return None
    return Pinned(name=match.group("name"), version=match.group("version"), separator="=")


def match_hyphen(token: str) -> Optional[Pinned]:
    """Match ``name-version`` splitting at the last hyphen followed by a version.

    Names with hyphens (``python-pip-23.0.0``) stay intact. Operator characters
    are only rejected in the name, so ``git-2.39.0~beta`` is still a pin.
    """
    if any(ch.isspace() for ch in token):
        return None
    index = token.rfind("-")
    while index > 0:
        name = token[:index]
        if _HYPHEN_VERSION.match(token, index + 1) and not any(op in name for op in "=<>~^"):
            return Pinned(name=name, version=token[index + 1:], separator="-")
        index = token.rfind("-", 0, index)
    return None


def match_range(token: str) -> Optional[RangeConstraint]:
    """Match ``name<op>version`` for the supported range operators."""
    match = _RANGE.match(token)
    if not match:
        return None
    return RangeConstraint(
        name=match.group("name"),
        operator=match.group("op"),
        version=match.group("version"),
    )


MATCHERS: Sequence[Matcher] = (match_pinned, match_hyphen, match_range)


def classify_token(token: str) -> Classified:
    """Classify a raw package token; never fails."""
    stripped = token.strip()
    for matcher in MATCHERS:
        result = matcher(stripped)
        if result is not None:
            return result
    return Unversioned(raw=token)


def _to_record(classified: Classified, registry_urls: Optional[tuple]) -> DependencyRecord:
    if isinstance(classified, Pinned):
        return DependencyRecord(
            datasource=Constants.DATASOURCE_ID,
            dep_name=classified.name,
            versioning=Constants.VERSIONING_ID,
            current_value=classified.version,
            registry_urls=registry_urls,
        )
    if isinstance(classified, RangeConstraint):
        return DependencyRecord(
            datasource=Constants.DATASOURCE_ID,
            dep_name=classified.name,
            versioning=Constants.VERSIONING_ID,
            current_value=classified.version,
            registry_urls=registry_urls,
            constraint_operator=classified.operator,
        )
    return DependencyRecord(
        datasource=Constants.DATASOURCE_ID,
        dep_name=classified.raw,
        versioning=Constants.VERSIONING_ID,
        skip_reason=SkipReason.NOT_A_VERSION,
        registry_urls=registry_urls,
    )


def extract_dependencies(
    tokens: Iterable[str],
    registry_urls: Optional[Iterable[str]] = None,
) -> List[DependencyRecord]:
    """Turn raw package tokens into dependency records.

    Every token yields exactly one record, in input order. Tokens without a
    recognizable version become records with ``skip_reason`` set; nothing is
    dropped or de-duplicated here.

    Args:
        tokens: Raw ``contents.packages`` entries.
        registry_urls: Repository URLs attached to every record.

    Returns:
        List of DependencyRecord (empty for empty input).
    """
    urls = tuple(registry_urls) if registry_urls else None
    records = [_to_record(classify_token(token), urls) for token in tokens]
    logger.debug(
        "Extracted %d records (%d skipped)",
        len(records),
        sum(1 for r in records if r.skip_reason is not None),
    )
    return records
