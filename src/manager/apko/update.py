"""In-place version rewriting for apko.yaml package declarations."""

from __future__ import annotations

import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

PIN_OPERATOR = "="


def _declaration_pattern(dep_name: str) -> "re.Pattern[str]":
    """Match ``<indent>- [quote]<name>=<version><rest>`` on a single line."""
    return re.compile(
        r"^(?P<prefix>[ \t]*-[ \t]+[\"']?)"
        + re.escape(dep_name)
        + re.escape(PIN_OPERATOR)
        + r"(?P<version>[^\s\"'#]*)(?P<rest>[^\r\n]*)$",
        re.MULTILINE,
    )


def update_dependency(
    file_content: str,
    dep_name: str,
    current_value: str,
    new_value: str,
) -> Optional[str]:
    """Rewrite the pinned version of ``dep_name`` in an apko.yaml document.

    Lookup order:
      1. The first ``- name=...`` declaration line. Already at ``new_value``
         means the input is returned unchanged; otherwise only that line's
         version span is replaced.
      2. Without a declaration line, a literal ``name=new_value`` means the
         document is already updated; a literal ``name=current_value`` has
         its first occurrence replaced.

    Args:
        file_content: Original document text.
        dep_name: Package name.
        current_value: Version the caller expects to find.
        new_value: Version to write.

    Returns:
        Updated text (the same text when nothing needs to change), or None
        when no safe target could be found.
    """
    if not dep_name or not current_value or not new_value:
        logger.debug("Missing required fields for APK update")
        return None

    match = _declaration_pattern(dep_name).search(file_content)
    if match:
        if match.group("version") == new_value:
            logger.debug("Version is already updated")
            return file_content
        start, end = match.span("version")
        logger.debug(
            "Updating %s from %s to %s (declared %s)",
            dep_name, current_value, new_value, match.group("version"),
        )
        return file_content[:start] + new_value + file_content[end:]

    new_pin = f"{dep_name}{PIN_OPERATOR}{new_value}"
    if new_pin in file_content:
        logger.debug("Version is already updated")
        return file_content

    old_pin = f"{dep_name}{PIN_OPERATOR}{current_value}"
    if old_pin in file_content:
        logger.debug("Updating %s from %s to %s by literal match", dep_name, current_value, new_value)
        return file_content.replace(old_pin, new_pin, 1)

    logger.debug("Could not find package pin to replace: %s", old_pin)
    return None
