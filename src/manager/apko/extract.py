"""apko.yaml package-file extraction.

Parses the image configuration, turns ``contents.packages`` into dependency
records, drops unversioned base packages and enriches the result with the
sibling apko.lock.json when one exists.
"""
from __future__ import annotations

import logging
import os
from typing import Callable, List, Optional

import yaml

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from manager.apko.lockfile_parser import reconcile
from versioning.models import DependencyRecord, PackageFileContent
from versioning.parser import extract_dependencies

logger = logging.getLogger(__name__)

FileReader = Callable[[str], Optional[str]]


def get_sibling_file_name(file_name: str, sibling_name: str) -> str:
    """Return the path of ``sibling_name`` next to ``file_name``."""
    return os.path.join(os.path.dirname(file_name), sibling_name)


def read_local_file(path: str) -> Optional[str]:
    """Read a UTF-8 file, returning None when it cannot be read."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        return None
    except (IOError, UnicodeDecodeError) as e:
        logger.warning("Failed to read %s: %s", path, e)
        return None


def _is_base_package(record: DependencyRecord) -> bool:
    return record.skip_reason is not None and record.dep_name in Constants.APKO_BASE_PACKAGES


def extract_package_file(
    content: str,
    package_file: str,
    read_file: FileReader = read_local_file,
) -> Optional[PackageFileContent]:
    """Extract APK dependencies from an apko.yaml document.

    Args:
        content: apko.yaml text.
        package_file: Path of the apko.yaml (used to locate the lock file).
        read_file: Callable returning file text or None; reads from disk by default.

    Returns:
        PackageFileContent, or None when the document cannot be parsed or
        declares no (non-base) packages.
    """
    logger.debug("apko.extract_package_file(%s)", package_file)
    try:
        parsed = yaml.safe_load(content)
    except yaml.YAMLError as e:
        logger.debug("Error parsing apko YAML configuration %s: %s", package_file, e)
        return None

    if not isinstance(parsed, dict):
        return None
    contents = parsed.get("contents")
    if not isinstance(contents, dict):
        return None
    packages = contents.get("packages")
    if not isinstance(packages, list):
        return None

    repositories = contents.get("repositories")
    registry_urls: Optional[List[str]] = None
    if isinstance(repositories, list) and repositories:
        registry_urls = [str(r) for r in repositories]

    records = extract_dependencies((str(p) for p in packages), registry_urls)
    deps = [r for r in records if not _is_base_package(r)]
    if not deps:
        logger.debug("No dependencies found in %s", package_file)
        return None

    lock_file_name = get_sibling_file_name(package_file, Constants.APKO_LOCK_FILE)
    lock_content = read_file(lock_file_name)
    result = reconcile(deps, lock_content, lock_file_name, registry_urls)

    if is_debug_enabled(logger):
        logger.debug(
            "Extracted apko dependencies",
            extra=extra_context(
                event="extract",
                component="apko",
                action="extract_package_file",
                outcome="locked" if result.lock_sources else "unlocked",
                count=len(result.records),
                package_file=package_file,
            ),
        )
    return PackageFileContent(deps=result.records, lock_files=result.lock_sources)
