"""Lockfile parser and reconciler for apko (apko.lock.json).

apko.lock.json is a JSON document with a ``schema_version`` and an ``archs``
mapping from architecture name to ``{"packages": [...]}`` or to a bare package
list. Reconciliation annotates declared records with their locked versions
and adds lock-only (transitive) packages.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import yaml

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from versioning.models import ApkoLockFile, DependencyRecord, LockedPackage, ReconcileResult

logger = logging.getLogger(__name__)

LockContent = Union[str, bytes, Mapping[str, Any]]


class LockFileParseError(ValueError):
    """Raised when apko.lock.json does not have the expected structure."""


def _load(content: Union[str, bytes]) -> Any:
    if isinstance(content, bytes):
        content = content.decode("utf-8")
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        pass
    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise LockFileParseError(f"invalid lock file syntax: {e}") from e


def _parse_package(entry: Any, arch_name: str) -> LockedPackage:
    if not isinstance(entry, dict):
        raise LockFileParseError(f"package entry in arch '{arch_name}' is not a mapping")
    name = entry.get("name")
    version = entry.get("version")
    if not isinstance(name, str) or not isinstance(version, str):
        raise LockFileParseError(f"package entry in arch '{arch_name}' lacks name/version")
    size = entry.get("size")
    return LockedPackage(
        name=name,
        version=version,
        origin=entry.get("origin"),
        arch=entry.get("arch"),
        size=size if isinstance(size, int) else None,
        checksum=entry.get("checksum"),
    )


def parse_apko_lock(content: LockContent) -> ApkoLockFile:
    """Parse apko.lock.json content.

    Args:
        content: Raw text/bytes, or an already decoded mapping.

    Returns:
        ApkoLockFile

    Raises:
        LockFileParseError: On syntax errors or an unexpected structure.
    """
    data = content if isinstance(content, Mapping) else _load(content)
    if not isinstance(data, Mapping):
        raise LockFileParseError("lock file root is not a mapping")

    schema_version = data.get("schema_version")
    if schema_version is not None and not isinstance(schema_version, int):
        raise LockFileParseError("schema_version is not an integer")

    raw_archs = data.get("archs") or {}
    if not isinstance(raw_archs, Mapping):
        raise LockFileParseError("archs is not a mapping")

    archs: Dict[str, Tuple[LockedPackage, ...]] = {}
    for arch_name, arch_data in raw_archs.items():
        if arch_data is None:
            archs[str(arch_name)] = ()
            continue
        if isinstance(arch_data, list):
            packages = arch_data
        elif isinstance(arch_data, Mapping):
            packages = arch_data.get("packages") or []
        else:
            raise LockFileParseError(f"arch '{arch_name}' is neither a mapping nor a list")
        if not isinstance(packages, list):
            raise LockFileParseError(f"packages of arch '{arch_name}' is not a list")
        archs[str(arch_name)] = tuple(_parse_package(p, str(arch_name)) for p in packages)

    return ApkoLockFile(schema_version=schema_version, archs=archs)


def locked_versions(lock_file: ApkoLockFile) -> Dict[str, str]:
    """Map package name to locked version across all architectures.

    Later architectures overwrite earlier ones for the same name. This is
    a known ambiguity: conflicting per-arch versions are not reported.
    """
    versions: Dict[str, str] = {}
    for packages in lock_file.archs.values():
        for pkg in packages:
            versions[pkg.name] = pkg.version
    return versions


def reconcile(
    records: Iterable[DependencyRecord],
    lock_content: Optional[LockContent] = None,
    lock_file_name: Optional[str] = None,
    registry_urls: Optional[Iterable[str]] = None,
) -> ReconcileResult:
    """Merge declared records with apko.lock.json.

    A missing or malformed lock file disables enrichment only: the records
    come back unchanged and ``lock_sources`` is None.

    Args:
        records: Records from extraction.
        lock_content: Lock file text/bytes/mapping, or None.
        lock_file_name: Name reported in ``lock_sources`` (default: the
            configured apko lock file name).
        registry_urls: Repository URLs for synthesized transitive records.

    Returns:
        ReconcileResult with a new list of records.
    """
    declared: List[DependencyRecord] = list(records)
    lock_file_name = lock_file_name or Constants.APKO_LOCK_FILE
    if lock_content is None or lock_content == "" or lock_content == b"":
        return ReconcileResult(records=declared, lock_sources=None)

    try:
        lock_file = parse_apko_lock(lock_content)
    except (LockFileParseError, UnicodeDecodeError) as e:
        logger.debug("Error parsing %s: %s", lock_file_name, e)
        return ReconcileResult(records=declared, lock_sources=None)

    versions = locked_versions(lock_file)

    enriched: List[DependencyRecord] = []
    for record in declared:
        if record.dep_name in versions:
            record = dataclasses.replace(record, locked_version=versions[record.dep_name])
        enriched.append(record)

    known = {record.dep_name for record in declared}
    urls = tuple(registry_urls) if registry_urls else None
    for name, version in versions.items():
        if name in known:
            continue
        enriched.append(
            DependencyRecord(
                datasource=Constants.DATASOURCE_ID,
                dep_name=name,
                versioning=Constants.VERSIONING_ID,
                current_value=version,
                locked_version=version,
                registry_urls=urls,
            )
        )

    if is_debug_enabled(logger):
        logger.debug(
            "Found %s with locked versions",
            lock_file_name,
            extra=extra_context(
                event="reconcile",
                component="apko",
                action="reconcile",
                outcome="success",
                count=len(enriched),
                lock_file=lock_file_name,
            ),
        )
    return ReconcileResult(records=enriched, lock_sources=[lock_file_name])
