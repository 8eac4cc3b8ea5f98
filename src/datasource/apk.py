"""APK datasource: available package versions from APKINDEX archives.

An APK repository publishes ``APKINDEX.tar.gz`` per architecture. The
archive holds a plain-text ``APKINDEX`` file made of blank-line separated
records, one ``<letter>:<value>`` field per line (``P`` package name,
``V`` version, ``t`` build timestamp, ...).
"""
from __future__ import annotations

import io
import logging
import tarfile
from typing import Dict, Iterable, List, Optional

from common.http_client import robust_get
from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from versioning import apk as apk_versioning
from versioning.models import Release, ReleaseResult

logger = logging.getLogger(__name__)


def parse_apkindex(text: str) -> List[Dict[str, str]]:
    """Split APKINDEX text into records of single-letter fields."""
    entries: List[Dict[str, str]] = []
    current: Dict[str, str] = {}
    for line in text.splitlines():
        if not line.strip():
            if current:
                entries.append(current)
                current = {}
            continue
        key, sep, value = line.partition(":")
        if sep and key:
            current[key] = value
    if current:
        entries.append(current)
    return entries


def read_apkindex_archive(data: bytes) -> Optional[str]:
    """Return the APKINDEX text from an APKINDEX.tar.gz payload.

    Signed indexes are several concatenated gzip streams; the index member
    follows the signature member.
    """
    try:
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as archive:
            for member in archive:
                if member.name != Constants.APKINDEX_FILE:
                    continue
                extracted = archive.extractfile(member)
                if extracted is None:
                    return None
                return extracted.read().decode("utf-8", errors="replace")
    except (tarfile.TarError, OSError, EOFError) as e:
        logger.debug("Failed to read APKINDEX archive: %s", e)
    return None


def _releases_for(entries: Iterable[Dict[str, str]], package_name: str) -> List[Release]:
    seen: Dict[str, Release] = {}
    for entry in entries:
        if entry.get("P") != package_name or not entry.get("V"):
            continue
        timestamp = entry.get("t")
        seen[entry["V"]] = Release(
            version=entry["V"],
            release_timestamp=int(timestamp) if timestamp and timestamp.isdigit() else None,
        )
    ordered = apk_versioning.sort_versions(seen)
    return [seen[v] for v in ordered]


class ApkDatasource:
    """Look up package versions in APK repositories."""

    id = Constants.DATASOURCE_ID
    custom_registry_support = True

    def __init__(self, default_registry_urls: Optional[List[str]] = None, arch: Optional[str] = None):
        self.default_registry_urls = list(default_registry_urls or Constants.REGISTRY_URLS_APK)
        self.arch = arch or Constants.DEFAULT_ARCH

    def _index_urls(self, registry_url: str, arch: str) -> List[str]:
        base = registry_url.rstrip("/")
        return [
            f"{base}/{arch}/{Constants.APKINDEX_ARCHIVE}",
            f"{base}/{Constants.APKINDEX_ARCHIVE}",
        ]

    def fetch_index(self, registry_url: str, arch: Optional[str] = None) -> Optional[List[Dict[str, str]]]:
        """Download and parse the APKINDEX of one repository."""
        for url in self._index_urls(registry_url, arch or self.arch):
            status_code, _, body = robust_get(url)
            if status_code != 200:
                logger.debug("APKINDEX not available at %s (status %s)", url, status_code)
                continue
            text = read_apkindex_archive(body)
            if text is not None:
                return parse_apkindex(text)
        return None

    def get_releases(
        self,
        package_name: str,
        registry_urls: Optional[List[str]] = None,
        arch: Optional[str] = None,
    ) -> Optional[ReleaseResult]:
        """Return the versions of ``package_name`` from the first repository listing it.

        Args:
            package_name: APK package name (``P:`` field).
            registry_urls: Repositories to query; defaults to the Alpine ones.
            arch: Architecture directory; defaults to x86_64.

        Returns:
            ReleaseResult with ascending releases, or None when not found.
        """
        if not package_name:
            return None
        for registry_url in registry_urls or self.default_registry_urls:
            entries = self.fetch_index(registry_url, arch)
            if not entries:
                continue
            releases = _releases_for(entries, package_name)
            if releases:
                if is_debug_enabled(logger):
                    logger.debug(
                        "Found APK releases",
                        extra=extra_context(
                            event="lookup",
                            component="apk_datasource",
                            action="get_releases",
                            outcome="found",
                            count=len(releases),
                            target=registry_url,
                        ),
                    )
                return ReleaseResult(releases=releases, registry_url=registry_url)
        logger.debug("Package %s not found in any APK repository", package_name)
        return None
