"""Data models for APK versioning, extraction and lock reconciliation."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional, Tuple


class Ordering(IntEnum):
    """Result of a version comparison."""
    LESS = -1
    EQUAL = 0
    GREATER = 1


class SkipReason(Enum):
    """Why a dependency record carries no version."""
    NOT_A_VERSION = "not-a-version"


@dataclass(frozen=True)
class ParsedVersion:
    """APK version split at the first hyphen.

    ``numeric_segments`` holds every digit run of the raw string and only
    backs the major/minor/patch accessors.
    """
    release: str
    revision: str
    numeric_segments: Tuple[int, ...]


@dataclass(frozen=True)
class Pinned:
    """Token pinned with ``=`` or a bare hyphen."""
    name: str
    version: str
    separator: str


@dataclass(frozen=True)
class RangeConstraint:
    """Token carrying a range operator (recognized, never satisfied)."""
    name: str
    operator: str
    version: str


@dataclass(frozen=True)
class Unversioned:
    """Token with no recognizable version."""
    raw: str


@dataclass(frozen=True)
class DependencyRecord:
    """One extracted package declaration (or a lock-only transitive package)."""
    datasource: str
    dep_name: str
    versioning: str
    current_value: Optional[str] = None
    locked_version: Optional[str] = None
    skip_reason: Optional[SkipReason] = None
    registry_urls: Optional[Tuple[str, ...]] = None
    constraint_operator: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Render the record for JSON export, omitting unset fields."""
        data: Dict[str, Any] = {
            "datasource": self.datasource,
            "depName": self.dep_name,
            "versioning": self.versioning,
        }
        if self.current_value is not None:
            data["currentValue"] = self.current_value
        if self.locked_version is not None:
            data["lockedVersion"] = self.locked_version
        if self.skip_reason is not None:
            data["skipReason"] = self.skip_reason.value
        if self.registry_urls:
            data["registryUrls"] = list(self.registry_urls)
        if self.constraint_operator is not None:
            data["constraintOperator"] = self.constraint_operator
        return data


@dataclass(frozen=True)
class LockedPackage:
    """Single package entry of apko.lock.json."""
    name: str
    version: str
    origin: Optional[str] = None
    arch: Optional[str] = None
    size: Optional[int] = None
    checksum: Optional[str] = None


@dataclass(frozen=True)
class ApkoLockFile:
    """Parsed apko.lock.json keyed by architecture."""
    schema_version: Optional[int]
    archs: Dict[str, Tuple[LockedPackage, ...]]


@dataclass
class ReconcileResult:
    """Records after lock reconciliation and the lock files that fed them."""
    records: List[DependencyRecord]
    lock_sources: Optional[List[str]] = None


@dataclass
class PackageFileContent:
    """Extraction outcome for one apko.yaml."""
    deps: List[DependencyRecord]
    lock_files: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Render the extraction result for JSON export."""
        return {
            "deps": [dep.to_dict() for dep in self.deps],
            "lockFiles": self.lock_files,
        }


@dataclass(frozen=True)
class FileChange:
    """Updated artifact content to be committed."""
    type: str
    path: str
    contents: bytes


@dataclass(frozen=True)
class ArtifactError:
    """Failure regenerating a lock file."""
    lock_file: str
    stderr: str


@dataclass(frozen=True)
class ArtifactResult:
    """Either a file change or an artifact error."""
    file: Optional[FileChange] = None
    artifact_error: Optional[ArtifactError] = None

    def to_dict(self) -> Dict[str, Any]:
        """Render the result for JSON export (file contents decoded as text)."""
        if self.artifact_error is not None:
            return {
                "artifactError": {
                    "lockFile": self.artifact_error.lock_file,
                    "stderr": self.artifact_error.stderr,
                }
            }
        if self.file is not None:
            return {
                "file": {
                    "type": self.file.type,
                    "path": self.file.path,
                    "contents": self.file.contents.decode("utf-8", errors="replace"),
                }
            }
        return {}


@dataclass(frozen=True)
class Release:
    """One available version published in a registry."""
    version: str
    release_timestamp: Optional[int] = None


@dataclass
class ReleaseResult:
    """Datasource lookup outcome."""
    releases: List[Release] = field(default_factory=list)
    registry_url: Optional[str] = None
