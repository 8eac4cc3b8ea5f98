"""apko manager: apko.yaml extraction, pin updates and lock regeneration."""

from constants import Constants
from .artifacts import update_artifacts
from .extract import extract_package_file
from .lockfile_parser import LockFileParseError, parse_apko_lock, reconcile
from .update import update_dependency

SUPPORTS_LOCK_FILE_MAINTENANCE = True
MANAGER_FILE_PATTERNS = [r"(^|/)apko\.ya?ml$"]
SUPPORTED_DATASOURCES = [Constants.DATASOURCE_ID]

__all__ = [
    "LockFileParseError",
    "extract_package_file",
    "parse_apko_lock",
    "reconcile",
    "update_artifacts",
    "update_dependency",
]
