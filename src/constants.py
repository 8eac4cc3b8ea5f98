"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    CONNECTION_ERROR = 2
    FILE_ERROR = 1
    EXIT_WARNINGS = 3
    UPDATE_FAILED = 4


class Commands(Enum):
    """Sub-commands supported by the program.

    Args:
        Enum (string): Sub-commands supported by the program.
    """

    EXTRACT = "extract"
    UPDATE = "update"
    COMPARE = "compare"
    RELEASES = "releases"
    LOCK = "lock"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    DATASOURCE_ID = "apk"
    VERSIONING_ID = "apk"
    APKO_LOCK_FILE = "apko.lock.json"
    APKO_LOCK_COMMAND = "apko"
    APKO_LOCK_TIMEOUT = 600  # Seconds allowed for "apko lock"
    APKO_BASE_PACKAGES = ["alpine-base", "wolfi-base", "base"]
    APKINDEX_FILE = "APKINDEX"
    APKINDEX_ARCHIVE = "APKINDEX.tar.gz"
    DEFAULT_ARCH = "x86_64"
    REGISTRY_URLS_APK = [
        "https://dl-cdn.alpinelinux.org/alpine/v3.19/main",
        "https://dl-cdn.alpinelinux.org/alpine/v3.19/community",
    ]
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "APKGATE_LOG_LEVEL"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    HTTP_CACHE_TTL_SEC = 300
