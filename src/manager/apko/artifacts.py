"""Lock file regeneration for apko via ``apko lock``."""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Callable, List, Optional, Sequence

from constants import Constants
from manager.apko.extract import get_sibling_file_name
from versioning.models import ArtifactError, ArtifactResult, FileChange

logger = logging.getLogger(__name__)

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


def _read_bytes(path: str) -> Optional[bytes]:
    try:
        with open(path, "rb") as f:
            return f.read()
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.warning("Unable to read %s: %s", path, e)
        return None


def _failure_text(exc: BaseException) -> str:
    stderr = getattr(exc, "stderr", None)
    if isinstance(stderr, bytes):
        stderr = stderr.decode("utf-8", errors="replace")
    if stderr:
        return str(stderr).strip()
    return str(exc)


def update_artifacts(
    package_file_name: str,
    updated_deps: Sequence[str],
    new_package_file_content: str,
    is_lock_file_maintenance: bool = False,
    runner: Optional[Runner] = None,
) -> Optional[List[ArtifactResult]]:
    """Regenerate apko.lock.json after apko.yaml changed.

    ``apko lock`` cannot update single packages, so any update (or lock file
    maintenance) regenerates the whole lock file.

    Args:
        package_file_name: Path of the apko.yaml.
        updated_deps: Names of dependencies changed in the package file.
        new_package_file_content: apko.yaml text to write before locking.
        is_lock_file_maintenance: Regenerate even without updated deps.
        runner: ``subprocess.run`` compatible callable (default: subprocess.run).

    Returns:
        None when there is nothing to report, otherwise a single-element
        list holding a file change or an artifact error.
    """
    lock_file_name = get_sibling_file_name(package_file_name, Constants.APKO_LOCK_FILE)
    old_lock_content = _read_bytes(lock_file_name)
    if not old_lock_content:
        logger.debug("No %s found", lock_file_name)
        return None

    if not is_lock_file_maintenance and not updated_deps:
        logger.debug("No updated apko packages - returning None")
        return None

    run = runner or subprocess.run
    cwd = os.path.dirname(package_file_name) or None
    cmd = [
        Constants.APKO_LOCK_COMMAND,
        "lock",
        os.path.basename(package_file_name),
        "--output",
        os.path.basename(lock_file_name),
    ]
    try:
        with open(package_file_name, "w", encoding="utf-8") as f:
            f.write(new_package_file_content)

        logger.debug(
            "Regenerating %s (maintenance=%s, updated=%d)",
            lock_file_name, is_lock_file_maintenance, len(updated_deps),
        )
        run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=Constants.APKO_LOCK_TIMEOUT,
            check=True,
        )
        new_lock_content = _read_bytes(lock_file_name)
    except (OSError, subprocess.SubprocessError) as e:
        logger.warning("Error updating %s: %s", lock_file_name, e)
        return [ArtifactResult(artifact_error=ArtifactError(lock_file=lock_file_name, stderr=_failure_text(e)))]

    if not new_lock_content or new_lock_content == old_lock_content:
        logger.debug("%s unchanged", lock_file_name)
        return None

    logger.debug("Returning updated %s", lock_file_name)
    return [ArtifactResult(file=FileChange(type="addition", path=lock_file_name, contents=new_lock_content))]
