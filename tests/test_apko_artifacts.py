"""Tests for apko.lock.json regeneration."""

import subprocess
from unittest.mock import MagicMock

import pytest

from manager.apko.artifacts import update_artifacts
from versioning.models import ArtifactError, ArtifactResult, FileChange

OLD_LOCK = b'{"schema_version": 1, "archs": {}}'
NEW_LOCK = b'{"schema_version": 1, "archs": {"amd64": {"packages": []}}}'
NEW_YAML = "contents:\n  packages:\n    - git=2.40.0-r0\n"


@pytest.fixture
def workspace(tmp_path):
    """apko.yaml with an existing lock file."""
    package_file = tmp_path / "apko.yaml"
    package_file.write_text("contents:\n  packages:\n    - git=2.39.0-r0\n", encoding="utf-8")
    (tmp_path / "apko.lock.json").write_bytes(OLD_LOCK)
    return tmp_path


def _writing_runner(content):
    def runner(cmd, cwd=None, **kwargs):
        with open(f"{cwd}/apko.lock.json", "wb") as f:
            f.write(content)
        return subprocess.CompletedProcess(cmd, 0, "", "")
    return MagicMock(side_effect=runner)


class TestUpdateArtifacts:
    """Test update_artifacts decisions and results."""

    def test_no_lock_file(self, tmp_path):
        runner = MagicMock()
        package_file = tmp_path / "apko.yaml"
        assert update_artifacts(str(package_file), ["git"], NEW_YAML, runner=runner) is None
        runner.assert_not_called()

    def test_nothing_updated(self, workspace):
        runner = MagicMock()
        assert update_artifacts(str(workspace / "apko.yaml"), [], NEW_YAML, runner=runner) is None
        runner.assert_not_called()

    def test_regenerates_lock(self, workspace):
        runner = _writing_runner(NEW_LOCK)
        package_file = str(workspace / "apko.yaml")

        result = update_artifacts(package_file, ["git"], NEW_YAML, runner=runner)

        assert result == [
            ArtifactResult(file=FileChange(type="addition", path=str(workspace / "apko.lock.json"), contents=NEW_LOCK))
        ]
        assert (workspace / "apko.yaml").read_text(encoding="utf-8") == NEW_YAML
        args, kwargs = runner.call_args
        assert args[0] == ["apko", "lock", "apko.yaml", "--output", "apko.lock.json"]
        assert kwargs["cwd"] == str(workspace)
        assert kwargs["check"] is True

    def test_lock_file_maintenance_without_updates(self, workspace):
        runner = _writing_runner(NEW_LOCK)
        result = update_artifacts(str(workspace / "apko.yaml"), [], NEW_YAML, True, runner=runner)
        assert result[0].file.contents == NEW_LOCK

    def test_unchanged_lock(self, workspace):
        runner = _writing_runner(OLD_LOCK)
        assert update_artifacts(str(workspace / "apko.yaml"), ["git"], NEW_YAML, runner=runner) is None

    def test_command_failure(self, workspace):
        runner = MagicMock(side_effect=subprocess.CalledProcessError(1, ["apko"], output="", stderr="unknown package"))
        result = update_artifacts(str(workspace / "apko.yaml"), ["git"], NEW_YAML, runner=runner)
        assert result == [
            ArtifactResult(artifact_error=ArtifactError(lock_file=str(workspace / "apko.lock.json"), stderr="unknown package"))
        ]

    def test_missing_tool(self, workspace):
        runner = MagicMock(side_effect=FileNotFoundError("No such file or directory: 'apko'"))
        result = update_artifacts(str(workspace / "apko.yaml"), ["git"], NEW_YAML, runner=runner)
        assert result[0].artifact_error.stderr == "No such file or directory: 'apko'"
        assert result[0].to_dict()["artifactError"]["lockFile"] == str(workspace / "apko.lock.json")

    def test_unreadable_lock_file(self, tmp_path):
        """A lock path that cannot be read is treated as absent."""
        package_file = tmp_path / "apko.yaml"
        package_file.write_text("contents:\n  packages:\n    - git=2.39.0-r0\n", encoding="utf-8")
        (tmp_path / "apko.lock.json").mkdir()
        runner = MagicMock()
        assert update_artifacts(str(package_file), ["git"], NEW_YAML, runner=runner) is None
        runner.assert_not_called()
