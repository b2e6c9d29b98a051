"""Shared fixtures: in-memory stand-ins for the sessions and local processes."""

import io
from typing import Dict, List, Optional

import pytest
from rich.console import Console

from sshdeploy.core.config_loader import resolve_config
from sshdeploy.exceptions import LocalExecError, RemoteCommandError, SessionError
from sshdeploy.logger import DeployLogger
from sshdeploy.models.results import ExecutionResult, SSHResult

GNU_VERSION = "tar (GNU tar) 1.34\nCopyright (C) 2021 Free Software Foundation, Inc.\n"
BSD_VERSION = "bsdtar 3.5.3 - libarchive 3.5.3 zlib/1.2.12 liblzma/5.0.5 bz2lib/1.0.8\n"


class FakeSession:
    """Records remote commands; fails any command containing a marker."""

    def __init__(self, fail_on: Optional[str] = None, connect_error: Optional[Exception] = None):
        self.fail_on = fail_on
        self.connect_error = connect_error
        self.commands: List[str] = []
        self.connect_calls = 0
        self.close_calls = 0
        self.events: List[str] = []

    def connect(self):
        self.connect_calls += 1
        if self.connect_error:
            raise SessionError("h", self.connect_error)
        self.events.append("connect")

    def execute(self, command, on_output=None, check=True):
        self.commands.append(command)
        self.events.append(f"remote:{command}")
        if on_output:
            on_output(f"ran {command}")
        if self.fail_on and self.fail_on in command:
            if check:
                raise RemoteCommandError(command, 1, "boom")
            return SSHResult(returncode=1, stdout="boom", command=command)
        return SSHResult(returncode=0, stdout=f"ran {command}", host="h", command=command)

    def close(self):
        self.close_calls += 1
        self.events.append("close")


class FakeRunner:
    """Records local commands; answers `tar --version` with a chosen dialect."""

    def __init__(self, version_output: str = GNU_VERSION, fail_on: Optional[str] = None):
        self.version_output = version_output
        self.fail_on = fail_on
        self.commands: List[str] = []
        self.events: Optional[List[str]] = None

    def run(self, command):
        self.commands.append(command)
        if self.events is not None:
            self.events.append(f"local:{command}")
        if self.fail_on and self.fail_on in command:
            return ExecutionResult(returncode=2, stderr="tar: failure", command=command)
        if command == "tar --version":
            return ExecutionResult(returncode=0, stdout=self.version_output, command=command)
        return ExecutionResult(returncode=0, stdout="ok", command=command)

    def check(self, command):
        result = self.run(command)
        if result.is_failure:
            raise LocalExecError(command, returncode=result.returncode, stderr=result.stderr)
        return result


class FakeTransfer:
    """Context-managed transfer session that records uploads."""

    def __init__(self, log: Dict[str, list], fail: Optional[Exception] = None):
        self.log = log
        self.fail = fail

    def __enter__(self):
        self.log["opened"].append(True)
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb):
        self.log["closed"].append(True)
        return False

    def upload(self, local_path, remote_path):
        if self.fail:
            raise self.fail
        self.log["uploads"].append(("file", str(local_path), remote_path))
        return remote_path

    def upload_tree(self, local_dir, remote_dir):
        if self.fail:
            raise self.fail
        self.log["uploads"].append(("tree", str(local_dir), remote_dir))
        return []


@pytest.fixture
def transfer_log():
    return {"opened": [], "closed": [], "uploads": []}


@pytest.fixture
def transfer_factory(transfer_log):
    """Factory accepted by DeploymentPipeline(transfer_factory=...)."""

    def factory(config, fail=None):
        return FakeTransfer(transfer_log, fail=fail)

    return factory


@pytest.fixture
def console_output():
    return io.StringIO()


@pytest.fixture
def logger(console_output):
    """Quiet logger without a log file."""
    return DeployLogger(
        "h",
        "test",
        log_dir=None,
        output_console=Console(file=console_output, width=200),
    )


@pytest.fixture
def artifact_dir(tmp_path):
    """A small build directory."""
    dist = tmp_path / "dist"
    (dist / "assets").mkdir(parents=True)
    (dist / "index.html").write_text("<html></html>")
    (dist / "assets" / "app.js").write_text("console.log(1)")
    return dist


@pytest.fixture
def make_config(artifact_dir):
    """Build a resolved config with sensible test defaults."""

    def _make(**overrides):
        options = {
            "host": "h",
            "username": "u",
            "password": "p",
            "from": str(artifact_dir),
            "to": "/var/www/app",
        }
        options.update(overrides)
        return resolve_config(options)

    return _make
