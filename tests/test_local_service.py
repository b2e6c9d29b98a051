"""Tests for the local process runner."""

import sys

import pytest

from sshdeploy.exceptions import LocalExecError
from sshdeploy.services.local_service import LocalRunner

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="posix shell commands")


class TestLocalRunner:
    def test_captures_output_and_status(self):
        result = LocalRunner().run("echo hello; echo oops >&2")

        assert result.is_success
        assert result.stdout.strip() == "hello"
        assert result.stderr.strip() == "oops"

    def test_nonzero_exit_is_reported(self):
        result = LocalRunner().run("exit 3")
        assert result.returncode == 3

    def test_check_raises_on_failure(self):
        with pytest.raises(LocalExecError) as exc_info:
            LocalRunner().check("echo bad >&2; exit 1")

        assert exc_info.value.returncode == 1
        assert "bad" in exc_info.value.context

    def test_max_buffer_exceeded(self):
        with pytest.raises(LocalExecError, match="max buffer"):
            LocalRunner(max_buffer=10).run("printf '%050d' 0")

    def test_runs_in_cwd(self, tmp_path):
        (tmp_path / "marker.txt").write_text("x")
        result = LocalRunner(cwd=tmp_path).run("ls")
        assert "marker.txt" in result.stdout
