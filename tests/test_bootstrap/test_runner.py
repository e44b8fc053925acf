"""Tests for the external command runner.

These run the real Python interpreter as the child process, so no package
manager or container tool is needed.
"""

from __future__ import annotations

import io
import sys
from pathlib import Path

import pytest
from pydantic import ValidationError
from rich.console import Console

from stackseed.bootstrap.runner import (
    CommandError,
    CommandResult,
    CommandRunner,
    CommandSpec,
    StdioConfig,
    find_fatal_marker,
)

pytestmark = pytest.mark.unit


def _python(code: str, cwd: Path, **kwargs) -> CommandSpec:
    return CommandSpec(command=sys.executable, args=["-c", code], cwd=cwd, **kwargs)


def _quiet_console() -> Console:
    return Console(file=io.StringIO(), width=120)


@pytest.fixture
def runner() -> CommandRunner:
    return CommandRunner(console=_quiet_console())


class TestModels:
    def test_stdio_defaults(self):
        stdio = StdioConfig()
        assert (stdio.stdin, stdio.stdout, stdio.stderr) == ("inherit", "pipe", "pipe")

    def test_stdio_rejects_unknown_mode(self):
        with pytest.raises(ValidationError):
            StdioConfig(stdout="file")

    def test_display(self, tmp_path):
        spec = CommandSpec(command="yarn", args=["dlx", "@yarnpkg/sdks", "vs code"], cwd=tmp_path)
        assert spec.argv == ["yarn", "dlx", "@yarnpkg/sdks", "vs code"]
        assert spec.display == "yarn dlx @yarnpkg/sdks 'vs code'"

    def test_result_ok(self):
        assert CommandResult(returncode=0).ok
        assert not CommandResult(returncode=1).ok
        assert not CommandResult(returncode=0, fatal_marker="daemon").ok

    def test_error_message_includes_stderr(self, tmp_path):
        spec = CommandSpec(command="yarn", args=["install"], cwd=tmp_path)
        err = CommandError(spec, "exited with status 1", CommandResult(returncode=1, stderr="YN0001"))
        assert "`yarn install` exited with status 1" in str(err)
        assert "YN0001" in str(err)
        assert err.spec is spec
        assert err.result.returncode == 1


class TestFindFatalMarker:
    def test_match_case_insensitive(self):
        markers = ["Cannot connect to the Docker daemon"]
        assert find_fatal_marker(markers, "error: cannot connect to the docker daemon at unix://") == markers[0]

    def test_searches_all_outputs(self):
        assert find_fatal_marker(["command not found"], "", "sh: docker: command not found") == "command not found"

    def test_no_match(self):
        assert find_fatal_marker(["boom"], "all good") is None

    def test_no_markers(self):
        assert find_fatal_marker([], "anything") is None


class TestRun:
    async def test_success(self, runner, tmp_path):
        result = await runner.run(_python("print('hi')", tmp_path))
        assert result.ok
        assert result.stdout == "hi"
        assert result.duration_seconds >= 0

    async def test_runs_in_cwd(self, runner, tmp_path):
        result = await runner.run(_python("import os; print(os.getcwd())", tmp_path))
        assert Path(result.stdout).resolve() == tmp_path.resolve()

    async def test_env_overlay(self, runner, tmp_path):
        spec = _python("import os; print(os.environ['STACKSEED_X'])", tmp_path, env={"STACKSEED_X": "1"})
        result = await runner.run(spec)
        assert result.stdout == "1"

    async def test_nonzero_exit_raises(self, runner, tmp_path):
        spec = _python("import sys; sys.stderr.write('bad things'); sys.exit(2)", tmp_path)
        with pytest.raises(CommandError) as info:
            await runner.run(spec)
        assert info.value.result.returncode == 2
        assert info.value.result.stderr == "bad things"
        assert "exited with status 2" in str(info.value)

    async def test_fatal_marker_with_zero_exit_raises(self, runner, tmp_path):
        spec = _python(
            "import sys; sys.stderr.write('Cannot connect to the Docker daemon')",
            tmp_path,
            fatal_markers=["Cannot connect to the Docker daemon"],
        )
        with pytest.raises(CommandError) as info:
            await runner.run(spec)
        assert info.value.result.returncode == 0
        assert info.value.result.fatal_marker == "Cannot connect to the Docker daemon"

    async def test_spawn_error_raises(self, runner, tmp_path):
        spec = CommandSpec(command="stackseed-no-such-binary-xyz", cwd=tmp_path)
        with pytest.raises(CommandError) as info:
            await runner.run(spec)
        assert info.value.result is None
        assert isinstance(info.value.__cause__, OSError)

    async def test_ignored_stdout_is_empty(self, runner, tmp_path):
        spec = _python("print('hidden')", tmp_path, stdio=StdioConfig(stdout="ignore"))
        result = await runner.run(spec)
        assert result.stdout == ""

    async def test_reports_outcome_on_console(self, tmp_path):
        console = _quiet_console()
        await CommandRunner(console=console).run(_python("pass", tmp_path, label="noop"))
        assert "noop" in console.file.getvalue()


class TestRunSequence:
    async def test_runs_in_order(self, runner, tmp_path):
        log = tmp_path / "log.txt"
        specs = [
            _python(f"open({str(log)!r}, 'a').write('{n}')", tmp_path) for n in ("1", "2", "3")
        ]
        results = await runner.run_sequence(specs)
        assert len(results) == 3
        assert log.read_text() == "123"

    async def test_stops_at_first_failure(self, runner, tmp_path):
        marker = tmp_path / "ran.txt"
        specs = [
            _python("import sys; sys.exit(1)", tmp_path),
            _python(f"open({str(marker)!r}, 'w').write('x')", tmp_path),
        ]
        with pytest.raises(CommandError):
            await runner.run_sequence(specs)
        assert not marker.exists()
