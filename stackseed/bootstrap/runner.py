"""External command execution for the bootstrap steps.

Spawns package-manager and container commands in the generated project,
shows a spinner while they run, and turns a nonzero exit, a spawn failure or
a known fatal message in the output into a :class:`CommandError`.  There is
no timeout and no retry: a command runs until its process exits.
"""

from __future__ import annotations

import asyncio
import os
import shlex
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from rich.console import Console
from rich.markup import escape

from ..utils import console as default_console
from ..utils import create_progress

StreamMode = Literal["inherit", "pipe", "ignore"]

_STREAM_TARGETS: dict[str, int | None] = {
    "inherit": None,
    "pipe": subprocess.PIPE,
    "ignore": subprocess.DEVNULL,
}


class StdioConfig(BaseModel):
    """How each standard stream of the child process is wired."""

    stdin: StreamMode = "inherit"
    stdout: StreamMode = "pipe"
    stderr: StreamMode = "pipe"


class CommandSpec(BaseModel):
    """One external process invocation."""

    command: str = Field(..., min_length=1)
    args: list[str] = Field(default_factory=list)
    cwd: Path
    stdio: StdioConfig = Field(default_factory=StdioConfig)
    env: dict[str, str] = Field(default_factory=dict, description="Merged over os.environ")
    label: str = Field(default="", description="Text shown next to the spinner")
    fatal_markers: list[str] = Field(default_factory=list)

    @property
    def argv(self) -> list[str]:
        return [self.command, *self.args]

    @property
    def display(self) -> str:
        """The command line as a user would type it."""
        return shlex.join(self.argv)


@dataclass
class CommandResult:
    """Outcome of a finished process."""

    returncode: int
    stdout: str = ""
    stderr: str = ""
    duration_seconds: float = 0.0
    fatal_marker: str | None = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and self.fatal_marker is None


class CommandError(Exception):
    """Raised when a command fails to start, exits nonzero, or reports a fatal error."""

    def __init__(self, spec: CommandSpec, message: str, result: CommandResult | None = None) -> None:
        self.spec = spec
        self.result = result
        text = f"`{spec.display}` {message}"
        if result is not None and result.stderr:
            text += f"\n{result.stderr}"
        super().__init__(text)


def find_fatal_marker(markers: list[str], *outputs: str) -> str | None:
    """Return the first marker found (case-insensitively) in any of *outputs*."""
    haystack = "\n".join(outputs).lower()
    for marker in markers:
        if marker.lower() in haystack:
            return marker
    return None


class CommandRunner:
    """Runs :class:`CommandSpec` invocations one at a time."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or default_console

    async def run(self, spec: CommandSpec) -> CommandResult:
        """Start the process, wait for it to exit and report the outcome.

        Returns:
            The :class:`CommandResult` of a successful run.

        Raises:
            CommandError: If the process could not be spawned, exited with a
                nonzero status, or its captured output contains one of the
                spec's ``fatal_markers``.
        """
        label = spec.label or spec.display
        merged_env = {**os.environ, **spec.env} if spec.env else None

        start = time.monotonic()
        with create_progress(self.console) as progress:
            progress.add_task(label, total=None)
            try:
                process = await asyncio.create_subprocess_exec(
                    *spec.argv,
                    stdin=_STREAM_TARGETS[spec.stdio.stdin],
                    stdout=_STREAM_TARGETS[spec.stdio.stdout],
                    stderr=_STREAM_TARGETS[spec.stdio.stderr],
                    cwd=str(spec.cwd),
                    env=merged_env,
                )
            except OSError as exc:
                self.console.print(f"  [red]x[/red] {label}")
                self.console.print(f"    [dim]{escape(str(exc))}[/dim]")
                raise CommandError(spec, f"could not be started: {exc}") from exc

            stdout_bytes, stderr_bytes = await process.communicate()

        result = CommandResult(
            returncode=process.returncode if process.returncode is not None else -1,
            stdout=(stdout_bytes or b"").decode("utf-8", errors="replace").strip(),
            stderr=(stderr_bytes or b"").decode("utf-8", errors="replace").strip(),
            duration_seconds=time.monotonic() - start,
        )
        result.fatal_marker = find_fatal_marker(spec.fatal_markers, result.stderr, result.stdout)

        if result.ok:
            self.console.print(f"  [green]+[/green] {label} [dim]({result.duration_seconds:.1f}s)[/dim]")
            return result

        self.console.print(f"  [red]x[/red] {label}")
        if result.stderr:
            self.console.print(f"    [dim]{escape(result.stderr)}[/dim]", highlight=False)

        if result.fatal_marker is not None:
            raise CommandError(spec, f"reported a fatal error: {result.fatal_marker}", result)
        raise CommandError(spec, f"exited with status {result.returncode}", result)

    async def run_sequence(self, specs: list[CommandSpec]) -> list[CommandResult]:
        """Run *specs* strictly in order, stopping at the first failure."""
        results: list[CommandResult] = []
        for spec in specs:
            results.append(await self.run(spec))
        return results
