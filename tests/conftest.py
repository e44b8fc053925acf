"""Shared pytest fixtures for the stackseed test suite.

Provides reusable fixtures for:
- A small template tree with root and sub-project manifests
- A ``Config`` pointed at that tree
- A scripted prompter standing in for interactive input
- A mocked command runner that never spawns processes
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from stackseed.bootstrap.runner import CommandResult, CommandRunner
from stackseed.config import Config
from stackseed.prompts import PromptCancelled


# ---------------------------------------------------------------------------
# Template tree
# ---------------------------------------------------------------------------

API_MANIFEST: dict[str, Any] = {
    "name": "template-api",
    "version": "0.0.0",
    "scripts": {"dev": "tsx watch src/index.ts"},
    "dependencies": {"express": "^4.0.0", "left-pad": "1.3.0"},
    "devDependencies": {"typescript": "^5.0.0"},
}

WEB_MANIFEST: dict[str, Any] = {
    "name": "template-web",
    "version": "0.0.0",
    "dependencies": {"react": "^18.0.0"},
}

ROOT_MANIFEST: dict[str, Any] = {"name": "template", "private": True}


def _write(path: Path, content: str | bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")


@pytest.fixture
def template_tree(tmp_path: Path) -> Path:
    """A minimal template tree laid out like the bundled one."""
    root = tmp_path / "template"
    _write(root / "package.json", json.dumps(ROOT_MANIFEST, indent=2))
    _write(root / "docker-compose.yml", "services:\n  db:\n    image: mysql:8.4\n")
    _write(root / "api" / "package.json", json.dumps(API_MANIFEST, indent=2))
    _write(root / "api" / "src" / "index.ts", "console.log('api');\n")
    _write(root / "api" / "logo.bin", bytes(range(256)))
    _write(root / "web" / "package.json", json.dumps(WEB_MANIFEST, indent=2))
    _write(root / "web" / "src" / "App.tsx", "export default function App() {}\n")
    _write(root / "web" / "src" / "components" / ".gitkeep", "")
    return root


@pytest.fixture
def config(template_tree: Path) -> Config:
    """Config using the temporary template tree and a small pin table."""
    return Config(
        template_dir=template_tree,
        version_pins={"express": "^4.19.2", "react": "^18.3.1", "typescript": "^5.5.3"},
    )


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Directory the generated project is created in."""
    path = tmp_path / "work"
    path.mkdir()
    return path


# ---------------------------------------------------------------------------
# Prompter / runner doubles
# ---------------------------------------------------------------------------


class ScriptedPrompter:
    """Answers prompts from fixed queues and records every question asked.

    A queued ``PromptCancelled`` instance is raised instead of returned.
    """

    def __init__(
        self,
        texts: Iterable[Any] = (),
        confirms: Iterable[Any] = (),
        secrets: Iterable[Any] = (),
    ) -> None:
        self.texts = list(texts)
        self.confirms = list(confirms)
        self.secrets = list(secrets)
        self.asked: list[str] = []

    @staticmethod
    def _next(queue: list[Any], message: str) -> Any:
        if not queue:
            raise AssertionError(f"Unexpected prompt: {message}")
        answer = queue.pop(0)
        if isinstance(answer, PromptCancelled):
            raise answer
        return answer

    def text(self, message: str, default: str | None = None) -> str:
        self.asked.append(message)
        answer = self._next(self.texts, message)
        return default if answer is None else answer

    def secret(self, message: str) -> str:
        self.asked.append(message)
        return self._next(self.secrets, message)

    def confirm(self, message: str, default: bool = True) -> bool:
        self.asked.append(message)
        return self._next(self.confirms, message)


@pytest.fixture
def mock_runner() -> MagicMock:
    """A CommandRunner whose commands all succeed without spawning anything."""
    runner = MagicMock(spec=CommandRunner)
    runner.run = AsyncMock(return_value=CommandResult(returncode=0))

    async def _sequence(specs):
        return [await runner.run(spec) for spec in specs]

    runner.run_sequence = AsyncMock(side_effect=_sequence)
    return runner


@pytest.fixture
def make_prompter():
    """Factory for :class:`ScriptedPrompter` instances."""
    return ScriptedPrompter
