"""Materialisation of a new project from the bundled template tree.

Copies the template, rewrites the package manifests and creates the extra
directories every generated project is expected to have.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from pydantic import BaseModel, Field

from ..config import Config
from .copier import copy_template
from .manifest import ManifestRewriter, resolve_package_name


class GeneratedProject(BaseModel):
    """What :meth:`ProjectGenerator.generate` produced."""

    root: Path
    package_name: str
    files: list[Path] = Field(default_factory=list)
    manifests: dict[str, Path] = Field(default_factory=dict)


class ProjectGenerator:
    """Copies the template tree and rewrites its manifests.

    Filesystem and manifest parse errors propagate to the caller; there is
    no rollback of a partially written tree.
    """

    def __init__(self, config: Config) -> None:
        self.config = config
        self.manifests = ManifestRewriter(config)

    async def generate(self, target_dir: str, cwd: str | Path | None = None) -> GeneratedProject:
        """Materialise the template into ``cwd / target_dir``.

        Args:
            target_dir: Directory name entered by the user.  ``"."`` targets
                the current directory itself.
            cwd: Base directory (defaults to the process working directory).

        Returns:
            A :class:`GeneratedProject` describing the written tree.
        """
        base = Path(cwd) if cwd is not None else Path.cwd()
        root = base / target_dir
        package_name = resolve_package_name(target_dir, base)

        return await asyncio.to_thread(self._materialise, root, package_name)

    def _materialise(self, root: Path, package_name: str) -> GeneratedProject:
        files = copy_template(
            self.config.template_dir,
            root,
            exclude=[self.config.manifest_name],
            placeholder=self.config.placeholder_name,
        )
        manifests = self.manifests.rewrite_all(root, package_name)

        for extra in self.config.extra_dirs:
            (root / extra).mkdir(parents=True, exist_ok=True)

        return GeneratedProject(
            root=root,
            package_name=package_name,
            files=files,
            manifests=manifests,
        )
