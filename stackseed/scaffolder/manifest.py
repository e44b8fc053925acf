"""Rewriting of ``package.json`` manifests in the generated project.

Each sub-project manifest is loaded from the template, given a new ``name``
and pinned dependency versions, and written into the target tree.  Parse
errors are not caught: a malformed template manifest aborts the run.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from ..config import Config
from ..utils import load_json, save_json

DEPENDENCY_SECTIONS: tuple[str, ...] = ("dependencies", "devDependencies")


def resolve_package_name(target_dir: str, cwd: str | Path | None = None) -> str:
    """Return the package name for *target_dir*.

    When the target denotes the current directory (``"."`` or a path that
    resolves to *cwd*) the base name of the current directory is used.
    """
    base = Path(cwd) if cwd is not None else Path.cwd()
    if target_dir in ("", ".") or (base / target_dir).resolve() == base.resolve():
        return base.resolve().name
    return target_dir


def apply_version_pins(
    manifest: dict[str, Any],
    pins: Mapping[str, str],
    sections: Iterable[str] = DEPENDENCY_SECTIONS,
) -> dict[str, Any]:
    """Overwrite dependency versions in place with the values from *pins*.

    Only keys already present in a section are touched; sections missing
    from the manifest are not created.
    """
    for section in sections:
        deps = manifest.get(section)
        if not isinstance(deps, dict):
            continue
        for package in deps:
            if package in pins:
                deps[package] = pins[package]
    return manifest


def rewrite_manifest(
    src: str | Path,
    dest: str | Path,
    *,
    name: str,
    pins: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Load *src*, set its ``name`` and pins, and write the result to *dest*."""
    manifest = load_json(src)
    manifest["name"] = name
    if pins:
        apply_version_pins(manifest, pins)
    save_json(manifest, dest)
    return manifest


class ManifestRewriter:
    """Rewrites every sub-project manifest of a freshly copied project."""

    def __init__(self, config: Config) -> None:
        self.config = config

    def rewrite_all(self, target_root: Path, base_name: str) -> dict[str, Path]:
        """Rewrite the root manifest and each sub-project manifest independently.

        The root manifest gets *base_name* unchanged; sub-project manifests
        get *base_name* plus their configured suffix.

        Returns:
            Mapping of sub-project name (``"."`` for the root) to the
            manifest path written.  Manifests missing from the template are
            skipped.
        """
        written: dict[str, Path] = {}

        root_src = self.config.template_dir / self.config.manifest_name
        if root_src.is_file():
            dest = target_root / self.config.manifest_name
            rewrite_manifest(root_src, dest, name=base_name, pins=self.config.version_pins)
            written["."] = dest

        for sub in self.config.sub_projects:
            src = self.config.template_dir / sub.name / self.config.manifest_name
            if not src.is_file():
                continue
            dest = target_root / sub.name / self.config.manifest_name
            rewrite_manifest(
                src,
                dest,
                name=f"{base_name}{sub.name_suffix}",
                pins=self.config.version_pins,
            )
            written[sub.name] = dest
        return written
