"""Recursive copy of the bundled template tree into a new project directory.

The copy is byte-for-byte and not transactional: a filesystem error part way
through leaves a partial tree behind and propagates to the caller.
"""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from pathlib import Path

PLACEHOLDER_NAME = ".gitkeep"


def copy_tree(
    src: str | Path,
    dest: str | Path,
    *,
    placeholder: str = PLACEHOLDER_NAME,
) -> list[Path]:
    """Reproduce *src* at *dest*, file by file.

    Directories are created idempotently (parents included).  Regular files
    overwrite whatever already exists at the destination.  Files named
    *placeholder* only exist to keep empty directories in version control:
    they are skipped, but the directory holding them is still created.

    Returns:
        The destination paths of every file written.
    """
    src_path = Path(src)
    dest_path = Path(dest)

    if src_path.is_dir():
        dest_path.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []
        for entry in sorted(src_path.iterdir()):
            written.extend(copy_tree(entry, dest_path / entry.name, placeholder=placeholder))
        return written

    if src_path.name == placeholder:
        return []

    shutil.copyfile(src_path, dest_path)
    return [dest_path]


def copy_template(
    template_root: str | Path,
    target_root: str | Path,
    *,
    exclude: Iterable[str] = (),
    placeholder: str = PLACEHOLDER_NAME,
) -> list[Path]:
    """Copy every top-level entry of *template_root* except those in *exclude*.

    *exclude* only applies to the first level of the walk; nested entries
    with the same name are copied normally.
    """
    template_path = Path(template_root)
    target_path = Path(target_root)
    skipped = set(exclude)

    target_path.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for entry in sorted(template_path.iterdir()):
        if entry.name in skipped:
            continue
        written.extend(copy_tree(entry, target_path / entry.name, placeholder=placeholder))
    return written
