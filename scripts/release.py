"""Build the distribution, tag the release and push the tag.

Usage::

    python scripts/release.py

Tagging and pushing are best-effort: an existing tag or a failed push is
reported as a warning and the script still exits 0.  A failed build exits 1.
"""

from __future__ import annotations

import asyncio
import sys
import tomllib
from pathlib import Path

from rich.markup import escape

from stackseed.utils import console, print_error, print_success, print_warning, run_command

ROOT = Path(__file__).resolve().parent.parent


def read_version(pyproject: Path) -> str:
    """Return ``project.version`` from *pyproject*."""
    with pyproject.open("rb") as fh:
        data = tomllib.load(fh)
    return data["project"]["version"]


async def release(root: Path = ROOT) -> int:
    console.print("Building project...")
    code, _, stderr = await run_command([sys.executable, "-m", "build"], cwd=root)
    if code != 0:
        print_error(f"Build failed:\n{escape(stderr)}")
        return 1

    version = read_version(root / "pyproject.toml")
    tag = f"v{version}"

    console.print(f"Creating tag {tag}...")
    code, _, _ = await run_command(
        ["git", "tag", "-a", tag, "-m", f"Release {tag}"], cwd=root
    )
    if code == 0:
        print_success(f"Tag {tag} created")
    else:
        print_warning(f"Tag {tag} already exists or could not be created")

    console.print("Pushing tags to remote...")
    code, _, stderr = await run_command(["git", "push", "--follow-tags"], cwd=root)
    if code == 0:
        print_success("Tags pushed")
    else:
        print_warning(f"Failed to push tags: {escape(stderr)}")
    return 0


def main() -> None:
    sys.exit(asyncio.run(release()))


if __name__ == "__main__":
    main()
