"""stackseed command-line entry point.

Drives the interactive bootstrap sequence:

Step 1: NAME      -- ask for the target directory.
Step 2: GENERATE  -- copy the template and rewrite the manifests.
Step 3: PACKAGES  -- optionally run the yarn bootstrap per sub-project.
Step 4: DATABASE  -- optionally write ``.env`` and start the database container.

Each step completes before the next starts.  Only cancelling a prompt or a
failed mandatory command stops the run early.

Usage::

    stackseed
    python -m stackseed --skip-database
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from rich.markup import escape
from rich.panel import Panel

from . import __version__
from .bootstrap.database import DatabaseSetup
from .bootstrap.package_manager import PackageManagerSetup
from .bootstrap.runner import CommandError, CommandRunner
from .config import Config
from .prompts import PromptCancelled, Prompter
from .scaffolder.generator import GeneratedProject, ProjectGenerator
from .scaffolder.templates import TemplateRenderer
from .utils import (
    console,
    print_error,
    print_step_header,
    print_success,
    print_summary_table,
    print_warning,
)


class Bootstrapper:
    """Runs the four bootstrap steps in order.

    Attributes:
        config: Scaffolder configuration.
        prompter: Source of interactive answers.
        runner: Executes external commands.
        cwd: Directory the target path is resolved against.
    """

    def __init__(
        self,
        config: Config,
        prompter: Prompter | None = None,
        runner: CommandRunner | None = None,
        cwd: Path | None = None,
        *,
        offer_packages: bool = True,
        offer_database: bool = True,
    ) -> None:
        self.config = config
        self.prompter = prompter or Prompter()
        self.runner = runner or CommandRunner()
        self.cwd = cwd or Path.cwd()
        self.offer_packages = offer_packages
        self.offer_database = offer_database

        renderer = TemplateRenderer()
        self.generator = ProjectGenerator(config)
        self.packages = PackageManagerSetup(config, self.runner, renderer)
        self.database = DatabaseSetup(config, self.runner, renderer)

        self.target_dir = ""
        self.summary: dict[str, str] = {}

    def run(self) -> Path:
        """Execute every step and return the generated project root.

        Prompts run outside the event loop; each awaited stage gets its own
        ``asyncio.run``.

        Raises:
            PromptCancelled: If the user aborts a prompt.
            CommandError: If a mandatory package-manager command fails.
            OSError: If the template cannot be copied.
        """
        console.print(
            Panel(
                f"[bold bright_cyan]stackseed {__version__}[/bold bright_cyan]\n"
                f"Template : {self.config.template_dir}\n"
                f"Location : {self.cwd}",
                border_style="bright_cyan",
            )
        )

        print_step_header(1, "NAME")
        self.target_dir = self.prompter.text(
            "Project name:", default=self.config.default_project_name
        )

        print_step_header(2, "GENERATE")
        project = asyncio.run(self.generator.generate(self.target_dir, self.cwd))
        print_success(f"Created {len(project.files)} file(s) in {project.root}")
        self.summary["Project"] = project.package_name
        self.summary["Location"] = str(project.root)

        print_step_header(3, "PACKAGES")
        self.setup_packages(project)

        print_step_header(4, "DATABASE")
        self.setup_database(project)

        print_summary_table(self.summary, title="Done")
        return project.root

    def setup_packages(self, project: GeneratedProject) -> None:
        if self.offer_packages and self.prompter.confirm(
            f"Run {self.config.package_manager.binary} setup now?", default=True
        ):
            skipped = asyncio.run(self.packages.run(project.root))
            self.summary["Packages"] = "installed"
            if skipped:
                self.summary["Skipped"] = ", ".join(skipped)
            return

        self.packages.print_manual_instructions(self.target_dir)
        self.summary["Packages"] = "manual"

    def setup_database(self, project: GeneratedProject) -> None:
        if not (self.offer_database and self.prompter.confirm("Start a database container now?", default=True)):
            self.database.print_manual_instructions(self.target_dir)
            self.summary["Database"] = "manual"
            return

        answers = self.database.collect_answers(self.prompter, project.package_name)
        env_path = self.database.write_env_file(project.root, answers, project.package_name)
        console.print(f"  Wrote [bold]{env_path}[/bold]")

        try:
            asyncio.run(self.database.start(project.root))
        except CommandError as exc:
            print_warning(f"  Database container was not started: {escape(str(exc))}")
            self.database.print_manual_instructions(self.target_dir)
            self.summary["Database"] = "manual"
            return

        self.summary["Database"] = answers.container_name


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stackseed",
        description="Create an API + web project from the bundled template",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  stackseed\n"
            "  stackseed --skip-install --skip-database\n"
            "  stackseed --template-dir ./my-template\n"
        ),
    )
    parser.add_argument(
        "--template-dir",
        type=Path,
        default=None,
        help="Use this template tree instead of the bundled one",
    )
    parser.add_argument(
        "--skip-install",
        action="store_true",
        help="Do not offer the package-manager setup; print the commands instead",
    )
    parser.add_argument(
        "--skip-database",
        action="store_true",
        help="Do not offer the database setup; print the instructions instead",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``stackseed`` and ``python -m stackseed``."""
    args = build_parser().parse_args(argv)

    config = Config.from_env()
    if args.template_dir is not None:
        config.template_dir = args.template_dir

    if not config.template_dir.is_dir():
        print_error(f"Error: template directory not found: {config.template_dir}")
        sys.exit(1)

    bootstrapper = Bootstrapper(
        config,
        offer_packages=not args.skip_install,
        offer_database=not args.skip_database,
    )

    try:
        root = bootstrapper.run()
    except PromptCancelled as exc:
        print_error(str(exc))
        sys.exit(1)
    except KeyboardInterrupt:
        print_error("Operation cancelled.")
        sys.exit(1)
    except Exception as exc:
        print_error(f"Error: {escape(str(exc))}")
        sys.exit(1)

    console.print(f"[bold green]Project ready at {root}[/bold green]")


if __name__ == "__main__":
    main()
