"""Container database setup for the generated project.

Writes the environment file the compose file reads and starts the database
container.  A failure never aborts the run: the caller prints the manual
fallback instructions instead.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from ..config import Config
from ..prompts import Prompter
from ..scaffolder.templates import TemplateRenderer
from ..utils import print_instructions
from .runner import CommandResult, CommandRunner, CommandSpec


class DatabaseAnswers(BaseModel):
    """Values collected from the user for the database container."""

    container_name: str = Field(..., min_length=1)
    database_name: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class DatabaseSetup:
    """Prompts for, writes and starts the project's database container."""

    def __init__(
        self,
        config: Config,
        runner: CommandRunner,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config
        self.runner = runner
        self.renderer = renderer or TemplateRenderer()

    def collect_answers(self, prompter: Prompter, package_name: str) -> DatabaseAnswers:
        return DatabaseAnswers(
            container_name=prompter.text("Container name:", default=f"{package_name}-db"),
            database_name=prompter.text("Database name:", default=package_name.replace("-", "_")),
            password=prompter.secret("Database password:"),
        )

    def write_env_file(self, project_root: Path, answers: DatabaseAnswers, package_name: str) -> Path:
        """Render the environment file into *project_root*, replacing any existing one."""
        db = self.config.database
        return self.renderer.render_to_file(
            "env.j2",
            project_root / db.env_file,
            {
                "project_name": package_name,
                "host": db.host,
                "port": db.port,
                "user": db.user,
                "password": answers.password,
                "database_name": answers.database_name,
                "container_name": answers.container_name,
            },
        )

    def compose_command(self, project_root: Path) -> CommandSpec:
        db = self.config.database
        return CommandSpec(
            command=db.compose_binary,
            args=list(db.compose_args),
            cwd=project_root,
            label=f"{db.compose_binary} {' '.join(db.compose_args)}",
            fatal_markers=list(db.fatal_markers),
        )

    async def start(self, project_root: Path) -> CommandResult:
        """Start the database container.

        Raises:
            CommandError: If the compose command fails.
        """
        return await self.runner.run(self.compose_command(project_root))

    def manual_instructions(self, target_dir: str) -> str:
        db = self.config.database
        return self.renderer.render(
            "database_manual.txt.j2",
            {
                "target_dir": target_dir,
                "env_file": db.env_file,
                "host": db.host,
                "port": db.port,
                "user": db.user,
                "compose_command": " ".join([db.compose_binary, *db.compose_args]),
            },
        )

    def print_manual_instructions(self, target_dir: str) -> None:
        print_instructions(self.manual_instructions(target_dir), "Start the database yourself")
