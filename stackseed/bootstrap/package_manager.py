"""Package-manager bootstrap of the generated sub-projects.

For every sub-project, in order: pin the yarn release, install dependencies
and generate the editor SDK.  The first two are mandatory; the SDK step is
optional and a failure there is reported and skipped.
"""

from __future__ import annotations

from pathlib import Path

from ..config import Config
from ..scaffolder.templates import TemplateRenderer
from ..utils import console, print_instructions, print_warning
from .runner import CommandError, CommandRunner, CommandSpec


class PackageManagerSetup:
    """Runs (or describes) the yarn bootstrap for a generated project."""

    def __init__(
        self,
        config: Config,
        runner: CommandRunner,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config
        self.runner = runner
        self.renderer = renderer or TemplateRenderer()

    def mandatory_commands(self, sub_dir: Path) -> list[CommandSpec]:
        pm = self.config.package_manager
        return [
            CommandSpec(
                command=pm.binary,
                args=["set", "version", pm.version],
                cwd=sub_dir,
                label=f"{sub_dir.name}: {pm.binary} set version {pm.version}",
            ),
            CommandSpec(
                command=pm.binary,
                args=["install"],
                cwd=sub_dir,
                label=f"{sub_dir.name}: {pm.binary} install",
            ),
        ]

    def sdk_command(self, sub_dir: Path) -> CommandSpec:
        pm = self.config.package_manager
        return CommandSpec(
            command=pm.binary,
            args=["dlx", pm.sdk_package, pm.sdk_target],
            cwd=sub_dir,
            label=f"{sub_dir.name}: {pm.sdk_target} SDK",
        )

    async def run(self, project_root: Path) -> list[str]:
        """Bootstrap every sub-project of *project_root* one after another.

        Returns:
            Labels of optional steps that failed and were skipped.

        Raises:
            CommandError: If a mandatory step fails.
        """
        skipped: list[str] = []
        for name in self.config.sub_project_names:
            sub_dir = project_root / name
            console.print(f"  Setting up [bold]{name}[/bold]...")
            await self.runner.run_sequence(self.mandatory_commands(sub_dir))

            sdk = self.sdk_command(sub_dir)
            try:
                await self.runner.run(sdk)
            except CommandError:
                print_warning(f"  Skipped optional step: {sdk.label}")
                skipped.append(sdk.label)
        return skipped

    def manual_instructions(self, target_dir: str) -> str:
        """The command sequence a user runs to do this step by hand."""
        pm = self.config.package_manager
        return self.renderer.render(
            "package_manager_manual.txt.j2",
            {
                "target_dir": target_dir,
                "sub_projects": self.config.sub_project_names,
                "binary": pm.binary,
                "version": pm.version,
                "sdk_package": pm.sdk_package,
                "sdk_target": pm.sdk_target,
            },
        )

    def print_manual_instructions(self, target_dir: str) -> None:
        print_instructions(self.manual_instructions(target_dir), "Set up the packages yourself")
