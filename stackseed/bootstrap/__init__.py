"""Post-scaffold bootstrap steps: package-manager setup and database container."""

from stackseed.bootstrap.database import DatabaseAnswers, DatabaseSetup
from stackseed.bootstrap.package_manager import PackageManagerSetup
from stackseed.bootstrap.runner import (
    CommandError,
    CommandResult,
    CommandRunner,
    CommandSpec,
    StdioConfig,
)

__all__ = [
    "CommandError",
    "CommandResult",
    "CommandRunner",
    "CommandSpec",
    "DatabaseAnswers",
    "DatabaseSetup",
    "PackageManagerSetup",
    "StdioConfig",
]
