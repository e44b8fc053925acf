"""stackseed configuration.

Centralised, typed configuration for the scaffolder.  All settings use
Pydantic v2 models so they are validated at construction time and can be
overridden from environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "template"


# Versions written into the generated manifests, keyed by package name.
DEFAULT_VERSION_PINS: dict[str, str] = {
    "@types/node": "^20.14.10",
    "@types/react": "^18.3.3",
    "@types/react-dom": "^18.3.0",
    "@vitejs/plugin-react": "^4.3.1",
    "dotenv": "^16.4.5",
    "express": "^4.19.2",
    "mysql2": "^3.10.2",
    "react": "^18.3.1",
    "react-dom": "^18.3.1",
    "tsx": "^4.16.2",
    "typescript": "^5.5.3",
    "vite": "^5.3.4",
}


class SubProject(BaseModel):
    """A sub-project directory of the template that carries its own manifest."""

    name: str = Field(..., min_length=1, description="Directory name inside the template")
    name_suffix: str = Field(default="", description="Appended to the project name in the manifest")


class PackageManagerConfig(BaseModel):
    """How the generated sub-projects are bootstrapped with yarn."""

    binary: str = Field(default="yarn")
    version: str = Field(default="stable", description="Argument to `yarn set version`")
    sdk_package: str = Field(default="@yarnpkg/sdks")
    sdk_target: str = Field(default="vscode", description="Editor the SDK is generated for")


class DatabaseConfig(BaseModel):
    """Container database setup defaults."""

    compose_binary: str = Field(default="docker")
    compose_args: list[str] = Field(default_factory=lambda: ["compose", "up", "-d"])
    host: str = Field(default="localhost")
    port: int = Field(default=3306, ge=1, le=65535)
    user: str = Field(default="root")
    env_file: str = Field(default=".env")
    fatal_markers: list[str] = Field(
        default_factory=lambda: [
            "Cannot connect to the Docker daemon",
            "docker daemon is not running",
            "command not found",
            "is not recognized as an internal or external command",
        ],
        description="Output substrings that mark the compose command as failed",
    )


class Config(BaseModel):
    """Global stackseed configuration.

    Instances are created once by the CLI entry point and passed to the
    generator and the bootstrap steps.
    """

    default_project_name: str = Field(default="pp1", min_length=1)
    template_dir: Path = Field(default=_DEFAULT_TEMPLATE_DIR)
    manifest_name: str = Field(default="package.json")
    placeholder_name: str = Field(default=".gitkeep")
    sub_projects: list[SubProject] = Field(
        default_factory=lambda: [
            SubProject(name="api", name_suffix="-api"),
            SubProject(name="web", name_suffix="-web"),
        ]
    )
    extra_dirs: list[str] = Field(default_factory=lambda: ["web/src/services"])
    version_pins: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_VERSION_PINS))
    package_manager: PackageManagerConfig = Field(default_factory=PackageManagerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    @property
    def sub_project_names(self) -> list[str]:
        """Sub-project directory names in processing order."""
        return [sp.name for sp in self.sub_projects]

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            STACKSEED_TEMPLATE_DIR, STACKSEED_DEFAULT_NAME,
            STACKSEED_YARN, STACKSEED_YARN_VERSION, STACKSEED_DOCKER.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("STACKSEED_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["STACKSEED_TEMPLATE_DIR"])
        if os.environ.get("STACKSEED_DEFAULT_NAME"):
            kwargs["default_project_name"] = os.environ["STACKSEED_DEFAULT_NAME"]

        pm_kwargs: dict[str, Any] = {}
        if os.environ.get("STACKSEED_YARN"):
            pm_kwargs["binary"] = os.environ["STACKSEED_YARN"]
        if os.environ.get("STACKSEED_YARN_VERSION"):
            pm_kwargs["version"] = os.environ["STACKSEED_YARN_VERSION"]

        db_kwargs: dict[str, Any] = {}
        if os.environ.get("STACKSEED_DOCKER"):
            db_kwargs["compose_binary"] = os.environ["STACKSEED_DOCKER"]

        return cls(
            package_manager=PackageManagerConfig(**pm_kwargs),
            database=DatabaseConfig(**db_kwargs),
            **kwargs,
        )
