"""stackseed scaffolder -- materialises a new project from the template tree.

Quick usage::

    from stackseed.config import Config
    from stackseed.scaffolder import ProjectGenerator

    generator = ProjectGenerator(Config())
    project = await generator.generate("my-project")
"""

from stackseed.scaffolder.copier import copy_template, copy_tree
from stackseed.scaffolder.generator import GeneratedProject, ProjectGenerator
from stackseed.scaffolder.manifest import (
    ManifestRewriter,
    apply_version_pins,
    resolve_package_name,
    rewrite_manifest,
)
from stackseed.scaffolder.templates import TemplateRenderer

__all__ = [
    "GeneratedProject",
    "ManifestRewriter",
    "ProjectGenerator",
    "TemplateRenderer",
    "apply_version_pins",
    "copy_template",
    "copy_tree",
    "resolve_package_name",
    "rewrite_manifest",
]
