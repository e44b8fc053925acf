"""stackseed -- interactive scaffolder for API + web projects."""

__version__ = "0.3.0"
