"""Errors raised while configuring or dispatching the pipeline."""

from __future__ import annotations

from gantry.errors import GantryError


class ConfigError(GantryError):
    """Raised when pipeline configuration or project secrets are invalid."""

    @classmethod
    def not_positive_int(cls, name: str, raw: str) -> ConfigError:
        """Return an error for a setting that must be a positive integer."""
        return cls(f"{name} must be a positive integer, got: {raw!r}")

    @classmethod
    def unreadable_project(cls, path: str, detail: str) -> ConfigError:
        """Return an error for a project file that cannot be loaded."""
        return cls(f"failed to load project file {path}: {detail}")
