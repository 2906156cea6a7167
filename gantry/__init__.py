"""Gantry: the Brigade pipeline for building and testing the GitHub app.

Gantry reacts to push and check-suite events, runs the test job, publishes
container images for the main branch and release tags, and reports progress to
GitHub as check runs.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
