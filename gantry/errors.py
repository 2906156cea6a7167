"""Root of the Gantry exception hierarchy."""

from __future__ import annotations


class GantryError(Exception):
    """Base class for every error Gantry raises on purpose.

    Catching ``GantryError`` lets the CLI report pipeline failures without
    masking programming errors, which surface as their built-in types.
    """
