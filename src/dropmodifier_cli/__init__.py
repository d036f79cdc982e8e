"""Operator CLI for DropModifier."""

from dropmodifier import __version__

__all__ = ["__version__"]
