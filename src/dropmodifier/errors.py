"""Exceptions raised by DropModifier."""


class DropModifierError(Exception):
    """Base class for DropModifier errors."""
    pass


class ConfigurationError(DropModifierError):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


class InvalidChanceError(DropModifierError, ValueError):
    """Raised when a drop chance is not a number or lies outside [0, 1]."""
    pass
