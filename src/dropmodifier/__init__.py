"""DropModifier - per-block drop chances for game servers."""

__version__ = "1.0.0"
