"""
Error types raised while loading games and rendering tiles.

Both derive from ValueError; the command line turns them into a one-line
diagnostic and a non-zero exit status.
"""


class ConfigurationError(ValueError):
    """Missing, unreadable or malformed input (game directory, JSON file, option value)."""


class DataIntegrityError(ValueError):
    """A cross-reference between loaded data does not resolve (tile name, city, circle)."""
