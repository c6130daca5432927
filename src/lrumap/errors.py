"""lrumap exception hierarchy.

Keep this module small and dependency-free: it is imported by both the engine
and the config loader.
"""


class LruMapError(Exception):
    """Base exception for all lrumap errors."""


class LruMapConfigError(LruMapError, ValueError):
    """Raised for an invalid map configuration, such as a non-positive maximum size."""
