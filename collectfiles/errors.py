"""Exceptions raised by collectfiles.

Every failure during configuration or traversal is reported through one of
these types, so callers can catch ``CollectFilesError`` to handle them all.
"""

from pathlib import Path
from typing import Optional, Union


class CollectFilesError(Exception):
    """Base class for all collectfiles errors."""
    pass


class ConfigurationError(CollectFilesError, ValueError):
    """Raised when a configuration value is invalid."""
    pass


class PatternError(ConfigurationError):
    """Raised when a target pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: Optional[str] = None):
        self.pattern = pattern
        message = f"Invalid target pattern: {pattern!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class DirectoryReadError(CollectFilesError):
    """Raised when a directory cannot be read and no recovery applies.

    Attributes:
        path: Directory whose read failed
        error: The underlying OSError
    """

    def __init__(self, path: Union[str, Path], error: OSError):
        self.path = Path(path)
        self.error = error
        super().__init__(f"Cannot read directory '{self.path}': {error}")


class InvalidPathError(CollectFilesError):
    """Raised when a path cannot be represented as text for matching."""

    def __init__(self, path: Union[str, Path]):
        self.path = path
        super().__init__(f"Path is not valid unicode: {path!r}")
