"""
Error handling policies for collectfiles.

A policy decides what happens when a directory cannot be read and no
recovery function rescued the read. The default policy aborts the whole
traversal; the others skip the unreadable branch and keep going.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List

from .errors import CollectFilesError, DirectoryReadError

logger = logging.getLogger(__name__)


class ErrorPolicy(ABC):
    """
    Base class for error handling policies.

    Subclasses implement different strategies for handling unrecoverable
    directory read errors during traversal.
    """

    @abstractmethod
    def handle(self, error: OSError, path: Path) -> List[Any]:
        """
        Handle a failed directory read or entry type check.

        Args:
            error: The OSError raised by the read
            path: The directory or entry that could not be read

        Returns:
            Paths to contribute in place of the directory contents (an empty
            list skips the branch), or raises to stop traversal.
        """
        pass


class FailFastPolicy(ErrorPolicy):
    """
    Policy that aborts the traversal on the first unreadable directory.

    This is the default. No partial results are ever returned.
    """

    def handle(self, error: OSError, path: Path) -> List[Any]:
        """Raise DirectoryReadError chained from the original error."""
        raise DirectoryReadError(path, error) from error


class CollectErrorsPolicy(ErrorPolicy):
    """
    Policy that records errors silently and skips unreadable directories.

    Useful for collecting all errors and presenting them at the end.
    """

    def __init__(self):
        self.errors: List[Dict[str, Any]] = []
        self.skipped_paths: List[Path] = []

    def handle(self, error: OSError, path: Path) -> List[Any]:
        """Record the error and skip the directory."""
        self._record(error, path)
        return []

    def _record(self, error: OSError, path: Path) -> None:
        self.errors.append({
            'path': path,
            'error': error,
            'error_type': type(error).__name__,
            'error_message': str(error),
        })
        self.skipped_paths.append(path)

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        return {
            'total_errors': len(self.errors),
            'permission_errors': sum(1 for e in self.errors if e['error_type'] == 'PermissionError'),
            'not_found_errors': sum(1 for e in self.errors if e['error_type'] == 'FileNotFoundError'),
            'skipped_paths': len(self.skipped_paths),
            'errors': self.errors,
        }


class ContinueOnErrorsPolicy(CollectErrorsPolicy):
    """
    Policy that logs errors and continues traversal.

    Same bookkeeping as CollectErrorsPolicy, plus a warning per skipped
    directory when verbose.
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize the policy.

        Args:
            verbose: If True, log a warning for every skipped directory
        """
        super().__init__()
        self.verbose = verbose

    def handle(self, error: OSError, path: Path) -> List[Any]:
        self._record(error, path)
        if self.verbose:
            if isinstance(error, PermissionError):
                logger.warning("Skipping inaccessible directory '%s': %s", path, error)
            else:
                logger.warning("Skipping unreadable directory '%s': %s", path, error)
        return []


class ThresholdPolicy(ErrorPolicy):
    """
    Policy that tolerates errors up to a threshold, then fails fast.

    Useful when some errors are expected but too many indicate
    a systemic problem that should halt processing.
    """

    def __init__(self, max_errors: int = 10, verbose: bool = True):
        """
        Initialize threshold policy.

        Args:
            max_errors: Maximum errors to tolerate before failing
            verbose: If True, log a warning for each tolerated error
        """
        self.max_errors = max_errors
        self.error_count = 0
        self.verbose = verbose
        self.errors: List[OSError] = []

    def handle(self, error: OSError, path: Path) -> List[Any]:
        """Skip the directory if under threshold, otherwise raise."""
        self.error_count += 1
        self.errors.append(error)

        if self.error_count > self.max_errors:
            raise CollectFilesError(
                f"Error threshold exceeded ({self.max_errors} errors)"
            ) from DirectoryReadError(path, error)

        if self.verbose:
            logger.warning(
                "[%d/%d] Skipping unreadable directory '%s': %s",
                self.error_count, self.max_errors, path, error,
            )
        return []
