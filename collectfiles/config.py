"""Configuration for collectfiles traversals.

A CollectConfig holds everything one traversal needs: where to start, how
deep to go, which files to keep, how to rewrite them, and what to do when a
directory cannot be read. Unset fields mean "no constraint".
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Union

from .error_policies import ErrorPolicy, FailFastPolicy
from .errors import ConfigurationError, PatternError

PathHook = Callable[[Path], Path]
ErrorRecovery = Callable[[OSError], Union[str, os.PathLike]]


def compile_pattern(pattern: Union[str, re.Pattern]) -> re.Pattern:
    """Compile a target pattern, failing immediately on bad syntax.

    Args:
        pattern: Regular expression source, or an already compiled pattern

    Returns:
        Compiled pattern

    Raises:
        PatternError: If the expression is not valid
    """
    if isinstance(pattern, re.Pattern):
        if not isinstance(pattern.pattern, str):
            raise PatternError(repr(pattern.pattern), "paths are matched as text")
        return pattern
    if not isinstance(pattern, str):
        raise PatternError(repr(pattern), "expected a string")
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternError(pattern, str(e)) from e


def check_depth(level) -> int:
    """Return level if it is a usable depth budget.

    Raises:
        ConfigurationError: If level is not a non-negative integer
    """
    if isinstance(level, bool) or not isinstance(level, int):
        raise ConfigurationError(f"depth must be an integer, got {level!r}")
    if level < 0:
        raise ConfigurationError(f"depth cannot be negative, got {level}")
    return level


def check_workers(count) -> Optional[int]:
    """Return count if it is a usable thread pool size (None = default).

    Raises:
        ConfigurationError: If count is not a positive integer
    """
    if count is None:
        return None
    if isinstance(count, bool) or not isinstance(count, int):
        raise ConfigurationError(f"worker count must be an integer, got {count!r}")
    if count <= 0:
        raise ConfigurationError(f"worker count must be positive, got {count}")
    return count


@dataclass
class CollectConfig:
    """Complete configuration for one file collection.

    Instances are treated as values: the builder derives new ones with
    dataclasses.replace instead of mutating them.
    """

    root_dir: Path

    # Depth control (None = unbounded, 0 = root directory only)
    depth: Optional[int] = None

    # Filtering and transformation
    pattern: Optional[re.Pattern] = None
    hook: Optional[PathHook] = None

    # Error handling
    error_recovery: Optional[ErrorRecovery] = None
    error_policy: ErrorPolicy = field(default_factory=FailFastPolicy)

    # Performance
    max_workers: Optional[int] = None

    def __post_init__(self):
        self.root_dir = Path(os.fspath(self.root_dir))
        if self.pattern is not None:
            self.pattern = compile_pattern(self.pattern)

    @property
    def pattern_string(self) -> Optional[str]:
        """Source text of the target pattern, if one is set."""
        if self.pattern is None:
            return None
        return self.pattern.pattern

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.depth is not None:
            if isinstance(self.depth, bool) or not isinstance(self.depth, int):
                errors.append("depth must be an integer")
            elif self.depth < 0:
                errors.append("depth cannot be negative")

        if self.max_workers is not None and (
                isinstance(self.max_workers, bool) or not isinstance(self.max_workers, int)):
            errors.append("max_workers must be an integer")
        elif self.max_workers is not None and self.max_workers <= 0:
            errors.append("max_workers must be positive")

        if self.hook is not None and not callable(self.hook):
            errors.append("hook must be callable")

        if self.error_recovery is not None and not callable(self.error_recovery):
            errors.append("error_recovery must be callable")

        if not isinstance(self.error_policy, ErrorPolicy):
            errors.append("error_policy must be an ErrorPolicy instance")

        return errors

    def ensure_valid(self) -> None:
        """Raise ConfigurationError listing every validation problem."""
        errors = self.validate()
        if errors:
            raise ConfigurationError("; ".join(errors))
