"""Fluent builder for file collection.

Example:
    >>> files = (CollectFiles("/home/user/notes")
    ...          .with_depth(1)
    ...          .with_target_pattern(r"\\.md$")
    ...          .with_hook(lambda path: path.with_suffix(".mutated"))
    ...          .collect())
"""

import os
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Union

from .config import (
    CollectConfig,
    ErrorRecovery,
    PathHook,
    check_depth,
    check_workers,
    compile_pattern,
)
from .error_policies import ErrorPolicy
from .errors import ConfigurationError
from .traversal import collect_files


class CollectFiles:
    """Builder for a file collection rooted at one directory.

    Every ``with_*`` method returns a new builder and leaves the receiver
    untouched, so partially configured builders can be reused as templates.
    Setting the same option twice keeps the last value.
    """

    def __init__(self, root_dir: Union[str, os.PathLike, CollectConfig]):
        """Initialize the builder.

        Args:
            root_dir: Directory to collect from, or a complete CollectConfig
        """
        if isinstance(root_dir, CollectConfig):
            self._config = root_dir
        else:
            self._config = CollectConfig(root_dir=root_dir)

    @property
    def config(self) -> CollectConfig:
        """The configuration this builder will run."""
        return self._config

    def _derive(self, **changes) -> 'CollectFiles':
        return CollectFiles(replace(self._config, **changes))

    # Accessors

    def as_root_dir(self) -> Path:
        return self._config.root_dir

    def as_target_pattern(self) -> Optional[str]:
        return self._config.pattern_string

    def as_hook(self) -> Optional[PathHook]:
        return self._config.hook

    def as_depth(self) -> Optional[int]:
        return self._config.depth

    def as_error_recovery(self) -> Optional[ErrorRecovery]:
        return self._config.error_recovery

    # Options

    def with_depth(self, level: int) -> 'CollectFiles':
        """Limit recursion depth.

        Args:
            level: 0 reads only the root directory, 1 also reads its
                subdirectories, and so on

        Raises:
            ConfigurationError: If level is not a non-negative integer
        """
        return self._derive(depth=check_depth(level))

    def with_target_pattern(self, pattern) -> 'CollectFiles':
        """Keep only files whose full path matches a regular expression.

        Raises:
            PatternError: If the expression does not compile
        """
        return self._derive(pattern=compile_pattern(pattern))

    def with_hook(self, hook: PathHook) -> 'CollectFiles':
        """Transform every file that matched the target pattern."""
        if not callable(hook):
            raise ConfigurationError("hook must be callable")
        return self._derive(hook=hook)

    def with_error_recovery(self, recovery: ErrorRecovery) -> 'CollectFiles':
        """Set the fallback for directory reads that fail.

        The function receives the OSError and returns a directory to read
        instead, or raises to abort. It is consulted once per failure; if
        the substitute cannot be read either, the traversal fails.
        """
        if not callable(recovery):
            raise ConfigurationError("error recovery must be callable")
        return self._derive(error_recovery=recovery)

    def with_error_policy(self, policy: ErrorPolicy) -> 'CollectFiles':
        """Choose what happens to directories that stay unreadable."""
        if not isinstance(policy, ErrorPolicy):
            raise ConfigurationError("error policy must be an ErrorPolicy instance")
        return self._derive(error_policy=policy)

    def with_workers(self, count: Optional[int]) -> 'CollectFiles':
        """Set the number of worker threads (None = executor default)."""
        return self._derive(max_workers=check_workers(count))

    # Execution

    def collect(self) -> List[Path]:
        """Run the traversal and return the collected paths."""
        config = self._config
        config.ensure_valid()
        return collect_files(
            config.root_dir,
            config.depth,
            config.hook,
            config.pattern,
            config.error_recovery,
            error_policy=config.error_policy,
            max_workers=config.max_workers,
        )

    def __repr__(self) -> str:
        return (f"CollectFiles(root_dir={str(self._config.root_dir)!r}, "
                f"depth={self._config.depth!r}, "
                f"pattern={self._config.pattern_string!r})")
