"""High-level API for collectfiles.

Functional wrappers around the CollectFiles builder for callers who prefer
keyword arguments over method chaining.
"""

import os
from pathlib import Path
from typing import List, Optional, Union

from .builder import CollectFiles
from .config import ErrorRecovery, PathHook
from .error_policies import ErrorPolicy


def collect(
    root: Union[str, os.PathLike],
    max_depth: Optional[int] = None,
    pattern=None,
    hook: Optional[PathHook] = None,
    on_error: Optional[ErrorRecovery] = None,
    error_policy: Optional[ErrorPolicy] = None,
    max_workers: Optional[int] = None,
) -> List[Path]:
    """Collect files under a directory.

    Args:
        root: Directory to collect from
        max_depth: Maximum recursion depth (None = unbounded)
        pattern: Regular expression matched against each file's full path
        hook: Transform applied to every file matching ``pattern``
        on_error: Single-shot recovery for failed directory reads
        error_policy: What to do with directories that stay unreadable
        max_workers: Number of worker threads

    Returns:
        Collected paths in no particular order

    Example:
        >>> for path in collect("/var/log", pattern=r"\\.log$"):
        ...     print(path)
    """
    builder = CollectFiles(root)
    if max_depth is not None:
        builder = builder.with_depth(max_depth)
    if pattern is not None:
        builder = builder.with_target_pattern(pattern)
    if hook is not None:
        builder = builder.with_hook(hook)
    if on_error is not None:
        builder = builder.with_error_recovery(on_error)
    if error_policy is not None:
        builder = builder.with_error_policy(error_policy)
    if max_workers is not None:
        builder = builder.with_workers(max_workers)
    return builder.collect()


def count_files(root: Union[str, os.PathLike], **kwargs) -> int:
    """Count the files collect() would return.

    Args:
        root: Directory to collect from
        **kwargs: Options accepted by collect()
    """
    return len(collect(root, **kwargs))
