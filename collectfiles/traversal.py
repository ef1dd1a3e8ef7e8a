"""Traversal engine for collectfiles.

The engine walks a directory tree and returns the files it selects. Each
directory is scanned as an independent frame on a thread pool; a frame
returns the files it kept and the subdirectories still to visit, and the
coordinating call submits those subdirectories as soon as their parent
finishes. Workers never wait on each other, so the pool cannot starve no
matter how deep the tree is.
"""

import logging
import os
from concurrent.futures import FIRST_COMPLETED, Executor, Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from .config import ErrorRecovery, PathHook, check_depth, check_workers, compile_pattern
from .error_policies import ErrorPolicy, FailFastPolicy
from .errors import DirectoryReadError, InvalidPathError

logger = logging.getLogger(__name__)

# (subdirectory, remaining depth budget or None for unbounded)
PendingDirectory = Tuple[Path, Optional[int]]
# (entry path, error) for entries whose type could not be determined
EntryError = Tuple[Path, OSError]
FrameResult = Tuple[List[Path], List[PendingDirectory], List[EntryError]]


def _list_entries(dir_path: Path) -> List[os.DirEntry]:
    with os.scandir(dir_path) as it:
        return list(it)


def read_directory(dir_path: Path,
                   error_recovery: Optional[ErrorRecovery] = None) -> Tuple[Path, List[os.DirEntry]]:
    """Read the entries of a directory, recovering at most once.

    Args:
        dir_path: Directory to read
        error_recovery: Called with the OSError of a failed read; returns a
            substitute directory to read instead

    Returns:
        Tuple of (directory actually read, its entries)

    Raises:
        DirectoryReadError: If the read fails without recovery, or the
            substitute directory cannot be read either
    """
    try:
        return dir_path, _list_entries(dir_path)
    except OSError as e:
        if error_recovery is None:
            raise DirectoryReadError(dir_path, e) from e
        first_error = e

    substitute = Path(os.fspath(error_recovery(first_error)))
    logger.debug("Recovered read of '%s' with substitute '%s'", dir_path, substitute)
    try:
        return substitute, _list_entries(substitute)
    except OSError as e:
        raise DirectoryReadError(substitute, e) from e


def path_text(path: Path) -> str:
    """Return the text form of a path used for pattern matching.

    Raises:
        InvalidPathError: If the path holds bytes that are not valid unicode
    """
    text = str(path)
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        # Undecodable file names come back from the OS as surrogate escapes
        raise InvalidPathError(path) from None
    return text


def select_file(path: Path,
                hook: Optional[PathHook] = None,
                pattern=None) -> Optional[Path]:
    """Decide what a file contributes to the result.

    Returns:
        The path (or its hooked replacement) to keep, or None to exclude it
    """
    if pattern is None:
        return path
    if pattern.search(path_text(path)):
        if hook is not None:
            return Path(hook(path))
        return path
    return None


def scan_directory(dir_path: Path,
                   depth: Optional[int] = None,
                   hook: Optional[PathHook] = None,
                   pattern=None,
                   error_recovery: Optional[ErrorRecovery] = None) -> FrameResult:
    """Scan a single directory.

    Args:
        dir_path: Directory to scan
        depth: Remaining depth budget (None = unbounded)
        hook: Transform for files matching the pattern
        pattern: Compiled pattern files must match
        error_recovery: Single-shot fallback for read failures

    Returns:
        Tuple of (kept file paths, subdirectories to visit next, entries
        whose type could not be determined with their errors)
    """
    read_path, entries = read_directory(dir_path, error_recovery)
    logger.debug("Read %d entries from '%s'", len(entries), read_path)

    files: List[Path] = []
    subdirs: List[PendingDirectory] = []
    entry_errors: List[EntryError] = []

    for entry in entries:
        path = Path(entry.path)
        try:
            is_dir = entry.is_dir()
        except OSError as e:
            if error_recovery is None:
                entry_errors.append((path, e))
                continue
            substitute = Path(os.fspath(error_recovery(e)))
            logger.debug("Recovered entry '%s' with substitute '%s'", path, substitute)
            path, is_dir = substitute, substitute.is_dir()
        if is_dir:
            # A directory at the depth limit contributes nothing
            if depth is None:
                subdirs.append((path, None))
            elif depth > 0:
                subdirs.append((path, depth - 1))
            continue

        selected = select_file(path, hook, pattern)
        if selected is not None:
            files.append(selected)

    return files, subdirs, entry_errors


def collect_files(dir_path: Union[str, os.PathLike],
                  depth: Optional[int] = None,
                  hook: Optional[PathHook] = None,
                  pattern=None,
                  error_recovery: Optional[ErrorRecovery] = None,
                  *,
                  error_policy: Optional[ErrorPolicy] = None,
                  max_workers: Optional[int] = None,
                  executor: Optional[Executor] = None) -> List[Path]:
    """Collect files under a directory.

    Args:
        dir_path: Root directory
        depth: Maximum recursion depth (None = unbounded, 0 = root only)
        hook: Transform applied to every file matching ``pattern``
        pattern: Regular expression (source or compiled) searched in the
            full path string of each file
        error_recovery: Called with the OSError of a failed directory read;
            returns a substitute directory to read instead
        error_policy: What to do with a directory or entry that stays
            unreadable (defaults to FailFastPolicy)
        max_workers: Thread pool size when no executor is given
        executor: Existing executor to run frames on; left running

    Returns:
        List of collected paths in no particular order

    Raises:
        DirectoryReadError: An unreadable directory under FailFastPolicy
        InvalidPathError: A file path that is not valid unicode
        ConfigurationError: An invalid depth or pattern

    Example:
        >>> collect_files("docs", depth=1, pattern=r"\\.md$")
        [PosixPath('docs/index.md'), PosixPath('docs/guide/intro.md')]
    """
    if depth is not None:
        depth = check_depth(depth)
    if pattern is not None:
        pattern = compile_pattern(pattern)
    max_workers = check_workers(max_workers)

    root = Path(os.fspath(dir_path))
    policy = error_policy or FailFastPolicy()

    if executor is not None:
        return _run_frames(executor, root, depth, hook, pattern, error_recovery, policy)

    with ThreadPoolExecutor(max_workers=max_workers,
                            thread_name_prefix="collectfiles") as pool:
        return _run_frames(pool, root, depth, hook, pattern, error_recovery, policy)


def _run_frames(executor: Executor,
                root: Path,
                depth: Optional[int],
                hook: Optional[PathHook],
                pattern,
                error_recovery: Optional[ErrorRecovery],
                policy: ErrorPolicy) -> List[Path]:
    results: List[Path] = []

    def submit(dir_path: Path, budget: Optional[int]) -> Future:
        return executor.submit(scan_directory, dir_path, budget, hook, pattern, error_recovery)

    pending: Dict[Future, Path] = {submit(root, depth): root}
    try:
        while pending:
            done, _ = wait(pending, return_when=FIRST_COMPLETED)
            for future in done:
                del pending[future]
                try:
                    files, subdirs, entry_errors = future.result()
                except DirectoryReadError as e:
                    results.extend(policy.handle(e.error, e.path))
                    continue
                results.extend(files)
                # An unreadable entry costs only itself, never its siblings
                for entry_path, error in entry_errors:
                    results.extend(policy.handle(error, entry_path))
                for subdir, budget in subdirs:
                    pending[submit(subdir, budget)] = subdir
    except BaseException:
        for future in pending:
            future.cancel()
        raise

    logger.debug("Collected %d paths under '%s'", len(results), root)
    return results
