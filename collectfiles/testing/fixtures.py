"""Test fixtures for collectfiles consumers.

Helpers for laying out small directory trees and comparing collection
results without caring about traversal order.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, Set, Union


def build_tree(root: Union[str, Path], layout: Dict[str, Any]) -> Path:
    """Create a directory tree from a nested dictionary.

    Keys are entry names. A dict value creates a subdirectory with that
    layout; any other value is written as the text content of a file.

    Example:
        build_tree(tmp_path, {
            'a.md': '# a',
            'sub': {'b.md': '# b', 'empty': {}},
        })

    Args:
        root: Directory to create the tree in (created if missing)
        layout: Nested mapping of names to contents

    Returns:
        The root path
    """
    root = Path(root)
    root.mkdir(parents=True, exist_ok=True)
    for name, content in layout.items():
        target = root / name
        if isinstance(content, dict):
            build_tree(target, content)
        else:
            target.write_text(str(content))
    return root


def relative_paths(paths: Iterable[Union[str, Path]], root: Union[str, Path]) -> Set[str]:
    """Return collected paths relative to root, as posix strings.

    Args:
        paths: Paths returned by a collection
        root: Root the collection started from

    Returns:
        Set of relative paths, e.g. {'a.md', 'sub/b.md'}
    """
    root = Path(root)
    return {Path(p).relative_to(root).as_posix() for p in paths}
