#!/usr/bin/env python3
"""
Basic collection example.

This example demonstrates:
- Depth-limited collection
- Filtering by a regular expression on the full path
- Rewriting matches with a hook
"""

import sys
from pathlib import Path

from collectfiles import CollectFiles, ContinueOnErrorsPolicy


def main():
    """Collect markdown files below a directory."""
    root_path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path.cwd()

    print(f"Collecting from: {root_path}")
    print("-" * 50)

    policy = ContinueOnErrorsPolicy(verbose=True)
    paths = (CollectFiles(root_path)
             .with_depth(3)
             .with_target_pattern(r"\.md$")
             .with_hook(lambda path: path.with_suffix(".html"))
             .with_error_policy(policy)
             .collect())

    for path in sorted(paths):
        print(f"  {path}")

    print("-" * 50)
    print(f"Markdown files: {len(paths)}")
    stats = policy.get_statistics()
    if stats['total_errors']:
        print(f"Skipped directories: {stats['skipped_paths']}")


if __name__ == "__main__":
    main()
