"""Testing utilities for collectfiles consumers."""

from .fixtures import build_tree, relative_paths

__all__ = ['build_tree', 'relative_paths']
