"""collectfiles - parallel recursive file collection.

Walk a directory tree, keep the files whose path matches a regular
expression, optionally rewrite them, and get everything back as one list:

    from collectfiles import CollectFiles

    paths = (CollectFiles("docs")
             .with_depth(1)
             .with_target_pattern(r"\\.md$")
             .collect())
"""

__version__ = "0.1.0"

from .config import CollectConfig, compile_pattern
from .builder import CollectFiles
from .traversal import collect_files, scan_directory, read_directory
from .api import collect, count_files
from .errors import (
    CollectFilesError,
    ConfigurationError,
    PatternError,
    DirectoryReadError,
    InvalidPathError,
)
from .error_policies import (
    ErrorPolicy,
    FailFastPolicy,
    ContinueOnErrorsPolicy,
    CollectErrorsPolicy,
    ThresholdPolicy,
)

__all__ = [
    '__version__',
    # Builder and config
    'CollectFiles',
    'CollectConfig',
    'compile_pattern',
    # Engine
    'collect_files',
    'scan_directory',
    'read_directory',
    # API
    'collect',
    'count_files',
    # Errors
    'CollectFilesError',
    'ConfigurationError',
    'PatternError',
    'DirectoryReadError',
    'InvalidPathError',
    # Policies
    'ErrorPolicy',
    'FailFastPolicy',
    'ContinueOnErrorsPolicy',
    'CollectErrorsPolicy',
    'ThresholdPolicy',
]
