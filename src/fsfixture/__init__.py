from .fixture import TempDir, NamedTempFile, ChildPath, Release, new_root
from .config import Disposal, FixtureConfig
from .copy import SymlinkPolicy, CopyEntry, copy_from, replicate, iter_selection, select_files
from ._glob import GlobFilter, GlobPattern, parse_pattern
from .assertions import AssertionOutcome, check, assert_path, coerce_predicate
from .exceptions import FixtureError, FixtureKind, PatternError, EncodingError, PathAssertionError
from . import predicates

__all__ = [
    "TempDir", "NamedTempFile", "ChildPath", "Release", "new_root",
    "Disposal", "FixtureConfig",
    "SymlinkPolicy", "CopyEntry", "copy_from", "replicate", "iter_selection", "select_files",
    "GlobFilter", "GlobPattern", "parse_pattern",
    "AssertionOutcome", "check", "assert_path", "coerce_predicate",
    "FixtureError", "FixtureKind", "PatternError", "EncodingError", "PathAssertionError",
    "predicates",
]
