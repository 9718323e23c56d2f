"""Exceptions for fsfixture."""

from __future__ import annotations

import os
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .assertions import AssertionOutcome


class FixtureKind(str, Enum):
    """Which fixture operation failed.

    Members: ``WALK``, ``COPY_FILE``, ``WRITE_FILE``, ``CREATE_DIR``,
    ``CLEANUP``, ``SYMLINK``, ``READ``.
    """
    WALK = "walk"
    COPY_FILE = "copy_file"
    WRITE_FILE = "write_file"
    CREATE_DIR = "create_dir"
    CLEANUP = "cleanup"
    SYMLINK = "symlink"
    READ = "read"

    def __str__(self) -> str:          # noqa: D105
        return self.value

    @property
    def summary(self) -> str:
        """Short human-readable description of the failed step."""
        return _KIND_SUMMARY[self]


_KIND_SUMMARY = {
    FixtureKind.WALK: "failed when walking the source tree",
    FixtureKind.COPY_FILE: "failed when copying a file",
    FixtureKind.WRITE_FILE: "failed when writing to a file",
    FixtureKind.CREATE_DIR: "failed when creating a directory",
    FixtureKind.CLEANUP: "failed to clean up fixture",
    FixtureKind.SYMLINK: "failed when symlinking to the target",
    FixtureKind.READ: "failed when reading a path",
}


class FixtureError(Exception):
    """Raised when a filesystem operation on a fixture fails.

    The underlying :class:`OSError` (if any) is available as ``__cause__``.

    Attributes:
        kind: :class:`FixtureKind` of the failed step.
        path: The path the operation was working on.
    """

    def __init__(self, kind: FixtureKind, path: str | os.PathLike[str],
                 reason: str | None = None) -> None:
        self.kind = kind
        self.path = os.fspath(path)
        self.reason = reason
        super().__init__(str(self))

    def __str__(self) -> str:
        msg = f"Failed to initialize fixture: {self.kind.summary}: {self.path}"
        if self.reason:
            msg += f" ({self.reason})"
        return msg


class PatternError(ValueError):
    """Raised when a glob pattern cannot be compiled.

    Attributes:
        pattern: The offending pattern text.
        reason: Why it was rejected.
    """

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid glob pattern {pattern!r}: {reason}")


class EncodingError(ValueError):
    """Raised when text content is requested from bytes that do not decode.

    Callers can fall back to a byte-level predicate.
    """

    def __init__(self, path: str | os.PathLike[str], encoding: str,
                 detail: str) -> None:
        self.path = os.fspath(path)
        self.encoding = encoding
        super().__init__(f"Content of {self.path} is not valid {encoding}: {detail}")


class PathAssertionError(AssertionError):
    """A path predicate evaluated false.

    The message is the rendered diagnostic; the structured result is on
    :attr:`outcome`.
    """

    def __init__(self, outcome: AssertionOutcome) -> None:
        self.outcome = outcome
        super().__init__(outcome.render())
