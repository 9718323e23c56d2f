"""Self-describing predicates over the state of a path.

A predicate is any object with ``evaluate(path) -> bool`` and
``describe() -> str``; it may also provide ``explain(path)`` returning a
detailed account of what was found when evaluation fails.  The built-in
variants below all derive from :class:`PathPredicate`.

Example::

    from fsfixture import predicates as p

    temp.child("out.txt").assert_that(p.is_file())
    temp.child("cache").assert_that(p.missing())
    temp.child("data.bin").assert_that(p.bytes_equals(b"\\x00\\x01"))
"""

from __future__ import annotations

import difflib
import os
import stat
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Protocol, runtime_checkable

from .exceptions import EncodingError, FixtureError, FixtureKind

_PREVIEW_LIMIT = 120


@runtime_checkable
class Predicate(Protocol):
    """Capability required by :func:`~fsfixture.assertions.check`."""

    def evaluate(self, path: Path) -> bool: ...

    def describe(self) -> str: ...


class PathPredicate(ABC):
    """Base class for the built-in predicates."""

    @abstractmethod
    def evaluate(self, path: Path) -> bool: ...

    @abstractmethod
    def describe(self) -> str: ...

    def explain(self, path: Path) -> str | None:
        """Describe what was found at *path*; ``None`` if nothing to add."""
        return None

    def __invert__(self) -> PathPredicate:
        return Not(self)

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"<{type(self).__name__}: {self.describe()}>"


# ---------------------------------------------------------------------------
# Path state helpers
# ---------------------------------------------------------------------------

def _kind_of(path: Path) -> str | None:
    """Return a noun for what is at *path*, or ``None`` when nothing is."""
    try:
        st = os.lstat(path)
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise FixtureError(FixtureKind.READ, path, exc.strerror) from exc
    if stat.S_ISLNK(st.st_mode):
        return "symlink" if path.exists() else "broken symlink"
    if stat.S_ISDIR(st.st_mode):
        return "directory"
    if stat.S_ISREG(st.st_mode):
        return "file"
    return "special file"


def _found(path: Path) -> str:
    kind = _kind_of(path)
    return "not found" if kind is None else f"found a {kind}"


def _read_content(path: Path) -> tuple[bytes | None, str | None]:
    """Return ``(data, None)`` or ``(None, reason)`` when there is no file."""
    try:
        with open(path, "rb") as f:
            return f.read(), None
    except FileNotFoundError:
        return None, "not found"
    except (IsADirectoryError, NotADirectoryError):
        return None, _found(path)
    except PermissionError as exc:
        # Windows reports opening a directory as EACCES
        if path.is_dir():
            return None, "found a directory"
        raise FixtureError(FixtureKind.READ, path, exc.strerror) from exc
    except OSError as exc:
        raise FixtureError(FixtureKind.READ, path, exc.strerror) from exc


def _decode(path: Path, data: bytes, encoding: str) -> str:
    try:
        return data.decode(encoding)
    except UnicodeDecodeError as exc:
        raise EncodingError(path, encoding, str(exc)) from exc


def _preview(value: str | bytes) -> str:
    text = repr(value)
    if len(text) <= _PREVIEW_LIMIT:
        return text
    return f"{text[:_PREVIEW_LIMIT]}... ({len(value)} {'chars' if isinstance(value, str) else 'bytes'} total)"


# ---------------------------------------------------------------------------
# Existence and type
# ---------------------------------------------------------------------------

class Exists(PathPredicate):
    def evaluate(self, path: Path) -> bool:
        return path.exists()

    def describe(self) -> str:
        return "path exists"

    def explain(self, path: Path) -> str | None:
        return _found(path)


class Missing(PathPredicate):
    def evaluate(self, path: Path) -> bool:
        return not path.exists()

    def describe(self) -> str:
        return "path is missing"

    def explain(self, path: Path) -> str | None:
        return _found(path)


class IsFile(PathPredicate):
    def evaluate(self, path: Path) -> bool:
        return path.is_file()

    def describe(self) -> str:
        return "path is a file"

    def explain(self, path: Path) -> str | None:
        return _found(path)


class IsDir(PathPredicate):
    def evaluate(self, path: Path) -> bool:
        return path.is_dir()

    def describe(self) -> str:
        return "path is a directory"

    def explain(self, path: Path) -> str | None:
        return _found(path)


class IsSymlink(PathPredicate):
    def evaluate(self, path: Path) -> bool:
        return path.is_symlink()

    def describe(self) -> str:
        return "path is a symlink"

    def explain(self, path: Path) -> str | None:
        return _found(path)


# ---------------------------------------------------------------------------
# Content
# ---------------------------------------------------------------------------

def _first_differing_line(expected: list[str], actual: list[str]) -> int:
    for i, (a, b) in enumerate(zip(expected, actual)):
        if a != b:
            return i + 1
    return min(len(expected), len(actual)) + 1


def text_diff(expected: str, actual: str) -> str:
    """Render a line-oriented diff of *actual* against *expected*.

    The first line names the first differing line number (1-based).
    """
    lineno = _first_differing_line(expected.splitlines(keepends=True),
                                   actual.splitlines(keepends=True))
    lines = [f"first difference at line {lineno}"]
    diff = list(difflib.unified_diff(
        expected.splitlines(), actual.splitlines(),
        fromfile="expected", tofile="actual", lineterm="",
    ))
    if diff:
        lines.extend(diff)
    else:
        lines.append("texts differ only in line endings")
        lines.append(f"expected: {_preview(expected)}")
        lines.append(f"actual:   {_preview(actual)}")
    return "\n".join(lines)


def bytes_summary(expected: bytes, actual: bytes) -> str:
    """Summarize how *actual* differs from *expected* (lengths, first offset)."""
    lines = [f"expected {len(expected)} bytes, found {len(actual)} bytes"]
    offset = next(
        (i for i, (a, b) in enumerate(zip(expected, actual)) if a != b),
        min(len(expected), len(actual)),
    )
    want = f"0x{expected[offset]:02x}" if offset < len(expected) else "end of content"
    got = f"0x{actual[offset]:02x}" if offset < len(actual) else "end of content"
    lines.append(f"first difference at offset {offset}: expected {want}, found {got}")
    return "\n".join(lines)


class BytesEqual(PathPredicate):
    """File content is exactly *expected*."""

    def __init__(self, expected: bytes) -> None:
        self.expected = expected

    def evaluate(self, path: Path) -> bool:
        data, _reason = _read_content(path)
        return data == self.expected

    def describe(self) -> str:
        return f"file content is equal to {_preview(self.expected)}"

    def explain(self, path: Path) -> str | None:
        data, reason = _read_content(path)
        if data is None:
            return reason
        return bytes_summary(self.expected, data)


class TextEqual(PathPredicate):
    """File content, decoded with *encoding*, is exactly *expected*."""

    def __init__(self, expected: str, encoding: str = "utf-8") -> None:
        self.expected = expected
        self.encoding = encoding

    def evaluate(self, path: Path) -> bool:
        data, _reason = _read_content(path)
        if data is None:
            return False
        return _decode(path, data, self.encoding) == self.expected

    def describe(self) -> str:
        return f"file content is equal to {_preview(self.expected)}"

    def explain(self, path: Path) -> str | None:
        data, reason = _read_content(path)
        if data is None:
            return reason
        return text_diff(self.expected, _decode(path, data, self.encoding))


class IsEmpty(PathPredicate):
    def evaluate(self, path: Path) -> bool:
        return path.is_file() and path.stat().st_size == 0

    def describe(self) -> str:
        return "file is empty"

    def explain(self, path: Path) -> str | None:
        if not path.is_file():
            return _found(path)
        return f"found {path.stat().st_size} bytes"


# ---------------------------------------------------------------------------
# Callables and negation
# ---------------------------------------------------------------------------

class FunctionPredicate(PathPredicate):
    """Wrap a caller-supplied ``fn(path) -> bool``."""

    def __init__(self, fn: Callable[[Path], bool], description: str | None = None) -> None:
        self.fn = fn
        self.description = description or getattr(fn, "__name__", repr(fn))

    def evaluate(self, path: Path) -> bool:
        return bool(self.fn(path))

    def describe(self) -> str:
        return self.description


class Not(PathPredicate):
    def __init__(self, inner: Predicate) -> None:
        self.inner = inner

    def evaluate(self, path: Path) -> bool:
        return not self.inner.evaluate(path)

    def describe(self) -> str:
        return f"not ({self.inner.describe()})"

    def explain(self, path: Path) -> str | None:
        return f"{self.inner.describe()} holds"


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------

def exists() -> PathPredicate:
    return Exists()


def missing() -> PathPredicate:
    return Missing()


def is_file() -> PathPredicate:
    return IsFile()


def is_dir() -> PathPredicate:
    return IsDir()


def is_symlink() -> PathPredicate:
    return IsSymlink()


def is_empty() -> PathPredicate:
    return IsEmpty()


def bytes_equals(expected: bytes | bytearray | memoryview) -> PathPredicate:
    """Content equality against a byte sequence (copied, never truncated)."""
    return BytesEqual(bytes(expected))


def text_equals(expected: str, encoding: str = "utf-8") -> PathPredicate:
    """Content equality against text decoded with *encoding*."""
    return TextEqual(expected, encoding)


def predicate(fn: Callable[[Path], bool], description: str | None = None) -> PathPredicate:
    """Turn a callable into a predicate described by *description*."""
    return FunctionPredicate(fn, description)


def not_(inner: Predicate) -> PathPredicate:
    return Not(inner)
