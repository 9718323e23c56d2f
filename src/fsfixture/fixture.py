"""Temporary fixture roots and the paths inside them.

:class:`TempDir` owns a unique temporary directory; :class:`ChildPath`
names a location below it without touching the filesystem.  Both expose
the writers from :mod:`fsfixture._tools`, tree replication and path
assertions as methods::

    with fsfixture.TempDir() as temp:
        temp.child("foo.txt").write_text("hello\\n")
        temp.child("src").copy_from("tests/data", [("*.py", False)])
        temp.child("foo.txt").assert_that("hello\\n")
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import weakref
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from . import _tools
from ._glob import PatternSpec
from .assertions import AssertionOutcome, PredicateLike, assert_path, check
from .config import Disposal, FixtureConfig
from .copy import SymlinkPolicy, copy_from
from .exceptions import FixtureError, FixtureKind

logger = logging.getLogger(__name__)

_PREFIX = "fsfixture-"


# ---------------------------------------------------------------------------
# Disposal
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Release:
    """What happened to a fixture root when it was released.

    Attributes:
        path: Absolute path of the root directory.
        disposal: Policy that was applied.
        removed: ``True`` if the directory was deleted.
    """
    path: str
    disposal: Disposal
    removed: bool

    @property
    def notice(self) -> str | None:
        """Line to show the user for a kept root, ``None`` if it was removed."""
        if self.removed:
            return None
        if self.disposal is Disposal.KEEP_WITH_MARKER:
            return f"[fsfixture:debug] fixture kept for inspection: {self.path}"
        return f"fixture kept: {self.path}"


def _dispose(path: str, disposal: Disposal, *, strict: bool = False) -> Release:
    """Apply *disposal* to the root at *path*.

    Shared by explicit release (``strict=True``) and the garbage-collection
    finalizer, which logs removal failures instead of raising.
    """
    if disposal is not Disposal.DELETE:
        release = Release(path, disposal, removed=False)
        if disposal is Disposal.KEEP_WITH_MARKER:
            logger.warning("%s", release.notice)
        else:
            logger.info("%s", release.notice)
        return release
    try:
        shutil.rmtree(path)
    except OSError as exc:
        if strict:
            raise FixtureError(FixtureKind.CLEANUP, path, exc.strerror) from exc
        logger.warning("could not remove fixture directory %s: %s", path, exc)
        return Release(path, disposal, removed=False)
    logger.debug("removed fixture directory %s", path)
    return Release(path, disposal, removed=True)


def _make_unique_dir(config: FixtureConfig) -> str:
    parent = config.resolve_temp_root()
    try:
        path = tempfile.mkdtemp(prefix=_PREFIX, dir=parent)
    except OSError as exc:
        raise FixtureError(FixtureKind.CREATE_DIR, parent, exc.strerror) from exc
    logger.debug("created fixture directory %s", path)
    return path


# ---------------------------------------------------------------------------
# Path operations shared by roots and children
# ---------------------------------------------------------------------------

class _Assertable:
    @property
    def path(self) -> Path:
        raise NotImplementedError

    def __fspath__(self) -> str:
        return str(self.path)

    def check(self, pred: PredicateLike) -> AssertionOutcome:
        """Evaluate *pred* against this path; see :func:`fsfixture.check`."""
        return check(self, pred)

    def assert_that(self, pred: PredicateLike):
        """Raise :class:`~fsfixture.PathAssertionError` unless *pred* holds."""
        assert_path(self, pred)
        return self


class _FileOps(_Assertable):
    def touch(self):
        """Create an empty file (and missing parents)."""
        _tools.touch(self.path)
        return self

    def write_bytes(self, data: bytes):
        _tools.write_bytes(self.path, data)
        return self

    def write_text(self, data: str, encoding: str = "utf-8"):
        _tools.write_text(self.path, data, encoding)
        return self

    def write_file(self, source: str | os.PathLike[str]):
        """Copy the file at *source* here."""
        _tools.write_file(self.path, source)
        return self

    def symlink_to_file(self, target: str | os.PathLike[str]):
        _tools.symlink_to_file(self.path, target)
        return self


class _DirOps(_Assertable):
    def child(self, *segments: str | os.PathLike[str]) -> ChildPath:
        """Name a path below this one.  No filesystem access."""
        return ChildPath(self.path, segments)

    def __truediv__(self, segment: str | os.PathLike[str]) -> ChildPath:
        return self.child(segment)

    def mkdir(self):
        """Create this directory and any missing parents."""
        _tools.create_dir_all(self.path)
        return self

    def symlink_to_dir(self, target: str | os.PathLike[str]):
        _tools.symlink_to_dir(self.path, target)
        return self

    def copy_from(
        self,
        source: str | os.PathLike[str],
        patterns: Iterable[PatternSpec] = (),
        *,
        symlinks: SymlinkPolicy = SymlinkPolicy.SKIP,
        gitignore: bool = False,
    ) -> int:
        """Copy files of *source* selected by *patterns* here.

        See :func:`fsfixture.copy.copy_from`.  Returns the number of files
        written.
        """
        return copy_from(self.path, source, patterns, symlinks=symlinks, gitignore=gitignore)


class ChildPath(_FileOps, _DirOps):
    """A location relative to a fixture root (or another child).

    Holds the root path and the relative segments; the absolute path is
    computed on demand and need not exist.
    """

    def __init__(self, root: str | os.PathLike[str],
                 segments: Iterable[str | os.PathLike[str]] = ()) -> None:
        self._root = os.fspath(root)
        self._segments = tuple(os.fspath(s) for s in segments)

    @property
    def path(self) -> Path:
        return Path(self._root).joinpath(*self._segments)

    def child(self, *segments: str | os.PathLike[str]) -> ChildPath:
        return ChildPath(self._root, self._segments + tuple(os.fspath(s) for s in segments))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ChildPath):
            return self.path == other.path
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.path)

    def __str__(self) -> str:
        return str(self.path)

    def __repr__(self) -> str:
        return f"ChildPath({str(self.path)!r})"


# ---------------------------------------------------------------------------
# Owned temporary locations
# ---------------------------------------------------------------------------

class _Owned:
    """Lifecycle of a unique temporary directory."""

    def __init__(self, disposal: Disposal | str | None, config: FixtureConfig | None) -> None:
        config = config or FixtureConfig.from_env()
        self._disposal = Disposal.parse(disposal) if disposal is not None else config.disposal
        self._dir = _make_unique_dir(config)
        self._finalizer = weakref.finalize(self, _dispose, self._dir, self._disposal)

    @property
    def disposal(self) -> Disposal:
        return self._disposal

    @property
    def closed(self) -> bool:
        """``True`` once the fixture has been released."""
        return not self._finalizer.alive

    def _set_disposal(self, disposal: Disposal) -> None:
        self._disposal = disposal
        if self._finalizer.detach() is not None:
            self._finalizer = weakref.finalize(self, _dispose, self._dir, disposal)

    def into_persistent(self, yes: bool = True):
        """Keep the directory on release when *yes* is true."""
        if yes:
            self._set_disposal(Disposal.KEEP)
        return self

    def release(self, disposal: Disposal | str | None = None) -> Release:
        """Apply the disposal policy now and report the outcome.

        *disposal* overrides the policy chosen at creation.  Removal
        failures raise :class:`~fsfixture.FixtureError`.  Calling this
        again only reports the current state.
        """
        if disposal is not None:
            self._set_disposal(Disposal.parse(disposal))
        detached = self._finalizer.detach()
        if detached is None:
            return Release(self._dir, self._disposal, removed=not os.path.exists(self._dir))
        _obj, func, args, _kwargs = detached
        return func(*args, strict=True)

    def close(self) -> Release:
        return self.release()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()


class TempDir(_Owned, _DirOps):
    """A uniquely named temporary directory used as a fixture root.

    The directory is removed, or kept, according to its :class:`Disposal`
    policy when :meth:`release` is called, when a ``with`` block exits, or
    when the object is garbage collected.

    Args:
        disposal: Policy override; defaults to ``FSFIXTURE_DISPOSAL`` or
            ``delete``.
        config: Explicit :class:`FixtureConfig` instead of the environment.
    """

    def __init__(self, disposal: Disposal | str | None = None, *,
                 config: FixtureConfig | None = None) -> None:
        super().__init__(disposal, config)

    @property
    def path(self) -> Path:
        return Path(self._dir)

    def __str__(self) -> str:
        return self._dir

    def __repr__(self) -> str:
        return f"TempDir({self._dir!r}, disposal={self._disposal.value!r})"


class NamedTempFile(_Owned, _FileOps):
    """A file path named *name* inside its own private temporary directory.

    The file is not created; use :meth:`touch` or a write method.
    """

    def __init__(self, name: str, disposal: Disposal | str | None = None, *,
                 config: FixtureConfig | None = None) -> None:
        super().__init__(disposal, config)
        self._name = name

    @property
    def path(self) -> Path:
        return Path(self._dir, self._name)

    @property
    def directory(self) -> Path:
        return Path(self._dir)

    def __str__(self) -> str:
        return str(self.path)

    def __repr__(self) -> str:
        return f"NamedTempFile({str(self.path)!r}, disposal={self._disposal.value!r})"


def new_root(disposal: Disposal | str | None = None, *,
             config: FixtureConfig | None = None) -> TempDir:
    """Create a new fixture root; see :class:`TempDir`."""
    return TempDir(disposal, config=config)
