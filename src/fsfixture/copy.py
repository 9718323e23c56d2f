"""Selective, additive replication of a directory tree into a fixture.

The source tree is walked once; each file's path relative to the source
is tested against a :class:`~fsfixture._glob.GlobFilter` and selected
files are copied (bytes and permission bits) to the same relative path
under the destination.  Existing destination content is never removed.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator

from ._exclude import GitignoreFilter
from ._glob import GlobFilter, PatternSpec
from ._tools import create_dir_all, ensure_parent_dir
from .exceptions import FixtureError, FixtureKind

logger = logging.getLogger(__name__)


class SymlinkPolicy(str, Enum):
    """How symlinks met during a walk are handled.

    ``SKIP`` ignores them, ``FOLLOW`` copies what they point at (descending
    into linked directories), ``PRESERVE`` recreates the link itself.
    """
    SKIP = "skip"
    FOLLOW = "follow"
    PRESERVE = "preserve"

    def __str__(self) -> str:          # noqa: D105
        return self.value


@dataclass(frozen=True)
class CopyEntry:
    """One selected source entry.

    Attributes:
        rel: Path relative to the source root (forward slashes).
        src: Absolute source path.
        link: Link target when a symlink is preserved, else ``None``.
    """
    rel: str
    src: str
    link: str | None = None


# ---------------------------------------------------------------------------
# Walking
# ---------------------------------------------------------------------------

def _raise_walk_error(exc: OSError) -> None:
    raise FixtureError(FixtureKind.WALK, exc.filename or "", exc.strerror) from exc


def _resolve_source(source: str | os.PathLike[str]) -> Path:
    base = Path(os.path.realpath(source))
    if not base.is_dir():
        reason = "not a directory" if base.exists() else "no such directory"
        raise FixtureError(FixtureKind.WALK, source, reason)
    return base


def _join(rel_dir: str, name: str) -> str:
    return f"{rel_dir}/{name}" if rel_dir else name


def _readlink(path: Path) -> str:
    try:
        return os.readlink(path)
    except OSError as exc:
        raise FixtureError(FixtureKind.WALK, path, exc.strerror) from exc


def _walk(
    base: Path,
    flt: GlobFilter,
    symlinks: SymlinkPolicy,
    gitignore: bool,
    prune: str | None = None,
) -> Iterator[CopyEntry]:
    ignore = GitignoreFilter() if gitignore else None
    follow = symlinks is SymlinkPolicy.FOLLOW
    # {dirpath: realpaths of it and its ancestors}, for loop detection
    chains: dict[str, frozenset[str]] = {}

    for dirpath, dirnames, filenames in os.walk(base, onerror=_raise_walk_error,
                                                followlinks=follow):
        dp = Path(dirpath)
        rel_dir = "" if dp == base else dp.relative_to(base).as_posix()
        chain = chains.pop(dirpath, frozenset()) | {os.path.realpath(dirpath)}
        if ignore is not None:
            ignore.enter_directory(dp, rel_dir)

        kept = []
        for dname in sorted(dirnames):
            full = dp / dname
            rel = _join(rel_dir, dname)
            real = os.path.realpath(full)
            if prune is not None and real == prune:
                continue
            if ignore is not None and ignore.is_excluded(rel, is_dir=True):
                continue
            if flt.prunes(rel):
                continue
            if not follow and full.is_symlink():
                if symlinks is SymlinkPolicy.PRESERVE and flt.matches(rel):
                    yield CopyEntry(rel, str(full), link=_readlink(full))
                continue
            if real in chain:
                # link back to an ancestor
                continue
            chains[os.path.join(dirpath, dname)] = chain
            kept.append(dname)
        dirnames[:] = kept

        for fname in sorted(filenames):
            full = dp / fname
            rel = _join(rel_dir, fname)
            if ignore is not None and ignore.is_excluded(rel):
                continue
            if not flt.matches(rel):
                continue
            try:
                st = os.lstat(full)
            except OSError as exc:
                raise FixtureError(FixtureKind.WALK, full, exc.strerror) from exc
            if stat.S_ISLNK(st.st_mode):
                if symlinks is SymlinkPolicy.SKIP:
                    continue
                if symlinks is SymlinkPolicy.PRESERVE:
                    yield CopyEntry(rel, str(full), link=_readlink(full))
                    continue
                try:
                    st = os.stat(full)
                except OSError as exc:
                    raise FixtureError(FixtureKind.WALK, full, "broken symlink") from exc
            # FIFOs, sockets and devices are never copied
            if stat.S_ISREG(st.st_mode):
                yield CopyEntry(rel, str(full))


def iter_selection(
    source: str | os.PathLike[str],
    flt: GlobFilter | None = None,
    *,
    symlinks: SymlinkPolicy = SymlinkPolicy.SKIP,
    gitignore: bool = False,
) -> Iterator[CopyEntry]:
    """Lazily yield the entries of *source* selected by *flt*.

    Entries come in sorted depth-first order.  Raises
    :class:`~fsfixture.exceptions.FixtureError` when *source* is not a
    directory or cannot be read.
    """
    base = _resolve_source(source)
    return _walk(base, flt or GlobFilter(), SymlinkPolicy(symlinks), gitignore)


def select_files(
    source: str | os.PathLike[str],
    patterns: Iterable[PatternSpec] = (),
    *,
    symlinks: SymlinkPolicy = SymlinkPolicy.SKIP,
    gitignore: bool = False,
) -> list[str]:
    """Return the relative paths :func:`copy_from` would write, without copying."""
    flt = GlobFilter.compile(patterns)
    return [e.rel for e in iter_selection(source, flt, symlinks=symlinks, gitignore=gitignore)]


# ---------------------------------------------------------------------------
# Copying
# ---------------------------------------------------------------------------

def _copy_file(entry: CopyEntry, target: Path) -> None:
    try:
        # replace rather than rewrite, the old copy may be read-only
        if target.is_symlink() or target.is_file():
            target.unlink()
        shutil.copyfile(entry.src, target)
        shutil.copymode(entry.src, target)
    except OSError as exc:
        raise FixtureError(FixtureKind.COPY_FILE, target, exc.strerror) from exc


def _write_link(entry: CopyEntry, target: Path) -> None:
    try:
        if target.is_symlink() or target.exists():
            target.unlink()
        os.symlink(entry.link, target)
    except OSError as exc:
        raise FixtureError(FixtureKind.SYMLINK, target, exc.strerror) from exc


def replicate(
    source: str | os.PathLike[str],
    dest: str | os.PathLike[str],
    flt: GlobFilter | None = None,
    *,
    symlinks: SymlinkPolicy = SymlinkPolicy.SKIP,
    gitignore: bool = False,
) -> int:
    """Copy the files of *source* selected by *flt* into *dest*.

    Missing destination directories are created; files already present
    in *dest* are overwritten only when selected, never deleted.  The
    first I/O error aborts the copy with a
    :class:`~fsfixture.exceptions.FixtureError`; files copied before it
    stay in place.

    Args:
        source: Directory to copy from.
        dest: Directory to copy into (created if missing).
        flt: Compiled filter; ``None`` selects every file.
        symlinks: :class:`SymlinkPolicy` for links met during the walk.
        gitignore: Honor ``.gitignore`` files found in *source*.

    Returns:
        Number of files (and preserved links) written.
    """
    base = _resolve_source(source)
    dest_path = Path(dest)
    create_dir_all(dest_path)
    # Never walk into the destination when it lives inside the source.
    prune = os.path.realpath(dest_path)

    count = 0
    for entry in _walk(base, flt or GlobFilter(), SymlinkPolicy(symlinks), gitignore, prune):
        target = dest_path.joinpath(*entry.rel.split("/"))
        ensure_parent_dir(target)
        if entry.link is not None:
            _write_link(entry, target)
        else:
            _copy_file(entry, target)
        logger.debug("copied %s -> %s", entry.src, target)
        count += 1
    logger.debug("replicated %d file(s) from %s into %s", count, base, dest_path)
    return count


def copy_from(
    dest: str | os.PathLike[str],
    source: str | os.PathLike[str],
    patterns: Iterable[PatternSpec] = (),
    *,
    symlinks: SymlinkPolicy = SymlinkPolicy.SKIP,
    gitignore: bool = False,
) -> int:
    """Compile *patterns* and copy the selected files of *source* into *dest*.

    Patterns are validated before anything is written.  With no patterns
    every regular file is copied.
    """
    flt = GlobFilter.compile(patterns)
    return replicate(source, dest, flt, symlinks=symlinks, gitignore=gitignore)
