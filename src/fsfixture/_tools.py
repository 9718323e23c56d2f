"""Primitive filesystem writers used to populate fixtures.

Each helper creates missing parent directories first and reports
failures as :class:`~fsfixture.exceptions.FixtureError`.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from .exceptions import FixtureError, FixtureKind


def ensure_parent_dir(path: str | os.PathLike[str]) -> None:
    """Create the parent directory chain of *path* (idempotent)."""
    parent = Path(path).parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FixtureError(FixtureKind.CREATE_DIR, parent, exc.strerror) from exc


def create_dir_all(path: str | os.PathLike[str]) -> None:
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as exc:
        raise FixtureError(FixtureKind.CREATE_DIR, path, exc.strerror) from exc


def touch(path: str | os.PathLike[str]) -> None:
    """Create an empty file at *path*, truncating any existing content."""
    write_bytes(path, b"")


def write_bytes(path: str | os.PathLike[str], data: bytes) -> None:
    ensure_parent_dir(path)
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as exc:
        raise FixtureError(FixtureKind.WRITE_FILE, path, exc.strerror) from exc


def write_text(path: str | os.PathLike[str], data: str, encoding: str = "utf-8") -> None:
    write_bytes(path, data.encode(encoding))


def write_file(path: str | os.PathLike[str], source: str | os.PathLike[str]) -> None:
    """Copy the file at *source* to *path* (bytes and permission bits)."""
    ensure_parent_dir(path)
    try:
        # the previous copy may be read-only
        if (os.path.isfile(source) and os.path.isfile(path) and not os.path.islink(path)
                and not os.path.samefile(source, path)):
            os.unlink(path)
        shutil.copyfile(source, path)
        shutil.copymode(source, path)
    except OSError as exc:
        raise FixtureError(FixtureKind.COPY_FILE, path, exc.strerror) from exc


def _symlink(link: str | os.PathLike[str], target: str | os.PathLike[str],
             target_is_directory: bool) -> None:
    ensure_parent_dir(link)
    try:
        os.symlink(target, link, target_is_directory=target_is_directory)
    except OSError as exc:
        raise FixtureError(FixtureKind.SYMLINK, link, exc.strerror) from exc


def symlink_to_file(link: str | os.PathLike[str], target: str | os.PathLike[str]) -> None:
    """Create *link* pointing at the file *target*."""
    _symlink(link, target, False)


def symlink_to_dir(link: str | os.PathLike[str], target: str | os.PathLike[str]) -> None:
    """Create *link* pointing at the directory *target*."""
    _symlink(link, target, True)
