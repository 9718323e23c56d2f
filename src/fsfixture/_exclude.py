""".gitignore support for tree replication.

When ``gitignore=True`` is passed to :func:`~fsfixture.copy.replicate`,
``.gitignore`` files found in the source tree are loaded as the walk
enters each directory and consulted before the glob filter.

Pattern syntax follows gitignore rules (implemented by
``dulwich.ignore.IgnoreFilter``).
"""

from __future__ import annotations

from pathlib import Path

from dulwich.ignore import IgnoreFilter


class GitignoreFilter:
    """Hierarchy of ``.gitignore`` files loaded during a walk."""

    def __init__(self) -> None:
        # {rel_dir: IgnoreFilter | None}, loaded per directory
        self._dir_filters: dict[str, IgnoreFilter | None] = {}

    # ------------------------------------------------------------------
    def enter_directory(self, abs_dir: Path, rel_dir: str) -> None:
        """Load ``.gitignore`` from *abs_dir*, once per directory."""
        if rel_dir in self._dir_filters:
            return
        gi = abs_dir / ".gitignore"
        if gi.is_file():
            self._dir_filters[rel_dir] = IgnoreFilter.from_path(str(gi))
        else:
            self._dir_filters[rel_dir] = None

    # ------------------------------------------------------------------
    def is_excluded(self, rel_path: str, *, is_dir: bool = False) -> bool:
        """Check *rel_path* against the loaded ``.gitignore`` hierarchy.

        Must be called after :meth:`enter_directory` has been invoked for
        every ancestor.  The deepest ``.gitignore`` with an opinion wins.
        """
        parts = rel_path.split("/")
        for depth in range(len(parts) - 1, -1, -1):
            dir_key = "/".join(parts[:depth])
            filt = self._dir_filters.get(dir_key)
            if filt is None:
                continue
            # Path relative to this .gitignore's directory
            sub = "/".join(parts[depth:])
            result = filt.is_ignored(sub + "/" if is_dir else sub)
            if result is not None:
                return result
        return False
