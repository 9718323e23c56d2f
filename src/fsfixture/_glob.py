"""Ordered include/exclude glob matching for tree replication.

Patterns are matched segment by segment with :mod:`fnmatch`; ``**`` as a
whole segment spans any number of directory levels.  The last pattern that
matches a path decides whether it is selected.
"""

from __future__ import annotations

import fnmatch
import os
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence, Tuple, Union

from .exceptions import PatternError

_DOUBLE_STAR = "**"


@dataclass(frozen=True)
class GlobPattern:
    """One entry of a :class:`GlobFilter`.

    Attributes:
        text: Glob text (no ``!`` sigil; see :func:`parse_pattern`).
        exclude: ``True`` to deselect matching paths.
    """
    text: str
    exclude: bool = False

    def __str__(self) -> str:          # noqa: D105
        return f"!{self.text}" if self.exclude else self.text


PatternSpec = Union[GlobPattern, Tuple[str, bool], str]


def parse_pattern(text: str) -> GlobPattern:
    """Convert gitignore-style text (``!pat`` excludes) into a :class:`GlobPattern`.

    A leading ``\\!`` escapes a literal ``!``.
    """
    if text.startswith("\\!"):
        return GlobPattern(text[1:])
    if text.startswith("!"):
        return GlobPattern(text[1:], exclude=True)
    return GlobPattern(text)


def _check_ranges(pattern: str, body: str) -> None:
    i = 0
    while i < len(body):
        if i + 2 < len(body) and body[i + 1] == "-":
            lo, hi = body[i], body[i + 2]
            if lo > hi:
                raise PatternError(pattern, f"reversed character range {lo}-{hi}")
            i += 3
        else:
            i += 1


def _check_brackets(pattern: str, segment: str) -> None:
    """Reject unterminated ``[`` classes and reversed ranges."""
    i = 0
    n = len(segment)
    while i < n:
        c = segment[i]
        i += 1
        if c != "[":
            continue
        j = i
        if j < n and segment[j] == "!":
            j += 1
        if j < n and segment[j] == "]":
            j += 1
        while j < n and segment[j] != "]":
            j += 1
        if j >= n:
            raise PatternError(pattern, "unterminated character class '['")
        body = segment[i:j]
        if body.startswith("!"):
            body = body[1:]
        _check_ranges(pattern, body)
        i = j + 1


def _compile_segment(pattern: str, segment: str) -> Callable[[str], object] | str:
    if segment == _DOUBLE_STAR:
        return _DOUBLE_STAR
    if _DOUBLE_STAR in segment:
        raise PatternError(pattern, "'**' must be a whole path segment")
    if segment in (".", ".."):
        raise PatternError(pattern, f"relative segment {segment!r} is not allowed")
    _check_brackets(pattern, segment)
    try:
        return re.compile(fnmatch.translate(segment)).match
    except re.error as exc:
        raise PatternError(pattern, str(exc)) from exc


class _CompiledPattern:
    """A single pattern split into per-segment matchers."""

    __slots__ = ("source", "exclude", "spans", "_segments")

    def __init__(self, source: GlobPattern) -> None:
        text = source.text
        if not text:
            raise PatternError(text, "pattern is empty")
        if text.endswith("/"):
            raise PatternError(text, "trailing '/' never matches a file; use 'dir/**'")
        anchored = "/" in text
        body = text[1:] if text.startswith("/") else text
        if not body:
            raise PatternError(text, "pattern is empty")
        raw = body.split("/")
        if any(not seg for seg in raw):
            raise PatternError(text, "empty path segment")
        segments = []
        for seg in raw:
            matcher = _compile_segment(text, seg)
            # consecutive ** collapse to one
            if matcher is _DOUBLE_STAR and segments and segments[-1] is _DOUBLE_STAR:
                continue
            segments.append(matcher)
        if not anchored and segments[0] is not _DOUBLE_STAR:
            # a bare name matches at any depth
            segments.insert(0, _DOUBLE_STAR)
        self.source = source
        self.exclude = source.exclude
        # ends in "**": matches contents one path at a time
        self.spans = segments[-1] is _DOUBLE_STAR
        self._segments = tuple(segments)

    def matches(self, parts: Sequence[str]) -> bool:
        return _match_segments(self._segments, tuple(parts))


def _match_segments(segments: tuple, parts: tuple) -> bool:
    if not segments:
        return not parts
    head = segments[0]
    rest = segments[1:]
    if head is _DOUBLE_STAR:
        if not rest:
            return True
        return any(_match_segments(rest, parts[i:]) for i in range(len(parts) + 1))
    if not parts or not head(parts[0]):
        return False
    return _match_segments(rest, parts[1:])


def _split_relative(rel_path: str | os.PathLike[str]) -> list[str]:
    path = os.fspath(rel_path)
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    return [p for p in path.split("/") if p and p != "."]


def _as_pattern(spec: PatternSpec) -> GlobPattern:
    if isinstance(spec, GlobPattern):
        return spec
    if isinstance(spec, str):
        return GlobPattern(spec)
    text, exclude = spec
    return GlobPattern(text, bool(exclude))


class GlobFilter:
    """Compiled, immutable list of include/exclude glob patterns.

    Use :meth:`compile` to build one.  :meth:`matches` answers whether a
    path relative to the replication root is selected:

    * the last pattern matching the path decides;
    * with no match, the path is selected unless the list contains an
      include pattern (whitelist mode);
    * nothing below a directory rejected by :meth:`prunes` is selected.
    """

    __slots__ = ("_patterns", "_default")

    def __init__(self, patterns: Iterable[_CompiledPattern] = ()) -> None:
        self._patterns = tuple(patterns)
        self._default = all(p.exclude for p in self._patterns)

    @classmethod
    def compile(cls, patterns: Iterable[PatternSpec] = ()) -> GlobFilter:
        """Compile *patterns* in order.

        Each entry is a :class:`GlobPattern`, a ``(text, exclude)`` pair, or
        a plain string (an include pattern).  Raises :class:`PatternError`
        if any entry is invalid; no partial filter is returned.
        """
        return cls(_CompiledPattern(_as_pattern(p)) for p in patterns)

    @property
    def active(self) -> bool:
        """True if any pattern is configured."""
        return bool(self._patterns)

    @property
    def patterns(self) -> tuple[GlobPattern, ...]:
        return tuple(p.source for p in self._patterns)

    def _last_match(self, parts: Sequence[str]) -> _CompiledPattern | None:
        for pat in reversed(self._patterns):
            if pat.matches(parts):
                return pat
        return None

    def _prunes(self, parts: Sequence[str]) -> bool:
        pat = self._last_match(parts)
        return pat is not None and pat.exclude and not pat.spans

    def prunes(self, rel_dir: str | os.PathLike[str]) -> bool:
        """Return ``True`` if the directory *rel_dir* is excluded as a whole.

        As in ignore files, a directory whose last matching pattern is an
        exclusion naming it (not one ending in ``**``) hides everything
        below it; later patterns cannot re-include its contents.
        """
        parts = _split_relative(rel_dir)
        return bool(parts) and self._prunes(parts)

    def matches(self, rel_path: str | os.PathLike[str]) -> bool:
        """Return ``True`` if *rel_path* is selected."""
        parts = _split_relative(rel_path)
        if not parts:
            return self._default
        if any(self._prunes(parts[:depth]) for depth in range(1, len(parts))):
            return False
        pat = self._last_match(parts)
        if pat is None:
            return self._default
        return not pat.exclude

    def __repr__(self) -> str:
        inner = ", ".join(repr(str(p)) for p in self.patterns)
        return f"GlobFilter([{inner}])"
