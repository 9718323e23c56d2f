"""Assert the state of paths with predicates and readable diagnostics."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from . import predicates
from .exceptions import PathAssertionError
from .predicates import Predicate

PredicateLike = Union[Predicate, str, bytes, bytearray, memoryview]


def coerce_predicate(value: PredicateLike) -> Predicate:
    """Convert a literal or predicate into a predicate.

    ``str`` becomes :func:`~fsfixture.predicates.text_equals` and
    ``bytes``-like values become :func:`~fsfixture.predicates.bytes_equals`;
    predicate objects are returned unchanged.  This is the only place
    literals are promoted.
    """
    if isinstance(value, str):
        return predicates.text_equals(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return predicates.bytes_equals(value)
    if isinstance(value, Predicate):
        return value
    raise TypeError(
        f"Expected a predicate, str or bytes, got {type(value).__name__}; "
        "wrap callables with fsfixture.predicates.predicate()"
    )


@dataclass(frozen=True)
class AssertionOutcome:
    """Result of :func:`check`.

    Truthy on success.  A failed outcome carries the path as given, the
    predicate description and, when the predicate can explain itself, a
    detail such as a text diff.
    """
    passed: bool
    path: str | None = None
    description: str | None = None
    detail: str | None = None

    def __bool__(self) -> bool:
        return self.passed

    def render(self) -> str:
        """Multi-line diagnostic for a failed outcome."""
        if self.passed:
            return "Predicate passed"
        lines = [
            f"Predicate failed for {self.path}",
            f"  expected: {self.description}",
        ]
        if self.detail:
            detail = self.detail.splitlines()
            if len(detail) == 1:
                lines.append(f"  actual: {detail[0]}")
            else:
                lines.append("  actual:")
                lines.extend(f"    {line}" if line else "" for line in detail)
        return "\n".join(lines)


_PASSED = AssertionOutcome(True)


def check(target: str | os.PathLike[str], pred: PredicateLike) -> AssertionOutcome:
    """Evaluate *pred* against *target* and return the outcome.

    A failed predicate is reported in the returned outcome, not raised.
    I/O and decoding problems still raise
    (:class:`~fsfixture.exceptions.FixtureError`,
    :class:`~fsfixture.exceptions.EncodingError`).
    """
    pred = coerce_predicate(pred)
    path = os.fspath(target)
    p = Path(path)
    if pred.evaluate(p):
        return _PASSED
    explain = getattr(pred, "explain", None)
    detail = explain(p) if explain is not None else None
    return AssertionOutcome(False, path, pred.describe(), detail)


def assert_path(target: str | os.PathLike[str], pred: PredicateLike) -> None:
    """Like :func:`check` but raise :class:`PathAssertionError` on failure."""
    outcome = check(target, pred)
    if not outcome:
        raise PathAssertionError(outcome)
