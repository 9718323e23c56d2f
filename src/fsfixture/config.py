"""Environment-driven defaults for fixture roots."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from typing import Mapping

DISPOSAL_ENV = "FSFIXTURE_DISPOSAL"
TMPDIR_ENV = "FSFIXTURE_TMPDIR"


class Disposal(str, Enum):
    """What happens to a fixture root when it is released.

    Members: ``DELETE``, ``KEEP``, ``KEEP_WITH_MARKER``.
    """
    DELETE = "delete"
    KEEP = "keep"
    KEEP_WITH_MARKER = "keep-with-debug-marker"

    def __str__(self) -> str:          # noqa: D105
        return self.value

    @property
    def keeps(self) -> bool:
        """``True`` if the directory survives release."""
        return self is not Disposal.DELETE

    @classmethod
    def parse(cls, value: str | Disposal) -> Disposal:
        """Convert a policy name (case-insensitive) to a :class:`Disposal`."""
        if isinstance(value, Disposal):
            return value
        choices = ", ".join(d.value for d in cls)
        if not isinstance(value, str):
            raise ValueError(f"Unknown disposal policy {value!r} (expected one of: {choices})")
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown disposal policy {value!r} (expected one of: {choices})"
            ) from None


@dataclass(frozen=True)
class FixtureConfig:
    """Defaults applied to new fixture roots.

    Attributes:
        disposal: Policy used when a root is created without one.
        temp_root: Parent directory for roots, or ``None`` for the OS default.
    """
    disposal: Disposal = Disposal.DELETE
    temp_root: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> FixtureConfig:
        """Build a config from ``FSFIXTURE_DISPOSAL`` and ``FSFIXTURE_TMPDIR``."""
        env = os.environ if environ is None else environ
        disposal = Disposal.DELETE
        raw = env.get(DISPOSAL_ENV)
        if raw:
            disposal = Disposal.parse(raw)
        temp_root = env.get(TMPDIR_ENV) or None
        return cls(disposal=disposal, temp_root=temp_root)

    def resolve_temp_root(self) -> str:
        """Return the directory new roots are created in."""
        if self.temp_root is not None:
            return self.temp_root
        return tempfile.gettempdir()
