"""pytest integration.

Enable with ``pytest_plugins = ["fsfixture.plugin"]`` in a top-level
``conftest.py`` (or ``-p fsfixture.plugin``).  Provides the ``fs_root``
fixture and the ``--fsfixture-keep`` option.
"""

from __future__ import annotations

import pytest

from .config import Disposal, FixtureConfig
from .fixture import TempDir


def pytest_addoption(parser):
    group = parser.getgroup("fsfixture")
    group.addoption(
        "--fsfixture-keep",
        dest="fsfixture_keep",
        choices=[Disposal.KEEP.value, Disposal.KEEP_WITH_MARKER.value],
        default=None,
        help="Keep fixture roots after each test instead of deleting them.",
    )


@pytest.fixture
def fs_root(request):
    """A fresh :class:`~fsfixture.TempDir`, released after the test.

    Kept roots are named in a ``fsfixture`` report section.
    """
    keep = request.config.getoption("fsfixture_keep")
    root = TempDir(keep, config=FixtureConfig.from_env())
    yield root
    release = root.release()
    if release.notice:
        request.node.add_report_section("teardown", "fsfixture", release.notice)
