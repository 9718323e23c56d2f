"""Shared fixtures for fsfixture tests."""

import pytest
from click.testing import CliRunner

from fsfixture import FixtureConfig

pytest_plugins = ["fsfixture.plugin", "pytester"]


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def source_tree(tmp_path):
    """Source directory with a.txt, b.bin and two nested text files."""
    src = tmp_path / "src"
    (src / "nested" / "dir").mkdir(parents=True)
    (src / "a.txt").write_text("alpha\n")
    (src / "b.bin").write_bytes(b"\x00\x01\x02")
    (src / "nested" / "c.txt").write_text("gamma\n")
    (src / "nested" / "dir" / "file.txt").write_text("deep\n")
    return src


@pytest.fixture
def config(tmp_path):
    """Config that creates roots under tmp_path/roots and deletes them."""
    roots = tmp_path / "roots"
    roots.mkdir()
    return FixtureConfig(temp_root=str(roots))


def _snapshot(root):
    """Return {relative posix path: bytes} for every file under *root*."""
    result = {}
    for path in sorted(root.rglob("*")):
        if path.is_file():
            result[path.relative_to(root).as_posix()] = path.read_bytes()
    return result


@pytest.fixture
def snapshot():
    """Callable mapping each file under a directory to its bytes."""
    return _snapshot
