"""Tests for the pytest plugin."""

import pytest

from fsfixture import Disposal, TempDir, predicates as p

INNER_TEST = """
def test_uses_root(fs_root):
    fs_root.child("out", "a.txt").write_text("a")
    fs_root.child("out", "a.txt").assert_that("a")
"""


class TestFsRootFixture:
    def test_is_a_fresh_temp_dir(self, fs_root):
        assert isinstance(fs_root, TempDir)
        assert fs_root.path.is_dir()
        assert list(fs_root.path.iterdir()) == []

    def test_defaults_to_delete(self, fs_root):
        assert fs_root.disposal is Disposal.DELETE

    def test_usable_for_fixtures(self, fs_root, source_tree):
        fs_root.child("copy").copy_from(source_tree, [("**/*.txt", False)])
        fs_root.child("copy", "nested", "c.txt").assert_that("gamma\n")
        fs_root.child("copy", "b.bin").assert_that(p.missing())


@pytest.fixture
def roots(tmp_path, monkeypatch):
    """Directory the inner test session creates its roots in."""
    path = tmp_path / "roots"
    path.mkdir()
    monkeypatch.setenv("FSFIXTURE_TMPDIR", str(path))
    monkeypatch.delenv("FSFIXTURE_DISPOSAL", raising=False)
    return path


class TestPluginSession:
    def _setup(self, pytester):
        pytester.makeconftest('pytest_plugins = ["fsfixture.plugin"]\n')
        pytester.makepyfile(INNER_TEST)

    def test_root_removed_after_test(self, pytester, roots):
        self._setup(pytester)
        result = pytester.runpytest()
        result.assert_outcomes(passed=1)
        assert list(roots.iterdir()) == []

    def test_keep_option(self, pytester, roots):
        self._setup(pytester)
        result = pytester.runpytest("--fsfixture-keep=keep", "-rA")
        result.assert_outcomes(passed=1)
        kept = list(roots.iterdir())
        assert len(kept) == 1
        assert (kept[0] / "out" / "a.txt").read_text() == "a"
        result.stdout.fnmatch_lines([f"*fixture kept: {kept[0]}*"])

    def test_keep_with_debug_marker(self, pytester, roots):
        self._setup(pytester)
        result = pytester.runpytest("--fsfixture-keep=keep-with-debug-marker", "-rA")
        result.assert_outcomes(passed=1)
        result.stdout.fnmatch_lines(["*[[]fsfixture:debug[]] fixture kept for inspection:*"])

    def test_environment_policy(self, pytester, roots, monkeypatch):
        monkeypatch.setenv("FSFIXTURE_DISPOSAL", "keep")
        self._setup(pytester)
        pytester.runpytest().assert_outcomes(passed=1)
        assert len(list(roots.iterdir())) == 1

    def test_rejects_unknown_keep_value(self, pytester, roots):
        self._setup(pytester)
        result = pytester.runpytest("--fsfixture-keep=shred")
        assert result.ret != 0
