"""Tests for the fsfixture command line."""

from fsfixture.cli import main


class TestCopy:
    def test_copy_all(self, runner, source_tree, tmp_path, snapshot):
        dest = tmp_path / "dest"
        result = runner.invoke(main, ["copy", str(source_tree), str(dest)])
        assert result.exit_code == 0, result.output
        assert "4 file(s) copied" in result.output
        assert snapshot(dest) == snapshot(source_tree)

    def test_copy_with_patterns(self, runner, source_tree, tmp_path, snapshot):
        dest = tmp_path / "dest"
        result = runner.invoke(main, [
            "copy", str(source_tree), str(dest), "-p", "!**", "-p", "nested/**",
        ])
        assert result.exit_code == 0, result.output
        assert sorted(snapshot(dest)) == ["nested/c.txt", "nested/dir/file.txt"]

    def test_exclude_pattern(self, runner, source_tree, tmp_path, snapshot):
        dest = tmp_path / "dest"
        result = runner.invoke(main, ["copy", str(source_tree), str(dest), "--pattern", "!*.bin"])
        assert result.exit_code == 0, result.output
        assert "3 file(s) copied" in result.output
        assert "b.bin" not in snapshot(dest)

    def test_dry_run_lists_without_copying(self, runner, source_tree, tmp_path):
        dest = tmp_path / "dest"
        result = runner.invoke(main, ["copy", str(source_tree), str(dest), "-p", "*.txt", "-n"])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ["a.txt", "nested/c.txt", "nested/dir/file.txt"]
        assert not dest.exists()

    def test_invalid_pattern(self, runner, source_tree, tmp_path):
        dest = tmp_path / "dest"
        result = runner.invoke(main, ["copy", str(source_tree), str(dest), "-p", "[oops"])
        assert result.exit_code == 1
        assert "Invalid glob pattern" in result.output
        assert not dest.exists()

    def test_missing_source(self, runner, tmp_path):
        result = runner.invoke(main, ["copy", str(tmp_path / "nope"), str(tmp_path / "dest")])
        assert result.exit_code == 2

    def test_gitignore_flag(self, runner, tmp_path, snapshot):
        src = tmp_path / "src"
        src.mkdir()
        (src / ".gitignore").write_text("*.log\n")
        (src / "app.py").write_text("code")
        (src / "run.log").write_text("log")
        dest = tmp_path / "dest"
        result = runner.invoke(main, ["copy", str(src), str(dest), "--gitignore"])
        assert result.exit_code == 0, result.output
        assert sorted(snapshot(dest)) == [".gitignore", "app.py"]

    def test_verbose_reports_filter(self, runner, source_tree, tmp_path):
        result = runner.invoke(main, [
            "-v", "copy", str(source_tree), str(tmp_path / "dest"), "-p", "!*.bin",
        ])
        assert result.exit_code == 0, result.output
        assert "GlobFilter(['!*.bin'])" in result.output


class TestCheck:
    def test_exists_by_default(self, runner, source_tree):
        result = runner.invoke(main, ["check", str(source_tree / "a.txt")])
        assert result.exit_code == 0, result.output

    def test_missing_path_fails(self, runner, tmp_path):
        result = runner.invoke(main, ["check", str(tmp_path / "nope")])
        assert result.exit_code == 1
        assert "expected: path exists" in result.output
        assert "actual: not found" in result.output

    def test_missing_flag(self, runner, tmp_path):
        result = runner.invoke(main, ["check", str(tmp_path / "nope"), "--missing"])
        assert result.exit_code == 0, result.output

    def test_file_and_dir(self, runner, source_tree):
        assert runner.invoke(main, ["check", str(source_tree), "--dir"]).exit_code == 0
        result = runner.invoke(main, ["check", str(source_tree), "--file"])
        assert result.exit_code == 1
        assert "found a directory" in result.output

    def test_text_match(self, runner, source_tree):
        result = runner.invoke(main, ["check", str(source_tree / "a.txt"), "--text", "alpha\n"])
        assert result.exit_code == 0, result.output

    def test_text_mismatch_shows_diff(self, runner, tmp_path):
        f = tmp_path / "f.txt"
        f.write_text("one\ntwo\n")
        result = runner.invoke(main, ["check", str(f), "--text", "one\nthree\n"])
        assert result.exit_code == 1
        assert "first difference at line 2" in result.output
        assert "-three" in result.output
        assert "+two" in result.output

    def test_text_from(self, runner, source_tree, tmp_path):
        expected = tmp_path / "expected.txt"
        expected.write_text("gamma\n")
        result = runner.invoke(main, [
            "check", str(source_tree / "nested" / "c.txt"), "--text-from", str(expected),
        ])
        assert result.exit_code == 0, result.output

    def test_bytes_from(self, runner, source_tree, tmp_path):
        expected = tmp_path / "expected.bin"
        expected.write_bytes(b"\x00\x01\x09")
        result = runner.invoke(main, [
            "check", str(source_tree / "b.bin"), "--bytes-from", str(expected),
        ])
        assert result.exit_code == 1
        assert "first difference at offset 2: expected 0x09, found 0x02" in result.output

    def test_text_of_binary_file_is_an_error(self, runner, tmp_path):
        f = tmp_path / "f.bin"
        f.write_bytes(b"\xff\xfe")
        result = runner.invoke(main, ["check", str(f), "--text", "x"])
        assert result.exit_code == 1
        assert "not valid utf-8" in result.output
