"""Tests for the built-in path predicates."""

import sys

import pytest

from fsfixture import EncodingError, predicates as p
from fsfixture.predicates import PathPredicate, Predicate, bytes_summary, text_diff


class TestStatePredicates:
    def test_exists_and_missing(self, tmp_path):
        f = tmp_path / "f.txt"
        assert p.missing().evaluate(f)
        assert not p.exists().evaluate(f)
        f.write_text("x")
        assert p.exists().evaluate(f)
        assert not p.missing().evaluate(f)

    def test_file_and_dir(self, tmp_path):
        f = tmp_path / "f.txt"
        f.write_text("x")
        assert p.is_file().evaluate(f)
        assert not p.is_dir().evaluate(f)
        assert p.is_dir().evaluate(tmp_path)
        assert not p.is_file().evaluate(tmp_path)

    def test_explain_names_what_was_found(self, tmp_path):
        assert p.is_file().explain(tmp_path) == "found a directory"
        assert p.is_dir().explain(tmp_path / "nope") == "not found"
        f = tmp_path / "f"
        f.write_text("")
        assert p.missing().explain(f) == "found a file"

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges")
    def test_symlinks(self, tmp_path):
        target = tmp_path / "t.txt"
        target.write_text("t")
        link = tmp_path / "link"
        link.symlink_to(target)
        dangling = tmp_path / "dangling"
        dangling.symlink_to(tmp_path / "gone")

        assert p.is_symlink().evaluate(link)
        assert not p.is_symlink().evaluate(target)
        # exists follows the link
        assert not p.exists().evaluate(dangling)
        assert p.is_symlink().evaluate(dangling)
        assert p.exists().explain(dangling) == "found a broken symlink"

    def test_is_empty(self, tmp_path):
        f = tmp_path / "f"
        f.write_bytes(b"")
        assert p.is_empty().evaluate(f)
        f.write_bytes(b"abc")
        assert not p.is_empty().evaluate(f)
        assert p.is_empty().explain(f) == "found 3 bytes"
        assert not p.is_empty().evaluate(tmp_path)

    def test_descriptions(self):
        assert p.exists().describe() == "path exists"
        assert p.missing().describe() == "path is missing"
        assert p.is_file().describe() == "path is a file"
        assert p.is_dir().describe() == "path is a directory"
        assert str(p.is_symlink()) == "path is a symlink"


class TestContentPredicates:
    def test_text_equals(self, tmp_path):
        f = tmp_path / "f.txt"
        f.write_bytes(b"hello\n")
        assert p.text_equals("hello\n").evaluate(f)
        assert not p.text_equals("hello").evaluate(f)

    def test_text_equals_other_encoding(self, tmp_path):
        f = tmp_path / "f.txt"
        f.write_bytes("café".encode("latin-1"))
        assert p.text_equals("café", encoding="latin-1").evaluate(f)

    def test_undecodable_content_raises(self, tmp_path):
        f = tmp_path / "f.bin"
        f.write_bytes(b"\xff\xfe\x00")
        with pytest.raises(EncodingError) as exc_info:
            p.text_equals("x").evaluate(f)
        assert exc_info.value.encoding == "utf-8"
        assert exc_info.value.path == str(f)

    def test_bytes_equals_accepts_bytes_like(self, tmp_path):
        f = tmp_path / "f.bin"
        f.write_bytes(b"\x00\x01")
        assert p.bytes_equals(b"\x00\x01").evaluate(f)
        assert p.bytes_equals(bytearray(b"\x00\x01")).evaluate(f)
        assert p.bytes_equals(memoryview(b"\x00\x01")).evaluate(f)
        assert not p.bytes_equals(b"\x00").evaluate(f)

    def test_content_of_missing_file_is_false(self, tmp_path):
        missing = tmp_path / "nope"
        assert not p.text_equals("x").evaluate(missing)
        assert not p.bytes_equals(b"x").evaluate(missing)
        assert p.text_equals("x").explain(missing) == "not found"

    def test_content_of_directory_is_false(self, tmp_path):
        assert not p.bytes_equals(b"").evaluate(tmp_path)
        assert p.text_equals("").explain(tmp_path) == "found a directory"

    def test_description_shows_expected_value(self):
        assert p.text_equals("hi\n").describe() == "file content is equal to 'hi\\n'"
        assert p.bytes_equals(b"\x00").describe() == "file content is equal to b'\\x00'"

    def test_long_expected_value_is_truncated(self):
        desc = p.text_equals("x" * 500).describe()
        assert desc.endswith("... (500 chars total)")
        assert len(desc) < 200


class TestDiagnostics:
    def test_text_diff_names_first_differing_line(self):
        out = text_diff("one\ntwo\nthree\n", "one\nTWO\nthree\n")
        lines = out.splitlines()
        assert lines[0] == "first difference at line 2"
        assert "--- expected" in lines
        assert "+++ actual" in lines
        assert "-two" in lines
        assert "+TWO" in lines

    def test_text_diff_extra_trailing_line(self):
        out = text_diff("a\n", "a\nb\n")
        assert out.splitlines()[0] == "first difference at line 2"
        assert "+b" in out.splitlines()

    def test_text_diff_line_endings_only(self):
        out = text_diff("a\nb\n", "a\r\nb\r\n")
        assert out.splitlines()[0] == "first difference at line 1"
        assert "texts differ only in line endings" in out

    def test_bytes_summary_offset(self):
        out = bytes_summary(b"\x00\x01\x02", b"\x00\x01\x03")
        assert out == (
            "expected 3 bytes, found 3 bytes\n"
            "first difference at offset 2: expected 0x02, found 0x03"
        )

    def test_bytes_summary_shorter_actual(self):
        out = bytes_summary(b"abc", b"ab")
        assert out.splitlines()[1] == "first difference at offset 2: expected 0x63, found end of content"

    def test_content_explain_uses_diff(self, tmp_path):
        f = tmp_path / "f.txt"
        f.write_text("x\ny\n")
        assert p.text_equals("x\nz\n").explain(f).startswith("first difference at line 2")


class TestComposition:
    def test_not_inverts(self, tmp_path):
        pred = p.not_(p.exists())
        assert pred.evaluate(tmp_path / "nope")
        assert not pred.evaluate(tmp_path)
        assert pred.describe() == "not (path exists)"

    def test_not_explains_that_inner_held(self, tmp_path):
        f = tmp_path / "f.bin"
        f.write_bytes(b"\x00")
        pred = p.not_(p.bytes_equals(b"\x00"))
        assert not pred.evaluate(f)
        assert pred.explain(f) == "file content is equal to b'\\x00' holds"

    def test_incomplete_subclass_cannot_be_created(self):
        class NoDescription(PathPredicate):
            def evaluate(self, path):
                return True

        with pytest.raises(TypeError):
            NoDescription()

    def test_invert_operator(self, tmp_path):
        assert (~p.is_file()).evaluate(tmp_path)

    def test_function_predicate(self, tmp_path):
        pred = p.predicate(lambda path: path.name.endswith(".cfg"), "name ends with .cfg")
        assert pred.evaluate(tmp_path / "a.cfg")
        assert not pred.evaluate(tmp_path / "a.txt")
        assert pred.describe() == "name ends with .cfg"

    def test_function_predicate_default_description(self, tmp_path):
        def has_readme(path):
            return (path / "README").exists()

        assert p.predicate(has_readme).describe() == "has_readme"

    def test_builtins_satisfy_protocol(self):
        assert isinstance(p.exists(), Predicate)
        assert isinstance(p.text_equals("x"), Predicate)

    def test_repr(self):
        assert repr(p.exists()) == "<Exists: path exists>"
