# tests/test_runio.py
import pytest

from wordcount.errors import MalformedRecordError
from wordcount.runio import RunReader, RunWriter, format_record, parse_record


def test_record_format_is_tab_separated():
    assert format_record("apple", 3) == "apple\t3\n"


@pytest.mark.parametrize("line,expected", [
    ("a\t3\n", ("a", 3)),
    ("a\t3", ("a", 3)),
    ("hello world\t12\n", ("hello world", 12)),
    ("x\ty\t7\n", ("x\ty", 7)),     # tab inside the token, split on the last one
    ("\t5\n", ("", 5)),
])
def test_parse_record(line, expected):
    assert parse_record(line) == expected


@pytest.mark.parametrize("line", [
    "no-tab-here\n",
    "a\tx\n",
    "a\t-3\n",
    "a\t\n",
    "\n",
])
def test_parse_record_rejects_malformed(line):
    with pytest.raises(MalformedRecordError):
        parse_record(line)


def test_writer_reader_file(tmp_path):
    p = tmp_path / "run.tmp"
    with RunWriter(str(p)) as w:
        w.write_sorted([("a", 2), ("b", 1), ("c\td", 4)])
        assert w.records == 3
    assert p.read_text(encoding="utf-8") == "a\t2\nb\t1\nc\td\t4\n"

    with RunReader(str(p)) as r:
        assert list(r) == [("a", 2), ("b", 1), ("c\td", 4)]


def test_writer_rejects_out_of_order(tmp_path):
    p = tmp_path / "run.tmp"
    with RunWriter(str(p)) as w:
        w.write("b", 1)
        with pytest.raises(ValueError):
            w.write("a", 1)
        with pytest.raises(ValueError):
            w.write("b", 1)    # duplicates are out of order too


def test_reader_skips_malformed_lines(tmp_path, capsys):
    p = tmp_path / "run.tmp"
    p.write_text("a\t1\ngarbage\nb\tNaN\nc\t2\n", encoding="utf-8")
    r = RunReader(str(p))
    assert list(r) == [("a", 1), ("c", 2)]
    assert r.malformed == 2
    assert "malformed" in capsys.readouterr().err


def test_read_next_returns_none_at_end(tmp_path):
    p = tmp_path / "run.tmp"
    p.write_text("a\t1\n", encoding="utf-8")
    r = RunReader(str(p))
    assert r.read_next() == ("a", 1)
    assert r.read_next() is None
    assert r.read_next() is None
