# tests/test_parser.py
import pytest

from wordcount.parser import Parser, iter_tokens


@pytest.mark.parametrize("text,expected", [
    ("U.S.", ["u.s"]),
    ("COVID-19", ["covid-19"]),
    ("foo, bar.", ["foo", "bar"]),
    ("foo_bar", ["foo", "bar"]),
    ("3.1415926", ["3.1415926"]),
    ("abc! def? ghi...", ["abc", "def", "ghi"]),
    ("Fish &amp; Chips", ["fish", "chips"]),
    ("...", []),
])
def test_words_mode_tokenizer(text, expected):
    assert Parser(mode="words").parse_line(text) == expected


@pytest.mark.parametrize("line,expected", [
    ("apple\n", ["apple"]),
    ("  spaced out  \n", ["spaced out"]),
    ("\t\n", []),
    ("\n", []),
    ("Mixed Case", ["Mixed Case"]),
])
def test_line_mode(line, expected):
    assert Parser().parse_line(line) == expected


def test_line_mode_fix_text():
    assert Parser(fix_text=True).parse_line("caf&eacute;\n") == ["café"]


def test_unknown_mode():
    with pytest.raises(ValueError):
        Parser(mode="chars")


def test_iter_tokens_skips_blank_lines(tmp_path):
    p = tmp_path / "in.txt"
    p.write_text("a\n\n  \nb\na\n", encoding="utf-8")
    assert list(iter_tokens(str(p))) == ["a", "b", "a"]


def test_iter_tokens_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        list(iter_tokens(str(tmp_path / "nope.txt")))
