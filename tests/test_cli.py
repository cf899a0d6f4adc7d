# tests/test_cli.py
import pytest

from wordcount import cli


@pytest.fixture
def words_file(tmp_path):
    p = tmp_path / "words.txt"
    p.write_text("b\na\nb\nc\na\nb\n", encoding="utf-8")
    return p


def test_cli_writes_output(words_file, tmp_path):
    out = tmp_path / "output.tsv"
    rc = cli.main(["2", str(words_file), "--output", str(out), "--tmpdir", str(tmp_path / "t"), "--quiet"])
    assert rc == 0
    assert out.read_text(encoding="utf-8") == "a\t2\nb\t3\nc\t1\n"


def test_cli_verbose_logs_to_stderr(words_file, tmp_path, capsys):
    out = tmp_path / "output.tsv"
    assert cli.main(["2", str(words_file), "--output", str(out), "--tmpdir", str(tmp_path / "t")]) == 0
    err = capsys.readouterr().err
    assert "[BuildRuns]" in err
    assert "[wordcount]" in err


@pytest.mark.parametrize("bound", ["0", "-3", "lots"])
def test_cli_bad_bound(bound, words_file, capsys):
    assert cli.main([bound, str(words_file)]) == 2
    assert "Invalid MAX_WORDS_IN_MEMORY" in capsys.readouterr().err


@pytest.mark.parametrize("extra", [["--fanin", "1"], ["--buffer-size", "0"], ["--workers", "0"]])
def test_cli_bad_tuning(extra, words_file, capsys):
    assert cli.main(["4", str(words_file)] + extra) == 2
    assert "error:" in capsys.readouterr().err


def test_cli_missing_input(tmp_path, capsys):
    rc = cli.main(["4", str(tmp_path / "nope.txt"), "--output", str(tmp_path / "o.tsv"), "--quiet"])
    assert rc == 1
    assert "error:" in capsys.readouterr().err


def test_cli_usage_error():
    with pytest.raises(SystemExit) as exc:
        cli.main(["4"])
    assert exc.value.code == 2
