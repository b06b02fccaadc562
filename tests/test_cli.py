"""Tests for the command-line interface."""

import io
import json

import pytest

from hcdetect.cli import EXIT_CLEAN, EXIT_ERROR, EXIT_FINDINGS, main


def _stdin(data: bytes) -> io.TextIOWrapper:
    return io.TextIOWrapper(io.BytesIO(data), encoding="utf-8")


def _run(argv, capsys):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    out, err = capsys.readouterr()
    return exc.value.code, out, err


@pytest.fixture
def config(tmp_path):
    # A path that does not exist: built-in defaults apply.
    return str(tmp_path / "no-config.toml")


class TestScanCommand:
    def test_clean_text(self, config, capsys):
        code, out, err = _run(["-c", config, "scan", "--text", "hello"], capsys)
        assert code == EXIT_CLEAN
        assert out == ""
        assert "Clean" in err

    def test_text_with_findings(self, config, capsys):
        code, out, err = _run(["-c", config, "scan", "--text", "Hello\u200Bworld"], capsys)
        assert code == EXIT_FINDINGS
        assert out.startswith("<text>:1:6: warning: Hidden Character: Zero-Width (U+200B)")
        assert "Hidden: 1 in 1 file(s)" in err

    def test_directory(self, config, tmp_path, capsys):
        work = tmp_path / "work"
        work.mkdir()
        (work / "a.py").write_bytes("x = 1\n# \u202E\n".encode("utf-8"))
        (work / "b.py").write_bytes(b"clean\n")
        code, out, _ = _run(["-c", config, "scan", str(work)], capsys)
        assert code == EXIT_FINDINGS
        (line,) = out.splitlines()
        assert line.endswith("[hidden-bidirectional-control]")
        assert "a.py:2:3:" in line

    def test_json_format(self, config, tmp_path, capsys):
        path = tmp_path / "p.txt"
        path.write_bytes(("\u200B" * 8).encode("utf-8"))
        code, out, _ = _run(["-c", config, "scan", "-f", "json", str(path)], capsys)
        assert code == EXIT_FINDINGS
        data = json.loads(out)
        assert data[0]["path"] == str(path)
        (finding,) = data[0]["findings"]
        assert finding["category"] == "BinaryEncodingPattern"
        assert finding["endColumn"] == 7

    def test_unreadable_file(self, config, tmp_path, capsys):
        path = tmp_path / "bad.txt"
        path.write_bytes(b"\xff\xfe")
        code, _, err = _run(["-c", config, "scan", str(path)], capsys)
        assert code == EXIT_ERROR
        assert "bad.txt: error:" in err

    def test_stdin(self, config, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", _stdin("a\u2066b".encode("utf-8")))
        code, out, _ = _run(["-c", config, "scan"], capsys)
        assert code == EXIT_FINDINGS
        assert out.startswith("<stdin>:1:2:")

    def test_stdin_not_utf8(self, config, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", _stdin(b"ok \xff\xfe"))
        code, out, err = _run(["-c", config, "scan"], capsys)
        assert code == EXIT_ERROR
        assert out == ""
        assert "<stdin>: error: not valid UTF-8" in err

    def test_bad_exclude_pattern(self, tmp_path, capsys):
        path = tmp_path / "config.toml"
        path.write_text('[scanner]\nexclude_patterns = ["**/{a,b"]\n')
        work = tmp_path / "work"
        work.mkdir()
        code, _, err = _run(["-c", str(path), "scan", str(work)], capsys)
        assert code == EXIT_ERROR
        assert "invalid configuration" in err
        assert "Unbalanced" in err

    def test_invalid_config(self, tmp_path, capsys):
        path = tmp_path / "config.toml"
        path.write_text('[notifications]\nmode = "pager"\n')
        code, _, err = _run(["-c", str(path), "scan", "--text", "x"], capsys)
        assert code == EXIT_ERROR
        assert "invalid configuration" in err


class TestOtherCommands:
    def test_no_command(self, capsys):
        code, out, _ = _run([], capsys)
        assert code == EXIT_ERROR
        assert "usage" in out

    def test_init(self, tmp_path, capsys):
        path = tmp_path / "cfg" / "config.toml"
        main(["-c", str(path), "init"])
        assert path.exists()
        assert "Config created at" in capsys.readouterr().out

    def test_results_empty(self, tmp_path, capsys):
        main(["results", "--db", str(tmp_path / "r.db")])
        assert "No stored results" in capsys.readouterr().out

    def test_results_stats(self, tmp_path, capsys):
        main(["results", "--db", str(tmp_path / "r.db"), "--stats"])
        stats = json.loads(capsys.readouterr().out)
        assert stats["documents"] == 0
