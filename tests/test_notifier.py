"""Tests for terminal notifications."""

from hcdetect.notifier import Notifier
from hcdetect.scanner import scan
from hcdetect.workspace import DocumentResult


class TestNotifier:
    def test_clean_result_is_silent(self, capsys):
        Notifier().notify(DocumentResult(path="a.txt"))
        assert capsys.readouterr().err == ""

    def test_error_is_reported(self, capsys):
        Notifier().notify(DocumentResult(path="a.bin", error="binary content"))
        assert "Error scanning a.bin: binary content" in capsys.readouterr().err

    def test_terminal_lists_findings(self, capsys):
        result = DocumentResult(path="a.txt", findings=scan("x\u202E"))
        Notifier(mode="terminal").notify(result)
        err = capsys.readouterr().err
        assert "Hidden: 1" in err
        assert "a.txt" in err
        assert "[Bidirectional Control]" in err
        assert "1:2: U+202E Right-to-Left Override" in err

    def test_pattern_shows_range(self, capsys):
        result = DocumentResult(path="p.txt", findings=scan("\u200B" * 8))
        Notifier().notify(result)
        assert "1:1-1:8: [Binary Pattern (8 chars)]" in capsys.readouterr().err

    def test_output_is_capped(self, capsys):
        result = DocumentResult(path="many.txt", findings=scan("\u202E" * 12))
        Notifier().notify(result)
        err = capsys.readouterr().err
        assert err.count("U+202E") == 10
        assert "... and 2 more findings" in err

    def test_desktop_mode_skips_terminal(self, capsys, monkeypatch):
        monkeypatch.setattr("shutil.which", lambda name: None)
        result = DocumentResult(path="a.txt", findings=scan("\u202E"))
        Notifier(mode="desktop").notify(result)
        assert capsys.readouterr().err == ""
