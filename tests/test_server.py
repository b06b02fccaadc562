"""Tests for the HTTP API."""

from fastapi.testclient import TestClient

from hcdetect import __version__
from hcdetect.server.app import app

client = TestClient(app)


class TestHealth:
    def test_health(self):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": __version__}


class TestScanEndpoint:
    def test_clean(self):
        response = client.post("/scan", json={"text": "hello"})
        assert response.status_code == 200
        assert response.json() == {"count": 0, "findings": []}

    def test_single_character_has_no_end_fields(self):
        response = client.post("/scan", json={"text": "Hello\u200Bworld"})
        body = response.json()
        assert body["count"] == 1
        assert body["status"] == "Hidden: 1"
        (finding,) = body["findings"]
        assert finding["startIndex"] == 5
        assert finding["category"] == "Zero-Width"
        assert "endIndex" not in finding

    def test_pattern_has_end_fields(self):
        response = client.post("/scan", json={"text": "\u200C" * 9})
        (finding,) = response.json()["findings"]
        assert finding["codePoint"] == -1
        assert (finding["endIndex"], finding["endLine"], finding["endColumn"]) == (8, 1, 8)

    def test_missing_text(self):
        response = client.post("/scan", json={})
        assert response.status_code == 422


class TestDiagnosticsEndpoint:
    def test_ranges(self):
        response = client.post("/diagnostics", json={"text": "a\n\u202E"})
        assert response.status_code == 200
        (diag,) = response.json()
        assert diag["range"] == {
            "start": {"line": 1, "character": 0},
            "end": {"line": 1, "character": 1},
        }
        assert diag["code"] == "hidden-bidirectional-control"
        assert diag["source"] == "Hidden Character Detector"


class TestHighlightsEndpoint:
    def test_ranges_and_gutter_lines(self):
        text = "a\u202E\n\nx" + "\u200B" * 8
        response = client.post("/highlights", json={"text": text})
        assert response.status_code == 200
        body = response.json()
        assert body["gutterLines"] == [0, 2]
        assert body["ranges"] == [
            {"start": {"line": 0, "character": 1}, "end": {"line": 0, "character": 2}},
            {"start": {"line": 2, "character": 1}, "end": {"line": 2, "character": 9}},
        ]

    def test_clean_text(self):
        response = client.post("/highlights", json={"text": "plain"})
        assert response.json() == {"ranges": [], "gutterLines": []}
