"""SQLite-backed persistence for per-document scan results."""

import json
import logging
import os
import sqlite3
from dataclasses import dataclass
from pathlib import Path

from hcdetect.scanner import Finding

logger = logging.getLogger(__name__)

DEFAULT_DB_DIR = Path(os.environ.get(
    "XDG_DATA_HOME", os.path.expanduser("~/.local/share")
)) / "hcdetect"

DEFAULT_DB_PATH = DEFAULT_DB_DIR / "results.db"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS scan_results (
    path TEXT PRIMARY KEY,
    scanned_at TEXT NOT NULL,
    content_hash TEXT NOT NULL,
    findings_count INTEGER NOT NULL,
    categories TEXT NOT NULL,
    findings_json TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_scanned_at ON scan_results(scanned_at);
"""


@dataclass
class StoredResult:
    path: str
    scanned_at: str
    content_hash: str
    findings_count: int
    categories: list[str]
    findings: list[Finding]


def _row_to_result(row: tuple) -> StoredResult:
    path, scanned_at, content_hash, count, categories, findings_json = row
    return StoredResult(
        path=path,
        scanned_at=scanned_at,
        content_hash=content_hash,
        findings_count=count,
        categories=json.loads(categories),
        findings=[Finding.from_dict(d) for d in json.loads(findings_json)],
    )


class ResultStore:
    """Keeps the latest findings for every scanned document."""

    def __init__(self, db_path: Path | None = None):
        self._db_path = db_path or DEFAULT_DB_PATH
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def save(
        self,
        path: str,
        findings: list[Finding],
        content_hash: str,
        scanned_at: str,
    ) -> None:
        """Insert or replace the stored result for a document."""
        categories = sorted({f.category.value for f in findings})
        self._conn.execute(
            """INSERT OR REPLACE INTO scan_results
            (path, scanned_at, content_hash, findings_count, categories, findings_json)
            VALUES (?, ?, ?, ?, ?, ?)""",
            (
                path,
                scanned_at,
                content_hash,
                len(findings),
                json.dumps(categories),
                json.dumps([f.to_dict() for f in findings]),
            ),
        )
        self._conn.commit()
        logger.debug("Stored %d finding(s) for %s", len(findings), path)

    def load(self, path: str) -> StoredResult | None:
        row = self._conn.execute(
            "SELECT * FROM scan_results WHERE path = ?", (path,)
        ).fetchone()
        return _row_to_result(row) if row else None

    def delete(self, path: str) -> None:
        self._conn.execute("DELETE FROM scan_results WHERE path = ?", (path,))
        self._conn.commit()

    def query(
        self,
        limit: int = 50,
        category: str | None = None,
        only_flagged: bool = True,
    ) -> list[StoredResult]:
        """Most recently scanned documents first."""
        query = "SELECT * FROM scan_results WHERE 1=1"
        params: list = []

        if only_flagged:
            query += " AND findings_count > 0"
        if category:
            query += " AND categories LIKE ?"
            params.append(f'%"{category}"%')

        query += " ORDER BY scanned_at DESC, path LIMIT ?"
        params.append(limit)

        rows = self._conn.execute(query, params).fetchall()
        return [_row_to_result(row) for row in rows]

    def stats(self) -> dict:
        """Summary statistics across all stored documents."""
        total = self._conn.execute("SELECT COUNT(*) FROM scan_results").fetchone()[0]
        flagged = self._conn.execute(
            "SELECT COUNT(*) FROM scan_results WHERE findings_count > 0"
        ).fetchone()[0]
        findings = self._conn.execute(
            "SELECT COALESCE(SUM(findings_count), 0) FROM scan_results"
        ).fetchone()[0]

        by_category: dict[str, int] = {}
        for (findings_json,) in self._conn.execute(
            "SELECT findings_json FROM scan_results WHERE findings_count > 0"
        ):
            for item in json.loads(findings_json):
                by_category[item["category"]] = by_category.get(item["category"], 0) + 1

        return {
            "documents": total,
            "flagged_documents": flagged,
            "total_findings": findings,
            "by_category": by_category,
        }

    def export_json(self, limit: int = 1000) -> str:
        """Export flagged documents and their findings as JSON."""
        data = [
            {
                "path": r.path,
                "scanned_at": r.scanned_at,
                "content_hash": r.content_hash,
                "findings_count": r.findings_count,
                "findings": [f.to_dict() for f in r.findings],
            }
            for r in self.query(limit=limit)
        ]
        return json.dumps(data, indent=2)

    def close(self) -> None:
        self._conn.close()
