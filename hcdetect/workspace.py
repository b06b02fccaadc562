"""Document reading, workspace traversal and the in-memory results cache."""

import hashlib
import logging
import os
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from hcdetect.excludes import is_excluded
from hcdetect.scanner import Finding, scan
from hcdetect.store import ResultStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE = 1_048_576


class DocumentReadError(Exception):
    """A document could not be read or decoded; the file is skipped."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


def decode_document(path: Path, data: bytes) -> str:
    """Decode raw document bytes as UTF-8, keeping any byte-order mark."""
    if b"\x00" in data[:8192]:
        raise DocumentReadError(path, "binary content")
    try:
        # Plain utf-8 so a leading U+FEFF stays in the text and gets reported.
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DocumentReadError(path, f"not valid UTF-8 ({e.reason})") from e


def read_document(path: Path) -> str:
    try:
        data = path.read_bytes()
    except OSError as e:
        raise DocumentReadError(path, e.strerror or str(e)) from e
    return decode_document(path, data)


def content_hash(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8", "surrogatepass")).hexdigest()[:16]


@dataclass
class DocumentResult:
    path: str
    findings: list[Finding] = field(default_factory=list)
    error: str | None = None
    content_hash: str = ""
    scanned_at: str = ""

    @property
    def is_clean(self) -> bool:
        return self.error is None and not self.findings


def iter_workspace_files(
    root: Path,
    exclude_patterns: list[str],
    max_file_size: int = DEFAULT_MAX_FILE_SIZE,
) -> Iterator[Path]:
    """Yield scannable files under root in a stable order."""
    root = Path(root)
    for dirpath, dirs, files in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root)
        # Prune excluded directories in-place
        dirs[:] = sorted(
            d for d in dirs
            if not is_excluded((rel_dir / d).as_posix(), exclude_patterns)
        )
        for name in sorted(files):
            rel = (rel_dir / name).as_posix()
            if is_excluded(rel, exclude_patterns):
                continue
            path = Path(dirpath) / name
            try:
                if path.stat().st_size > max_file_size:
                    logger.debug("Skipping %s: larger than %d bytes", path, max_file_size)
                    continue
            except OSError:
                continue
            yield path


class WorkspaceScanner:
    """Scans documents and keeps the latest findings per document."""

    def __init__(
        self,
        exclude_patterns: list[str] | None = None,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        store: ResultStore | None = None,
    ):
        self.exclude_patterns = list(exclude_patterns or [])
        self.max_file_size = max_file_size
        self._store = store
        self._cache: dict[str, DocumentResult] = {}
        self._lock = threading.Lock()

    def scan_text(self, key: str, text: str) -> DocumentResult:
        """Scan already-decoded text and cache it under key."""
        digest = content_hash(text)
        with self._lock:
            cached = self._cache.get(key)
        if cached is not None and cached.error is None and cached.content_hash == digest:
            logger.debug("Using cached results for %s", key)
            return cached

        logger.debug("Scanning %s...", key)
        findings = scan(text)
        logger.debug("Scan complete. Found %d hidden characters in %s.", len(findings), key)

        result = DocumentResult(
            path=key,
            findings=findings,
            content_hash=digest,
            scanned_at=datetime.now(timezone.utc).isoformat(),
        )
        with self._lock:
            self._cache[key] = result
        if self._store is not None:
            self._store.save(key, findings, digest, result.scanned_at)
        return result

    def scan_document(self, path: Path) -> DocumentResult:
        """Read and scan one file. Read failures clear its cached results."""
        key = str(path)
        try:
            text = read_document(Path(path))
        except DocumentReadError as e:
            logger.warning("Error reading %s: %s", key, e.reason)
            self.forget(key)
            return DocumentResult(path=key, error=e.reason)
        return self.scan_text(key, text)

    def scan_workspace(
        self,
        root: Path,
        cancel: threading.Event | None = None,
    ) -> list[DocumentResult]:
        """Scan every non-excluded file; cancellation is checked between files."""
        results = []
        for path in iter_workspace_files(root, self.exclude_patterns, self.max_file_size):
            if cancel is not None and cancel.is_set():
                logger.info("Workspace scan cancelled after %d file(s)", len(results))
                break
            results.append(self.scan_document(path))
        return results

    def cached(self, key: str) -> DocumentResult | None:
        with self._lock:
            return self._cache.get(key)

    def forget(self, key: str) -> None:
        """Drop a document's results, e.g. once it is closed or unreadable."""
        with self._lock:
            self._cache.pop(key, None)
        if self._store is not None:
            self._store.delete(key)

    def results(self) -> list[DocumentResult]:
        with self._lock:
            return [self._cache[k] for k in sorted(self._cache)]

    def total_findings(self) -> int:
        with self._lock:
            return sum(len(r.findings) for r in self._cache.values())
