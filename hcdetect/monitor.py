"""Polling monitor that rescans files when they change on disk."""

import logging
import threading
import time
from pathlib import Path
from typing import Callable

from hcdetect.workspace import DocumentResult, WorkspaceScanner, iter_workspace_files

logger = logging.getLogger(__name__)


def snapshot_mtimes(paths) -> dict[str, float]:
    """Map each readable path to its modification time."""
    snapshot = {}
    for path in paths:
        try:
            snapshot[str(path)] = Path(path).stat().st_mtime
        except OSError:
            continue
    return snapshot


def changed_paths(before: dict[str, float], after: dict[str, float]) -> tuple[list[str], list[str]]:
    """Return (modified or new, removed) paths between two snapshots."""
    modified = sorted(p for p, mtime in after.items() if before.get(p) != mtime)
    removed = sorted(p for p in before if p not in after)
    return modified, removed


def watch_workspace(
    scanner: WorkspaceScanner,
    root: Path,
    on_result: Callable[[DocumentResult], None],
    poll_interval: float = 1.0,
    full_scan_interval: float | None = None,
    scan_on_save: bool = True,
    stop: threading.Event | None = None,
) -> None:
    """Watch root until stop is set.

    Changed files are rescanned on the next poll when scan_on_save is on.
    With full_scan_interval every file is rescanned on that period, which also
    picks up changes while scan_on_save is off.
    """
    stop = stop or threading.Event()

    def current() -> dict[str, float]:
        return snapshot_mtimes(iter_workspace_files(
            root, scanner.exclude_patterns, scanner.max_file_size,
        ))

    def full_scan() -> None:
        logger.info("Full workspace scan of %s", root)
        for result in scanner.scan_workspace(root, cancel=stop):
            on_result(result)

    last = current()
    full_scan()
    last_full = time.monotonic()

    while not stop.wait(poll_interval):
        now = current()
        modified, removed = changed_paths(last, now)
        last = now

        for path in removed:
            logger.debug("File removed: %s", path)
            scanner.forget(path)

        if full_scan_interval and time.monotonic() - last_full >= full_scan_interval:
            full_scan()
            last_full = time.monotonic()
            continue

        if scan_on_save:
            for path in modified:
                if stop.is_set():
                    break
                logger.debug("File changed: %s", path)
                on_result(scanner.scan_document(Path(path)))
