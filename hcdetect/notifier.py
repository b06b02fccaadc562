"""Notification system for scan results."""

import shutil
import subprocess
import sys

from hcdetect.categories import Category, char_name
from hcdetect.diagnostics import status_text
from hcdetect.scanner import Finding
from hcdetect.workspace import DocumentResult

# ANSI color codes
_COLORS = {
    Category.ZERO_WIDTH: "\033[33m",              # yellow
    Category.VARIATION_SELECTOR: "\033[33m",      # yellow
    Category.DEPRECATED_TAG: "\033[31m",          # red
    Category.BIDI_CONTROL: "\033[1;31m",          # bold red
    Category.BINARY_ENCODING_PATTERN: "\033[1;31m",
}
_RESET = "\033[0m"

# cap output per document
_MAX_LISTED = 10


class Notifier:
    """Sends notifications about documents that contain hidden characters."""

    def __init__(self, mode: str = "terminal"):
        self.mode = mode

    def notify(self, result: DocumentResult) -> None:
        if result.error is not None:
            print(f"  Error scanning {result.path}: {result.error}", file=sys.stderr)
            return
        if result.is_clean:
            return

        if self.mode in ("terminal", "both"):
            self.notify_terminal(result)
        if self.mode in ("desktop", "both"):
            self._notify_desktop(result)

    def notify_terminal(self, result: DocumentResult) -> None:
        print(
            f"\n\033[1;33m[{status_text(len(result.findings))}]{_RESET} "
            f"{result.path}",
            file=sys.stderr,
        )
        for f in result.findings[:_MAX_LISTED]:
            _print_finding(f)

        if len(result.findings) > _MAX_LISTED:
            print(
                f"  ... and {len(result.findings) - _MAX_LISTED} more findings",
                file=sys.stderr,
            )

    def _notify_desktop(self, result: DocumentResult) -> None:
        if not shutil.which("notify-send"):
            return

        summary = "Hidden Character Detector"
        body = f"{len(result.findings)} hidden character(s) detected in {result.path}."
        top = result.findings[0]
        body += f"\nFirst: line {top.start_line}, {top.category.value}"

        try:
            subprocess.run(
                [
                    "notify-send",
                    "--urgency", "normal",
                    "--app-name", "hcdetect",
                    summary,
                    body,
                ],
                timeout=5,
                check=False,
            )
        except (subprocess.TimeoutExpired, FileNotFoundError):
            pass


def _print_finding(f: Finding) -> None:
    color = _COLORS.get(f.category, "")
    where = f"{f.start_line}:{f.start_column + 1}"
    label = f.display
    if f.is_pattern:
        where += f"-{f.end_line}:{f.end_column + 1}"
    else:
        label += f" {char_name(f.code_point)}"
    print(
        f"    {color}[{f.category.value}]{_RESET} "
        f"{where}: {label} - {f.message}",
        file=sys.stderr,
    )
