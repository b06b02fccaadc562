"""Turn findings into problem-list entries, highlights and a status count."""

import re
from dataclasses import dataclass

from hcdetect.scanner import Finding

SOURCE = "Hidden Character Detector"


@dataclass(frozen=True)
class Range:
    """Zero-based, end-exclusive text range."""
    start_line: int
    start_character: int
    end_line: int
    end_character: int


@dataclass(frozen=True)
class Diagnostic:
    range: Range
    message: str
    code: str
    severity: str = "warning"
    source: str = SOURCE

    def to_dict(self) -> dict:
        return {
            "range": {
                "start": {"line": self.range.start_line,
                          "character": self.range.start_character},
                "end": {"line": self.range.end_line,
                        "character": self.range.end_character},
            },
            "message": self.message,
            "code": self.code,
            "severity": self.severity,
            "source": self.source,
        }


def _slug(label: str) -> str:
    return re.sub(r"\s+", "-", label.lower())


def diagnostic_code(finding: Finding) -> str:
    code = f"hidden-{_slug(finding.category.value)}"
    if finding.is_pattern:
        code += "-pattern"
    return code


def finding_range(finding: Finding) -> Range | None:
    """Editor range covering a finding, or None for bad coordinates."""
    line = finding.start_line - 1
    column = finding.start_column
    if line < 0 or column < 0:
        return None
    if not finding.is_pattern:
        return Range(line, column, line, column + 1)

    end_line = finding.end_line - 1
    end_column = finding.end_column
    if end_line < line or (end_line == line and end_column < column):
        return None
    return Range(line, column, end_line, end_column + 1)


def describe(finding: Finding) -> str:
    if finding.is_pattern:
        return f"Hidden Pattern: {finding.category.value} - {finding.message}"
    return (
        f"Hidden Character: {finding.category.value} ({finding.display})"
        f" - {finding.message}"
    )


def to_diagnostics(findings: list[Finding]) -> list[Diagnostic]:
    """One diagnostic per finding; findings with invalid ranges are dropped."""
    diagnostics = []
    for f in findings:
        rng = finding_range(f)
        if rng is None:
            continue
        diagnostics.append(Diagnostic(
            range=rng,
            message=describe(f),
            code=diagnostic_code(f),
        ))
    return diagnostics


def highlights(findings: list[Finding]) -> tuple[list[Range], list[int]]:
    """Ranges to highlight inline plus the sorted lines that get a gutter mark."""
    ranges: list[Range] = []
    lines: set[int] = set()
    for f in findings:
        rng = finding_range(f)
        if rng is None:
            continue
        ranges.append(rng)
        lines.update(range(rng.start_line, rng.end_line + 1))
    return ranges, sorted(lines)


def status_text(count: int) -> str | None:
    """Aggregate indicator text, None when there is nothing to show."""
    if count <= 0:
        return None
    return f"Hidden: {count}"


def format_text(path: str, diagnostics: list[Diagnostic]) -> list[str]:
    """Compiler-style lines: path:line:col: warning: message [code]."""
    return [
        f"{path}:{d.range.start_line + 1}:{d.range.start_character + 1}: "
        f"{d.severity}: {d.message} [{d.code}]"
        for d in diagnostics
    ]
