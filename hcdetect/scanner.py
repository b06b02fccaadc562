"""Core scanning engine for hidden Unicode characters and zero-width payloads.

Positions are reported in UTF-16 code units, the unit editors and language
servers address text in: a character outside the Basic Multilingual Plane
advances the index and column by two.
"""

from dataclasses import dataclass
from typing import NamedTuple

from hcdetect.categories import (
    BINARY_PATTERN_CHARS,
    MIN_PATTERN_LENGTH,
    Category,
    format_code_point,
    lookup,
    pattern_message,
)
from hcdetect.suppression import is_suppressed, scalar_at

PATTERN_CODE_POINT = -1


@dataclass(frozen=True)
class Finding:
    display: str  # e.g. "U+200B" or "[Binary Pattern (12 chars)]"
    code_point: int
    start_index: int
    start_line: int  # one-based
    start_column: int  # zero-based
    category: Category
    message: str
    # Range findings only; inclusive, pointing at the last matched character.
    end_index: int | None = None
    end_line: int | None = None
    end_column: int | None = None

    @property
    def is_pattern(self) -> bool:
        return self.end_line is not None and self.end_column is not None

    def to_dict(self) -> dict:
        data = {
            "display": self.display,
            "codePoint": self.code_point,
            "startIndex": self.start_index,
            "startLine": self.start_line,
            "startColumn": self.start_column,
            "category": self.category.value,
            "message": self.message,
        }
        if self.is_pattern:
            data["endIndex"] = self.end_index
            data["endLine"] = self.end_line
            data["endColumn"] = self.end_column
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Finding":
        return cls(
            display=data["display"],
            code_point=data["codePoint"],
            start_index=data["startIndex"],
            start_line=data["startLine"],
            start_column=data["startColumn"],
            category=Category(data["category"]),
            message=data["message"],
            end_index=data.get("endIndex"),
            end_line=data.get("endLine"),
            end_column=data.get("endColumn"),
        )


def _units(cp: int) -> int:
    return 2 if cp > 0xFFFF else 1


class _Cursor(NamedTuple):
    pos: int  # index into the Python string
    index: int  # UTF-16 offset
    line: int
    line_start: int  # UTF-16 offset of the current line

    @property
    def column(self) -> int:
        return self.index - self.line_start

    def advance(self, cp: int, width: int) -> "_Cursor":
        index = self.index + _units(cp)
        if cp == 0x0A:
            return _Cursor(self.pos + width, index, self.line + 1, index)
        return _Cursor(self.pos + width, index, self.line, self.line_start)


class _Run(NamedTuple):
    length: int
    last: _Cursor  # cursor at the last character of the run
    after: _Cursor  # cursor just past the run


def _measure_run(text: str, start: _Cursor) -> _Run:
    """Greedily extend a run of binary-pattern characters from start."""
    cursor = last = start
    length = 0
    while cursor.pos < len(text):
        cp, width = scalar_at(text, cursor.pos)
        if cp not in BINARY_PATTERN_CHARS:
            break
        length += 1
        last = cursor
        cursor = cursor.advance(cp, width)
    return _Run(length, last, cursor)


def scan(text: str) -> list[Finding]:
    """Scan text and return every hidden character or pattern, in order."""
    findings: list[Finding] = []
    cursor = _Cursor(pos=0, index=0, line=1, line_start=0)

    while cursor.pos < len(text):
        cp, width = scalar_at(text, cursor.pos)

        if cp in BINARY_PATTERN_CHARS:
            run = _measure_run(text, cursor)
            if run.length >= MIN_PATTERN_LENGTH:
                findings.append(Finding(
                    display=f"[Binary Pattern ({run.length} chars)]",
                    code_point=PATTERN_CODE_POINT,
                    start_index=cursor.index,
                    start_line=cursor.line,
                    start_column=cursor.column,
                    category=Category.BINARY_ENCODING_PATTERN,
                    message=pattern_message(run.length),
                    end_index=run.last.index,
                    end_line=run.last.line,
                    end_column=run.last.column,
                ))
                cursor = run.after
                continue
            # Too short: fall through and judge this character on its own.

        hit = lookup(cp)
        if hit is not None and not is_suppressed(text, cursor.pos, width, cp):
            category, message = hit
            findings.append(Finding(
                display=format_code_point(cp),
                code_point=cp,
                start_index=cursor.index,
                start_line=cursor.line,
                start_column=cursor.column,
                category=category,
                message=message,
            ))

        cursor = cursor.advance(cp, width)

    return findings
