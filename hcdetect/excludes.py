"""Glob-style exclusion patterns for workspace scans."""

import re
from functools import lru_cache


def _translate(pattern: str) -> str:
    """Translate one glob into a regex body.

    ``**/`` matches zero or more leading directories, a trailing ``/**``
    matches everything below a directory, ``*`` and ``?`` never cross a
    ``/`` and ``{a,b}`` is alternation.
    """
    out: list[str] = []
    i = 0
    n = len(pattern)
    in_group = False
    while i < n:
        ch = pattern[i]
        if pattern.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
            continue
        if pattern.startswith("/**", i) and i + 3 == n:
            out.append("(?:/.*)?")
            i += 3
            continue
        if pattern.startswith("**", i):
            out.append(".*")
            i += 2
            continue
        if ch == "*":
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
        elif ch == "{" and not in_group:
            out.append("(?:")
            in_group = True
        elif ch == "}" and in_group:
            out.append(")")
            in_group = False
        elif ch == "," and in_group:
            out.append("|")
        else:
            out.append(re.escape(ch))
        i += 1
    if in_group:
        raise ValueError(f"Unbalanced '{{' in pattern {pattern!r}")
    return "".join(out)


@lru_cache(maxsize=64)
def _compile(patterns: tuple[str, ...]) -> re.Pattern | None:
    if not patterns:
        return None
    body = "|".join(f"(?:{_translate(p)})" for p in patterns)
    return re.compile(f"^(?:{body})$")


def compile_patterns(patterns: list[str]) -> re.Pattern | None:
    """Compile glob patterns into a single anchored regex (None if empty)."""
    return _compile(tuple(patterns))


def normalize(rel_path: str) -> str:
    path = rel_path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


def is_excluded(rel_path: str, patterns: list[str]) -> bool:
    """Whether a workspace-relative path matches any exclusion pattern."""
    compiled = compile_patterns(patterns)
    if compiled is None:
        return False
    return bool(compiled.match(normalize(rel_path)))
