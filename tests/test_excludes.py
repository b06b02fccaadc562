"""Tests for glob exclusion patterns."""

import pytest

from hcdetect.config import DEFAULT_EXCLUDE_PATTERNS
from hcdetect.excludes import compile_patterns, is_excluded, normalize


class TestIsExcluded:
    def test_directory_anywhere(self):
        patterns = ["**/node_modules/**"]
        assert is_excluded("node_modules", patterns)
        assert is_excluded("node_modules/pkg/index.js", patterns)
        assert is_excluded("web/node_modules/pkg/index.js", patterns)
        assert not is_excluded("src/node_modules_helper.py", patterns)

    def test_extension(self):
        patterns = ["**/*.lock"]
        assert is_excluded("poetry.lock", patterns)
        assert is_excluded("a/b/yarn.lock", patterns)
        assert not is_excluded("lockfile.txt", patterns)

    def test_single_star_stays_in_segment(self):
        patterns = ["src/*.py"]
        assert is_excluded("src/a.py", patterns)
        assert not is_excluded("src/sub/a.py", patterns)

    def test_question_mark(self):
        assert is_excluded("a1.txt", ["a?.txt"])
        assert not is_excluded("a12.txt", ["a?.txt"])

    def test_brace_alternation(self):
        patterns = ["**/*.{png,jpg}"]
        assert is_excluded("img/logo.png", patterns)
        assert is_excluded("photo.jpg", patterns)
        assert not is_excluded("notes.txt", patterns)

    def test_dots_are_literal(self):
        assert not is_excluded("axgit/config", ["**/.git/**"])
        assert is_excluded(".git/config", ["**/.git/**"])

    def test_no_patterns(self):
        assert not is_excluded("anything", [])
        assert compile_patterns([]) is None

    def test_defaults(self):
        assert is_excluded(".git/HEAD", DEFAULT_EXCLUDE_PATTERNS)
        assert is_excluded("assets/font.woff2", DEFAULT_EXCLUDE_PATTERNS)
        assert is_excluded("build/chromedriver", DEFAULT_EXCLUDE_PATTERNS)
        assert not is_excluded("src/main.py", DEFAULT_EXCLUDE_PATTERNS)
        assert not is_excluded("README.md", DEFAULT_EXCLUDE_PATTERNS)

    def test_unbalanced_brace(self):
        with pytest.raises(ValueError):
            compile_patterns(["*.{png"])


class TestNormalize:
    def test_leading_dot_slash(self):
        assert normalize("./a/b") == "a/b"

    def test_backslashes(self):
        assert normalize("a\\b\\c.txt") == "a/b/c.txt"

    def test_hidden_directory_kept(self):
        assert normalize(".git/config") == ".git/config"
