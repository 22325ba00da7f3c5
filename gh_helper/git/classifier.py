"""File Classifier - Map a changed path to a category."""

import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Callable


CODE = "code"
TEST = "test"
DOCUMENTATION = "documentation"
CONFIGURATION = "configuration"
TOOLING = "tooling"

CATEGORY_TYPES = (CODE, TEST, DOCUMENTATION, CONFIGURATION, TOOLING)

GENERATED_SUMMARY = "Update generated files"


@dataclass(frozen=True)
class FileCategory:
    """Classification of one path. Only tooling skips analysis."""
    type: str
    needs_analysis: bool = True
    summary: str | None = None


# (pattern, summary) pairs, matched against the full path
TOOLING_PATTERNS: list[tuple[str, str]] = [
    (r'(^|/)package-lock\.json$', "Update package dependencies"),
    (r'(^|/)npm-shrinkwrap\.json$', "Update package dependencies"),
    (r'(^|/)yarn\.lock$', "Update package dependencies"),
    (r'(^|/)pnpm-lock\.yaml$', "Update package dependencies"),
    (r'(^|/)bun\.lockb?$', "Update package dependencies"),
    (r'(^|/)poetry\.lock$', "Update Python dependencies"),
    (r'(^|/)Pipfile\.lock$', "Update Python dependencies"),
    (r'(^|/)uv\.lock$', "Update Python dependencies"),
    (r'(^|/)Cargo\.lock$', "Update Rust dependencies"),
    (r'(^|/)Gemfile\.lock$', "Update Ruby dependencies"),
    (r'(^|/)composer\.lock$', "Update PHP dependencies"),
    (r'(^|/)go\.sum$', "Update Go dependencies"),
    (r'(^|/)sitemap[^/]*\.xml$', "Update generated sitemap"),
    (r'(^|/)(asset-)?manifest\.json$', "Update generated manifest"),
    (r'\.min\.(js|css)$', "Update minified assets"),
    (r'\.bundle\.(js|css)$', "Update bundled assets"),
    (r'\.map$', "Update source maps"),
    (r'^(build|dist|out|\.next)/', GENERATED_SUMMARY),
]

CONFIG_EXTENSIONS = {'json', 'yaml', 'yml', 'toml', 'ini', 'conf', 'config'}
CONFIG_BASENAMES = ('dockerfile', 'makefile', '.env', '.env.example')
DOC_EXTENSIONS = {'md', 'txt', 'rst', 'adoc'}

_TOOLING_RE = [(re.compile(p, re.IGNORECASE), s) for p, s in TOOLING_PATTERNS]


def _extension(path: str) -> str:
    return PurePosixPath(path).suffix.lower().lstrip('.')


def _filename(path: str) -> str:
    return PurePosixPath(path).name.lower()


def _tooling_summary(path: str) -> str | None:
    for pattern, summary in _TOOLING_RE:
        if pattern.search(path):
            return summary
    return None


def _is_configuration(path: str) -> bool:
    if _extension(path) in CONFIG_EXTENSIONS:
        return True
    name = _filename(path)
    return any(base in name for base in CONFIG_BASENAMES)


def _is_documentation(path: str) -> bool:
    return _extension(path) in DOC_EXTENSIONS


def _is_test(path: str) -> bool:
    # also covers test/, tests/ and __tests__/ segments
    lowered = path.lower()
    return 'test' in lowered or 'spec' in lowered


# Evaluated top to bottom, first match wins
CATEGORY_RULES: list[tuple[Callable[[str], bool], str]] = [
    (_is_configuration, CONFIGURATION),
    (_is_documentation, DOCUMENTATION),
    (_is_test, TEST),
]


def classify(path: str) -> FileCategory:
    """Classify a repository-relative path.

    Precedence is tooling > configuration > documentation > test > code.
    """
    path = path.replace('\\', '/')

    summary = _tooling_summary(path)
    if summary is not None:
        return FileCategory(type=TOOLING, needs_analysis=False, summary=summary)

    for predicate, category_type in CATEGORY_RULES:
        if predicate(path):
            return FileCategory(type=category_type)

    return FileCategory(type=CODE)
