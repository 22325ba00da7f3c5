"""Git Operations Package"""

from gh_helper.git.analyzer import GitAnalyzer, GitError, FileChange, parse_name_status
from gh_helper.git.classifier import FileCategory, classify, CATEGORY_TYPES

__all__ = [
    "GitAnalyzer",
    "GitError",
    "FileChange",
    "parse_name_status",
    "FileCategory",
    "classify",
    "CATEGORY_TYPES",
]
