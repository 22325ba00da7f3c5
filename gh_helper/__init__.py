"""
gh-helper

AI-assisted commit creation: analyze staged changes file by file and
synthesize a conventional commit message.
"""

__version__ = "1.0.0"

# Commit types the aggregator may suggest
# Used by: analysis/prompts.py
COMMIT_TYPES = {
    'feat': 'A new feature or capability',
    'fix': 'A bug fix',
    'test': 'Adding or updating tests',
    'docs': 'Documentation only changes',
    'chore': 'Maintenance tasks, dependencies, tooling',
}

IMPACT_LEVELS = ('major', 'minor', 'trivial')
