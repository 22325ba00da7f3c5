"""Git Analyzer - Read staged changes and write commits."""

import subprocess
from dataclasses import dataclass


STATUS_CODES = {
    'A': 'added',
    'M': 'modified',
    'D': 'deleted',
    'R': 'renamed',
    'C': 'copied',
    'T': 'modified',
}


@dataclass(frozen=True)
class FileChange:
    """One staged file as reported by git."""
    path: str
    status: str
    old_path: str | None = None

    @property
    def name(self) -> str:
        return self.path.rsplit('/', 1)[-1]


class GitError(Exception):
    """Raised when git operations fail."""
    pass


def parse_name_status(output: str) -> list[FileChange]:
    """Parse 'git diff --cached --name-status -M' output."""
    files = []
    for line in output.strip().split('\n'):
        if not line.strip():
            continue
        parts = line.split('\t')
        code = parts[0][:1].upper()
        status = STATUS_CODES.get(code)
        if status is None or len(parts) < 2:
            continue
        if code in ('R', 'C') and len(parts) >= 3:
            files.append(FileChange(path=parts[2], status=status, old_path=parts[1]))
        else:
            files.append(FileChange(path=parts[1], status=status))
    return files


class GitAnalyzer:
    """Thin wrapper around the git executable."""

    def __init__(self, cwd: str | None = None):
        self.cwd = cwd
        self._verify_git_available()
        self._verify_in_repo()

    def _run_git(self, *args: str) -> str:
        """Run a git command and return stdout."""
        try:
            result = subprocess.run(
                ['git', *args],
                cwd=self.cwd,
                capture_output=True,
                text=True,
                check=True,
                encoding='utf-8',
                errors='replace'
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitError(f"Git command failed: git {' '.join(args)}\n{e.stderr}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_git_available(self) -> None:
        """Fail fast if git isn't available."""
        try:
            self._run_git('--version')
        except GitError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_in_repo(self) -> None:
        """Fail fast if we're not in a git repository."""
        try:
            self._run_git('rev-parse', '--git-dir')
        except GitError:
            raise GitError("Not a git repository")

    def has_changes(self) -> bool:
        """True if the working tree or index has anything to commit."""
        return bool(self._run_git('status', '--porcelain').strip())

    def stage_all(self) -> None:
        self._run_git('add', '-A')

    def list_changed_files(self) -> list[FileChange]:
        """Staged files with their status, renames detected."""
        output = self._run_git('diff', '--cached', '--name-status', '-M')
        if not output.strip():
            return []
        return parse_name_status(output)

    def get_diff(self, path: str | None = None, old_path: str | None = None) -> str:
        """Full staged diff, or the staged diff of one file. Never truncated.

        Pass old_path for renamed or copied files so git can pair both sides;
        a pure rename then diffs to nothing instead of a whole new file.
        """
        if path is None:
            return self._run_git('diff', '--cached')
        if old_path:
            return self._run_git('diff', '--cached', '-M', '-C', '--find-copies-harder', '--', old_path, path)
        return self._run_git('diff', '--cached', '--', path)

    def commit(self, message: str) -> None:
        self._run_git('commit', '-m', message)

    def push(self) -> str:
        return self._run_git('push')
