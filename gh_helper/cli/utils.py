"""CLI Utility Functions"""

import os
import subprocess
import sys
import tempfile

from gh_helper.output import bold, dim, colorize_commit_type

CHOICES = {
    'a': 'accept', 'accept': 'accept',
    'e': 'edit', 'edit': 'edit',
    'r': 'regenerate', 'regenerate': 'regenerate',
    'c': 'cancel', 'cancel': 'cancel',
}


def shorten_path(path: str, width: int = 30) -> str:
    """Keep the tail of long paths: '...' + last width-3 chars."""
    if len(path) <= width:
        return path
    return '...' + path[-(width - 3):]


def format_progress(current: int, total: int, file_name: str) -> str:
    return f"Analyzing file {current}/{total}: {shorten_path(file_name)}"


def display_message(message: str) -> None:
    """Display commit message with horizontal rules and colored type."""
    colored = colorize_commit_type(message)
    lines = colored.split('\n')
    width = max((len(line) for line in message.split('\n')), default=40)
    print(f"\n{dim('─' * width)}")
    print(bold(lines[0]))
    for line in lines[1:]:
        print(line)
    print(dim('─' * width))


def ask_action() -> str:
    """Prompt until a valid choice. EOF or Ctrl-C counts as cancel."""
    while True:
        try:
            choice = input("Options: [a]ccept, [e]dit, [r]egenerate, [c]ancel: ").strip().lower()
        except (KeyboardInterrupt, EOFError):
            print()
            return 'cancel'
        if choice in CHOICES:
            return CHOICES[choice]
        print("Invalid option. Please choose: a, e, r, or c")


def confirm(question: str) -> bool:
    try:
        return input(f"{question} [y/N]: ").strip().lower() in ('y', 'yes')
    except (KeyboardInterrupt, EOFError):
        print()
        return False


def edit_message(message: str) -> str | None:
    """Open message in user's editor. Returns edited text or None on failure."""
    editor = os.environ.get('VISUAL') or os.environ.get('EDITOR')
    if not editor:
        editor = 'notepad' if sys.platform == 'win32' else 'vi'

    tmp = tempfile.NamedTemporaryFile(mode='w', suffix='.gitcommit', delete=False, encoding='utf-8')
    try:
        tmp.write(message)
        tmp.close()
        subprocess.run([editor, tmp.name], check=True)
        with open(tmp.name, 'r', encoding='utf-8') as f:
            edited = f.read().strip()
        return edited if edited else None
    except (subprocess.CalledProcessError, OSError):
        return None
    finally:
        try:
            os.unlink(tmp.name)
        except OSError as e:
            print(f"Warning: Could not delete temp file {tmp.name}: {e}", file=sys.stderr)
