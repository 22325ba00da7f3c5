"""Terminal Output - colors, status lines and the progress spinner.

Diagnostics (errors, warnings, fallbacks) go to stderr so that
`gh-helper commit --dry-run > msg.txt` captures only normal output.
"""

import itertools
import os
import re
import sys
import threading

RESET = '\033[0m'
BOLD = '\033[1m'
DIM = '\033[2m'
RED = '\033[31m'
GREEN = '\033[32m'
YELLOW = '\033[33m'
CYAN = '\033[36m'
MAGENTA = '\033[35m'


def _supports_color(stream) -> bool:
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    if not hasattr(stream, 'isatty') or not stream.isatty():
        return False
    if sys.platform == 'win32':
        try:
            import ctypes
            kernel32 = ctypes.windll.kernel32
            kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7)
            return True
        except Exception:
            return False
    return True


def _supports_unicode() -> bool:
    try:
        '✓⚠✗⠋'.encode(sys.stdout.encoding or 'utf-8')
        return True
    except (UnicodeEncodeError, LookupError):
        return False


COLORS_ENABLED = _supports_color(sys.stdout)
UNICODE_ENABLED = _supports_unicode()

CHECK, WARN, CROSS = ('✓', '⚠', '✗') if UNICODE_ENABLED else ('[OK]', '[!]', '[X]')


def _paint(text: str, *codes: str) -> str:
    if not COLORS_ENABLED or not codes:
        return text
    return f"{''.join(codes)}{text}{RESET}"


def success(text: str) -> str:
    return _paint(text, GREEN)


def error(text: str) -> str:
    return _paint(text, RED)


def warning(text: str) -> str:
    return _paint(text, YELLOW)


def info(text: str) -> str:
    return _paint(text, CYAN)


def dim(text: str) -> str:
    return _paint(text, DIM)


def bold(text: str) -> str:
    return _paint(text, BOLD)


def print_success(message: str) -> None:
    print(f"{success(CHECK)} {message}")


def print_error(message: str) -> None:
    """First line is the diagnostic, further lines are remediation hints."""
    first, _, hints = message.partition('\n')
    print(f"{error(CROSS)} {error(first)}", file=sys.stderr)
    if hints:
        print(dim(hints), file=sys.stderr)


def print_warning(message: str) -> None:
    print(f"{warning(WARN)} {warning(message)}", file=sys.stderr)


# Suggested commit types, see gh_helper.COMMIT_TYPES
COMMIT_TYPE_COLORS = {
    'feat': GREEN,
    'fix': RED,
    'docs': CYAN,
    'test': MAGENTA,
    'chore': DIM,
}

IMPACT_COLORS = {
    'major': YELLOW,
    'minor': CYAN,
    'trivial': DIM,
}

_SUBJECT_PREFIX_RE = re.compile(r'^(\w+)(\([^)]*\))?(!?:)')


def colorize_commit_type(message: str) -> str:
    """Color the `type(scope):` prefix of the subject line."""
    subject, sep, body = message.partition('\n')
    match = _SUBJECT_PREFIX_RE.match(subject)
    if not match or match.group(1) not in COMMIT_TYPE_COLORS:
        return message
    prefix = match.group(0)
    subject = _paint(prefix, BOLD, COMMIT_TYPE_COLORS[match.group(1)]) + subject[len(prefix):]
    return subject + sep + body


def impact_label(impact: str) -> str:
    """Fixed-width `[impact]` tag for per-file listings."""
    label = f"[{impact}]".ljust(9)
    color = IMPACT_COLORS.get(impact)
    return _paint(label, color) if color else label


class Spinner:
    """Animated status line. Use as context manager.

    When stdout is not a terminal, each new status text is printed on its
    own line instead, so progress still shows up in logs and pipes.
    """
    FRAMES = list('⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏') if UNICODE_ENABLED else ['-', '\\', '|', '/']
    INTERVAL = 0.08

    def __init__(self, text: str = ""):
        self.text = text
        self._interactive = sys.stdout.isatty()
        self._stop = threading.Event()
        self._thread = None

    def _spin(self):
        for i in itertools.count():
            frame = self.FRAMES[i % len(self.FRAMES)]
            print(f'\r\033[K{info(frame)} {self.text}', end='', flush=True)
            if self._stop.wait(self.INTERVAL):
                break

    def update(self, text: str) -> None:
        self.text = text
        if not self._interactive:
            print(text)

    def __enter__(self):
        if self._interactive:
            self._stop.clear()
            self._thread = threading.Thread(target=self._spin, daemon=True)
            self._thread.start()
        return self

    def __exit__(self, *exc):
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
            print('\r\033[K', end='', flush=True)


__all__ = [
    "success", "error", "warning", "info", "dim", "bold",
    "print_success", "print_error", "print_warning",
    "colorize_commit_type", "impact_label", "Spinner",
]
