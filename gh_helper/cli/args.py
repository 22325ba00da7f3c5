"""CLI Argument Parsing"""

import argparse
import argcomplete

from gh_helper import __version__
from gh_helper.config import VALID_PROVIDERS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='gh-helper',
        description='AI-assisted commit tool: analyze staged changes, generate a message, commit',
        epilog='Example: gh-helper commit'
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')

    # LLM options, shared by every command
    parser.add_argument('-p', '--provider', type=str, choices=sorted(VALID_PROVIDERS), help='LLM backend')
    parser.add_argument('--analysis-model', type=str, metavar='MODEL', help='Fast model used for per-file analysis')
    parser.add_argument('--synthesis-model', type=str, metavar='MODEL', help='Model used for the final message')
    parser.add_argument('--timeout', type=int, metavar='SECONDS', help='Timeout for each backend call')
    parser.add_argument('--verbose', action='store_true', help='Show timings and per-file analysis')

    subparsers = parser.add_subparsers(dest='command', metavar='<command>')

    commit = subparsers.add_parser('commit', help='Generate and create a commit with an AI-generated message')
    commit.add_argument('--no-stage', action='store_true', help='Use the current index instead of staging everything')
    commit.add_argument('-y', '--yes', action='store_true', help='Accept the generated message without prompting')
    commit.add_argument('--push', action='store_true', help='Push after committing without asking')
    commit.add_argument('--dry-run', action='store_true', help='Print the message, do not commit')
    commit.add_argument('--whole-diff', action='store_true', help='Skip per-file analysis, send the whole diff at once')

    subparsers.add_parser('status', help='Check backend availability and models')

    auth = subparsers.add_parser('auth', help='Check Claude Code authentication')
    auth.add_argument('-k', '--check', action='store_true', help='Check authentication status')
    auth.add_argument('-l', '--login', action='store_true', help='Show login instructions')

    subparsers.add_parser('config', help='Show current configuration')

    argcomplete.autocomplete(parser)
    return parser
