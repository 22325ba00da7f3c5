"""Command Line Interface"""

from gh_helper.cli.main import main, run

__all__ = ["main", "run"]
