"""
Lint and format commands.

Usage:
    uv run lint          # ruff check on sources, tests and scripts
    uv run lint --fix    # extra arguments are passed through to ruff
    uv run format        # ruff format
"""

import sys

from cli._runner import run

LINT_TARGETS = ["chargeback_api", "cli", "scripts", "tests"]


def main() -> None:
    """Run linting."""
    sys.exit(run(["uv", "run", "ruff", "check", *LINT_TARGETS, *sys.argv[1:]]))


def format() -> None:
    """Run code formatting."""
    sys.exit(run(["uv", "run", "ruff", "format", *LINT_TARGETS, *sys.argv[1:]]))
