"""
DynamoDB table setup commands.

These commands wrap scripts/setup_dynamodb.py.

Usage:
    uv run db-create        # Create the chargebacks table
    uv run db-drop          # Drop the table (asks for confirmation)
    uv run db-reset         # Drop and recreate the table
    uv run db-verify        # Verify table and indexes
    uv run db-local         # Start DynamoDB Local in Docker and create the table
"""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

from cli._runner import run

_SCRIPTS_DIR = Path(__file__).parent.parent / "scripts"
_SETUP_TABLE_SCRIPT = _SCRIPTS_DIR / "setup_dynamodb.py"

LOCAL_CONTAINER = "dynamodb-local"
LOCAL_ENDPOINT = "http://localhost:8000"


def _run_setup(*args: str) -> int:
    """Run the table setup script with the given arguments."""
    return run([sys.executable, str(_SETUP_TABLE_SCRIPT), *sys.argv[1:], *args])


def _is_container_running(name: str) -> bool:
    """Check if a container is running."""
    result = subprocess.run(
        ["docker", "inspect", "--format", "{{.State.Status}}", name],
        capture_output=True,
        text=True,
    )
    return result.returncode == 0 and result.stdout.strip() == "running"


def db_create() -> None:
    """Create the chargebacks table."""
    sys.exit(_run_setup("create"))


def db_drop() -> None:
    """Drop the chargebacks table."""
    sys.exit(_run_setup("drop"))


def db_reset() -> None:
    """Drop and recreate the chargebacks table."""
    sys.exit(_run_setup("--yes", "reset"))


def db_verify() -> None:
    """Verify table setup."""
    sys.exit(_run_setup("verify"))


def db_local() -> None:
    """Start DynamoDB Local and create the table against it."""
    if _is_container_running(LOCAL_CONTAINER):
        print(f"[OK] {LOCAL_CONTAINER} already running")
    else:
        print(f"Starting {LOCAL_CONTAINER}...")
        code = run(
            [
                "docker",
                "run",
                "-d",
                "-p",
                "8000:8000",
                "--name",
                LOCAL_CONTAINER,
                "amazon/dynamodb-local",
            ]
        )
        if code != 0:
            sys.exit(code)

    os.environ.setdefault("DYNAMODB_ENDPOINT", LOCAL_ENDPOINT)
    sys.exit(run([sys.executable, str(_SETUP_TABLE_SCRIPT), "create"]))


def main() -> None:
    """Default entry point - shows help."""
    run([sys.executable, str(_SETUP_TABLE_SCRIPT), "--help"])
