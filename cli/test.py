from cli._runner import run


def main() -> None:
    """Run tests."""
    import sys

    sys.exit(run(["uv", "run", "pytest"]))


def test_v() -> None:
    """Run tests with verbose output."""
    import sys

    sys.exit(run(["uv", "run", "pytest", "-v"]))


def test_unit() -> None:
    """Run unit tests only."""
    import sys

    sys.exit(run(["uv", "run", "pytest", "tests/unit"]))


def test_integration() -> None:
    """Run API-level integration tests only."""
    import sys

    sys.exit(run(["uv", "run", "pytest", "tests/integration"]))


def test_smoke() -> None:
    """Run smoke checks against a running server."""
    import sys

    sys.exit(run(["uv", "run", "python", "scripts/smoke_api.py", *sys.argv[1:]]))
