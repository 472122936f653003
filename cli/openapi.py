from cli._runner import run


def main() -> None:
    """Write the OpenAPI document (default: docs/openapi.json)."""
    import sys

    sys.exit(run(["uv", "run", "python", "scripts/generate_openapi.py", *sys.argv[1:]]))
