"""Development server with auto-reload.

Host and port come from SERVER_HOST / SERVER_PORT. Point DYNAMODB_ENDPOINT at
DynamoDB Local (see `uv run db-local`) to develop without AWS.
"""


def main() -> None:
    """Run development server."""
    import uvicorn

    from chargeback_api.core.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "chargeback_api.main:create_app",
        host=settings.server.host,
        port=settings.server.port,
        reload=True,
        factory=True,
        log_level=settings.app.log_level.lower(),
    )
