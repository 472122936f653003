"""AWS Lambda entry point behind API Gateway proxy integration.

Handles both REST API (v1) and HTTP API (v2) proxy events. Dependencies are
built on cold start and reused across invocations of the same container.

Routes:
    GET  /health
    POST /chargebacks, /api/v1/chargebacks
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import json
from functools import lru_cache
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from chargeback_api.api.routes.health import health_payload
from chargeback_api.core.config import get_settings
from chargeback_api.core.dependencies import ServiceContainer, build_container
from chargeback_api.core.errors import ChargebackError, get_status_code
from chargeback_api.core.logging import setup_logging
from chargeback_api.domain.models.chargeback import CreateChargebackRequest

CHARGEBACK_PATH_PREFIXES = ("/chargebacks", "/api/v1/chargebacks")


@lru_cache
def get_lambda_container() -> ServiceContainer:
    """Build dependencies once per Lambda container (cold start)."""
    settings = get_settings()
    setup_logging(settings, force_json=True)
    container = build_container(settings)
    container.logger.info(
        "Lambda function initialized",
        table_name=settings.dynamodb.table_name,
        region=settings.dynamodb.region,
    )
    return container


def _cors_headers(container: ServiceContainer) -> dict[str, str]:
    security = container.settings.security
    return {
        "Access-Control-Allow-Origin": ", ".join(security.cors_allowed_origins),
        "Access-Control-Allow-Methods": ", ".join(security.cors_allow_methods),
        "Access-Control-Allow-Headers": ", ".join(security.cors_allow_headers),
    }


def _response(container: ServiceContainer, status_code: int, body: Any) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {**_cors_headers(container), "Content-Type": "application/json"},
        "body": json.dumps(body, default=str),
    }


def _error(
    container: ServiceContainer,
    status_code: int,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {"error": message}
    if details:
        body["details"] = details
    return _response(container, status_code, body)


def _request_line(event: dict[str, Any]) -> tuple[str, str]:
    """Extract (method, path) from a v1 or v2 proxy event."""
    http = (event.get("requestContext") or {}).get("http") or {}
    method = event.get("httpMethod") or http.get("method") or ""
    path = event.get("path") or event.get("rawPath") or ""
    return method.upper(), path


def _parse_body(event: dict[str, Any]) -> Any:
    """Decode the proxy body string (optionally base64) as JSON.

    Raises:
        ValueError: If the body is not valid JSON.
    """
    body = event.get("body") or ""
    if event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise ValueError(f"invalid base64 body: {exc}") from exc
    return json.loads(body)


def handle_health(container: ServiceContainer) -> dict[str, Any]:
    """GET /health."""
    payload = health_payload(container.settings.app.name, status="healthy")
    return _response(container, 200, payload.model_dump())


def handle_create_chargeback(
    container: ServiceContainer, event: dict[str, Any], logger: Any = None
) -> dict[str, Any]:
    """POST /chargebacks."""
    if logger is None:
        logger = container.logger

    try:
        payload = _parse_body(event)
    except ValueError as exc:
        logger.warning("Failed to parse request body", error=str(exc))
        return _error(container, 400, f"invalid JSON: {exc}")

    if not isinstance(payload, dict):
        return _error(container, 400, "request body must be a JSON object")

    try:
        request = CreateChargebackRequest.model_validate(payload)
    except PydanticValidationError as exc:
        errors = [
            {"loc": [str(part) for part in error["loc"]], "msg": error["msg"]}
            for error in exc.errors()
        ]
        logger.warning("Invalid request body", errors=errors)
        return _error(container, 400, "invalid request body", {"errors": errors})

    try:
        chargeback = asyncio.run(container.chargeback_service.create_chargeback(request))
    except ChargebackError as exc:
        status_code = get_status_code(exc)
        if status_code >= 500:
            logger.error("Failed to create chargeback", error=exc.message)
            return _error(container, status_code, "Failed to create chargeback")
        logger.warning("Chargeback request rejected", status_code=status_code, error=exc.message)
        return _error(container, status_code, exc.message, exc.details)

    logger.info("Chargeback created successfully", chargeback_id=chargeback.id)
    return _response(container, 201, chargeback.model_dump(mode="json"))


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Route an API Gateway proxy event."""
    container = get_lambda_container()
    method, path = _request_line(event)

    logger = container.logger.bind(
        method=method,
        path=path,
        request_id=getattr(context, "aws_request_id", None),
    )
    logger.info("Received request")

    if method == "OPTIONS":
        return {"statusCode": 204, "headers": _cors_headers(container), "body": ""}

    if path == "/health" and method == "GET":
        return handle_health(container)

    if method == "POST" and path.startswith(CHARGEBACK_PATH_PREFIXES):
        return handle_create_chargeback(container, event, logger)

    return _error(container, 404, "Not found")
