"""
Dependency wiring for the HTTP server and the Lambda handler.

Collaborators (settings, logger, repository, service) are built once per
process into an immutable ServiceContainer and handed to the adapters. Tests
pass their own repository to build_container.
"""

from dataclasses import dataclass
from typing import Annotated

import structlog
from fastapi import Depends, Request

from chargeback_api.core.config import Settings
from chargeback_api.core.logging import get_logger
from chargeback_api.persistence.base import ChargebackRepository
from chargeback_api.persistence.chargeback_repository import DynamoDBChargebackRepository
from chargeback_api.persistence.dynamodb import get_table
from chargeback_api.services.chargeback_service import ChargebackService


@dataclass(frozen=True)
class ServiceContainer:
    """Process-wide, read-only dependency bundle."""

    settings: Settings
    logger: structlog.stdlib.BoundLogger
    repository: ChargebackRepository
    chargeback_service: ChargebackService


def build_container(
    settings: Settings,
    repository: ChargebackRepository | None = None,
) -> ServiceContainer:
    """
    Build the dependency bundle.

    Args:
        settings: Loaded application settings
        repository: Repository override; defaults to the DynamoDB repository
            for the configured table

    Returns:
        ServiceContainer ready to serve requests
    """
    if repository is None:
        table = get_table(settings.dynamodb)
        repository = DynamoDBChargebackRepository(table, settings.dynamodb)

    return ServiceContainer(
        settings=settings,
        logger=get_logger(settings.app.name),
        repository=repository,
        chargeback_service=ChargebackService(repository),
    )


def get_container(request: Request) -> ServiceContainer:
    """Return the container attached to the running application."""
    return request.app.state.container


def get_chargeback_service(
    container: ServiceContainer = Depends(get_container),
) -> ChargebackService:
    """Chargeback service from the application container."""
    return container.chargeback_service


ChargebackServiceDep = Annotated[ChargebackService, Depends(get_chargeback_service)]
