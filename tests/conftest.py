"""Pytest configuration and fixtures."""

from __future__ import annotations

import os
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

ROOT = Path(__file__).resolve().parents[1]

# Add project root to path for imports
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Set test environment variables before importing the app
# Unit tests use an in-memory repository, so these are just defaults
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DYNAMODB_ENDPOINT", "http://localhost:8000")
os.environ.setdefault("DYNAMODB_TABLE_NAME", "chargebacks-test")
os.environ.setdefault("OTEL_LOG_RECORD_FORMAT", "console")

from chargeback_api.core.config import Settings
from chargeback_api.core.dependencies import ServiceContainer, build_container
from chargeback_api.domain.models.chargeback import CreateChargebackRequest
from tests.utils.fake_repository import InMemoryChargebackRepository

TRANSACTION_DATE = datetime(2024, 1, 15, 10, 30, 0, tzinfo=UTC)


@pytest.fixture
def valid_request_data() -> dict:
    """Valid chargeback payload as it arrives over HTTP."""
    return {
        "transaction_id": "tx-1",
        "merchant_id": "m-1",
        "amount": 150.75,
        "currency": "USD",
        "card_number": "4111111111111111",
        "reason": "fraud",
        "description": "Suspicious transaction reported by cardholder",
        "transaction_date": (datetime.now(UTC) - timedelta(days=5)).isoformat(),
    }


@pytest.fixture
def valid_request() -> CreateChargebackRequest:
    """Valid chargeback request model."""
    return CreateChargebackRequest(
        transaction_id="tx-1",
        merchant_id="m-1",
        amount=150.75,
        currency="USD",
        card_number="4111111111111111",
        reason="fraud",
        description="Suspicious transaction reported by cardholder",
        transaction_date=TRANSACTION_DATE,
    )


@pytest.fixture
def settings() -> Settings:
    """Settings built from the test environment."""
    return Settings()


@pytest.fixture
def repository() -> InMemoryChargebackRepository:
    """Fresh in-memory repository."""
    return InMemoryChargebackRepository()


@pytest.fixture
def container(settings: Settings, repository: InMemoryChargebackRepository) -> ServiceContainer:
    """Dependency bundle wired to the in-memory repository."""
    return build_container(settings, repository=repository)


@pytest.fixture
def mock_repository():
    """Mock repository with async methods."""
    repo = AsyncMock()
    repo.find_by_transaction_id = AsyncMock(return_value=None)
    repo.save = AsyncMock()
    return repo
