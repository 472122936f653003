"""Chargeback API schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from chargeback_api.domain.models.chargeback import (
    Chargeback,
    ChargebackReason,
    ChargebackStatus,
)


class CreateChargebackResponse(BaseModel):
    """Response schema for a created chargeback.

    Mirrors every entity field; the card number is the masked form.
    """

    id: str
    transaction_id: str
    merchant_id: str
    amount: float
    currency: str
    card_number: str = Field(..., description="Masked card number")
    reason: ChargebackReason
    status: ChargebackStatus
    description: str = ""

    # Timestamps
    transaction_date: datetime
    chargeback_date: datetime
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, chargeback: Chargeback) -> CreateChargebackResponse:
        """Project a chargeback entity into the response view."""
        return cls(**chargeback.to_dict())


class ErrorResponse(BaseModel):
    """Error body returned by both the HTTP server and the Lambda handler."""

    error: str
    details: dict[str, Any] | None = None
