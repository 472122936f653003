"""Chargeback domain model.

A chargeback is a disputed card payment recorded against a merchant. It is
created from a CreateChargebackRequest, starts in PENDING and can move once,
to APPROVED or REJECTED. The card number held by the entity is always the
masked form.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from chargeback_api.core.errors import InvalidStatusTransitionError, ValidationError
from chargeback_api.core.security.card_masking import mask_card_number


class ChargebackStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ChargebackReason(str, Enum):
    FRAUD = "fraud"
    AUTHORIZATION_ERROR = "authorization_error"
    PROCESSING_ERROR = "processing_error"
    CONSUMER_DISPUTE = "consumer_dispute"


VALID_REASONS = frozenset(reason.value for reason in ChargebackReason)


def utc_now() -> datetime:
    """Current instant in UTC."""
    return datetime.now(UTC)


def is_zero_datetime(value: datetime | None) -> bool:
    """True for a missing timestamp or the zero instant (0001-01-01T00:00:00 UTC).

    Aware values are compared as instants: 0001-01-01T00:00:00-05:00 is five
    hours past zero and does not count.
    """
    if value is None:
        return True
    offset = value.utcoffset() or timedelta(0)
    # astimezone() would overflow below year 1
    return value.replace(tzinfo=None) - datetime.min == offset


class CreateChargebackRequest(BaseModel):
    """Incoming data for a new chargeback.

    Fields are deliberately lenient: missing values fall back to empty
    defaults so that validate_create_request can report every violation at
    once instead of failing on the first missing key.
    """

    model_config = ConfigDict(extra="ignore")

    transaction_id: str = ""
    merchant_id: str = ""
    amount: float = 0
    currency: str = ""
    card_number: str = ""
    reason: str = ""
    description: str = ""
    transaction_date: datetime | None = None

    @field_validator(
        "transaction_id",
        "merchant_id",
        "currency",
        "card_number",
        "reason",
        "description",
        mode="before",
    )
    @classmethod
    def null_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("amount", mode="before")
    @classmethod
    def null_amount_to_zero(cls, v: Any) -> Any:
        return 0 if v is None else v


def validate_create_request(request: CreateChargebackRequest) -> None:
    """Check every business rule on a creation request.

    All rules are evaluated; violations are collected in order and raised as
    a single ValidationError.

    Raises:
        ValidationError: "validation errors: " followed by the violations
            joined with "; ".
    """
    violations: list[str] = []

    if not request.transaction_id.strip():
        violations.append("transaction ID is required")

    if not request.merchant_id.strip():
        violations.append("merchant ID is required")

    if not math.isfinite(request.amount) or request.amount <= 0:
        violations.append("amount must be greater than zero")

    if not request.currency.strip():
        violations.append("currency is required")

    if not request.card_number.strip():
        violations.append("card number is required")

    if request.reason not in VALID_REASONS:
        violations.append("invalid chargeback reason")

    if is_zero_datetime(request.transaction_date):
        violations.append("transaction date is required")

    if violations:
        raise ValidationError(
            f"validation errors: {'; '.join(violations)}",
            details={"violations": violations},
        )


@dataclass
class Chargeback:
    """A recorded chargeback.

    `id` stays empty until the repository persists the entity.
    """

    transaction_id: str
    merchant_id: str
    amount: float
    currency: str
    card_number: str
    reason: ChargebackReason
    transaction_date: datetime
    chargeback_date: datetime
    created_at: datetime
    updated_at: datetime
    status: ChargebackStatus = ChargebackStatus.PENDING
    description: str = ""
    id: str = ""

    @classmethod
    def create(cls, request: CreateChargebackRequest) -> Chargeback:
        """Build a new pending chargeback from a validated request.

        Raises:
            ValidationError: If the request breaks any business rule.
        """
        validate_create_request(request)

        transaction_date = request.transaction_date
        if transaction_date is None:
            raise ValidationError(
                "validation errors: transaction date is required",
                details={"violations": ["transaction date is required"]},
            )

        now = utc_now()

        return cls(
            transaction_id=request.transaction_id,
            merchant_id=request.merchant_id,
            amount=request.amount,
            currency=request.currency,
            card_number=mask_card_number(request.card_number),
            reason=ChargebackReason(request.reason),
            status=ChargebackStatus.PENDING,
            description=request.description,
            transaction_date=transaction_date,
            chargeback_date=now,
            created_at=now,
            updated_at=now,
        )

    def approve(self) -> None:
        """Move a pending chargeback to APPROVED."""
        if self.status != ChargebackStatus.PENDING:
            raise InvalidStatusTransitionError(
                "only pending chargebacks can be approved",
                details={"id": self.id, "status": self.status.value},
            )

        self.status = ChargebackStatus.APPROVED
        self.updated_at = utc_now()

    def reject(self) -> None:
        """Move a pending chargeback to REJECTED."""
        if self.status != ChargebackStatus.PENDING:
            raise InvalidStatusTransitionError(
                "only pending chargebacks can be rejected",
                details={"id": self.id, "status": self.status.value},
            )

        self.status = ChargebackStatus.REJECTED
        self.updated_at = utc_now()

    def is_valid(self) -> bool:
        """Check that every required field is populated."""
        return (
            bool(self.transaction_id)
            and bool(self.merchant_id)
            and math.isfinite(self.amount)
            and self.amount > 0
            and bool(self.currency)
            and bool(self.card_number)
            and bool(self.reason)
            and not is_zero_datetime(self.transaction_date)
            and not is_zero_datetime(self.chargeback_date)
        )

    def to_dict(self) -> dict[str, Any]:
        """Plain dict of every field, enums and datetimes left as Python objects."""
        return asdict(self)
