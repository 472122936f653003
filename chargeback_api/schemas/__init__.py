"""Schemas package for request/response models."""

from chargeback_api.schemas.chargeback import CreateChargebackResponse, ErrorResponse

__all__ = [
    "CreateChargebackResponse",
    "ErrorResponse",
]
