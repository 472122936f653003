"""API routes for chargebacks."""

from fastapi import APIRouter

from chargeback_api.core.dependencies import ChargebackServiceDep
from chargeback_api.domain.models.chargeback import CreateChargebackRequest
from chargeback_api.schemas.chargeback import CreateChargebackResponse, ErrorResponse

router = APIRouter(prefix="/chargebacks", tags=["chargebacks"])


@router.post(
    "",
    response_model=CreateChargebackResponse,
    status_code=201,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        409: {"model": ErrorResponse, "description": "Chargeback already exists"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
)
async def create_chargeback(
    request: CreateChargebackRequest,
    chargeback_service: ChargebackServiceDep,
) -> CreateChargebackResponse:
    """Record a chargeback for a transaction.

    The card number is masked before anything is stored; the response only
    ever contains the masked form.
    """
    return await chargeback_service.create_chargeback(request)
