"""Chargeback service: creation use case."""

from chargeback_api.core.errors import ConflictError, StorageError
from chargeback_api.core.logging import get_logger
from chargeback_api.domain.models.chargeback import Chargeback, CreateChargebackRequest
from chargeback_api.persistence.base import ChargebackRepository
from chargeback_api.schemas.chargeback import CreateChargebackResponse

logger = get_logger(__name__)


class ChargebackService:
    """Service for chargeback operations."""

    def __init__(self, repository: ChargebackRepository):
        self.repository = repository

    async def create_chargeback(self, request: CreateChargebackRequest) -> CreateChargebackResponse:
        """Record a new chargeback for a transaction.

        The duplicate check and the write are two separate store calls, so two
        concurrent requests for the same transaction can both succeed.

        Raises:
            ConflictError: A chargeback already exists for the transaction.
            ValidationError: The request breaks a business rule.
            StorageError: The store failed on lookup or write.
        """
        try:
            existing = await self.repository.find_by_transaction_id(request.transaction_id)
        except StorageError as exc:
            raise StorageError(
                f"failed to check existing chargeback: {exc.message}", details=exc.details
            ) from exc

        if existing is not None:
            raise ConflictError(
                f"chargeback already exists for transaction {request.transaction_id}",
                details={"transaction_id": request.transaction_id, "id": existing.id},
            )

        chargeback = Chargeback.create(request)

        try:
            await self.repository.save(chargeback)
        except StorageError as exc:
            raise StorageError(
                f"failed to save chargeback: {exc.message}", details=exc.details
            ) from exc

        logger.info(
            "Chargeback created",
            chargeback_id=chargeback.id,
            transaction_id=chargeback.transaction_id,
            merchant_id=chargeback.merchant_id,
            reason=chargeback.reason.value,
        )

        return CreateChargebackResponse.from_entity(chargeback)
