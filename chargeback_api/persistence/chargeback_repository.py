"""Chargeback repository backed by DynamoDB.

Table: chargebacks (hash key `id`)
Indexes: transaction-id-index, merchant-id-index, status-index

boto3 is blocking, so every call is pushed to a worker thread with
asyncio.to_thread to keep the event loop free.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from decimal import Decimal, DecimalException
from typing import Any
from uuid import uuid4

from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from chargeback_api.core.config import DynamoDBConfig
from chargeback_api.core.errors import NotFoundError, StorageError, ValidationError
from chargeback_api.core.logging import LoggerMixin
from chargeback_api.domain.models.chargeback import (
    Chargeback,
    ChargebackReason,
    ChargebackStatus,
)
from chargeback_api.persistence.base import ChargebackRepository, PageCursor

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"

_DATETIME_FIELDS = ("transaction_date", "chargeback_date", "created_at", "updated_at")


def to_item(chargeback: Chargeback) -> dict[str, Any]:
    """Convert an entity to a DynamoDB item."""
    return {
        "id": chargeback.id,
        "transaction_id": chargeback.transaction_id,
        "merchant_id": chargeback.merchant_id,
        # boto3 rejects floats; go through str to keep the decimal digits as given
        "amount": Decimal(str(chargeback.amount)),
        "currency": chargeback.currency,
        "card_number": chargeback.card_number,
        "reason": chargeback.reason.value,
        "status": chargeback.status.value,
        "description": chargeback.description,
        "transaction_date": chargeback.transaction_date.isoformat(),
        "chargeback_date": chargeback.chargeback_date.isoformat(),
        "created_at": chargeback.created_at.isoformat(),
        "updated_at": chargeback.updated_at.isoformat(),
    }


def from_item(item: dict[str, Any]) -> Chargeback:
    """Convert a DynamoDB item back to an entity."""
    dates = {name: datetime.fromisoformat(item[name]) for name in _DATETIME_FIELDS}
    return Chargeback(
        id=item["id"],
        transaction_id=item["transaction_id"],
        merchant_id=item["merchant_id"],
        amount=float(item["amount"]),
        currency=item["currency"],
        card_number=item["card_number"],
        reason=ChargebackReason(item["reason"]),
        status=ChargebackStatus(item["status"]),
        description=item.get("description", ""),
        **dates,
    )


class DynamoDBChargebackRepository(LoggerMixin, ChargebackRepository):
    """Repository for chargebacks stored in a DynamoDB table."""

    def __init__(self, table: Any, config: DynamoDBConfig):
        self.table = table
        self.config = config

    async def find_by_transaction_id(self, transaction_id: str) -> Chargeback | None:
        """Look up the chargeback recorded for a transaction via the transaction index."""
        response = await self._call(
            "query",
            IndexName=self.config.transaction_index,
            KeyConditionExpression=Key("transaction_id").eq(transaction_id),
            Limit=1,
        )
        items = response.get("Items", [])
        if not items:
            return None
        return from_item(items[0])

    async def save(self, chargeback: Chargeback) -> None:
        """Persist a new chargeback under a freshly generated identifier."""
        if not chargeback.is_valid():
            raise ValidationError(
                "cannot save invalid chargeback",
                details={"transaction_id": chargeback.transaction_id},
            )

        chargeback_id = chargeback.id or str(uuid4())
        item = to_item(chargeback)
        item["id"] = chargeback_id

        try:
            await self._call(
                "put_item",
                Item=item,
                ConditionExpression="attribute_not_exists(id)",
            )
        except StorageError as exc:
            if exc.details.get("code") == CONDITIONAL_CHECK_FAILED:
                raise StorageError(
                    f"chargeback {chargeback_id} already stored",
                    details={"id": chargeback_id},
                ) from exc
            raise

        chargeback.id = chargeback_id
        self.logger.debug(
            "Chargeback stored",
            chargeback_id=chargeback_id,
            transaction_id=chargeback.transaction_id,
        )

    async def find_by_id(self, chargeback_id: str) -> Chargeback | None:
        """Get chargeback by ID."""
        response = await self._call("get_item", Key={"id": chargeback_id})
        item = response.get("Item")
        if not item:
            return None
        return from_item(item)

    async def find_by_merchant_id(self, merchant_id: str) -> list[Chargeback]:
        """All chargebacks for a merchant via the merchant index."""
        return await self._query_all(self.config.merchant_index, Key("merchant_id").eq(merchant_id))

    async def find_by_status(self, status: ChargebackStatus) -> list[Chargeback]:
        """All chargebacks in a status via the status index."""
        return await self._query_all(self.config.status_index, Key("status").eq(status.value))

    async def update(self, chargeback: Chargeback) -> None:
        """Overwrite an existing chargeback."""
        if not chargeback.id:
            raise ValidationError("chargeback ID is required for update")

        try:
            await self._call(
                "put_item",
                Item=to_item(chargeback),
                ConditionExpression="attribute_exists(id)",
            )
        except StorageError as exc:
            if exc.details.get("code") == CONDITIONAL_CHECK_FAILED:
                raise NotFoundError(
                    "Chargeback not found", details={"id": chargeback.id}
                ) from exc
            raise

    async def delete(self, chargeback_id: str) -> None:
        """Remove a chargeback."""
        try:
            await self._call(
                "delete_item",
                Key={"id": chargeback_id},
                ConditionExpression="attribute_exists(id)",
            )
        except StorageError as exc:
            if exc.details.get("code") == CONDITIONAL_CHECK_FAILED:
                raise NotFoundError("Chargeback not found", details={"id": chargeback_id}) from exc
            raise

    async def list(
        self, limit: int = 50, cursor: str | None = None
    ) -> tuple[list[Chargeback], str | None]:
        """Scan one page of chargebacks."""
        kwargs: dict[str, Any] = {"Limit": limit}
        if cursor:
            decoded = PageCursor.decode(cursor)
            if decoded is None:
                raise ValidationError("Invalid cursor", details={"cursor": cursor})
            kwargs["ExclusiveStartKey"] = decoded.last_key

        response = await self._call("scan", **kwargs)
        items = [from_item(item) for item in response.get("Items", [])]

        last_key = response.get("LastEvaluatedKey")
        next_cursor = PageCursor(last_key=last_key).encode() if last_key else None
        return items, next_cursor

    async def _query_all(self, index_name: str, condition: Any) -> list[Chargeback]:
        """Run a GSI query, following pagination until exhausted."""
        kwargs: dict[str, Any] = {
            "IndexName": index_name,
            "KeyConditionExpression": condition,
        }
        results: list[Chargeback] = []
        while True:
            response = await self._call("query", **kwargs)
            results.extend(from_item(item) for item in response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return results
            kwargs["ExclusiveStartKey"] = last_key

    async def _call(self, operation: str, **kwargs: Any) -> dict[str, Any]:
        """Invoke a Table operation off the event loop, translating boto errors."""
        method = getattr(self.table, operation)
        try:
            return await asyncio.to_thread(method, **kwargs)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            raise StorageError(
                f"dynamodb {operation} failed: {exc}",
                details={"operation": operation, "code": code},
            ) from exc
        except BotoCoreError as exc:
            raise StorageError(
                f"dynamodb {operation} failed: {exc}",
                details={"operation": operation},
            ) from exc
        except (TypeError, DecimalException) as exc:
            # boto3 serializer: non-finite floats, numbers outside the DynamoDB range
            raise StorageError(
                f"dynamodb {operation} failed: unsupported value: {exc!r}",
                details={"operation": operation},
            ) from exc
