"""Base classes for the repository layer."""

from __future__ import annotations

import base64
import binascii
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from chargeback_api.domain.models.chargeback import Chargeback, ChargebackStatus


@dataclass
class PageCursor:
    """Opaque cursor wrapping a DynamoDB LastEvaluatedKey.

    Chargeback keys are plain strings, so the key round-trips through JSON.
    """

    last_key: dict[str, Any]

    def encode(self) -> str:
        """Encode cursor to base64 string."""
        data = json.dumps(self.last_key, sort_keys=True)
        return base64.urlsafe_b64encode(data.encode()).decode()

    @classmethod
    def decode(cls, cursor: str) -> PageCursor | None:
        """Decode cursor from base64 string. Returns None for invalid cursors."""
        try:
            data = base64.urlsafe_b64decode(cursor.encode()).decode()
            last_key = json.loads(data)
        except (ValueError, binascii.Error):
            return None
        if not isinstance(last_key, dict) or not last_key:
            return None
        return cls(last_key=last_key)


class ChargebackRepository(ABC):
    """Port for chargeback persistence.

    Contract:
    - save() assigns the identifier on the passed entity after a successful write
    - find_* methods return None / empty lists when nothing matches
    - Transaction ID uniqueness is NOT enforced here; callers check first

    Only find_by_transaction_id() and save() are needed to create a
    chargeback. The remaining methods back administrative tooling.
    """

    @abstractmethod
    async def find_by_transaction_id(self, transaction_id: str) -> Chargeback | None:
        """Look up the chargeback recorded for a transaction."""

    @abstractmethod
    async def save(self, chargeback: Chargeback) -> None:
        """Persist a new chargeback and assign its identifier.

        Raises:
            StorageError: If the write fails.
        """

    @abstractmethod
    async def find_by_id(self, chargeback_id: str) -> Chargeback | None:
        """Look up a chargeback by its identifier."""

    @abstractmethod
    async def find_by_merchant_id(self, merchant_id: str) -> list[Chargeback]:
        """All chargebacks filed against a merchant."""

    @abstractmethod
    async def find_by_status(self, status: ChargebackStatus) -> list[Chargeback]:
        """All chargebacks currently in the given status."""

    @abstractmethod
    async def update(self, chargeback: Chargeback) -> None:
        """Overwrite an existing chargeback.

        Raises:
            NotFoundError: If no chargeback with that identifier exists.
        """

    @abstractmethod
    async def delete(self, chargeback_id: str) -> None:
        """Remove a chargeback.

        Raises:
            NotFoundError: If no chargeback with that identifier exists.
        """

    @abstractmethod
    async def list(
        self, limit: int = 50, cursor: str | None = None
    ) -> tuple[list[Chargeback], str | None]:
        """Page through all chargebacks. Returns (items, next_cursor)."""
