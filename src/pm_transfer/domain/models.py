"""Asset transfer collaborator — receipt model and interface.

The core never moves funds itself: stake pulls the stake asset into market
custody through `transfer_in`, claim pays winners through `transfer_out`.
Both run inside the caller's transaction, so a failed transfer rolls back any
pool/position mutation staged alongside it.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

MARKET_CUSTODY_USER_ID = "MARKET_CUSTODY"
PLATFORM_FEE_USER_ID = "PLATFORM_FEE"


@dataclass(frozen=True)
class Receipt:
    id: str
    user_id: str
    amount: int
    direction: Literal["IN", "OUT"]
    reference: str
    created_at: datetime


class AssetTransferProtocol(Protocol):
    async def transfer_in(
        self, db: AsyncSession, user_id: str, amount: int, reference: str
    ) -> Receipt:
        """Move `amount` from the user into custody. Raises InsufficientFundsError."""
        ...

    async def transfer_out(
        self, db: AsyncSession, user_id: str, amount: int, reference: str
    ) -> Receipt:
        """Move `amount` from custody to the user. Raises TransferFailedError."""
        ...
