"""AccountLedgerTransfer — AssetTransferProtocol over the accounts table.

Funds live in `accounts` (cents). A stake debits the user and credits the
MARKET_CUSTODY system account; a claim does the reverse. Each leg is an atomic
UPDATE ... RETURNING guarded by a balance check (0 rows = constraint violated)
and is mirrored by an append-only ledger entry.

Accounts are funded externally (wallet deposits / bridge); this adapter only
moves balances between existing accounts.
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.datetime_utils import Clock, utc_now
from src.pm_common.enums import LedgerEntryType
from src.pm_common.errors import (
    InsufficientFundsError,
    InvalidParametersError,
    TransferFailedError,
)
from src.pm_common.id_generator import generate_id
from src.pm_transfer.domain.models import MARKET_CUSTODY_USER_ID, Receipt

logger = logging.getLogger(__name__)

_DEBIT_SQL = text("""
    UPDATE accounts
    SET available_balance = available_balance - :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id AND available_balance >= :amount
    RETURNING available_balance
""")

_CREDIT_SQL = text("""
    UPDATE accounts
    SET available_balance = available_balance + :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id
    RETURNING available_balance
""")

_GET_BALANCE_SQL = text(
    "SELECT available_balance FROM accounts WHERE user_id = :user_id"
)

_INSERT_LEDGER_SQL = text("""
    INSERT INTO ledger_entries
        (user_id, entry_type, amount, balance_after, reference_type, reference_id)
    VALUES (:user_id, :entry_type, :amount, :balance_after, :reference_type, :reference_id)
""")


class AccountLedgerTransfer:
    def __init__(
        self, custody_user_id: str = MARKET_CUSTODY_USER_ID, clock: Clock = utc_now
    ) -> None:
        self._custody = custody_user_id
        self._clock = clock

    async def transfer_in(
        self, db: AsyncSession, user_id: str, amount: int, reference: str
    ) -> Receipt:
        _require_positive(amount)
        row = (
            await db.execute(_DEBIT_SQL, {"user_id": user_id, "amount": amount})
        ).fetchone()
        if row is None:
            available = (
                await db.execute(_GET_BALANCE_SQL, {"user_id": user_id})
            ).scalar_one_or_none()
            raise InsufficientFundsError(user_id, amount, available or 0)
        receipt_id = generate_id("rcpt_")
        await self._write_ledger(
            db, user_id, LedgerEntryType.STAKE, -amount, row.available_balance, receipt_id
        )

        custody_row = (
            await db.execute(_CREDIT_SQL, {"user_id": self._custody, "amount": amount})
        ).fetchone()
        if custody_row is None:
            raise TransferFailedError(self._custody, amount, "custody account missing")
        await self._write_ledger(
            db,
            self._custody,
            LedgerEntryType.STAKE_CUSTODY_IN,
            amount,
            custody_row.available_balance,
            receipt_id,
        )
        logger.debug("transfer_in %s: user=%s amount=%d ref=%s", receipt_id, user_id, amount, reference)
        return Receipt(
            id=receipt_id,
            user_id=user_id,
            amount=amount,
            direction="IN",
            reference=reference,
            created_at=self._clock(),
        )

    async def transfer_out(
        self, db: AsyncSession, user_id: str, amount: int, reference: str
    ) -> Receipt:
        _require_positive(amount)
        custody_row = (
            await db.execute(_DEBIT_SQL, {"user_id": self._custody, "amount": amount})
        ).fetchone()
        if custody_row is None:
            raise TransferFailedError(user_id, amount, "insufficient custody balance")
        receipt_id = generate_id("rcpt_")
        await self._write_ledger(
            db,
            self._custody,
            LedgerEntryType.CLAIM_CUSTODY_OUT,
            -amount,
            custody_row.available_balance,
            receipt_id,
        )

        row = (
            await db.execute(_CREDIT_SQL, {"user_id": user_id, "amount": amount})
        ).fetchone()
        if row is None:
            raise TransferFailedError(user_id, amount, "recipient account missing")
        await self._write_ledger(
            db, user_id, LedgerEntryType.CLAIM_PAYOUT, amount, row.available_balance, receipt_id
        )
        logger.debug("transfer_out %s: user=%s amount=%d ref=%s", receipt_id, user_id, amount, reference)
        return Receipt(
            id=receipt_id,
            user_id=user_id,
            amount=amount,
            direction="OUT",
            reference=reference,
            created_at=self._clock(),
        )

    async def _write_ledger(
        self,
        db: AsyncSession,
        user_id: str,
        entry_type: LedgerEntryType,
        amount: int,
        balance_after: int,
        receipt_id: str,
    ) -> None:
        await db.execute(
            _INSERT_LEDGER_SQL,
            {
                "user_id": user_id,
                "entry_type": entry_type.value,
                "amount": amount,
                "balance_after": balance_after,
                "reference_type": "TRANSFER",
                "reference_id": receipt_id,
            },
        )


def _require_positive(amount: int) -> None:
    # The balance guard in _DEBIT_SQL only holds for positive amounts
    if amount <= 0:
        raise InvalidParametersError("amount", "must be greater than 0")
