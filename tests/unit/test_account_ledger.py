"""Unit tests for AccountLedgerTransfer using MagicMock AsyncSession."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.pm_common.errors import (
    InsufficientFundsError,
    InvalidParametersError,
    TransferFailedError,
)
from src.pm_transfer.infrastructure.account_ledger import AccountLedgerTransfer


def _row(balance: int):
    result = MagicMock()
    result.fetchone.return_value = MagicMock(available_balance=balance)
    return result


def _no_row():
    result = MagicMock()
    result.fetchone.return_value = None
    return result


def _scalar(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


@pytest.mark.asyncio
async def test_transfer_in_debits_user_and_credits_custody() -> None:
    db = MagicMock()
    # debit, ledger, credit custody, ledger
    db.execute = AsyncMock(side_effect=[_row(900), MagicMock(), _row(100), MagicMock()])

    receipt = await AccountLedgerTransfer().transfer_in(db, "alice", 100, "stake:1")

    assert receipt.direction == "IN"
    assert receipt.amount == 100
    assert receipt.id.startswith("rcpt_")
    assert db.execute.await_count == 4
    ledger_params = [c[0][1] for c in db.execute.call_args_list if "entry_type" in c[0][1]]
    assert [p["entry_type"] for p in ledger_params] == ["STAKE", "STAKE_CUSTODY_IN"]
    assert ledger_params[0]["amount"] == -100


@pytest.mark.asyncio
async def test_transfer_in_insufficient_funds() -> None:
    db = MagicMock()
    db.execute = AsyncMock(side_effect=[_no_row(), _scalar(40)])

    with pytest.raises(InsufficientFundsError) as exc:
        await AccountLedgerTransfer().transfer_in(db, "alice", 100, "stake:1")

    assert exc.value.details == {"user_id": "alice", "required": 100, "available": 40}


@pytest.mark.asyncio
async def test_transfer_out_pays_from_custody() -> None:
    db = MagicMock()
    db.execute = AsyncMock(side_effect=[_row(1), MagicMock(), _row(149), MagicMock()])

    receipt = await AccountLedgerTransfer().transfer_out(db, "alice", 149, "claim:1")

    assert receipt.direction == "OUT"
    first_params = db.execute.call_args_list[0][0][1]
    assert first_params["user_id"] == "MARKET_CUSTODY"


@pytest.mark.asyncio
async def test_transfer_out_custody_short() -> None:
    db = MagicMock()
    db.execute = AsyncMock(return_value=_no_row())
    with pytest.raises(TransferFailedError):
        await AccountLedgerTransfer().transfer_out(db, "alice", 149, "claim:1")


@pytest.mark.asyncio
async def test_transfer_out_missing_recipient() -> None:
    db = MagicMock()
    db.execute = AsyncMock(side_effect=[_row(1), MagicMock(), _no_row()])
    with pytest.raises(TransferFailedError):
        await AccountLedgerTransfer().transfer_out(db, "ghost", 149, "claim:1")


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [0, -60])
async def test_non_positive_amounts_never_reach_the_database(amount) -> None:
    db = MagicMock()
    db.execute = AsyncMock()
    ledger = AccountLedgerTransfer()

    with pytest.raises(InvalidParametersError):
        await ledger.transfer_in(db, "alice", amount, "stake:1")
    with pytest.raises(InvalidParametersError):
        await ledger.transfer_out(db, "alice", amount, "claim:1")

    db.execute.assert_not_awaited()
