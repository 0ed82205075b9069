"""Unit tests for the AppError hierarchy."""

import pytest

from src.pm_common.errors import (
    AlreadyClaimedError,
    AlreadyResolvedError,
    AppError,
    BelowMinimumStakeError,
    InsufficientFundsError,
    InvalidParametersError,
    InvalidSchedulerSecretError,
    MarketClosedError,
    MarketNotExpiredError,
    MarketNotFoundError,
    NoWinningPositionError,
    NotResolvedError,
    OracleUnavailableError,
    SchedulerDisabledError,
    TransferFailedError,
)


@pytest.mark.parametrize(
    ("error", "code", "status"),
    [
        (SchedulerDisabledError(), 1004, 403),
        (InvalidSchedulerSecretError(), 1005, 401),
        (InsufficientFundsError("u1", 100, 10), 2001, 422),
        (TransferFailedError("u1", 100, "down"), 2003, 502),
        (MarketNotFoundError(7), 3001, 404),
        (MarketClosedError(7, "expired"), 3002, 422),
        (InvalidParametersError("threshold_price", "must be greater than 0"), 3003, 422),
        (AlreadyResolvedError(7), 3004, 409),
        (MarketNotExpiredError(7), 3005, 422),
        (NotResolvedError(7), 3006, 422),
        (BelowMinimumStakeError(0, 1), 4001, 422),
        (NoWinningPositionError(7, "u1"), 5001, 422),
        (AlreadyClaimedError(7, "u1"), 5002, 409),
        (OracleUnavailableError("COFFEE", "timeout"), 6001, 503),
    ],
)
def test_codes_and_status(error: AppError, code: int, status: int) -> None:
    assert isinstance(error, AppError)
    assert error.code == code
    assert error.http_status == status


def test_market_errors_carry_market_id() -> None:
    for err in (MarketNotFoundError(42), AlreadyResolvedError(42), NotResolvedError(42)):
        assert err.details["market_id"] == 42


def test_invalid_parameters_names_field() -> None:
    err = InvalidParametersError("expiry_time", "must be in the future")
    assert err.details == {"field": "expiry_time"}
    assert "expiry_time" in err.message


def test_kind_strips_suffix() -> None:
    assert MarketClosedError(1, "resolved").kind == "MarketClosed"
    assert AlreadyClaimedError(1, "u").kind == "AlreadyClaimed"
