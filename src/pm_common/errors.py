"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  2xxx: Asset transfer
  3xxx: Market / resolution
  4xxx: Stake
  5xxx: Position / claim
  6xxx: Oracle
  9xxx: System

Every error carries a `details` dict (market_id, field, ...) so the UI layer
can render an actionable message without parsing `message`.
"""

from typing import Any


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details: dict[str, Any] = details or {}
        super().__init__(message)

    @property
    def kind(self) -> str:
        return type(self).__name__.removesuffix("Error")


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired credentials", 401)


class SchedulerDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Scheduler endpoint disabled", 403)


class InvalidSchedulerSecretError(AppError):
    def __init__(self) -> None:
        super().__init__(1005, "Invalid scheduler secret", 401)


# --- 2xxx: Asset transfer ---

class InsufficientFundsError(AppError):
    def __init__(self, user_id: str, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient funds: required {required}, available {available}",
            422,
            {"user_id": user_id, "required": required, "available": available},
        )


class TransferFailedError(AppError):
    def __init__(self, user_id: str, amount: int, reason: str) -> None:
        super().__init__(
            2003,
            f"Transfer of {amount} to {user_id} failed: {reason}",
            502,
            {"user_id": user_id, "amount": amount},
        )


# --- 3xxx: Market ---

class MarketNotFoundError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(
            3001, f"Market not found: {market_id}", 404, {"market_id": market_id}
        )


class MarketClosedError(AppError):
    def __init__(self, market_id: int, reason: str) -> None:
        super().__init__(
            3002,
            f"Market {market_id} is closed for staking: {reason}",
            422,
            {"market_id": market_id, "reason": reason},
        )


class InvalidParametersError(AppError):
    def __init__(self, field: str, detail: str) -> None:
        super().__init__(
            3003, f"Invalid {field}: {detail}", 422, {"field": field}
        )


class AlreadyResolvedError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(
            3004, f"Market already resolved: {market_id}", 409, {"market_id": market_id}
        )


class MarketNotExpiredError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(
            3005,
            f"Market has not reached expiry: {market_id}",
            422,
            {"market_id": market_id},
        )


class NotResolvedError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(
            3006, f"Market not resolved yet: {market_id}", 422, {"market_id": market_id}
        )


# --- 4xxx: Stake ---

class BelowMinimumStakeError(AppError):
    def __init__(self, amount: int, minimum: int) -> None:
        super().__init__(
            4001,
            f"Stake {amount} is below the minimum of {minimum}",
            422,
            {"field": "amount", "amount": amount, "minimum": minimum},
        )


# --- 5xxx: Position / claim ---

class NoWinningPositionError(AppError):
    def __init__(self, market_id: int, user_id: str) -> None:
        super().__init__(
            5001,
            f"No winning position for {user_id} in market {market_id}",
            422,
            {"market_id": market_id, "user_id": user_id},
        )


class AlreadyClaimedError(AppError):
    def __init__(self, market_id: int, user_id: str) -> None:
        super().__init__(
            5002,
            f"Position already claimed for {user_id} in market {market_id}",
            409,
            {"market_id": market_id, "user_id": user_id},
        )


# --- 6xxx: Oracle ---

class OracleUnavailableError(AppError):
    def __init__(self, commodity: str, reason: str) -> None:
        super().__init__(
            6001,
            f"Oracle unavailable for {commodity}: {reason}",
            503,
            {"commodity": commodity, "reason": reason},
        )


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
