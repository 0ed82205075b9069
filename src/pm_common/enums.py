"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class Commodity(str, Enum):
    COFFEE = "COFFEE"
    COCOA = "COCOA"
    TEA = "TEA"
    GOLD = "GOLD"
    WHEAT = "WHEAT"
    MAIZE = "MAIZE"
    AVOCADO = "AVOCADO"
    MACADAMIA = "MACADAMIA"
    COTTON = "COTTON"
    CASHEW = "CASHEW"
    RUBBER = "RUBBER"


class Side(str, Enum):
    YES = "YES"
    NO = "NO"

    @property
    def opposite(self) -> "Side":
        return Side.NO if self is Side.YES else Side.YES


class MarketState(str, Enum):
    """Derived from (resolved, expiry_time, now) — not stored."""
    OPEN = "OPEN"
    EXPIRED_UNRESOLVED = "EXPIRED_UNRESOLVED"
    RESOLVED = "RESOLVED"


class MarketEventType(str, Enum):
    MARKET_CREATED = "MARKET_CREATED"
    MARKET_RESOLVED = "MARKET_RESOLVED"
    POSITION_CLAIMED = "POSITION_CLAIMED"


class LedgerEntryType(str, Enum):
    # Stake (user + custody paired)
    STAKE = "STAKE"
    STAKE_CUSTODY_IN = "STAKE_CUSTODY_IN"
    # Claim (user + custody paired)
    CLAIM_PAYOUT = "CLAIM_PAYOUT"
    CLAIM_CUSTODY_OUT = "CLAIM_CUSTODY_OUT"
