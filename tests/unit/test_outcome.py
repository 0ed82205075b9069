"""Unit tests for the threshold outcome rule and quote validation."""

from datetime import UTC, datetime, timedelta

import pytest

from src.pm_common.enums import Commodity
from src.pm_common.errors import OracleUnavailableError
from src.pm_oracle.domain.models import MAX_CLOCK_SKEW, PriceQuote, validate_quote
from src.pm_resolution.domain.outcome import determine_outcome

NOW = datetime(2026, 3, 1, tzinfo=UTC)


def _quote(price: int = 310, confidence: int = 90, age: int = 0) -> PriceQuote:
    return PriceQuote(
        commodity=Commodity.COFFEE,
        price=price,
        confidence=confidence,
        timestamp=NOW - timedelta(seconds=age),
    )


class TestDetermineOutcome:
    def test_above(self) -> None:
        assert determine_outcome(310, 300) is True

    def test_below(self) -> None:
        assert determine_outcome(299, 300) is False

    def test_tie_resolves_yes(self) -> None:
        assert determine_outcome(300, 300) is True


class TestValidateQuote:
    def test_accepts_fresh_confident_quote(self) -> None:
        q = _quote()
        assert validate_quote(q, NOW, 3600, 50) is q

    @pytest.mark.parametrize("price", [0, -5])
    def test_rejects_non_positive_price(self, price: int) -> None:
        with pytest.raises(OracleUnavailableError):
            validate_quote(_quote(price=price), NOW, 3600, 50)

    def test_rejects_low_confidence(self) -> None:
        with pytest.raises(OracleUnavailableError) as exc:
            validate_quote(_quote(confidence=40), NOW, 3600, 50)
        assert exc.value.details["commodity"] == "COFFEE"

    def test_rejects_confidence_out_of_range(self) -> None:
        with pytest.raises(OracleUnavailableError):
            validate_quote(_quote(confidence=101), NOW, 3600, 50)

    def test_rejects_stale_quote(self) -> None:
        with pytest.raises(OracleUnavailableError):
            validate_quote(_quote(age=3601), NOW, 3600, 50)

    def test_accepts_quote_at_max_age(self) -> None:
        validate_quote(_quote(age=3600), NOW, 3600, 50)

    def test_rejects_quote_dated_in_the_future(self) -> None:
        with pytest.raises(OracleUnavailableError) as exc:
            validate_quote(_quote(age=-10 * 365 * 86400), NOW, 3600, 50)
        assert "future" in exc.value.details["reason"]

    def test_tolerates_small_clock_skew(self) -> None:
        skewed = _quote(age=-int(MAX_CLOCK_SKEW.total_seconds()))
        assert validate_quote(skewed, NOW, 3600, 50) is skewed
