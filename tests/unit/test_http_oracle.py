"""Unit tests for HttpPriceOracle with httpx.MockTransport."""

from datetime import UTC, datetime

import httpx
import pytest

from src.pm_common.enums import Commodity
from src.pm_common.errors import OracleUnavailableError
from src.pm_oracle.infrastructure.http_oracle import HttpPriceOracle


def _oracle(handler) -> HttpPriceOracle:
    return HttpPriceOracle(
        base_url="http://feed.test/",
        api_key="k3y",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_parses_cents_quote() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"commodity": "COFFEE", "price_cents": 247, "confidence": 95, "timestamp": 1760000000},
        )

    oracle = _oracle(handler)
    quote = await oracle.get_price(Commodity.COFFEE)
    await oracle.close()

    assert quote.price == 247
    assert quote.confidence == 95
    assert quote.timestamp == datetime.fromtimestamp(1760000000, tz=UTC)
    assert str(seen[0].url) == "http://feed.test/prices/COFFEE"
    assert seen[0].headers["Authorization"] == "Bearer k3y"


@pytest.mark.asyncio
async def test_dollar_price_rounded_half_up() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"price": "2.475", "confidence": 80, "timestamp": 1})

    quote = await _oracle(handler).get_price(Commodity.COCOA)
    assert quote.price == 248


@pytest.mark.asyncio
async def test_http_error_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    with pytest.raises(OracleUnavailableError) as exc:
        await _oracle(handler).get_price(Commodity.GOLD)
    assert exc.value.details["reason"] == "HTTP 503"


@pytest.mark.asyncio
async def test_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(OracleUnavailableError) as exc:
        await _oracle(handler).get_price(Commodity.GOLD)
    assert exc.value.details["reason"] == "timeout"


@pytest.mark.asyncio
async def test_connection_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(OracleUnavailableError):
        await _oracle(handler).get_price(Commodity.TEA)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"confidence": 90, "timestamp": 1},
        {"price_cents": "abc", "confidence": 90, "timestamp": 1},
        {"price_cents": 100, "timestamp": 1},
        [1, 2, 3],
    ],
)
async def test_malformed_body(body) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    with pytest.raises(OracleUnavailableError):
        await _oracle(handler).get_price(Commodity.TEA)


@pytest.mark.asyncio
async def test_non_json_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    with pytest.raises(OracleUnavailableError):
        await _oracle(handler).get_price(Commodity.TEA)
