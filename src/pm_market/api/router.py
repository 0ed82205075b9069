"""pm_market REST endpoints.

POST /markets                 — create a market
GET  /markets                 — list with cursor pagination
GET  /markets/expired         — expired, unresolved markets (resolution worklist)
GET  /markets/{market_id}     — full detail
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.database import get_db_session
from src.pm_common.enums import Commodity, MarketState
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_current_user_id
from src.pm_market.application.schemas import CreateMarketRequest, MarketDetail
from src.pm_market.application.service import MarketApplicationService

router = APIRouter(prefix="/markets", tags=["markets"])

_service = MarketApplicationService()


def _respond(request: Request, data: object) -> ApiResponse:
    resp = success_response(data)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("")
async def create_market(
    body: CreateMarketRequest,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    market = await _service.create_market(
        db, body.commodity, body.threshold_price, body.expiry_time, user_id
    )
    return _respond(request, MarketDetail.from_domain(market, _service.now()).model_dump())


@router.get("")
async def list_markets(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    commodity: Commodity | None = Query(None),
    state: MarketState | None = Query(None, description="OPEN, EXPIRED_UNRESOLVED or RESOLVED"),
    limit: int = Query(20, ge=1, le=100),
    cursor: str | None = Query(None),
) -> ApiResponse:
    result = await _service.list_markets(db, commodity, state, cursor, limit)
    return _respond(request, result.model_dump())


@router.get("/expired")
async def list_expired_markets(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    limit: int = Query(100, ge=1, le=500),
) -> ApiResponse:
    markets = await _service.list_expired_unresolved(db, limit)
    now = _service.now()
    return _respond(
        request, {"items": [MarketDetail.from_domain(m, now).model_dump() for m in markets]}
    )


@router.get("/{market_id}")
async def get_market(
    market_id: int,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_market(db, market_id)
    return _respond(request, result.model_dump())
