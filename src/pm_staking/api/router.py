"""pm_staking REST endpoints (mounted under /markets).

POST /markets/{market_id}/stakes     — stake on YES or NO
GET  /markets/{market_id}/odds       — implied odds from the pools
GET  /markets/{market_id}/preview    — projected payout for a hypothetical stake
GET  /markets/{market_id}/position   — caller's position
GET  /markets/{market_id}/stats      — stake volume and participants
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.database import get_db_session
from src.pm_common.enums import Side
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_current_user_id
from src.pm_staking.application.schemas import (
    MarketStatsResponse,
    OddsResponse,
    PayoutPreviewResponse,
    PositionResponse,
    StakeRequest,
    StakeResponse,
)
from src.pm_staking.application.service import StakingService

router = APIRouter(prefix="/markets", tags=["staking"])

_service = StakingService()


def _respond(request: Request, data: object) -> ApiResponse:
    resp = success_response(data)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/{market_id}/stakes")
async def stake(
    market_id: int,
    body: StakeRequest,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.stake(db, market_id, user_id, body.side, body.amount)
    return _respond(
        request, StakeResponse.from_result(market_id, body.side, result).model_dump()
    )


@router.get("/{market_id}/odds")
async def get_odds(
    market_id: int,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    odds = await _service.get_odds(db, market_id)
    return _respond(request, OddsResponse.from_domain(market_id, odds).model_dump())


@router.get("/{market_id}/preview")
async def preview_payout(
    market_id: int,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    side: Side = Query(...),
    amount: int = Query(..., description="Hypothetical stake in cents"),
) -> ApiResponse:
    breakdown = await _service.calculate_payout_preview(db, market_id, side, amount)
    return _respond(
        request,
        PayoutPreviewResponse.from_breakdown(market_id, side, amount, breakdown).model_dump(),
    )


@router.get("/{market_id}/position")
async def get_position(
    market_id: int,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    position = await _service.get_position(db, market_id, user_id)
    return _respond(request, PositionResponse.from_domain(position).model_dump())


@router.get("/{market_id}/stats")
async def get_market_stats(
    market_id: int,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    stats = await _service.get_market_stats(db, market_id)
    return _respond(request, MarketStatsResponse.from_domain(stats).model_dump())
