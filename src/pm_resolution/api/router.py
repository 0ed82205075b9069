"""pm_resolution REST endpoints.

POST /markets/{market_id}/resolve   — resolve one expired market (any authenticated caller)
POST /oracle/resolve-expired        — scheduler: resolve every expired market
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.database import get_db_session
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_current_user_id, require_scheduler
from src.pm_resolution.application.batch import ResolutionBatchRunner
from src.pm_resolution.application.schemas import BatchResolveResponse, ResolveResponse
from src.pm_resolution.application.service import ResolutionService

router = APIRouter(tags=["resolution"])

resolution_service = ResolutionService()
_batch_runner = ResolutionBatchRunner(resolution_service)


@router.post("/markets/{market_id}/resolve")
async def resolve_market(
    market_id: int,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await resolution_service.resolve(db, market_id)
    resp = success_response(ResolveResponse.from_domain(result).model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/oracle/resolve-expired", dependencies=[Depends(require_scheduler)])
async def resolve_expired(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    limit: int | None = Query(None, ge=1, le=500),
) -> ApiResponse:
    summary = await _batch_runner.resolve_expired(db, limit)
    resp = success_response(BatchResolveResponse.from_domain(summary).model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
