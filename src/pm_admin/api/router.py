"""Admin REST API."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_admin.application.service import AdminService
from src.pm_common.database import get_db_session
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import require_scheduler

router = APIRouter(prefix="/admin", tags=["admin"])
_service = AdminService()


@router.get("/invariants", dependencies=[Depends(require_scheduler)])
async def verify_invariants(
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.verify_all_invariants(db)
    return success_response(result)
