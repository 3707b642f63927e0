# src/sf_admin/api/router.py
"""Admin reconciliation REST API (ADMIN_USER_IDS only)."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_admin.application.service import ReconciliationService
from src.sf_common.database import get_db_session
from src.sf_common.response import ApiResponse, success_response
from src.sf_gateway.auth.dependencies import require_admin

router = APIRouter(prefix="/admin/reconciliation", tags=["admin"])
_service = ReconciliationService()


@router.get("/reservations")
async def list_unrecorded_reservations(
    request: Request,
    admin_id: Annotated[str, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    limit: int = Query(100, ge=1, le=1000),
) -> ApiResponse:
    result = await _service.list_unrecorded_reservations(db, limit)
    resp = success_response({"items": result})
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/invariants")
async def verify_share_invariants(
    request: Request,
    admin_id: Annotated[str, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.verify_share_invariants(db)
    resp = success_response(result)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/reservations/{reservation_id}/repair")
async def repair_reservation(
    reservation_id: str,
    request: Request,
    admin_id: Annotated[str, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.repair_reservation(db, reservation_id)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
