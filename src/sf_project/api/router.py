"""sf_project REST endpoints.

GET /projects                 - list with cursor pagination and filters
GET /projects/{project_id}    - detail with share snapshot
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_common.database import get_db_session
from src.sf_common.response import ApiResponse, success_response
from src.sf_project.application.service import ProjectApplicationService

router = APIRouter(prefix="/projects", tags=["projects"])

_service = ProjectApplicationService()


@router.get("")
async def list_projects(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status: str | None = Query(
        None, description="active | inactive | funded. Default: active. Use 'all' for no filter."
    ),
    location: str | None = Query(None, max_length=200),
    min_roi_bps: int | None = Query(None, ge=0),
    max_price: int | None = Query(None, gt=0, description="Max price per share, paise"),
    limit: int = Query(20, ge=1, le=100),
    cursor: str | None = Query(None),
) -> ApiResponse:
    result = await _service.list_projects(
        db, status, location, min_roi_bps, max_price, cursor, limit
    )
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{project_id}")
async def get_project(
    project_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_project(db, project_id)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
