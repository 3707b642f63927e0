"""sf_investment REST endpoints.

POST /investments                      - purchase shares (JWT required)
GET  /investments                      - caller's portfolio (JWT required)
GET  /projects/{project_id}/returns    - returns calculator (public)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_common.database import get_db_session
from src.sf_common.response import ApiResponse, success_response
from src.sf_gateway.auth.dependencies import get_current_account_id
from src.sf_investment.application.schemas import PurchaseRequest
from src.sf_investment.application.service import InvestmentService

router = APIRouter(tags=["investments"])

_service: InvestmentService | None = None


def get_investment_service() -> InvestmentService:
    global _service  # noqa: PLW0603
    if _service is None:
        _service = InvestmentService()
    return _service


@router.post("/investments", status_code=201)
async def purchase(
    body: PurchaseRequest,
    request: Request,
    account_id: Annotated[str, Depends(get_current_account_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[InvestmentService, Depends(get_investment_service)],
) -> JSONResponse:
    result = await service.purchase(db, account_id, body.project_id, body.shares)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(status_code=201, content=resp.model_dump())


@router.get("/investments")
async def list_investments(
    request: Request,
    account_id: Annotated[str, Depends(get_current_account_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[InvestmentService, Depends(get_investment_service)],
) -> ApiResponse:
    result = await service.list_investments(db, account_id)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/projects/{project_id}/returns")
async def estimate_returns(
    project_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[InvestmentService, Depends(get_investment_service)],
    shares: int = Query(1),
    years: int = Query(5),
) -> ApiResponse:
    result = await service.estimate_returns(db, project_id, shares, years)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
