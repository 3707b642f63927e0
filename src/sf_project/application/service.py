"""ProjectApplicationService - read-only composition over ProjectRepository."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_common.errors import ProjectNotFoundError
from src.sf_project.application.schemas import (
    ProjectItem,
    ProjectListResponse,
    cursor_decode,
    cursor_encode,
)
from src.sf_project.domain.repository import ProjectRepositoryProtocol
from src.sf_project.infrastructure.persistence import ProjectRepository


class ProjectApplicationService:
    def __init__(self, repo: ProjectRepositoryProtocol | None = None) -> None:
        self._repo: ProjectRepositoryProtocol = repo or ProjectRepository()

    async def list_projects(
        self,
        db: AsyncSession,
        status: str | None,
        location: str | None,
        min_roi_bps: int | None,
        max_price: int | None,
        cursor: str | None,
        limit: int,
    ) -> ProjectListResponse:
        # status=None → default active; status='all' → no filter
        sql_status = None if status == "all" else (status or "active")
        cursor_ts, cursor_id = cursor_decode(cursor)

        # Fetch limit+1 to detect has_more without COUNT(*)
        projects = await self._repo.list_projects(
            db, sql_status, location, min_roi_bps, max_price, cursor_ts, cursor_id, limit + 1
        )
        has_more = len(projects) > limit
        page = projects[:limit]

        items = [ProjectItem.from_domain(p) for p in page]
        next_cursor = cursor_encode(page[-1]) if has_more and page else None
        return ProjectListResponse(items=items, next_cursor=next_cursor, has_more=has_more)

    async def get_project(self, db: AsyncSession, project_id: str) -> ProjectItem:
        project = await self._repo.get_project_by_id(db, project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return ProjectItem.from_domain(project)
