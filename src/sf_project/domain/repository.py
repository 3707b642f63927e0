"""Repository Protocol - dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_project.domain.models import Project


class ProjectRepositoryProtocol(Protocol):
    async def get_project_by_id(
        self, db: AsyncSession, project_id: str
    ) -> Project | None: ...

    async def list_projects(
        self,
        db: AsyncSession,
        status: str | None,
        location: str | None,
        min_roi_bps: int | None,
        max_price: int | None,
        cursor_ts: datetime | None,
        cursor_id: str | None,
        limit: int,
    ) -> list[Project]: ...
