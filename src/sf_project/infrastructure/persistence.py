"""ProjectRepository - concrete implementation of ProjectRepositoryProtocol.

Read-only queries. sold_shares returned here is a display snapshot; only
ShareLedger reads it authoritatively.
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_project.domain.models import Project

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_PROJECT_COLUMNS = """
    id, title, description, location, capacity_kw, image_url,
    price_per_share, available_shares, sold_shares, expected_roi_bps,
    status, version, created_at, updated_at
"""

_GET_PROJECT_SQL = text(f"""
    SELECT {_PROJECT_COLUMNS}
    FROM projects
    WHERE id = :project_id
""")

_LIST_PROJECTS_SQL = text(f"""
    SELECT {_PROJECT_COLUMNS}
    FROM projects
    WHERE
        (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
        AND (CAST(:location AS TEXT) IS NULL
             OR location ILIKE '%' || CAST(:location AS TEXT) || '%')
        AND (CAST(:min_roi_bps AS INTEGER) IS NULL
             OR expected_roi_bps >= CAST(:min_roi_bps AS INTEGER))
        AND (CAST(:max_price AS BIGINT) IS NULL
             OR price_per_share <= CAST(:max_price AS BIGINT))
        AND (
            CAST(:cursor_ts AS TIMESTAMPTZ) IS NULL
            OR created_at < CAST(:cursor_ts AS TIMESTAMPTZ)
            OR (
                created_at = CAST(:cursor_ts AS TIMESTAMPTZ)
                AND id < CAST(:cursor_id AS TEXT)
            )
        )
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")


def row_to_project(row: object) -> Project:
    return Project(
        id=row.id,  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        location=row.location,  # type: ignore[attr-defined]
        capacity_kw=row.capacity_kw,  # type: ignore[attr-defined]
        image_url=row.image_url,  # type: ignore[attr-defined]
        price_per_share=row.price_per_share,  # type: ignore[attr-defined]
        available_shares=row.available_shares,  # type: ignore[attr-defined]
        sold_shares=row.sold_shares,  # type: ignore[attr-defined]
        expected_roi_bps=row.expected_roi_bps,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class ProjectRepository:
    """Concrete repository - read-only SQL queries."""

    async def get_project_by_id(
        self, db: AsyncSession, project_id: str
    ) -> Project | None:
        result = await db.execute(_GET_PROJECT_SQL, {"project_id": project_id})
        row = result.fetchone()
        return row_to_project(row) if row else None

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
    ) -> list[Project]:
        result = await db.execute(
            _LIST_PROJECTS_SQL,
            {
                "status": status,
                "location": location,
                "min_roi_bps": min_roi_bps,
                "max_price": max_price,
                "cursor_ts": cursor_ts,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        return [row_to_project(row) for row in result.fetchall()]
