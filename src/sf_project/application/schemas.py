"""Pydantic schemas for sf_project API responses.

Cursor format for projects (TEXT PK, not sequential):
  {"ts": "<created_at ISO>", "id": "<project_id>"}
  Encoded as Base64 JSON string.
"""

import base64
import json
from datetime import datetime

from pydantic import BaseModel

from src.sf_common.money import bps_to_percent_display, minor_to_display
from src.sf_project.domain.models import Project

# ---------------------------------------------------------------------------
# Cursor utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_project: Project) -> str:
    """Encode composite cursor from the last project in a page."""
    created = last_project.created_at.isoformat() if last_project.created_at else None
    payload = {"ts": created, "id": last_project.id}
    return base64.b64encode(json.dumps(payload).encode()).decode()


def cursor_decode(cursor: str | None) -> tuple[datetime | None, str | None]:
    """Decode composite cursor -> (created_at, project_id), or (None, None) on error."""
    if cursor is None:
        return None, None
    try:
        data = json.loads(base64.b64decode(cursor.encode()).decode())
        return datetime.fromisoformat(data["ts"]), data["id"]
    except Exception:
        return None, None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class ProjectItem(BaseModel):
    id: str
    title: str
    description: str | None
    location: str
    capacity_kw: int
    image_url: str | None
    status: str
    price_per_share: int
    price_per_share_display: str
    available_shares: int
    sold_shares: int            # snapshot, may be stale by purchase time
    remaining_shares: int
    funding_progress_bps: int
    expected_roi_bps: int
    expected_roi_display: str
    total_cost: int
    total_cost_display: str

    @classmethod
    def from_domain(cls, p: Project) -> "ProjectItem":
        return cls(
            id=p.id,
            title=p.title,
            description=p.description,
            location=p.location,
            capacity_kw=p.capacity_kw,
            image_url=p.image_url,
            status=p.effective_status,
            price_per_share=p.price_per_share,
            price_per_share_display=minor_to_display(p.price_per_share),
            available_shares=p.available_shares,
            sold_shares=p.sold_shares,
            remaining_shares=p.remaining_shares,
            funding_progress_bps=p.funding_progress_bps,
            expected_roi_bps=p.expected_roi_bps,
            expected_roi_display=bps_to_percent_display(p.expected_roi_bps),
            total_cost=p.total_cost,
            total_cost_display=minor_to_display(p.total_cost),
        )


class ProjectListResponse(BaseModel):
    items: list[ProjectItem]
    next_cursor: str | None
    has_more: bool
