"""002: create projects table

Revision ID: 002
Revises: 001
Create Date: 2026-10-01
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE projects (
            id                  VARCHAR(64)     PRIMARY KEY,
            title               VARCHAR(500)    NOT NULL,
            description         TEXT,
            location            VARCHAR(200)    NOT NULL,
            capacity_kw         INT             NOT NULL,
            image_url           TEXT,
            price_per_share     BIGINT          NOT NULL,
            available_shares    INT             NOT NULL,
            sold_shares         INT             NOT NULL DEFAULT 0,
            expected_roi_bps    INT             NOT NULL DEFAULT 0,
            status              VARCHAR(20)     NOT NULL DEFAULT 'active',
            version             BIGINT          NOT NULL DEFAULT 0,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_projects_price_gt_0           CHECK (price_per_share > 0),
            CONSTRAINT ck_projects_available_gt_0       CHECK (available_shares > 0),
            CONSTRAINT ck_projects_sold_in_pool         CHECK (sold_shares >= 0 AND sold_shares <= available_shares),
            CONSTRAINT ck_projects_roi_gte_0            CHECK (expected_roi_bps >= 0),
            CONSTRAINT ck_projects_status CHECK (status IN ('active', 'inactive', 'funded'))
        );
    """)
    op.execute("""
        CREATE INDEX idx_projects_status_created
            ON projects (status, created_at DESC, id DESC);
    """)
    op.execute("""
        CREATE TRIGGER trg_projects_updated_at
            BEFORE UPDATE ON projects
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("COMMENT ON TABLE projects IS 'Solar projects - money in paise, ROI in basis points';")
    op.execute("COMMENT ON COLUMN projects.sold_shares IS 'Written only by ShareLedger (CAS on version)';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS projects CASCADE;")
