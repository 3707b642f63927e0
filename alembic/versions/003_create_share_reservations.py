"""003: create share_reservations journal

Revision ID: 003
Revises: 002
Create Date: 2026-10-01
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE share_reservations (
            id                  VARCHAR(64)     PRIMARY KEY,
            project_id          VARCHAR(64)     NOT NULL REFERENCES projects(id),
            buyer_id            VARCHAR(64),
            shares              INT             NOT NULL,
            price_per_share     BIGINT          NOT NULL,
            sold_shares_after   INT             NOT NULL,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_share_reservations_shares_gt_0 CHECK (shares > 0),
            CONSTRAINT ck_share_reservations_price_gt_0  CHECK (price_per_share > 0)
        );
    """)
    op.execute("""
        CREATE INDEX idx_share_reservations_project
            ON share_reservations (project_id, created_at);
    """)
    op.execute("""
        CREATE TRIGGER trg_share_reservations_append_only
            BEFORE UPDATE OR DELETE ON share_reservations
            FOR EACH ROW EXECUTE FUNCTION fn_reject_mutation();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS share_reservations CASCADE;")
