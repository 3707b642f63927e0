"""004: create investments table

Revision ID: 004
Revises: 003
Create Date: 2026-10-01
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE investments (
            id                  VARCHAR(64)     PRIMARY KEY,
            project_id          VARCHAR(64)     NOT NULL REFERENCES projects(id),
            buyer_id            VARCHAR(64)     NOT NULL,
            reservation_id      VARCHAR(64)     NOT NULL REFERENCES share_reservations(id),
            shares_purchased    INT             NOT NULL,
            amount_invested     BIGINT          NOT NULL,
            payment_status      VARCHAR(20)     NOT NULL DEFAULT 'completed',
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_investments_reservation       UNIQUE (reservation_id),
            CONSTRAINT ck_investments_shares_gt_0       CHECK (shares_purchased > 0),
            CONSTRAINT ck_investments_amount_gt_0       CHECK (amount_invested > 0),
            CONSTRAINT ck_investments_payment_status CHECK (
                payment_status IN ('completed', 'pending', 'failed')
            )
        );
    """)
    op.execute("""
        CREATE INDEX idx_investments_buyer
            ON investments (buyer_id, created_at DESC, id DESC);
    """)
    op.execute("""
        CREATE TRIGGER trg_investments_append_only
            BEFORE UPDATE OR DELETE ON investments
            FOR EACH ROW EXECUTE FUNCTION fn_reject_mutation();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS investments CASCADE;")
