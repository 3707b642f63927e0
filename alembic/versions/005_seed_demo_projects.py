"""005: seed demo projects for local development

Revision ID: 005
Revises: 004
Create Date: 2026-10-01
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        INSERT INTO projects
            (id, title, description, location, capacity_kw,
             price_per_share, available_shares, sold_shares, expected_roi_bps, status)
        VALUES
            ('PRJ-PUNE-ROOF-01', 'Pune Rooftop Cluster',
             'Rooftop arrays on three residential societies', 'Pune, Maharashtra', 250,
             100000, 100, 0, 1200, 'active'),
            ('PRJ-JAIPUR-FARM-01', 'Jaipur Solar Farm',
             'Ground-mounted farm feeding the state grid', 'Jaipur, Rajasthan', 1500,
             500000, 400, 0, 1450, 'active'),
            ('PRJ-KOCHI-SCHOOL-01', 'Kochi School Campus',
             'Campus installation with battery backup', 'Kochi, Kerala', 120,
             50000, 80, 0, 1000, 'inactive')
        ON CONFLICT (id) DO NOTHING;
    """)


def downgrade() -> None:
    op.execute("""
        DELETE FROM projects
        WHERE id IN ('PRJ-PUNE-ROOF-01', 'PRJ-JAIPUR-FARM-01', 'PRJ-KOCHI-SCHOOL-01');
    """)
