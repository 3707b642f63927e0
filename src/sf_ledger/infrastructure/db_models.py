"""SQLAlchemy ORM model for the share_reservations journal.

Used for type reference only - persistence.py uses raw text() SQL.
Alembic migration 003_create_share_reservations.py is the authoritative DDL source.
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.sf_common.database import Base


class ShareReservationORM(Base):
    __tablename__ = "share_reservations"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    project_id: Mapped[str] = mapped_column(String(64), nullable=False)
    buyer_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    shares: Mapped[int] = mapped_column(Integer, nullable=False)
    price_per_share: Mapped[int] = mapped_column(BigInteger, nullable=False)
    sold_shares_after: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    # NOTE: No updated_at - share_reservations is append-only
