"""SQLAlchemy ORM model for the investments table.

Used for type reference only - persistence.py uses raw text() SQL.
Alembic migration 004_create_investments.py is the authoritative DDL source.
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.sf_common.database import Base


class InvestmentORM(Base):
    __tablename__ = "investments"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    project_id: Mapped[str] = mapped_column(String(64), nullable=False)
    buyer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    reservation_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    shares_purchased: Mapped[int] = mapped_column(Integer, nullable=False)
    amount_invested: Mapped[int] = mapped_column(BigInteger, nullable=False)
    payment_status: Mapped[str] = mapped_column(String(20), nullable=False, default="completed")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    # NOTE: No updated_at - investments are immutable once written
