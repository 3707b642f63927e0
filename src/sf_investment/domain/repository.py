"""Repository Protocol - dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_investment.domain.models import Investment, PortfolioEntry


class InvestmentRepositoryProtocol(Protocol):
    async def insert_investment(self, db: AsyncSession, investment: Investment) -> None: ...

    async def get_by_reservation_id(
        self, db: AsyncSession, reservation_id: str
    ) -> Investment | None: ...

    async def list_by_buyer(
        self, db: AsyncSession, buyer_id: str
    ) -> list[PortfolioEntry]: ...
