"""Repository Protocol - dependency inversion for testability.

Unit tests inject a mock or an in-memory fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_ledger.domain.models import ShareReservation, ShareState


class ShareLedgerRepositoryProtocol(Protocol):
    async def get_share_state(
        self, db: AsyncSession, project_id: str
    ) -> ShareState | None: ...

    async def compare_and_set_sold(
        self,
        db: AsyncSession,
        project_id: str,
        expected_version: int,
        new_sold_shares: int,
    ) -> ShareState | None:
        """Write new_sold_shares iff the row is still at expected_version.

        Returns the post-update state, or None when the version moved
        (a concurrent reservation won) or the pool bound would be exceeded.
        """
        ...

    async def insert_reservation(
        self, db: AsyncSession, reservation: ShareReservation
    ) -> None: ...

    async def get_reservation(
        self, db: AsyncSession, reservation_id: str
    ) -> ShareReservation | None: ...

    async def list_unrecorded_reservations(
        self, db: AsyncSession, limit: int
    ) -> list[ShareReservation]: ...
