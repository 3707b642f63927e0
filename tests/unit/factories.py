"""In-memory share store and builders for unit tests.

Every repository call yields to the event loop once, so concurrent
reserve() calls genuinely interleave between the read and the CAS write,
the same window that exists against PostgreSQL.
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError

from src.sf_investment.domain.models import Investment, PortfolioEntry
from src.sf_ledger.domain.models import ShareReservation, ShareState
from src.sf_project.domain.models import Project


def make_project(
    project_id: str = "PRJ-1",
    available: int = 100,
    sold: int = 0,
    price: int = 1000,
    roi_bps: int = 1200,
    status: str = "active",
    version: int = 0,
) -> Project:
    return Project(
        id=project_id,
        title=f"Solar {project_id}",
        location="Pune",
        capacity_kw=100,
        price_per_share=price,
        available_shares=available,
        sold_shares=sold,
        expected_roi_bps=roi_bps,
        status=status,
        version=version,
        created_at=datetime.now(UTC),
        updated_at=datetime.now(UTC),
    )


class InMemoryShareStore:
    """Stands in for the projects / share_reservations / investments tables.

    Implements the ledger, project and investment repository protocols.
    """

    def __init__(self) -> None:
        self.projects: dict[str, Project] = {}
        self.reservations: list[ShareReservation] = []
        self.investments: list[Investment] = []
        self.cas_conflicts = 0
        self.fail_investment_insert: Exception | None = None

    def add(self, project: Project) -> Project:
        self.projects[project.id] = project
        return project

    def sold(self, project_id: str) -> int:
        return self.projects[project_id].sold_shares

    # -- ShareLedgerRepositoryProtocol ---------------------------------

    async def get_share_state(self, db: object, project_id: str) -> ShareState | None:
        await asyncio.sleep(0)
        p = self.projects.get(project_id)
        if p is None:
            return None
        return ShareState(
            project_id=p.id,
            sold_shares=p.sold_shares,
            available_shares=p.available_shares,
            price_per_share=p.price_per_share,
            version=p.version,
        )

    async def compare_and_set_sold(
        self, db: object, project_id: str, expected_version: int, new_sold_shares: int
    ) -> ShareState | None:
        await asyncio.sleep(0)
        p = self.projects[project_id]
        if p.version != expected_version or new_sold_shares > p.available_shares:
            self.cas_conflicts += 1
            return None
        status = p.status
        if status == "active" and new_sold_shares >= p.available_shares:
            status = "funded"
        p = replace(p, sold_shares=new_sold_shares, version=p.version + 1, status=status)
        self.projects[project_id] = p
        return ShareState(p.id, p.sold_shares, p.available_shares, p.price_per_share, p.version)

    async def insert_reservation(self, db: object, reservation: ShareReservation) -> None:
        self.reservations.append(reservation)

    async def get_reservation(self, db: object, reservation_id: str) -> ShareReservation | None:
        return next((r for r in self.reservations if r.id == reservation_id), None)

    async def list_unrecorded_reservations(self, db: object, limit: int) -> list[ShareReservation]:
        recorded = {i.reservation_id for i in self.investments}
        return [r for r in self.reservations if r.id not in recorded][:limit]

    # -- ProjectRepositoryProtocol -------------------------------------

    async def get_project_by_id(self, db: object, project_id: str) -> Project | None:
        return self.projects.get(project_id)

    # -- InvestmentRepositoryProtocol ----------------------------------

    async def insert_investment(self, db: object, investment: Investment) -> None:
        await asyncio.sleep(0)
        if self.fail_investment_insert is not None:
            raise self.fail_investment_insert
        if any(i.reservation_id == investment.reservation_id for i in self.investments):
            raise IntegrityError(
                "INSERT INTO investments", {}, Exception("uq_investments_reservation")
            )
        self.investments.append(investment)

    async def get_by_reservation_id(self, db: object, reservation_id: str) -> Investment | None:
        return next((i for i in self.investments if i.reservation_id == reservation_id), None)

    async def list_by_buyer(self, db: object, buyer_id: str) -> list[PortfolioEntry]:
        return [
            PortfolioEntry(
                investment=i,
                project_title=self.projects[i.project_id].title,
                expected_roi_bps=self.projects[i.project_id].expected_roi_bps,
            )
            for i in reversed(self.investments)
            if i.buyer_id == buyer_id
        ]


def session_factory_for(session: object):
    """Build a session_factory whose sessions are all `session`."""

    @asynccontextmanager
    async def factory():
        yield session

    return factory


