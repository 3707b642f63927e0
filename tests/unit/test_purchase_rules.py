"""Tests for sf_investment.domain - purchase rules, state tracker, returns."""

import pytest

from src.sf_common.enums import PurchaseState
from src.sf_common.errors import ProjectNotActiveError, ValidationError
from src.sf_investment.domain.models import PurchaseAttempt
from src.sf_investment.domain.returns import project_returns
from src.sf_investment.domain.rules import (
    check_project_open,
    check_purchase_amount,
    check_share_count,
)
from tests.unit.factories import make_project


class TestCheckShareCount:
    @pytest.mark.parametrize("shares", [0, -1, -100])
    def test_non_positive_rejected(self, shares: int) -> None:
        with pytest.raises(ValidationError):
            check_share_count(shares)

    def test_one_ok(self) -> None:
        check_share_count(1)

    def test_limit(self) -> None:
        check_share_count(10, max_shares=10)
        with pytest.raises(ValidationError, match="limit"):
            check_share_count(11, max_shares=10)

    def test_explicit_zero_limit_is_not_replaced_by_default(self) -> None:
        with pytest.raises(ValidationError, match="limit 0"):
            check_share_count(1, max_shares=0)


class TestCheckPurchaseAmount:
    def test_ok(self) -> None:
        check_purchase_amount(1, 1000)

    def test_zero_price_rejected(self) -> None:
        with pytest.raises(ValidationError):
            check_purchase_amount(1, 0)


class TestCheckProjectOpen:
    def test_active(self) -> None:
        check_project_open(make_project())

    def test_inactive(self) -> None:
        with pytest.raises(ProjectNotActiveError):
            check_project_open(make_project(status="inactive"))

    def test_stored_funded(self) -> None:
        with pytest.raises(ProjectNotActiveError):
            check_project_open(make_project(status="funded", sold=100, available=100))

    def test_inactive_wins_over_sold_out(self) -> None:
        with pytest.raises(ProjectNotActiveError) as exc_info:
            check_project_open(make_project(status="inactive", sold=100, available=100))
        assert exc_info.value.data == {"status": "inactive"}


class TestPurchaseAttempt:
    def test_happy_path_history(self) -> None:
        attempt = PurchaseAttempt(buyer_id="b", project_id="p", shares=1)
        for state in (
            PurchaseState.VALIDATING,
            PurchaseState.RESERVING,
            PurchaseState.RESERVED,
            PurchaseState.RECORDING,
            PurchaseState.COMPLETED,
        ):
            attempt.advance(state)
        assert attempt.history[0] == PurchaseState.REQUESTED
        assert attempt.state.is_terminal

    def test_reject_records_reason(self) -> None:
        attempt = PurchaseAttempt(buyer_id="b", project_id="p", shares=0)
        attempt.advance(PurchaseState.VALIDATING)
        attempt.reject("bad count")
        assert attempt.state == PurchaseState.REJECTED
        assert attempt.reason == "bad count"

    def test_cannot_reject_after_reservation(self) -> None:
        attempt = PurchaseAttempt(buyer_id="b", project_id="p", shares=1)
        attempt.advance(PurchaseState.VALIDATING)
        attempt.advance(PurchaseState.RESERVING)
        attempt.advance(PurchaseState.RESERVED)
        with pytest.raises(RuntimeError):
            attempt.reject("too late")

    def test_cannot_skip_validation(self) -> None:
        attempt = PurchaseAttempt(buyer_id="b", project_id="p", shares=1)
        with pytest.raises(RuntimeError):
            attempt.advance(PurchaseState.RESERVING)


class TestProjectReturns:
    def test_one_year(self) -> None:
        p = project_returns(100_000, 1200)
        assert p.yearly_returns == 12_000
        assert p.monthly_returns == 1_000
        assert p.total_returns == 12_000

    def test_multi_year_is_simple_interest(self) -> None:
        p = project_returns(100_000, 1200, years=5)
        assert p.total_returns == 60_000

    def test_monthly_floors(self) -> None:
        # yearly 1050 / 12 = 87.5
        assert project_returns(8750, 1200).monthly_returns == 87

    @pytest.mark.parametrize(
        "principal,roi,years", [(-1, 1200, 1), (100, -1, 1), (100, 1200, 0)]
    )
    def test_invalid_inputs(self, principal: int, roi: int, years: int) -> None:
        with pytest.raises(ValueError):
            project_returns(principal, roi, years)
