"""Tests for sf_common.errors and sf_common.response."""

from src.sf_common.errors import (
    AppError,
    PartialFailureError,
    ProjectNotActiveError,
    ProjectNotFoundError,
    ReservationAlreadyRecordedError,
    SharesUnavailableError,
    TransientConflictError,
    ValidationError,
)
from src.sf_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500
        assert err.data is None

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1, message="x"), Exception)


class TestSpecificErrors:
    def test_validation(self) -> None:
        err = ValidationError("bad shares")
        assert err.code == 4001
        assert err.http_status == 422

    def test_project_not_active_is_validation(self) -> None:
        err = ProjectNotActiveError("PRJ-1", "funded")
        assert isinstance(err, ValidationError)
        assert err.code == 4002
        assert err.http_status == 422
        assert err.data == {"status": "funded"}

    def test_project_not_found(self) -> None:
        err = ProjectNotFoundError("PRJ-1")
        assert err.code == 3001
        assert err.http_status == 404

    def test_shares_unavailable_carries_available(self) -> None:
        err = SharesUnavailableError("PRJ-1", requested=96, available=95)
        assert err.code == 4003
        assert err.http_status == 409
        assert err.available == 95
        assert err.data == {"available": 95}

    def test_transient_conflict_is_retryable(self) -> None:
        err = TransientConflictError("PRJ-1", attempts=5)
        assert err.code == 9003
        assert err.http_status == 503
        assert err.data == {"retryable": True}

    def test_partial_failure_identifies_reservation(self) -> None:
        err = PartialFailureError("rsv_1", "PRJ-1", 4)
        assert err.code == 4090
        assert err.http_status == 500
        assert err.reservation_id == "rsv_1"
        assert err.data == {"reservation_id": "rsv_1", "project_id": "PRJ-1", "shares": 4}

    def test_already_recorded(self) -> None:
        err = ReservationAlreadyRecordedError("rsv_1", "inv_1")
        assert err.code == 4005
        assert err.http_status == 409


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"id": "abc"})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"id": "abc"}

    def test_error_with_data(self) -> None:
        resp = error_response(4003, "Shares unavailable", {"available": 95})
        assert resp.code == 4003
        assert resp.data == {"available": 95}

    def test_error_without_data(self) -> None:
        assert error_response(3001, "Project not found").data is None

    def test_serialization(self) -> None:
        d = ApiResponse().model_dump()
        assert set(d) == {"code", "message", "data", "timestamp", "request_id"}
        assert d["request_id"].startswith("req_")
