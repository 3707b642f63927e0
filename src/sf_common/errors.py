"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  3xxx: Project
  4xxx: Purchase / reservation
  9xxx: System

Callers dispatch on the exception type or `code`, never on `message`.
Structured details (e.g. remaining share count) travel in `data`.
"""

from typing import Any


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        data: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.data = data
        super().__init__(message)


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired token", 401)


class AdminRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1006, "Admin account required", 403)


# --- 3xxx: Project ---

class ProjectNotFoundError(AppError):
    def __init__(self, project_id: str) -> None:
        super().__init__(3001, f"Project not found: {project_id}", 404)


# --- 4xxx: Purchase / reservation ---

class ValidationError(AppError):
    """Static, pre-reservation rejection. The ledger is never touched."""

    def __init__(
        self, message: str, code: int = 4001, data: dict[str, Any] | None = None
    ) -> None:
        super().__init__(code, message, 422, data)


class ProjectNotActiveError(ValidationError):
    def __init__(self, project_id: str, status: str) -> None:
        super().__init__(
            f"Project {project_id} is not open for investment (status={status})",
            code=4002,
            data={"status": status},
        )


class SharesUnavailableError(AppError):
    """Not enough shares left at the moment of the reservation attempt."""

    def __init__(self, project_id: str, requested: int, available: int) -> None:
        self.available = available
        super().__init__(
            4003,
            f"Shares unavailable for {project_id}: requested {requested}, available {available}",
            409,
            {"available": available},
        )


class ReservationNotFoundError(AppError):
    def __init__(self, reservation_id: str) -> None:
        super().__init__(4004, f"Reservation not found: {reservation_id}", 404)


class ReservationAlreadyRecordedError(AppError):
    def __init__(self, reservation_id: str, investment_id: str) -> None:
        super().__init__(
            4005,
            f"Reservation {reservation_id} already recorded as {investment_id}",
            409,
            {"investment_id": investment_id},
        )


class PartialFailureError(AppError):
    """Shares are committed in the ledger but the investment record is missing.

    Must never be retried as a fresh purchase; reconciliation repairs it.
    """

    def __init__(self, reservation_id: str, project_id: str, shares: int) -> None:
        self.reservation_id = reservation_id
        super().__init__(
            4090,
            f"Shares reserved ({reservation_id}) but investment record was not saved",
            500,
            {"reservation_id": reservation_id, "project_id": project_id, "shares": shares},
        )


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class TransientConflictError(AppError):
    """Concurrent update lost the race; safe to retry with fresh state."""

    def __init__(self, project_id: str, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(
            9003,
            f"Reservation conflict on {project_id} after {attempts} attempt(s), please retry",
            503,
            {"retryable": True},
        )
