"""Global enums - values must match the DB CHECK constraints exactly."""

from enum import Enum


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    FUNDED = "funded"


class PaymentStatus(str, Enum):
    # Payment is stubbed as always-succeeding; PENDING/FAILED reserved for a gateway
    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"


class PurchaseState(str, Enum):
    """Lifecycle of one purchase attempt.

    Requested → Validating → Reserving → Reserved → Recording → Completed
                     ↘            ↘                       ↘
                   Rejected     Rejected              PartialFailure
    """

    REQUESTED = "REQUESTED"
    VALIDATING = "VALIDATING"
    RESERVING = "RESERVING"
    RESERVED = "RESERVED"
    RECORDING = "RECORDING"
    COMPLETED = "COMPLETED"
    PARTIAL_FAILURE = "PARTIAL_FAILURE"
    REJECTED = "REJECTED"

    @property
    def is_terminal(self) -> bool:
        return self in (
            PurchaseState.COMPLETED,
            PurchaseState.PARTIAL_FAILURE,
            PurchaseState.REJECTED,
        )
