"""Snowflake-style business IDs for reservations and investments.

IDs are strings so they can carry a short type prefix ("rsv_", "inv_") and
still sort by creation time within one prefix.
Single-process generator. The module-level generator takes its machine_id
from settings.MACHINE_ID, which must be unique per API replica.
"""

import threading
import time

from config.settings import settings


class SnowflakeIdGenerator:
    """Layout (64 bits):
      - 41 bits: millisecond timestamp since _EPOCH_MS
      - 10 bits: machine_id (0-1023)
      - 12 bits: per-millisecond sequence (0-4095)
    """

    _EPOCH_MS = 1_735_689_600_000  # 2025-01-01T00:00:00Z
    _MACHINE_BITS = 10
    _SEQUENCE_BITS = 12
    _MAX_SEQUENCE = (1 << _SEQUENCE_BITS) - 1

    def __init__(self, machine_id: int = 0) -> None:
        if not (0 <= machine_id < (1 << self._MACHINE_BITS)):
            raise ValueError(f"machine_id must be 0-{(1 << self._MACHINE_BITS) - 1}")
        self._machine_id = machine_id
        self._sequence = 0
        self._last_ms = -1
        self._lock = threading.Lock()

    @property
    def machine_id(self) -> int:
        return self._machine_id

    def next_int(self) -> int:
        with self._lock:
            # A clock stepping backwards keeps counting in the last millisecond
            now_ms = max(int(time.time() * 1000), self._last_ms)
            if now_ms == self._last_ms:
                self._sequence = (self._sequence + 1) & self._MAX_SEQUENCE
                if self._sequence == 0:
                    # Sequence exhausted for this millisecond; spin to the next one
                    while now_ms <= self._last_ms:
                        now_ms = int(time.time() * 1000)
            else:
                self._sequence = 0
            self._last_ms = now_ms
            return (
                ((now_ms - self._EPOCH_MS) << (self._MACHINE_BITS + self._SEQUENCE_BITS))
                | (self._machine_id << self._SEQUENCE_BITS)
                | self._sequence
            )

    def next_id(self, prefix: str = "") -> str:
        return f"{prefix}{self.next_int()}"


_default_generator = SnowflakeIdGenerator(machine_id=settings.MACHINE_ID)


def generate_id(prefix: str = "") -> str:
    """Generate a unique, time-ordered string ID from the module-level generator."""
    return _default_generator.next_id(prefix)


def new_reservation_id() -> str:
    return generate_id("rsv_")


def new_investment_id() -> str:
    return generate_id("inv_")
