# src/lfscheck/contracts/events.py
"""Result events for a compliance run.

These records are produced by the runner and consumed by the reporters for
human-readable or structured output.
"""

from dataclasses import dataclass
from enum import StrEnum


class CheckStatus(StrEnum):
    """Outcome of a single check."""

    OK = "ok"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class CheckOutcome:
    """Emitted when a check returns.

    Attributes:
        name: Display name of the check
        status: OK or FAILED
        message: Failure description (None when the check passed)
        duration_seconds: Wall-clock time spent inside the check
    """

    name: str
    status: CheckStatus
    message: str | None
    duration_seconds: float

    @property
    def passed(self) -> bool:
        return self.status is CheckStatus.OK


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Emitted after every registered check has been attempted.

    exit_code is 0 unless strict mode was requested and a check failed,
    in which case it is 1.
    """

    total: int
    passed: int
    failed: int
    duration_seconds: float
    exit_code: int
