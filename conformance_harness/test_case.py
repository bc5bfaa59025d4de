"""Registry record for a single declared test."""

import time
from dataclasses import dataclass, field

from conformance_harness.errors import HarnessMisuseError
from conformance_harness.models.result import (
    FINAL_STATUSES,
    AssertionResult,
    FailureReason,
    TestStatus,
)


@dataclass(kw_only=True, eq=False)
class TestCase:
    """A declared test and its outcome.

    The status latches: once final, ``finish`` and ``record`` are no-ops.
    """

    __test__ = False

    name: str
    ordinal: int
    status: TestStatus = "pending"
    assertions: list[AssertionResult] = field(default_factory=list)
    reason: FailureReason | None = None
    started_at: float | None = None
    finished_at: float | None = None

    @property
    def is_final(self) -> bool:
        """Whether the test reached a state it can never leave."""
        return self.status in FINAL_STATUSES

    @property
    def duration(self) -> float:
        """Seconds between start and finish (0 when either is missing)."""
        if self.started_at is None or self.finished_at is None:
            return 0.0
        return self.finished_at - self.started_at

    def start(self) -> None:
        """Move from ``pending`` to ``running``."""
        if self.status != "pending":
            raise HarnessMisuseError(
                f"Test '{self.name}' cannot start from status {self.status!r}"
            )
        self.status = "running"
        self.started_at = time.monotonic()

    def record(self, result: AssertionResult) -> bool:
        """Append an assertion result unless the test is already final."""
        if self.is_final:
            return False
        self.assertions.append(result)
        return True

    def finish(self, status: TestStatus, reason: FailureReason | None = None) -> bool:
        """Latch a final status.

        Returns:
            True if the status changed, False if the test was already final

        """
        if self.is_final:
            return False
        if status not in FINAL_STATUSES:
            raise HarnessMisuseError(f"{status!r} is not a final status")
        self.status = status
        self.reason = reason
        self.finished_at = time.monotonic()
        if self.started_at is None:
            self.started_at = self.finished_at
        return True
