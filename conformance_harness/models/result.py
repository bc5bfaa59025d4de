"""Models for test outcomes and assertion results."""

from dataclasses import dataclass
from typing import Literal, get_args

type TestStatus = Literal[
    "pending",
    "running",
    "passed",
    "failed",
    "timeout",
    "not-run",
]

type FailureKind = Literal["assertion", "uncaught", "timeout", "harness"]

TERMINAL_STATUSES: frozenset[TestStatus] = frozenset({"passed", "failed", "timeout"})
FINAL_STATUSES: frozenset[TestStatus] = TERMINAL_STATUSES | {"not-run"}
ALL_STATUSES: tuple[TestStatus, ...] = get_args(TestStatus.__value__)


@dataclass(frozen=True, kw_only=True)
class AssertionResult:
    """Outcome of a single assertion.

    ``expected`` and ``actual`` are human-readable renderings, not the values.
    """

    passed: bool
    assertion: str
    message: str | None = None
    expected: str | None = None
    actual: str | None = None

    def describe(self) -> str:
        """Render the result the way it appears in a failure message."""
        text = f"{self.assertion}: "
        if self.message:
            text += f"{self.message} "
        if self.expected is not None or self.actual is not None:
            text += f"expected {self.expected} but got {self.actual}"
        return text.rstrip()


@dataclass(frozen=True, kw_only=True)
class FailureReason:
    """Why a test ended in a non-passing state."""

    kind: FailureKind
    message: str
    expected: str | None = None
    actual: str | None = None
    stack: str | None = None
