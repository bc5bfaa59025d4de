"""Models for the final report of a harness run."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from conformance_harness.models.result import TestStatus
from conformance_harness.test_case import TestCase


@dataclass(frozen=True, kw_only=True)
class ReportEntry:
    """Outcome of one test as it appears in the report."""

    name: str
    ordinal: int
    status: TestStatus
    message: str | None = None
    expected: str | None = None
    actual: str | None = None
    assertions: int = 0
    duration: float = 0.0

    @classmethod
    def from_test(cls, test: TestCase) -> "ReportEntry":
        reason = test.reason
        return cls(
            name=test.name,
            ordinal=test.ordinal,
            status=test.status,
            message=reason.message if reason else None,
            expected=reason.expected if reason else None,
            actual=reason.actual if reason else None,
            assertions=len(test.assertions),
            duration=test.duration,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status,
            "message": self.message,
            "expected": self.expected,
            "actual": self.actual,
            "assertions": self.assertions,
            "duration": self.duration,
        }


@dataclass(frozen=True, kw_only=True)
class Report:
    """Every test's outcome, in registration order."""

    entries: Sequence[ReportEntry]

    @classmethod
    def from_tests(cls, tests: Iterable[TestCase]) -> "Report":
        return cls(entries=tuple(ReportEntry.from_test(test) for test in tests))

    def count(self, status: TestStatus) -> int:
        return sum(1 for entry in self.entries if entry.status == status)

    @property
    def ok(self) -> bool:
        """Whether every test passed."""
        return all(entry.status == "passed" for entry in self.entries)

    def to_dict(self) -> dict[str, Any]:
        """Summarise the report as JSON-ready data."""
        return {
            "total": len(self.entries),
            "passed": self.count("passed"),
            "failed": self.count("failed"),
            "timeouts": self.count("timeout"),
            "not_run": self.count("not-run"),
            "results": [entry.to_dict() for entry in self.entries],
        }
