"""Tests for report models."""

from conformance_harness.models.result import FailureReason
from conformance_harness.report import Report, ReportEntry
from conformance_harness.test_case import TestCase
from conformance_harness.testing.factories import (
    AssertionResultFactory,
    ReportEntryFactory,
)


def test_entry_from_failed_test() -> None:
    """Failure details are copied from the test's reason."""
    test = TestCase(name="pixel check", ordinal=4)
    test.start()
    test.record(AssertionResultFactory.build(passed=False))
    test.finish(
        "failed",
        FailureReason(
            kind="assertion", message="pixel 15,15", expected="0", actual="255"
        ),
    )

    entry = ReportEntry.from_test(test)

    assert entry.name == "pixel check"
    assert entry.ordinal == 4
    assert entry.status == "failed"
    assert entry.message == "pixel 15,15"
    assert entry.expected == "0"
    assert entry.actual == "255"
    assert entry.assertions == 1
    assert entry.duration >= 0


def test_entry_from_passed_test_has_no_message() -> None:
    """Passing tests carry no failure details."""
    test = TestCase(name="ok", ordinal=0)
    test.start()
    test.finish("passed")

    entry = ReportEntry.from_test(test)

    assert entry.message is None
    assert entry.expected is None


def test_to_dict_counts() -> None:
    """Totals are counted per status."""
    report = Report(
        entries=[
            ReportEntryFactory.build(status="passed"),
            ReportEntryFactory.build(status="passed"),
            ReportEntryFactory.build(status="failed", message="boom"),
            ReportEntryFactory.build(status="timeout"),
            ReportEntryFactory.build(status="not-run"),
        ]
    )

    output = report.to_dict()

    assert output["total"] == 5
    assert output["passed"] == 2
    assert output["failed"] == 1
    assert output["timeouts"] == 1
    assert output["not_run"] == 1
    assert output["results"][2]["message"] == "boom"
    assert report.ok is False


def test_empty_report_is_ok() -> None:
    """A report without tests has zero totals and is ok."""
    report = Report(entries=[])

    assert report.ok is True
    assert report.to_dict() == {
        "total": 0,
        "passed": 0,
        "failed": 0,
        "timeouts": 0,
        "not_run": 0,
        "results": [],
    }
