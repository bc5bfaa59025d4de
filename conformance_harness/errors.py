"""Exceptions raised by the harness runtime."""

from conformance_harness.models.result import AssertionResult


class HarnessError(Exception):
    """Base class for harness exceptions."""


class AssertionFailure(HarnessError, AssertionError):
    """Raised by an assertion primitive on mismatch.

    Caught at the nearest test boundary and turned into a ``failed`` status.
    """

    def __init__(self, result: AssertionResult) -> None:
        super().__init__(result.describe())
        self.result = result


class HarnessMisuseError(HarnessError):
    """Raised when the harness API is used out of order.

    Signals a bug in the calling code rather than in the system under test.
    """
