"""Tracks which test the currently executing code belongs to."""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

from conformance_harness.models.kinds import Classifier
from conformance_harness.test_case import TestCase


@dataclass(frozen=True, kw_only=True)
class TestScope:
    """The owning test and the value classifier of its harness."""

    __test__ = False

    test: TestCase
    classifier: Classifier


_current_scope: ContextVar[TestScope | None] = ContextVar(
    "conformance_harness_scope", default=None
)


def current_scope() -> TestScope | None:
    """Return the scope of the test whose code is running, if any."""
    return _current_scope.get()


@contextmanager
def enter_scope(scope: TestScope) -> Iterator[TestScope]:
    """Attribute assertions made inside the block to ``scope.test``."""
    token = _current_scope.set(scope)
    try:
        yield scope
    finally:
        _current_scope.reset(token)
