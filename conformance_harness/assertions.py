"""Assertion primitives for test bodies and step callbacks.

Every assertion records an ``AssertionResult`` on the test that owns the
running code and raises ``AssertionFailure`` on mismatch. Equality follows
SameValue semantics: NaN equals NaN, ``0.0`` and ``-0.0`` differ, booleans are
never equal to numbers.
"""

import json
import math
from collections.abc import Callable, Sequence
from typing import NoReturn

from conformance_harness.context import current_scope
from conformance_harness.errors import AssertionFailure, HarnessMisuseError
from conformance_harness.models.kinds import Classifier, ValueKind, is_value_kind
from conformance_harness.models.result import AssertionResult


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def same_value(actual: object, expected: object) -> bool:
    """Compare two values the way ``assert_equals`` does."""
    if _is_number(actual) and _is_number(expected):
        if isinstance(actual, float) and isinstance(expected, float):
            if math.isnan(actual) and math.isnan(expected):
                return True
        if actual == 0 and expected == 0:
            return math.copysign(1, actual) == math.copysign(1, expected)
        return actual == expected
    if type(actual) is not type(expected):
        return False
    return actual == expected


def format_value(value: object) -> str:
    """Render a value for an assertion message."""
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value == 0 and math.copysign(1, value) < 0:
            return "-0"
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, str):
        return json.dumps(value)
    if isinstance(value, list | tuple):
        return "[" + ", ".join(format_value(item) for item in value) + "]"
    return repr(value)


def _record(result: AssertionResult) -> None:
    if not result.passed:
        _reject(result)
    if (scope := current_scope()) is not None:
        scope.test.record(result)


def _reject(result: AssertionResult) -> NoReturn:
    if (scope := current_scope()) is not None:
        scope.test.record(result)
    raise AssertionFailure(result)


def assert_equals(actual: object, expected: object, message: str | None = None) -> None:
    """Assert that ``actual`` is the same value as ``expected``."""
    expected_text = format_value(expected)
    actual_text = format_value(actual)
    if (
        type(actual) is not type(expected)
        and not (_is_number(actual) and _is_number(expected))
    ):
        expected_text = f"({type(expected).__name__}) {expected_text}"
        actual_text = f"({type(actual).__name__}) {actual_text}"
    _record(
        AssertionResult(
            passed=same_value(actual, expected),
            assertion="assert_equals",
            message=message,
            expected=expected_text,
            actual=actual_text,
        )
    )


def assert_not_equals(
    actual: object, expected: object, message: str | None = None
) -> None:
    """Assert that ``actual`` is not the same value as ``expected``."""
    _record(
        AssertionResult(
            passed=not same_value(actual, expected),
            assertion="assert_not_equals",
            message=message,
            expected=f"not {format_value(expected)}",
            actual=format_value(actual),
        )
    )


def assert_true(actual: object, message: str | None = None) -> None:
    """Assert that ``actual`` is exactly ``True``."""
    _record(
        AssertionResult(
            passed=actual is True,
            assertion="assert_true",
            message=message,
            expected="true",
            actual=format_value(actual),
        )
    )


def assert_false(actual: object, message: str | None = None) -> None:
    """Assert that ``actual`` is exactly ``False``."""
    _record(
        AssertionResult(
            passed=actual is False,
            assertion="assert_false",
            message=message,
            expected="false",
            actual=format_value(actual),
        )
    )


def assert_array_equals(
    actual: Sequence[object], expected: Sequence[object], message: str | None = None
) -> None:
    """Assert that two sequences have the same length and same items."""
    if isinstance(actual, str | bytes) or not isinstance(actual, Sequence):
        _reject(
            AssertionResult(
                passed=False,
                assertion="assert_array_equals",
                message=_join(message, "value is not an array,"),
                expected=format_value(expected),
                actual=format_value(actual),
            )
        )

    if len(actual) != len(expected):
        _reject(
            AssertionResult(
                passed=False,
                assertion="assert_array_equals",
                message=_join(message, "lengths differ,"),
                expected=f"{format_value(expected)} length {len(expected)}",
                actual=f"{format_value(actual)} length {len(actual)}",
            )
        )

    for index, (got, want) in enumerate(zip(actual, expected, strict=True)):
        if not same_value(got, want):
            _reject(
                AssertionResult(
                    passed=False,
                    assertion="assert_array_equals",
                    message=_join(message, f"property {index},"),
                    expected=format_value(want),
                    actual=format_value(got),
                )
            )

    _record(
        AssertionResult(
            passed=True,
            assertion="assert_array_equals",
            message=message,
            expected=format_value(expected),
            actual=format_value(actual),
        )
    )


def assert_approx_equals(
    actual: float, expected: float, epsilon: float, message: str | None = None
) -> None:
    """Assert that a number is within ``epsilon`` of ``expected``."""
    passed = _is_number(actual) and abs(actual - expected) <= epsilon
    _record(
        AssertionResult(
            passed=passed,
            assertion="assert_approx_equals",
            message=message,
            expected=f"{format_value(expected)} +/- {format_value(epsilon)}",
            actual=format_value(actual),
        )
    )


def assert_class_of(
    value: object,
    expected_kind: ValueKind,
    message: str | None = None,
    *,
    classifier: Classifier | None = None,
) -> None:
    """Assert that the host classifies ``value`` as ``expected_kind``.

    Raises:
        HarnessMisuseError: If ``expected_kind`` is not a recognised kind, or no
            classifier is available outside of a test

    """
    if not is_value_kind(expected_kind):
        raise HarnessMisuseError(f"Unknown value kind: {expected_kind!r}")

    if classifier is None:
        if (scope := current_scope()) is None:
            raise HarnessMisuseError(
                "assert_class_of() needs a classifier when called outside a test"
            )
        classifier = scope.classifier

    actual_kind = classifier(value)
    _record(
        AssertionResult(
            passed=actual_kind == expected_kind,
            assertion="assert_class_of",
            message=message,
            expected=expected_kind,
            actual=actual_kind,
        )
    )


def assert_unreached(description: str | None = None) -> NoReturn:
    """Fail unconditionally; marks code that must not run."""
    _reject(
        AssertionResult(
            passed=False,
            assertion="assert_unreached",
            message=_join(description, "reached unreachable code"),
        )
    )


def assert_raises[E: BaseException](
    exc_type: type[E],
    func: Callable[[], object],
    message: str | None = None,
) -> E:
    """Assert that calling ``func`` raises ``exc_type`` and return the exception."""
    try:
        func()
    except exc_type as exc:
        _record(
            AssertionResult(
                passed=True,
                assertion="assert_raises",
                message=message,
                expected=exc_type.__name__,
                actual=type(exc).__name__,
            )
        )
        return exc
    except Exception as exc:
        actual = f"{type(exc).__name__}: {exc}"
    else:
        actual = "no exception"

    _reject(
        AssertionResult(
            passed=False,
            assertion="assert_raises",
            message=message,
            expected=exc_type.__name__,
            actual=actual,
        )
    )


def _join(message: str | None, detail: str) -> str:
    return f"{message} {detail}" if message else detail
