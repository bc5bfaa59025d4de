"""Harness runtime: test registration, execution and report finalization."""

import asyncio
import functools
import inspect
import logging
import traceback
from collections import deque
from collections.abc import Awaitable, Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from types import TracebackType
from typing import Any, Self

from conformance_harness.assertions import assert_unreached
from conformance_harness.context import TestScope, enter_scope
from conformance_harness.errors import AssertionFailure, HarnessMisuseError
from conformance_harness.hosts.python.classifier import classify_python_value
from conformance_harness.models.config import HarnessConfig, TimeoutTag
from conformance_harness.models.kinds import Classifier
from conformance_harness.models.result import FailureReason, TestStatus
from conformance_harness.report import Report
from conformance_harness.test_case import TestCase

log = logging.getLogger(__name__)

type PromiseFactory = Callable[[], Awaitable[object]]


def failure_reason(exc: BaseException) -> FailureReason:
    """Describe an exception that ended a test."""
    stack = "".join(traceback.format_exception(exc)).rstrip()
    if isinstance(exc, AssertionFailure):
        return FailureReason(
            kind="assertion",
            message=str(exc),
            expected=exc.result.expected,
            actual=exc.result.actual,
            stack=stack,
        )
    return FailureReason(
        kind="uncaught",
        message=f"{type(exc).__name__}: {exc}",
        stack=stack,
    )


def stray_awaitable_reason(outcome: object, message: str) -> FailureReason:
    """Describe a callable that returned an awaitable where none was expected.

    Coroutines are closed so they do not warn about never being awaited.
    """
    if inspect.iscoroutine(outcome):
        outcome.close()
    return FailureReason(kind="harness", message=message)


@dataclass(kw_only=True, eq=False)
class AsyncTestHandle:
    """Handle to a test that finishes when ``complete()`` is called.

    Callbacks passed through ``step`` report their failures to this test and
    become no-ops once the test is final.
    """

    __test__ = False

    harness: "Harness"
    test: TestCase
    timeout: float
    done: asyncio.Future[TestStatus] = field(repr=False)
    _timer: asyncio.TimerHandle | None = field(default=None, init=False, repr=False)
    _cleanups: list[Callable[[], object]] = field(
        default_factory=list, init=False, repr=False
    )
    _tasks: set[asyncio.Future[object]] = field(
        default_factory=set, init=False, repr=False
    )

    @property
    def name(self) -> str:
        return self.test.name

    @property
    def status(self) -> TestStatus:
        return self.test.status

    def step[**P, R](self, callback: Callable[P, R]) -> Callable[P, R | None]:
        """Wrap ``callback`` so its failures are attributed to this test.

        Coroutine functions get an async wrapper. A failure marks the test
        ``failed`` and is not re-raised; the wrapper then returns None.
        """
        if inspect.iscoroutinefunction(callback):

            @functools.wraps(callback)
            async def async_guard(*args: P.args, **kwargs: P.kwargs) -> Any:
                if self.test.is_final:
                    log.debug("Ignoring late step for finished test %s", self.name)
                    return None
                with self.harness.scope(self.test):
                    try:
                        return await callback(*args, **kwargs)
                    except Exception as exc:
                        self._fail(exc)
                        return None

            return async_guard

        @functools.wraps(callback)
        def guard(*args: P.args, **kwargs: P.kwargs) -> R | None:
            if self.test.is_final:
                log.debug("Ignoring late step for finished test %s", self.name)
                return None
            with self.harness.scope(self.test):
                try:
                    outcome = callback(*args, **kwargs)
                except Exception as exc:
                    self._fail(exc)
                    return None
            if inspect.isawaitable(outcome):
                self._settle(
                    "failed",
                    stray_awaitable_reason(
                        outcome,
                        "Step callback returned an awaitable; "
                        "pass the coroutine function itself to step()",
                    ),
                )
                return None
            return outcome

        return guard

    def step_func_done[**P](
        self, callback: Callable[P, object] | None = None
    ) -> Callable[P, object]:
        """Wrap ``callback`` like ``step`` and complete the test after it returns.

        A coroutine function is awaited before the test completes, so the
        wrapper is then a coroutine function too.
        """
        if callback is not None and inspect.iscoroutinefunction(callback):

            async def await_then_complete(*args: P.args, **kwargs: P.kwargs) -> None:
                await callback(*args, **kwargs)
                self.complete()

            return self.step(await_then_complete)

        def run_then_complete(*args: P.args, **kwargs: P.kwargs) -> None:
            if callback is not None:
                callback(*args, **kwargs)
            self.complete()

        return self.step(run_then_complete)

    def unreached_func(self, description: str | None = None) -> Callable[..., None]:
        """Return a step that fails the test whenever it is called."""

        def unreached(*args: object, **kwargs: object) -> None:
            assert_unreached(description)

        return self.step(unreached)

    def step_timeout(
        self, callback: Callable[[], object], delay: float
    ) -> asyncio.TimerHandle:
        """Run ``callback`` as a step after ``delay`` seconds.

        The delay is scaled by the harness timeout multiplier. A coroutine
        function is started as a task when the delay elapses.
        """
        loop = asyncio.get_running_loop()
        scaled = delay * self.harness.config.timeout_multiplier
        guarded = self.step(callback)
        if inspect.iscoroutinefunction(callback):
            return loop.call_later(scaled, self._spawn, guarded)
        return loop.call_later(scaled, guarded)

    def add_cleanup(self, cleanup: Callable[[], object]) -> None:
        """Register a callable to run once the test is final.

        Cleanups registered after that point run immediately.
        """
        if self.test.is_final:
            self._run_cleanup(cleanup)
            return
        self._cleanups.append(cleanup)

    def complete(self) -> None:
        """Mark the test ``passed``; a no-op once the test is final."""
        if self.test.is_final:
            log.debug("complete() on finished test %s ignored", self.name)
            return
        self._settle("passed")

    def _fail(self, exc: BaseException) -> None:
        self._settle("failed", failure_reason(exc))

    def _expire(self, message: str | None = None) -> None:
        self._settle(
            "timeout",
            FailureReason(
                kind="timeout",
                message=message or f"Test timed out after {self.timeout:g}s",
            ),
        )

    def _settle(self, status: TestStatus, reason: FailureReason | None = None) -> None:
        if not self.harness.finish(self.test, status, reason):
            return
        if self._timer is not None:
            self._timer.cancel()
        cleanups, self._cleanups = self._cleanups, []
        for cleanup in cleanups:
            self._run_cleanup(cleanup)
        if not self.done.done():
            self.done.set_result(status)

    def _spawn(self, step: Callable[[], Awaitable[object]]) -> None:
        task = asyncio.ensure_future(step())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _run_cleanup(self, cleanup: Callable[[], object]) -> None:
        try:
            cleanup()
        except Exception:
            log.exception("Cleanup failed for test %s", self.name)


@dataclass(frozen=True, kw_only=True)
class _QueuedPromiseTest:
    test: TestCase
    factory: PromiseFactory
    timeout: float


@dataclass(kw_only=True, eq=False)
class Harness:
    """Registry and scheduler for one run of tests.

    All tests share one event loop. Synchronous tests run when declared,
    promise tests run one after another in declaration order, and async tests
    run until completed, failed or timed out.
    """

    config: HarnessConfig = field(default_factory=HarnessConfig)
    classifier: Classifier = classify_python_value
    _tests: list[TestCase] = field(default_factory=list, init=False)
    _handles: list[AsyncTestHandle] = field(default_factory=list, init=False)
    _promise_queue: deque[_QueuedPromiseTest] = field(
        default_factory=deque, init=False
    )
    _promise_runner: asyncio.Task[None] | None = field(default=None, init=False)
    _finalized: bool = field(default=False, init=False)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        for handle in self._handles:
            if handle._timer is not None:
                handle._timer.cancel()
            for task in handle._tasks:
                task.cancel()
        runner = self._promise_runner
        if runner is not None and not runner.done():
            runner.cancel()
            try:
                await runner
            except asyncio.CancelledError:
                pass

    @property
    def tests(self) -> Sequence[TestCase]:
        return tuple(self._tests)

    @contextmanager
    def scope(self, test: TestCase) -> Iterator[TestScope]:
        """Attribute assertions made inside the block to ``test``."""
        with enter_scope(TestScope(test=test, classifier=self.classifier)) as scope:
            yield scope

    def finish(
        self, test: TestCase, status: TestStatus, reason: FailureReason | None = None
    ) -> bool:
        """Latch a final status on ``test`` and log the transition.

        Returns:
            True if the status changed, False if the test was already final

        """
        if not test.finish(status, reason):
            return False
        if reason is None:
            log.info("Test finished: name=%s status=%s", test.name, status)
        else:
            log.info(
                "Test finished: name=%s status=%s reason=%s",
                test.name,
                status,
                reason.message,
            )
        return True

    def declare_sync_test(self, name: str, body: Callable[[], object]) -> TestCase:
        """Register a test and run ``body`` immediately.

        Args:
            name: Test name
            body: Callable holding the assertions

        Returns:
            The test, already in a final state

        """
        test = self._register(name)
        test.start()

        with self.scope(test):
            try:
                outcome = body()
            except Exception as exc:
                self.finish(test, "failed", failure_reason(exc))
                return test

        if inspect.isawaitable(outcome):
            self.finish(
                test,
                "failed",
                stray_awaitable_reason(
                    outcome,
                    "Test body returned an awaitable; "
                    "use declare_promise_test for asynchronous tests",
                ),
            )
            return test

        self.finish(test, "passed")
        return test

    def declare_async_test(
        self, name: str, *, timeout: TimeoutTag | float | None = None
    ) -> AsyncTestHandle:
        """Register a running test that finishes through its handle.

        Args:
            name: Test name
            timeout: "normal", "long" or seconds; None means "normal"

        Returns:
            Handle exposing step(), complete() and friends

        Raises:
            HarnessMisuseError: If no event loop is running

        """
        loop = self._running_loop("declare_async_test")
        test = self._register(name)
        test.start()

        seconds = self.config.resolve_timeout(timeout)
        handle = AsyncTestHandle(
            harness=self, test=test, timeout=seconds, done=loop.create_future()
        )
        handle._timer = loop.call_later(seconds, handle._expire)
        self._handles.append(handle)
        return handle

    def declare_promise_test(
        self,
        name: str,
        factory: PromiseFactory,
        *,
        timeout: TimeoutTag | float | None = None,
    ) -> TestCase:
        """Register a test whose outcome is the awaitable ``factory`` returns.

        Promise tests run one at a time in declaration order, each starting
        after the previous one is final.

        Raises:
            HarnessMisuseError: If no event loop is running

        """
        loop = self._running_loop("declare_promise_test")
        test = self._register(name)
        self._promise_queue.append(
            _QueuedPromiseTest(
                test=test,
                factory=factory,
                timeout=self.config.resolve_timeout(timeout),
            )
        )
        if self._promise_runner is None or self._promise_runner.done():
            self._promise_runner = loop.create_task(self._run_promise_tests())
        return test

    async def wait_for_completion(self, timeout: float | None = None) -> None:
        """Wait until every declared test is final.

        Args:
            timeout: Upper bound in seconds for the whole wait; defaults to the
                configured harness timeout. When it expires, running tests
                become ``timeout`` and tests that never started ``not-run``.

        """
        if timeout is None:
            timeout = self.config.resolve_harness_timeout()

        try:
            async with asyncio.timeout(timeout):
                while pending := self._pending_waitables():
                    await asyncio.wait(pending)
        except TimeoutError:
            log.warning("Harness timed out after %.1fs", timeout)
            runner = self._promise_runner
            self._abort(f"Harness timed out after {timeout:g}s")
            if runner is not None:
                await asyncio.gather(runner, return_exceptions=True)

    async def run(self, timeout: float | None = None) -> Report:
        """Wait for every test, then finalize the report."""
        await self.wait_for_completion(timeout)
        return self.finalize_report()

    def finalize_report(self) -> Report:
        """Produce the report; allowed once, after every test is final.

        Raises:
            HarnessMisuseError: If called twice or while a test is unfinished

        """
        if self._finalized:
            raise HarnessMisuseError(
                "finalize_report() was already called; the report is produced once"
            )

        unfinished = [test for test in self._tests if not test.is_final]
        if unfinished:
            names = ", ".join(f"{t.name!r} ({t.status})" for t in unfinished)
            raise HarnessMisuseError(
                "finalize_report() requires every test to be finished; "
                f"unfinished: {names}"
            )

        self._finalized = True
        report = Report.from_tests(self._tests)
        log.info(
            "Report finalized: total=%d passed=%d failed=%d timeout=%d not_run=%d",
            len(report.entries),
            report.count("passed"),
            report.count("failed"),
            report.count("timeout"),
            report.count("not-run"),
        )
        return report

    def _register(self, name: str) -> TestCase:
        if self._finalized:
            raise HarnessMisuseError(
                f"Cannot declare test {name!r} after the report was finalized"
            )
        test = TestCase(name=name, ordinal=len(self._tests))
        self._tests.append(test)
        log.debug("Registered test %d: %s", test.ordinal, name)
        return test

    @staticmethod
    def _running_loop(operation: str) -> asyncio.AbstractEventLoop:
        try:
            return asyncio.get_running_loop()
        except RuntimeError as exc:
            raise HarnessMisuseError(
                f"{operation}() requires a running event loop"
            ) from exc

    def _pending_waitables(self) -> set[asyncio.Future[Any]]:
        pending: set[asyncio.Future[Any]] = {
            handle.done for handle in self._handles if not handle.done.done()
        }
        runner = self._promise_runner
        if runner is not None and not runner.done():
            pending.add(runner)
        return pending

    async def _run_promise_tests(self) -> None:
        while self._promise_queue:
            queued = self._promise_queue.popleft()
            if queued.test.is_final:
                continue
            await self._run_promise_test(queued)

    async def _run_promise_test(self, queued: _QueuedPromiseTest) -> None:
        test = queued.test
        test.start()

        with self.scope(test):
            try:
                awaitable = queued.factory()
            except Exception as exc:
                self.finish(test, "failed", failure_reason(exc))
                return

            if not inspect.isawaitable(awaitable):
                self.finish(
                    test,
                    "failed",
                    FailureReason(
                        kind="harness",
                        message=(
                            "Promise test factory must return an awaitable, "
                            f"got {type(awaitable).__name__}"
                        ),
                    ),
                )
                return

            deadline = asyncio.timeout(queued.timeout)
            try:
                async with deadline:
                    await awaitable
            except TimeoutError as exc:
                if deadline.expired():
                    self.finish(
                        test,
                        "timeout",
                        FailureReason(
                            kind="timeout",
                            message=f"Test timed out after {queued.timeout:g}s",
                        ),
                    )
                else:
                    self.finish(test, "failed", failure_reason(exc))
            except Exception as exc:
                self.finish(test, "failed", failure_reason(exc))
            else:
                self.finish(test, "passed")

    def _abort(self, message: str) -> None:
        runner = self._promise_runner
        if runner is not None and not runner.done():
            runner.cancel()

        for handle in self._handles:
            handle._expire(message)

        for test in self._tests:
            if test.status == "pending":
                self.finish(
                    test, "not-run", FailureReason(kind="harness", message=message)
                )
            elif test.status == "running":
                self.finish(
                    test, "timeout", FailureReason(kind="timeout", message=message)
                )
