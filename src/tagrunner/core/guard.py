"""Deadline enforcement for timeout-bound tests.

A guarded invocation runs on its own daemon thread while the caller blocks on
a timed wait. When the deadline passes the caller is released with
`DeadlineExceeded` and a cancellation flag is raised for the worker. Python
threads cannot be stopped from outside, so a test body that never checks
`cancellation_requested()` keeps running in the background until it returns.
Such abandoned invocations are counted by `DeadlineGuard.pending`.
"""

import logging
import threading
from concurrent.futures import Future, wait
from typing import Any, Callable, Optional

from tagrunner.models import TimeoutSpec

logger = logging.getLogger(__name__)

_worker_state = threading.local()


def cancellation_requested() -> bool:
    """Return True if the guarded test calling this has run out of time.

    Long-running test bodies can poll this and return early. Outside a
    guarded invocation it is always False.
    """
    event: Optional[threading.Event] = getattr(_worker_state, "cancel_event", None)
    return event is not None and event.is_set()


class DeadlineExceeded(Exception):
    """Signal that a guarded invocation did not finish within its limit."""

    def __init__(self, limit_millis: int):
        self.limit_millis = limit_millis
        super().__init__(f"Execute exceeded maximum time = {limit_millis} ms")


class DeadlineGuard:
    """Runs a callable on a background thread and enforces a time budget."""

    def __init__(self) -> None:
        self._abandoned: list[threading.Thread] = []
        self._lock = threading.Lock()

    @property
    def pending(self) -> int:
        """Number of timed-out invocations whose threads are still alive."""
        with self._lock:
            self._abandoned = [t for t in self._abandoned if t.is_alive()]
            return len(self._abandoned)

    def call(self, func: Callable[[], Any], timeout: TimeoutSpec, name: str = "test") -> Any:
        """Invoke func, waiting at most `timeout`.

        Returns:
            Whatever func returns, if it finishes in time

        Raises:
            DeadlineExceeded: If the limit elapses first
            Exception: Anything func raised before the limit, unchanged
        """
        future: Future = Future()
        cancel_event = threading.Event()

        def worker() -> None:
            _worker_state.cancel_event = cancel_event
            if not future.set_running_or_notify_cancel():
                return
            try:
                result = func()
            except BaseException as e:
                future.set_exception(e)
            else:
                future.set_result(result)

        thread = threading.Thread(target=worker, name=f"tagrunner-{name}", daemon=True)
        thread.start()

        done, _ = wait([future], timeout=timeout.limit_seconds)
        if future in done:
            return future.result()

        cancel_event.set()
        with self._lock:
            self._abandoned.append(thread)
        logger.warning(
            f"{name} exceeded {timeout.limit_millis} ms; "
            f"invocation left running in background thread {thread.name}"
        )
        raise DeadlineExceeded(timeout.limit_millis)
