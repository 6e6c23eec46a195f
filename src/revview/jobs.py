"""Cooperative scheduling for repository queries and deferred disposal.

Everything runs on one thread. Work that must not happen inline (git queries,
closing a session after its surface went away) is queued on a `Scheduler` and
run on a later turn, so callers (and tests) decide when the queue is drained.
"""

import logging
from collections import deque
from enum import IntEnum
from typing import Any, Callable

from utz import err

from .errors import RevviewError

logger = logging.getLogger(__name__)


class Scheduler:
    """FIFO event queue stepped explicitly by its owner."""

    def __init__(self):
        self._queue: deque[tuple[Callable, tuple]] = deque()

    def schedule(self, fn: Callable, *args: Any) -> None:
        self._queue.append((fn, args))

    def __len__(self) -> int:
        return len(self._queue)

    def step(self) -> bool:
        """Run the oldest queued callback. Returns False if the queue was empty."""
        if not self._queue:
            return False
        fn, args = self._queue.popleft()
        fn(*args)
        return True

    def run_pending(self) -> int:
        """Run callbacks until the queue is empty, including ones queued meanwhile."""
        count = 0
        while self.step():
            count += 1
        return count


class JobStatus(IntEnum):
    PENDING = 0
    RUNNING = 1
    SUCCESS = 2
    ERROR = 3


class Job:
    """A query run on a later scheduler turn, with a completion callback.

    There is no cancel: a superseded job runs to completion and whoever
    receives its result decides whether it still applies.
    """

    def __init__(self, scheduler: Scheduler, fn: Callable, *args: Any):
        self.scheduler = scheduler
        self.fn = fn
        self.args = args
        self.status = JobStatus.PENDING
        self.result: Any = None
        self.error: RevviewError | None = None

    def start(self, on_done: Callable[['Job'], None] | None = None) -> 'Job':
        self.scheduler.schedule(self._run, on_done)
        return self

    def _run(self, on_done):
        self.status = JobStatus.RUNNING
        try:
            self.result = self.fn(*self.args)
            self.status = JobStatus.SUCCESS
        except RevviewError as e:
            self.error = e
            self.status = JobStatus.ERROR
            logger.debug(f"Job {getattr(self.fn, '__name__', self.fn)} failed: {e}")
        except Exception:
            self.status = JobStatus.ERROR
            raise
        if on_done:
            self.scheduler.schedule(on_done, self)

    @property
    def done(self) -> bool:
        return self.status >= JobStatus.SUCCESS


def submit_for_session(
    scheduler: Scheduler,
    registry,
    session,
    fn: Callable,
    *args: Any,
    apply: Callable[[Any], None],
    on_error: Callable[[RevviewError], None] | None = None,
) -> Job:
    """Run ``fn`` as a job and hand its result to ``apply`` if ``session`` is still alive.

    The liveness check happens when the job completes, not when it is
    submitted: a session closed or unregistered in the meantime never sees the
    result.
    """
    def on_done(job: Job):
        if session not in registry or session.closed:
            logger.debug(f"Discarding result for disposed session {session.id}")
            return
        if job.status == JobStatus.ERROR:
            if on_error:
                on_error(job.error)
            else:
                err(str(job.error))
            return
        apply(job.result)

    return Job(scheduler, fn, *args).start(on_done)
