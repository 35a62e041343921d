"""Background task runner for fire-and-forget enrichment.

Photo mirroring is submitted here by nearby search and never awaited by the
request that triggered it; its only observable result is a later read of the
spot row.  The runner keeps strong references to running tasks, logs
failures instead of leaving them unobserved, and can be drained on shutdown
so in-flight uploads complete.
"""

import asyncio
import enum
import uuid
from collections import OrderedDict
from collections.abc import Coroutine
from typing import Any, Protocol

from loguru import logger


class JobStatus(enum.StrEnum):
    """Status of a background job."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class BackgroundTaskRunner(Protocol):
    """Protocol for background task execution."""

    def submit_task(self, coro: Coroutine[Any, Any, Any], *, name: str | None = None) -> str:
        """Submit an async task for background execution.

        Args:
            coro: The coroutine to execute.
            name: Optional label used in log messages.

        Returns:
            A job ID string for tracking.
        """
        ...

    def get_status(self, job_id: str) -> JobStatus:
        """Get the current status of a background job.

        Args:
            job_id: The job ID returned by submit_task.

        Returns:
            The current job status.
        """
        ...


class InProcessTaskRunner:
    """In-process background task runner using asyncio.create_task().

    Tasks run on the caller's event loop. Statuses of finished jobs are kept
    for the most recent ``history_limit`` jobs only, so a long-running process
    does not accumulate one entry per submitted task.

    Args:
        history_limit: Number of finished job statuses to retain.
    """

    def __init__(self, history_limit: int = 256) -> None:
        self._history_limit = history_limit
        self._jobs: dict[str, JobStatus] = {}
        self._finished: OrderedDict[str, JobStatus] = OrderedDict()
        self._tasks: dict[str, asyncio.Task[Any]] = {}

    def submit_task(self, coro: Coroutine[Any, Any, Any], *, name: str | None = None) -> str:
        """Submit an async task for background execution.

        Args:
            coro: The coroutine to execute.
            name: Optional label used in log messages.

        Returns:
            A job ID string for tracking.
        """
        job_id = str(uuid.uuid4())
        label = name or job_id
        self._jobs[job_id] = JobStatus.PENDING

        async def _run() -> None:
            self._jobs[job_id] = JobStatus.RUNNING
            try:
                await coro
            except asyncio.CancelledError:
                self._jobs[job_id] = JobStatus.FAILED
                raise
            except Exception:
                self._jobs[job_id] = JobStatus.FAILED
                logger.exception("Background job {} failed", label)
            else:
                self._jobs[job_id] = JobStatus.COMPLETED

        task = asyncio.create_task(_run(), name=label)
        self._tasks[job_id] = task
        task.add_done_callback(lambda _t: self._finish(job_id))
        return job_id

    def _finish(self, job_id: str) -> None:
        self._tasks.pop(job_id, None)
        # A task cancelled before it started never set its own status
        status = self._jobs.pop(job_id, JobStatus.FAILED)
        if status in (JobStatus.PENDING, JobStatus.RUNNING):
            status = JobStatus.FAILED
        self._finished[job_id] = status
        while len(self._finished) > self._history_limit:
            self._finished.popitem(last=False)

    def get_status(self, job_id: str) -> JobStatus:
        """Get the current status of a background job.

        Args:
            job_id: The job ID returned by submit_task.

        Returns:
            The current job status.

        Raises:
            KeyError: If the job ID is unknown or its status has aged out.
        """
        if job_id in self._jobs:
            return self._jobs[job_id]
        return self._finished[job_id]

    @property
    def retained_count(self) -> int:
        """Number of job statuses currently held, running or finished."""
        return len(self._jobs) + len(self._finished)

    @property
    def pending_count(self) -> int:
        """Number of tasks that have not finished yet."""
        return len(self._tasks)

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for outstanding tasks, cancelling whatever exceeds the timeout.

        Args:
            timeout: Seconds to wait. None waits indefinitely.
        """
        tasks = list(self._tasks.values())
        if not tasks:
            return
        logger.info("Waiting for {} background job(s) to finish", len(tasks))
        _done, pending = await asyncio.wait(tasks, timeout=timeout)
        for task in pending:
            task.cancel()
        if pending:
            logger.warning("Cancelled {} background job(s) still running at shutdown", len(pending))
            await asyncio.gather(*pending, return_exceptions=True)


# Singleton instance for the application
task_runner = InProcessTaskRunner()
