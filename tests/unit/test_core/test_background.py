"""Tests for the background task runner module."""

import asyncio

import pytest

from spots_api.core.background import InProcessTaskRunner, JobStatus


class TestJobStatus:
    """Tests for JobStatus enum."""

    def test_status_values(self) -> None:
        assert JobStatus.PENDING == "pending"
        assert JobStatus.RUNNING == "running"
        assert JobStatus.COMPLETED == "completed"
        assert JobStatus.FAILED == "failed"


class TestInProcessTaskRunner:
    """Tests for InProcessTaskRunner."""

    async def test_submit_task_returns_job_id(self) -> None:
        runner = InProcessTaskRunner()

        async def noop() -> None:
            pass

        job_id = runner.submit_task(noop())
        assert isinstance(job_id, str)
        assert len(job_id) == 36  # UUID format
        await runner.drain()

    async def test_successful_task_completes(self) -> None:
        runner = InProcessTaskRunner()
        completed = False

        async def simple_task() -> None:
            nonlocal completed
            completed = True

        job_id = runner.submit_task(simple_task(), name="simple")
        await asyncio.sleep(0.05)

        assert runner.get_status(job_id) == JobStatus.COMPLETED
        assert completed is True
        assert runner.pending_count == 0

    async def test_failed_task_is_logged_not_raised(self) -> None:
        runner = InProcessTaskRunner()

        async def failing_task() -> None:
            msg = "upload failed"
            raise RuntimeError(msg)

        job_id = runner.submit_task(failing_task())
        await asyncio.sleep(0.05)

        assert runner.get_status(job_id) == JobStatus.FAILED

    async def test_get_status_unknown_job_raises(self) -> None:
        runner = InProcessTaskRunner()

        with pytest.raises(KeyError):
            runner.get_status("nonexistent-job-id")

    async def test_drain_waits_for_running_tasks(self) -> None:
        runner = InProcessTaskRunner()
        finished: list[int] = []

        async def slow(n: int) -> None:
            await asyncio.sleep(0.02)
            finished.append(n)

        for i in range(3):
            runner.submit_task(slow(i))
        assert runner.pending_count == 3

        await runner.drain(timeout=5)

        assert sorted(finished) == [0, 1, 2]
        assert runner.pending_count == 0

    async def test_drain_cancels_after_timeout(self) -> None:
        runner = InProcessTaskRunner()
        gate = asyncio.Event()

        async def stuck() -> None:
            await gate.wait()

        job_id = runner.submit_task(stuck())
        await runner.drain(timeout=0.05)

        assert runner.get_status(job_id) == JobStatus.FAILED
        assert runner.pending_count == 0

    async def test_drain_with_no_tasks(self) -> None:
        await InProcessTaskRunner().drain(timeout=0.01)

    async def test_finished_statuses_are_bounded(self) -> None:
        runner = InProcessTaskRunner(history_limit=10)

        async def noop() -> None:
            pass

        job_ids = [runner.submit_task(noop()) for _ in range(1000)]
        await runner.drain(timeout=5)
        await asyncio.sleep(0)

        assert runner.pending_count == 0
        assert runner.retained_count == 10
        assert runner.get_status(job_ids[-1]) == JobStatus.COMPLETED
        with pytest.raises(KeyError):
            runner.get_status(job_ids[0])
