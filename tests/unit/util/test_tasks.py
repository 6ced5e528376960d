"""Unit tests for TaskSupervisor."""

import asyncio

import pytest

from portal.util.tasks import TaskSupervisor


class TestTaskSupervisor:
    @pytest.mark.asyncio
    async def test_tracks_running_tasks(self):
        supervisor = TaskSupervisor()
        release = asyncio.Event()

        task = supervisor.spawn(release.wait(), name="waiter")
        await asyncio.sleep(0)
        assert supervisor.running == 1

        release.set()
        await supervisor.drain()

        assert task.done()
        assert supervisor.running == 0

    @pytest.mark.asyncio
    async def test_crashing_task_does_not_propagate(self):
        supervisor = TaskSupervisor()

        async def crash():
            raise RuntimeError("boom")

        task = supervisor.spawn(crash(), name="crash")
        await supervisor.drain()

        assert isinstance(task.exception(), RuntimeError)
        assert supervisor.running == 0

    @pytest.mark.asyncio
    async def test_shutdown_cancels_after_grace_period(self):
        supervisor = TaskSupervisor(shutdown_grace_seconds=0.01)

        task = supervisor.spawn(asyncio.sleep(60), name="sleeper")
        await supervisor.shutdown()

        assert task.cancelled()

    @pytest.mark.asyncio
    async def test_no_new_work_after_shutdown(self):
        supervisor = TaskSupervisor()
        await supervisor.shutdown()

        with pytest.raises(RuntimeError):
            supervisor.spawn(asyncio.sleep(0), name="late")
