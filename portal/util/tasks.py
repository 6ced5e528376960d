"""Supervised background tasks.

Long-running work (bulk invite campaigns) runs as asyncio tasks that the
request handler never awaits. The supervisor keeps a strong reference to
every running task so it cannot be garbage collected mid-flight, reports
anything that escapes a task, and gives running work a bounded grace
period on shutdown.
"""

import asyncio
from collections.abc import Coroutine
from typing import Any

import logfire


class TaskSupervisor:
    """Owns fire-and-forget tasks for the lifetime of the application."""

    def __init__(self, shutdown_grace_seconds: float = 30.0) -> None:
        """Initialize supervisor.

        Args:
            shutdown_grace_seconds: How long shutdown waits for running tasks
        """
        self.shutdown_grace_seconds = shutdown_grace_seconds
        self._tasks: set[asyncio.Task] = set()
        self._closed = False

    @property
    def running(self) -> int:
        """Number of tasks that have not finished yet."""
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task:
        """Start a coroutine in the background.

        Args:
            coro: Coroutine to run
            name: Task name used in logs

        Returns:
            The started task

        Raises:
            RuntimeError: If the supervisor has been shut down
        """
        if self._closed:
            coro.close()
            raise RuntimeError("Task supervisor is shut down")

        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        logfire.info("Background task started", task=name, running=len(self._tasks))
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logfire.warn("Background task cancelled", task=task.get_name())
            return
        error = task.exception()
        if error is not None:
            logfire.error(
                "Background task crashed",
                task=task.get_name(),
                error=str(error),
                error_type=type(error).__name__,
                _exc_info=error,
            )

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for all running tasks to finish.

        Args:
            timeout: Maximum seconds to wait, None waits indefinitely
        """
        if not self._tasks:
            return
        await asyncio.wait(set(self._tasks), timeout=timeout)

    async def shutdown(self) -> None:
        """Refuse new work, wait out the grace period, cancel leftovers."""
        self._closed = True
        await self.drain(timeout=self.shutdown_grace_seconds)

        leftovers = set(self._tasks)
        for task in leftovers:
            task.cancel()
        if leftovers:
            logfire.warn("Cancelling unfinished background tasks", count=len(leftovers))
            await asyncio.gather(*leftovers, return_exceptions=True)
