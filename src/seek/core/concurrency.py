"""Concurrency control utilities for async operations."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from seek.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ConcurrencyLimiter:
    """Semaphore-backed limit on simultaneously running tasks."""

    max_concurrent: int
    _semaphore: asyncio.Semaphore = field(init=False)
    _running: int = field(default=0)

    def __post_init__(self) -> None:
        if self.max_concurrent < 1:
            raise ValueError("max_concurrent must be >= 1")
        self._semaphore = asyncio.Semaphore(self.max_concurrent)

    async def __aenter__(self) -> "ConcurrencyLimiter":
        await self._semaphore.acquire()
        self._running += 1
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self._semaphore.release()
        self._running -= 1

    @property
    def running(self) -> int:
        """Get number of running tasks."""
        return self._running


class TaskPool:
    """Bounded pool of independent tasks joined at a barrier.

    Each batch operation creates its own pool. Tasks beyond the limit wait for a slot; the
    limit never changes what a task computes, only when it starts.
    """

    def __init__(self, max_concurrent: int = 10):
        """Initialize task pool.

        Args:
            max_concurrent: Maximum concurrent tasks.
        """
        self._limiter = ConcurrencyLimiter(max_concurrent)
        self._tasks: list[asyncio.Task] = []

    def submit(self, coro: Callable[..., Awaitable[Any]], *args, **kwargs) -> asyncio.Task:
        """Schedule ``coro(*args, **kwargs)`` once a slot is free.

        Returns:
            Task object.
        """

        async def _wrapped() -> Any:
            async with self._limiter:
                return await coro(*args, **kwargs)

        task = asyncio.create_task(_wrapped())
        self._tasks.append(task)
        return task

    async def join(self, *, timeout: float | None = None) -> tuple[set[asyncio.Task], set[asyncio.Task]]:
        """Wait until every task reaches a terminal state.

        On ``timeout`` the unfinished tasks are cancelled and returned as pending. If the
        caller itself is cancelled, every task is cancelled and awaited before the
        cancellation propagates.

        Returns:
            ``(done, pending)`` task sets.
        """

        if not self._tasks:
            return set(), set()

        try:
            done, pending = await asyncio.wait(self._tasks, timeout=timeout)
        except asyncio.CancelledError:
            self.cancel_all()
            await asyncio.gather(*self._tasks, return_exceptions=True)
            raise

        if pending:
            logger.warning("Task pool deadline reached", extra={"pending": len(pending), "timeout": timeout})
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
        return done, pending

    def cancel_all(self) -> None:
        """Cancel all pending tasks."""
        for task in self._tasks:
            if not task.done():
                task.cancel()

    @property
    def active_count(self) -> int:
        """Get number of running tasks."""
        return self._limiter.running
