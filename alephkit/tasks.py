"""Stoppable asyncio tasks and the set of subtasks an authority runs in a session."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any

log = logging.getLogger("aleph-party")


async def _wait_done(future: asyncio.Future) -> None:
    """Wait until ``future`` finishes in any way, without cancelling it."""
    await asyncio.wait({future})


class Task:
    """A running task that can be stopped, or awaited until it stops by itself.

    ``exit`` is the future the task watches; setting it tells the task to finish.
    """

    def __init__(self, handle: Awaitable[Any], exit: asyncio.Future) -> None:
        self._handle = asyncio.ensure_future(handle)
        self._exit = exit

    @property
    def handle(self) -> asyncio.Future:
        return self._handle

    async def _finish(self) -> None:
        await _wait_done(self._handle)
        if not self._handle.cancelled():
            self._handle.exception()

    async def stop(self) -> None:
        """Signal the task to exit and wait for it to finish."""
        if self._exit.done():
            log.warning("Failed to send exit signal to authority: the receiver is gone")
        else:
            self._exit.set_result(None)
        await self._finish()

    async def stopped(self) -> None:
        """Wait until the task ends on its own."""
        await self._finish()


class AuthorityTask:
    """The authority task of one session, tagged with the node's index."""

    def __init__(self, handle: Awaitable[Any], node_id: Any, exit: asyncio.Future) -> None:
        self._task = Task(handle, exit)
        self.node_id = node_id

    async def stop(self) -> None:
        await self._task.stop()

    async def stopped(self) -> Any:
        """Wait until the task ends and return its node index, so it can be restarted."""
        await self._task.stopped()
        return self.node_id


class Subtasks:
    """All the subtasks needed to take part in a session as an authority."""

    def __init__(
        self,
        exit: asyncio.Future,
        member: Task,
        aggregator: Task,
        forwarder: Task,
        refresher: Task,
        data_store: Task,
    ) -> None:
        self._exit = exit
        # Member and aggregator use the forwarder, so they must be stopped first.
        self._tasks = (member, aggregator, forwarder, refresher, data_store)

    async def _stop(self) -> None:
        for task in self._tasks:
            await task.stop()

    async def failed(self) -> bool:
        """Wait until exit is signalled or a subtask ends; return True for the latter."""
        exit_waiter = asyncio.ensure_future(_wait_done(self._exit))
        stop_waiters = [asyncio.ensure_future(task.stopped()) for task in self._tasks]
        done, pending = await asyncio.wait(
            {exit_waiter, *stop_waiters}, return_when=asyncio.FIRST_COMPLETED
        )
        for waiter in pending:
            waiter.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        result = exit_waiter not in done
        await self._stop()
        return result


@dataclass(frozen=True)
class SubtaskCommon:
    """Arguments shared by all subtasks of a session."""

    spawn_handle: Any
    session_id: int