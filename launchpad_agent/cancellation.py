"""Cooperative cancellation for the agent loop."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Coroutine, TypeVar

from .errors import AgentCancelledError

T = TypeVar("T")


@dataclass
class CancellationToken:
    """Token the caller uses to stop a running agent loop.

    The loop checks the token before each model request and before each tool
    batch, and routes the in-flight request through run() so cancel() can
    interrupt it mid-flight.

    Usage:
        token = CancellationToken()
        task = asyncio.create_task(run_agent(api, messages, cancel_token=token))

        # Later, from a key handler or another task:
        token.cancel()
    """

    _event: asyncio.Event = field(default_factory=asyncio.Event)
    _current_task: asyncio.Task[Any] | None = field(default=None, init=False)

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation and interrupt the in-flight operation, if any."""
        self._event.set()
        if self._current_task and not self._current_task.done():
            self._current_task.cancel()

    def raise_if_cancelled(self) -> None:
        if self.is_cancelled:
            raise AgentCancelledError("Operation cancelled by user")

    async def run(self, coro: Coroutine[Any, Any, T]) -> T:
        """Run coroutine as a task that cancel() can interrupt.

        Raises:
            AgentCancelledError: cancel() was called before or during execution
        """
        if self.is_cancelled:
            coro.close()
            raise AgentCancelledError("Operation cancelled by user")

        task: asyncio.Task[T] = asyncio.create_task(coro)
        self._current_task = task
        try:
            return await task
        except asyncio.CancelledError:
            if self.is_cancelled:
                raise AgentCancelledError("Operation cancelled by user") from None
            raise
        finally:
            self._current_task = None
