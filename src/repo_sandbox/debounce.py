# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/repo_sandbox

import asyncio
from typing import Any, Awaitable, Callable

from loguru import logger


class Debouncer:
    """Collapses bursts of triggers into a single delayed call.

    Only the arguments of the last trigger within the quiet period are used.
    A call whose delay has elapsed is detached and runs to completion even if
    new triggers arrive.
    """

    def __init__(self, delay: float, callback: Callable[..., Awaitable[Any]]):
        """Initializes the Debouncer.

        Args:
            delay: Quiet period in seconds.
            callback: Coroutine function invoked once the quiet period elapses.
        """
        self.delay = delay
        self._callback = callback
        self._pending: asyncio.Task[None] | None = None
        self._fired: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> bool:
        """Whether a call is scheduled and still waiting out its delay."""
        return self._pending is not None and not self._pending.done()

    def trigger(self, *args: Any) -> None:
        """Schedules the callback, replacing any pending call."""
        self.cancel()
        self._pending = asyncio.create_task(self._run(args))

    def cancel(self) -> None:
        """Drops the pending call, if any. Fired calls are not affected."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def wait(self) -> None:
        """Waits for the pending call and every fired call to finish."""
        while True:
            tasks = set(self._fired)
            if self._pending is not None:
                tasks.add(self._pending)
            tasks = {t for t in tasks if not t.done()}
            if not tasks:
                return
            await asyncio.wait(tasks)

    async def aclose(self) -> None:
        """Cancels the pending call and every fired call."""
        tasks = set(self._fired)
        if self._pending is not None:
            tasks.add(self._pending)
        self._pending = None
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.wait(tasks)

    async def _run(self, args: tuple[Any, ...]) -> None:
        await asyncio.sleep(self.delay)

        # Detach so later triggers no longer cancel this call
        task = asyncio.current_task()
        if task is self._pending:
            self._pending = None
        if task is not None:
            self._fired.add(task)
            task.add_done_callback(self._fired.discard)

        try:
            await self._callback(*args)
        except Exception as e:
            logger.error(f"Debounced call failed: {e}")
