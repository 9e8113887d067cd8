import asyncio
from unittest.mock import AsyncMock

import pytest

from repo_sandbox.debounce import Debouncer


@pytest.mark.asyncio
async def test_burst_collapses_to_last_call() -> None:
    callback = AsyncMock()
    debouncer = Debouncer(0.02, callback)

    for value in ["o", "oc", "oct", "octo"]:
        debouncer.trigger(value)
    assert debouncer.pending

    await debouncer.wait()

    callback.assert_awaited_once_with("octo")
    assert not debouncer.pending


@pytest.mark.asyncio
async def test_spaced_triggers_each_fire() -> None:
    callback = AsyncMock()
    debouncer = Debouncer(0.01, callback)

    debouncer.trigger("a")
    await debouncer.wait()
    debouncer.trigger("b")
    await debouncer.wait()

    assert [c.args for c in callback.await_args_list] == [("a",), ("b",)]


@pytest.mark.asyncio
async def test_cancel_drops_pending_call() -> None:
    callback = AsyncMock()
    debouncer = Debouncer(0.01, callback)

    debouncer.trigger("a")
    debouncer.cancel()
    await asyncio.sleep(0.03)

    callback.assert_not_awaited()


@pytest.mark.asyncio
async def test_trigger_does_not_cancel_running_callback() -> None:
    started = asyncio.Event()
    release = asyncio.Event()
    finished: list[str] = []

    async def callback(value: str) -> None:
        started.set()
        await release.wait()
        finished.append(value)

    debouncer = Debouncer(0.01, callback)
    debouncer.trigger("first")
    await started.wait()

    debouncer.trigger("second")
    release.set()
    await debouncer.wait()

    assert finished == ["first", "second"]


@pytest.mark.asyncio
async def test_callback_errors_are_logged_not_raised() -> None:
    callback = AsyncMock(side_effect=RuntimeError("boom"))
    debouncer = Debouncer(0.0, callback)

    debouncer.trigger()
    await debouncer.wait()

    callback.assert_awaited_once()


@pytest.mark.asyncio
async def test_aclose_cancels_everything() -> None:
    started = asyncio.Event()

    async def callback() -> None:
        started.set()
        await asyncio.sleep(10)

    debouncer = Debouncer(0.0, callback)
    debouncer.trigger()
    await started.wait()
    debouncer.trigger()

    await debouncer.aclose()

    assert not debouncer.pending
    await debouncer.wait()
