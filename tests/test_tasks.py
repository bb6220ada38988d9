import asyncio
import logging

import pytest

from alephkit.tasks import AuthorityTask, SubtaskCommon, Subtasks, Task


def _exit_future():
    return asyncio.get_running_loop().create_future()


def _waiting_task(record, name):
    exit_future = _exit_future()

    async def body():
        await exit_future
        record.append(name)

    return Task(body(), exit_future)


@pytest.mark.asyncio
async def test_stop_signals_exit_and_waits():
    record = []
    task = _waiting_task(record, "member")
    await asyncio.wait_for(task.stop(), 1)
    assert record == ["member"]
    assert task.handle.done()


@pytest.mark.asyncio
async def test_stop_swallows_task_error():
    exit_future = _exit_future()

    async def body():
        await exit_future
        raise RuntimeError("boom")

    task = Task(body(), exit_future)
    result = await asyncio.wait_for(task.stop(), 1)
    assert result is None
    assert exit_future.done()
    error = task.handle.exception()
    assert isinstance(error, RuntimeError)
    assert str(error) == "boom"


@pytest.mark.asyncio
async def test_stop_warns_when_exit_cannot_be_sent(caplog):
    exit_future = _exit_future()
    exit_future.cancel()

    async def body():
        return None

    task = Task(body(), exit_future)
    with caplog.at_level(logging.WARNING, logger="aleph-party"):
        await asyncio.wait_for(task.stop(), 1)
    assert any("Failed to send exit signal" in r.getMessage() for r in caplog.records)
    assert task.handle.done()


@pytest.mark.asyncio
async def test_stopped_returns_when_task_ends_itself():
    async def body():
        return None

    task = Task(body(), _exit_future())
    await asyncio.wait_for(task.stopped(), 1)
    assert task.handle.done()


@pytest.mark.asyncio
async def test_authority_task_stopped_returns_node_id():
    async def body():
        return None

    task = AuthorityTask(body(), 3, _exit_future())
    assert await asyncio.wait_for(task.stopped(), 1) == 3


@pytest.mark.asyncio
async def test_authority_task_stop():
    record = []
    exit_future = _exit_future()

    async def body():
        await exit_future
        record.append("authority")

    task = AuthorityTask(body(), 5, exit_future)
    await asyncio.wait_for(task.stop(), 1)
    assert record == ["authority"]
    assert exit_future.done()
    assert await asyncio.wait_for(task.stopped(), 1) == 5


def _subtasks(record, exit_future, failing=None):
    names = ["member", "aggregator", "forwarder", "refresher", "data_store"]
    tasks = []
    for name in names:
        if name == failing:
            async def ends():
                record.append("failed")

            tasks.append(Task(ends(), _exit_future()))
        else:
            tasks.append(_waiting_task(record, name))
    return Subtasks(exit_future, *tasks)


@pytest.mark.asyncio
async def test_failed_is_false_on_exit_and_stops_in_order():
    record = []
    exit_future = _exit_future()
    subtasks = _subtasks(record, exit_future)
    asyncio.get_running_loop().call_soon(exit_future.set_result, None)
    assert await asyncio.wait_for(subtasks.failed(), 1) is False
    assert record == ["member", "aggregator", "forwarder", "refresher", "data_store"]


@pytest.mark.asyncio
async def test_failed_is_true_when_subtask_ends():
    record = []
    subtasks = _subtasks(record, _exit_future(), failing="forwarder")
    assert await asyncio.wait_for(subtasks.failed(), 1) is True
    assert record[0] == "failed"
    assert record[1:] == ["member", "aggregator", "refresher", "data_store"]


def test_subtask_common_fields():
    common = SubtaskCommon(spawn_handle="handle", session_id=7)
    assert common.session_id == 7
    assert common == SubtaskCommon("handle", 7)