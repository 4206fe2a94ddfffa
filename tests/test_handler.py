from collections import deque

import pytest

from contstage.cont import Right, chain, from_fn, once
from contstage.first import first_once
from contstage.handler import (
    Seed,
    handle,
    handle_async,
    handle_cont_async,
    handle_cont_sync,
    handle_first_async,
    handle_first_sync,
    with_input,
)


def _recorder(responses):
    yields = []
    queue = deque(responses)

    def respond(value):
        yields.append(value)
        return queue.popleft()

    return yields, respond


def _async_recorder(responses):
    yields, respond = _recorder(responses)

    async def respond_async(value):
        return respond(value)

    return yields, respond_async


def test_handle_cont_sync():
    stage = chain(once(lambda v: v + 1), once(lambda v: v * 3))
    yields, respond = _recorder([5, 7])
    assert handle_cont_sync(stage, 1, respond) == 7
    assert yields == [2, 15]


@pytest.mark.asyncio
async def test_handle_cont_async():
    stage = chain(once(lambda v: v + 1), once(lambda v: v * 3))
    yields, respond = _async_recorder([5, 7])
    assert await handle_cont_async(stage, 1, respond) == 7
    assert yields == [2, 15]


def test_handle_first_sync():
    stage = first_once(10, lambda v: v + 2).chain(once(lambda v: v * 3))
    yields, respond = _recorder([5, 6, 7])
    assert handle_first_sync(stage, respond) == 7
    assert yields == [10, 7, 18]


@pytest.mark.asyncio
async def test_handle_first_async():
    stage = first_once(10, lambda v: v + 2).chain(once(lambda v: v * 3))
    yields, respond = _async_recorder([5, 6, 7])
    assert await handle_first_async(stage, respond) == 7
    assert yields == [10, 7, 18]


def test_handle_shortcut_for_first():
    stage = first_once(2, lambda v: v + 1).chain(once(lambda v: v * 2))
    assert handle(stage, lambda v: v + 1) == 11


def test_handle_shortcut_for_cont_with_input_helper():
    assert handle(with_input(1, once(lambda n: n + 2)), lambda v: v + 1) == 4


@pytest.mark.asyncio
async def test_handle_async_shortcut_for_cont_with_input_helper():
    async def respond(value):
        return value + 1

    assert await handle_async(with_input(1, once(lambda n: n + 2)), respond) == 4


def test_seed_that_finishes_immediately_skips_responder():
    calls = []
    stage = with_input(3, from_fn(lambda x: Right(x * 2)))
    assert handle(stage, calls.append) == 6
    assert calls == []


def test_seed_first_yields_then_returns_stage():
    inner = once(lambda n: n * 5)
    value, stage = Seed(inner, 4).first().unwrap_left()
    assert value == 20
    assert stage is inner
    assert stage.next(9).unwrap_right() == 9


def test_seed_cannot_be_started_twice():
    seed = with_input(1, once(lambda n: n))
    assert seed.first().unwrap_left() == (1, seed._stage)
    with pytest.raises(RuntimeError):
        seed.first()