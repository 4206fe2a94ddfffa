"""Drive stages to completion by answering each yielded value."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Union

from .cont import Cont, Left, Right
from .first import First


class Seed(First):
    """A stage bundled with its first input, so it can be driven as a first stage."""

    def __init__(self, stage: Cont, value: Any) -> None:
        self._stage = stage
        self._value = value
        self._used = False

    def first(self) -> Union[Left, Right]:
        if self._used:
            raise RuntimeError("seed input must exist")
        self._used = True
        value, self._value = self._value, None
        step = self._stage.next(value)
        if step.is_left():
            return Left((step.value, self._stage))
        return step


def with_input(value: Any, stage: Cont) -> Seed:
    """Bundle ``stage`` with the input it starts from."""
    return Seed(stage, value)


def handle_cont_sync(stage: Cont, value: Any, responder: Callable[[Any], Any]) -> Any:
    """Feed ``value`` to ``stage`` and answer each yield until it finishes."""
    while True:
        step = stage.next(value)
        if step.is_right():
            return step.value
        value = responder(step.value)


def handle_first_sync(stage: First, responder: Callable[[Any], Any]) -> Any:
    """Start a first stage and answer each yield until it finishes."""
    step = stage.first()
    if step.is_right():
        return step.value
    yielded, following = step.value
    return handle_cont_sync(following, responder(yielded), responder)


async def handle_cont_async(
    stage: Cont, value: Any, responder: Callable[[Any], Awaitable[Any]]
) -> Any:
    """Like :func:`handle_cont_sync`, awaiting each answer."""
    while True:
        step = stage.next(value)
        if step.is_right():
            return step.value
        value = await responder(step.value)


async def handle_first_async(
    stage: First, responder: Callable[[Any], Awaitable[Any]]
) -> Any:
    """Like :func:`handle_first_sync`, awaiting each answer."""
    step = stage.first()
    if step.is_right():
        return step.value
    yielded, following = step.value
    value = await responder(yielded)
    return await handle_cont_async(following, value, responder)


def handle(stage: First, responder: Callable[[Any], Any]) -> Any:
    """Drive a first stage to completion with synchronous answers."""
    return handle_first_sync(stage, responder)


async def handle_async(
    stage: First, responder: Callable[[Any], Awaitable[Any]]
) -> Any:
    """Drive a first stage to completion with awaited answers."""
    return await handle_first_async(stage, responder)