"""Stages that produce an initial value before they consume any input."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Tuple, Union

from .cont import Cont, Left, MapDone, MapInput, MapYield, Right, chain, once, repeat


class FirstCompletedError(RuntimeError):
    """Raised when a first stage finishes before yielding anything."""


class First(ABC):
    """A computation that yields a value before it needs any input.

    :meth:`first` returns ``Left((yielded, next_stage))`` normally, or
    ``Right(done)`` when the computation finishes straight away.
    """

    @abstractmethod
    def first(self) -> Union[Left, Right]:
        """Run the first step."""

    def _start(self, action: str) -> Tuple[Any, Cont]:
        step = self.first()
        if step.is_right():
            raise FirstCompletedError(
                f"First stage completed immediately, cannot {action}"
            )
        return step.value

    def chain(self, other: Cont) -> "Primed":
        """Chain the following stage with ``other``."""
        value, stage = self._start("chain")
        return Primed(value, chain(stage, other))

    def chain_once(self, f: Callable[[Any], Any]) -> "Primed":
        """Chain with a function applied once."""
        return self.chain(once(f))

    def chain_repeat(self, f: Callable[[Any], Any]) -> "Primed":
        """Chain with a function applied to every later input."""
        return self.chain(repeat(f))

    def map_input(self, f: Callable[[Any], Any]) -> "Primed":
        """Transform inputs before they reach the following stage."""
        value, stage = self._start("map input")
        return Primed(value, MapInput(stage, f))

    def map_yield(self, f: Callable[[Any], Any]) -> "Primed":
        """Transform the initial and every later yielded value."""
        value, stage = self._start("map yield")
        return Primed(f(value), MapYield(stage, f))

    def map_done(self, f: Callable[[Any], Any]) -> "Primed":
        """Transform the final result of the following stage."""
        value, stage = self._start("map done")
        return Primed(value, MapDone(stage, f))


@dataclass
class Primed(First):
    """An initial value paired with the stage that continues from it.

    Unpacks as ``value, stage``.
    """

    value: Any
    stage: Cont

    def __iter__(self) -> Iterator[Any]:
        yield self.value
        yield self.stage

    def first(self) -> Left:
        return Left((self.value, self.stage))


@dataclass
class EitherFirst(First):
    """Chooses between two first stages held in a ``Left`` or ``Right``.

    The following stage is wrapped in the same side, so it keeps delegating
    to the branch that was chosen.
    """

    branch: Union[Left, Right]

    def first(self) -> Union[Left, Right]:
        side = type(self.branch)
        step = self.branch.value.first()
        if step.is_right():
            return step
        value, stage = step.value
        return Left((value, side(stage)))


def first_chain(first: Any, other: Cont) -> Primed:
    """Chain a ``(value, stage)`` pair with ``other``."""
    value, stage = first
    return Primed(value, chain(stage, other))


def first_once(value: Any, f: Callable[[Any], Any]) -> Primed:
    """Yield ``value``, then apply ``f`` once."""
    return Primed(value, once(f))


def first_repeat(value: Any, f: Callable[[Any], Any]) -> Primed:
    """Yield ``value``, then apply ``f`` to every input."""
    return Primed(value, repeat(f))