"""Composable stateful stages that consume input and yield or finish."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union


class Cont(ABC):
    """A resumable computation.

    Each call to :meth:`next` returns ``Left(yielded)`` to keep going or
    ``Right(done)`` once the computation has finished.
    """

    @abstractmethod
    def next(self, value: Any) -> Union["Left", "Right"]:
        """Feed one input and return ``Left(yield)`` or ``Right(done)``."""

    def chain(self, other: "Cont") -> "Chain":
        """Run this stage to completion, then feed its result to ``other``."""
        return Chain(self, other)

    def chain_once(self, f: Callable[[Any], Any]) -> "Chain":
        """Chain with a function applied once."""
        return Chain(self, Once(f))

    def chain_repeat(self, f: Callable[[Any], Any]) -> "Chain":
        """Chain with a function applied on every later input."""
        return Chain(self, Repeat(f))

    def map_input(self, f: Callable[[Any], Any]) -> "MapInput":
        """Transform inputs before they reach this stage."""
        return MapInput(self, f)

    def map_yield(self, f: Callable[[Any], Any]) -> "MapYield":
        """Transform yielded values."""
        return MapYield(self, f)

    def map_done(self, f: Callable[[Any], Any]) -> "MapDone":
        """Transform the final result."""
        return MapDone(self, f)


@dataclass(frozen=True, eq=True)
class Left(Cont):
    """The "continue" side of a step result; also a stage that delegates to its value."""

    value: Any

    def is_left(self) -> bool:
        return True

    def is_right(self) -> bool:
        return False

    def unwrap_left(self) -> Any:
        return self.value

    def unwrap_right(self) -> Any:
        raise ValueError(f"called unwrap_right on Left({self.value!r})")

    def next(self, value: Any) -> Union["Left", "Right"]:
        return self.value.next(value)


@dataclass(frozen=True, eq=True)
class Right(Cont):
    """The "done" side of a step result; also a stage that delegates to its value."""

    value: Any

    def is_left(self) -> bool:
        return False

    def is_right(self) -> bool:
        return True

    def unwrap_left(self) -> Any:
        raise ValueError(f"called unwrap_left on Right({self.value!r})")

    def unwrap_right(self) -> Any:
        return self.value

    def next(self, value: Any) -> Union[Left, "Right"]:
        return self.value.next(value)


class PoisonError(Exception):
    """Raised when a locked stage is used after a failure left it poisoned."""

    def __init__(self, message: str = "lock was poisoned") -> None:
        super().__init__(message)


class FnCont(Cont):
    """A stage backed by a function that returns ``Left`` or ``Right`` itself."""

    def __init__(self, f: Callable[[Any], Union[Left, Right]]) -> None:
        self.f = f

    def next(self, value: Any) -> Union[Left, Right]:
        return self.f(value)


class Locked(Cont):
    """A stage guarded by a lock, usable from several threads.

    If the wrapped stage raises, the lock becomes poisoned and every later
    call raises :class:`PoisonError`.
    """

    def __init__(self, stage: Cont) -> None:
        self._stage = stage
        self._lock = threading.Lock()
        self._poisoned = False

    @property
    def poisoned(self) -> bool:
        return self._poisoned

    def poison(self) -> None:
        """Mark the lock as poisoned."""
        with self._lock:
            self._poisoned = True

    def next(self, value: Any) -> Union[Left, Right]:
        with self._lock:
            if self._poisoned:
                raise PoisonError()
            try:
                return self._stage.next(value)
            except BaseException:
                self._poisoned = True
                raise


class Repeat(Cont):
    """Applies a function to every input and never finishes on its own."""

    def __init__(self, f: Callable[[Any], Any]) -> None:
        self.f = f

    def next(self, value: Any) -> Left:
        return Left(self.f(value))


class Once(Cont):
    """Applies a function to the first input, then finishes with each later input."""

    def __init__(self, f: Callable[[Any], Any]) -> None:
        self._f: Optional[Callable[[Any], Any]] = f

    def next(self, value: Any) -> Union[Left, Right]:
        f, self._f = self._f, None
        if f is None:
            return Right(value)
        return Left(f(value))


class Chain(Cont):
    """Runs the first stage to completion, then hands its result to the second."""

    def __init__(self, first: Cont, second: Cont) -> None:
        self._first: Optional[Cont] = first
        self.second = second

    def next(self, value: Any) -> Union[Left, Right]:
        if self._first is not None:
            step = self._first.next(value)
            if step.is_left():
                return step
            self._first = None
            value = step.value
        return self.second.next(value)


@dataclass
class MapInput(Cont):
    """Transforms inputs before passing them to the wrapped stage."""

    stage: Cont
    f: Callable[[Any], Any] = field(repr=False)

    def next(self, value: Any) -> Union[Left, Right]:
        return self.stage.next(self.f(value))


@dataclass
class MapYield(Cont):
    """Transforms values yielded by the wrapped stage."""

    stage: Cont
    f: Callable[[Any], Any] = field(repr=False)

    def next(self, value: Any) -> Union[Left, Right]:
        step = self.stage.next(value)
        if step.is_left():
            return Left(self.f(step.value))
        return step


@dataclass
class MapDone(Cont):
    """Transforms the final result of the wrapped stage."""

    stage: Cont
    f: Callable[[Any], Any] = field(repr=False)

    def next(self, value: Any) -> Union[Left, Right]:
        step = self.stage.next(value)
        if step.is_right():
            return Right(self.f(step.value))
        return step


def from_fn(f: Callable[[Any], Union[Left, Right]]) -> FnCont:
    """Make a stage from a function returning ``Left`` or ``Right``."""
    return FnCont(f)


def once(f: Callable[[Any], Any]) -> Once:
    """Make a stage that applies ``f`` once, then finishes."""
    return Once(f)


def repeat(f: Callable[[Any], Any]) -> Repeat:
    """Make a stage that applies ``f`` to every input."""
    return Repeat(f)


def chain(first: Cont, second: Cont) -> Chain:
    """Run ``first`` to completion, then feed its result to ``second``."""
    return Chain(first, second)