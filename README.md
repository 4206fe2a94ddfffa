# contstage

Small stateful computations ("stages") that take an input and either yield an
intermediate value or finish with a final result. Stages can be chained,
mapped and driven to completion by a responder function that you supply.

Every step returns one of two values, both from `contstage.cont`:

- `Left(y)`: the stage yielded `y` and expects more input.
- `Right(d)`: the stage is done, with result `d`.

Both have `is_left()`, `is_right()`, `unwrap_left()` and `unwrap_right()`;
unwrapping the wrong side raises `ValueError`. The wrapped value is also
available as `.value`.

## Installation

```
pip install contstage
```

## Building stages (`contstage.cont`)

```python
from contstage.cont import once, repeat, chain

doubler = repeat(lambda x: x * 2)
assert doubler.next(5).unwrap_left() == 10
assert doubler.next(3).unwrap_left() == 6   # never finishes on its own

stage = once(lambda x: x + 10)
assert stage.next(5).unwrap_left() == 15
assert stage.next(3).unwrap_right() == 3    # done: hands back the input

pipeline = chain(once(lambda v: v + 1), once(lambda v: v * 2))
assert pipeline.next(2).unwrap_left() == 3
assert pipeline.next(3).unwrap_left() == 6
assert pipeline.next(4).unwrap_right() == 4
```

- `once(f)` / `Once`: applies `f` to the first input, then finishes with each
  later input.
- `repeat(f)` / `Repeat`: applies `f` to every input.
- `chain(first, second)` / `Chain`: runs `first` until it finishes, then feeds
  its result to `second` and delegates to it from then on.
- `from_fn(f)` / `FnCont`: a stage from a function that returns `Left` or
  `Right` itself.

Every stage derives from the abstract base `Cont` and has the methods `chain`,
`chain_once`, `chain_repeat`, `map_input`, `map_yield` and `map_done`:

```python
stage = (
    chain(once(lambda v: v + 1), once(lambda v: v * 2))
    .map_done(lambda done: f"resume={done}")
)
assert stage.next(5).unwrap_left() == 6
assert stage.next(6).unwrap_left() == 12
assert stage.next(7).unwrap_right() == "resume=7"
```

`Left(stage)` and `Right(stage)` are themselves stages: their `next` delegates
to the stage they hold, which lets one of two branches be picked at run time.

### Sharing a stage between threads

`Locked(stage)` guards a stage with a lock. If the wrapped stage raises, the
lock becomes poisoned (`locked.poisoned` is then true) and every later call to
`next` raises `PoisonError`. `locked.poison()` marks it poisoned by hand.

## Stages with an initial value (`contstage.first`)

A `First` yields a value before it needs any input. `first()` returns
`Left((value, next_stage))`, or `Right(done)` if it finishes straight away.

- `first_once(value, f)` and `first_repeat(value, f)` build a `Primed`: a
  value paired with the stage that continues from it. A `Primed` unpacks as
  `value, stage`.
- `first_chain((value, stage), other)` chains such a pair with `other`.
- `EitherFirst(Left(a))` or `EitherFirst(Right(b))` picks one of two first
  stages; the following stage comes back wrapped in the same side.

`First` has `chain`, `chain_once`, `chain_repeat`, `map_input`, `map_yield` and
`map_done`, each returning a new `Primed`. `map_yield` is also applied to the
initial value. If the first stage finishes at once, these raise
`FirstCompletedError`.

```python
from contstage.cont import once
from contstage.first import first_once

initial, rest = (
    first_once(5, lambda n: n + 2)
    .chain(once(lambda n: n * 2))
    .map_input(int)
    .map_yield(lambda v: f"value={v}")
    .map_done(lambda r: f"done={r}")
)
assert initial == "value=5"
assert rest.next("7").unwrap_left() == "value=9"
assert rest.next("8").unwrap_left() == "value=16"
assert rest.next("9").unwrap_right() == "done=9"
```

## Driving a stage to completion (`contstage.handler`)

`handle(stage, responder)` starts a first stage, passes each yielded value to
the responder, and feeds the responder's answer back in as the next input,
until the stage finishes; it returns the final result.

```python
from contstage.cont import once
from contstage.first import first_once
from contstage.handler import handle, with_input

pipeline = first_once(2, lambda n: n + 1).chain(once(lambda n: n * 2))
assert handle(pipeline, lambda y: y + 1) == 11

assert handle(with_input(1, once(lambda n: n + 2)), lambda y: y + 1) == 4
```

- `with_input(value, stage)` returns a `Seed`, which turns an ordinary stage
  and its first input into a first stage. A `Seed` can be started only once;
  a second `first()` raises `RuntimeError`.
- `handle_first_sync(stage, responder)` is what `handle` calls.
- `handle_cont_sync(stage, value, responder)` drives an ordinary stage from
  the input `value`.

The async forms `handle_async`, `handle_first_async` and `handle_cont_async`
take a responder that returns an awaitable:

```python
import asyncio
from contstage.cont import once
from contstage.handler import handle_async, with_input

async def respond(value):
    return value + 1

result = asyncio.run(handle_async(with_input(1, once(lambda n: n + 2)), respond))
assert result == 4
```

## Running the tests

```
pip install -e ".[test]"
pytest
```