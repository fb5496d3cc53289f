# stxkit

Small building blocks for resource-conscious Python code. The package has no
third-party dependencies.

## Modules

### `stxkit.strings`

- `String` is an immutable owned string. `CStringView(text, size=None)` is a
  view over `text`, or over its first `size` characters. A size larger than the
  text raises `ValueError`.
- Both classes compare equal to each other and to plain `str`. They also
  provide `size`, `len()`, iteration, `is_empty()`, `starts_with()` and
  `ends_with()`.
- Indexing past the end raises `IndexError`. `at(index)` returns `None`
  instead.
- `String.view()` returns a `CStringView`. `String.copy()` returns an
  independent `String`.
- Helper functions:
  - `make(text)` and `make_static(text)` build a `String`.
  - `join(glue, first, second, *args)` and `join_all(glue, strings)` place
    `glue` between neighbouring pieces.
  - `upper(text)` and `lower(text)` convert ASCII letters only.

### `stxkit.vec`

- `Vec` is a growable sequence that records a reserved capacity.
  - `push` grows the capacity at least geometrically, through `grow_vec`.
  - `resize(target_size, fill=None)` pads with `fill` or truncates.
  - `extend`, `pop()` (returns `None` when empty), `copy()`, `reserve` (never
    shrinks), `clear` (keeps capacity), `erase(start, stop)` and
    `at(index)` are also available.
- `FixedVec` has the same interface, but `push` and a growing `resize` raise
  `VecError` once the capacity would be exceeded.
- Factories:
  - `make(capacity=0)` returns an empty `Vec`.
  - `make_copy(items)` returns a `Vec` with exactly enough capacity for
    `items`.
  - `make_fixed(capacity=0)` returns an empty `FixedVec`.

Capacity is bookkeeping: the elements are held in an ordinary list.

### `stxkit.rc`

- `Rc` is a shareable resource holder and `Unique` is a non-shareable one.
  Each holds a `handle` and a `Manager`.
- `Rc.share()` adds a reference.
- `release()` drops this holder's reference. A second call does nothing.
  Using the holder as a context manager releases it on exit.
- `make(value, on_release=None)` builds an `Rc`. Its `RcOperation` calls
  `on_release(value)` once, when the last reference is dropped.
- `make_unique(value, on_release=None)` builds a `Unique`. Its
  `UniqueRcOperation` calls `on_release(value)` on release.
- `make_static(obj)` and `make_unique_static(obj)` wrap objects that live for
  the whole program. Releasing them frees nothing.
- `transmute(target, source)` moves `source`'s manager onto a new holder of
  `target` and leaves `source` released. `cast(converter, source)` does the
  same with `converter(source.handle)`.
- `RefCount` is a thread-safe counter. Its `ref()` and `unref()` return the
  previous count, and `unref()` at zero raises `RuntimeError`.

### `stxkit.thread_slot`

- `ThreadSlot` holds at most one pending `SlotTask(fn, id)` and records the id
  of the task being executed.
- `push_task` sets the pending task.
- `try_pop_task()` returns the pending callable and marks it as executing. It
  returns `None` when nothing is pending.
- `query()` returns a `SlotQuery(can_push, pending_task, executing_task)`
  snapshot.

### `stxkit.timeline`

`ScheduleTimeline` tracks ready tasks as `TimelineTask` records. Timepoints
are integers in nanoseconds.

Each `tick(slots, present_timepoint)` does the following:

1. Polls each task's promise for its `FutureStatus`.
2. Makes suspended tasks whose `SuspendState` is back to executing ready
   again.
3. Drops completed and canceled tasks.
4. Selects the most starved tasks. The starvation window is
   `STARVATION_PERIOD_NS`, and it is widened when there are not enough
   tasks to fill the slots.
5. Orders the selection by `TaskPriority` (`NORMAL`, `INTERACTIVE`,
   `CRITICAL`).
6. Asks the tasks it did not select to preempt.
7. Pushes selected tasks onto free slots, unless they are already in a slot.

`slots` may hold `ThreadSlot` objects or `Rc` holders of them.

## Example

```python
from stxkit import strings, vec, rc
from stxkit.thread_slot import ThreadSlot
from stxkit.timeline import FutureStatus, ScheduleTimeline, SuspendState, TaskPriority

assert strings.join(" ", "Hello,", "Beautiful", "World!") == "Hello, Beautiful World!"
assert strings.upper("Hello, World!") == "HELLO, WORLD!"

v = vec.make(0)
v.push(1)
v.push(2)
assert v.pop() == 2

fixed = vec.make_fixed(1)
fixed.push("a")
try:
    fixed.push("b")
except vec.VecError:
    pass

released = []
handle = rc.make("resource", released.append)
other = handle.share()
handle.release()
other.release()
assert released == ["resource"]


class Promise:
    def __init__(self):
        self.status = FutureStatus.PREEMPTED
        self.preempt_requested = False

    def notify_preempted(self):
        self.status = FutureStatus.PREEMPTED

    def fetch_status(self):
        return self.status

    def fetch_suspend_request(self):
        return SuspendState.EXECUTING

    def request_preempt(self):
        self.preempt_requested = True

    def clear_preempt_request(self):
        self.preempt_requested = False


timeline = ScheduleTimeline()
for task_id in (1, 2, 3, 4):
    timeline.add_task(lambda: None, Promise(), task_id, TaskPriority.NORMAL, 0)

slots = [ThreadSlot() for _ in range(4)]
timeline.tick(slots[:2], 0)
assert slots[0].query().pending_task == 1
assert slots[1].query().pending_task == 2
assert slots[2].query().can_push

task = slots[0].try_pop_task()
task()
assert slots[0].query().executing_task == 1
```

## What this package does not do

- `ScheduleTimeline` only decides which tasks go to which slots. The package
  starts no worker threads and has no scheduler loop that calls `tick`.
- It provides no promise or future type. The objects given to `add_task` must
  supply `notify_preempted`, `fetch_status`, `fetch_suspend_request`,
  `request_preempt` and `clear_preempt_request`, and their owner reports
  status changes through them.

## Installation and tests

```
pip install ".[test]"
pytest
```