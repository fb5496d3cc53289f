"""A starvation-aware timeline that assigns ready tasks to thread slots."""

from __future__ import annotations

import enum
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from .rc import Rc
from .thread_slot import SlotQuery, SlotTask, ThreadSlot

# Length of one starvation window, in nanoseconds.
STARVATION_PERIOD_NS = 64_000_000


class TaskPriority(enum.IntEnum):
    """Hints to executors about how urgently a task should run."""

    NORMAL = 0
    # results the user is waiting to observe, e.g. image or texture loading
    INTERACTIVE = 1
    # tasks such as saving user data
    CRITICAL = 255


class FutureStatus(enum.Enum):
    """The state a task's promise reports."""

    EXECUTING = "executing"
    PREEMPTED = "preempted"
    SUSPENDED = "suspended"
    CANCELED = "canceled"
    COMPLETED = "completed"


class SuspendState(enum.Enum):
    """Whether a task has been asked to suspend or to keep executing."""

    EXECUTING = "executing"
    SUSPENDED = "suspended"


class _TaskPromise(Protocol):
    def notify_preempted(self) -> None: ...

    def fetch_status(self) -> FutureStatus: ...

    def fetch_suspend_request(self) -> SuspendState: ...

    def request_preempt(self) -> None: ...

    def clear_preempt_request(self) -> None: ...


@dataclass
class TimelineTask:
    """A ready, preempted or suspended task tracked by the timeline."""

    fn: Callable[[], Any]
    promise: _TaskPromise
    id: int = 0
    priority: int = TaskPriority.NORMAL
    # when the task became ready to execute (or to resume), in nanoseconds
    last_preempt_timepoint: int = 0
    last_status_poll: FutureStatus = FutureStatus.PREEMPTED


def _is_done(task: TimelineTask) -> bool:
    return task.last_status_poll in (FutureStatus.COMPLETED, FutureStatus.CANCELED)


def _is_hungry(task: TimelineTask) -> bool:
    return task.last_status_poll in (FutureStatus.PREEMPTED, FutureStatus.EXECUTING)


def _slot_of(slot: ThreadSlot | Rc[ThreadSlot]) -> ThreadSlot:
    return slot.handle if isinstance(slot, Rc) else slot


def _shared_fn(fn: Any) -> Any:
    return fn.share() if isinstance(fn, Rc) else fn


class ScheduleTimeline:
    """Selects the most starved tasks, ordered by priority, for the available slots."""

    def __init__(self) -> None:
        self.starvation_timeline: list[TimelineTask] = []
        self.thread_slots_capture: list[SlotQuery] = []

    def add_task(
        self,
        fn: Callable[[], Any],
        promise: _TaskPromise,
        task_id: int,
        priority: int,
        present_timepoint: int,
    ) -> None:
        """Add a task that is ready to execute; it starts out preempted."""
        promise.notify_preempted()
        self.starvation_timeline.append(
            TimelineTask(
                fn,
                promise,
                task_id,
                priority,
                present_timepoint,
                FutureStatus.PREEMPTED,
            )
        )

    def poll_tasks(self, present_timepoint: int) -> None:
        """Refresh every task's status, noting when a task has just been preempted."""
        for task in self.starvation_timeline:
            new_status = task.promise.fetch_status()
            if (
                task.last_status_poll is not FutureStatus.PREEMPTED
                and new_status is FutureStatus.PREEMPTED
            ):
                task.last_preempt_timepoint = present_timepoint
            task.last_status_poll = new_status

    def execute_resume_requests(self) -> None:
        """Make suspended tasks whose suspension was lifted ready again."""
        for task in self.starvation_timeline:
            if (
                task.last_status_poll is FutureStatus.SUSPENDED
                and task.promise.fetch_suspend_request() is SuspendState.EXECUTING
            ):
                task.promise.notify_preempted()

    def remove_done_tasks(self) -> None:
        """Drop completed and canceled tasks."""
        self.starvation_timeline = [
            task for task in self.starvation_timeline if not _is_done(task)
        ]

    def select_tasks_for_slots(self, num_slots: int) -> int:
        """Reorder the timeline so the chosen tasks come first; return how many were chosen."""
        starving = sorted(
            (task for task in self.starvation_timeline if _is_hungry(task)),
            key=lambda task: task.last_preempt_timepoint,
        )
        rest = [task for task in self.starvation_timeline if not _is_hungry(task)]

        if not starving:
            self.starvation_timeline = rest
            return 0

        most_starved = starving[0].last_preempt_timepoint
        period_span = STARVATION_PERIOD_NS
        selection = 0

        for task in starving:
            diff = task.last_preempt_timepoint - most_starved
            if diff <= period_span:
                selection += 1
            elif selection < num_slots:
                # widen the window by whole periods until it covers this task
                multiplier = (diff + STARVATION_PERIOD_NS - 1) // STARVATION_PERIOD_NS
                period_span += STARVATION_PERIOD_NS * multiplier
                selection += 1
            else:
                break

        selected = sorted(
            starving[:selection], key=lambda task: task.priority, reverse=True
        )
        self.starvation_timeline = selected + starving[selection:] + rest
        return min(num_slots, selection)

    def tick(
        self,
        slots: Sequence[ThreadSlot | Rc[ThreadSlot]],
        present_timepoint: int,
    ) -> None:
        """Run one scheduling round, pushing selected tasks onto free slots."""
        thread_slots = [_slot_of(slot) for slot in slots]
        num_slots = len(thread_slots)
        self.thread_slots_capture = [slot.query() for slot in thread_slots]

        self.poll_tasks(present_timepoint)
        self.execute_resume_requests()
        self.remove_done_tasks()

        if not self.starvation_timeline:
            return

        num_selected = self.select_tasks_for_slots(num_slots)

        for task in self.starvation_timeline[num_selected:]:
            task.promise.request_preempt()

        next_slot = 0
        for task in self.starvation_timeline[:num_selected]:
            has_slot = any(
                query.executing_task == task.id or query.pending_task == task.id
                for query in self.thread_slots_capture
            )
            if has_slot:
                continue

            while next_slot < num_slots and not has_slot:
                if self.thread_slots_capture[next_slot].can_push:
                    task.promise.clear_preempt_request()
                    thread_slots[next_slot].push_task(
                        SlotTask(_shared_fn(task.fn), task.id)
                    )
                    has_slot = True
                next_slot += 1