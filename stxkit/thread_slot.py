"""A single-task hand-over slot shared between a scheduler and one worker thread."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass
class SlotTask:
    """A task handed to a thread slot: the callable to run and its id."""

    fn: Callable[[], Any]
    id: int = 0


@dataclass(frozen=True)
class SlotQuery:
    """A snapshot of a thread slot's state."""

    can_push: bool = False
    pending_task: int | None = None
    executing_task: int | None = None


class ThreadSlot:
    """Holds at most one pending task and records the one being executed.

    Tasks can be pushed while the worker is still executing the previous one.
    """

    __slots__ = ("promise", "_lock", "_pending_task", "_executing_task")

    def __init__(self, promise: Any = None) -> None:
        self.promise = promise
        self._lock = threading.Lock()
        self._pending_task: SlotTask | None = None
        self._executing_task: int | None = None

    def try_pop_task(self) -> Callable[[], Any] | None:
        """Take the pending task, marking it as executing; None if there is none.

        The previously executing task is considered finished.
        """
        with self._lock:
            self._executing_task = None
            task, self._pending_task = self._pending_task, None
            if task is None:
                return None
            self._executing_task = task.id
            return task.fn

    def push_task(self, task: SlotTask) -> None:
        """Make ``task`` the pending task, replacing any task not yet taken."""
        with self._lock:
            self._pending_task = task

    def query(self) -> SlotQuery:
        """Return a consistent snapshot of the slot's state."""
        with self._lock:
            pending = self._pending_task
            return SlotQuery(
                can_push=pending is None,
                pending_task=None if pending is None else pending.id,
                executing_task=self._executing_task,
            )

    def __repr__(self) -> str:
        return f"ThreadSlot({self.query()!r})"