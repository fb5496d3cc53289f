"""Reference-counted and uniquely owned resources with pluggable lifetime managers."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any, Generic, Protocol, TypeVar

T = TypeVar("T")
U = TypeVar("U")


class ManagerHandle(Protocol):
    """Anything that can be referenced and unreferenced."""

    def ref(self) -> None: ...

    def unref(self) -> None: ...


class _TallyManagerHandle:
    """A handle that manages nothing; it only tallies the operations it receives."""

    __slots__ = ("_name", "refs", "unrefs", "_lock")

    def __init__(self, name: str) -> None:
        self._name = name
        self.refs = 0
        self.unrefs = 0
        self._lock = threading.Lock()

    def ref(self) -> None:
        with self._lock:
            self.refs += 1

    def unref(self) -> None:
        with self._lock:
            self.unrefs += 1

    def __repr__(self) -> str:
        return f"<{self._name}>"


_STUB_HANDLE = _TallyManagerHandle("manager stub")
_STATIC_STORAGE_HANDLE = _TallyManagerHandle("static storage manager")


class RefCount:
    """A thread-safe counter whose operations return the value held before them."""

    __slots__ = ("_count", "_lock")

    def __init__(self, initial_ref_count: int = 0) -> None:
        if initial_ref_count < 0:
            raise ValueError(
                f"reference count must not be negative, got {initial_ref_count}"
            )
        self._count = initial_ref_count
        self._lock = threading.Lock()

    @property
    def count(self) -> int:
        """The present reference count."""
        with self._lock:
            return self._count

    def ref(self) -> int:
        """Increment the count and return its previous value."""
        with self._lock:
            previous = self._count
            self._count += 1
            return previous

    def unref(self) -> int:
        """Decrement the count and return its previous value."""
        with self._lock:
            previous = self._count
            if previous == 0:
                raise RuntimeError("reference count is already zero")
            self._count -= 1
            return previous


class Manager:
    """Dispatches reference operations to a manager handle; a stub by default."""

    __slots__ = ("handle",)

    def __init__(self, handle: ManagerHandle | None = None) -> None:
        self.handle: ManagerHandle = _STUB_HANDLE if handle is None else handle

    def ref(self) -> None:
        """Add a reference to the managed resource."""
        self.handle.ref()

    def unref(self) -> None:
        """Drop a reference to the managed resource."""
        self.handle.unref()

    @property
    def is_stub(self) -> bool:
        """True when the manager manages nothing."""
        return self.handle is _STUB_HANDLE

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Manager):
            return self.handle is other.handle
        return NotImplemented

    def __hash__(self) -> int:
        return id(self.handle)

    def __repr__(self) -> str:
        return f"Manager({self.handle!r})"


def _stub_manager() -> Manager:
    return Manager(_STUB_HANDLE)


def _static_storage_manager() -> Manager:
    return Manager(_STATIC_STORAGE_HANDLE)


class RcOperation:
    """Runs ``operation`` once, when the last reference is dropped."""

    __slots__ = ("ref_count", "operation")

    def __init__(self, initial_ref_count: int, operation: Callable[[], Any]) -> None:
        self.ref_count = RefCount(initial_ref_count)
        self.operation = operation

    def ref(self) -> None:
        """Add a reference."""
        self.ref_count.ref()

    def unref(self) -> None:
        """Drop a reference, running the operation if it was the last one."""
        if self.ref_count.unref() == 1:
            self.operation()


class UniqueRcOperation:
    """Runs ``operation`` on every unref; references only tallied, never counted down."""

    __slots__ = ("operation", "ref_calls")

    def __init__(self, operation: Callable[[], Any]) -> None:
        self.operation = operation
        self.ref_calls = 0

    def ref(self) -> None:
        """Record a reference; ownership stays unique."""
        self.ref_calls += 1

    def unref(self) -> None:
        """Run the operation."""
        self.operation()


class _Owner(Generic[T]):
    """Common state of resource holders: a handle and the manager keeping it alive."""

    __slots__ = ("handle", "manager", "_released")

    def __init__(self, handle: T, manager: Manager) -> None:
        self.handle = handle
        self.manager = manager
        self._released = False

    @property
    def released(self) -> bool:
        """True once the reference has been released or moved out."""
        return self._released

    def _drop(self) -> None:
        if self._released:
            return
        self._released = True
        manager, self.manager = self.manager, _stub_manager()
        manager.unref()

    def _take_manager(self) -> Manager:
        if self._released:
            raise RuntimeError("resource has already been released")
        self._released = True
        manager, self.manager = self.manager, _stub_manager()
        return manager

    def __enter__(self):
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._drop()

    def __repr__(self) -> str:
        state = "released" if self._released else "live"
        return f"{type(self).__name__}({self.handle!r}, {state})"


class Rc(_Owner[T]):
    """A reference-counted resource handle that can be shared."""

    __slots__ = ()

    def share(self) -> Rc[T]:
        """Return a new reference to the same resource."""
        if self._released:
            raise RuntimeError("cannot share a released resource")
        self.manager.ref()
        return Rc(self.handle, Manager(self.manager.handle))

    def release(self) -> None:
        """Drop this reference; releasing again has no effect."""
        self._drop()


class Unique(_Owner[T]):
    """A uniquely owned resource handle; it cannot be shared."""

    __slots__ = ()

    def release(self) -> None:
        """Give up ownership; releasing again has no effect."""
        self._drop()


def transmute(target: U, source: Rc[Any] | Unique[Any]) -> Rc[U] | Unique[U]:
    """Move ``source``'s manager onto a new holder of ``target``.

    The result is of the same kind as ``source``, which is left released.
    """
    if not isinstance(source, (Rc, Unique)):
        raise TypeError(f"expected Rc or Unique, got {type(source).__name__}")
    kind = type(source)
    return kind(target, source._take_manager())


def cast(converter: Callable[[Any], U], source: Rc[Any] | Unique[Any]) -> Rc[U] | Unique[U]:
    """Convert ``source``'s handle with ``converter`` and transmute onto the result."""
    if not isinstance(source, (Rc, Unique)):
        raise TypeError(f"expected Rc or Unique, got {type(source).__name__}")
    return transmute(converter(source.handle), source)


def _release_operation(value: T, on_release: Callable[[T], Any] | None) -> Callable[[], None]:
    def operation() -> None:
        if on_release is not None:
            on_release(value)

    return operation


def make(value: T, on_release: Callable[[T], Any] | None = None) -> Rc[T]:
    """Wrap ``value`` in a counted resource; ``on_release(value)`` runs when the last reference goes."""
    manager = Manager(RcOperation(0, _release_operation(value, on_release)))
    manager.ref()
    return Rc(value, manager)


def make_static(obj: T) -> Rc[T]:
    """Wrap an object that lives for the whole program; releasing it frees nothing."""
    manager = _static_storage_manager()
    manager.ref()
    return Rc(obj, manager)


def make_unique(value: T, on_release: Callable[[T], Any] | None = None) -> Unique[T]:
    """Wrap ``value`` in a uniquely owned resource; ``on_release(value)`` runs on release."""
    manager = Manager(UniqueRcOperation(_release_operation(value, on_release)))
    manager.ref()
    return Unique(value, manager)


def make_unique_static(obj: T) -> Unique[T]:
    """Wrap an object that lives for the whole program as a unique resource."""
    manager = _static_storage_manager()
    manager.ref()
    return Unique(obj, manager)