"""Growable and fixed-capacity sequences that keep track of their reserved capacity."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class VecError(Exception):
    """Raised when there is not enough capacity for an insertion."""

    def __init__(self, message: str = "out of memory") -> None:
        super().__init__(message)


def grow_vec(capacity: int, target_size: int) -> int:
    """Return the capacity needed to hold ``target_size`` elements.

    The capacity is kept if it is already large enough; otherwise it is at
    least doubled.
    """
    if capacity >= target_size:
        return capacity
    return max(capacity << 1, target_size)


def _check_capacity(capacity: int) -> None:
    if capacity < 0:
        raise ValueError(f"capacity must not be negative, got {capacity}")


class VecBase(Generic[T]):
    """A contiguous sequence of elements with an explicit reserved capacity."""

    __slots__ = ("_items", "_capacity")

    def __init__(self, items: Iterable[T] = (), capacity: int = 0) -> None:
        _check_capacity(capacity)
        self._items: list[T] = list(items)
        self._capacity = max(capacity, len(self._items))

    @property
    def size(self) -> int:
        """Number of elements held."""
        return len(self._items)

    @property
    def capacity(self) -> int:
        """Number of elements that fit without growing the storage."""
        return self._capacity

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __getitem__(self, index: int) -> T:
        if not 0 <= index < len(self._items):
            raise IndexError(
                f"index {index} out of range for sequence of size {len(self._items)}"
            )
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, VecBase):
            return self._items == other._items
        if isinstance(other, list):
            return self._items == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._items!r}, capacity={self._capacity})"

    def is_empty(self) -> bool:
        """Return True when no elements are held."""
        return not self._items

    def at(self, index: int) -> T | None:
        """Return the element at ``index``, or None when it is out of range."""
        if 0 <= index < len(self._items):
            return self._items[index]
        return None

    def reserve(self, capacity: int) -> None:
        """Ensure room for at least ``capacity`` elements; never shrinks."""
        _check_capacity(capacity)
        if capacity > self._capacity:
            self._capacity = capacity

    def clear(self) -> None:
        """Remove every element; the capacity is unchanged."""
        self._items.clear()

    def erase(self, start: int, stop: int) -> None:
        """Remove the elements in ``[start, stop)``, moving later ones forward."""
        if not 0 <= start <= stop <= len(self._items):
            raise IndexError("erase operation out of Vec range")
        del self._items[start:stop]

    def _fill_to(self, target_size: int, fill: Any) -> None:
        previous = len(self._items)
        if target_size > previous:
            self._items.extend([fill] * (target_size - previous))
        else:
            del self._items[target_size:]

    def _pop_last(self) -> T | None:
        if not self._items:
            return None
        return self._items.pop()


class Vec(VecBase[T]):
    """A growable sequence whose capacity grows geometrically as elements are added."""

    __slots__ = ()

    def push(self, value: T) -> None:
        """Append ``value``, growing the capacity if needed."""
        self.reserve(grow_vec(self._capacity, len(self._items) + 1))
        self._items.append(value)

    def resize(self, target_size: int, fill: Any = None) -> None:
        """Grow with copies of ``fill`` or shrink to exactly ``target_size`` elements."""
        if target_size < 0:
            raise ValueError(f"size must not be negative, got {target_size}")
        if target_size > len(self._items):
            self.reserve(grow_vec(self._capacity, target_size))
        self._fill_to(target_size, fill)

    def extend(self, items: Iterable[T]) -> None:
        """Append every element of ``items``."""
        new_items = list(items)
        self.reserve(len(self._items) + len(new_items))
        self._items.extend(new_items)

    def pop(self) -> T | None:
        """Remove and return the last element, or None when empty."""
        return self._pop_last()

    def copy(self) -> Vec[T]:
        """Return an independent vec with the same elements and capacity."""
        return Vec(self._items, self._capacity)


class FixedVec(VecBase[T]):
    """A sequence whose pushes and resizes never exceed its reserved capacity."""

    __slots__ = ()

    def push(self, value: T) -> None:
        """Append ``value``; raise VecError when the capacity is exhausted."""
        if self._capacity < len(self._items) + 1:
            raise VecError()
        self._items.append(value)

    def resize(self, target_size: int, fill: Any = None) -> None:
        """Resize within the capacity; raise VecError when it would be exceeded."""
        if target_size < 0:
            raise ValueError(f"size must not be negative, got {target_size}")
        if target_size > len(self._items) and target_size > self._capacity:
            raise VecError()
        self._fill_to(target_size, fill)

    def extend(self, items: Iterable[T]) -> None:
        """Append every element of ``items``, reserving room for them."""
        new_items = list(items)
        self.reserve(len(self._items) + len(new_items))
        self._items.extend(new_items)

    def pop(self) -> T | None:
        """Remove and return the last element, or None when empty."""
        return self._pop_last()

    def copy(self) -> FixedVec[T]:
        """Return an independent fixed vec with the same elements and capacity."""
        return FixedVec(self._items, self._capacity)


def make(capacity: int = 0) -> Vec[Any]:
    """Create an empty vec with room for ``capacity`` elements."""
    return Vec((), capacity)


def make_copy(items: Iterable[T]) -> Vec[T]:
    """Create a vec holding a copy of ``items`` with exactly enough capacity."""
    elements = list(items)
    vec: Vec[T] = Vec((), len(elements))
    vec.extend(elements)
    return vec


def make_fixed(capacity: int = 0) -> FixedVec[Any]:
    """Create an empty fixed vec that can hold ``capacity`` elements."""
    return FixedVec((), capacity)