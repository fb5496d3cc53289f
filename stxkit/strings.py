"""Read-only strings, string views and helpers that build new strings."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Union

_ASCII_UPPER = str.maketrans(
    "abcdefghijklmnopqrstuvwxyz", "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
)
_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


def _char_at(text: str, index: int) -> str | None:
    if 0 <= index < len(text):
        return text[index]
    return None


class _TextSequence:
    """Shared behaviour of read-only character sequences."""

    __slots__ = ("_text",)

    def __init__(self, text: str = "") -> None:
        self._text = text

    def __str__(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def __iter__(self) -> Iterator[str]:
        return iter(self._text)

    def __bool__(self) -> bool:
        return bool(self._text)

    def __getitem__(self, index: int) -> str:
        if not 0 <= index < len(self._text):
            raise IndexError(
                f"index {index} out of range for sequence of size {len(self._text)}"
            )
        return self._text[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (_TextSequence, str)):
            return self._text == str(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._text)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._text!r})"

    @property
    def size(self) -> int:
        """Number of characters in the sequence."""
        return len(self._text)


class CStringView(_TextSequence):
    """A non-owning view over text, optionally limited to its first ``size`` characters."""

    __slots__ = ()

    def __init__(self, text: str = "", size: int | None = None) -> None:
        text = str(text)
        if size is not None:
            if not 0 <= size <= len(text):
                raise ValueError(
                    f"view size {size} exceeds text of length {len(text)}"
                )
            text = text[:size]
        super().__init__(text)

    def is_empty(self) -> bool:
        """Return True when the view holds no characters."""
        return not self._text

    def at(self, index: int) -> str | None:
        """Return the character at ``index``, or None when it is out of range."""
        return _char_at(self._text, index)

    def starts_with(self, other: StringLike) -> bool:
        """Return True if the view begins with ``other`` (text or a character)."""
        return self._text.startswith(str(other))

    def ends_with(self, other: StringLike) -> bool:
        """Return True if the view ends with ``other`` (text or a character)."""
        return self._text.endswith(str(other))


class String(_TextSequence):
    """An owned, immutable string that can be compared with views and plain text."""

    __slots__ = ()

    def __init__(self, text: str = "") -> None:
        super().__init__(str(text))

    def is_empty(self) -> bool:
        """Return True when the string holds no characters."""
        return not self._text

    def at(self, index: int) -> str | None:
        """Return the character at ``index``, or None when it is out of range."""
        return _char_at(self._text, index)

    def starts_with(self, other: StringLike) -> bool:
        """Return True if the string begins with ``other`` (text or a character)."""
        return self._text.startswith(str(other))

    def ends_with(self, other: StringLike) -> bool:
        """Return True if the string ends with ``other`` (text or a character)."""
        return self._text.endswith(str(other))

    def view(self) -> CStringView:
        """Return a view over the whole string."""
        return CStringView(self._text)

    def copy(self) -> String:
        """Return an independent string with the same contents."""
        return String(self._text)


StringLike = Union[str, String, CStringView]


def make(text: StringLike) -> String:
    """Create a string holding a copy of ``text``."""
    return String(str(text))


def make_static(text: StringLike) -> String:
    """Create a string that refers to ``text`` without copying it."""
    return String(str(text))


def join(glue: StringLike, first: StringLike, second: StringLike, *args: StringLike) -> String:
    """Join two or more pieces of text, placing ``glue`` between neighbours."""
    return join_all(glue, (first, second, *args))


def join_all(glue: StringLike, strings: Iterable[StringLike]) -> String:
    """Join every item of ``strings``, placing ``glue`` between neighbours."""
    return String(str(glue).join(str(item) for item in strings))


def upper(text: StringLike) -> String:
    """Return a copy of ``text`` with ASCII letters converted to upper case."""
    return String(str(text).translate(_ASCII_UPPER))


def lower(text: StringLike) -> String:
    """Return a copy of ``text`` with ASCII letters converted to lower case."""
    return String(str(text).translate(_ASCII_LOWER))