"""
Argot utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the eager set, the stream and the faults.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/b"".

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated accessors for clean tracebacks.

- BoundedList
  • A list with a hard capacity; push() past capacity raises instead of growing.

- fsencode(text)
  • os.fsencode() that never fails on lone surrogates.

- escape(token)
  • Crude single-quote shell escaping used to re-glue the tokens after an "--".

Stability and contract
- Names not in __all__ are internal and may change without notice.
"""
import builtins
import functools
import os
import string
from collections.abc import Sequence
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable and a singleton per process.
    """

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or b"" are preserved as-is; only Unset is
    replaced.

    Examples
    - coalesce(b"--key", None) -> b"--key"
    - coalesce(Unset, ())      -> ()
    - coalesce(None, ())       -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


class BoundedList(Sequence):
    """
    A small list that refuses to grow past a fixed capacity.

    contract
    - push(item) appends and returns the new length, or raises `overflow`
      (an exception type or instance given at construction) once the list
      already holds `capacity` items. Nothing is appended on failure.
    - read-only Sequence protocol otherwise (len, indexing, iteration, `in`).
    """
    __slots__ = ("_items", "_capacity", "_overflow")

    def __init__(self, capacity, /, overflow=OverflowError):
        if not isinstance(capacity, int) or capacity < 0:
            raise ValueError("BoundedList() capacity must be a non-negative integer")
        self._items = []
        self._capacity = capacity
        self._overflow = overflow

    @property
    def capacity(self):
        return self._capacity

    def push(self, item, /):
        if len(self._items) >= self._capacity:
            raise self._overflow
        self._items.append(item)
        return len(self._items)

    def __getitem__(self, index, /):
        return self._items[index]

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def __eq__(self, other, /):
        if isinstance(other, BoundedList):
            return self._items == other._items
        if isinstance(other, list | tuple):
            return self._items == list(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self):
        return f"BoundedList({self._items!r}, capacity={self._capacity})"


def fsencode(text, /):
    """
    Recover the raw bytes of an OS string.

    os.fsencode() undoes surrogateescape; lone surrogates it cannot map back
    (e.g. "\\ud800") are kept through surrogatepass instead of raising.
    """
    try:
        return os.fsencode(text)
    except UnicodeEncodeError:
        return text.encode("utf-8", "surrogatepass")


_SAFE = frozenset((string.ascii_letters + string.digits + "-_=/,.+").encode("ascii"))


def escape(token, /):
    """
    Crude reverse-parser that quotes a token for a POSIX shell.

    adjustments
    - backslashes become forward slashes;
    - single quotes are escaped with a backslash;
    - the result is wrapped in single quotes when the token is empty or
      contains anything other than `A-Z`, `a-z`, `0-9`, `-`, `_`, `=`, `/`,
      `,`, `.` or `+`.

    this favours speed over robustness; do not feed it anything fancier than
    ordinary CLI arguments.

    returns
    - bytes (always a fresh, owned buffer)
    """
    output = bytearray()
    quote = not token
    for byte in token:
        if byte == 0x5C:  # \
            output.append(0x2F)
        elif byte == 0x27:  # '
            output += b"\\'"
            quote = True
        else:
            output.append(byte)
            if byte not in _SAFE:
                quote = True
    if quote:
        return b"'" + bytes(output) + b"'"
    return bytes(output)


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "rename",
    "BoundedList",
    "escape",
    "fsencode",
)
