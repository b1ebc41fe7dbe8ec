"""
Argot eager argument set.

Overview
- ArgumentSet collects every raw token up front, splitting glued key/value
  pairs ("-kVal", "--key=Val") into two adjacent entries, and remembers where
  the keys are. It knows nothing about which keys an application expects; it
  merely parses the raw arguments into a consistent state so they can be
  queried as needed.
- Flags holds both caller-requested parse options and the two bits derived
  while parsing (a help-like key was seen, a version-like key was seen).
- OptionsView is the frozen result of the two-phase resolve() API.

Limits
- at most 15 keys (TooManyKeysError) and 65535 entries (TooManyArgsError);
  construction fails outright past either.

The named/trailing boundary
- a set cannot tell a switch ("--verbose") from an option whose value follows
  it ("--out file") until somebody asks. option() is that question: when the
  value it returns sits past the current boundary, the boundary moves there.
  The boundary never moves back.
- consequence: query every option before reading trailing arguments. Reading
  args() first and an option afterwards means the first read saw a trailing
  slice that was too wide. resolve() packages the correct order.

Quick example
    >>> args = ArgumentSet([b"-v", b"--out", b"dist", b"a.txt"], Flags.HELP)
    >>> args.switch(b"-v")
    True
    >>> args.option(b"--out")
    b'dist'
    >>> args.args()
    (b'a.txt',)
"""
import functools
import logging
import operator
import os
from collections.abc import Sequence
from enum import IntFlag
from types import MappingProxyType
from typing import NamedTuple

from .faults import (
    EmptyError,
    NoArgError,
    NoSubCommandError,
    TooManyArgsError,
    TooManyKeysError,
    WantsDynamicHelp,
    WantsHelp,
    WantsVersion,
)
from .keys import DASH, KeyKind, classify, tokenize
from .sources import LineSource, default_source
from .utils import BoundedList, Unset, escape, fsencode, rename

logger = logging.getLogger(__name__)

KEY_CAPACITY = 15
ARG_CAPACITY = 65535

END = b"--"

_WHITESPACE = frozenset(b" \t\n\r\x0c")


class Flags(IntFlag):
    """
    parse flags.

    caller-requested
    - REQUIRED: an empty set is an error (EmptyError)
    - SUBCOMMAND: the first entry is a subcommand, never a trailing argument
    - DYNAMIC_HELP: help requests name the subcommand they are about
    - HELP: help requests are answered statically (WantsHelp)
    - VERSION: -V/--version is answered (WantsVersion)
    - SEPARATOR: keep whatever follows "--" as one escaped trailing entry

    derived while parsing
    - HAS_HELP: -h or --help was seen
    - HAS_VERSION: -V or --version was seen
    """
    NONE         = 0
    REQUIRED     = 0b0000_0001
    SUBCOMMAND   = 0b0000_0010
    DYNAMIC_HELP = 0b0000_0100
    HELP         = 0b0000_1000
    VERSION      = 0b0001_0000
    HAS_HELP     = 0b0010_0000
    HAS_VERSION  = 0b0100_0000
    SEPARATOR    = 0b1000_0000


_DO_VERSION = Flags.VERSION | Flags.HAS_VERSION
_ANY_HELP = Flags.HELP | Flags.DYNAMIC_HELP


class OptionsView(NamedTuple):
    """
    frozen outcome of ArgumentSet.resolve().

    values maps each requested option (as it was passed) to its value or None;
    args is the trailing slice computed after every option was consumed.
    """
    values: MappingProxyType
    args: tuple

    def __getitem__(self, option, /):
        if isinstance(option, int):
            return tuple.__getitem__(self, option)
        return self.values[option]


def trailing_index(boundary, /, keyed, subcommand=False):
    """
    index of the first trailing entry.

    without any key (and without a subcommand in front), nothing is named, so
    everything is trailing; otherwise trailing arguments start right after the
    boundary.
    """
    if not keyed and not subcommand:
        return 0
    return boundary + 1


def _coerce(token):
    if isinstance(token, str):
        return fsencode(token)
    if isinstance(token, bytearray):
        return bytes(token)
    if isinstance(token, bytes | memoryview):
        return token
    raise TypeError(f"argument tokens must be bytes-like or strings, not {type(token).__name__!r}")


def _needle(key):
    if isinstance(key, str):
        return fsencode(key)
    if isinstance(key, bytes | bytearray | memoryview):
        return bytes(key)
    raise TypeError(f"keys must be bytes or strings, not {type(key).__name__!r}")


def _blank(token):
    return all(byte in _WHITESPACE for byte in token)


def _cut(value, delimiter):
    start = 0
    for index, byte in enumerate(value):
        if byte == delimiter:
            yield value[start:index]
            start = index + 1
    yield value[start:]


def _decoded(name, method, /):
    """build a *_str twin of a single-value accessor."""

    @rename(name)
    def accessor(self, *keys):
        value = method(self, *keys)
        return None if value is None else os.fsdecode(bytes(value))

    accessor.__doc__ = f"{method.__name__}(), decoded with the filesystem encoding."
    return accessor


class ArgumentSet(Sequence):
    """
    an eager, queryable collection of CLI arguments.

    construction
    - ArgumentSet(tokens, flags): tokens is any finite iterable of bytes,
      memoryview or str items (str is re-encoded with utils.fsencode); when
      omitted, the process arguments are read via default_source().
    - leading empty/whitespace-only tokens are dropped; "--" stops parsing.
    - raises TooManyKeysError/TooManyArgsError past the capacity limits, then
      EmptyError or one of the help/version signals (see with_flags()).

    the set also behaves as a read-only sequence of all entries.
    """
    __slots__ = ("_entries", "_keys", "_boundary", "_flags")

    def __init__(self, tokens=Unset, /, flags=Flags.NONE):
        flags = Flags(flags)
        self._entries = []
        self._keys = BoundedList(KEY_CAPACITY, TooManyKeysError)
        self._boundary = 0
        self._flags = Flags.NONE
        self._collect(default_source() if tokens is Unset else tokens, flags)
        logger.debug(
            "collected %d entries (%d keys, boundary %d)",
            len(self._entries), len(self._keys), self._boundary,
        )
        self.with_flags(flags)

    @classmethod
    def from_env(cls, flags=Flags.NONE, /):
        """build a set from the running process's arguments."""
        return cls(default_source(), flags)

    def _collect(self, tokens, flags, /):
        entries = self._entries
        started = False
        iterator = iter(tokens)

        for token in iterator:
            token = _coerce(token)

            if not started:
                if _blank(token):
                    continue
                started = True

            if token == END:
                if flags & Flags.SEPARATOR:
                    remainder = [escape(_coerce(token)) for token in iterator]
                    if remainder:
                        if len(entries) >= ARG_CAPACITY:
                            raise TooManyArgsError
                        entries.append(b" ".join(remainder))
                break

            keyed, key, value = tokenize(token)
            size = 1 if value is None else 2
            if len(entries) + size > ARG_CAPACITY:
                raise TooManyArgsError

            if keyed:
                if value is None:
                    if key == b"-V" or key == b"--version":
                        self._flags |= Flags.HAS_VERSION
                    elif key == b"-h" or key == b"--help":
                        self._flags |= Flags.HAS_HELP
                self._keys.push(len(entries))
                self._boundary = len(entries) + size - 1

            entries.append(key)
            if value is not None:
                entries.append(value)

    def with_flags(self, flags, /):
        """
        merge caller flags and answer help/version requests.

        checks, in order
        - the set is empty and REQUIRED is set -> EmptyError
        - VERSION is set and -V/--version was seen -> WantsVersion
        - HELP or DYNAMIC_HELP is set and -h/--help was seen, or the first
          entry is the word "help" -> WantsHelp (HELP) or
          WantsDynamicHelp(command) (DYNAMIC_HELP only), command being the
          first entry when it is neither a key nor "help"

        returns
        - self, when none of the above applies
        """
        self._flags |= Flags(flags)

        if not self._entries:
            if self._flags & Flags.REQUIRED:
                raise EmptyError
        elif self._flags & _DO_VERSION == _DO_VERSION:
            raise WantsVersion
        elif (signal := self._help()) is not None:
            raise signal

        return self

    def _help(self):
        if not self._flags & _ANY_HELP:
            return None

        command = self._entries[0]
        if not (self._flags & Flags.HAS_HELP or command == b"help"):
            return None

        if self._flags & Flags.HELP:
            return WantsHelp()
        if command and command[0] != DASH and command != b"help":
            return WantsDynamicHelp(command)
        return WantsDynamicHelp()

    def with_list(self):
        """
        append the lines of the file named by -l/--list as trailing entries.

        each trimmed, non-empty line becomes one owned entry. A missing or
        unreadable file is logged and otherwise ignored.
        """
        if (path := self.option2(b"-l", b"--list")) is None:
            return self

        try:
            lines = list(LineSource(path))
        except OSError as error:
            logger.warning("ignoring unreadable list file %r: %s", bytes(path), error)
            return self

        if len(self._entries) + len(lines) > ARG_CAPACITY:
            raise TooManyArgsError
        self._entries.extend(lines)
        logger.debug("appended %d entries from %r", len(lines), bytes(path))
        return self

    @property
    def flags(self):
        return self._flags

    @property
    def boundary(self):
        return self._boundary

    @property
    def keys(self):
        """indexes of the key entries, in CLI order."""
        return tuple(self._keys)

    def take(self):
        """a list holding every entry."""
        return list(self._entries)

    def peek(self):
        """the first entry, or None when the set is empty."""
        return self._entries[0] if self._entries else None

    def peek_unchecked(self):
        """
        the first entry, without the emptiness check.

        the caller must have established that the set is not empty (for
        example with Flags.REQUIRED); an empty set raises IndexError.
        """
        return self._entries[0]

    def subcommand(self):
        """
        the leading subcommand of a set built with Flags.SUBCOMMAND.

        raises
        - NoSubCommandError when the flag is missing, the set is empty or the
          first entry looks like a key.
        """
        if (
            not self._flags & Flags.SUBCOMMAND or
            not self._entries or
            classify(self._entries[0]).kind is not KeyKind.NONE
        ):
            raise NoSubCommandError
        return self._entries[0]

    def _find(self, *needles):
        for index in self._keys:
            if self._entries[index] in needles:
                return index
        return None

    def _consume(self, index):
        value = index + 1
        if value >= len(self._entries):
            return None
        if value > self._boundary:
            logger.debug("boundary advanced from %d to %d", self._boundary, value)
            self._boundary = value
        return self._entries[value]

    def switch(self, key, /):
        """whether key was given."""
        return self._find(_needle(key)) is not None

    def switch2(self, short, long, /):
        """whether either spelling of a key was given."""
        return self._find(_needle(short), _needle(long)) is not None

    def bitflags(self, pairs, /, default=0):
        """
        fold (switch, flag) pairs into one value, OR-ing in the flag of every
        switch that was given.
        """
        return functools.reduce(
            operator.or_,
            (flag for switch, flag in pairs if self.switch(switch)),
            default,
        )

    def option(self, key, /):
        """
        the entry following the first occurrence of key, or None.

        this advances the named/trailing boundary up to the returned value.
        Whether that entry was meant as a value is not checked: ["-a", "-b"]
        gives b"-b" for option(b"-a").
        """
        if (index := self._find(_needle(key))) is None:
            return None
        return self._consume(index)

    def option2(self, short, long, /):
        """option() for whichever spelling of a key appears first."""
        if (index := self._find(_needle(short), _needle(long))) is None:
            return None
        return self._consume(index)

    def option_values(self, key, long=None, /, delimiter=None):
        """
        iterate over the value of every occurrence of an option.

        parameters
        - key, long: one or two spellings of the option
        - delimiter: optional single byte (int, bytes or str) to split each
          value on, e.g. "," turns b"one,two" into b"one" and b"two"

        the boundary advances past each value as it is yielded.
        """
        needles = (_needle(key),) if long is None else (_needle(key), _needle(long))
        if isinstance(delimiter, str | bytes):
            delimiter, = _needle(delimiter)

        for index in tuple(self._keys):
            if self._entries[index] not in needles:
                continue
            if (value := self._consume(index)) is None:
                continue
            if delimiter is None:
                yield value
            else:
                yield from _cut(value, delimiter)

    def _start(self):
        return trailing_index(
            self._boundary,
            keyed=bool(self._keys),
            subcommand=bool(self._flags & Flags.SUBCOMMAND),
        )

    def args(self):
        """the trailing (positional) entries, as a tuple."""
        return tuple(self._entries[self._start():])

    def arg(self, index, /):
        """the index-th trailing entry, or None."""
        if index < 0:
            return None
        index += self._start()
        return self._entries[index] if index < len(self._entries) else None

    def first_arg(self):
        """
        the first trailing entry.

        raises
        - NoArgError when there are no trailing entries.
        """
        if (index := self._start()) >= len(self._entries):
            raise NoArgError
        return self._entries[index]

    def resolve(self, *options):
        """
        two-phase access: consume every option first, then freeze the result.

        each option is a key (bytes/str) or a (short, long) pair. The returned
        OptionsView holds the value of each and the trailing slice computed
        afterwards; neither changes, whatever is queried later.
        """
        values = {}
        for option in options:
            if isinstance(option, tuple):
                values[option] = self.option2(*option)
            else:
                values[option] = self.option(option)
        return OptionsView(MappingProxyType(values), self.args())

    option_str = _decoded("option_str", option)
    option2_str = _decoded("option2_str", option2)
    arg_str = _decoded("arg_str", arg)
    first_arg_str = _decoded("first_arg_str", first_arg)

    def args_str(self):
        """args(), decoded with the filesystem encoding."""
        return tuple(os.fsdecode(bytes(value)) for value in self.args())

    def __getitem__(self, index, /):
        return self._entries[index]

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __eq__(self, other, /):
        if isinstance(other, ArgumentSet):
            return self._entries == other._entries
        if isinstance(other, list | tuple):
            return self._entries == list(other)
        return NotImplemented

    __hash__ = None

    def __rich_repr__(self):
        yield "entries", [bytes(entry) for entry in self._entries]
        yield "keys", [bytes(self._entries[index]) for index in self._keys]
        yield "args", [bytes(entry) for entry in self.args()]
        yield "flags", self._flags

    def __repr__(self):
        return f"{type(self).__name__}({[bytes(entry) for entry in self._entries]!r}, boundary={self._boundary})"


__all__ = (
    "Flags",
    "ArgumentSet",
    "OptionsView",
    "trailing_index",
    "KEY_CAPACITY",
    "ARG_CAPACITY",
)
