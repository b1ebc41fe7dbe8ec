"""
Argot argument sources.

An argument source yields the raw argument tokens of the running process,
once each, in their original order, excluding the program path.

Sources
- ArgvSource: portable; re-encodes sys.argv[1:] with os.fsencode, which
  recovers the original bytes (including undecodable ones) as owned bytes.
- CmdlineSource: zero-copy; reads /proc/self/cmdline into one buffer and
  yields memoryview slices over it. Only usable where the capability check
  CmdlineSource.available() passes.
- default_source(): the zero-copy source when available, the portable one
  otherwise.
- LineSource: the line-oriented file reader behind ArgumentSet.with_list();
  yields each trimmed, non-empty line as owned bytes.
"""
import functools
import logging
import os
import sys
from typing import Protocol, runtime_checkable

from .utils import fsencode

logger = logging.getLogger(__name__)

_CMDLINE = "/proc/self/cmdline"


@runtime_checkable
class ArgumentSource(Protocol):
    def __iter__(self): ...


class ArgvSource:
    """
    portable source over sys.argv (or any given argv-like list).

    argv[0] is always skipped; the remaining items may be str (decoded with
    the filesystem encoding and surrogateescape, as sys.argv is) or bytes.
    """
    __slots__ = ("_argv",)

    def __init__(self, argv=None, /):
        self._argv = sys.argv if argv is None else argv

    def __iter__(self):
        for argument in self._argv[1:]:
            yield fsencode(argument)

    def __repr__(self):
        return f"{type(self).__name__}({self._argv[1:]!r})"


class CmdlineSource:
    """
    zero-copy source over the kernel's copy of the process arguments.

    the whole of /proc/self/cmdline is read once; every token is a memoryview
    over that single buffer. Interpreter options and the script path precede
    the program's own arguments there, so only the trailing len(sys.argv) - 1
    entries are yielded.
    """
    __slots__ = ("_buffer", "_count")

    def __init__(self, path=_CMDLINE, /, count=None):
        with open(path, "rb") as stream:
            self._buffer = stream.read()
        self._count = len(sys.argv) - 1 if count is None else count

    @staticmethod
    @functools.cache
    def _procfs():
        if not sys.platform.startswith("linux"):
            return False
        return os.access(_CMDLINE, os.R_OK)

    @classmethod
    def available(cls):
        """
        capability check: procfs is readable and agrees with sys.argv.

        only the platform/procfs probe is cached; the comparison with sys.argv
        runs on every call.
        """
        if not cls._procfs():
            return False
        try:
            tokens = [bytes(token) for token in cls()]
        except OSError:
            return False
        expected = [fsencode(argument) for argument in sys.argv[1:]]
        return tokens == expected

    def __iter__(self):
        if self._count <= 0:
            return
        view = memoryview(self._buffer)
        offsets = []
        start = 0
        while start < len(self._buffer):
            end = self._buffer.find(b"\0", start)
            if end == -1:
                end = len(self._buffer)
            offsets.append((start, end))
            start = end + 1
        for start, end in offsets[-self._count:]:
            yield view[start:end]

    def __repr__(self):
        return f"{type(self).__name__}(count={self._count})"


def default_source():
    """
    pick the best argument source for this platform.
    """
    if CmdlineSource.available():
        logger.debug("using the zero-copy %s argument source", _CMDLINE)
        return CmdlineSource()
    logger.debug("using the portable sys.argv argument source")
    return ArgvSource()


class LineSource:
    """
    yields the trimmed, non-empty lines of a text file as owned bytes.

    the file is opened lazily, on iteration; OSError propagates to the caller.
    """
    __slots__ = ("_path",)

    def __init__(self, path, /):
        self._path = os.fsdecode(bytes(path)) if isinstance(path, bytes | bytearray | memoryview) else os.fspath(path)

    @property
    def path(self):
        return self._path

    def __iter__(self):
        with open(self._path, "rb") as stream:
            for line in stream:
                if line := line.strip():
                    yield line

    def __repr__(self):
        return f"{type(self).__name__}({self._path!r})"


__all__ = (
    "ArgumentSource",
    "ArgvSource",
    "CmdlineSource",
    "LineSource",
    "default_source",
)
