"""
Argot faults (errors and signals) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault. Codes are
  grouped by domain to keep logs/searches predictable.
- ArgotFault: base type carrying a message and knowing its exit code and how
  to render itself through rich.
- ArgotError / ArgotSignal: failures (exit code 1) versus control-flow signals
  (help/version, exit code 0) that travel through the same channel.
- trigger(): central entry point to surface a fault (raise it, or print it and
  exit when running as a shell tool).

Exit codes
- WantsHelp, WantsVersion, WantsDynamicHelp -> 0
- Passthru -> its own code
- everything else -> 1

Integration
- the host application may define, in its __main__ module:
  • __prog__: program name shown in rendered headers;
  • __styles__: rich style overrides (see ArgotFault.__rich__);
  • __codes__: FaultCode -> label remapping (see FaultCode.normalize).
"""
import copy
import logging
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

logger = logging.getLogger(__name__)

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - collection (2110x): EMPTY, NO_ARG, NO_SUBCOMMAND
    - capacity (2111x): TOO_MANY_KEYS, TOO_MANY_ARGS
    - keywords (2112x): INVALID_KEY, DUPLICATE_KEY
    - host (2113x): CUSTOM, PASSTHRU
    - signals (2200x): WANTS_HELP, WANTS_VERSION, WANTS_DYNAMIC_HELP
    """
    # --- collection (21xxx) ---
    EMPTY              = 21101
    NO_ARG             = 21102
    NO_SUBCOMMAND      = 21103

    # --- capacity (21xxx) ---
    TOO_MANY_KEYS      = 21111
    TOO_MANY_ARGS      = 21112

    # --- keywords (21xxx) ---
    INVALID_KEY        = 21121
    DUPLICATE_KEY      = 21122

    # --- host (21xxx) ---
    CUSTOM             = 21131
    PASSTHRU           = 21132

    # --- signals (22xxx) ---
    WANTS_HELP         = 22001
    WANTS_VERSION      = 22002
    WANTS_DYNAMIC_HELP = 22003

    def normalize(self):
        """
        return a host-normalized string for this code (see __codes__ in __main__).
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ArgotFault(Exception):
    """
    base of every fault raised by argot.

    attributes
    - message: human-readable text ("" for silent faults)
    - code: FaultCode
    - exit_code: process exit code a shell tool should use
    - options: rendering options merged in by trigger()
    """
    code = Unset
    title = "fault"
    default = ""

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = coalesce(message, self.default)
        self.options = MappingProxyType(options)
        super().__init__(self.message)

    @property
    def exit_code(self):
        return 1

    def __eq__(self, other, /):
        if type(self) is not type(other):
            return NotImplemented
        return self.args == other.args

    def __hash__(self):
        return hash((type(self), self.args))

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "title": "bold #FF4DA6",
            "message": "#C8C8D0",
        } | getattr(main, "__styles__", {}))

        def text(fragment, style):
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        prog = getattr(main, "__prog__", Unset)
        header = Text.assemble(
            "[ ",
            *((text(prog, "prog-name"), " — ") if prog else ()),
            text(self.code.normalize(), "code"),
            " | ",
            text(self.title.title(), "title"),
            " ]",
        )
        message = text(self.message, "message")

        if fancy:
            return Panel(message, title=header, title_align="left")
        return Group(header, message)

    def __trigger__(self):
        if not self.options.get("shell"):
            raise self from None
        if self.message:
            console.print(self)
        logger.debug("exiting with %d after %s", self.exit_code, type(self).__name__)
        sys.exit(self.exit_code)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        clone = copy.copy(self)
        clone.args = self.args
        clone.options = MappingProxyType({**self.options, **overrides})
        return clone


class ArgotError(ArgotFault):
    """a genuine failure; exit code 1."""
    title = "error"


class ArgotSignal(ArgotFault):
    """
    control flow travelling through the error channel; not a failure.

    callers are expected to catch these, print their help/version screen and
    exit cleanly.
    """
    title = "signal"

    @property
    def exit_code(self):
        return 0


class EmptyError(ArgotError):
    code = FaultCode.EMPTY
    title = "empty"
    default = "Missing options, flags, arguments, and/or ketchup."


class NoArgError(ArgotError):
    code = FaultCode.NO_ARG
    title = "no argument"
    default = "Missing required trailing argument."


class NoSubCommandError(ArgotError):
    code = FaultCode.NO_SUBCOMMAND
    title = "no subcommand"
    default = "Missing/invalid subcommand."


class TooManyKeysError(ArgotError):
    code = FaultCode.TOO_MANY_KEYS
    title = "too many keys"
    default = "Too many keys."


class TooManyArgsError(ArgotError):
    code = FaultCode.TOO_MANY_ARGS
    title = "too many arguments"
    default = "Too many arguments."


class InvalidKeyError(ArgotError):
    code = FaultCode.INVALID_KEY
    title = "invalid key"

    def __init__(self, key, /, **options):
        self.key = key
        super().__init__(f"Invalid key: {key}", **options)


class DuplicateKeyError(ArgotError):
    code = FaultCode.DUPLICATE_KEY
    title = "duplicate key"

    def __init__(self, key, /, **options):
        self.key = key
        super().__init__(f"Duplicate key: {key}", **options)


class CustomError(ArgotError):
    code = FaultCode.CUSTOM
    title = "error"

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError("CustomError() message must be a string")
        super().__init__(message, **options)


class Passthru(ArgotFault):
    """
    a silent failure with its own exit code (no message is ever printed).
    """
    code = FaultCode.PASSTHRU
    title = "passthru"

    def __init__(self, code, /, **options):
        if not isinstance(code, int) or isinstance(code, bool):
            raise TypeError("Passthru() code must be an integer")
        self.status = code
        super().__init__(**options)
        self.args = (code,)

    @property
    def exit_code(self):
        return self.status


class WantsHelp(ArgotSignal):
    code = FaultCode.WANTS_HELP
    title = "help"


class WantsVersion(ArgotSignal):
    code = FaultCode.WANTS_VERSION
    title = "version"


class WantsDynamicHelp(ArgotSignal):
    """
    help was requested, possibly for a subcommand.

    command is the inferred subcommand (bytes) or None for top-level help.
    """
    code = FaultCode.WANTS_DYNAMIC_HELP
    title = "help"

    def __init__(self, command=None, /, **options):
        self.command = None if command is None else bytes(command)
        super().__init__(**options)
        self.args = (self.command,)


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ArgotFault).
    - options are merged into a copy of the fault via __replace__() before triggering.
    - shell=True renders the message (if any) through the rich console and
      exits with fault.exit_code; otherwise the fault is raised.

    typical options
    - shell, fancy, colorful
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "ArgotFault",
    "ArgotError",
    "ArgotSignal",
    "EmptyError",
    "NoArgError",
    "NoSubCommandError",
    "TooManyKeysError",
    "TooManyArgsError",
    "InvalidKeyError",
    "DuplicateKeyError",
    "CustomError",
    "Passthru",
    "WantsHelp",
    "WantsVersion",
    "WantsDynamicHelp",
    "trigger",
)
