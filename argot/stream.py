"""
Argot streaming argument iterator.

Overview
- KeywordRegistry: an immutable set of declared keywords (subcommands,
  switches and options), validated as they are declared.
- ArgumentStream: a single-pass iterator that classifies each raw token
  against a registry and yields one Argument at a time. Nothing is collected
  up front and nothing is searched afterwards; the price is that every
  keyword worth recognising must be declared before iteration starts.
- Argument variants: Command, Key, KeyWithValue, Other, InvalidUtf8, End.

Per token
- tokens that are not well-formed strings come out as InvalidUtf8(raw bytes);
- empty tokens are skipped;
- "--" ends the stream; whatever follows is handed over untouched in a
  single End(...) item (nothing follows: the stream simply stops);
- exact keyword matches win; otherwise "-kVal" is tried as "-k" and
  "--key=Val" as "--key";
- an option given without a glued value takes the next token as its value;
- anything else is Other(token).

Quick example
    >>> stream = ArgumentStream(["--threads=4", "build"]).with_options(["--threads"])
    >>> list(stream)
    [KeyWithValue(name='--threads', value='4'), Other(value='build')]
"""
import logging
import string
import sys
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from .faults import DuplicateKeyError, InvalidKeyError
from .utils import Unset, fsencode

logger = logging.getLogger(__name__)

END = "--"

_ALNUM = frozenset(string.ascii_letters + string.digits)
_KEYWORD = _ALNUM | {"-", "_"}


class KeywordKind(Enum):
    COMMAND = "command"
    KEY = "key"
    KEY_WITH_VALUE = "key-with-value"


def valid_command(keyword, /):
    """
    a subcommand starts with an ASCII letter or digit, followed by any number
    of ASCII letters, digits, "-" or "_".
    """
    return bool(keyword) and keyword[0] in _ALNUM and all(char in _KEYWORD for char in keyword[1:])


def valid_key(keyword, /):
    """
    a key is either "-" plus one ASCII letter/digit, or "--" plus an ASCII
    letter/digit followed by any number of ASCII letters, digits, "-" or "_".
    """
    if keyword.startswith("--"):
        return valid_command(keyword[2:])
    if keyword.startswith("-"):
        return len(keyword) == 2 and keyword[1] in _ALNUM
    return False


class KeywordRegistry:
    """
    an immutable, validated set of keywords.

    every with_* call returns a new registry; the receiver is left untouched.

    raises
    - InvalidKeyError for a malformed keyword
    - DuplicateKeyError for a keyword already declared, whatever its kind

    blank keywords (after trimming) are ignored.
    """
    __slots__ = ("_keywords",)

    def __init__(self, keywords=Unset, /):
        self._keywords = MappingProxyType(dict(keywords) if keywords is not Unset else {})

    def _insert(self, keyword, kind, valid):
        if not isinstance(keyword, str):
            raise TypeError("keywords must be strings")
        if not (keyword := keyword.strip()):
            return self
        if not valid(keyword):
            raise InvalidKeyError(keyword)
        if keyword in self._keywords:
            raise DuplicateKeyError(keyword)
        return type(self)({**self._keywords, keyword: kind})

    def with_command(self, keyword, /):
        return self._insert(keyword, KeywordKind.COMMAND, valid_command)

    def with_key(self, keyword, /, value=False):
        kind = KeywordKind.KEY_WITH_VALUE if value else KeywordKind.KEY
        return self._insert(keyword, kind, valid_key)

    def with_commands(self, keywords, /):
        registry = self
        for keyword in keywords:
            registry = registry.with_command(keyword)
        return registry

    def with_keys(self, pairs, /):
        """declare (keyword, takes_value) pairs."""
        registry = self
        for keyword, value in pairs:
            registry = registry.with_key(keyword, value)
        return registry

    def with_switches(self, keywords, /):
        return self.with_keys((keyword, False) for keyword in keywords)

    def with_options(self, keywords, /):
        return self.with_keys((keyword, True) for keyword in keywords)

    def get(self, keyword, default=None, /):
        return self._keywords.get(keyword, default)

    def find(self, token, /):
        """
        match a token against the registry.

        returns
        - (keyword, kind) for an exact match, or for a key glued to its value
          ("-kVal" -> "-k", "--key=Val" -> "--key"); None otherwise.
        """
        if not token or not (token[0] == "-" or token[0] in _ALNUM):
            return None
        if (kind := self._keywords.get(token)) is not None:
            return token, kind

        if len(token) < 3 or token[0] != "-":
            return None
        if token[1] in _ALNUM:
            needle = token[:2]
        elif token[1] == "-" and token[2] in _ALNUM:
            needle, equals, _ = token.partition("=")
            if not equals:
                return None
        else:
            return None

        if (kind := self._keywords.get(needle)) is not None:
            return needle, kind
        return None

    def __contains__(self, keyword, /):
        return keyword in self._keywords

    def __iter__(self):
        return iter(self._keywords)

    def __len__(self):
        return len(self._keywords)

    def __eq__(self, other, /):
        if not isinstance(other, KeywordRegistry):
            return NotImplemented
        return self._keywords == other._keywords

    __hash__ = None

    def __repr__(self):
        return f"{type(self).__name__}({dict(self._keywords)!r})"


@dataclass(frozen=True, slots=True)
class Command:
    name: str


@dataclass(frozen=True, slots=True)
class Key:
    name: str


@dataclass(frozen=True, slots=True)
class KeyWithValue:
    name: str
    value: str


@dataclass(frozen=True, slots=True)
class Other:
    value: str


@dataclass(frozen=True, slots=True)
class InvalidUtf8:
    """a token that is not a well-formed string; raw holds its bytes."""
    raw: bytes


@dataclass(frozen=True, slots=True)
class End:
    """everything after "--", untouched and in order."""
    remaining: tuple


Argument = Command | Key | KeyWithValue | Other | InvalidUtf8 | End


def _text(token):
    """
    interpret a raw token as a string.

    returns
    - (text, None) when it is well formed, (None, raw bytes) otherwise.
    """
    if isinstance(token, str):
        try:
            token.encode("utf-8")
        except UnicodeEncodeError:
            return None, fsencode(token)
        return token, None
    raw = bytes(token)
    try:
        return raw.decode("utf-8"), None
    except UnicodeDecodeError:
        return None, raw


class ArgumentStream:
    """
    a lazy, single-pass argument iterator.

    construction
    - ArgumentStream(tokens, keywords): tokens is any iterable of str (OS
      strings, as in sys.argv) or bytes-like items, sys.argv[1:] by default;
      keywords is a KeywordRegistry, empty by default.
    - the with_* shortcuts declare keywords on the stream itself; they must be
      used before iteration starts.

    states
    - scanning until "--" is met or the source runs dry, then ended for good.
    """
    __slots__ = ("_iterator", "_keywords", "_started", "_ended")

    def __init__(self, tokens=Unset, /, keywords=Unset):
        self._iterator = iter(sys.argv[1:] if tokens is Unset else tokens)
        self._keywords = KeywordRegistry() if keywords is Unset else keywords
        if not isinstance(self._keywords, KeywordRegistry):
            raise TypeError("ArgumentStream() keywords must be a KeywordRegistry")
        self._started = False
        self._ended = False

    @property
    def keywords(self):
        return self._keywords

    @property
    def ended(self):
        return self._ended

    def _declare(self, method, *parameters):
        if self._started:
            raise RuntimeError("keywords cannot be declared once iteration has started")
        self._keywords = method(self._keywords, *parameters)
        return self

    def with_command(self, keyword, /):
        return self._declare(KeywordRegistry.with_command, keyword)

    def with_commands(self, keywords, /):
        return self._declare(KeywordRegistry.with_commands, keywords)

    def with_key(self, keyword, /, value=False):
        return self._declare(KeywordRegistry.with_key, keyword, value)

    def with_keys(self, pairs, /):
        return self._declare(KeywordRegistry.with_keys, pairs)

    def with_switches(self, keywords, /):
        return self._declare(KeywordRegistry.with_switches, keywords)

    def with_options(self, keywords, /):
        return self._declare(KeywordRegistry.with_options, keywords)

    def __iter__(self):
        return self

    def __next__(self):
        self._started = True
        if self._ended:
            raise StopIteration

        while True:
            if (token := next(self._iterator, Unset)) is Unset:
                return self._end()

            text, raw = _text(token)
            if text is None:
                return InvalidUtf8(raw)
            if not text:
                continue

            if text == END:
                remaining = tuple(self._iterator)
                self._ended = True
                if not remaining:
                    raise StopIteration
                logger.debug("end of options, %d raw tokens left", len(remaining))
                return End(remaining)

            if (match := self._keywords.find(text)) is None:
                return Other(text)

            keyword, kind = match
            if kind is KeywordKind.COMMAND:
                return Command(keyword)
            if kind is KeywordKind.KEY:
                return Key(keyword)

            if text != keyword:
                value = text[len(keyword):]
                return KeyWithValue(keyword, value.removeprefix("="))

            if (token := next(self._iterator, Unset)) is Unset:
                logger.debug("option %r has no value; stream exhausted", keyword)
                return self._end()
            value, raw = _text(token)
            if value is None:
                return InvalidUtf8(keyword.encode("ascii") + b"=" + raw)
            return KeyWithValue(keyword, value)

    def _end(self):
        self._ended = True
        raise StopIteration

    def __repr__(self):
        state = "ended" if self._ended else "scanning"
        return f"{type(self).__name__}({self._keywords!r}, {state})"


__all__ = (
    "KeywordKind",
    "KeywordRegistry",
    "ArgumentStream",
    "Argument",
    "Command",
    "Key",
    "KeyWithValue",
    "Other",
    "InvalidUtf8",
    "End",
    "valid_command",
    "valid_key",
)
