"""
Argot key classification and splitting.

Scope
- classify(token): decide whether a raw argument looks like a bare value, a
  short key (-k), a short key glued to its value (-kVal), a long key (--key)
  or a long key glued to its value (--key=Val).
- split(classification, token): cut a glued token into its key and value.
- tokenize(token): both steps at once, returning (is_key, key, value).

Speed is the name of the game, which is achieved through simplicity:
- a token starting with a single "-" and an ASCII letter is a short key; if it
  is longer than two bytes, everything from the third byte on is its value;
- a token starting with "--" and an ASCII letter is a long key; if it contains
  an "=", everything after the first one is its value.

Only the first three bytes are inspected (plus a scan for "=" on long keys);
anything past that prefix is opaque payload, UTF-8 or not.

Tokens
- bytes (and bytearray) are the owned form, memoryview is the borrowed,
  zero-copy form. Slicing preserves the form, so splitting a view yields two
  views over the same buffer and splitting bytes yields two fresh bytes.
"""
import operator
import string
from enum import IntEnum
from typing import NamedTuple

DASH = 0x2D
EQUALS = 0x3D

_ALPHA = frozenset(string.ascii_letters.encode("ascii"))


class KeyKind(IntEnum):
    """
    token shapes, ordered from "not a key at all" to "long key with value".
    """
    NONE        = 0
    SHORT       = 1
    SHORT_VALUE = 2
    LONG        = 3
    LONG_VALUE  = 4

    @property
    def is_key(self):
        return self is not KeyKind.NONE

    @property
    def has_value(self):
        return self in (KeyKind.SHORT_VALUE, KeyKind.LONG_VALUE)


class Classification(NamedTuple):
    kind: KeyKind
    offset: int | None = None

    def __repr__(self):
        if self.offset is None:
            return f"{self.kind.name.lower()}"
        return f"{self.kind.name.lower()}({self.offset})"


_NONE = Classification(KeyKind.NONE)
_SHORT = Classification(KeyKind.SHORT)
_SHORT_VALUE = Classification(KeyKind.SHORT_VALUE)
_LONG = Classification(KeyKind.LONG)


def classify(token, /):
    """
    classify a raw token.

    rules (in order)
    - shorter than two bytes, or not starting with "-" -> NONE
    - "--" prefix: the third byte must be an ASCII letter, else NONE; the first
      "=" at position p gives LONG_VALUE(p), no "=" gives LONG
    - "-" prefix: the second byte must be an ASCII letter, else NONE; exactly
      two bytes gives SHORT, more gives SHORT_VALUE

    note that "-" and "--" alone are NONE here; recognising the end-of-options
    marker is the caller's business.
    """
    length = len(token)
    if length < 2 or token[0] != DASH:
        return _NONE

    if token[1] == DASH:
        if length > 2 and token[2] in _ALPHA:
            try:
                return Classification(KeyKind.LONG_VALUE, operator.indexOf(token, EQUALS))
            except ValueError:
                return _LONG
        return _NONE

    if token[1] in _ALPHA:
        return _SHORT if length == 2 else _SHORT_VALUE

    return _NONE


def split(classification, token, /):
    """
    split a token according to its classification.

    returns
    - (token, None) for NONE, SHORT and LONG;
    - (token[:2], token[2:]) for SHORT_VALUE;
    - (token[:p], token[p + 1:]) for LONG_VALUE(p); a trailing "=" yields an
      explicit empty value rather than None.
    """
    kind, offset = classification
    if kind is KeyKind.SHORT_VALUE:
        return token[:2], token[2:]
    if kind is KeyKind.LONG_VALUE:
        return token[:offset], token[offset + 1:]
    return token, None


def tokenize(token, /):
    """
    classify and split in one go.

    returns
    - (is_key, key, value) where value is None unless the token was glued.
    """
    classification = classify(token)
    key, value = split(classification, token)
    return classification.kind.is_key, key, value


__all__ = (
    "KeyKind",
    "Classification",
    "classify",
    "split",
    "tokenize",
)
