"""
Ordering primitives: the total orders argorder checks declarations against.

Keys
- namekey(text): plain codepoint order, used for subcommand names and long-only
  flag names. Distinct names can never tie.
- flagkey(char): case-insensitive primary order for short flags; when two
  characters fold to the same letter, lowercase sorts before uppercase
  ("i" before "I"). Most comparators put "I" first (codepoint order), so this
  key is spelled out explicitly.

Checks
- ordered(items, key=namekey) -> (ok, expected)
  Reports whether items are already non-decreasing under key and returns the
  stable sorted order for diagnostics. Empty and single-item sequences are
  trivially ordered.
- is_ordered(items, key=namekey) -> bool

All functions are pure; no state is kept between calls.

Examples
    >>> ordered(["list", "add"])
    (False, ('add', 'list'))
    >>> ordered(["i", "I"], key=flagkey)
    (True, ('i', 'I'))
    >>> ordered(["I", "i"], key=flagkey)
    (False, ('i', 'I'))
"""
import itertools
from collections.abc import Iterable


def namekey(text, /):
    if not isinstance(text, str):
        raise TypeError("namekey() argument must be a string")
    return text


def flagkey(char, /):
    """
    Sort key for a short-flag character.

    Returns (folded, upper): the casefolded character drives the primary order
    and the boolean breaks ties so lowercase (False) precedes uppercase (True).
    """
    if not isinstance(char, str) or len(char) != 1:
        raise TypeError("flagkey() argument must be a single character")
    return char.lower(), char.isupper()


def ordered(items, /, key=namekey):
    """
    Check items against the order defined by key.

    Parameters
    - items: Iterable of keys in declaration order.
    - key: callable mapping each item to a comparable value (namekey by default).

    Returns
    - (ok, expected): ok is True when every adjacent pair is non-decreasing;
      expected is the stable sort of items, as a tuple.
    """
    if not isinstance(items, Iterable) or isinstance(items, str):
        raise TypeError("ordered() argument must be an iterable of keys")
    if not callable(key):
        raise TypeError("ordered() 'key' must be callable")

    items = tuple(items)
    ok = all(key(left) <= key(right) for left, right in itertools.pairwise(items))
    return ok, items if ok else tuple(sorted(items, key=key))


def is_ordered(items, /, key=namekey):
    return ordered(items, key)[0]


__all__ = (
    "namekey",
    "flagkey",
    "ordered",
    "is_ordered",
)
