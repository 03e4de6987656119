"""
Small helpers shared by the records, the validator and the reporter.

- Unset: "not provided" marker, distinct from None (an argument without a
  short name stores None; a caller that did not pass one passes Unset).
- coalesce(value, default): Unset -> default, everything else unchanged.
- rename(name): decorator giving generated methods a stable __name__.
- mirror(name): read-only property over "_{name}"; tuples come back as lists
  so callers get their own copy.
- pluralize / quantify: report wording ("1 file", "3 violations").

    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> quantify(2, "violation")
    '2 violations'
"""
import functools
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker: one instance per process, always falsy.

    Usable in PEP 604 unions, so `isinstance(value, str | Unset)` reads as
    "a string, or nothing given".
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

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

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")


def coalesce(object, default=None, /):
    """
    Replace Unset by default; None, 0 and "" are real values and pass through.

    - coalesce("v")         -> "v"
    - coalesce(Unset)       -> None
    - coalesce(Unset, "x")  -> "x"
    """
    return default if object is Unset else object


def rename(name, /):
    """Decorator setting __name__ and __qualname__ of a generated function."""
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorate(function):
        function.__name__ = function.__qualname__ = name
        return function

    return decorate


def _copy(value):
    # Records store tuples; hand out lists (recursively) and resolve Unset.
    if isinstance(value, tuple) and not hasattr(value, "_fields"):
        return [_copy(item) for item in value]
    return coalesce(value)


def mirror(name, /):
    """
    Read-only property exposing the backing attribute "_{name}".

    Declared once per field by RecordType from __introspectable__.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _copy(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def pluralize(text, /):
    """
    English plural of the last word of text, keeping its capitalisation.

    - "error" -> "errors", "match" -> "matches", "Entry" -> "Entries"
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() argument must be a string")

    head, _, word = text.rpartition(" ")
    lower = word.lower()
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        plural = lower + "es"
    elif lower.endswith("y") and lower[-2:-1] not in ("", *"aeiou"):
        plural = lower[:-1] + "ies"
    else:
        plural = lower + "s"

    if word.isupper() and len(word) > 1:
        plural = plural.upper()
    elif word[:1].isupper():
        plural = plural.capitalize()
    return f"{head} {plural}" if head else plural


def quantify(count, text, /):
    """"<count> <text>", pluralized unless count is exactly one."""
    if not isinstance(count, int):
        raise TypeError("quantify() first argument must be an integer")
    return f"{count} {text if count == 1 else pluralize(text)}"


Unset = UnsetType()


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "pluralize",
    "quantify",
    "UnsetType",
    "Unset",
)
