r"""
Argorder argument specifications and the argument classifier.

Overview
- Argument: one declared argument of a command, as the validator sees it.
  • id: unique (per command) identifier, used when reporting group order.
  • positional: True when the argument is addressed by position.
  • short: single flag character ("v" for -v) or None.
  • long: long flag name without dashes ("verbose" for --verbose) or None.

- ArgumentKind: the mutually exclusive classification derived from those fields.
  • POSITIONAL  - marked positional (wins over any names it may also carry).
  • SHORT_FLAG  - carries a short name (a long name may be present too).
  • LONG_ONLY   - carries a long name and no short name.
  Arguments with none of the above (help-only or internal arguments) have no
  kind and take no part in validation.

- classify(arguments) -> Groups(positionals, shorts, longs)
  Partitions a command's own arguments into the three groups, preserving
  relative declaration order inside each group.

Metadata (sanitized on construction)
- id: non-empty string after trimming.
- short: "x" or "-x"; exactly one character once the dash is removed.
- long: "name" or "--name"; non-empty once the dashes are removed.
- positional: bool.

Quick example:
    >>> arguments = [
    ...     Argument("file", positional=True),
    ...     Argument("output", short="o", long="output"),
    ...     Argument("config", long="config"),
    ... ]
    >>> [argument.id for argument in classify(arguments).shorts]
    ['output']

Public API
- Classes: Argument, ArgumentKind, Groups
- Functions: classify
"""
import enum
from collections.abc import Iterable
from typing import NamedTuple

from .internals import RecordType
from .utils import *


class ArgumentKind(enum.Enum):
    """
    Classification of a declared argument (see classify()).

    The value doubles as the human label used in reports.
    """
    POSITIONAL = "positional"
    SHORT_FLAG = "short flag"
    LONG_ONLY = "long-only flag"


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate argument metadata in place.

    Raises
    - TypeError: when a field has the wrong type.
    - ValueError: when a field is empty or malformed after trimming.
    """
    if not isinstance(id := metadata["id"], str):
        raise TypeError(f"{cls.__typename__} 'id' must be a string")
    elif not (id := id.strip()):
        raise ValueError(f"{cls.__typename__} 'id' cannot be empty")
    metadata["id"] = id

    if not isinstance(metadata["positional"], bool):
        raise TypeError(f"{cls.__typename__} 'positional' must be a boolean")

    # Short names keep a single character; "-v" and "v" are the same flag.
    if not isinstance(short := metadata["short"], str | None | Unset):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    elif isinstance(short, str):
        if len(short) == 2 and short.startswith("-"):
            short = short[1]
        if len(short) != 1 or short.isspace() or short == "-":
            raise ValueError(f"{cls.__typename__} 'short' must be a single character")
    metadata["short"] = coalesce(short)

    if not isinstance(long := metadata["long"], str | None | Unset):
        raise TypeError(f"{cls.__typename__} 'long' must be a string")
    elif isinstance(long, str) and not (long := long.strip().removeprefix("--")):
        raise ValueError(f"{cls.__typename__} 'long' cannot be empty")
    metadata["long"] = coalesce(long)


class Argument(metaclass=RecordType, sealed=True):
    """
    Immutable description of one declared argument.

    Instances are built once (by hand, by command(), or by a host adapter
    such as argorder.adapters.from_parser) and only read afterwards.
    """
    __introspectable__ = (
        "id",
        "positional",
        "short",
        "long",
    )

    def __new__(cls, id, /, *, positional=False, short=Unset, long=Unset):
        _sanitize_metadata(cls, metadata := {
            "id": id,
            "positional": positional,
            "short": short,
            "long": long,
        })

        self = super().__new__(cls)
        for name, value in metadata.items():
            setattr(self, "_" + name, value)
        return self

    @property
    def kind(self):
        """
        The argument's group, or None when it is excluded from validation.

        Priority: positional, then short name, then long name.
        """
        if self._positional:
            return ArgumentKind.POSITIONAL
        if self._short is not None:
            return ArgumentKind.SHORT_FLAG
        if self._long is not None:
            return ArgumentKind.LONG_ONLY
        return None

    @property
    def key(self):
        """
        The value this argument is sorted by inside its group.

        - short flag: its character
        - long-only flag: its long name
        - positional / excluded: None (positionals are never sorted)
        """
        match self.kind:
            case ArgumentKind.SHORT_FLAG:
                return self._short
            case ArgumentKind.LONG_ONLY:
                return self._long
            case _:
                return None

    def __argument__(self):
        return self


class Groups(NamedTuple):
    """Arguments split by kind, each in declaration order."""
    positionals: tuple
    shorts: tuple
    longs: tuple

    def chain(self):
        """The canonical layout: positionals, then short flags, then long-only flags."""
        return self.positionals + self.shorts + self.longs


def _resolve(argument):
    # Host objects may hand over their own argument type through __argument__().
    if hasattr(argument, "__argument__") and callable(argument.__argument__):
        argument = argument.__argument__()
    if not isinstance(argument, Argument):
        raise TypeError(f"expected an argument, got {type(argument).__name__!r}")
    return argument


def classify(arguments, /):
    """
    Partition arguments into (positionals, shorts, longs).

    Relative order inside every group matches the input order. Arguments
    without a kind are dropped from all groups.

    Raises
    - TypeError: when arguments is not an iterable of Argument-like objects.
    """
    if not isinstance(arguments, Iterable):
        raise TypeError("classify() argument must be an iterable of arguments")

    groups = {kind: [] for kind in ArgumentKind}
    for argument in map(_resolve, arguments):
        if (kind := argument.kind) is not None:
            groups[kind].append(argument)

    return Groups(
        tuple(groups[ArgumentKind.POSITIONAL]),
        tuple(groups[ArgumentKind.SHORT_FLAG]),
        tuple(groups[ArgumentKind.LONG_ONLY]),
    )


__all__ = (
    "Argument",
    "ArgumentKind",
    "Groups",
    "classify",
)

del RecordType
