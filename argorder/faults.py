"""
Argorder faults (violations, errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for everything argorder
  reports. Codes are grouped by domain to keep logs and searches predictable.
- ViolationKind / Violation: the four ordering defects as plain data. A
  Violation is an expected outcome of validation, not an exception.
- ValidationFault and subclasses: exceptions that carry a message plus options
  and know how to render themselves through rich.
  • OrderingError: one Violation surfaced as a hard failure (fail-fast).
  • InputError: the source could not be read (UnreadableSourceError) or
    parsed (MalformedSourceError). Reported once per input, never mixed
    with violations.
  • ValidationExit: ExceptionGroup bundling every fault of one run.
- trigger(): central entry point to surface any fault (raise or print).

Rendering
- Header "[ prog — code | title ]", one message body and one hint line.
- Options: colorful (styles on/off), fancy (panel chrome), shell (print
  instead of raise), deferred (print without exiting).
- Hosts can restyle through a __styles__ mapping, relabel codes through
  __codes__ and rename the program through __prog__, all read from __main__.
"""
import copy
import enum
import sys
from collections import defaultdict
from collections.abc import Iterable
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .internals import RecordType
from .utils import *

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - ordering (211xx)
      • SUBCOMMAND_ORDER, SHORT_FLAG_ORDER, LONG_FLAG_ORDER, ARGUMENT_GROUP_ORDER
    - input (221xx)
      • UNREADABLE_SOURCE, MALFORMED_SOURCE

    normalize() lets the host remap codes to its own labels.
    """
    # --- ordering violations (211xx) ---
    SUBCOMMAND_ORDER     = 21101
    SHORT_FLAG_ORDER     = 21111
    LONG_FLAG_ORDER      = 21112
    ARGUMENT_GROUP_ORDER = 21121

    # --- input errors (221xx) ---
    UNREADABLE_SOURCE    = 22101
    MALFORMED_SOURCE     = 22111

    def normalize(self):
        """
        The label shown in fault headers.

        A __codes__ mapping on __main__ may relabel codes; without one the
        number itself is used.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ViolationKind(enum.Enum):
    """
    The four ordering defects the validator can detect.

    Values are the serialized names used in machine-readable output.
    """
    SUBCOMMAND_ORDER = "SubcommandOrder"
    ARGUMENT_GROUP_ORDER = "ArgumentGroupOrder"
    SHORT_FLAG_ORDER = "ShortFlagOrder"
    LONG_FLAG_ORDER = "LongFlagOrder"

    @property
    def code(self):
        return FaultCode[self.name]


def _sanitize_strings(cls, field, value, /):
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise TypeError(f"{cls.__typename__} {field!r} must be a sequence of strings")
    value = tuple(value)
    if not all(isinstance(item, str) for item in value):
        raise TypeError(f"{cls.__typename__} {field!r} must be a sequence of strings")
    return value


class Violation(metaclass=RecordType, sealed=True):
    """
    One detected ordering defect.

    Fields
    - kind: ViolationKind
    - path: names from the root command down to the offending command
    - actual: display strings in declaration order
    - expected: the same strings in the required order
    """
    __introspectable__ = (
        "kind",
        "path",
        "actual",
        "expected",
    )

    def __new__(cls, kind, /, path, actual, expected):
        if not isinstance(kind, ViolationKind):
            raise TypeError(f"{cls.__typename__} 'kind' must be a violation kind")
        if not (path := _sanitize_strings(cls, "path", path)):
            raise ValueError(f"{cls.__typename__} 'path' cannot be empty")

        self = super().__new__(cls)
        self._kind = kind
        self._path = path
        self._actual = _sanitize_strings(cls, "actual", actual)
        self._expected = _sanitize_strings(cls, "expected", expected)
        return self

    @property
    def code(self):
        return self._kind.code

    @property
    def command(self):
        """Name of the offending command (last element of path)."""
        return self._path[-1]


class ValidationFault(Exception):
    """
    Base class for every argorder exception.

    Subclasses set code/title/hint defaults; any of them can be overridden
    through options at construction or through trigger().
    """
    code = Unset
    title = "validation fault"
    hint = Unset

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType({
            "code": self.code,
            "title": self.title,
            "hint": self.hint,
        } | options)

    def __str__(self):
        return coalesce(self.message, "")

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",

            # body
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment if colorful else Text(fragment.plain)
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", self.options.get("prog", "argorder")), styler("prog-name"))
        code = self.options["code"]

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "-", styler("code")),
            " | ",
            text(self.options["title"].title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        parts = [message]
        if hint := self.options["hint"]:
            parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if self.options.get("fancy", False):
            return Panel(Group(*parts), title=header, title_align="left")

        return Group(header, *parts)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "overrides must be passed by keyword"
        return type(self)(self.message, **{**self.options, **overrides})


class OrderingError(ValidationFault):
    """
    A Violation raised as an exception (fail-fast policy).

    The violation is available as .violation; code and title follow its kind.
    """
    title = "ordering violation"

    def __init__(self, message=Unset, /, **options):
        if not isinstance(violation := options.get("violation"), Violation):
            raise TypeError("OrderingError requires a 'violation' option")
        super().__init__(message, **{"code": violation.code} | options)

    @property
    def violation(self):
        return self.options["violation"]


class InputError(ValidationFault):
    """The input unit could not be checked at all; other inputs are unaffected."""
    title = "input error"

    @property
    def origin(self):
        return self.options.get("origin")


class UnreadableSourceError(InputError):
    code = FaultCode.UNREADABLE_SOURCE
    title = "unreadable source"
    hint = "check that the file exists, is readable and is UTF-8 encoded"


class MalformedSourceError(InputError):
    code = FaultCode.MALFORMED_SOURCE
    title = "malformed source"
    hint = "fix the syntax error before checking the declaration order"


class ValidationExit(ExceptionGroup[ValidationFault]):
    """
    Every fault of one validation run, raised together (collect-all policy).
    """

    def __new__(cls, exceptions, /, **options):
        return super().__new__(cls, options.get("title", "validation failed"), tuple(exceptions))

    def __init__(self, exceptions, /, **options):
        super().__init__(options.get("title", "validation failed"), tuple(exceptions))
        self.options = MappingProxyType(options)

    def derive(self, exceptions):
        return type(self)(exceptions, **self.options)

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",
            "title": "bold #FF4DA6",
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)
        prog = getattr(main, "__prog__", self.options.get("prog", "argorder"))

        header = Text.assemble(
            "[ ",
            Text(prog, styles["prog-name"] if colorful else ""),
            " — ",
            Text(self.message.title(), styles["title"] if colorful else ""),
            " ]",
        )

        renders = [copy.replace(exception, colorful=colorful, fancy=False) for exception in self.exceptions]

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "overrides must be passed by keyword"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    Surface a fault: raise it, or print it when shell=True.

    options are applied through copy.replace() first, so callers can switch
    rendering (colorful, fancy) or mode (shell, deferred) per call.
    """
    for hook in ("__trigger__", "__replace__"):
        if not callable(getattr(fault, hook, None)):
            raise TypeError(f"trigger() argument must implement {hook}()")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "ViolationKind",
    "Violation",
    "ValidationFault",
    "OrderingError",
    "InputError",
    "UnreadableSourceError",
    "MalformedSourceError",
    "ValidationExit",
    "trigger",
)

del RecordType
