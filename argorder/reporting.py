"""
Violation reporting: messages, machine-readable records and console output.

Text
- describe(violation): multi-line message naming the command path and the
  actual vs. expected order, e.g.

      Subcommands in 'todo' are not sorted alphabetically!
      Actual order: ['list', 'add']
      Expected order: ['add', 'list']

- fault(violation): the same message wrapped in an OrderingError, ready to be
  raised or rendered through rich.

Data
- serialize(violation): {"kind", "path", "actual", "expected"}.
- FileReport: the outcome of checking one input (violations or input errors),
  with to_dict() for JSON output.

Console
- Reporter prints FileReports: "✓ <path>: ..." on stdout for clean inputs,
  "✗ <path>: Found N error(s)" plus each indented message on stderr for
  failing ones. With fancy=True each fault is rendered as a rich panel.
"""
import textwrap

from rich.console import Console
from rich.text import Text

from .faults import *
from .internals import RecordType
from .utils import *

_TITLES = {
    ViolationKind.SUBCOMMAND_ORDER: "unsorted subcommands",
    ViolationKind.SHORT_FLAG_ORDER: "unsorted short flags",
    ViolationKind.LONG_FLAG_ORDER: "unsorted long-only flags",
    ViolationKind.ARGUMENT_GROUP_ORDER: "misplaced argument group",
}

_HEADLINES = {
    ViolationKind.SUBCOMMAND_ORDER: "Subcommands in {path!r} are not sorted alphabetically!",
    ViolationKind.SHORT_FLAG_ORDER: "Flags with short options in {path!r} are not sorted!",
    ViolationKind.LONG_FLAG_ORDER: "Long-only flags in {path!r} are not sorted!",
    ViolationKind.ARGUMENT_GROUP_ORDER: "Arguments in {path!r} are not in correct group order!",
}


def label(path, /):
    """Human form of a command path: names joined by spaces ("git remote add")."""
    return " ".join(path)


def describe(violation, /):
    """
    Full diagnostic text for a violation.

    Every message carries the complete ancestor path and both orderings.
    """
    if not isinstance(violation, Violation):
        raise TypeError("describe() argument must be a violation")

    lines = [_HEADLINES[violation.kind].format(path=label(violation.path))]
    if violation.kind is ViolationKind.ARGUMENT_GROUP_ORDER:
        lines.append("Expected: [positional, short flags, long-only flags]")
        lines.append(f"Actual: {violation.actual!r}")
        lines.append(f"Expected: {violation.expected!r}")
    elif violation.kind is ViolationKind.SUBCOMMAND_ORDER:
        lines.append(f"Actual order: {violation.actual!r}")
        lines.append(f"Expected order: {violation.expected!r}")
    else:
        lines.append(f"Actual: {violation.actual!r}")
        lines.append(f"Expected: {violation.expected!r}")
    return "\n".join(lines)


def hint(violation, /):
    if violation.kind is ViolationKind.ARGUMENT_GROUP_ORDER:
        return "declare positionals first, then short flags, then long-only flags"
    return "reorder as: " + ", ".join(violation.expected)


def fault(violation, /, **options):
    """Wrap a violation in an OrderingError carrying its message, title and hint."""
    return OrderingError(
        describe(violation),
        violation=violation,
        title=_TITLES[violation.kind],
        hint=hint(violation),
        **options,
    )


def serialize(violation, /):
    """
    Plain-data form of a violation.

    Example
    - {"kind": "SubcommandOrder", "path": ["Commands"],
       "actual": ["list", "add"], "expected": ["add", "list"]}
    """
    if not isinstance(violation, Violation):
        raise TypeError("serialize() argument must be a violation")
    return {
        "kind": violation.kind.value,
        "path": list(violation.path),
        "actual": list(violation.actual),
        "expected": list(violation.expected),
    }


class FileReport(metaclass=RecordType, sealed=True):
    """
    Outcome of checking one input unit.

    - origin: the path (or label) of the input.
    - violations: ordering violations found (empty when clean).
    - errors: InputErrors that stopped the check (at most one in practice).
    """
    __introspectable__ = (
        "origin",
        "violations",
        "errors",
    )

    def __new__(cls, origin, /, violations=(), errors=()):
        if not isinstance(origin, str):
            raise TypeError(f"{cls.__typename__} 'origin' must be a string")
        violations, errors = tuple(violations), tuple(errors)
        if not all(isinstance(violation, Violation) for violation in violations):
            raise TypeError(f"{cls.__typename__} 'violations' must be violations")
        if not all(isinstance(error, InputError) for error in errors):
            raise TypeError(f"{cls.__typename__} 'errors' must be input errors")

        self = super().__new__(cls)
        self._origin = origin
        self._violations = violations
        self._errors = errors
        return self

    @property
    def ok(self):
        return not self._violations and not self._errors

    @property
    def count(self):
        return len(self._violations) + len(self._errors)

    def faults(self):
        """Every problem of this input as a fault, input errors first."""
        return [*self._errors, *map(fault, self._violations)]

    def messages(self):
        return [str(item) for item in self.faults()]

    def to_dict(self):
        return {
            "path": self._origin,
            "ok": self.ok,
            "errors": [
                {"code": int(error.options["code"]), "message": str(error)} for error in self._errors
            ],
            "violations": list(map(serialize, self._violations)),
        }


class Reporter:
    """
    Print FileReports to a pair of rich consoles.

    Options
    - fancy: render each fault as a rich panel instead of indented text.
    - quiet: do not print anything for clean inputs.
    """

    def __init__(self, stdout=Unset, stderr=Unset, /, *, fancy=False, quiet=False):
        self.stdout = coalesce(stdout, Console())
        self.stderr = coalesce(stderr, Console(stderr=True))
        self.fancy = fancy
        self.quiet = quiet

    @property
    def colorful(self):
        return self.stderr.color_system is not None

    def success(self, report, /):
        if self.quiet:
            return
        self.stdout.print(
            Text.assemble(("✓", "bold green"), f" {report.origin}: All Subcommand enums are sorted"),
            soft_wrap=True,
        )

    def failure(self, report, /):
        self.stderr.print(
            Text.assemble(("✗", "bold red"), f" {report.origin}: Found {report.count} error(s)"),
            soft_wrap=True,
        )
        for item in report.faults():
            if self.fancy:
                self.stderr.print(copy_with(item, fancy=True, colorful=self.colorful))
            else:
                self.stderr.print(Text(textwrap.indent(str(item), "  ")), soft_wrap=True)

    def emit(self, report, /):
        if report.ok:
            self.success(report)
        else:
            self.failure(report)

    def summary(self, reports, /):
        """Closing line for multi-file runs, e.g. "3 files checked, 1 failing"."""
        reports = list(reports)
        failing = sum(not report.ok for report in reports)
        if self.quiet and not failing:
            return
        line = f"{quantify(len(reports), 'file')} checked, {failing} failing"
        (self.stderr if failing else self.stdout).print(Text(line, "dim"), soft_wrap=True)


def copy_with(fault, /, **options):
    """A copy of a fault with rendering options replaced."""
    return fault.__replace__(**options)


__all__ = (
    "label",
    "describe",
    "hint",
    "fault",
    "serialize",
    "FileReport",
    "Reporter",
)

del RecordType
