"""
Argorder validator: check that a command tree is declared in canonical order.

Rules, applied to every command of the tree (root included)
1. Subcommands: direct children are sorted by name (codepoint order).
2. Short flags: arguments with a short name are sorted by that character,
   case-insensitively, lowercase before uppercase on ties ("i" before "I").
3. Long-only flags: arguments with only a long name are sorted by it.
4. Group order: positionals come first, then short flags, then long-only
   flags. Positionals are never sorted among themselves.

Rules run in that order per command, and commands are visited depth-first,
parents before children. Violations are reported in exactly that order.

Policies
- Policy.COLLECT_ALL: gather every violation of the tree.
- Policy.FAIL_FAST: stop at the first violation and raise it as an
  OrderingError.

Entry points
- validate(tree, policy): tuple of Violations (empty when sorted).
- assert_sorted(tree, policy): raise on any violation.
- is_sorted(tree): bool.
- validate_source(text) / validate_path(path): static mode, for Rust sources
  declaring clap Subcommand enums. Only rule 1 applies there.

Trees may be Command instances, any object following the runtime command
protocol (see argorder.commands) or an argparse.ArgumentParser.
"""
import argparse
import enum
import logging
from pathlib import Path

from .adapters import from_parser
from .arguments import classify
from .commands import Command, walk
from .extract import extract
from .faults import *
from .ordering import flagkey, namekey, ordered
from .reporting import fault
from .syntax import SyntaxFault
from .utils import *

logger = logging.getLogger(__name__)


class Policy(enum.Enum):
    """How many violations to look for before stopping."""
    FAIL_FAST = "fail-fast"
    COLLECT_ALL = "collect-all"


def _check(path, node):
    """Yield the violations of a single command, in rule order."""
    names = [child.name for child in node._children]
    ok, expected = ordered(names, key=namekey)
    if not ok:
        yield Violation(ViolationKind.SUBCOMMAND_ORDER, path, names, expected)

    groups = classify(node._arguments)

    shorts = [argument.short for argument in groups.shorts]
    ok, expected = ordered(shorts, key=flagkey)
    if not ok:
        yield Violation(
            ViolationKind.SHORT_FLAG_ORDER,
            path,
            ["-" + short for short in shorts],
            ["-" + short for short in expected],
        )

    longs = [argument.long for argument in groups.longs]
    ok, expected = ordered(longs, key=namekey)
    if not ok:
        yield Violation(
            ViolationKind.LONG_FLAG_ORDER,
            path,
            ["--" + long for long in longs],
            ["--" + long for long in expected],
        )

    declared = [argument for argument in node._arguments if argument.kind is not None]
    if declared != list(chain := groups.chain()):
        yield Violation(
            ViolationKind.ARGUMENT_GROUP_ORDER,
            path,
            [argument.id for argument in declared],
            [argument.id for argument in chain],
        )


def _coerce(tree):
    if isinstance(tree, argparse.ArgumentParser):
        return from_parser(tree)
    return tree


def _run(tree, policy, /):
    if not isinstance(policy, Policy):
        raise TypeError("policy must be a Policy")

    violations = []
    for path, node in walk(_coerce(tree)):
        for violation in _check(path, node):
            logger.debug("%s: %s", violation.kind.value, " ".join(path))
            if policy is Policy.FAIL_FAST:
                trigger(fault(violation))
            violations.append(violation)
    return tuple(violations)


def validate(tree, /, policy=Policy.COLLECT_ALL):
    """
    Check a command tree and return its violations.

    Parameters
    - tree: Command, runtime command object or argparse.ArgumentParser.
    - policy: Policy.COLLECT_ALL (default) or Policy.FAIL_FAST.

    Returns
    - tuple[Violation, ...], empty when the tree is canonically ordered.

    Raises
    - OrderingError: first violation, under Policy.FAIL_FAST.
    - TypeError: tree does not describe a command.
    """
    violations = _run(tree, policy)
    logger.info("validated command tree: %s", quantify(len(violations), "violation"))
    return violations


def assert_sorted(tree, /, policy=Policy.FAIL_FAST):
    """
    Raise when the tree is not canonically ordered.

    - Policy.FAIL_FAST: OrderingError for the first violation.
    - Policy.COLLECT_ALL: ValidationExit grouping one OrderingError per violation.
    """
    if violations := _run(tree, policy):
        trigger(ValidationExit([fault(violation) for violation in violations]))


def is_sorted(tree, /):
    return not _run(tree, Policy.COLLECT_ALL)


def _commands(declarations, origin):
    for declaration in declarations:
        try:
            tree = Command(declaration.name, [Command(name) for name in declaration.variants])
        except ValueError as error:
            raise MalformedSourceError(
                f"{origin}:{declaration.line}: {error}",
                origin=origin,
            ) from error
        yield tree


def validate_source(text, /, policy=Policy.COLLECT_ALL, origin="<string>"):
    """
    Statically check the Subcommand enums declared in Rust source text.

    Each enum is validated independently as a one-level tree rooted at the
    enum name, so violation paths read ["Commands"].

    Raises
    - MalformedSourceError: the text cannot be parsed, or an enum gives two
      variants the same external name.
    - OrderingError: first violation, under Policy.FAIL_FAST.
    """
    if not isinstance(text, str):
        raise TypeError("validate_source() argument must be a string")

    try:
        declarations = extract(text)
    except SyntaxFault as error:
        raise MalformedSourceError(f"{origin}: {error}", origin=origin) from error

    logger.debug("%s: found %s", origin, quantify(len(declarations), "Subcommand enum"))
    violations = []
    for tree in _commands(declarations, origin):
        violations.extend(_run(tree, policy))
    return tuple(violations)


def validate_path(path, /, policy=Policy.COLLECT_ALL, encoding="utf-8"):
    """
    Read a Rust source file and check it with validate_source().

    Raises
    - UnreadableSourceError: the file cannot be opened or decoded.
    - MalformedSourceError / OrderingError: as validate_source().
    """
    path = Path(path)
    try:
        text = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as error:
        raise UnreadableSourceError(f"{path}: {error}", origin=str(path)) from error

    violations = validate_source(text, policy, origin=str(path))
    logger.info("%s: %s", path, quantify(len(violations), "violation"))
    return violations


__all__ = (
    "Policy",
    "validate",
    "assert_sorted",
    "is_sorted",
    "validate_source",
    "validate_path",
)
