"""
Static extraction of subcommand sets from Rust (clap) sources.

A subcommand set is an enum deriving clap's `Subcommand`:

    #[derive(Debug, clap::Subcommand)]
    enum Commands {
        Add,
        #[command(name = "ls")]
        List,
    }

extract(text) returns one Declaration per such enum, in source order, each
holding the externally visible variant names in declaration order. Enums
without the derive are ignored. Declarations are independent: a variant that
wraps another subcommand enum is not followed.

Naming
- An explicit `name = "..."` inside `#[command(...)]` (or the older
  `#[clap(...)]`) wins; the last one given is used.
- Otherwise the identifier is kebab-cased the way clap does it: camel-case
  humps become hyphen-separated words, underscores become hyphens, and the
  result is lowercased (`AddCmd` -> `add-cmd`, `Add_Item` -> `add-item`).

Variants that do not name a subcommand (`flatten`, `external_subcommand`,
`skip`) are left out.
"""
import logging
import re
from collections import namedtuple

from .syntax import parse

logger = logging.getLogger(__name__)

_SUBCOMMAND_DERIVE = "Subcommand"
_COMMAND_ATTRIBUTES = ("command", "clap")
_UNNAMED_VARIANTS = frozenset({"flatten", "external_subcommand", "skip"})
_HUMPS = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


Declaration = namedtuple("Declaration", "name variants line")
Declaration.__doc__ = """
A detected subcommand set: enum name, external variant names (in declaration
order) and the 1-based line of the enum name.
"""


def kebabize(identifier, /):
    """
    clap's default external name for a Rust identifier.

    Examples
    - kebabize("Add")      -> "add"
    - kebabize("AddCmd")   -> "add-cmd"
    - kebabize("HTTPGet")  -> "http-get"
    - kebabize("add_item") -> "add-item"
    """
    if not isinstance(identifier, str):
        raise TypeError("kebabize() argument must be a string")
    identifier = identifier.removeprefix("r#")
    words = _HUMPS.sub("-", identifier).replace("_", "-").lower()
    return re.sub(r"-{2,}", "-", words).strip("-")


def _command_attributes(variant):
    return [attribute for attribute in variant.attributes if attribute.path in _COMMAND_ATTRIBUTES]


def is_subcommand_set(enum, /):
    """True when the enum derives Subcommand (bare or path-qualified)."""
    for attribute in enum.attributes:
        if attribute.path != "derive":
            continue
        if any(path.rsplit("::", 1)[-1] == _SUBCOMMAND_DERIVE for path in attribute.flags()):
            return True
    return False


def external_name(variant, /):
    """
    The name users type for this variant, or None when it names no subcommand.
    """
    name = None
    for attribute in _command_attributes(variant):
        if attribute.flags() & _UNNAMED_VARIANTS:
            return None
        if (meta := attribute.get("name")) is None:
            continue
        if (literal := meta.literal) is None:
            logger.warning(
                "variant %s at line %d sets name to a non-literal %r; falling back to its identifier",
                variant.name,
                variant.line,
                meta.source,
            )
            continue
        name = literal
    return name if name is not None else kebabize(variant.name)


def extract(text, /):
    """
    Find every subcommand set in Rust source text.

    Returns
    - tuple[Declaration, ...] in source order (possibly empty).

    Raises
    - SyntaxFault: the text could not be parsed; nothing is extracted.
    """
    declarations = []
    for enum in parse(text).enums:
        if not is_subcommand_set(enum):
            logger.debug("skipping enum %s: no Subcommand derive", enum.name)
            continue
        names = tuple(name for variant in enum.variants if (name := external_name(variant)) is not None)
        logger.debug("subcommand set %s at line %d: %s", enum.name, enum.line, ", ".join(names))
        declarations.append(Declaration(enum.name, names, enum.line))
    return tuple(declarations)


__all__ = (
    "Declaration",
    "kebabize",
    "is_subcommand_set",
    "external_name",
    "extract",
)
