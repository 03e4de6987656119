"""
Argorder command layer: the command tree the validator walks.

What this module provides
- Command: immutable node of a command tree.
  • name: the externally visible command name.
  • children: direct subcommands, in declaration order (not sorted; the order
    is exactly what gets validated).
  • arguments: the command's own arguments, in declaration order. Arguments
    shared from an ancestor never appear here; adapters strip them.
- command(name, *arguments, children=()): terse builder, mostly for tests and
  hand-written trees.
- resolve(object): turn any supported tree into a Command.
- walk(tree): depth-first, pre-order traversal yielding (path, command).

Runtime protocol
The validator does not require a Command. Any object works when it exposes
`name`, `children` and `arguments` (as attributes or zero-argument methods),
with arguments that are Argument instances or provide __argument__(). An
object may also implement __command__() returning a Command directly.

Invariants
- Sibling names are unique; argument ids are unique within one command.
- Trees only: a Command owns its children, so a node never reaches itself.

Quick start
    from argorder import Argument, command

    cli = command(
        "todo",
        Argument("verbose", short="v", long="verbose"),
        children=[command("add"), command("list")],
    )
"""
import logging
from collections.abc import Iterable

from .arguments import _resolve as _resolve_argument
from .internals import RecordType

logger = logging.getLogger(__name__)


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate name, children and arguments of a command in place.

    Raises
    - TypeError: wrong types for name/children/arguments.
    - ValueError: empty name, duplicate sibling names, duplicate argument ids.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    metadata["name"] = name

    if not isinstance(metadata["children"], Iterable) or isinstance(metadata["children"], str):
        raise TypeError(f"{cls.__typename__} 'children' must be an iterable of commands")
    children = tuple(metadata["children"])
    names = set()
    for child in children:
        if not isinstance(child, Command):
            raise TypeError(f"{cls.__typename__} children must be commands")
        elif child.name in names:
            raise ValueError(f"{cls.__typename__} {name!r} has a duplicated subcommand {child.name!r}")
        names.add(child.name)
    metadata["children"] = children

    if not isinstance(metadata["arguments"], Iterable) or isinstance(metadata["arguments"], str):
        raise TypeError(f"{cls.__typename__} 'arguments' must be an iterable of arguments")
    arguments = tuple(map(_resolve_argument, metadata["arguments"]))
    ids = set()
    for argument in arguments:
        if argument.id in ids:
            raise ValueError(f"{cls.__typename__} {name!r} has a duplicated argument {argument.id!r}")
        ids.add(argument.id)
    metadata["arguments"] = arguments


class Command(metaclass=RecordType, sealed=True):
    """
    Immutable command node.

    Lifecycle
    - Built bottom-up: children are complete Commands before their parent.
    - Never mutated; the validator borrows a tree read-only for one call.
    """
    __introspectable__ = (
        "name",
        "children",
        "arguments",
    )

    __displayable__ = (
        "name",
        "arguments",
        "children",
    )

    def __new__(cls, name, /, children=(), arguments=()):
        _sanitize_metadata(cls, metadata := {
            "name": name,
            "children": children,
            "arguments": arguments,
        })

        self = super().__new__(cls)
        for key, value in metadata.items():
            setattr(self, "_" + key, value)
        return self

    def __command__(self):
        return self

    def __iter__(self):
        """Iterate over the direct subcommands."""
        return iter(self._children)

    def __getitem__(self, name, /):
        """Look up a direct subcommand by name."""
        for child in self._children:
            if child.name == name:
                return child
        raise KeyError(name)


def command(name, /, *arguments, children=()):
    """
    Build a Command from positional arguments and a children iterable.

    Example
    - command("git", Argument("version", long="version"), children=[command("add")])
    """
    return Command(name, children, arguments)


def _read(object, field, /):
    # Hosts may expose the protocol as attributes or as zero-argument methods.
    value = getattr(object, field)
    return value() if callable(value) else value


def resolve(object, /):
    """
    Convert a runtime command object into a Command tree.

    Accepted inputs
    - Command: returned unchanged.
    - objects implementing __command__(): the returned Command is used.
    - objects exposing name / children / arguments (attributes or methods):
      converted recursively.

    Raises
    - TypeError: the object satisfies none of the above.
    """
    if hasattr(object, "__command__") and callable(object.__command__):
        if not isinstance(tree := object.__command__(), Command):
            raise TypeError("__command__() must return a command")
        return tree

    if not all(hasattr(object, field) for field in ("name", "children", "arguments")):
        raise TypeError(f"{type(object).__name__!r} object does not describe a command")

    logger.debug("resolving %s object into a command tree", type(object).__name__)
    return Command(
        _read(object, "name"),
        tuple(map(resolve, _read(object, "children"))),
        tuple(_read(object, "arguments")),
    )


def walk(tree, /):
    """
    Visit every command depth-first, parents before children.

    Yields (path, command) where path is a tuple of names from the root down
    to and including command. Traversal uses an explicit stack whose entries
    carry their own path snapshot.
    """
    stack = [((), resolve(tree))]
    while stack:
        parent, node = stack.pop()
        yield (path := parent + (node.name,)), node
        stack.extend((path, child) for child in reversed(node._children))


__all__ = (
    "Command",
    "command",
    "resolve",
    "walk",
)

del RecordType
