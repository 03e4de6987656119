"""
Host adapters: build argorder Command trees from live CLI definitions.

argparse
- from_parser(parser) walks an argparse.ArgumentParser (and every parser
  reachable through add_subparsers()) and returns the equivalent Command tree.
- Positionals are actions without option strings. Flags take their short name
  from the first "-x" option string and their long name from the first
  "--name" option string.
- help/version actions become arguments with no kind, so they never take
  part in validation (the host adds them, the author does not order them).
- The subparsers action is not an argument: it contributes the children, in
  the order add_parser() was called. Aliases collapse onto the first name a
  parser was registered under.
"""
import argparse
import logging

from .arguments import Argument
from .commands import Command
from .utils import *

logger = logging.getLogger(__name__)

_IMPLICIT_ACTIONS = (argparse._HelpAction, argparse._VersionAction)


def _short(option_strings):
    for option in option_strings:
        if len(option) == 2 and option[0] == "-" and option[1] != "-":
            return option[1]
    return None


def _long(option_strings):
    for option in option_strings:
        if option.startswith("--") and len(option) > 2:
            return option[2:]
    return None


def _argument(action, id):
    if isinstance(action, _IMPLICIT_ACTIONS):
        return Argument(id)
    if not action.option_strings:
        return Argument(id, positional=True)
    return Argument(id, short=_short(action.option_strings), long=_long(action.option_strings))


def _subparsers(action):
    # _name_parser_map holds one entry per name and alias, in registration order.
    seen = {}
    for name, parser in action._name_parser_map.items():
        seen.setdefault(id(parser), (name, parser))
    return list(seen.values())


def from_parser(parser, /, name=Unset):
    """
    Convert an argparse.ArgumentParser into a Command tree.

    Parameters
    - parser: the root parser.
    - name: root command name; defaults to parser.prog.

    Raises
    - TypeError: parser is not an ArgumentParser.
    """
    if not isinstance(parser, argparse.ArgumentParser):
        raise TypeError("from_parser() argument must be an argparse.ArgumentParser")

    arguments, children, ids = [], [], set()
    for action in parser._actions:
        if isinstance(action, argparse._SubParsersAction):
            for child, subparser in _subparsers(action):
                children.append(from_parser(subparser, child))
            continue
        # Several actions may share a dest (store_const pairs); ids must stay unique.
        id = action.dest
        if id in ids:
            id = action.option_strings[0] if action.option_strings else f"{id}#{len(ids)}"
        ids.add(id)
        arguments.append(_argument(action, id))

    logger.debug(
        "adapted parser %r: %s, %s",
        coalesce(name, parser.prog),
        quantify(len(arguments), "argument"),
        quantify(len(children), "subcommand"),
    )
    return Command(coalesce(name, parser.prog), children, arguments)


__all__ = (
    "from_parser",
)
