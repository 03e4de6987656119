"""
Command-line entry point: check Rust sources for sorted clap Subcommand enums.

    argorder src/cli.rs src/commands/*.rs
    argorder --json src/main.rs
    argorder -f -vv src/main.rs

Every file is checked on its own; a file that cannot be read or parsed is a
failure for that file only. The exit status is 1 when any file failed (or when
no file was given) and 0 otherwise.
"""
import argparse
import logging

from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .faults import *
from .reporting import FileReport, Reporter
from .validator import Policy, validate_path

logger = logging.getLogger(__name__)

_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def build_parser():
    """
    The argorder argument parser.

    Arguments are declared positionals first, then short flags, then
    long-only flags, each group sorted; tests validate it with argorder itself.
    """
    parser = argparse.ArgumentParser(
        prog="argorder",
        description="Validate that clap Subcommand enums are sorted alphabetically",
    )
    parser.add_argument("files", nargs="*", metavar="FILE", help="Rust source files to validate")
    parser.add_argument(
        "-c", "--color",
        choices=("auto", "always", "never"),
        default="auto",
        help="colorize output (default: auto)",
    )
    parser.add_argument("-f", "--fail-fast", action="store_true", help="stop each file at its first violation")
    parser.add_argument("-q", "--quiet", action="store_true", help="only report failing files")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="log more (repeatable)")
    parser.add_argument("--fancy", action="store_true", help="render each error in a panel")
    parser.add_argument("--json", action="store_true", help="print a JSON report on stdout")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def consoles(color, /):
    """(stdout, stderr) consoles honouring the --color choice."""
    match color:
        case "always":
            options = {"force_terminal": True}
        case "never":
            options = {"color_system": None}
        case _:
            options = {}
    return Console(**options), Console(stderr=True, **options)


def configure_logging(verbosity, console, /):
    """Route the argorder logger through rich on the given console."""
    root = logging.getLogger("argorder")
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)
    root.addHandler(RichHandler(console=console, show_path=False, show_time=False))
    root.setLevel(_LEVELS[min(verbosity, len(_LEVELS) - 1)])
    root.propagate = False


def check(path, /, policy=Policy.COLLECT_ALL):
    """
    Check one file and fold every outcome into a FileReport.

    Under fail-fast the first violation stops the file and becomes its only
    reported violation.
    """
    try:
        violations = validate_path(path, policy)
    except OrderingError as error:
        return FileReport(str(path), [error.violation])
    except InputError as error:
        logger.info("%s: %s", path, error.options["title"])
        return FileReport(str(path), errors=[error])
    return FileReport(str(path), violations)


def main(argv=None):
    """
    Run the command line and return the exit status.

    Parameters
    - argv: argument list without the program name; sys.argv[1:] when None.
    """
    options = build_parser().parse_args(argv)
    stdout, stderr = consoles(options.color)
    configure_logging(options.verbose, stderr)

    if not options.files:
        stderr.print("No files specified", highlight=False)
        return 1

    policy = Policy.FAIL_FAST if options.fail_fast else Policy.COLLECT_ALL
    reports = [check(path, policy) for path in options.files]

    if options.json:
        stdout.print_json(data={"files": [report.to_dict() for report in reports]})
    else:
        reporter = Reporter(stdout, stderr, fancy=options.fancy, quiet=options.quiet)
        for report in reports:
            reporter.emit(report)
        if len(reports) > 1:
            reporter.summary(reports)

    return 0 if all(report.ok for report in reports) else 1


__all__ = (
    "build_parser",
    "main",
)
