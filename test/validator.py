"""
Validator tests (runtime mode and static mode).

Scope
- One violation per disordered category, reported at the offending node.
- Positionals are never sorted; group order is checked independently.
- Fail-fast vs collect-all, idempotence, is_sorted/assert_sorted.
- validate_source / validate_path for Rust sources, including input errors.
"""
import argparse
import os
import tempfile
import unittest
from unittest import TestCase

from argorder import (
    Argument,
    MalformedSourceError,
    OrderingError,
    Policy,
    UnreadableSourceError,
    ValidationExit,
    ViolationKind,
    assert_sorted,
    command,
    is_sorted,
    validate,
    validate_path,
    validate_source,
)


def positional(id):
    return Argument(id, positional=True)


def short(id, char, long=None):
    if long is None:
        return Argument(id, short=char)
    return Argument(id, short=char, long=long)


def longonly(id):
    return Argument(id, long=id)


class TestRuntimeValidation(TestCase):

    def testSortedTreeHasNoViolations(self):
        tree = command(
            "todo",
            positional("file"),
            short("all", "a"),
            short("verbose", "v"),
            longonly("color"),
            longonly("dry-run"),
            children=[command("add"), command("list", short("long", "l"))],
        )
        self.assertEqual(validate(tree), ())
        self.assertTrue(is_sorted(tree))
        assert_sorted(tree)

    def testUnsortedSubcommands(self):
        tree = command("todo", children=[command("list"), command("add")])
        violation, = validate(tree)
        self.assertIs(violation.kind, ViolationKind.SUBCOMMAND_ORDER)
        self.assertEqual(violation.path, ["todo"])
        self.assertEqual(violation.actual, ["list", "add"])
        self.assertEqual(violation.expected, ["add", "list"])

    def testNestedViolationPathEndsAtNode(self):
        tree = command("git", children=[
            command("remote", children=[
                command("set", children=[command("url", short("verbose", "v"), short("all", "a"))]),
            ]),
        ])
        violation, = validate(tree)
        self.assertIs(violation.kind, ViolationKind.SHORT_FLAG_ORDER)
        self.assertEqual(violation.path, ["git", "remote", "set", "url"])
        self.assertEqual(violation.actual, ["-v", "-a"])
        self.assertEqual(violation.expected, ["-a", "-v"])

    def testShortFlagTieBreak(self):
        self.assertTrue(is_sorted(command("x", short("ignore", "i"), short("include", "I"))))
        violation, = validate(command("x", short("include", "I"), short("ignore", "i")))
        self.assertEqual(violation.expected, ["-i", "-I"])

    def testShortFlagsIgnoreTheirLongNames(self):
        tree = command("x", short("zebra", "a", "zebra"), short("apple", "b", "apple"))
        self.assertTrue(is_sorted(tree))

    def testUnsortedLongOnlyFlags(self):
        violation, = validate(command("x", longonly("verbose"), longonly("config")))
        self.assertIs(violation.kind, ViolationKind.LONG_FLAG_ORDER)
        self.assertEqual(violation.actual, ["--verbose", "--config"])
        self.assertEqual(violation.expected, ["--config", "--verbose"])

    def testPositionalsAreNeverSorted(self):
        self.assertEqual(validate(command("x", positional("second"), positional("first"))), ())

    def testGroupOrderViolation(self):
        tree = command("x", short("verbose", "v"), positional("file"))
        violation, = validate(tree)
        self.assertIs(violation.kind, ViolationKind.ARGUMENT_GROUP_ORDER)
        self.assertEqual(violation.actual, ["verbose", "file"])
        self.assertEqual(violation.expected, ["file", "verbose"])

    def testLongOnlyBeforeShortIsGroupViolation(self):
        violation, = validate(command("x", longonly("config"), short("verbose", "v")))
        self.assertIs(violation.kind, ViolationKind.ARGUMENT_GROUP_ORDER)

    def testExcludedArgumentsDoNotAffectGroups(self):
        tree = command("x", Argument("help"), positional("file"), Argument("internal"), short("all", "a"))
        self.assertTrue(is_sorted(tree))

    def testRuleOrderWithinNode(self):
        tree = command(
            "x",
            longonly("verbose"),
            longonly("config"),
            short("zero", "z"),
            short("all", "a"),
            children=[command("b"), command("a")],
        )
        self.assertEqual(
            [violation.kind for violation in validate(tree)],
            [
                ViolationKind.SUBCOMMAND_ORDER,
                ViolationKind.SHORT_FLAG_ORDER,
                ViolationKind.LONG_FLAG_ORDER,
                ViolationKind.ARGUMENT_GROUP_ORDER,
            ],
        )

    def testParentsReportedBeforeChildren(self):
        tree = command("root", longonly("zz"), longonly("aa"), children=[
            command("a", children=[command("z"), command("y")]),
            command("b", longonly("zz"), longonly("aa")),
        ])
        self.assertEqual(
            [violation.path for violation in validate(tree)],
            [["root"], ["root", "a"], ["root", "b"]],
        )

    def testIdempotent(self):
        tree = command("x", longonly("b"), longonly("a"), children=[command("d"), command("c")])
        self.assertEqual(validate(tree), validate(tree))


class TestPolicies(TestCase):

    def setUp(self):
        self.tree = command("x", longonly("b"), longonly("a"), children=[command("d"), command("c")])

    def testFailFastRaisesFirstViolation(self):
        with self.assertRaises(OrderingError) as context:
            validate(self.tree, Policy.FAIL_FAST)
        self.assertIs(context.exception.violation.kind, ViolationKind.SUBCOMMAND_ORDER)
        self.assertIn("Subcommands in 'x' are not sorted alphabetically!", str(context.exception))

    def testFailFastOnSortedTreeReturnsEmpty(self):
        self.assertEqual(validate(command("x"), Policy.FAIL_FAST), ())

    def testCollectAllMatchesFailFastFirst(self):
        first = validate(self.tree)[0]
        with self.assertRaises(OrderingError) as context:
            validate(self.tree, Policy.FAIL_FAST)
        self.assertEqual(context.exception.violation, first)

    def testAssertSortedCollectAllRaisesGroup(self):
        with self.assertRaises(ValidationExit) as context:
            assert_sorted(self.tree, Policy.COLLECT_ALL)
        self.assertEqual(len(context.exception.exceptions), 2)
        self.assertTrue(all(isinstance(error, OrderingError) for error in context.exception.exceptions))

    def testPolicyMustBeAPolicy(self):
        with self.assertRaises(TypeError):
            validate(self.tree, "fail-fast")


class TestParserValidation(TestCase):

    def testArgumentParserIsAccepted(self):
        parser = argparse.ArgumentParser(prog="tool")
        parser.add_argument("-v", "--verbose", action="store_true")
        parser.add_argument("-a", "--all", action="store_true")
        violation, = validate(parser)
        self.assertIs(violation.kind, ViolationKind.SHORT_FLAG_ORDER)
        self.assertEqual(violation.path, ["tool"])


SOURCE = """
use clap::{Parser, Subcommand};

#[derive(Parser)]
struct Cli {
    #[command(subcommand)]
    command: Commands,
}

#[derive(Subcommand)]
enum Commands {
    List,
    Add,
    Update,
    Delete,
}
"""


class TestStaticValidation(TestCase):

    def testUnsortedEnum(self):
        violation, = validate_source(SOURCE)
        self.assertIs(violation.kind, ViolationKind.SUBCOMMAND_ORDER)
        self.assertEqual(violation.path, ["Commands"])
        self.assertEqual(violation.actual, ["list", "add", "update", "delete"])
        self.assertEqual(violation.expected, ["add", "delete", "list", "update"])

    def testExplicitNamesDriveTheOrder(self):
        source = """
        #[derive(clap::Subcommand)]
        enum Commands {
            #[command(name = "aaa")]
            Zebra,
            Middle,
        }
        """
        self.assertEqual(validate_source(source), ())

    def testEnumsAreIndependent(self):
        source = """
        #[derive(Subcommand)]
        enum First { B, A }

        #[derive(Subcommand)]
        enum Second { A, B }

        #[derive(Subcommand)]
        enum Third { D, C }
        """
        self.assertEqual([violation.path for violation in validate_source(source)], [["First"], ["Third"]])

    def testNonSubcommandEnumsAreIgnored(self):
        self.assertEqual(validate_source("#[derive(Debug)] enum Color { Red, Blue }"), ())

    def testFailFastStatic(self):
        with self.assertRaises(OrderingError):
            validate_source(SOURCE, Policy.FAIL_FAST)

    def testMalformedSource(self):
        with self.assertRaises(MalformedSourceError) as context:
            validate_source("#[derive(Subcommand)] enum Commands { A, B", origin="broken.rs")
        self.assertEqual(context.exception.origin, "broken.rs")

    def testDuplicateExternalNames(self):
        source = """
        #[derive(Subcommand)]
        enum Commands {
            #[command(name = "add")]
            Insert,
            Add,
        }
        """
        with self.assertRaises(MalformedSourceError):
            validate_source(source)

    def testValidatePath(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "main.rs")
            with open(path, "w", encoding="utf-8") as file:
                file.write(SOURCE)
            violation, = validate_path(path)
        self.assertEqual(violation.expected, ["add", "delete", "list", "update"])

    def testMissingFile(self):
        with tempfile.TemporaryDirectory() as directory:
            with self.assertRaises(UnreadableSourceError):
                validate_path(os.path.join(directory, "missing.rs"))

    def testUndecodableFile(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "binary.rs")
            with open(path, "wb") as file:
                file.write(b"\xff\xfe\xfa")
            with self.assertRaises(UnreadableSourceError):
                validate_path(path)


if __name__ == "__main__":
    unittest.main()
