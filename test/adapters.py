"""
argparse adapter tests.

Scope
- Positionals, short and long names, implicit help/version arguments.
- Subparsers become children in registration order; aliases collapse.
- Shared dests keep argument ids unique.
"""
import argparse
import unittest
from unittest import TestCase

from argorder import ArgumentKind, ViolationKind, is_sorted, validate
from argorder.adapters import from_parser
from argorder.cli import build_parser


class TestFromParser(TestCase):

    def setUp(self):
        self.parser = argparse.ArgumentParser(prog="todo")
        self.parser.add_argument("file")
        self.parser.add_argument("-a", "--all", action="store_true")
        self.parser.add_argument("--color")
        self.parser.add_argument("--version", action="version", version="1")
        subparsers = self.parser.add_subparsers(dest="command")
        subparsers.add_parser("add", aliases=["a", "new"])
        lister = subparsers.add_parser("list")
        lister.add_argument("-l", "--long", action="store_true")

    def testRootNameDefaultsToProg(self):
        self.assertEqual(from_parser(self.parser).name, "todo")

    def testExplicitRootName(self):
        self.assertEqual(from_parser(self.parser, "cli").name, "cli")

    def testArgumentsKeepDeclarationOrder(self):
        tree = from_parser(self.parser)
        self.assertEqual([argument.id for argument in tree.arguments], ["help", "file", "all", "color", "version"])

    def testArgumentKinds(self):
        kinds = [argument.kind for argument in from_parser(self.parser).arguments]
        self.assertEqual(
            kinds,
            [None, ArgumentKind.POSITIONAL, ArgumentKind.SHORT_FLAG, ArgumentKind.LONG_ONLY, None],
        )

    def testShortAndLongNames(self):
        argument = from_parser(self.parser).arguments[2]
        self.assertEqual((argument.short, argument.long), ("a", "all"))

    def testSubparsersBecomeChildren(self):
        tree = from_parser(self.parser)
        self.assertEqual([child.name for child in tree.children], ["add", "list"])
        self.assertEqual([argument.id for argument in tree["list"].arguments], ["help", "long"])

    def testSortedParserPasses(self):
        self.assertTrue(is_sorted(self.parser))

    def testSharedDestsStayUnique(self):
        parser = argparse.ArgumentParser(prog="tool")
        parser.add_argument("--slow", dest="mode", action="store_const", const="slow")
        parser.add_argument("--fast", dest="mode", action="store_const", const="fast")
        self.assertEqual([argument.id for argument in from_parser(parser).arguments], ["help", "mode", "--fast"])
        violation, = validate(parser)
        self.assertIs(violation.kind, ViolationKind.LONG_FLAG_ORDER)
        self.assertEqual(violation.actual, ["--slow", "--fast"])

    def testRejectsNonParsers(self):
        with self.assertRaises(TypeError):
            from_parser(object())


class TestOwnParser(TestCase):

    def testArgorderCommandLineIsSorted(self):
        self.assertEqual(validate(build_parser()), ())


if __name__ == "__main__":
    unittest.main()
