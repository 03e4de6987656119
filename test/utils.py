"""
Utility tests: the Unset sentinel, coalesce, rename, mirror and plural helpers.
"""
import unittest
from unittest import TestCase

from argorder.utils import *


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalseyButNotNone(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertEqual(repr(Unset), "Unset")

    def testUnionSupport(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("x", Unset | str)

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            class Custom(UnsetType):  # NOQA: F-841
                pass


class TestHelpers(TestCase):

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertEqual(coalesce(0, 1), 0)

    def testRename(self):
        @rename("renamed")
        def original():
            pass

        self.assertEqual(original.__name__, "renamed")

    def testMirrorReturnsCopies(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = ("a", "b")

        holder = Holder()
        self.assertEqual(holder.items, ["a", "b"])
        with self.assertRaises(AttributeError):
            holder.items = []

    def testPluralize(self):
        self.assertEqual(pluralize("error"), "errors")
        self.assertEqual(pluralize("short flag"), "short flags")
        self.assertEqual(pluralize("Entry"), "Entries")
        self.assertEqual(pluralize("match"), "matches")

    def testQuantify(self):
        self.assertEqual(quantify(1, "file"), "1 file")
        self.assertEqual(quantify(0, "file"), "0 files")


if __name__ == "__main__":
    unittest.main()
