"""
Fault tests.

Scope
- FaultCode / ViolationKind mapping and Violation construction rules.
- trigger(): raise by default, print in shell mode, defer when asked.
- ValidationExit grouping and option replacement.
"""
import contextlib
import copy
import io
import unittest
from unittest import TestCase

from argorder import (
    FaultCode,
    InputError,
    MalformedSourceError,
    OrderingError,
    ValidationExit,
    ValidationFault,
    Violation,
    ViolationKind,
    trigger,
)


VIOLATION = Violation(ViolationKind.LONG_FLAG_ORDER, ["x"], ["--b", "--a"], ["--a", "--b"])


class TestCodes(TestCase):

    def testEveryKindHasACode(self):
        self.assertEqual({kind.code for kind in ViolationKind}, {
            FaultCode.SUBCOMMAND_ORDER,
            FaultCode.SHORT_FLAG_ORDER,
            FaultCode.LONG_FLAG_ORDER,
            FaultCode.ARGUMENT_GROUP_ORDER,
        })

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.MALFORMED_SOURCE.normalize(), "22111")


class TestViolation(TestCase):

    def testFieldsAreCopies(self):
        VIOLATION.path.append("y")
        self.assertEqual(VIOLATION.path, ["x"])

    def testCommandIsLastPathElement(self):
        violation = Violation(ViolationKind.SUBCOMMAND_ORDER, ["a", "b"], ["d", "c"], ["c", "d"])
        self.assertEqual(violation.command, "b")
        self.assertIs(violation.code, FaultCode.SUBCOMMAND_ORDER)

    def testEmptyPathRejected(self):
        with self.assertRaises(ValueError):
            Violation(ViolationKind.SUBCOMMAND_ORDER, [], [], [])

    def testStringsRequired(self):
        with self.assertRaises(TypeError):
            Violation(ViolationKind.SUBCOMMAND_ORDER, "root", [], [])

    def testKindRequired(self):
        with self.assertRaises(TypeError):
            Violation("SubcommandOrder", ["x"], [], [])


class TestTrigger(TestCase):

    def testRaisesByDefault(self):
        with self.assertRaises(MalformedSourceError):
            trigger(MalformedSourceError("bad", origin="a.rs"))

    def testOptionsAreMerged(self):
        with self.assertRaises(OrderingError) as context:
            trigger(OrderingError("unsorted", violation=VIOLATION), hint="sort them")
        self.assertEqual(context.exception.options["hint"], "sort them")
        self.assertEqual(context.exception.options["code"], FaultCode.LONG_FLAG_ORDER)

    def testShellModeExits(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                trigger(MalformedSourceError("bad"), shell=True, colorful=False)

    def testDeferredShellModeReturns(self):
        with contextlib.redirect_stderr(stream := io.StringIO()):
            trigger(MalformedSourceError("bad"), shell=True, deferred=True, colorful=False)
        self.assertIn("Malformed Source", stream.getvalue())

    def testRejectsPlainExceptions(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))

    def testOrderingErrorRequiresViolation(self):
        with self.assertRaises(TypeError):
            OrderingError("unsorted")


class TestHierarchy(TestCase):

    def testInputErrorsAreValidationFaults(self):
        self.assertTrue(issubclass(MalformedSourceError, InputError))
        self.assertTrue(issubclass(InputError, ValidationFault))

    def testInputErrorOrigin(self):
        self.assertEqual(MalformedSourceError("bad", origin="a.rs").origin, "a.rs")

    def testValidationExitGroupsFaults(self):
        group = ValidationExit([OrderingError("one", violation=VIOLATION), MalformedSourceError("two")])
        self.assertEqual(len(group.exceptions), 2)
        matched, rest = group.split(OrderingError)
        self.assertIsInstance(matched, ValidationExit)
        self.assertEqual(len(matched.exceptions), 1)
        self.assertEqual(len(rest.exceptions), 1)

    def testValidationExitReplace(self):
        group = copy.replace(ValidationExit([MalformedSourceError("bad")]), fancy=True)
        self.assertTrue(group.options["fancy"])


if __name__ == "__main__":
    unittest.main()
