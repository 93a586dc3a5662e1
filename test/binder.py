"""
Binder tests: classified tokens plus a schema become bound state.

Scope
- phase A: provided flags, coerced option values and argument errors keyed by
  input position.
- phase B: defaults, required options and custom validators feeding the
  expectation errors in declaration order.
"""
import unittest
import warnings
from datetime import datetime
from unittest import TestCase

from argsparser.arguments import Schema
from argsparser.binder import *
from argsparser.faults import FaultCode
from argsparser.tokens import tokenize


class BindTest(TestCase):

    def setUp(self):
        self.schema = Schema()
        self.schema.declare_option("port", int, default=1337)
        self.schema.declare_option("write", required=True)
        self.schema.declare_option("dtm", datetime)
        self.schema.declare_flag("serve")

    def bind(self, *arguments):
        return bind(tokenize(arguments), self.schema)

    def testFlagRecordedOnce(self):
        binding = self.bind("-serve", "--SERVE", "-write", "out.csv")
        self.assertEqual(binding.flags, ("serve",))
        self.assertFalse(binding.has_errors)

    def testOptionIsCoerced(self):
        binding = self.bind("-port", "3000", "-write", "out.csv")
        self.assertEqual(binding.options["port"], 3000)

    def testDefaultApplied(self):
        binding = self.bind("-write", "out.csv")
        self.assertEqual(binding.options["port"], 1337)

    def testOptionsFollowDeclarationOrder(self):
        binding = self.bind("-write", "out.csv", "-port", "80")
        self.assertEqual(list(binding.options), ["port", "write"])

    def testDuplicateOptionTakesLastValue(self):
        binding = self.bind("-port", "1", "-write", "out.csv", "-port", "2")
        self.assertEqual(binding.options["port"], 2)

    def testMissingRequiredOption(self):
        binding = self.bind()
        self.assertEqual(dict(binding.expectation_errors), {"write": ("write is required",)})
        self.assertEqual(len(binding.argument_errors), 0)

    def testArgumentErrorMessages(self):
        binding = self.bind("data", "-", "-ignore", "-run", "x", "-", "1", "-port", "many", "-write", "out.csv")
        self.assertEqual(dict(binding.argument_errors), {
            1: ("unexpected value: data",),
            2: ("flag received with no name",),
            3: ("unknown flag: ignore",),
            4: ("unknown option: run",),
            6: ("option received with no name",),
            8: ("expected a value of type integer: port",),
        })

    def testUncastableValueKeepsDefault(self):
        binding = self.bind("-port", "many", "-write", "out.csv")
        self.assertEqual(binding.options["port"], 1337)

    def testUncastableRequiredValueIsNotAnExpectationError(self):
        schema = Schema()
        schema.declare_option("dtm", datetime, required=True)
        binding = bind(tokenize(["-dtm", "notadate"]), schema)
        self.assertEqual(dict(binding.argument_errors), {1: ("expected a value of type datetime: dtm",)})
        self.assertEqual(len(binding.expectation_errors), 0)

    def testLaterValidDuplicateWins(self):
        binding = self.bind("-port", "many", "-port", "8080", "-write", "out.csv")
        self.assertEqual(binding.options["port"], 8080)
        self.assertEqual(list(binding.argument_errors), [1])

    def testFaultCodesAreRecorded(self):
        binding = self.bind("data", "-port", "many")
        self.assertEqual([code for _, _, code in binding.argument_errors.coded()], [
            FaultCode.UNEXPECTED_VALUE,
            FaultCode.UNCASTABLE_VALUE,
        ])
        self.assertEqual([code for _, _, code in binding.expectation_errors.coded()], [FaultCode.MISSING_OPTION])


class ValidatorTest(TestCase):

    def setUp(self):
        self.schema = Schema()
        self.schema.declare_option("write")
        self.schema.declare_option("port", int, default=1337)
        self.schema.declare_option("read", default="site")

    def testMessagesInValidatorOrder(self):
        self.schema.register_validator("write", lambda name, value: ["not a csv file", "not writable"])
        binding = bind(tokenize(["-write", "out.txt"]), self.schema)
        self.assertEqual(binding.expectation_errors["write"], ("not a csv file", "not writable"))
        self.assertEqual(len(binding.argument_errors), 0)

    def testValidatorReceivesNameAndValue(self):
        received = []
        self.schema.register_validator("port", lambda name, value: received.append((name, value)))
        bind(tokenize(["-port", "80"]), self.schema)
        self.assertEqual(received, [("port", 80)])

    def testValidatorRunsOnDefaults(self):
        self.schema.register_validator("read", lambda name, value: ["%s cannot be %s" % (name, value)])
        binding = bind(tokenize([]), self.schema)
        self.assertEqual(binding.expectation_errors["read"], ("read cannot be site",))

    def testValidatorSkippedWithoutValue(self):
        received = []
        self.schema.register_validator("write", lambda name, value: received.append(value))
        binding = bind(tokenize([]), self.schema)
        self.assertEqual(received, [])
        self.assertFalse(binding.has_errors)

    def testSingleMessageString(self):
        self.schema.register_validator("write", lambda name, value: "not a csv file")
        binding = bind(tokenize(["-write", "out.txt"]), self.schema)
        self.assertEqual(binding.expectation_errors["write"], ("not a csv file",))

    def testExpectationErrorsFollowDeclarationOrder(self):
        schema = Schema()
        schema.declare_option("b", required=True)
        schema.declare_option("a", required=True)
        schema.declare_option("c")
        schema.register_validator("c", lambda name, value: ["bad c"])
        binding = bind(tokenize(["-c", "x"]), schema)
        self.assertEqual(list(binding.expectation_errors), ["b", "a", "c"])


class RequiredFlagTest(TestCase):

    def testMissingRequiredFlagIsNotAnError(self):
        schema = Schema()
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            schema.declare_flag("force", required=True)
        binding = bind(tokenize([]), schema)
        self.assertFalse(binding.has_errors)
        self.assertEqual(binding.flags, ())


if __name__ == "__main__":
    unittest.main()
