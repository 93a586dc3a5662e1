"""
Type coercion tests.

Scope
- coerce(): text → value for every supported kind, failures as (False, Unset).
- adapt(): declared defaults brought in line with the declared type.
- typename(), quoted(), zero(): display and accessor helpers.
"""
import unittest
from datetime import datetime
from decimal import Decimal
from unittest import TestCase

from argsparser.coercion import *
from argsparser.utils import Unset


class Custom:
    pass


class ValueTypeTest(TestCase):

    def testSupportedTypes(self):
        self.assertIs(ValueType.of(str), ValueType.TEXT)
        self.assertIs(ValueType.of(int), ValueType.INTEGER)
        self.assertIs(ValueType.of(float), ValueType.NUMBER)
        self.assertIs(ValueType.of(Decimal), ValueType.NUMBER)
        self.assertIs(ValueType.of(bool), ValueType.BOOLEAN)
        self.assertIs(ValueType.of(datetime), ValueType.DATETIME)

    def testEverythingElseIsOther(self):
        self.assertIs(ValueType.of(Custom), ValueType.OTHER)
        self.assertIs(ValueType.of(list), ValueType.OTHER)


class CoerceTest(TestCase):

    def testText(self):
        self.assertEqual(coerce(str, "Site Title"), (True, "Site Title"))

    def testInteger(self):
        self.assertEqual(coerce(int, "3000"), (True, 3000))
        self.assertEqual(coerce(int, " -12 "), (True, -12))
        self.assertEqual(coerce(int, "3.5"), (False, Unset))
        self.assertEqual(coerce(int, "true"), (False, Unset))

    def testNumber(self):
        self.assertEqual(coerce(float, "3.5"), (True, 3.5))
        self.assertEqual(coerce(float, "2"), (True, 2.0))
        self.assertEqual(coerce(float, "abc"), (False, Unset))
        self.assertEqual(coerce(Decimal, "10.25"), (True, Decimal("10.25")))
        self.assertEqual(coerce(Decimal, "ten"), (False, Unset))

    def testNumbersFollowLiteralGrammar(self):
        self.assertEqual(coerce(int, "1_000"), (True, 1000))
        self.assertEqual(coerce(float, "inf"), (True, float("inf")))
        ok, value = coerce(float, "nan")
        self.assertTrue(ok)
        self.assertNotEqual(value, value)

    def testBoolean(self):
        for literal in ("true", "TRUE", "yes", "on", "1"):
            self.assertEqual(coerce(bool, literal), (True, True), literal)
        for literal in ("false", "No", "off", "0"):
            self.assertEqual(coerce(bool, literal), (True, False), literal)
        self.assertEqual(coerce(bool, "maybe"), (False, Unset))

    def testDatetimeIso(self):
        self.assertEqual(coerce(datetime, "1980-04-15"), (True, datetime(1980, 4, 15)))
        self.assertEqual(coerce(datetime, "1980-04-15T10:30:00"), (True, datetime(1980, 4, 15, 10, 30)))

    def testDatetimeTextualMonth(self):
        self.assertEqual(coerce(datetime, "01 JAN 1980"), (True, datetime(1980, 1, 1)))
        self.assertEqual(coerce(datetime, "April 15, 1980"), (True, datetime(1980, 4, 15)))
        self.assertEqual(coerce(datetime, "1980/04/15 13:45"), (True, datetime(1980, 4, 15, 13, 45)))

    def testDatetimeZoneIsDiscarded(self):
        self.assertEqual(coerce(datetime, "15 APR 1980 GMT"), (True, datetime(1980, 4, 15)))
        self.assertEqual(coerce(datetime, "1980-04-15T10:30:00+01:00"), (True, datetime(1980, 4, 15, 10, 30)))

    def testDatetimeRejected(self):
        self.assertEqual(coerce(datetime, "notadate"), (False, Unset))
        self.assertEqual(coerce(datetime, "   "), (False, Unset))

    def testValueTypeSelectsCanonicalType(self):
        self.assertEqual(coerce(ValueType.NUMBER, "1.5"), (True, 1.5))
        self.assertEqual(coerce(ValueType.OTHER, "1.5"), (False, Unset))

    def testOtherIsNeverConvertible(self):
        self.assertEqual(coerce(Custom, "anything"), (False, Unset))

    def testNonTextRejected(self):
        self.assertEqual(coerce(int, 5), (False, Unset))


class AdaptTest(TestCase):

    def testTextIsCoerced(self):
        self.assertEqual(adapt(datetime, "01 JAN 1980"), (True, datetime(1980, 1, 1)))
        self.assertEqual(adapt(int, "1337"), (True, 1337))
        self.assertEqual(adapt(int, "many"), (False, Unset))

    def testMatchingValuesAreKept(self):
        self.assertEqual(adapt(int, 1337), (True, 1337))
        self.assertEqual(adapt(bool, False), (True, False))
        moment = datetime(2000, 1, 1)
        self.assertEqual(adapt(datetime, moment), (True, moment))

    def testNumbersAreWidened(self):
        self.assertEqual(adapt(float, 2), (True, 2.0))
        self.assertIsInstance(adapt(float, 2)[1], float)
        self.assertEqual(adapt(Decimal, 1.5), (True, Decimal("1.5")))

    def testBooleanIsNotAnInteger(self):
        self.assertEqual(adapt(int, True), (False, Unset))
        self.assertEqual(adapt(float, False), (False, Unset))

    def testMismatchRejected(self):
        self.assertEqual(adapt(int, 2.5), (False, Unset))
        self.assertEqual(adapt(bool, 1), (False, Unset))

    def testOtherAcceptsInstances(self):
        instance = Custom()
        self.assertEqual(adapt(Custom, instance), (True, instance))
        self.assertEqual(adapt(Custom, "text"), (False, Unset))


class HelpersTest(TestCase):

    def testTypename(self):
        self.assertEqual(typename(str), "text")
        self.assertEqual(typename(int), "integer")
        self.assertEqual(typename(float), "number")
        self.assertEqual(typename(Decimal), "number")
        self.assertEqual(typename(bool), "true/false")
        self.assertEqual(typename(datetime), "datetime")
        self.assertEqual(typename(Custom), "custom")

    def testQuoted(self):
        self.assertTrue(quoted(str))
        self.assertTrue(quoted(datetime))
        self.assertTrue(quoted(Custom))
        self.assertFalse(quoted(int))
        self.assertFalse(quoted(float))
        self.assertFalse(quoted(bool))

    def testZero(self):
        self.assertEqual(zero(str), "")
        self.assertEqual(zero(int), 0)
        self.assertEqual(zero(float), 0.0)
        self.assertEqual(zero(Decimal), Decimal(0))
        self.assertIs(zero(bool), False)
        self.assertEqual(zero(datetime), datetime.min)
        self.assertIsNone(zero(Custom))


if __name__ == "__main__":
    unittest.main()
