"""
Tests for the Unset sentinel and the small helpers shared by the package.

This module verifies:
- Singleton identity, falsy semantics and copy/pickle stability of Unset.
- Finality (UnsetType cannot be subclassed).
- coalesce() replacing only Unset.
- normalize() producing the canonical argument name.
- ordinal() labels for input positions.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from argsparser.utils import *


class UnsetTest(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalsy(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, 0)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testCopyKeepsIdentity(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testPickleKeepsIdentity(self):
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinal(self):
        with self.assertRaises(TypeError):
            class Subclass(UnsetType):
                pass

    def testUnionWithTypes(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("text", str | Unset)
        self.assertNotIsInstance(1, str | Unset)


class CoalesceTest(TestCase):

    def testUnsetIsReplaced(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testFalsyValuesArePreserved(self):
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertEqual(coalesce("", "fallback"), "")

    def testDefaultIsNone(self):
        self.assertIsNone(coalesce(Unset))


class NormalizeTest(TestCase):

    def testPrefixesAreEquivalent(self):
        self.assertEqual(normalize("port"), "port")
        self.assertEqual(normalize("-port"), "port")
        self.assertEqual(normalize("--port"), "port")

    def testCaseAndWhitespace(self):
        self.assertEqual(normalize("  --Port "), "port")
        self.assertEqual(normalize("- Port"), "port")

    def testOnlyOnePrefixIsRemoved(self):
        self.assertEqual(normalize("---port"), "-port")

    def testNonStringRejected(self):
        with self.assertRaises(TypeError):
            normalize(42)


class OrdinalTest(TestCase):

    def testWords(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(4), "fourth")
        self.assertEqual(ordinal(10), "tenth")

    def testTeens(self):
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(13), "13th")
        self.assertEqual(ordinal(112), "112th")

    def testSuffixes(self):
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(24), "24th")
        self.assertEqual(ordinal(101), "101st")


class MirrorTest(TestCase):

    def testReadOnlyProperty(self):
        class Holder:
            value = mirror("value")

            def __init__(self):
                self._value = 42

        holder = Holder()
        self.assertEqual(holder.value, 42)
        with self.assertRaises(AttributeError):
            holder.value = 0

    def testRenameSetsNames(self):
        @rename("renamed")
        def original():
            pass

        self.assertEqual(original.__name__, "renamed")
        self.assertEqual(original.__qualname__, "renamed")


if __name__ == "__main__":
    unittest.main()
