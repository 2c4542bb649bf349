"""
Tests for the utility helpers.

This module verifies the building blocks shared by the package:
- The Unset sentinel (identity, falsiness, representation, finality).
- coalesce(), which only ever replaces Unset.
- rename() in both its direct and decorator forms.
- mirror(), which hands out copies of container fields.
- collapse(), the whitespace normalizer used by both matching modes.
"""
import unittest
from unittest import TestCase

from argmatch.utils import *


class UnsetTest(TestCase):
    """Identity and dunder behavior of the Unset sentinel."""

    def testConstructorReturnsSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalsy(self):
        self.assertFalse(Unset)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            class Sub(UnsetType):  # NOQA: F-841
                pass


class CoalesceTest(TestCase):
    def testReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testKeepsFalsyValues(self):
        for value in (None, 0, "", []):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)

    def testDefaultIsNone(self):
        self.assertIsNone(coalesce(Unset))


class RenameTest(TestCase):
    def testDirectForm(self):
        def f():
            pass

        self.assertIs(rename(f, "g"), f)
        self.assertEqual(f.__name__, "g")
        self.assertEqual(f.__qualname__, "g")

    def testDecoratorForm(self):
        @rename("converter")
        def f():
            pass

        self.assertEqual(f.__name__, "converter")

    def testRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            rename(42, "x")

    def testRejectsNonStringName(self):
        with self.assertRaises(TypeError):
            rename(lambda: None, 42)
        with self.assertRaises(TypeError):
            rename(42)

    def testRejectsWrongArity(self):
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename(lambda: None, "a", "b")


class MirrorTest(TestCase):
    def setUp(self):
        class Holder:
            items = mirror("items")
            pair = mirror("pair")
            mapping = mirror("mapping")

            def __init__(self):
                self._items = [1, [2, 3]]
                self._pair = ("a", "b")
                self._mapping = {"k": [1]}

        self.holder = Holder()

    def testListsAreCopied(self):
        items = self.holder.items
        items[1].append(4)
        self.assertEqual(self.holder.items, [1, [2, 3]])

    def testTuplesStayTuples(self):
        self.assertEqual(self.holder.pair, ("a", "b"))
        self.assertIsInstance(self.holder.pair, tuple)

    def testMappingsAreCopied(self):
        self.holder.mapping["k"].append(2)
        self.assertEqual(self.holder.mapping, {"k": [1]})

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            self.holder.items = []

    def testRejectsNonStringName(self):
        with self.assertRaises(TypeError):
            mirror(1)


class CollapseTest(TestCase):
    def testCollapsesRunsAndTrims(self):
        self.assertEqual(collapse("  -n \t 42\n Alice  "), "-n 42 Alice")

    def testEmpty(self):
        self.assertEqual(collapse("   "), "")

    def testRejectsNonString(self):
        with self.assertRaises(TypeError):
            collapse(["-n"])


if __name__ == "__main__":
    unittest.main()
