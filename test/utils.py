"""
Tests for the shared utilities.

This module verifies:
- The Unset sentinel (singleton identity, falsy semantics, copy/pickle
  identity, PEP 604 unions, finality).
- coalesce(), rename() and mirror() behaviors.
- quote() escaping rules.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from pennant.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` sentinel.
    """

    def testSingleton(self) -> None:
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalsy(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, 0)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testCopyPreservesIdentity(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(copy.deepcopy([Unset])[0], Unset)

    def testPicklePreservesIdentity(self) -> None:
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testUnion(self) -> None:
        """
        `str | Unset` builds a union usable in isinstance checks.
        """
        self.assertIsInstance("text", str | Unset)
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance(Unset, Unset | str)
        self.assertNotIsInstance(1, str | Unset)

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})


class HelpersTest(TestCase):
    """
    Test suite for coalesce(), rename() and mirror().
    """

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertEqual(coalesce("name", "fallback"), "name")
        # Falsy values are legitimate values.
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertEqual(coalesce("", "x"), "")

    def testRenameCallable(self) -> None:
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testRenameDecorator(self) -> None:
        @rename("decorated")
        def function():
            pass

        self.assertEqual(function.__name__, "decorated")

    def testRenameRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename()

    def testMirrorReturnsCopies(self) -> None:
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = [1, [2, 3]]

        holder = Holder()
        items = holder.items
        items.append(4)
        items[1].append(5)
        self.assertEqual(holder.items, [1, [2, 3]])

    def testMirrorKeepsCustomContainers(self) -> None:
        class Pair(list):
            pass

        class Holder:
            value = mirror("value")
            names = mirror("names")

            def __init__(self):
                self._value = Pair(["a", "b"])
                self._names = ("x", "y")

        holder = Holder()
        self.assertIsInstance(holder.value, Pair)
        self.assertEqual(holder.names, ["x", "y"])

    def testMirrorIsReadOnly(self) -> None:
        class Holder:
            name = mirror("name")
            _name = "value"

        with self.assertRaises(AttributeError):
            Holder().name = "other"


class QuoteTest(TestCase):
    """
    Test suite for quote().
    """

    def testPlain(self) -> None:
        self.assertEqual(quote("all"), '"all"')
        self.assertEqual(quote(""), '""')

    def testEscapes(self) -> None:
        self.assertEqual(quote('say "hi"'), '"say \\"hi\\""')
        self.assertEqual(quote("a\\b"), '"a\\\\b"')
        self.assertEqual(quote("line\nbreak\ttab"), '"line\\nbreak\\ttab"')
        self.assertEqual(quote("\x00"), '"\\x00"')

    def testUnicodeKeptAsIs(self) -> None:
        self.assertEqual(quote("µs"), '"µs"')

    def testRejectsNonString(self) -> None:
        with self.assertRaises(TypeError):
            quote(1)


if __name__ == "__main__":
    unittest.main()
