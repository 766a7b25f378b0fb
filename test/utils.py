"""
Utilities module behavioral tests (sentinel, coalesce, rename, mirror, keys, prefixes).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from kuma.utils import Unset, UnsetType, coalesce, rename, mirror, keyify, abbreviate


class TestUnset(TestCase):

    def testUnsetIsFalseyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnsetIsSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testUnsetCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):
                pass

    def testUnsetSupportsUnionChecks(self):
        self.assertTrue(isinstance("x", str | Unset))
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertFalse(isinstance(1, str | Unset))

    def testCoalescePreservesFalseyValues(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(Unset))


class TestHelpers(TestCase):

    def testRenameFunctionForm(self):
        function = rename(lambda: None, "handler")
        self.assertEqual(function.__name__, "handler")
        self.assertEqual(function.__qualname__, "handler")

    def testRenameDecoratorForm(self):
        @rename("handler")
        def function():
            pass

        self.assertEqual(function.__name__, "handler")

    def testRenameRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            rename(42, "handler")

    def testMirrorReturnsCopies(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = ["a"]

        holder = Holder()
        holder.items.append("b")
        self.assertEqual(holder.items, ["a"])
        with self.assertRaises(AttributeError):
            holder.items = []

    def testMirrorReturnsImmutableFieldsAsIs(self):
        class Holder:
            names = mirror("names")

            def __init__(self):
                self._names = ("-d", "--debug")

        holder = Holder()
        self.assertIs(holder.names, holder._names)

    def testKeyifyUsesFirstLongToken(self):
        self.assertEqual(keyify(["-c", "--config FILE"]), "config")
        self.assertEqual(keyify(["--show-cops [COP1,COP2,...]"]), "show_cops")
        self.assertEqual(keyify(["-n", "--no-color"]), "no_color")

    def testKeyifyRequiresLongToken(self):
        with self.assertRaises(ValueError):
            keyify(["-c"])

    def testAbbreviateShortestUniquePrefixes(self):
        self.assertEqual(
            abbreviate(["files", "fuubar", "json", "progress"]),
            {"files": "fi", "fuubar": "fu", "json": "j", "progress": "p"},
        )

    def testAbbreviateWordPrefixOfAnother(self):
        self.assertEqual(abbreviate(["on", "only"]), {"on": "on", "only": "onl"})


if __name__ == "__main__":
    unittest.main()
