"""
Utility behavioral tests (sentinel, coalesce, name check, flatten).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import unittest
from unittest import TestCase

from libcli.utils import Unset, UnsetType, coalesce, check_name, flatten


class TestUnset(TestCase):
    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testFalsyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Other", (UnsetType,), {})

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)


class TestCheckName(TestCase):
    def testValidNames(self):
        for name in ("a", "x1", "dry-run", "snake_case", "A-1_b"):
            with self.subTest(name=name):
                self.assertIsNone(check_name(name))

    def testEmptyName(self):
        self.assertEqual(check_name(""), "must contain at least one character")
        self.assertEqual(check_name(None), "must contain at least one character")

    def testDisallowedCharacters(self):
        for name in ("a b", "a.b", "é", "a=b"):
            with self.subTest(name=name):
                self.assertEqual(
                    check_name(name),
                    "must only contain ASCII letters, numbers, hyphens, and underscores",
                )

    def testBoundaries(self):
        for name in ("-a", "a-", "_a", "a_", "-"):
            with self.subTest(name=name):
                self.assertEqual(check_name(name), "must start and end with an alphanumeric character")


class TestFlatten(TestCase):
    def testNestedLists(self):
        self.assertEqual(flatten([1, [2, [3]], 4]), [1, 2, 3, 4])

    def testScalar(self):
        self.assertEqual(flatten(5), [5])

    def testDoesNotMutate(self):
        value = [[1, 2], [3]]
        flatten(value)
        self.assertEqual(value, [[1, 2], [3]])


if __name__ == "__main__":
    unittest.main()
