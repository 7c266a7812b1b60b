"""
Tests for the internal helpers (Unset, coalesce, rename, mirror).
"""
import copy
import unittest
from unittest import TestCase

from clopts.utils import *


class UnsetTest(TestCase):
    """Semantics of the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testFalsy(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testFinal(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):
                pass

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(b"", "fallback"), b"")


class HelpersTest(TestCase):
    """rename() and mirror()."""

    def testRenameFunctionForm(self):
        def work():
            pass

        self.assertIs(rename(work, "do_work"), work)
        self.assertEqual(work.__name__, "do_work")
        self.assertEqual(work.__qualname__, "do_work")

    def testRenameDecoratorForm(self):
        @rename("do_work")
        def work():
            pass

        self.assertEqual(work.__name__, "do_work")

    def testRenameArity(self):
        with self.assertRaises(TypeError):
            rename()

    def testMirrorFreezes(self):
        class Holder:
            items = mirror("items")
            data = mirror("data")

            def __init__(self):
                self._items = [1, 2]
                self._data = b"raw"

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertEqual(holder.data, b"raw")
        with self.assertRaises(AttributeError):
            holder.items = []


if __name__ == '__main__':
    unittest.main()
