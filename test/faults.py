"""
Faults module behavioral tests (parse errors, codes, rendering, trigger).

Scope
- Validate payloads, equality and hashing of the four parse errors.
- Validate user-facing messages, including undecodable attempts.
- Validate rich rendering and host customization through __main__.
- Validate trigger() in raising and shell modes, and getdoc().

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase, mock

from rich.console import Console

from clopts import (
    FaultCode,
    ForbiddenValue,
    Long,
    NeedsValue,
    ParseError,
    Short,
    UnknownArgument,
    UnknownShortArgument,
    getdoc,
    trigger,
)


def render(fault, **options):
    console = Console(record=True, color_system=None, width=120)
    console.print(fault.render(**options))
    return console.export_text()


class TestParseErrors(TestCase):
    """Payloads, equality and messages."""

    def testHierarchy(self):
        for fault in (
            NeedsValue(Long("count")),
            ForbiddenValue(Short("l")),
            UnknownShortArgument(ord("q")),
            UnknownArgument(b"quiet"),
        ):
            self.assertIsInstance(fault, ParseError)
            self.assertIsInstance(fault, Exception)

    def testPayloads(self):
        self.assertEqual(NeedsValue(Long("count")).flag, Long("count"))
        self.assertEqual(ForbiddenValue(Short("l")).flag, Short("l"))
        self.assertEqual(UnknownShortArgument(113).attempt, 113)
        self.assertEqual(UnknownArgument(b"quiet").attempt, b"quiet")

    def testEquality(self):
        self.assertEqual(NeedsValue(Long("count")), NeedsValue(Long("count")))
        self.assertNotEqual(NeedsValue(Long("count")), NeedsValue(Short("c")))
        self.assertNotEqual(NeedsValue(Short("c")), ForbiddenValue(Short("c")))
        self.assertEqual(len({UnknownArgument(b"x"), UnknownArgument(b"x")}), 1)

    def testCodes(self):
        self.assertIs(NeedsValue.code, FaultCode.NEEDS_VALUE)
        self.assertIs(ForbiddenValue.code, FaultCode.FORBIDDEN_VALUE)
        self.assertIs(UnknownShortArgument.code, FaultCode.UNKNOWN_SHORT_ARGUMENT)
        self.assertIs(UnknownArgument.code, FaultCode.UNKNOWN_ARGUMENT)

    def testMessages(self):
        self.assertEqual(str(NeedsValue(Long("count"))), "flag '--count' needs a value")
        self.assertEqual(str(ForbiddenValue(Short("l"))), "flag '-l' cannot take a value")
        self.assertEqual(str(UnknownShortArgument(ord("q"))), "unknown short argument '-q'")
        self.assertEqual(str(UnknownArgument(b"quiet")), "unknown argument '--quiet'")

    def testUndecodableAttemptIsEscaped(self):
        self.assertEqual(str(UnknownArgument(b"caf\xe9")), "unknown argument '--caf\\xe9'")

    def testRepr(self):
        self.assertEqual(repr(NeedsValue(Short("c"))), "NeedsValue(Short(b'c'))")


class TestRendering(TestCase):
    """Rich rendering and host customization."""

    def testPlainRendering(self):
        with mock.patch("__main__.__prog__", "exa", create=True):
            output = render(NeedsValue(Long("count")), colorful=False)
        self.assertIn("[ exa — 11211 | Missing Value ]", output)
        self.assertIn("flag '--count' needs a value", output)
        self.assertIn("→ pass a value after it", output)

    def testFancyRendering(self):
        with mock.patch("__main__.__prog__", "exa", create=True):
            output = render(UnknownArgument(b"quiet"), fancy=True)
        self.assertIn("exa", output)
        self.assertIn("unknown argument '--quiet'", output)

    def testRichProtocol(self):
        console = Console(record=True, color_system=None, width=120)
        console.print(ForbiddenValue(Long("long")))
        self.assertIn("flag '--long' cannot take a value", console.export_text())

    def testCodeLabels(self):
        with mock.patch("__main__.__codes__", {FaultCode.NEEDS_VALUE: "E-VALUE"}, create=True):
            self.assertEqual(FaultCode.NEEDS_VALUE.normalize(), "E-VALUE")
            self.assertEqual(FaultCode.UNKNOWN_ARGUMENT.normalize(), "11214")


class TestTrigger(TestCase):
    """Surfacing faults."""

    def testRaisesOutsideShell(self):
        with self.assertRaises(UnknownShortArgument):
            trigger(UnknownShortArgument(ord("q")))

    def testShellPrintsAndExits(self):
        console = Console(record=True, color_system=None, width=120)
        with mock.patch("clopts.faults.console", console):
            with self.assertRaises(SystemExit) as context:
                trigger(NeedsValue(Short("c")), shell=True, colorful=False)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("flag '-c' needs a value", console.export_text())

    def testRejectsOtherObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))

    def testGetdoc(self):
        with mock.patch("__main__.__docs__", {FaultCode.NEEDS_VALUE: "flags such as --count need a value"}, create=True):
            self.assertEqual(getdoc(FaultCode.NEEDS_VALUE), "flags such as --count need a value")
            self.assertIsNone(getdoc(FaultCode.UNKNOWN_ARGUMENT))

    def testGetdocRejectsOtherObjects(self):
        with self.assertRaises(TypeError):
            getdoc(11211)


if __name__ == '__main__':
    unittest.main()
