"""
Faults module behavioral tests (codes, replacement, rendering).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from libcli import FaultCode, CommandException, UnknownOptionError, report


def capture():
    return mock.patch("libcli.faults.console", Console(file=io.StringIO(), width=120, color_system=None))


class TestFaults(TestCase):
    def testMessageAndOptions(self):
        fault = UnknownOptionError("unknown option '--x'", code=FaultCode.UNKNOWN_OPTION, input="x")
        self.assertEqual(str(fault), "unknown option '--x'")
        self.assertEqual(fault.options["input"], "x")
        with self.assertRaises(TypeError):
            fault.options["input"] = "y"

    def testReplaceKeepsTypeAndMergesOptions(self):
        fault = UnknownOptionError("first", code=FaultCode.UNKNOWN_OPTION)
        replaced = copy.replace(fault, message="second", tool="demo")
        self.assertIsInstance(replaced, UnknownOptionError)
        self.assertEqual(replaced.message, "second")
        self.assertEqual(replaced.options["code"], FaultCode.UNKNOWN_OPTION)
        self.assertEqual(replaced.options["tool"], "demo")
        self.assertNotIn("tool", fault.options)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "11112")

    def testReportRendersHeaderMessageAndHint(self):
        fault = UnknownOptionError(
            "unknown option '--x'",
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            hint="did you mean '--y'?",
        )
        with capture() as console:
            report(fault, tool="demo")
        output = console.file.getvalue()
        self.assertIn("demo", output)
        self.assertIn("11112", output)
        self.assertIn("Unknown Option", output)
        self.assertIn("unknown option '--x'", output)
        self.assertIn("did you mean '--y'?", output)

    def testReportFancyUsesPanel(self):
        with capture() as console:
            report(CommandException("boom"), fancy=True)
        self.assertIn("boom", console.file.getvalue())

    def testReportRejectsOtherExceptions(self):
        with self.assertRaises(TypeError):
            report(ValueError("nope"))


if __name__ == "__main__":
    unittest.main()
