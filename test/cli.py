"""
CLI facade behavioral tests (routing, registration, fault strings).

Scope
- Validate run()/execute()/dispatch() routing and their error strings.
- Validate registration through an injected host callback.

Conventions
- Test method names follow CamelCase per project convention.
- Fault rendering is captured by swapping the faults console for a recording one.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from libcli import CLI, Command, Option, UnknownCommandError, command


def capture():
    return mock.patch("libcli.faults.console", Console(file=io.StringIO(), width=120, color_system=None))


class TestCLI(TestCase):
    def setUp(self):
        self.calls = []

        @command("greet", "say hello", options=[Option.string("name", default="world")])
        def greet(command, cli, tokens, options):
            self.calls.append((cli, options["name"]))

        self.greet = greet.validate()
        self.cli = CLI("tool")
        self.cli.add_slash_command("greet", self.greet, aliases=["hi"])

    def testRunRoutesToCommand(self):
        self.assertIsNone(self.cli.run("greet --name=Alice"))
        self.assertEqual(self.calls, [(self.cli, "Alice")])

    def testRunThroughAlias(self):
        self.assertIsNone(self.cli.run("hi"))
        self.assertEqual(self.calls, [(self.cli, "world")])

    def testRunWithoutCommand(self):
        self.assertEqual(self.cli.run("  "), "no command specified. type '/tool help' for a list of commands.")
        self.assertEqual(self.cli.run("--name=x"), "no command specified. type '/tool help' for a list of commands.")

    def testRunUnknownCommand(self):
        self.assertEqual(self.cli.run("wave"), "unknown command 'wave'. type '/tool help' for a list of commands.")

    def testExecuteReturnsFaultMessage(self):
        message = self.cli.execute("greet", "--nmae=x")
        self.assertEqual(message, "failed to parse options for command 'greet': unknown option '--nmae'")
        self.assertEqual(self.calls, [])

    def testCommandSurvivesFault(self):
        self.cli.execute("greet", "--name")
        self.assertIsNone(self.cli.execute("greet", "--name=Bob"))
        self.assertEqual(self.calls, [(self.cli, "Bob")])

    def testDispatchRaises(self):
        with self.assertRaises(UnknownCommandError):
            self.cli.dispatch("wave", "")

    def testRejectsNonCommand(self):
        with self.assertRaises(TypeError):
            self.cli.add_slash_command("x", object())


class TestRegistration(TestCase):
    def testRegisterCalledForEveryName(self):
        registered = {}
        cli = CLI("tool", register=lambda name, callback: registered.__setitem__(name, callback))
        cli.add_slash_command("greet", Command("greet", None, lambda *args: None), aliases=("hi", "hello"))
        self.assertEqual(sorted(registered), ["greet", "hello", "hi"])
        self.assertTrue(all(map(callable, registered.values())))

    def testCallbackRunsCommand(self):
        calls = []
        registered = {}
        tool = Command("greet", None, lambda command, cli, tokens, options: calls.append(options["name"]))
        tool.add_string_option("name")
        cli = CLI("tool", register=lambda name, callback: registered.__setitem__(name, callback))
        cli.add_slash_command("greet", tool)
        registered["greet"]("--name=Alice")
        self.assertEqual(calls, ["Alice"])

    def testCallbackReportsFault(self):
        registered = {}
        tool = Command("greet", None, lambda *args: None, options=[Option.number("count")])
        cli = CLI("tool", register=lambda name, callback: registered.__setitem__(name, callback))
        cli.add_slash_command("greet", tool)
        with capture() as console:
            registered["greet"]("--count=x")
        output = console.file.getvalue()
        self.assertIn("tool", output)
        self.assertIn("11123", output)
        self.assertIn("failed to parse options for command 'greet'", output)


if __name__ == "__main__":
    unittest.main()
