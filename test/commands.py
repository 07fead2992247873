"""
Command object behavioral tests (printing, auto style, stdin copies, options).

Scope
- Validate print(): the rendered text plus a newline, stderr by default.
- Validate the terminal auto style and its host override through __styles__.
- Validate that stdin() returns a new command and validates its one source.
- Validate the option rejections of spawn_transparently/spawn_detached/stdout.

Conventions
- Test method names follow CamelCase per project convention.
- Terminal detection is driven through a StringIO whose isatty() is True, with
  the FORCE_COLOR/TTY_COMPATIBLE overrides removed from the environment.
"""

from __future__ import annotations

import io
import os
import sys
import unittest
from contextlib import redirect_stderr
from unittest import TestCase
from unittest.mock import patch

from rich.style import Style

from printsh import AutoStyle, Command, InvalidConfigurationError, PrintOptions
from printsh.commands import TTY_AUTO_STYLE

RSYNC = Command("rsync", [
    "-avz",
    ["--exclude", ".DS_Store"],
    "./dist/",
    "host:~/deploy/",
])


class TerminalIO(io.StringIO):
    def isatty(self):
        return True


def plain_environment():
    environment = patch.dict(os.environ)
    environment.start()
    for name in ("FORCE_COLOR", "TTY_COMPATIBLE", "TTY_INTERACTIVE"):
        os.environ.pop(name, None)
    return environment


class TestPrint(TestCase):
    """Behavioral tests for Command.print."""

    def setUp(self):
        self.addCleanup(plain_environment().stop)

    def testPrintWritesRenderingAndNewline(self):
        stream = io.StringIO()
        RSYNC.print(stream=stream)
        self.assertEqual(stream.getvalue(), RSYNC.render() + "\n")

    def testPrintDefaultsToStderr(self):
        stream = io.StringIO()
        with redirect_stderr(stream):
            RSYNC.print(argument_line_wrapping="inline")
        self.assertEqual(stream.getvalue(), "rsync -avz --exclude .DS_Store ./dist/ host:~/deploy/\n")

    def testPrintReturnsCommand(self):
        self.assertIs(RSYNC.print(stream=io.StringIO()), RSYNC)

    def testPrintWithOptions(self):
        stream = io.StringIO()
        options = PrintOptions(quoting="extra-safe", argument_line_wrapping="inline")
        RSYNC.print(options, stream=stream)
        self.assertEqual(stream.getvalue(), "'rsync' '-avz' '--exclude' '.DS_Store' './dist/' 'host:~/deploy/'\n")

    def testTerminalIsAutoStyled(self):
        stream = TerminalIO()
        RSYNC.print(stream=stream)
        self.assertEqual(stream.getvalue(), Style.parse(TTY_AUTO_STYLE).render(RSYNC.render()) + "\n")
        self.assertNotEqual(stream.getvalue(), RSYNC.render() + "\n")

    def testAutoStyleNever(self):
        stream = TerminalIO()
        RSYNC.print(stream=stream, auto_style=AutoStyle.NEVER)
        self.assertEqual(stream.getvalue(), RSYNC.render() + "\n")

    def testExplicitStyleWinsOverAutoStyle(self):
        stream = TerminalIO()
        RSYNC.print(stream=stream, style="green underline")
        self.assertEqual(stream.getvalue(), RSYNC.render(style="green underline") + "\n")

    def testHostOverridesAutoStyle(self):
        stream = TerminalIO()
        with patch.object(sys.modules["__main__"], "__styles__", {"command": "red"}, create=True):
            RSYNC.print(stream=stream)
        self.assertEqual(stream.getvalue(), Style.parse("red").render(RSYNC.render()) + "\n")

    def testInvalidAutoStyle(self):
        with self.assertRaises(InvalidConfigurationError):
            RSYNC.print(stream=io.StringIO(), auto_style="always")

    def testInvalidOptionsBeforeWriting(self):
        stream = io.StringIO()
        with self.assertRaises(InvalidConfigurationError):
            RSYNC.print(stream=stream, argument_line_wrapping="zigzag")
        self.assertEqual(stream.getvalue(), "")


class TestStdin(TestCase):
    """stdin() returns a new command with exactly one validated source."""

    def testStdinReturnsNewCommand(self):
        command = Command("cat")
        fed = command.stdin(text="hello")
        self.assertIsNot(fed, command)
        self.assertNotEqual(fed, command)
        self.assertEqual(fed.flat_command(), command.flat_command())
        self.assertEqual(command, Command("cat"))

    def testStdinNeedsExactlyOneSource(self):
        with self.assertRaises(InvalidConfigurationError):
            Command("cat").stdin()
        with self.assertRaises(InvalidConfigurationError):
            Command("cat").stdin(text="a", json={"b": 1})

    def testStdinValidatesKinds(self):
        with self.assertRaises(InvalidConfigurationError):
            Command("cat").stdin(text=b"bytes")
        with self.assertRaises(InvalidConfigurationError):
            Command("cat").stdin(path=42)
        with self.assertRaises(InvalidConfigurationError):
            Command("cat").stdin(stream=object())

    def testJsonNoneIsASource(self):
        self.assertIsNot(Command("cat").stdin(json=None), None)


class TestSpawnOptions(TestCase):
    """Options that a convenience spawn fixes itself are rejected."""

    def testTransparentRejectsStdio(self):
        with self.assertRaises(InvalidConfigurationError) as context:
            RSYNC.spawn_transparently(stdio="pipe")
        self.assertEqual(str(context.exception), "unexpected `stdio` field")

    def testDetachedRejectsStdioAndDetached(self):
        with self.assertRaises(InvalidConfigurationError):
            RSYNC.spawn_detached(stdio="inherit")
        with self.assertRaises(InvalidConfigurationError) as context:
            RSYNC.spawn_detached(detached=False)
        self.assertEqual(context.exception.context["field"], "detached")

    def testCaptureRejectsStdio(self):
        with self.assertRaises(InvalidConfigurationError):
            RSYNC.stdout(stdio="ignore")
        with self.assertRaises(InvalidConfigurationError):
            RSYNC.text(stdio="ignore")

    def testShellOutRejectsUnknownPrintValue(self):
        stream = io.StringIO()
        with redirect_stderr(stream), self.assertRaises(InvalidConfigurationError):
            RSYNC.shell_out(print="sideways")
        with self.assertRaises(InvalidConfigurationError):
            RSYNC.shell_out(print=3)
        self.assertEqual(stream.getvalue(), "")


if __name__ == "__main__":
    unittest.main()
