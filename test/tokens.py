"""
Token stream behavioral tests (lexing, option tokens, end of options).

Scope
- Validate shell-like lexing: whitespace, quotes, backslash escapes.
- Validate option token splitting and name validation.
- Validate the '--' end-of-options marker and the lookahead buffer.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from libcli import Tokens, InvalidNameError, FaultCode


class TestLexing(TestCase):
    """Behavioral tests for Tokens.next() and iteration."""

    def testWhitespaceSeparatesTokens(self):
        self.assertEqual(list(Tokens("foo  bar\tbaz ")), ["foo", "bar", "baz"])

    def testQuotesKeepWhitespace(self):
        self.assertEqual(list(Tokens('foo "bar baz"')), ["foo", "bar baz"])

    def testSingleQuotesKeepDoubleQuotes(self):
        self.assertEqual(list(Tokens("'say \"hi\"' x")), ['say "hi"', "x"])

    def testBackslashEscapesNextCharacter(self):
        self.assertEqual(list(Tokens(r'foo \"bar \baz\"')), ["foo", '"bar', 'baz"'])

    def testEscapedBackslash(self):
        self.assertEqual(list(Tokens(r"foo bar\\baz")), ["foo", "bar\\baz"])

    def testEscapedQuotesInsideQuotes(self):
        self.assertEqual(list(Tokens(r'foo "bar \"baz\" qux"')), ["foo", 'bar "baz" qux'])

    def testTrailingBackslashIsLiteral(self):
        self.assertEqual(list(Tokens("foo\\")), ["foo\\"])

    def testUnterminatedQuoteKeepsRest(self):
        self.assertEqual(list(Tokens('foo "bar baz')), ["foo", "bar baz"])

    def testEmptyQuotedTokenIsSkipped(self):
        self.assertEqual(list(Tokens('a "" b')), ["a", "b"])

    def testOnlyAsciiWhitespaceSeparates(self):
        self.assertEqual(list(Tokens("a\u00a0b c\u2003d")), ["a\u00a0b", "c\u2003d"])
        self.assertEqual(list(Tokens("a\fb\vc\r\nd")), ["a", "b", "c", "d"])

    def testEmptyInputHasNoTokens(self):
        tokens = Tokens("   ")
        self.assertIsNone(tokens.next())
        self.assertIsNone(tokens.peek())

    def testSameInputSameTokens(self):
        input = r'--a=1 "b c" \d -- --e'
        self.assertEqual(list(Tokens(input)), list(Tokens(input)))

    def testNonStringInputRejected(self):
        with self.assertRaises(TypeError):
            Tokens(42)


class TestLookahead(TestCase):
    """Behavioral tests for peek() and remaining()."""

    def testPeekDoesNotConsume(self):
        tokens = Tokens("a b")
        self.assertEqual(tokens.peek(), "a")
        self.assertEqual(tokens.peek(), "a")
        self.assertEqual(tokens.next(), "a")
        self.assertEqual(tokens.next(), "b")
        self.assertIsNone(tokens.next())

    def testRemainingIncludesPeekedToken(self):
        tokens = Tokens("greet --name=Alice")
        self.assertEqual(tokens.peek(), "greet")
        self.assertEqual(tokens.remaining(), "greet --name=Alice")

    def testRemainingAfterConsumedToken(self):
        tokens = Tokens("greet --name=Alice")
        self.assertEqual(tokens.next(), "greet")
        self.assertEqual(tokens.remaining(), "--name=Alice")


class TestOptionTokens(TestCase):
    """Behavioral tests for option token readers."""

    def testOptionWithValue(self):
        self.assertEqual(Tokens("--name=value").next_option_token(), ("name", "value"))

    def testOptionWithEmptyValue(self):
        self.assertEqual(Tokens("--name=").next_option_token(), ("name", ""))

    def testOptionWithoutValue(self):
        self.assertEqual(Tokens("--name").next_option_token(), ("name", None))

    def testValueKeepsLaterEquals(self):
        self.assertEqual(Tokens("--expr=a=b").next_option_token(), ("expr", "a=b"))

    def testQuotedValue(self):
        self.assertEqual(Tokens('--name="Jane Doe"').next_option_token(), ("name", "Jane Doe"))

    def testNonOptionIsPushedBack(self):
        tokens = Tokens("child --x=1")
        self.assertIsNone(tokens.next_option_token())
        self.assertEqual(tokens.next(), "child")

    def testOptionTokensStopAtNonOption(self):
        tokens = Tokens("--a=1 --b rest --c")
        self.assertEqual(tokens.next_option_tokens(), [("a", "1"), ("b", None)])
        self.assertEqual(tokens.next_non_option(), "rest")
        self.assertEqual(tokens.next_option_tokens(), [("c", None)])

    def testInvalidNameRaises(self):
        with self.assertRaises(InvalidNameError) as context:
            Tokens("--bad!name=1").next_option_token()
        self.assertIn("must only contain ASCII letters, numbers, hyphens, and underscores", context.exception.message)
        self.assertEqual(context.exception.options["code"], FaultCode.INVALID_NAME)

    def testEmptyNameRaises(self):
        with self.assertRaises(InvalidNameError) as context:
            Tokens("--=1").next_option_token()
        self.assertIn("must contain at least one character", context.exception.message)

    def testInvalidNameKeepsAccumulatedPairs(self):
        with self.assertRaises(InvalidNameError) as context:
            Tokens("--a=1 --b --c- --d").next_option_tokens()
        self.assertEqual(context.exception.options["accumulated"], [("a", "1"), ("b", None)])

    def testCustomValidator(self):
        tokens = Tokens("--x", validator=lambda name: "too short" if len(name) < 2 else None)
        with self.assertRaises(InvalidNameError) as context:
            tokens.next_option_token()
        self.assertIn("too short", context.exception.message)

    def testNextNonOptionLeavesOptionInStream(self):
        tokens = Tokens("--flag word")
        self.assertIsNone(tokens.next_non_option())
        self.assertEqual(tokens.next_option_token(), ("flag", None))
        self.assertEqual(tokens.next_non_option(), "word")


class TestEndOfOptions(TestCase):
    """Behavioral tests for the '--' marker."""

    def testMarkerIsNotReturned(self):
        self.assertEqual(list(Tokens("a -- b")), ["a", "b"])

    def testTokensAfterMarkerArePositional(self):
        tokens = Tokens("--a=1 -- --b=2 c")
        self.assertEqual(tokens.next_option_tokens(), [("a", "1")])
        self.assertTrue(tokens.end_of_options)
        self.assertIsNone(tokens.next_option_token())
        self.assertEqual(tokens.next_non_option(), "--b=2")
        self.assertEqual(tokens.next_non_option(), "c")

    def testMarkerIsMonotonic(self):
        tokens = Tokens("-- x -- --y")
        self.assertEqual(tokens.next(), "x")
        self.assertEqual(tokens.next(), "--y")
        self.assertTrue(tokens.end_of_options)

    def testQuotedMarkerAlsoEndsOptions(self):
        tokens = Tokens('"--" --x')
        self.assertEqual(tokens.next_non_option(), "--x")
        self.assertTrue(tokens.end_of_options)


if __name__ == "__main__":
    unittest.main()
