"""
Parser module behavioral tests (matching, compaction, faults, lifecycle).

Scope
- Validate short, compound short and long option matching against a table.
- Validate the parse loop: positionals, '--' terminator, stop-at-non-option.
- Validate in-place compaction of the argument vector and the returned count.
- Validate fault surfacing in library mode (raise) and shell mode (print + exit).
- Validate the parser lifecycle and action dispatch.

Conventions
- Test method names follow CamelCase per project convention.
- Argument vectors always start with the invocation name.
"""

from __future__ import annotations

import contextlib
import errno
import io
import os
import unittest
from unittest import TestCase

from argtable import (
    HelpRequested,
    InvalidValueError,
    Parser,
    Slot,
    UnknownOptionError,
    boolean,
    end,
    floating,
    group,
    help_option,
    integer,
    string,
)

ERANGE = os.strerror(errno.ERANGE)


class ParserTestCase(TestCase):

    def setUp(self):
        self.color = Slot(False)
        self.inverse = Slot(False)
        self.count = Slot(0)
        self.ratio = Slot(0.0)
        self.name = Slot(None)
        self.options = (
            help_option(),
            group("Display"),
            boolean("c", "color", self.color, "display with colors"),
            boolean("i", "inverse", self.inverse, "inverse the sign of all input"),
            group("Values"),
            integer("n", "count", self.count, "how many"),
            floating("r", "ratio", self.ratio, "how much"),
            string("s", "name", self.name, "what"),
            end(),
        )
        self.parser = Parser(self.options)

    def scan(self, *tokens):
        return self.parser.scan(["prog", *tokens])


class TestPositionals(ParserTestCase):

    def testPlainTokensKeptInOrder(self):
        argv = ["prog", "a.txt", "b.txt", "c.txt"]
        count = self.parser.parse(argv)
        self.assertEqual(count, 3)
        self.assertEqual(argv, ["a.txt", "b.txt", "c.txt", None])

    def testInvocationNameExcluded(self):
        self.assertEqual(self.parser.scan(["-c"]), [])
        self.assertEqual(self.parser.scan([]), [])

    def testOptionsRemovedFromVector(self):
        argv = ["prog", "a.txt", "--color", "b.txt", "-i"]
        count = self.parser.parse(argv)
        self.assertEqual(argv[:count], ["a.txt", "b.txt"])
        self.assertIsNone(argv[count])
        self.assertTrue(self.color.value and self.inverse.value)

    def testBareDashAndEmptyTokenArePositional(self):
        self.assertEqual(self.scan("-", "", "x"), ["-", "", "x"])

    def testTerminatorStopsOptionParsing(self):
        self.assertEqual(self.scan("-c", "--", "-x", "file.txt"), ["-x", "file.txt"])
        self.assertTrue(self.color.value)

    def testTerminatorKeepsEarlierPositionalsFirst(self):
        self.assertEqual(self.scan("a", "--", "--color"), ["a", "--color"])
        self.assertFalse(self.color.value)

    def testStopAtNonOption(self):
        self.parser.set_stop_at_non_option(True)
        self.assertEqual(self.scan("--inverse", "report.csv", "--color"), ["report.csv", "--color"])
        self.assertTrue(self.inverse.value)
        self.assertFalse(self.color.value)

    def testScanAcceptsShellString(self):
        self.assertEqual(self.parser.scan("prog --count=3 'a b'"), ["a b"])
        self.assertEqual(self.count.value, 3)

    def testParseRequiresMutableVector(self):
        with self.assertRaises(TypeError):
            self.parser.parse(("prog", "a"))

    def testNonStringTokensRejected(self):
        with self.assertRaises(TypeError):
            self.parser.scan(["prog", 3])

    def testParsingIsIdempotent(self):
        argv = ["prog", "-c", "in.txt", "--count=4", "out.txt"]
        first = self.parser.scan(list(argv))
        state = (self.color.value, self.count.value)
        second = self.parser.scan(list(argv))
        self.assertEqual(first, second)
        self.assertEqual(state, (self.color.value, self.count.value))


class TestShortOptions(ParserTestCase):

    def testFlagWithoutValue(self):
        self.scan("-c")
        self.assertIs(self.color.value, True)

    def testFlagTakesFollowingValue(self):
        self.color.value = True
        self.assertEqual(self.scan("-c", "0", "file"), ["file"])
        self.assertIs(self.color.value, False)
        self.scan("-c", "1")
        self.assertIs(self.color.value, True)

    def testFollowingOptionIsNotAValue(self):
        self.scan("-c", "-i")
        self.assertTrue(self.color.value and self.inverse.value)

    def testFollowingPlainTokenIsConsumedAsValue(self):
        with self.assertRaises(InvalidValueError):
            self.scan("-c", "file.txt")

    def testValueOptions(self):
        self.assertEqual(self.scan("-n", "0x10", "-r", "2.5", "-s", "bud", "rest"), ["rest"])
        self.assertEqual((self.count.value, self.ratio.value, self.name.value), (16, 2.5, "bud"))

    def testValueOptionWithoutValue(self):
        with self.assertRaises(InvalidValueError) as context:
            self.scan("-n")
        self.assertEqual(context.exception.message, "option `-n`/`--count` requires a value")

    def testNegativeNumberIsNotTakenAsValue(self):
        with self.assertRaises(InvalidValueError):
            self.scan("-n", "-5")

    def testCompoundFlags(self):
        argv = ["prog", "-ci", "file"]
        self.assertEqual(self.parser.parse(argv), 1)
        self.assertTrue(self.color.value and self.inverse.value)
        self.assertEqual(argv[:1], ["file"])

    def testCompoundFlagsNeverTakeValues(self):
        with self.assertRaises(InvalidValueError):
            self.scan("-cn", "3")

    def testShortAssignmentIsCompound(self):
        with self.assertRaises(UnknownOptionError) as context:
            self.scan("-c=1")
        self.assertEqual(context.exception.options["token"], "-c=1")
        self.assertTrue(self.color.value)

    def testUnknownShortOption(self):
        with self.assertRaises(UnknownOptionError) as context:
            self.scan("-z")
        self.assertEqual(context.exception.message, "unknown option `-z`")

    def testUnknownCompoundCharacterStopsImmediately(self):
        with self.assertRaises(UnknownOptionError) as context:
            self.scan("-czi")
        self.assertEqual(context.exception.options["token"], "-czi")
        self.assertTrue(self.color.value)
        self.assertFalse(self.inverse.value)

    def testDuplicateShortNamesAllProcessed(self):
        first, second = Slot(False), Slot(False)
        parser = Parser((boolean("v", "verbose", first), boolean("v", "loud", second), end()))
        self.assertEqual(parser.scan(["prog", "-v", "1", "x"]), ["x"])
        self.assertTrue(first.value and second.value)


class TestLongOptions(ParserTestCase):

    def testBooleanForms(self):
        self.scan("--color")
        self.assertIs(self.color.value, True)
        self.scan("--color=0")
        self.assertIs(self.color.value, False)
        self.scan("--color=1")
        self.assertIs(self.color.value, True)

    def testBooleanRejectsOtherValues(self):
        with self.assertRaises(InvalidValueError) as context:
            self.scan("--color=maybe")
        self.assertEqual(context.exception.message, "option `-c`/`--color` expects no value, 0, or 1")

    def testAssignedValues(self):
        self.scan("--count=-5", "--ratio=12.5", "--name=")
        self.assertEqual((self.count.value, self.ratio.value, self.name.value), (-5, 12.5, ""))

    def testValueKeepsLaterEquals(self):
        self.scan("--name=a=b")
        self.assertEqual(self.name.value, "a=b")

    def testLongOptionNeverTakesNextToken(self):
        self.assertEqual(self.scan("--color", "file"), ["file"])

    def testValueOptionWithoutAssignmentIsUnknown(self):
        with self.assertRaises(UnknownOptionError):
            self.scan("--count", "3")

    def testOutOfRangeFloatRejected(self):
        with self.assertRaises(InvalidValueError) as context:
            self.scan("--ratio=1e-400")
        self.assertEqual(context.exception.options["reason"], ERANGE)

    def testTrailingGarbageRejected(self):
        for token in ("--count=12abc", "--ratio=12abc"):
            with self.subTest(token=token):
                with self.assertRaises(InvalidValueError):
                    self.scan(token)

    def testPrefixDoesNotMatch(self):
        with self.assertRaises(UnknownOptionError):
            self.scan("--colorful")
        with self.assertRaises(UnknownOptionError):
            self.scan("--col")

    def testUnknownLongOptionSuggestsNearMatch(self):
        with self.assertRaises(UnknownOptionError) as context:
            self.scan("--colr")
        self.assertEqual(context.exception.options["suggestions"][0], "--color")
        self.assertIn("--color", context.exception.options["hint"])

    def testFirstMatchingEntryWins(self):
        first, second = Slot(False), Slot(False)
        parser = Parser((boolean(None, "same", first), boolean(None, "same", second), end()))
        parser.scan(["prog", "--same"])
        self.assertTrue(first.value)
        self.assertFalse(second.value)


class TestHelp(ParserTestCase):

    def testHelpRaisesInLibraryMode(self):
        self.parser.set_usage("prog [-c] FILE")
        for token in ("-h", "--help"):
            with self.subTest(token=token):
                with self.assertRaises(HelpRequested) as context:
                    self.scan("a", token, "--color")
                self.assertIn("Usage: prog [-c] FILE", context.exception.options["usage"].plain)
                self.assertFalse(self.color.value)

    def testHelpIgnoresFollowingValue(self):
        with self.assertRaises(HelpRequested):
            self.scan("-h", "foo")

    def testHelpExitsZeroInShellMode(self):
        parser = Parser(self.options, shell=True, colorful=False)
        parser.set_usage("prog [-c] FILE")
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout), self.assertRaises(SystemExit) as context:
            parser.scan(["prog", "--help"])
        self.assertEqual(context.exception.code, 0)
        self.assertIn("Usage: prog [-c] FILE", stdout.getvalue())
        self.assertIn("show this help message and exit", stdout.getvalue())


class TestShellMode(ParserTestCase):

    def setUp(self):
        super().setUp()
        self.parser = Parser(self.options, shell=True, colorful=False)

    def testUnknownOptionPrintsAndExits(self):
        stdout, stderr = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            with self.assertRaises(SystemExit) as context:
                self.scan("-z")
        self.assertEqual(context.exception.code, 1)
        self.assertIn("error: unknown option `-z`", stderr.getvalue())
        self.assertIn("--color", stdout.getvalue())

    def testInvalidValuePrintsAndExits(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit) as context:
            self.scan("--count=twelve")
        self.assertEqual(context.exception.code, 1)
        self.assertIn("error: option `-n`/`--count` expects an integer value", stderr.getvalue())


class TestActions(TestCase):

    def testInvokeRunsAfterDestinationWritten(self):
        seen = []
        count = Slot(0)

        def check(parser, option):
            seen.append((option.long, option.dest.value))

        parser = Parser((integer("n", "count", count, "how many", action=check), end()))
        parser.scan(["prog", "--count=7"])
        self.assertEqual(seen, [("count", 7)])

    def testHandlerCanRejectValue(self):
        def positive(parser, option):
            if option.dest.value <= 0:
                parser.exit_due_to_error(option, "must be positive")

        parser = Parser((integer("n", "count", Slot(0), "how many", action=positive), end()))
        with self.assertRaises(InvalidValueError) as context:
            parser.scan(["prog", "-n", "0"])
        self.assertEqual(context.exception.message, "option `-n`/`--count` must be positive")
        self.assertEqual(context.exception.options["reason"], "must be positive")

    def testActionWithoutDestinationSkipsConversion(self):
        calls = []
        parser = Parser((boolean("v", "verbose", None, "talk", action=lambda parser, option: calls.append(option)), end()))
        self.assertEqual(parser.scan(["prog", "-v", "loud", "x"]), ["x"])
        self.assertEqual(len(calls), 1)

    def testExitForHelpAsHandler(self):
        parser = Parser((boolean("?", "usage", None, "show usage", action=Parser.exit_for_help), end()))
        with self.assertRaises(HelpRequested):
            parser.scan(["prog", "--usage"])

    def testReentrantParseRejected(self):
        def reenter(parser, option):
            parser.scan(["prog"])

        parser = Parser((boolean("r", "reenter", None, "", action=reenter), end()))
        with self.assertRaises(RuntimeError):
            parser.scan(["prog", "-r"])


class TestLifecycle(TestCase):

    def testUninitializedParserFailsFast(self):
        parser = Parser()
        self.assertFalse(parser.valid)
        with self.assertRaises(AssertionError):
            parser.set_usage("prog")
        with self.assertRaises(AssertionError):
            parser.scan(["prog"])

    def testInitializeResetsConfiguration(self):
        parser = Parser((boolean("c"),))
        parser.set_usage("prog")
        parser.set_description("does things")
        parser.set_epilog("bye")
        parser.set_stop_at_non_option(True)
        parser.initialize((boolean("c"),))
        self.assertTrue(parser.valid)
        self.assertIsNone(parser.usage)
        self.assertIsNone(parser.description)
        self.assertIsNone(parser.epilog)
        self.assertFalse(parser.stop_at_non_option)

    def testInvalidatedParserFailsFast(self):
        parser = Parser((boolean("c"),))
        parser.invalidate()
        with self.assertRaises(AssertionError):
            parser.parse(["prog"])
        parser.initialize((boolean("c"),))
        self.assertEqual(parser.parse(["prog", "x"]), 1)

    def testContextManagerReleases(self):
        with Parser((boolean("c"),)) as parser:
            parser.set_usage("prog")
        self.assertFalse(parser.valid)
        self.assertEqual(parser.options, ())
        self.assertIsNone(parser.usage)

    def testOptionsAreSealed(self):
        parser = Parser([boolean("c")])
        self.assertIsInstance(parser.options, tuple)
        self.assertEqual(len(parser.options), 2)


if __name__ == "__main__":
    unittest.main()
