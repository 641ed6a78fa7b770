"""
bud command line: parse flags with argtable, read entries, print the report.

    bud [--inverse] [--noheader] [--color] [--nochart] [--nototal] FILE

Without FILE the entries are read from standard input.
"""
import io
import sys

from rich.console import Console
from rich.text import Text

from argtable import Parser, Slot, boolean, end, help_option

from .ledger import Ledger, is_blank
from .report import Report

USAGE = "bud [--inverse] [--noheader] [--color] [--nochart] [--nototal] FILE\n"
DESCRIPTION = (
    "Bud is a simple budget manager based on plain text files.\n"
    "If no input FILE is given, it reads from STDIN.\n"
)

errors = Console(stderr=True, highlight=False)


class Flags:
    """
    Destinations of the bud options, read back after parsing.
    """

    def __init__(self):
        self.color = Slot(False)
        self.inverse = Slot(False)
        self.nochart = Slot(False)
        self.noheader = Slot(False)
        self.nototal = Slot(False)

    def options(self):
        return (
            help_option(),
            boolean("c", "color", self.color, "display with colors"),
            boolean("i", "inverse", self.inverse, "inverse the sign of all input"),
            boolean(None, "nochart", self.nochart, "hide the chart"),
            boolean(None, "noheader", self.noheader, "hide the header"),
            boolean(None, "nototal", self.nototal, "hide the total"),
            end(),
        )

    def report(self):
        return Report(
            color=self.color.value,
            chart=not self.nochart.value,
            header=not self.noheader.value,
            total=not self.nototal.value,
        )


def parse_arguments(argv, /):
    """
    Parse `argv` (invocation name first) and return (flags, positionals).

    Runs the parser in shell mode: --help and bad options print and exit.
    """
    flags = Flags()
    argv = list(argv)
    with Parser(flags.options(), shell=True) as parser:
        parser.set_usage(USAGE)
        parser.set_description(DESCRIPTION)
        count = parser.parse(argv)
    return flags, argv[:count]


def read(ledger, stream, /):
    for lineno, line in enumerate(stream, 1):
        if not ledger.add(line) and not is_blank(line):
            errors.print(Text.assemble(
                ("WARNING", "bold yellow"),
                ": Entry ignored. Parsing error in line %d." % lineno,
            ))


def main(argv=None, /):
    flags, positionals = parse_arguments(sys.argv if argv is None else argv)
    ledger = Ledger(inverse=flags.inverse.value)

    if not positionals:
        # undecodable bytes become U+FFFD, as for files
        if isinstance(sys.stdin, io.TextIOWrapper):
            sys.stdin.reconfigure(errors="replace")
        read(ledger, sys.stdin)
    else:
        try:
            stream = open(positionals[0], encoding="utf-8", errors="replace")
        except OSError as error:
            errors.print(Text("Unable to open '%s': %s" % (positionals[0], error.strerror or error)))
            sys.exit(1)
        with stream:
            read(ledger, stream)

    flags.report().print(ledger)
    return 0


__all__ = (
    "Flags",
    "parse_arguments",
    "main",
)
