r"""
argtable parser: match tokens against an option table and compact positionals.

Lifecycle
    >>> parser = Parser()                 # created, not yet usable
    >>> parser.initialize(options)        # bind the table (required first)
    >>> parser.set_usage("tool [-v] FILE")
    >>> count = parser.parse(argv)        # argv[:count] are the positionals
    >>> parser.invalidate()
    >>> parser.release()

Token classes (argv[0] is the invocation name and is never classified)
- plain: no leading '-', the bare '-', or the empty string.
  Collected as positional, or stops parsing when stop_at_non_option is set.
- terminator: '--' exactly. Consumed; every later token is positional.
- short: '-x' (may take the next token as its value when that token does not
  start with '-') or '-xyz' (each character is a valueless flag).
- long: '--name' (booleans only) or '--name=value'. The name must match exactly.

Two phases
- scan(argv) walks the tokens and returns a freshly built list of positionals.
- parse(argv) runs scan() and writes the result back into the caller's mutable
  vector as [*positionals, None], returning the positional count.

Faults
- Unknown options and rejected values go through Parser.trigger(), which raises
  them (shell=False) or prints and exits (shell=True). See argtable.faults.
- Lifecycle misuse is a programming error and fails with AssertionError.
"""
import difflib
import os.path
import shlex
import sys
from collections.abc import Iterable, MutableSequence

from rich.console import Console

from .converters import ConversionError, convert
from .faults import *
from .options import OptionKind, table
from .usage import render_usage
from .utils import *


def _tokens(argv):
    # Normalize the accepted argv shapes into a list[str] (argv[0] included).
    if argv is Unset:
        return list(sys.argv)
    if isinstance(argv, str):
        return shlex.split(argv)
    if isinstance(argv, Iterable):
        tokens = list(argv)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("parse() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("parse() argument must be a string or an iterable of strings")


class Parser:
    """
    Parser state bound to one option table.

    Configuration (read-only properties, set through the set_* methods)
    - options: the sealed option table (tuple ending with END)
    - usage, description, epilog: optional help text sections
    - stop_at_non_option: stop at the first plain token (default False)

    Presentation flags (constructor keywords)
    - shell: print faults and exit instead of raising them (default False)
    - colorful: style help and diagnostics with rich (default True)
    - fancy: wrap diagnostics in a rich Panel (default False)
    """
    __introspectable__ = (
        "valid",
        "options",
        "usage",
        "description",
        "epilog",
        "stop_at_non_option",
        "shell",
        "colorful",
        "fancy",
    )

    valid = mirror("valid")
    options = mirror("options")
    usage = mirror("usage")
    description = mirror("description")
    epilog = mirror("epilog")
    stop_at_non_option = mirror("stop_at_non_option")
    shell = mirror("shell")
    colorful = mirror("colorful")
    fancy = mirror("fancy")

    def __init__(self, options=Unset, /, *, shell=False, colorful=True, fancy=False):
        self._valid = False
        self._options = ()
        self._usage = None
        self._description = None
        self._epilog = None
        self._stop_at_non_option = False
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        # only meaningful while parse() runs
        self._prog = None
        self._active = False
        if options is not Unset:
            self.initialize(options)

    def initialize(self, options, /):
        """
        Bind the option table and reset the configuration.
        """
        self._options = table(options)
        self._usage = None
        self._description = None
        self._epilog = None
        self._stop_at_non_option = False
        self._valid = True

    def set_usage(self, usage, /):
        assert self._valid, "parser must be initialized before setting the usage"
        self._usage = usage

    def set_description(self, description, /):
        assert self._valid, "parser must be initialized before setting the description"
        self._description = description

    def set_epilog(self, epilog, /):
        assert self._valid, "parser must be initialized before setting the epilog"
        self._epilog = epilog

    def set_stop_at_non_option(self, stop, /):
        """
        When true, `--opt1 arg --opt2` is read as `--opt1 -- arg --opt2`.
        """
        assert self._valid, "parser must be initialized before setting the stop policy"
        self._stop_at_non_option = bool(stop)

    def invalidate(self):
        self._valid = False

    def release(self):
        """
        End the lifecycle: drop the table and the display strings.
        """
        self.invalidate()
        self._options = ()
        self._usage = self._description = self._epilog = None

    def __enter__(self):
        assert self._valid, "parser must be initialized before use"
        return self

    def __exit__(self, *exc_info):
        self.release()

    def __repr__(self):
        return "parser(%s)" % ", ".join("%s=%r" % (name, getattr(self, name)) for name in (
            "valid", "usage", "stop_at_non_option", "shell"
        ))

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    # --- faults and help ---------------------------------------------------

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's presentation flags and usage text.
        """
        trigger(
            fault,
            **options,
            parser=self,
            prog=self._prog,
            shell=self._shell,
            colorful=self._colorful,
            fancy=self._fancy,
        )

    def exit_for_help(self, option=None, /):
        """
        Render the usage text and stop (exit status 0 in shell mode).

        Usable directly as an Invoke handler: Invoke(Parser.exit_for_help).
        """
        assert self._valid, "parser must be initialized before rendering help"
        self.trigger(HelpRequested("help requested", option=option, usage=render_usage(self)))

    def exit_due_to_error(self, option, reason, /):
        """
        Reject the value of `option` with a human-readable `reason`.

        Actions use this for semantic checks (e.g. out-of-range values); the
        diagnostic reads "option `-n`/`--count` <reason>".
        """
        self.trigger(InvalidValueError(
            "option %s %s" % (option.label, reason),
            option=option,
            reason=reason,
        ))

    def _exit_due_to_unknown_option(self, token):
        known = [name for option in self._options for name in option.names]
        suggestions = difflib.get_close_matches(token.partition("=")[0], known, 5)
        self.trigger(UnknownOptionError(
            "unknown option `%s`" % token,
            token=token,
            suggestions=suggestions,
            hint="did you mean %r?" % suggestions[0] if suggestions else None,
            usage=render_usage(self),
        ))

    def print_usage(self, file=None):
        Console(file=file).print(render_usage(self), soft_wrap=True)

    # --- matching ------------------------------------------------------------

    def _matchable(self):
        for option in self._options:
            if option.kind is OptionKind.END:
                return
            if option.kind.matchable:
                yield option

    def _apply(self, option, value):
        # Options without destination skip conversion (e.g. `-h foo` still shows help).
        if option.dest is not None:
            try:
                option.dest.value = convert(option.kind, value)
            except ConversionError as error:
                return self.exit_due_to_error(option, error.reason)
        option.action.__matched__(self, option)

    def _match_short(self, tokens, index):
        """
        Handle '-x' / '-xyz' at tokens[index]; return the index of the last consumed token.
        """
        token = tokens[index]

        if len(token) == 2:
            options = [option for option in self._matchable() if option.short == token[1]]
            if not options:
                return self._exit_due_to_unknown_option(token)

            value = None
            if index + 1 < len(tokens) and not tokens[index + 1].startswith("-"):
                value = tokens[index := index + 1]
            for option in options:
                self._apply(option, value)
            return index

        # compound flags never carry a value
        for char in token[1:]:
            options = [option for option in self._matchable() if option.short == char]
            if not options:
                return self._exit_due_to_unknown_option(token)
            for option in options:
                self._apply(option, None)
        return index

    def _match_long(self, token):
        name, assigned, value = token[2:].partition("=")
        for option in self._matchable():
            if option.long != name:
                continue
            if assigned:
                return self._apply(option, value)
            if option.kind is OptionKind.BOOLEAN:
                return self._apply(option, None)
        self._exit_due_to_unknown_option(token)

    # --- parse loop ----------------------------------------------------------

    def scan(self, argv=Unset, /):
        """
        Parse `argv` and return the positional tokens as a new list.

        Parameters
        - argv: Iterable[str] | str | Unset
          • Iterable[str]: argument vector, argv[0] being the invocation name.
          • str: shell-like command line, split with shlex.split.
          • Unset: sys.argv.

        Returns
        - list[str]: positionals in their original relative order.
        """
        assert self._valid, "parser must be initialized before parsing"
        if self._active:
            raise RuntimeError("parse() cannot be re-entered from an option action")

        tokens = _tokens(argv)
        self._active = True
        self._prog = os.path.basename(tokens[0]) if tokens else None
        try:
            return self._scan(tokens)
        finally:
            self._active = False
            self._prog = None

    def _scan(self, tokens):
        positionals = []
        index = 1

        while index < len(tokens):
            token = tokens[index]

            if not token.startswith("-") or token == "-":
                if self._stop_at_non_option:
                    break
                positionals.append(token)
            elif token[1] != "-":
                index = self._match_short(tokens, index)
            elif token == "--":
                index += 1
                break
            else:
                self._match_long(token)
            index += 1

        positionals.extend(tokens[index:])
        return positionals

    def parse(self, argv, /):
        """
        Parse `argv` in place and return the number of positionals.

        The vector is rewritten as [*positionals, None]: argv[:count] holds the
        positionals (the invocation name is not kept) and argv[count] is None.
        """
        if not isinstance(argv, MutableSequence):
            raise TypeError("parse() argument must be a mutable sequence of strings")
        positionals = self.scan(argv)
        argv[:] = [*positionals, None]
        return len(positionals)


__all__ = (
    "Parser",
)
