r"""
argtable option descriptors and actions.

Overview
- OptionKind: the closed set of entry kinds (END, GROUP, BOOLEAN, INTEGER, FLOAT, STRING).
- Slot: a small writable cell the parser stores converted values into.
- Option: one immutable table entry (kind, short name, long name, destination, help, action).
- Actions: what runs after a successful match.
  • Nothing: do nothing (default).
  • Invoke(handler): call handler(parser, option).
  • ShowHelp: render usage and end the run with HelpRequested.

- Factories mirror the classic table macros
  • boolean(...), integer(...), floating(...), string(...): value-bearing entries.
  • group(help): a header line for the usage text; matches nothing.
  • end(): the table terminator.
  • help_option(): the conventional -h/--help entry wired to ShowHelp.
  • table(options): seal an iterable of entries into a tuple ending with END.

Example
    >>> color = Slot(False)
    >>> options = table((
    ...     help_option(),
    ...     group("Display"),
    ...     boolean("c", "color", color, "display with colors"),
    ...     end(),
    ... ))

Validation
- Descriptor mistakes are programming errors: they raise TypeError/ValueError at
  construction and are never reported as user-facing faults.
"""
from enum import IntEnum

from rich.text import Text

from .utils import *


class OptionKind(IntEnum):
    """
    kind of a table entry.

    END terminates the table; GROUP only carries a header for the usage text.
    The remaining kinds select the value converter used for the destination.
    """
    END     = 0
    GROUP   = 1
    BOOLEAN = 2
    INTEGER = 3
    FLOAT   = 4
    STRING  = 5

    @property
    def suffix(self):
        """
        annotation appended to the option signature in the usage text.
        """
        return {
            OptionKind.INTEGER: "=<int>",
            OptionKind.FLOAT: "=<float>",
            OptionKind.STRING: "=<string>",
        }.get(self, "")

    @property
    def matchable(self):
        return self not in (OptionKind.END, OptionKind.GROUP)


class Slot:
    """
    Writable destination cell.

    The parser assigns converted values to `value`; callers read them back after
    parsing. A slot can be shared by several options (e.g., -v and --verbose).
    """
    __slots__ = ("value",)

    def __init__(self, value=None, /):
        self.value = value

    def __repr__(self):
        return f"Slot({self.value!r})"

    def __rich_repr__(self):
        yield self.value


class Action:
    """
    Base of the closed set of option actions.

    Every action implements __matched__(parser, option), called by the parser
    once the option matched and its destination (if any) has been written.
    """
    __slots__ = ()

    def __init_subclass__(cls, **options):
        if cls.__module__ != __name__:
            raise TypeError(f"type {Action.__name__!r} is not an acceptable base type")
        super().__init_subclass__(**options)

    def __matched__(self, parser, option, /):
        raise NotImplementedError


class NothingType(Action):
    __slots__ = ()

    def __new__(cls):
        try:
            return Nothing
        except NameError:
            return super().__new__(cls)

    def __matched__(self, parser, option, /):
        return None

    def __repr__(self):
        return "Nothing"


class ShowHelpType(Action):
    __slots__ = ()

    def __new__(cls):
        try:
            return ShowHelp
        except NameError:
            return super().__new__(cls)

    def __matched__(self, parser, option, /):
        parser.exit_for_help(option)

    def __repr__(self):
        return "ShowHelp"


Nothing = NothingType()
ShowHelp = ShowHelpType()


class Invoke(Action):
    """
    Run a user handler after a match.

    The handler receives the parser and the matched option. It may read the
    option destination, call parser.exit_due_to_error(option, reason) to reject
    a value, or parser.exit_for_help(option) to stop with the usage text.
    """
    __slots__ = ("handler",)

    def __init__(self, handler, /):
        if not callable(handler):
            raise TypeError("Invoke() argument must be callable")
        self.handler = handler

    def __matched__(self, parser, option, /):
        self.handler(parser, option)

    def __eq__(self, other):
        if not isinstance(other, Invoke):
            return NotImplemented
        return self.handler == other.handler

    def __hash__(self):
        return hash((Invoke, self.handler))

    def __repr__(self):
        return f"Invoke({getattr(self.handler, '__qualname__', self.handler)!s})"


def _as_action(action):
    # Plain callables are accepted for convenience and wrapped into Invoke.
    if isinstance(action, Action):
        return action
    if callable(action):
        return Invoke(action)
    raise TypeError("option 'action' must be an action or a callable")


class Option:
    """
    One immutable entry of an option table.

    Fields (read-only)
    - kind: OptionKind
    - short: str | None, exactly one character other than '-' or '='
    - long: str | None, non-empty, without '=' and not starting with '-'
    - dest: Slot | None, written with the converted value
    - help: str | Text | None, shown by the usage renderer
    - action: Action, run after the destination is written

    Derived views
    - names: ("-c", "--color") style spellings in short/long order
    - signature: usage column text, e.g. "-n, --count=<int>"
    - label: diagnostic spelling, e.g. "`-n`/`--count`"
    """
    __introspectable__ = ("kind", "short", "long", "dest", "help", "action")

    kind = mirror("kind")
    short = mirror("short")
    long = mirror("long")
    dest = mirror("dest")
    help = mirror("help")
    action = mirror("action")

    def __init__(self, kind, short=None, long=None, dest=None, help=None, /, action=Nothing):
        if not isinstance(kind, OptionKind):
            raise TypeError("option 'kind' must be an OptionKind")

        if short is not None:
            if not isinstance(short, str):
                raise TypeError("option 'short' must be a string")
            elif len(short) != 1 or short in "-=" or short.isspace():
                raise ValueError("option 'short' must be a single character other than '-' and '='")

        if long is not None:
            if not isinstance(long, str):
                raise TypeError("option 'long' must be a string")
            elif not long:
                raise ValueError("option 'long' cannot be empty")
            elif long.startswith("-") or "=" in long or any(char.isspace() for char in long):
                raise ValueError("option 'long' must not start with '-' nor contain '=' or spaces")

        if dest is not None and not isinstance(dest, Slot):
            raise TypeError("option 'dest' must be a Slot")

        if help is not None and not isinstance(help, str | Text):
            raise TypeError("option 'help' must be a string")

        action = _as_action(action)

        if not kind.matchable:
            if short is not None or long is not None or dest is not None or action is not Nothing:
                raise TypeError(f"{kind.name.lower()} entries carry no names, destination or action")

        self._kind = kind
        self._short = short
        self._long = long
        self._dest = dest
        self._help = help
        self._action = action

    @property
    def names(self):
        names = []
        if self._short is not None:
            names.append("-" + self._short)
        if self._long is not None:
            names.append("--" + self._long)
        return tuple(names)

    @property
    def signature(self):
        return ", ".join(self.names) + self._kind.suffix

    @property
    def label(self):
        return "/".join(f"`{name}`" for name in self.names)

    def __repr__(self):
        return "option(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)


def boolean(short=None, long=None, dest=None, help=None, /, action=Nothing):
    """
    Presence flag: no value, '1' or '0'. Matches -x, -x 1, --name, --name=0.
    """
    return Option(OptionKind.BOOLEAN, short, long, dest, help, action=action)


def integer(short=None, long=None, dest=None, help=None, /, action=Nothing):
    return Option(OptionKind.INTEGER, short, long, dest, help, action=action)


def floating(short=None, long=None, dest=None, help=None, /, action=Nothing):
    return Option(OptionKind.FLOAT, short, long, dest, help, action=action)


def string(short=None, long=None, dest=None, help=None, /, action=Nothing):
    return Option(OptionKind.STRING, short, long, dest, help, action=action)


def group(help, /):
    """
    Header line for the usage text; never matches a token.
    """
    return Option(OptionKind.GROUP, None, None, None, help)


def end():
    return Option(OptionKind.END)


def help_option(help="show this help message and exit", /):
    return boolean("h", "help", None, help, action=ShowHelp)


def table(options, /):
    """
    Seal an iterable of options into the tuple the parser scans.

    contract
    - entries are kept in order up to (and including) the first END entry;
      anything after it is unreachable and dropped.
    - a missing END is appended so linear scans always terminate.
    - non-Option entries are rejected with TypeError.
    """
    entries = []
    for option in options:
        if not isinstance(option, Option):
            raise TypeError("option table entries must be options")
        entries.append(option)
        if option.kind is OptionKind.END:
            break
    else:
        entries.append(end())
    return tuple(entries)


__all__ = (
    "OptionKind",
    "Slot",
    "Action",
    "Nothing",
    "ShowHelp",
    "Invoke",
    "Option",
    "boolean",
    "integer",
    "floating",
    "string",
    "group",
    "end",
    "help_option",
    "table",
)
