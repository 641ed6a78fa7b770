"""
argtable faults (parse-time conditions) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing condition.
- ParserFault: base type that carries message + options and knows how to render
  itself, copy itself with more context, and surface itself.
- UnknownOptionError / InvalidValueError: the two terminal parse errors.
- HelpRequested: the non-error early exit reached through a help option.
- trigger(): central entry point to surface any fault.

Surfacing policy
- Library use (shell=False): faults are raised, so callers and tests can catch them.
- Shell use (shell=True): faults are printed through rich and the process exits
  with the fault status (0 for help, 1 for errors).
  • unknown option: diagnostic on stderr, then the usage text on stdout.
  • invalid value: diagnostic on stderr.
  • help requested: usage text on stdout.

Integration
- The parser builds faults with contextual options (usage, parser, colorful,
  fancy, shell) through Parser.trigger(), which forwards here.
- Hosts can customize labels and colors through __main__:
  __codes__ (FaultCode -> label), __styles__ (palette), __prog__ (program name).
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping
    - early exits (210xx): HELP_REQUESTED
    - option errors (211xx): UNKNOWN_OPTION, INVALID_VALUE
    """
    HELP_REQUESTED = 21001

    UNKNOWN_OPTION = 21101
    INVALID_VALUE  = 21102

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _palette(defaults):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


class ParserFault(Exception):
    """
    base of every condition surfaced by the parser.

    class attributes
    - code: FaultCode of the condition.
    - title: short headline used by the fancy rendering.
    - status: process exit status used in shell mode.
    """
    code = Unset
    title = "fault"
    status = 1

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def _styler(self, styles):
        def styler(style):
            return styles[style] if self.options.get("colorful", False) else ""
        return styler

    def __rich__(self):
        main = __import__("__main__")

        styles = _palette({
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-label": "bold #FF4DA6",  # friendly pinky label
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })
        styler = self._styler(styles)

        message = Text.assemble(("error", styler("error-label")), ": ", (str(self.message), styler("error-message")))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble((" → ", styler("hint-arrow")), (hint, styler("hint"))))

        if self.options.get("fancy", False):
            prog = getattr(main, "__prog__", self.options.get("prog") or "argtable")
            header = Text.assemble(
                "[ ",
                (prog, styler("prog-name")),
                " — ",
                (self.code.normalize(), styler("code")),
                " | ",
                self.title.title(),
                " ]",
            )
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(*renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self, soft_wrap=True)
        sys.exit(self.status)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownOptionError(ParserFault):
    """
    an input token matched no descriptor of the table.
    """
    code = FaultCode.UNKNOWN_OPTION
    title = "unknown option"

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self, soft_wrap=True)
        if (usage := self.options.get("usage")) is not None:
            Console().print(usage, soft_wrap=True)
        sys.exit(self.status)


class InvalidValueError(ParserFault):
    """
    the value attached to an option was missing, malformed, or rejected by an action.
    """
    code = FaultCode.INVALID_VALUE
    title = "invalid value"


class HelpRequested(ParserFault):
    """
    user-requested early exit; renders the usage text instead of a diagnostic.
    """
    code = FaultCode.HELP_REQUESTED
    title = "help"
    status = 0

    def __rich__(self):
        return self.options.get("usage") or Text("")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        Console().print(self, soft_wrap=True)
        sys.exit(self.status)


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParserFault).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console and the process exits;
      otherwise the fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "ParserFault",
    "UnknownOptionError",
    "InvalidValueError",
    "HelpRequested",
    "trigger",
)
