"""
argtable usage renderer.

Formats an option table into the help text shown by -h/--help and after an
unknown option. Rendering is pure: it returns a rich Text and never touches
parser state.

Layout
    Usage: <usage>
    <description>
        -h, --help          show this help message and exit

    <group header>
        -n, --count=<int>   help text
    <epilog>

- The signature column is as wide as the longest signature rounded up to a
  multiple of 4, plus a 4-space margin; help text starts 2 spaces after it.
- A signature wider than the column pushes its help text to the next line.

Palette keys
- usage-label, usage-section, description-section, group-label,
  option-name, metavar, option-help, epilog-section

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When the parser is not colorful, styling is suppressed.
"""
from collections import defaultdict

from rich.text import Text

from .options import OptionKind

MARGIN = 4
GUTTER = 2
ALIGNMENT = 4


def _aligned(width):
    return (width + ALIGNMENT - 1) // ALIGNMENT * ALIGNMENT


def column_width(options, /):
    """
    Width of the signature column, margin included.
    """
    widths = (
        _aligned(len(option.signature))
        for option in options
        if option.kind.matchable
    )
    return max(widths, default=0) + MARGIN


def _entries(options):
    for option in options:
        if option.kind is OptionKind.END:
            return
        yield option


def render_usage(parser, /):
    """
    Render the help text for a parser as a rich Text (no trailing newline).
    """
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",  # cyan headline
        "usage-section": "bold #36C5F0",  # sky-blue signature
        "description-section": "italic #A3A3A3",  # neutral gray
        "group-label": "bold #FFFFFF",  # white headers
        "option-name": "bold #22C55E",  # green names
        "metavar": "bold #FFD600",  # amber value annotations
        "option-help": "#9CA3AF",  # muted gray
        "epilog-section": "#737373",  # dim footer gray
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if parser.colorful else ""

    def text(fragment, style):
        if isinstance(fragment, Text):
            return fragment if parser.colorful else Text(fragment.plain)
        return Text(str(fragment), styler(style))

    options = tuple(_entries(parser.options))
    width = column_width(options)

    usage = Text()

    if parser.usage:
        usage.append("Usage", styler("usage-label")).append(": ")
        usage.append(text(parser.usage, "usage-section")).append("\n")

    if parser.description:
        usage.append(text(parser.description, "description-section")).append("\n")

    for option in options:
        if option.kind is OptionKind.GROUP:
            usage.append("\n").append(text(option.help or "", "group-label")).append("\n")
            continue

        line = Text(" " * MARGIN)
        line.append(", ".join(option.names), styler("option-name"))
        line.append(option.kind.suffix, styler("metavar"))

        if len(line) <= width:
            line.append(" " * (width - len(line)))
        else:
            line.append("\n").append(" " * width)
        line.append(" " * GUTTER)
        line.append(text(option.help or "", "option-help"))
        usage.append(line).append("\n")

    if parser.epilog:
        usage.append("\n").append(text(parser.epilog, "epilog-section")).append("\n")

    if usage.plain.endswith("\n"):
        usage.right_crop(1)
    return usage


__all__ = (
    "column_width",
    "render_usage",
)
