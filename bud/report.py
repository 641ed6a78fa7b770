"""
bud report: render a ledger as a table with percentages or bar charts.

    CATEGORY          EXPENSE  PERCENT
    ──────────────────────────────────
    salary            2000.00 ▕▆▆▆▆▆▆▆▆▏
    food              -250.50 ▕▆       ▏
    ──────────────────────────────────
    TOTAL             1749.50 ▕▆       ▏

Percentages are relative to the sum of the positive buckets; the TOTAL line
shows how much of it the negative buckets consume.
"""
import sys

from rich.console import Console
from rich.text import Text

if sys.platform == "win32":
    RULE = "-"
    FILLER = "#"
    BORDER_LEFT = "|"
    BORDER_RIGHT = "|"
else:
    RULE = "─"
    FILLER = "▆"
    BORDER_LEFT = "▕"
    BORDER_RIGHT = "▏"

MAX_CHART = 100
# category (15) + space + amount (9) + space
CHART_OFFSET = 15 + 1 + 9 + 1
PERCENT_WIDTH = 8


def percentage(cents, reference, /):
    if not reference:
        return 0.0
    return abs(cents * 100.0 / reference)


def chart_width(columns, /):
    return max(1, min(MAX_CHART, columns - CHART_OFFSET - 2))


def chart(width, percent, /):
    step = 100.0 / width
    percent = min(100.0, percent)
    bar = "".join(FILLER if percent >= step * index else " " for index in range(1, width + 1))
    return BORDER_LEFT + bar + BORDER_RIGHT


class Report:
    """
    Rendering settings (the bud command-line flags).

    - color: positive buckets green, negative ones red.
    - chart: bar charts instead of numeric percentages.
    - header: column titles and a rule.
    - total: a rule and the TOTAL line.
    """

    def __init__(self, *, color=False, chart=True, header=True, total=True):
        self.color = color
        self.chart = chart
        self.header = header
        self.total = total

    def _measure(self, percent, width):
        if self.chart:
            return chart(width, percent)
        return "%8.2f" % percent

    def lines(self, ledger, /, columns=80):
        """
        Yield the report lines as rich Text objects.
        """
        width = chart_width(columns)
        rule = RULE * (CHART_OFFSET + (width + 2 if self.chart else PERCENT_WIDTH))
        positive = ledger.positive

        if self.header:
            yield Text("%-15.15s %9s %8s" % ("CATEGORY", "EXPENSE", "PERCENT"))
            yield Text(rule)

        for category, cents in ledger.buckets.items():
            style = ""
            if self.color and cents > 0:
                style = "green"
            elif self.color and cents < 0:
                style = "red"
            yield Text(
                "%-15.15s %9.2f %s" % (category, cents / 100.0, self._measure(percentage(cents, positive), width)),
                style,
            )

        if self.total:
            yield Text(rule)
            yield Text("%-15.15s %9.2f %s" % (
                "TOTAL",
                ledger.total / 100.0,
                self._measure(percentage(ledger.negative, positive), width),
            ))

    def print(self, ledger, /, console=None):
        if console is None:
            # --color forces escapes even when stdout is not a terminal
            console = Console(
                highlight=False,
                force_terminal=True if self.color else None,
                color_system="standard" if self.color else "auto",
            )
        for line in self.lines(ledger, console.width):
            console.print(line, soft_wrap=True)


__all__ = (
    "Report",
    "chart",
    "chart_width",
    "percentage",
)
