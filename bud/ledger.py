"""
bud ledger: read budget lines and accumulate them per category.

Line format
    <day> <category> <euros>[,.]<cents> [anything]

- day and category are separated by spaces or tabs.
- the amount is split at its first ',' or '.'; both parts are read like C atoi
  (leading spaces, optional sign, digits, anything after is ignored).
- the sign of the euros part applies to the cents part: "-0,50" is -50 cents.

Example
    >>> ledger = Ledger()
    >>> ledger.add("01 food -12,50")
    True
    >>> ledger.buckets
    {'food': -1250}
"""
import re

_BLANKS = " \t"
_ATOI = re.compile(r"\s*([+-]?\d*)")


def _atoi(text):
    digits = _ATOI.match(text)[1]
    try:
        return int(digits)
    except ValueError:
        return 0


def _token(text, separators):
    # Return (token, rest) skipping leading separators, like strtok.
    text = text.lstrip(separators)
    if not text:
        return None, ""
    for index, char in enumerate(text):
        if char in separators:
            return text[:index], text[index + 1:]
    return text, ""


def parse_entry(line, /):
    """
    Split one line into (category, cents), or None when a field is missing.
    """
    day, rest = _token(line, _BLANKS)
    category, rest = _token(rest, _BLANKS)
    euros, rest = _token(rest, ",.")
    cents, rest = _token(rest, _BLANKS)

    if day is None or category is None or euros is None or cents is None:
        return None

    total = _atoi(euros) * 100
    if euros.strip().startswith("-"):
        total -= _atoi(cents)
    else:
        total += _atoi(cents)
    return category, total


def is_blank(line, /):
    return not line.strip(" \r\n\t")


class Ledger:
    """
    Accumulator of signed cents per category.

    Attributes
    - inverse: negate every entry before accumulating.
    - buckets: category -> cents, in first-seen order.
    """

    def __init__(self, *, inverse=False):
        self.inverse = inverse
        self.buckets = {}

    def add(self, line, /):
        """
        Accumulate one line; return False when it could not be parsed.
        """
        entry = parse_entry(line)
        if entry is None:
            return False
        category, cents = entry
        if self.inverse:
            cents = -cents
        self.buckets[category] = self.buckets.get(category, 0) + cents
        return True

    @property
    def positive(self):
        return sum(cents for cents in self.buckets.values() if cents >= 0)

    @property
    def negative(self):
        return sum(cents for cents in self.buckets.values() if cents < 0)

    @property
    def total(self):
        return sum(self.buckets.values())

    def __repr__(self):
        return f"Ledger({self.buckets!r}, inverse={self.inverse!r})"


__all__ = (
    "Ledger",
    "parse_entry",
    "is_blank",
)
