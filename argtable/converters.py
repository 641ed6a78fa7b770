"""
argtable value converters.

Turns the raw text attached to an option (or its absence, None) into the typed
value its destination expects. Numeric parsing follows the C library: integers
accept optional leading spaces, a sign and the 0x/0 radix prefixes (strtol with
base 0); floats accept decimal and hexadecimal literals with exponents as well
as inf/infinity/nan (strtod, double precision). The whole text must be
consumed, and results that overflow or underflow are out of range.

Failures raise ConversionError carrying the reason shown to the user, e.g.
"expects an integer value". The parser wraps it into an InvalidValueError.
"""
import errno
import os
import re

from .options import OptionKind

# Range of the C `long` the values are stored into.
INTEGER_MIN = -(2 ** 63)
INTEGER_MAX = 2 ** 63 - 1

_INTEGER = re.compile(r"\s*(?P<sign>[+-]?)(?:0[xX](?P<hex>[0-9a-fA-F]+)|(?P<oct>0[0-7]*)|(?P<dec>[1-9][0-9]*))")

_FLOAT = re.compile(
    r"""
    \s*
    (?P<literal>
        [+-]?
        (?:
            (?P<hex>0x(?:[0-9a-f]+\.?[0-9a-f]*|\.[0-9a-f]+)(?:p[+-]?[0-9]+)?)
          | (?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?
          | (?P<inf>inf(?:inity)?)
          | (?P<nan>nan(?:\([0-9a-z_]*\))?)
        )
    )
    """,
    re.VERBOSE | re.IGNORECASE,
)


class ConversionError(ValueError):
    """
    raised when raw option text cannot be converted; `reason` is user-facing.
    """

    def __init__(self, reason, /):
        super().__init__(reason)
        self.reason = reason


def _out_of_range():
    return ConversionError(os.strerror(errno.ERANGE))


def _significant(literal, hexadecimal):
    # a non-zero mantissa that converts to 0.0 has underflowed
    mantissa = literal.lstrip("+-")
    if hexadecimal:
        mantissa = mantissa[2:].partition("p")[0].partition("P")[0]
    else:
        mantissa = mantissa.partition("e")[0].partition("E")[0]
    return mantissa.strip("0.") != ""


def to_boolean(text, /):
    if text is None or text == "1":
        return True
    if text == "0":
        return False
    raise ConversionError("expects no value, 0, or 1")


def to_string(text, /):
    if text is None:
        raise ConversionError("requires a value")
    return text


def to_integer(text, /):
    if not text:
        raise ConversionError("requires a value")

    match = _INTEGER.match(text)
    if not match:
        raise ConversionError("expects an integer value")

    if match["hex"] is not None:
        value = int(match["hex"], 16)
    elif match["oct"] is not None:
        value = int(match["oct"], 8)
    else:
        value = int(match["dec"], 10)
    if match["sign"] == "-":
        value = -value

    # range is checked before trailing garbage, as strtol reports ERANGE first
    if not INTEGER_MIN <= value <= INTEGER_MAX:
        raise _out_of_range()
    if match.end() != len(text):
        raise ConversionError("expects an integer value")
    return value


def to_float(text, /):
    if not text:
        raise ConversionError("requires a value")

    match = _FLOAT.match(text)
    if not match:
        raise ConversionError("expects a numerical value")

    literal = match["literal"]
    if match["nan"] is not None:
        value = float("-nan" if literal.startswith("-") else "nan")
    elif match["hex"] is not None:
        try:
            value = float.fromhex(literal)
        except OverflowError:
            raise _out_of_range() from None
    else:
        value = float(literal)

    if value in (float("inf"), float("-inf")) and match["inf"] is None:
        raise _out_of_range()
    if value == 0.0 and _significant(literal, match["hex"] is not None):
        raise _out_of_range()
    if match.end() != len(text):
        raise ConversionError("expects a numerical value")
    return value


_CONVERTERS = {
    OptionKind.BOOLEAN: to_boolean,
    OptionKind.INTEGER: to_integer,
    OptionKind.FLOAT: to_float,
    OptionKind.STRING: to_string,
}


def convert(kind, text, /):
    """
    Convert `text` (str or None when no value was attached) for `kind`.

    Raises
    - ConversionError: the text is missing, malformed or out of range.
    - TypeError: kind has no value (END/GROUP).
    """
    try:
        converter = _CONVERTERS[kind]
    except KeyError:
        raise TypeError(f"{OptionKind(kind).name.lower()} entries carry no value") from None
    return converter(text)


__all__ = (
    "ConversionError",
    "INTEGER_MIN",
    "INTEGER_MAX",
    "to_boolean",
    "to_integer",
    "to_float",
    "to_string",
    "convert",
)
