"""
bud: a simple budget manager based on plain text files.

Each input line holds a day, a category and an amount; bud sums the amounts per
category and prints them with their share of the income, as percentages or bar
charts. Command-line flags are parsed with argtable.
"""
__title__ = 'bud'
__license__ = 'MIT'
__version__ = "0.1.0"

from .cli import *
from .ledger import *
from .report import *

__all__ = (
    "__title__",
    "__license__",
    "__version__",
)

__all__ += cli.__all__  # type: ignore[attr-defined]
__all__ += ledger.__all__  # type: ignore[attr-defined]
__all__ += report.__all__  # type: ignore[attr-defined]
