"""
argtable utilities shared by the options, parser and faults layers.

- Unset: sentinel for "argument not given" where None is a meaningful value
  (Parser(options=Unset) means "no table yet", parse(Unset) means sys.argv).
- mirror("attr"): read-only property over the private field self._attr.

Example
    >>> class Box:
    ...     _items = (1, 2)
    ...     items = mirror("items")
    >>> Box().items
    (1, 2)
"""
import functools
from typing import final


@final
class UnsetType:
    """
    Type of the Unset singleton: falsey, printable, sealed.

    Supports `str | Unset` in isinstance checks by standing in for its type.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def mirror(name, /):
    """
    Property returning self._<name>; backing fields hold immutable values.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    def getter(self):
        return getattr(self, "_" + name)

    getter.__name__ = getter.__qualname__ = name
    return property(getter)


__all__ = (
    "UnsetType",
    "Unset",
    "mirror",
)
