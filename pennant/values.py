"""
Pennant values: destinations and the generic value adapter.

Destination
- A caller-owned mutable cell (single `value` slot). The engine writes the
  resolved value into it and never replaces the cell itself, so a caller
  keeping a reference observes every update made while parsing.

GenericValue
- Adapter between a Destination and the primitive registry's textual
  set/get/str/is-bool-switch contract. All conversion is delegated to a
  Converter; the adapter only decides *what* the conversion starts from:
    • scalars: the current destination value (overwrite).
    • slices: an empty list on the first set of a parse pass (the default is
      replaced, not appended to), the current list afterwards (append).
- A failed conversion writes nothing: scalars keep their prior value and a
  slice keeps the elements it had before the failing call.
"""
from .convert import Converter, Kind, stringify, zero
from .utils import Unset, coalesce


class Destination:
    """
    mutable reference to a flag value.

    >>> port = Destination(8080)
    >>> port.value
    8080
    """
    __slots__ = ("value",)

    def __init__(self, value=None):
        self.value = value

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self.value)

    def __eq__(self, other):
        if not isinstance(other, Destination):
            return NotImplemented
        return self.value == other.value

    __hash__ = None


class GenericValue:
    """
    registry-facing value bound to a destination.

    parameters
    - destination: Destination written on every successful set/apply.
    - kind: Kind of the value (element kind for slices).
    - slice: True when the destination holds a list of `kind`.
    - converter: Converter used for text conversion (a fresh default one if omitted).
    - type: element/custom class for GENERIC kinds without a prototype value.

    attributes
    - touched: False until the first successful set/apply; on slices it
      marks that the default has already been replaced.
    """

    def __init__(self, destination, kind, *, slice=False, converter=Unset, type=Unset):
        if not isinstance(destination, Destination):
            raise TypeError("GenericValue() destination must be a Destination")
        if not isinstance(kind, Kind):
            raise TypeError("GenericValue() kind must be a Kind")
        self.destination = destination
        self.kind = kind
        self.slice = bool(slice)
        self.converter = coalesce(converter, Converter())
        self.type = type
        self.touched = False

    def __repr__(self):
        return "%s(%s, %r)" % (type(self).__name__, self.kind.typename(self.slice), self.destination.value)

    def __str__(self):
        return stringify(self.kind, self.destination.value)

    @property
    def is_bool_flag(self):
        return self.kind is Kind.BOOL and not self.slice

    def get(self):
        return self.destination.value

    def set(self, text, /):
        """
        convert text and store it (append for slices after the first set).
        """
        if not isinstance(text, str):
            raise TypeError("set() argument must be a string")
        self.apply(text)

    def apply(self, value, /):
        """
        same as set() but also accepts an already-typed value.
        """
        current = self.destination.value
        if self.slice and not self.touched:
            current = zero(self.kind, True)
        self.destination.value = self.converter.convert(
            self.kind, current, value, slice=self.slice, type=self.type
        )
        self.touched = True


__all__ = (
    "Destination",
    "GenericValue",
)
