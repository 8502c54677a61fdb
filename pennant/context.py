"""
Pennant context: typed read access to a parsed FlagSet.

Every accessor takes a flag name (primary or alias) and returns the current
value of that flag. A name that is not registered, or registered with another
kind, yields the zero value of the accessor kind rather than an error; slices
are returned as copies.

    >>> context = Context(flagset)
    >>> context.int_slice("serve")
    [10, 20]
"""
from .convert import Kind, zero
from .utils import rename
from .values import GenericValue


def _accessor(name, kind, slice=False, /):
    @rename(name)
    def accessor(self, name, /):
        return self.lookup(name, kind, slice)

    accessor.__doc__ = "current %s value of a flag (zero value when absent)." % kind.typename(slice)
    return accessor


class Context:
    """
    typed accessors over a FlagSet (read-only view, no parsing).
    """

    def __init__(self, flagset):
        self.flagset = flagset

    def __repr__(self):
        return "Context(%r)" % self.flagset

    def lookup(self, name, kind, slice=False, /):
        entry = self.flagset.lookup(name)
        if entry is None or not isinstance(entry.value, GenericValue):
            return zero(kind, slice)
        if entry.value.kind is not kind or entry.value.slice != slice:
            return zero(kind, slice)
        value = entry.value.get()
        return list(value) if slice else value

    def value(self, name, /):
        """raw value of a flag, whatever its kind (None when absent)."""
        if (entry := self.flagset.lookup(name)) is None:
            return None
        return entry.value.get()

    def is_set(self, name, /):
        return self.flagset.is_set(name)

    @property
    def names(self):
        return [entry.name for entry in self.flagset.entries]

    @property
    def args(self):
        return list(self.flagset.args)

    string = _accessor("string", Kind.STRING)
    path = _accessor("path", Kind.STRING)
    int = _accessor("int", Kind.INT)
    int64 = _accessor("int64", Kind.INT64)
    uint = _accessor("uint", Kind.UINT)
    uint64 = _accessor("uint64", Kind.UINT64)
    float64 = _accessor("float64", Kind.FLOAT64)
    bool = _accessor("bool", Kind.BOOL)
    duration = _accessor("duration", Kind.DURATION)
    time = _accessor("time", Kind.TIME)
    generic = _accessor("generic", Kind.GENERIC)

    string_slice = _accessor("string_slice", Kind.STRING, True)
    int_slice = _accessor("int_slice", Kind.INT, True)
    int64_slice = _accessor("int64_slice", Kind.INT64, True)
    uint_slice = _accessor("uint_slice", Kind.UINT, True)
    uint64_slice = _accessor("uint64_slice", Kind.UINT64, True)
    float64_slice = _accessor("float64_slice", Kind.FLOAT64, True)
    bool_slice = _accessor("bool_slice", Kind.BOOL, True)
    duration_slice = _accessor("duration_slice", Kind.DURATION, True)
    time_slice = _accessor("time_slice", Kind.TIME, True)
    generic_slice = _accessor("generic_slice", Kind.GENERIC, True)


__all__ = (
    "Context",
)
