"""
Pennant utilities

Helpers shared by the converter, the flag definitions and the help renderer.

- Unset: the "not given" sentinel. None is a legitimate flag value (a time
  flag without a default holds None), so keyword defaults use Unset instead.
- coalesce(value, default): Unset -> default, anything else passes through.
- rename(callable, name) / @rename(name): stable names for generated methods.
- mirror(name): read-only property over self._name handing out copies.
- quote(text): the double-quoted form used in help defaults and errors.

    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> quote('say "hi"')
    '"say \\\\"hi\\\\""'
"""
import builtins
import functools
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel.

    There is exactly one instance: construction, copying and unpickling all
    yield it, and the type cannot be subclassed. It is falsey and takes part
    in PEP 604 unions, so isinstance(value, str | Unset) reads naturally.
    """

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

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """Unset becomes default; None, 0, "" and [] are kept."""
    return object if object is not Unset else default


def rename(*parameters):
    """
    rename(callable, name) sets __name__ and __qualname__ and returns the
    callable; rename(name) returns a decorator doing the same.
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be an updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _copied(object):
    # plain containers are rebuilt all the way down; subclasses keep their identity
    match type(object):
        case builtins.list | builtins.tuple:
            return list(map(_copied, object))
        case builtins.dict:
            return dict(zip(object.keys(), map(_copied, object.values())))
        case builtins.set | builtins.frozenset:
            return set(map(_copied, object))
    return object


def mirror(name, /):
    """
    Read-only property returning a copy of the private attribute "_{name}".

    A caller mutating what it received never alters a flag's declared default.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _copied(getattr(self, "_" + name))

    return property(getter)


def quote(text, /):
    """
    Render text between double quotes, escaping backslashes, quotes and
    control characters.

    Used wherever a value is echoed back to the user (help defaults and
    conversion errors) so that blanks and empty strings stay visible.
    """
    if not isinstance(text, str):
        raise TypeError("quote() argument must be a string")
    escaped = []
    for char in text:
        match char:
            case "\\" | '"':
                escaped.append("\\" + char)
            case "\n":
                escaped.append("\\n")
            case "\t":
                escaped.append("\\t")
            case "\r":
                escaped.append("\\r")
            case _ if not char.isprintable():
                escaped.append("\\x%02x" % ord(char) if ord(char) < 0x100 else "\\u%04x" % ord(char))
            case _:
                escaped.append(char)
    return '"%s"' % "".join(escaped)


Unset = UnsetType()
"""The sentinel for keyword arguments that were not given."""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "quote",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
