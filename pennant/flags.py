r"""
Pennant flag definitions.

Overview
- Flag: base of every typed flag definition. A definition is declarative: it
  is built once by the caller, applied to a FlagSet once per parse pass, and
  never modified by parsing (its declared default is handed out as a copy).

- Family (kind, python representation)
  • StringFlag, PathFlag (str), IntFlag, Int64Flag, UintFlag, Uint64Flag (int),
    Float64Flag (float), BoolFlag (bool), DurationFlag (timedelta),
    TimeFlag (datetime), GenericFlag (any object exposing set(text)).
  • StringSliceFlag, IntSliceFlag, Int64SliceFlag, UintSliceFlag,
    Uint64SliceFlag, Float64SliceFlag, BoolSliceFlag, DurationSliceFlag,
    TimeSliceFlag, GenericSliceFlag (lists of the above).

- FlagType metaclass
  • derives __typename__ from the class name ("int-slice-flag") for messages.
  • binds the kind given as class keyword (class IntFlag(Flag, kind=Kind.INT)).
  • exposes the fields listed in __introspectable__ as read-only properties
    that hand out copies of containers.
  • provides stable __repr__/__rich_repr__ implementations.

Metadata (sanitized on construction)
- name: non-empty string without a leading dash, "=" or blanks.
- aliases: iterable of names; duplicates (name included) are rejected.
- usage: str, may embed one `placeholder` between backticks.
- value: typed default of the flag kind; defaults to the kind's zero value.
- destination: Unset | Destination written by apply().
- env_vars / file_paths: a string or an iterable of strings, in priority order.
- default_text: Unset | str shown instead of the rendered default in help.
- required / hidden: bool, recorded for the command layer.
- type: GENERIC kinds only; the custom class (inferred from value when omitted).

Apply (state machine, no branching back)
1. resolve the starting value: a non-zero destination wins, then the first
   environment variable or file found (converted, slices split on commas),
   then the declared default.
2. write it into the destination, or into an internal Destination.
3. register one GenericValue under every name, so aliases share storage and
   the first-set-clears state of slices.
4. required/hidden are not enforced here.

Quick example
    >>> flagset = FlagSet()
    >>> adapter = IntSliceFlag("serve", aliases=["s"], value=[9, 2]).apply(flagset)
    >>> flagset.parse(["-s", "10", "-s", "20"])
    []
    >>> flagset.value("serve")
    [10, 20]
"""
import builtins
import copy
import functools
import logging
import operator
import os
import re
from collections.abc import Iterable

from .convert import Converter, Kind, is_zero, zero
from .faults import ConversionError
from .help import render
from .sources import resolve
from .utils import *
from .values import Destination, GenericValue

logger = logging.getLogger(__name__)


class FlagType(type):
    """
    Metaclass of flag definitions.

    Options (class keywords)
    - kind: Kind bound to the class (concrete flag types only).
    - slice: True when the flag holds a list of `kind`.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, *, kind=Unset, slice=False, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )
        if kind is not Unset:
            if not isinstance(kind, Kind):
                raise TypeError(f"{self.__typename__} 'kind' must be a Kind")
            self.__kind__ = kind
            self.__slice__ = bool(slice)

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _names(cls, field, object, /):
    if isinstance(object, str):
        return (object,)
    if not isinstance(object, Iterable):
        raise TypeError(f"{cls.__typename__} '{field}' must be a string or an iterable of strings")
    return tuple(object)


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize the naming and presentation metadata.

    - name: required, a non-empty string. It must not start with a dash (the
      registry adds "-"/"--" itself) nor contain "=" or blanks.
    - aliases: a string or an iterable of names following the same rule; the
      primary name and aliases together cannot contain duplicates.
    - usage: a string (trimmed).
    - default_text: Unset or a string.
    - env_vars: a string or an iterable of non-empty strings.
    - file_paths: a string, a path-like or an iterable of those.
    - destination: Unset or a Destination.

    The metadata dict is mutated in place.
    """
    names = []
    for name in (metadata["name"], *_names(cls, "aliases", metadata["aliases"])):
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif not re.fullmatch(r"[^\s=-][^\s=]*", name):
            raise ValueError(f"{cls.__typename__} names must not start with a dash nor contain '=' or blanks")
        elif name in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        names.append(name)
    metadata["name"], *aliases = names
    metadata["aliases"] = tuple(aliases)

    if not isinstance(usage := metadata["usage"], str):
        raise TypeError(f"{cls.__typename__} 'usage' must be a string")
    metadata["usage"] = usage.strip()

    if not isinstance(metadata["default_text"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'default_text' must be a string")

    env_vars = _names(cls, "env_vars", metadata["env_vars"])
    for name in env_vars:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} 'env_vars' must contain only strings")
        elif not name.strip():
            raise ValueError(f"{cls.__typename__} 'env_vars' cannot contain empty-strings")
    metadata["env_vars"] = tuple(name.strip() for name in env_vars)

    file_paths = (metadata["file_paths"],) if isinstance(metadata["file_paths"], os.PathLike) else \
        _names(cls, "file_paths", metadata["file_paths"])
    for path in file_paths:
        if not isinstance(path, str | os.PathLike):
            raise TypeError(f"{cls.__typename__} 'file_paths' must contain only strings or paths")
        elif not os.fspath(path):
            raise ValueError(f"{cls.__typename__} 'file_paths' cannot contain empty paths")
    metadata["file_paths"] = tuple(file_paths)

    if not isinstance(metadata["destination"], Destination | Unset):
        raise TypeError(f"{cls.__typename__} 'destination' must be a Destination")


def _sanitize_value(cls, metadata, /):
    """
    Internal: validate the declared default against the flag kind.

    - type: only accepted by generic flags, where it is the custom class. When
      omitted it is inferred from the default (its first element for slices).
    - value: Unset becomes the kind's zero value; slices accept any iterable
      (stored as a list); scalars must already be of the kind representation.

    Raises
    - TypeError: value of the wrong type, generic flag without a type.
    - ValueError: integer default outside the range of its kind.
    """
    kind, slice, value = cls.__kind__, cls.__slice__, metadata["value"]

    if kind is not Kind.GENERIC:
        if metadata["type"] is not Unset:
            raise TypeError(f"{cls.__typename__} does not accept a 'type'")
    else:
        if metadata["type"] is Unset and value is not Unset:
            if slice and value:
                metadata["type"] = builtins.type(next(iter(value)))
            elif not slice:
                metadata["type"] = builtins.type(value)
        if metadata["type"] is Unset:
            raise TypeError(f"{cls.__typename__} must specify a 'value' or a 'type'")
        elif not isinstance(metadata["type"], builtins.type):
            raise TypeError(f"{cls.__typename__} 'type' must be a class")

    if value is Unset:
        metadata["value"] = zero(kind, slice)
        return

    validator = Converter()
    try:
        if slice:
            if isinstance(value, str) or not isinstance(value, Iterable):
                raise TypeError(f"{cls.__typename__} 'value' must be a list")
            metadata["value"] = [validator.validate(kind, element, type=metadata["type"]) for element in value]
        elif kind is Kind.GENERIC and value is None:
            metadata["value"] = None
        else:
            metadata["value"] = validator.validate(kind, value, type=metadata["type"])
    except ConversionError as error:
        if error.cause == "value out of range":
            raise ValueError(f"{cls.__typename__} 'value' is out of range for {kind.typename()}") from None
        raise TypeError(f"{cls.__typename__} 'value' must be a {kind.typename(slice)} value") from None


class Flag(metaclass=FlagType):
    """
    Typed flag definition (abstract: use one of the concrete flag types).

    Properties
    - The names listed in __introspectable__ are read-only attributes mirroring
      the sanitized metadata; containers are returned as fresh copies.
    - names: primary name followed by the aliases.
    - kind / slice: semantic kind bound by the concrete class.
    - takes_value: False only for boolean switches.
    """

    __introspectable__ = (
        "name",
        "aliases",
        "usage",
        "value",
        "destination",
        "env_vars",
        "file_paths",
        "default_text",
        "required",
        "hidden",
    )

    def __init__(
            self,
            name,
            /,
            *,
            aliases=(),
            usage="",
            value=Unset,
            destination=Unset,
            env_vars=(),
            file_paths=(),
            default_text=Unset,
            required=False,
            hidden=False,
            type=Unset,
    ):
        cls = builtins.type(self)
        if not hasattr(cls, "__kind__"):
            raise TypeError(f"{cls.__typename__} is abstract, use a concrete flag type")

        metadata = {
            "name": name,
            "aliases": aliases,
            "usage": usage,
            "value": value,
            "destination": destination,
            "env_vars": env_vars,
            "file_paths": file_paths,
            "default_text": default_text,
            "required": bool(required),
            "hidden": bool(hidden),
            "type": type,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_value(cls, metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def __str__(self):
        return render(self)

    @property
    def names(self):
        return [self._name, *self._aliases]

    @property
    def kind(self):
        return builtins.type(self).__kind__

    @property
    def slice(self):
        return builtins.type(self).__slice__

    @property
    def type(self):
        return self._type

    @property
    def takes_value(self):
        return not (self.kind is Kind.BOOL and not self.slice)

    def resolve(self, converter=Unset, /):
        """
        starting value of the flag for a parse pass (state 1 of apply()).

        returns the destination value when it is non-zero, else the converted
        environment/file value when one is found, else a copy of the default.

        raises ConversionError ("could not parse ... for flag <name>: ...")
        when the environment/file value does not convert.
        """
        destination = self._destination
        if destination is not Unset and not is_zero(self.kind, destination.value, self.slice):
            logger.debug("flag %s keeps its destination value", self._name)
            return destination.value

        text, found = resolve(self._env_vars, self._file_paths)
        if not found:
            if self.kind is Kind.GENERIC and not self.slice:
                return copy.copy(self._value)
            return self.value

        converter = coalesce(converter, Converter())
        try:
            if self.slice:
                return converter.split(self.kind, text, type=self._type)
            return converter.parse(self.kind, text, prototype=self._value, type=self._type)
        except ValueError as error:
            cause = getattr(error, "cause", None) or str(error)
            if self.slice and isinstance(error, ConversionError) and error.input != text:
                cause = "%s: %s" % (quote(str(error.input)), cause)
            raise ConversionError(
                "could not parse %s as %s value for flag %s: %s" % (
                    quote(text), self.kind.typename(self.slice), self._name, cause
                ),
                input=text,
                kind=self.kind.typename(self.slice),
                flag=self._name,
                cause=cause,
            ) from error

    def apply(self, flagset, /):
        """
        register the flag under every name with the given FlagSet.

        parameters
        - flagset: registry exposing var(value, name, usage, default_text) and,
          optionally, a `converter` attribute.

        returns
        - GenericValue: the adapter shared by every name.
        """
        converter = coalesce(getattr(flagset, "converter", Unset), Converter())
        value = self.resolve(converter)

        if (destination := self._destination) is Unset:
            destination = Destination(value)
        else:
            destination.value = value

        adapter = GenericValue(destination, self.kind, slice=self.slice, converter=converter, type=self._type)
        for name in self.names:
            flagset.var(adapter, name, self._usage, coalesce(self._default_text, ""))
        logger.debug("applied %s %s (names: %s)", self.__typename__, self._name, ", ".join(self.names))
        return adapter


class StringFlag(Flag, kind=Kind.STRING):
    pass


class PathFlag(Flag, kind=Kind.STRING):
    """
    string flag naming a file system path (completion collaborators can offer files).
    """

    @property
    def takes_file(self):
        return True


class IntFlag(Flag, kind=Kind.INT):
    pass


class Int64Flag(Flag, kind=Kind.INT64):
    pass


class UintFlag(Flag, kind=Kind.UINT):
    pass


class Uint64Flag(Flag, kind=Kind.UINT64):
    pass


class Float64Flag(Flag, kind=Kind.FLOAT64):
    pass


class BoolFlag(Flag, kind=Kind.BOOL):
    """
    boolean switch: "-name" alone sets it, "-name=false" clears it.
    """


class DurationFlag(Flag, kind=Kind.DURATION):
    pass


class TimeFlag(Flag, kind=Kind.TIME):
    pass


class GenericFlag(Flag, kind=Kind.GENERIC):
    """
    flag whose value is a custom object exposing set(text) (or a type with a
    parser registered on the converter). `type` is inferred from `value`.
    """


class StringSliceFlag(Flag, kind=Kind.STRING, slice=True):
    pass


class IntSliceFlag(Flag, kind=Kind.INT, slice=True):
    pass


class Int64SliceFlag(Flag, kind=Kind.INT64, slice=True):
    pass


class UintSliceFlag(Flag, kind=Kind.UINT, slice=True):
    pass


class Uint64SliceFlag(Flag, kind=Kind.UINT64, slice=True):
    pass


class Float64SliceFlag(Flag, kind=Kind.FLOAT64, slice=True):
    pass


class BoolSliceFlag(Flag, kind=Kind.BOOL, slice=True):
    pass


class DurationSliceFlag(Flag, kind=Kind.DURATION, slice=True):
    pass


class TimeSliceFlag(Flag, kind=Kind.TIME, slice=True):
    pass


class GenericSliceFlag(Flag, kind=Kind.GENERIC, slice=True):
    """
    list of custom objects; `type` names the element class when the default is empty.
    """


__all__ = (
    "FlagType",
    "Flag",
    "StringFlag",
    "PathFlag",
    "IntFlag",
    "Int64Flag",
    "UintFlag",
    "Uint64Flag",
    "Float64Flag",
    "BoolFlag",
    "DurationFlag",
    "TimeFlag",
    "GenericFlag",
    "StringSliceFlag",
    "IntSliceFlag",
    "Int64SliceFlag",
    "UintSliceFlag",
    "Uint64SliceFlag",
    "Float64SliceFlag",
    "BoolSliceFlag",
    "DurationSliceFlag",
    "TimeSliceFlag",
    "GenericSliceFlag",
)
