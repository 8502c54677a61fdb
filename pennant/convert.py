r"""
Pennant value conversion: the kind table and the Converter.

Overview
- Kind: explicit discriminant for every semantic type a flag can carry. The
  python representation of each kind is fixed:
    • BOOL → bool
    • INT, INT64 → int (signed 64-bit range)
    • UINT, UINT64 → int (unsigned 64-bit range)
    • FLOAT64 → float
    • STRING → str
    • DURATION → datetime.timedelta
    • TIME → datetime.datetime
    • GENERIC → any object exposing set(text), or a type with a registered parser
  A slice of a kind is a plain list of the element representation.

- Converter: the conversion engine and its configuration.
  • layouts: ordered list of time layouts (strptime formats or callables); the
    first layout that parses wins.
  • parsers: {Kind | type: callable(str) -> value} overriding a built-in scalar
    rule (Kind key) or teaching the engine a custom type (type key).
  • convert(kind, current, value, slice=...) returns a new value and never
    mutates `current`; writing the result back is the caller's job.

- Codecs: parse_bool, parse_int, parse_float, parse_duration, format_duration,
  stringify, zero, is_zero.

Grammar notes
- bool: "" is false; 1/t/T/TRUE/true/True and 0/f/F/FALSE/false/False.
- integers: ascii digits with optional sign, "_" separators and 0x/0o/0b
  prefixes; "010" reads as ten. uint kinds reject any sign.
- float64: decimal literals, inf/nan, and hexadecimal literals with a binary
  exponent ("0x1p-4").
- duration: [-+]?(<number><unit>)+ with units ns, us, µs, ms, s, m, h, or a bare
  "0". Resolution is one microsecond; smaller parts are truncated.

Quick example
    >>> converter = Converter()
    >>> converter.convert(Kind.INT, [9], "10", slice=True)
    [9, 10]
    >>> converter.convert(Kind.DURATION, None, "2h3m6s")
    datetime.timedelta(seconds=7386)
"""
import builtins
import copy
import csv
import math
import re
from datetime import datetime, timedelta, timezone
from enum import Enum

from .faults import ConversionError, UnsupportedTypeError
from .utils import Unset, coalesce, quote


class Kind(Enum):
    """
    semantic type of a flag value (the discriminant of the conversion matrix).
    """
    BOOL = "bool"
    INT = "int"
    INT64 = "int64"
    UINT = "uint"
    UINT64 = "uint64"
    FLOAT64 = "float64"
    STRING = "string"
    DURATION = "duration"
    TIME = "time"
    GENERIC = "generic"

    def typename(self, slice=False, /):
        """
        human name used in messages: "int", "int64 slice", ...
        """
        return self.value + " slice" if slice else self.value

    @property
    def integral(self):
        return self in _RANGES


_RANGES = {
    Kind.INT: (-(1 << 63), (1 << 63) - 1),
    Kind.INT64: (-(1 << 63), (1 << 63) - 1),
    Kind.UINT: (0, (1 << 64) - 1),
    Kind.UINT64: (0, (1 << 64) - 1),
}

_ZEROS = {
    Kind.BOOL: False,
    Kind.INT: 0,
    Kind.INT64: 0,
    Kind.UINT: 0,
    Kind.UINT64: 0,
    Kind.FLOAT64: 0.0,
    Kind.STRING: "",
    Kind.DURATION: timedelta(0),
    Kind.TIME: None,
    Kind.GENERIC: None,
}

_BOOLEANS = {
    "": False,
    "1": True, "t": True, "T": True, "TRUE": True, "true": True, "True": True,
    "0": False, "f": False, "F": False, "FALSE": False, "false": False, "False": False,
}

_INTEGER = re.compile(r"[+-]?(0[xX][0-9a-fA-F_]+|0[oO][0-7_]+|0[bB][01_]+|[0-9][0-9_]*)", re.ASCII)
_FLOAT = re.compile(
    r"[+-]?((\d[\d_]*(\.[\d_]*)?|\.\d[\d_]*)([eE][+-]?\d+)?|inf|infinity|nan)",
    re.ASCII | re.IGNORECASE,
)
_HEXFLOAT = re.compile(
    r"[+-]?0[xX]([0-9a-fA-F_]+(\.[0-9a-fA-F_]*)?|\.[0-9a-fA-F_]+)[pP][+-]?\d+",
    re.ASCII,
)
_UNIX = re.compile(r"[+-]?\d+", re.ASCII)

# nanoseconds per unit
_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # micro sign
    "μs": 1_000,  # greek small letter mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 60 * 60 * 1_000_000_000,
}
_MAX_DURATION = (1 << 63) - 1


def _fail(text, kind, cause, /, *, slice=False):
    return ConversionError(
        "could not parse %s as %s value: %s" % (quote(str(text)), kind.typename(slice), cause),
        input=text,
        kind=kind.typename(slice),
        cause=cause,
    )


def parse_bool(text, /):
    try:
        return _BOOLEANS[text]
    except KeyError:
        raise _fail(text, Kind.BOOL, "invalid syntax") from None


def parse_int(text, kind=Kind.INT, /):
    """
    parse an integer literal into the range of the given integral kind.
    """
    if not kind.integral:
        raise TypeError("parse_int() kind must be an integral kind")
    if not _INTEGER.fullmatch(text) or (kind in (Kind.UINT, Kind.UINT64) and text[0] in "+-"):
        raise _fail(text, kind, "invalid syntax")
    try:
        value = int(text, 0)
    except ValueError:
        # leading zeros ("010") are not a valid base-0 literal; read them as decimal
        try:
            value = int(text, 10)
        except ValueError:
            raise _fail(text, kind, "invalid syntax") from None
    low, high = _RANGES[kind]
    if not low <= value <= high:
        raise _fail(text, kind, "value out of range")
    return value


def parse_float(text, /):
    if _HEXFLOAT.fullmatch(text):
        try:
            return float.fromhex(text.replace("_", ""))
        except OverflowError:
            raise _fail(text, Kind.FLOAT64, "value out of range") from None
        except ValueError:
            raise _fail(text, Kind.FLOAT64, "invalid syntax") from None
    if not _FLOAT.fullmatch(text):
        raise _fail(text, Kind.FLOAT64, "invalid syntax")
    value = float(text)
    if math.isinf(value) and "inf" not in text.lower():
        raise _fail(text, Kind.FLOAT64, "value out of range")
    return value


def parse_duration(text, /):
    """
    parse a compound duration literal such as "2h3m6s", "1.5s" or "-300ms".
    """
    rest = text
    negative = False
    if rest[:1] in ("-", "+"):
        negative = rest[0] == "-"
        rest = rest[1:]
    if rest == "0":
        return timedelta(0)
    if not rest:
        raise _fail(text, Kind.DURATION, "invalid duration")

    total = 0
    while rest:
        match = re.match(r"(\d*)(?:\.(\d*))?", rest, re.ASCII)
        whole, fraction = match[1], match[2] or ""
        if not whole and not fraction:
            raise _fail(text, Kind.DURATION, "invalid duration")
        rest = rest[match.end():]

        unit = re.match(r"[^\d.]*", rest)[0]
        if not unit:
            raise _fail(text, Kind.DURATION, "missing unit in duration")
        try:
            scale = _UNITS[unit]
        except KeyError:
            raise _fail(text, Kind.DURATION, "unknown unit %s in duration" % quote(unit)) from None
        rest = rest[len(unit):]

        total += int(whole or "0") * scale
        if fraction:
            total += int(fraction) * scale // 10 ** len(fraction)
        if total > _MAX_DURATION:
            raise _fail(text, Kind.DURATION, "invalid duration")

    microseconds = total // 1_000
    return timedelta(microseconds=-microseconds if negative else microseconds)


def _decimal(value, digits, /):
    # "1500", 3 -> "1.5"; trailing zeros of the fraction are dropped
    whole, fraction = divmod(value, 10 ** digits)
    fraction = str(fraction).rjust(digits, "0").rstrip("0")
    return str(whole) + ("." + fraction if fraction else "")


def format_duration(value, /):
    """
    render a timedelta in compound form: "1h0m0s", "1m30s", "1.5s", "300ms", "0s".
    """
    microseconds = value // timedelta(microseconds=1)
    if microseconds == 0:
        return "0s"
    sign = "-" if microseconds < 0 else ""
    microseconds = abs(microseconds)

    if microseconds < 1_000:
        return "%s%dµs" % (sign, microseconds)
    if microseconds < 1_000_000:
        return "%s%sms" % (sign, _decimal(microseconds, 3))

    seconds, fraction = divmod(microseconds, 1_000_000)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    text = _decimal(seconds * 1_000_000 + fraction, 6) + "s"
    if minutes or hours:
        text = "%dm%s" % (minutes, text)
    if hours:
        text = "%dh%s" % (hours, text)
    return sign + text


def _format_float(value, /):
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    text = repr(value)
    return text[:-2] if text.endswith(".0") else text


def unix(text, /):
    """
    time layout: integral seconds since the epoch (UTC).
    """
    if not _UNIX.fullmatch(text):
        raise ValueError("not a unix timestamp")
    return datetime.fromtimestamp(int(text), tz=timezone.utc)


RFC3339 = "%Y-%m-%dT%H:%M:%S%z"
RFC3339_FRACTION = "%Y-%m-%dT%H:%M:%S.%f%z"
LOCAL = "%Y-%m-%dT%H:%M:%S"
LOCAL_FRACTION = "%Y-%m-%dT%H:%M:%S.%f"
DATETIME = "%Y-%m-%d %H:%M:%S"
DATE_ONLY = "%Y-%m-%d"
KITCHEN = "%I:%M%p"
TIME_ONLY = "%H:%M:%S"
CLOCK = "%H:%M"

TIME_LAYOUTS = (
    unix,
    RFC3339,
    RFC3339_FRACTION,
    LOCAL,
    LOCAL_FRACTION,
    DATETIME,
    DATE_ONLY,
    KITCHEN,
    TIME_ONLY,
    CLOCK,
)


def zero(kind, slice=False, /):
    """
    zero value of a kind (a fresh empty list for slices).
    """
    return [] if slice else _ZEROS[kind]


def is_zero(kind, value, slice=False, /):
    if value is None or value is Unset:
        return True
    if slice:
        return len(value) == 0
    if kind in (Kind.TIME, Kind.GENERIC):
        return False
    return value == _ZEROS[kind]


def stringify(kind, value, /):
    """
    display text of a value: slices comma-joined, scalars in their literal form.
    """
    if value is None or value is Unset:
        return ""
    if builtins.type(value) in (list, tuple):
        return ",".join(stringify(kind, element) for element in value)
    match kind:
        case Kind.BOOL:
            return "true" if value else "false"
        case Kind.FLOAT64:
            return _format_float(float(value))
        case Kind.DURATION:
            return format_duration(value)
        case Kind.TIME:
            return value.isoformat()
        case _:
            return str(value)


class Converter:
    """
    Conversion engine over the fixed kind table plus caller-supplied configuration.

    Configuration
    - layouts: ordered time layouts. Each layout is either a strptime format
      string or a callable(str) -> datetime raising ValueError on mismatch.
      Defaults to TIME_LAYOUTS (unix seconds, RFC 3339, ISO local, date/time
      and clock formats).
    - parsers: {Kind | type: callable(str) -> value}. A Kind key replaces the
      built-in rule for that scalar kind; a type key teaches GENERIC
      conversion how to build values of that type.

    Intended lifecycle: configure once at startup (register_layout /
    register_parser), then share read-only while parsing.
    """

    def __init__(self, layouts=TIME_LAYOUTS, parsers=()):
        self.layouts = []
        self.parsers = {}
        for layout in layouts:
            self.register_layout(layout)
        for key, parser in dict(parsers).items():
            self.register_parser(key, parser)

    def __repr__(self):
        return "Converter(layouts=%d, parsers=%d)" % (len(self.layouts), len(self.parsers))

    def register_layout(self, layout, /):
        """
        append a time layout; it is consulted after every layout registered before it.
        """
        if not isinstance(layout, str) and not callable(layout):
            raise TypeError("time layout must be a format string or a callable")
        if isinstance(layout, str) and not layout.strip():
            raise ValueError("time layout cannot be empty")
        self.layouts.append(layout)
        return layout

    def register_parser(self, key, parser, /):
        """
        register a string-to-value function for a kind or a custom type.
        """
        if not isinstance(key, Kind | type):
            raise TypeError("parser key must be a Kind or a type")
        if key is Kind.GENERIC:
            raise ValueError("generic parsers are registered per type")
        if not callable(parser):
            raise TypeError("parser must be callable")
        self.parsers[key] = parser
        return parser

    def parse_time(self, text, /):
        for layout in self.layouts:
            try:
                if isinstance(layout, str):
                    return datetime.strptime(text, layout)
                return layout(text)
            except (ValueError, OverflowError, OSError):
                continue
        raise _fail(text, Kind.TIME, "no layout matched")

    def parse(self, kind, text, /, *, prototype=None, type=Unset):
        """
        parse one scalar of the given kind.

        parameters
        - kind: Kind of the scalar.
        - text: the source string.
        - prototype: GENERIC only; current value copied and set from text.
        - type: GENERIC only; class used when there is no prototype.

        errors
        - ConversionError: text does not match the kind grammar.
        - UnsupportedTypeError: GENERIC target without parser nor set().
        - a custom parser's or set()'s own ValueError is surfaced verbatim.
        """
        if not isinstance(text, str):
            raise TypeError("parse() text must be a string")
        if kind is Kind.GENERIC:
            return self._parse_generic(text, prototype, type)
        if (parser := self.parsers.get(kind)) is not None:
            try:
                return parser(text)
            except ConversionError:
                raise
            except ValueError as error:
                raise _fail(text, kind, str(error)) from error
        match kind:
            case Kind.BOOL:
                return parse_bool(text)
            case Kind.INT | Kind.INT64 | Kind.UINT | Kind.UINT64:
                return parse_int(text, kind)
            case Kind.FLOAT64:
                return parse_float(text)
            case Kind.STRING:
                return text
            case Kind.DURATION:
                return parse_duration(text)
            case Kind.TIME:
                return self.parse_time(text)
        raise UnsupportedTypeError("unsupported kind %r" % kind, kind=kind)

    def _parse_generic(self, text, prototype, type):
        if prototype is not None and prototype is not Unset:
            type = builtins.type(prototype)
        if type is not Unset and (parser := self.parsers.get(type)) is not None:
            return parser(text)
        if prototype is not None and prototype is not Unset and callable(getattr(prototype, "set", None)):
            value = copy.copy(prototype)
            value.set(text)
            return value
        if type is not Unset and callable(getattr(type, "set", None)):
            value = type()
            value.set(text)
            return value
        name = getattr(coalesce(type, None), "__name__", None) or "generic value without a type"
        raise UnsupportedTypeError(
            "unsupported type %s: it exposes no set() method and has no registered parser" % name,
            input=text,
            kind=Kind.GENERIC.typename(),
        )

    def validate(self, kind, value, /, *, type=Unset):
        """
        check an already-typed value against a kind (programmatic assignment).
        """
        match kind:
            case Kind.BOOL:
                ok = isinstance(value, bool)
            case Kind.INT | Kind.INT64 | Kind.UINT | Kind.UINT64:
                ok = isinstance(value, int) and not isinstance(value, bool)
                if ok:
                    low, high = _RANGES[kind]
                    if not low <= value <= high:
                        raise _fail(value, kind, "value out of range")
            case Kind.FLOAT64:
                ok = isinstance(value, int | float) and not isinstance(value, bool)
                if ok:
                    value = float(value)
            case Kind.STRING:
                ok = isinstance(value, str)
            case Kind.DURATION:
                ok = isinstance(value, timedelta)
            case Kind.TIME:
                ok = isinstance(value, datetime)
            case _:
                ok = value is not None and (type is Unset or isinstance(value, type))
        if not ok:
            raise _fail(value, kind, "unexpected value of type %s" % builtins.type(value).__name__)
        return value

    def _element(self, kind, value, prototype, type):
        # text is parsed, except for generic types that are themselves strings
        if isinstance(value, str) and not (
            kind is Kind.GENERIC and isinstance(type, builtins.type) and issubclass(type, str)
        ):
            return self.parse(kind, value, prototype=prototype, type=type)
        return self.validate(kind, value, type=type)

    def convert(self, kind, current, value, /, *, slice=False, type=Unset):
        """
        produce the replacement for `current` given a new input.

        behavior
        - slice + str: parse one element and return current + [element].
        - slice + list/tuple: replace wholesale, converting each element.
        - scalar + str: parse with the kind rule (GENERIC: copy current and set()).
        - scalar + typed value: validated and returned.

        `current` is never mutated.
        """
        if slice:
            if isinstance(value, list | tuple):
                return [self._element(kind, element, None, type) for element in value]
            return [*(current or ()), self._element(kind, value, None, type)]
        return self._element(kind, value, current, type)

    def split(self, kind, text, /, *, type=Unset):
        """
        convert a comma-separated list (one row per line, csv quoting honoured,
        blanks around each element skipped) into a slice value.
        """
        if not isinstance(text, str):
            raise TypeError("split() text must be a string")
        rows = csv.reader(text.splitlines(), skipinitialspace=True)
        return [
            self.parse(kind, element.strip(), type=type)
            for row in rows
            for element in row
        ]


__all__ = (
    "Kind",
    "Converter",
    "TIME_LAYOUTS",
    "RFC3339",
    "RFC3339_FRACTION",
    "LOCAL",
    "LOCAL_FRACTION",
    "DATETIME",
    "DATE_ONLY",
    "KITCHEN",
    "TIME_ONLY",
    "CLOCK",
    "unix",
    "parse_bool",
    "parse_int",
    "parse_float",
    "parse_duration",
    "format_duration",
    "stringify",
    "zero",
    "is_zero",
)
