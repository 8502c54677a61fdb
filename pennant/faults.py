"""
Pennant faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain to keep copy consistent and make logs/searches
  predictable.
- FlagException: base type that carries a message + options and knows how to
  render itself with rich, or raise itself, depending on the shell option.
- trigger(): central entry point to surface any fault.
- getdoc(): optional description lookup for a code from the host application.

Error taxonomy
- conversion (2111x): a value does not match the grammar of its kind, overflows its
  range, or the kind has no conversion at all (a programming error in the declaration).
- registry (2112x): the primitive flag registry could not make sense of a token.
- declaration (2113x): a name was registered twice.

Propagation
- Faults are ordinary exceptions. Outside shell mode they are raised to the caller;
  in shell mode they are printed through rich on stderr and the process exits
  with status 2.
- Resolution misses (environment variable unset, file absent) are never faults.

Host customisation (looked up in __main__)
- __codes__: {FaultCode: str} friendlier labels for codes.
- __docs__: {FaultCode: str} short documentation per code.
- __styles__: {style-name: rich style} overrides for rendering.
- __prog__: program name shown in headers.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the package (stable identifiers).

    grouping (by high-level domain)
    - conversion (2111x)
      • CONVERSION_FAILED, UNSUPPORTED_TYPE
    - registry (2112x)
      • UNKNOWN_FLAG, BAD_FLAG_SYNTAX, FLAG_VALUE_REQUIRED, INVALID_VALUE
    - declaration (2113x)
      • DUPLICATED_FLAG
    """
    # --- conversion errors (2111x) ---
    CONVERSION_FAILED   = 21111
    UNSUPPORTED_TYPE    = 21112

    # --- registry errors (2112x) ---
    UNKNOWN_FLAG        = 21121
    BAD_FLAG_SYNTAX     = 21122
    FLAG_VALUE_REQUIRED = 21123
    INVALID_VALUE       = 21124

    # --- declaration errors (2113x) ---
    DUPLICATED_FLAG     = 21131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class FlagException(Exception):
    """
    base class of every pennant fault.

    contract
    - message: one sentence, lowercased, already interpolated.
    - options: read-only mapping with rendering/trigger options and context
      (title, code, hint, input, kind, flag, cause, shell, fancy, colorful, ...).
    - str(fault) is the plain message, so faults read naturally when raised.
    """
    __defaults__ = MappingProxyType({})

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message if message is not Unset else "")
        self.message = message
        self.options = MappingProxyType(self.__defaults__ | options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __getattr__(self, name):
        # Context options double as attributes (fault.input, fault.kind, ...).
        if name.startswith("_") or name == "options":
            raise AttributeError(name)
        try:
            return self.options[name]
        except KeyError:
            raise AttributeError(name) from None

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style])

        code = self.options.get("code")
        title = self.options.get("title", "error")

        header = Text.assemble(
            "[ ",
            text(getattr(main, "__prog__", self.options.get("prog") or "pennant"), "prog-name"),
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "-", "code"),
            " | ",
            text(title.title(), "error-title"),
            " ]"
        )
        message = text(str(self), "error-message")
        parts = [message]
        if hint := self.options.get("hint"):
            parts.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

        if fancy:
            return Panel(Group(*parts), title=header, title_align="left")
        return Group(header, *parts)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self
        console.print(self)
        sys.exit(2)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ConversionError(FlagException, ValueError):
    """
    a value does not match the lexical grammar of its kind or overflows its range.

    options
    - input: the offending text (or value).
    - kind: human name of the target kind ("int64", "int slice", ...).
    - cause: short reason, without the input repeated.
    - flag: the flag name, once a caller with that context attached it.
    """
    __defaults__ = MappingProxyType({
        "title": "invalid value",
        "code": FaultCode.CONVERSION_FAILED,
    })


class UnsupportedTypeError(FlagException, TypeError):
    """
    the destination kind has neither a built-in conversion nor a set() capability.
    """
    __defaults__ = MappingProxyType({
        "title": "unsupported type",
        "code": FaultCode.UNSUPPORTED_TYPE,
    })


class UnknownFlagError(FlagException):
    __defaults__ = MappingProxyType({
        "title": "unknown flag",
        "code": FaultCode.UNKNOWN_FLAG,
    })


class FlagSyntaxError(FlagException):
    __defaults__ = MappingProxyType({
        "title": "bad flag syntax",
        "code": FaultCode.BAD_FLAG_SYNTAX,
    })


class FlagValueRequiredError(FlagException):
    __defaults__ = MappingProxyType({
        "title": "missing value",
        "code": FaultCode.FLAG_VALUE_REQUIRED,
    })


class InvalidValueError(FlagException, ValueError):
    __defaults__ = MappingProxyType({
        "title": "invalid value",
        "code": FaultCode.INVALID_VALUE,
    })


class DuplicateFlagError(FlagException):
    __defaults__ = MappingProxyType({
        "title": "flag redefined",
        "code": FaultCode.DUPLICATED_FLAG,
    })


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see FlagException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise the fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings. when
    not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FlagException",
    "ConversionError",
    "UnsupportedTypeError",
    "UnknownFlagError",
    "FlagSyntaxError",
    "FlagValueRequiredError",
    "InvalidValueError",
    "DuplicateFlagError",
    "FaultCode",
    "trigger",
    "getdoc",
)
