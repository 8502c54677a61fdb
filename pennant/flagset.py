r"""
Pennant flag set: the primitive, string-based flag registry.

Scope
- Registers named values exposing set(text)/get()/str()/is_bool_flag and
  parses a token list against them. Typed flag definitions (pennant.flags)
  apply themselves to a FlagSet; this module knows nothing about kinds.

Token grammar (one flag per token, parsing stops at the first non-flag)
- "-name" / "--name": boolean switch set to true, or a flag whose value is
  the next token.
- "-name=value" / "--name=value": inline value (may be empty).
- "--": terminator, consumed; everything after it is positional.
- "-" alone and any token not starting with "-": first positional argument.
- "-abc" with short_option_handling: cluster of one-letter boolean switches,
  expanded when "abc" itself is not a registered name.

Faults
- UnknownFlagError (with close-match suggestions), FlagSyntaxError,
  FlagValueRequiredError, InvalidValueError, DuplicateFlagError.
- They go through trigger(): raised to the caller by default; in shell mode
  rendered with rich on stderr followed by exit status 2.
"""
import difflib
from collections import namedtuple

from .convert import Converter
from .faults import *
from .utils import Unset, coalesce, quote

Entry = namedtuple("Entry", ("name", "value", "usage", "default_text"))
Entry.__doc__ = """registered flag: name, value adapter, usage text and default text."""


def _dashed(name, /):
    return ("-" if len(name) == 1 else "--") + name


class FlagSet:
    """
    Named collection of flag values plus the state of one parse pass.

    parameters
    - name: program or command name, shown in fault headers.
    - converter: Converter shared by the flags applied to this set (a fresh
      default one if omitted).
    - short_option_handling: expand "-abc" into "-a -b -c" for boolean switches.
    - shell: render faults and exit(2) instead of raising them.
    - colorful / fancy: rendering options of faults in shell mode.

    attributes
    - args: positional arguments left after the last parse().
    - parsed: True once parse() has run.
    """

    def __init__(self, name="", *, converter=Unset, short_option_handling=False, shell=False, colorful=True, fancy=False):
        if not isinstance(name, str):
            raise TypeError("FlagSet() name must be a string")
        if not isinstance(converter, Converter | Unset):
            raise TypeError("FlagSet() converter must be a Converter")
        self.name = name
        self.converter = coalesce(converter, Converter())
        self.short_option_handling = bool(short_option_handling)
        self.shell = bool(shell)
        self.colorful = bool(colorful)
        self.fancy = bool(fancy)
        self.args = []
        self.parsed = False
        self._formal = {}
        self._actual = {}

    def __repr__(self):
        return "FlagSet(%r, flags=%d)" % (self.name, len(self._formal))

    def __contains__(self, name):
        return name in self._formal

    def trigger(self, fault, /, **options):
        trigger(fault, **options, shell=self.shell, fancy=self.fancy, colorful=self.colorful, prog=self.name or None)

    def var(self, value, name, usage="", default_text=""):
        """
        register a value under a name.

        the value must expose set(text), get() and __str__; it is a boolean
        switch when its is_bool_flag attribute is true.
        """
        if not callable(getattr(value, "set", None)) or not callable(getattr(value, "get", None)):
            raise TypeError("var() value must provide set() and get() methods")
        if not isinstance(name, str) or not name:
            raise TypeError("var() name must be a non-empty string")
        if name in self._formal:
            return self.trigger(DuplicateFlagError(
                "flag redefined: %s" % name,
                flag=name,
                docs=getdoc(FaultCode.DUPLICATED_FLAG)
            ))
        self._formal[name] = Entry(name, value, usage, default_text)

    def lookup(self, name, /):
        return self._formal.get(name)

    @property
    def entries(self):
        """registered entries, sorted by name."""
        return [self._formal[name] for name in sorted(self._formal)]

    @property
    def actual(self):
        """entries set since the flag set was created, by name."""
        return dict(self._actual)

    def is_set(self, name, /):
        """
        True when the flag, or any other name sharing its value, was set.
        """
        if (entry := self._formal.get(name)) is None:
            return False
        return any(other.value is entry.value for other in self._actual.values())

    def value(self, name, /):
        if (entry := self._formal.get(name)) is None:
            return self._unknown(name)
        return entry.value.get()

    def set(self, name, text, /):
        """
        set a flag by name as if it had been given on the command line.
        """
        if (entry := self._formal.get(name)) is None:
            return self._unknown(name)
        try:
            entry.value.set(text)
        except ValueError as error:
            return self.trigger(InvalidValueError(
                "invalid value %s for flag %s: %s" % (quote(text), _dashed(name), getattr(error, "cause", None) or error),
                flag=name,
                input=text,
                cause=getattr(error, "cause", None) or str(error),
                docs=getdoc(FaultCode.INVALID_VALUE)
            ))
        self._actual[name] = entry

    def _unknown(self, name, /):
        suggestions = difflib.get_close_matches(name, self._formal.keys(), 5)
        try:
            hint = "did you mean %s?" % _dashed(suggestions[0])
        except IndexError:
            hint = None
        return self.trigger(UnknownFlagError(
            "flag provided but not defined: %s" % _dashed(name),
            flag=name,
            suggestions=suggestions,
            hint=hint,
            docs=getdoc(FaultCode.UNKNOWN_FLAG)
        ))

    def _cluster(self, name, /):
        # "-abc" → ["a", "b", "c"] when every letter is a registered boolean switch
        if not self.short_option_handling or len(name) < 2:
            return None
        for letter in name:
            entry = self._formal.get(letter)
            if entry is None or not getattr(entry.value, "is_bool_flag", False):
                return None
        return list(name)

    def _parse_one(self):
        token = self.args[0]
        if len(token) < 2 or token[0] != "-":
            return False
        dashes = 2 if token[1] == "-" else 1
        if dashes == 2 and len(token) == 2:
            del self.args[0]
            return False

        name = token[dashes:]
        if not name or name[0] in "-=":
            return self.trigger(FlagSyntaxError(
                "bad flag syntax: %s" % token,
                token=token,
                docs=getdoc(FaultCode.BAD_FLAG_SYNTAX)
            ))
        del self.args[0]

        name, separator, text = name.partition("=")
        inline = bool(separator)

        if name not in self._formal:
            if dashes == 1 and not inline and (letters := self._cluster(name)):
                for letter in letters:
                    self.set(letter, "true")
                return True
            return self._unknown(name)

        entry = self._formal[name]
        if getattr(entry.value, "is_bool_flag", False):
            self.set(name, text if inline else "true")
            return True

        if not inline:
            if not self.args:
                return self.trigger(FlagValueRequiredError(
                    "flag needs an argument: %s" % _dashed(name),
                    flag=name,
                    docs=getdoc(FaultCode.FLAG_VALUE_REQUIRED)
                ))
            text = self.args.pop(0)
        self.set(name, text)
        return True

    def parse(self, arguments, /):
        """
        parse flags from a token list (without the program name).

        returns the positional arguments left over, also kept in `args`.
        """
        if isinstance(arguments, str):
            raise TypeError("parse() argument must be a list of strings, not a string")
        self.parsed = True
        self.args = list(arguments)
        while self.args:
            if not self._parse_one():
                break
        return list(self.args)


__all__ = (
    "Entry",
    "FlagSet",
)
