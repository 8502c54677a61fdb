"""
Pennant help rendering.

render(flag) produces the conventional one-line description of a flag:

    --name value, -n value<TAB>usage (default: X) [$ENV1, $ENV2]

- names: "--" for long names, "-" for one-letter names, in declaration order.
- placeholder: first `backticked` word of the usage (backticks stripped from
  the displayed usage), else "value"; boolean switches get none.
- default: default_text when given; otherwise the declared default, following
  per-kind display rules (see default_text_of).
- env hint: "$NAME" on POSIX, "%NAME%" on Windows, whether set or not.

render() is a pure function of the flag definition (and of the platform).
"""
import sys

from .convert import Kind, stringify
from .utils import Unset, coalesce, quote


def unquote_usage(usage, /):
    """
    split the first `placeholder` out of a usage string.

    >>> unquote_usage("Load configuration from `FILE`")
    ('FILE', 'Load configuration from FILE')
    """
    if (start := usage.find("`")) != -1 and (end := usage.find("`", start + 1)) != -1:
        name = usage[start + 1:end]
        return name, usage[:start] + name + usage[end + 1:]
    return "", usage


def prefixed_names(names, placeholder, /):
    parts = []
    for name in names:
        part = ("-" if len(name) == 1 else "--") + name
        if placeholder:
            part += " " + placeholder
        parts.append(part)
    return ", ".join(parts)


def env_hint(env_vars, platform=Unset, /):
    if not env_vars:
        return ""
    if coalesce(platform, sys.platform).startswith("win"):
        return " [%s]" % ", ".join("%" + name + "%" for name in env_vars)
    return " [%s]" % ", ".join("$" + name for name in env_vars)


def _element_text(kind, value, /):
    return quote(value) if kind is Kind.STRING else stringify(kind, value)


def default_text_of(flag, /):
    """
    text shown after "default:", or "" when nothing is shown.

    - default_text, when non-empty, verbatim.
    - string/path: quoted, only when non-empty.
    - bool, integers, floats, durations: always, zero included.
    - time and generic: when not None (generic through str()).
    - slices: when at least one element renders non-empty; strings quoted,
      elements joined with ", ".
    """
    if flag.default_text:
        return flag.default_text

    kind, value = flag.kind, flag.value
    if flag.slice:
        if not any(stringify(kind, element) for element in value):
            return ""
        return ", ".join(_element_text(kind, element) for element in value)

    match kind:
        case Kind.STRING:
            return quote(value) if value else ""
        case Kind.TIME | Kind.GENERIC:
            return "" if value is None else stringify(kind, value)
        case _:
            return stringify(kind, value)


def render(flag, /, *, prefixer=Unset, platform=Unset):
    """
    render the help line of a flag definition.

    parameters
    - flag: definition exposing names, usage, kind, slice, value,
      default_text, env_vars and takes_value.
    - prefixer: optional callable(names, placeholder) -> str replacing the
      name segment.
    - platform: sys.platform-like string selecting the env hint syntax.
    """
    placeholder, usage = unquote_usage(flag.usage)
    if not flag.takes_value:
        placeholder = ""
    elif not placeholder:
        placeholder = "value"

    if default := default_text_of(flag):
        usage += " (default: %s)" % default

    names = coalesce(prefixer, prefixed_names)(flag.names, placeholder)
    return "%s\t%s%s" % (names, usage.strip(), env_hint(flag.env_vars, platform))


__all__ = (
    "render",
    "unquote_usage",
    "prefixed_names",
    "env_hint",
    "default_text_of",
)
