"""
Pennant value sources: environment variables and files.

resolve(env_vars, file_paths) returns the first non-empty value found:
- environment variables first, in declaration order;
- then the contents of the first readable file, stripped of surrounding
  blanks, in declaration order.

A variable that is unset or empty, and a file that is missing, unreadable or
blank, are misses and never errors. Nothing found yields ("", False).
"""
import logging
import os

logger = logging.getLogger(__name__)


def _names(object, what, kinds=str, /):
    if isinstance(object, kinds):
        return (object,)
    try:
        names = tuple(object)
    except TypeError:
        raise TypeError("resolve() %s must be a string or an iterable of strings" % what) from None
    for name in names:
        if not isinstance(name, kinds):
            raise TypeError("resolve() %s must contain only strings" % what)
    return names


def lookup_env(env_vars, /):
    for name in _names(env_vars, "env_vars"):
        if value := os.environ.get(name, ""):
            logger.debug("resolved from environment variable %s", name)
            return value, True
        logger.debug("environment variable %s is unset or empty", name)
    return "", False


def read_file(file_paths, /):
    for path in _names(file_paths, "file_paths", str | os.PathLike):
        try:
            with open(path, encoding="utf-8") as stream:
                value = stream.read().strip()
        except (OSError, UnicodeDecodeError) as error:
            logger.debug("cannot read %s: %s", path, error)
            continue
        if value:
            logger.debug("resolved from file %s", path)
            return value, True
        logger.debug("file %s is empty", path)
    return "", False


def resolve(env_vars=(), file_paths=(), /):
    """
    first non-empty value of the given environment variables, then files.

    >>> resolve(["APP_UNSET_FOR_DOCTEST"])
    ('', False)
    """
    value, found = lookup_env(env_vars)
    if found:
        return value, found
    return read_file(file_paths)


__all__ = (
    "resolve",
    "lookup_env",
    "read_file",
)
