"""
Kuma utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the arguments, parser and options layers.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr); list
    fields are returned as copies.

- keyify(tokens)
  • Derive the options key from optparse-style definition tokens
    (["-c", "--config FILE"] → "config").

- abbreviate(words)
  • Shortest unique prefix of every word, used to advertise formatter keys in help.

Usage guidance
- Prefer Unset for API defaults when None is a meaningful user value; materialize with coalesce().
- Use mirror() to expose internal state safely as read-only properties.
"""
import builtins
import functools
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable and singleton per process.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
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

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are preserved as-is; only Unset is replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    - Function form: rename(callable, name) -> callable
    - Decorator form: rename(name) -> decorator
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
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Recursively copy lists so callers cannot mutate backing state.

    Anything else (strings, tuples, booleans) is returned as-is.
    """
    if isinstance(object, list):
        return list(map(_immortalize, object))
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute "_{name}".
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


def keyify(tokens, /):
    """
    Derive the options key from optparse-style definition tokens.

    The first token starting with "--" is taken, its prefix stripped, any
    " ARGNAME" suffix removed and hyphens turned into underscores:

    - keyify(["-c", "--config FILE"])          -> "config"
    - keyify(["--show-cops [COP1,COP2,...]"])  -> "show_cops"
    - keyify(["-n", "--no-color"])             -> "no_color"

    Raises
    - ValueError when no long token is present.
    """
    for token in tokens:
        if isinstance(token, str) and token.startswith("--"):
            return token[2:].split(" ", 1)[0].replace("-", "_")
    raise ValueError("keyify() requires a long option token (e.g., '--name')")


def abbreviate(words, /):
    """
    Map each word to its shortest prefix that no other word shares.

    Words that are a prefix of another word map to themselves.

    Example
    - abbreviate(["files", "fuubar", "json"]) -> {"files": "fi", "fuubar": "fu", "json": "j"}
    """
    words = list(words)
    prefixes = {}
    for word in words:
        others = [other for other in words if other != word]
        for size in range(1, len(word) + 1):
            if not any(other.startswith(word[:size]) for other in others):
                prefixes[word] = word[:size]
                break
        else:
            prefixes[word] = word
    return prefixes


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value but you still
need to distinguish “no input” from “explicitly passed None”.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "keyify",
    "abbreviate",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
