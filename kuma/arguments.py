r"""
Kuma switch specifications.

Overview
- Specs
  • Option: named, value-bearing switch with one or more aliases (e.g., -c/--config FILE).
    Its argument is either required (nargs=1) or optional (nargs="?").
  • Flag: named, presence-only switch (no payload), e.g., -d/--debug.

- Factory
  • define(*tokens, descr=...): build a spec from optparse-style definition tokens,
    the form used by the options table:
        define("-c", "--config FILE")               → Option, required FILE
        define("--show-cops [COP1,COP2,...]")       → Option, optional argument
        define("-F", "--fail-fast")                 → Flag

Metadata (sanitized on construction)
- names: shell-style switch names, unique, short aliases are single letters.
- key: options key; derived from the long name when omitted (see utils.keyify).
- descr: help text, a string or a sequence of lines; stored as a tuple of lines.
- metavar (Option only): label rendered beside the long name in help.
- hidden: suppressed from help.
- standalone: the switch must be the only argument on the command line; the
  parser warns and exits with status 1 otherwise.

Validation highlights
- Names must match r"--?[^\W\d_](-?[^\W_]+)*" (one leading hyphen: a single letter).
- Every spec needs at least one long name, since the options key derives from it.
"""
import re
from collections.abc import Iterable

from rich.text import Text

from .utils import *


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize metadata shared by every switch.

    - names: required; validated, de-duplicated and kept in declaration order.
    - key: Unset (derived from the first long name) or a non-empty identifier.
    - descr: string or iterable of strings, normalized into a tuple of lines.
    """
    names = []
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif not re.fullmatch(r"--[^\W\d_](-?[^\W_]+)*|-[^\W\d_]", name):
            raise ValueError(f"{cls.__typename__} names must be valid shell-style option names, got {name!r}")
        elif name in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        names.append(name)

    if not any(name.startswith("--") for name in names):
        raise TypeError(f"{cls.__typename__} must specify a long name (e.g., '--name')")
    metadata["names"] = tuple(names)

    if not isinstance(key := metadata["key"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'key' must be a string")
    elif isinstance(key, str) and not key.isidentifier():
        raise ValueError(f"{cls.__typename__} 'key' must be an identifier")
    metadata["key"] = coalesce(key, keyify(names))

    descr = metadata["descr"]
    if isinstance(descr, str | Text):
        descr = (descr,)
    elif not isinstance(descr, Iterable):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string or an iterable of strings")
    lines = tuple(map(str, descr))
    if not all(line.strip() for line in lines):
        raise ValueError(f"{cls.__typename__} 'descr' lines cannot be empty")
    metadata["descr"] = lines


class Switch:
    """
    Common base of named switches; provides representation and name helpers.
    """
    __typename__ = "switch"
    __introspectable__ = ()

    names = mirror("names")
    key = mirror("key")
    descr = mirror("descr")
    hidden = mirror("hidden")
    standalone = mirror("standalone")

    def __init__(self, metadata, /):
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def shorts(self):
        return tuple(name for name in self._names if not name.startswith("--"))

    @property
    def longs(self):
        return tuple(name for name in self._names if name.startswith("--"))

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "%s(%s)" % (type(self).__typename__, ", ".join("%s=%r" % pair for pair in self.__rich_repr__()))


class Option(Switch):
    """
    Named, value-bearing switch specification.

    Arity
    - nargs=1: the argument is required; it comes from "--name=value", an attached
      short value ("-xvalue") or the next token.
    - nargs="?": the argument is optional; it comes from the inline forms or from
      the next token unless that token looks like a switch ("-x", "--name").
      The handler receives None when it is omitted.
    """
    __typename__ = "option"
    __introspectable__ = ("names", "key", "metavar", "nargs", "descr", "hidden", "standalone")

    metavar = mirror("metavar")
    nargs = mirror("nargs")

    def __init__(
            self,
            *names,
            metavar=Unset,
            nargs=1,
            key=Unset,
            descr=(),
            hidden=False,
            standalone=False
    ):
        metadata = {
            "names": names,
            "metavar": metavar,
            "nargs": nargs,
            "key": key,
            "descr": descr,
            "hidden": bool(hidden),
            "standalone": bool(standalone),
        }
        _sanitize_metadata(type(self), metadata)

        if nargs not in (1, "?"):
            raise ValueError(f"{self.__typename__} 'nargs' must be 1 or '?'")
        if not isinstance(metavar, str | Unset):
            raise TypeError(f"{self.__typename__} 'metavar' must be a string")
        elif isinstance(metavar, str) and not (metavar := metavar.strip()):
            raise ValueError(f"{self.__typename__} 'metavar' cannot be empty")
        metadata["metavar"] = coalesce(metavar, metadata["key"].upper())

        super().__init__(metadata)

    @property
    def optional(self):
        return self._nargs == "?"

    @property
    def signature(self):
        """
        Long form as rendered in help: "--config FILE" or "--show-cops [LIST]".
        """
        metavar = "[%s]" % self._metavar if self.optional else self._metavar
        return "%s %s" % (", ".join(self.longs), metavar)


class Flag(Switch):
    """
    Named, presence-only switch specification.
    """
    __typename__ = "flag"
    __introspectable__ = ("names", "key", "descr", "hidden", "standalone")

    def __init__(
            self,
            *names,
            key=Unset,
            descr=(),
            hidden=False,
            standalone=False
    ):
        metadata = {
            "names": names,
            "key": key,
            "descr": descr,
            "hidden": bool(hidden),
            "standalone": bool(standalone),
        }
        _sanitize_metadata(type(self), metadata)
        super().__init__(metadata)

    @property
    def optional(self):
        return False

    @property
    def signature(self):
        return ", ".join(self.longs)


def define(*tokens, **options):
    """
    Build a switch spec from optparse-style definition tokens.

    Each token is a switch name, optionally followed by its argument label:
    "NAME" makes the argument required, "[NAME]" makes it optional. Tokens
    without any argument label build a Flag.

    Examples
    - define("-f", "--format FORMATTER")         → Option(names=('-f', '--format'), nargs=1)
    - define("--show-cops [COP1,COP2,...]")      → Option(nargs='?')
    - define("-d", "--debug", descr="...")       → Flag
    """
    names = []
    metavar = Unset
    nargs = 1
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("define() tokens must be strings")
        name, _, label = token.strip().partition(" ")
        names.append(name)
        if not (label := label.strip()):
            continue
        if metavar is not Unset:
            raise ValueError("define() accepts a single argument label, got %r" % token)
        if match := re.fullmatch(r"\[(.+)\]", label):
            metavar, nargs = match[1], "?"
        else:
            metavar = label

    if metavar is Unset:
        return Flag(*names, **options)
    return Option(*names, metavar=metavar, nargs=nargs, **options)


__all__ = (
    "Switch",
    "Option",
    "Flag",
    "define",
)
