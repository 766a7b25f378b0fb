"""
Kuma faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  (errors and warnings). Codes are grouped by domain to keep copy consistent
  and make logs/searches predictable.
- OptionException / OptionWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Integration
- The parser raises faults (non-shell) so callers can catch and inspect them.
- The command-line shim re-triggers them in shell mode, where they are rendered
  via rich and terminate the process with status 1.
- Warnings are printed in shell mode and routed to warnings.warn otherwise.
"""
import inspect
import sys
import warnings
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
    canonical fault codes used across the cli (stable identifiers).

    grouping (by high-level domain)
    - switches (1111x)
      • UNKNOWN_SWITCH, FLAG_ASSIGNMENT, AMBIGUOUS_SWITCH, MISSING_ARGUMENT, STANDALONE_SWITCH
    - option sets (1112x)
      • INCOMPATIBLE_OPTIONS
    - delegated errors (11131)
      • DELEGATED_ERROR
    - deprecations and legacy switches (1211x)
      • DEPRECATED_ARGUMENT, DROPPED_ARGUMENT, AMBIGUOUS_COP_NAME
    """
    # --- switch errors (111xx) ---
    UNKNOWN_SWITCH              = 11112
    FLAG_ASSIGNMENT             = 11113
    AMBIGUOUS_SWITCH            = 11114
    MISSING_ARGUMENT            = 11117
    STANDALONE_SWITCH           = 11116

    # --- option set errors (112xx) ---
    INCOMPATIBLE_OPTIONS        = 11121

    # --- delegated errors (113xx) ---
    DELEGATED_ERROR             = 11131

    # --- warnings (12xxx) ---
    DEPRECATED_ARGUMENT         = 12112
    DROPPED_ARGUMENT            = 12113
    AMBIGUOUS_COP_NAME          = 12114

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette):
    """
    Build the rich renderable shared by errors and warnings.

    layout
    - header: "[ <prog> — <code> | <Title> ]"
    - body:   message, then " → hint" when a hint is present
    - fancy:  the same content inside a Panel titled with the header
    """
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", False)
    fancy = options.get("fancy", False)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    prog = text(getattr(main, "__prog__", "kuma"), "prog-name")
    code = options.get("code")
    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "-", "code"),
        " | ",
        text(str(options.get("title", type(fault).__name__)).title(), "title"),
        " ]"
    )
    body = [text(fault.message, "message")]
    if hint := options.get("hint"):
        body.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if fancy:
        return Panel(Group(*body), title=header, title_align="left")
    return Group(header, *body)


class OptionException(Exception):
    """
    Base of every catchable option-parsing error.

    `message` is the one-line description; `options` is a read-only mapping of
    context (title, code, hint, input, ...) that renderers and callers may inspect.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "title": "bold #FF4DA6",
            "message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            raise self
        console.print(self, soft_wrap=True)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replacement = type(self)(self.message, **{**self.options, **overrides})
        replacement.__cause__ = self.__cause__
        return replacement


class UnknownSwitchError(OptionException): ...
class FlagAssignmentError(OptionException): ...
class AmbiguousSwitchError(OptionException): ...
class MissingArgumentError(OptionException): ...
class IncompatibleOptionsError(OptionException): ...
class DelegatedOptionError(OptionException): ...


class OptionWarning(Warning):
    """
    Base of every non-fatal diagnostic (deprecated or dropped switches, ...).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "title": "bold #FFC2E0",
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self, soft_wrap=True)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DeprecatedArgumentWarning(OptionWarning): ...
class DroppedArgumentWarning(OptionWarning): ...
class StandaloneSwitchWarning(OptionWarning): ...
class AmbiguousCopNameWarning(OptionWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are
      raised and warnings go through warnings.warn.
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
    are FaultCode instances and values are short documentation strings.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "OptionException",
    "UnknownSwitchError",
    "FlagAssignmentError",
    "AmbiguousSwitchError",
    "MissingArgumentError",
    "IncompatibleOptionsError",
    "DelegatedOptionError",
    "OptionWarning",
    "DeprecatedArgumentWarning",
    "DroppedArgumentWarning",
    "StandaloneSwitchWarning",
    "AmbiguousCopNameWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
