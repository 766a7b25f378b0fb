"""
Kuma parsing engine: register switches, consume tokens, render help.

What this module provides
- Parser: a small, generic, optparse-compatible engine.
  • Registration: on(spec, callback) binds an Option/Flag to its handler, in order.
  • Parsing: parse(tokens) runs handlers in command-line order and returns the
    positional tokens that were not consumed (relative order preserved).
  • Help: summarize() renders a deterministic two-column usage text; help()
    prints it and terminates the process successfully.

Token grammar
- "--" ends switch processing (it is consumed; every later token is positional).
- "-" and any token that does not start with "-" are positional.
- Long switches: "--name" or "--name=value".
  • required argument: "=value" or the next token, whatever it looks like.
  • optional argument: "=value" or the next token unless it looks like a switch
    ("-x", "--name"); otherwise the handler receives None.
  • flags cannot take "=value".
- Short switches: "-x", clusters of flags ("-aD"), attached values ("-fjson"),
  or the next token (as for long switches).
- Long switches may be abbreviated to any unique prefix ("--auto-c").
- A standalone switch must be the only token; otherwise a warning is printed
  and the process exits with status 1.

Faults
- UnknownSwitchError, AmbiguousSwitchError, MissingArgumentError and
  FlagAssignmentError are raised with position-first messages and a hint.
- Any exception escaping a handler (other than option faults) is wrapped in
  DelegatedOptionError, chained to the original exception.
"""
import difflib
import functools
import sys
from collections import deque

from rich.console import Console
from rich.text import Text

from .arguments import Option, Flag, Switch
from .faults import *
from .utils import *


@functools.cache
def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


class Parser:
    """
    Generic switch parser.

    Parameters
    - banner: first line of the help text (defaults to "Usage: <prog> [options]").
    - prog: program name used in hints.
    - width: width of the switch column in help.
    - indent: left margin of every switch line in help.
    - shell, colorful: how warnings raised by the engine are surfaced (see faults.trigger).

    A hidden -h/--help flag is always registered; it prints the help
    text to stdout and exits with status 0 as soon as it is seen.
    """

    def __init__(self, banner=Unset, /, *, prog="kuma", width=32, indent=4, shell=True, colorful=False):
        if not isinstance(banner, str | Unset):
            raise TypeError("parser 'banner' must be a string")
        self.prog = prog
        self.banner = coalesce(banner, "Usage: %s [options]" % prog)
        self.width = int(width)
        self.indent = int(indent)
        self.shell = bool(shell)
        self.colorful = bool(colorful)

        self.switches = {}
        self.arguments = []
        self._callbacks = {}
        self._index = 0
        self._count = 0

        self.on(
            Flag("-h", "--help", descr="Show this message.", hidden=True),
            rename(lambda value: self.help(), "help"),
        )

    def on(self, argument, callback=Unset, /):
        """
        Register a switch spec and its handler.

        Usage
        - parser.on(Flag("-d", "--debug"), handler)
        - as a decorator:
            @parser.on(Option("-c", "--config FILE"))
            def on_config(path): ...

        Handlers receive one positional value: the argument string for options
        (None when an optional argument was omitted) and True for flags.

        Raises
        - TypeError: not a switch spec, or the handler is not callable.
        - ValueError: a name is already registered.
        """
        if not isinstance(argument, Switch):
            raise TypeError("on() argument must be an Option or a Flag")

        if callback is Unset:
            @rename("on")
            def wrapper(callback, /):
                self.on(argument, callback)
                return callback
            return wrapper

        if not callable(callback):
            raise TypeError("on() callback must be callable")

        for name in argument.names:
            if name in self.switches:
                raise ValueError(f"switch name {name!r} is already registered")

        self.switches.update(dict.fromkeys(argument.names, argument))
        self.arguments.append(argument)
        self._callbacks[argument] = callback
        return callback

    def _resolve(self, input):
        """
        look up a switch by name, suggesting near matches when it is unknown.
        """
        try:
            return self.switches[input]
        except KeyError:
            pass

        # long switches resolve from any unambiguous prefix
        if input.startswith("--") and len(input) > 2:
            candidates = list(dict.fromkeys(
                argument for name, argument in self.switches.items()
                if name.startswith(input) and name.startswith("--")
            ))
            if len(candidates) == 1:
                return candidates[0]
            if candidates:
                names = [argument.longs[0] for argument in candidates]
                raise AmbiguousSwitchError(
                    "ambiguous option or flag %r at %s position" % (input, _ordinal(self._index)),
                    title="ambiguous option or flag",
                    code=FaultCode.AMBIGUOUS_SWITCH,
                    input=input,
                    index=self._index,
                    candidates=tuple(names),
                    hint="did you mean %s?" % " or ".join(names),
                    docs=getdoc(FaultCode.AMBIGUOUS_SWITCH),
                )

        suggestions = difflib.get_close_matches(input, self.switches.keys(), 5)
        try:
            hint = "did you mean %r? you can also run '%s --help' to see all options" % (suggestions[0], self.prog)
        except IndexError:
            hint = "try '%s --help' to see all available options" % self.prog
        raise UnknownSwitchError(
            "unknown option or flag %r at %s position" % (input, _ordinal(self._index)),
            title="unknown option or flag",
            code=FaultCode.UNKNOWN_SWITCH,
            input=input,
            index=self._index,
            suggestions=suggestions,
            hint=hint,
            docs=getdoc(FaultCode.UNKNOWN_SWITCH),
        )

    def _missing(self, argument, input):
        return MissingArgumentError(
            "option %r at %s position requires a value" % (input, _ordinal(self._index)),
            title="missing argument",
            code=FaultCode.MISSING_ARGUMENT,
            input=input,
            index=self._index,
            argument=argument,
            hint="pass it after a space (for example: %s <%s>)" % (input, argument.metavar.lower()),
            docs=getdoc(FaultCode.MISSING_ARGUMENT),
        )

    def _value(self, argument, input, tokens):
        """
        take the argument of `argument` from the next token.

        a required argument takes it whatever it looks like; an optional one
        leaves switches ("-x", "--name") in place and yields None.
        """
        if argument.optional:
            if tokens and not (tokens[0].startswith("-") and tokens[0] != "-"):
                self._index += 1
                return tokens.popleft()
            return None
        if not tokens:
            raise self._missing(argument, input)
        self._index += 1
        return tokens.popleft()

    def _standalone(self, argument, input):
        name = argument.longs[0]
        trigger(StandaloneSwitchWarning(
            "%s can not be combined with any other arguments." % name,
            title="standalone option",
            code=FaultCode.STANDALONE_SWITCH,
            input=input,
            index=self._index,
            argument=argument,
            hint="run '%s %s' on its own" % (self.prog, name),
            docs=getdoc(FaultCode.STANDALONE_SWITCH),
        ), shell=self.shell, colorful=self.colorful)
        sys.exit(1)

    def _handle(self, argument, input, value):
        """
        run the bound handler and wrap unexpected failures.
        """
        if argument.standalone and self._count > 1:
            self._standalone(argument, input)

        try:
            self._callbacks[argument](value)
        except OptionException:
            raise
        except Exception as exception:
            kind = "option" if isinstance(argument, Option) else "flag"
            raise DelegatedOptionError(
                "something occurred in %s %r at %s position: %s" % (kind, input, _ordinal(self._index), exception),
                title="delegated %s error" % kind,
                code=FaultCode.DELEGATED_ERROR,
                input=input,
                index=self._index,
                argument=argument,
                exception=exception,
                hint="check the value given to %s" % input,
                docs=getdoc(FaultCode.DELEGATED_ERROR),
            ) from exception

    def _parse_long(self, token, tokens):
        input, assigned, value = token.partition("=")
        argument = self._resolve(input)

        if isinstance(argument, Flag):
            if assigned:
                raise FlagAssignmentError(
                    "flag %r at %s position cannot have an inline value" % (input, _ordinal(self._index)),
                    title="flag cannot take a value",
                    code=FaultCode.FLAG_ASSIGNMENT,
                    input=input,
                    index=self._index,
                    argument=argument,
                    hint="remove everything from '=' (for example: %s)" % input,
                    docs=getdoc(FaultCode.FLAG_ASSIGNMENT),
                )
            return self._handle(argument, input, True)

        if not assigned:
            value = self._value(argument, input, tokens)
        self._handle(argument, input, value)

    def _parse_short(self, token, tokens):
        cluster = token[1:]
        for offset, letter in enumerate(cluster):
            argument = self._resolve(input := "-" + letter)

            if isinstance(argument, Flag):
                self._handle(argument, input, True)
                continue

            # an option swallows the rest of the cluster as its value
            if not (value := cluster[offset + 1:]):
                value = self._value(argument, input, tokens)
            return self._handle(argument, input, value)

    def parse(self, tokens, /):
        """
        Consume switches from `tokens` and return the positional remainder.

        Handlers run immediately, in command-line order. The given sequence is
        not modified.
        """
        tokens = deque(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() tokens must be strings")

        remaining = []
        self._index = 0
        self._count = len(tokens)

        while tokens:
            token = tokens.popleft()
            self._index += 1

            if token == "--":
                remaining.extend(tokens)
                break
            if token.startswith("--"):
                self._parse_long(token, tokens)
            elif token.startswith("-") and token != "-":
                self._parse_short(token, tokens)
            else:
                remaining.append(token)

        return remaining

    def summarize(self):
        """
        Render the help text: banner, then every visible switch in registration order.

        Layout (per switch)
        - left column: indent + "-x, " (or four spaces) + long form, padded to `width`.
        - description: first line beside the left column, continuation lines
          aligned under it. A left column wider than `width` pushes the
          description to the following line.
        """
        lines = [self.banner]
        margin = " " * self.indent
        hanging = " " * (self.indent + self.width + 1)

        for argument in filter(lambda x: not x.hidden, self.arguments):
            shorts = ", ".join(argument.shorts)
            left = (shorts + ", " if shorts else " " * 4) + argument.signature
            descr = list(argument.descr)

            if not descr:
                lines.append(margin + left)
                continue

            if len(left) > self.width:
                lines.append(margin + left)
            else:
                lines.append(margin + left.ljust(self.width) + " " + descr.pop(0))
            lines.extend(hanging + line for line in descr)

        return "\n".join(lines)

    def help(self):
        """
        Print the help text to stdout and exit with status 0.
        """
        console = Console()
        console.print(Text(self.summarize()), soft_wrap=True, highlight=False)
        sys.exit(0)


__all__ = (
    "Parser",
)
