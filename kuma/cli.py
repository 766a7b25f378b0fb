"""
Command-line entry point.

main() parses the command line, performs the exiting actions (version, cop
listing) and otherwise hands the options over to an inspector: a callable
taking (options, paths) and returning the exit status. The inspection engine
is not part of this package; the default inspector pretty-prints what it
would have received.
"""
import platform
import sys
from importlib.metadata import PackageNotFoundError, version as distribution_version

from rich.console import Console
from rich.pretty import pprint
from rich.text import Text

from . import __version__
from .cop import registry
from .faults import OptionException, trigger
from .options import Options
from .utils import Unset, coalesce


def _rich_version():
    try:
        return distribution_version("rich")
    except PackageNotFoundError:
        return "unknown"


def _versioner(*, verbose=False):
    console = Console()
    if not verbose:
        return console.print(Text(__version__), soft_wrap=True)
    console.print(Text("%s (using rich %s, running %s %s %s)" % (
        __version__,
        _rich_version(),
        platform.python_implementation(),
        platform.python_version(),
        sys.platform,
    )), soft_wrap=True)


def _show_cops(names, *, colorful=False):
    """
    Print the registered cops, or only the named ones, with their descriptions.
    """
    console = Console()
    selected = [name for name in registry if not names or name in names or name.rsplit("/", 1)[-1] in names]
    for name in selected:
        line = Text(name, style="bold" if colorful else "")
        if descr := registry.describe(name):
            line.append(": ").append(descr)
        console.print(line, soft_wrap=True)


def _preview(options, paths):
    pprint({"options": options, "paths": paths}, console=Console(), expand_all=True)
    return 0


def main(argv=Unset, /, *, inspector=Unset):
    """
    Run kuma with `argv` (defaults to sys.argv[1:]) and return the exit status.

    Parse errors are rendered to stderr and terminate with status 1.
    """
    argv = list(coalesce(argv, sys.argv[1:]))
    inspector = coalesce(inspector, _preview)

    try:
        options, paths = Options().parse(argv)
    except OptionException as fault:
        trigger(fault, shell=True, colorful=Console(stderr=True).is_terminal)
        raise  # trigger exits in shell mode

    colorful = options["color"] and Console().is_terminal

    if options.get("debug"):
        pprint(options, console=Console(stderr=True))

    if options.get("version"):
        _versioner()
        return 0
    if options.get("verbose_version"):
        _versioner(verbose=True)
        return 0
    if "show_cops" in options:
        _show_cops(options["show_cops"], colorful=colorful)
        return 0

    return inspector(options, paths)


__all__ = (
    "main",
)
