"""
Kuma command-line options.

Options.parse(args) turns command-line tokens into an options mapping and the
list of remaining (positional) arguments, in five steps:

1. legacy switches (-s/--silent) are dropped with a warning;
2. deprecated switches (-e/--emacs) are rewritten in place to "--format emacs";
3. every switch of the table below is registered on a fresh Parser;
4. the parser runs the handlers, which fill the options mapping;
5. at most one exiting option (version, verbose_version, show_cops) may remain.

Keys of the mapping are the long switch names with hyphens turned into
underscores ("--fail-level" → "fail_level"). Only switches actually given are
present, except "color" which is always there and defaults to True.

Example
    >>> options, paths = Options().parse(["-f", "json", "-o", "out.json", "lib"])
    >>> options["formatters"], paths
    ([['json', 'out.json']], ['lib'])
"""
from types import MappingProxyType

from .arguments import define
from .cop import qualified_cop_name
from .faults import *
from .formatters import AUTO_GENERATED_FILE, DEFAULT_FORMATTER, DisabledConfigFormatter, describe
from .parser import Parser
from .plugins import require
from .utils import Unset, keyify, rename


class OptionsHelp:
    """
    Help texts of the command-line switches, keyed by options key.
    """
    TEXT = MappingProxyType({
        "only":              "Run only the given cop(s).",
        "require":           "Require Python file.",
        "config":            "Specify configuration file.",
        "auto_gen_config":  ("Generate a configuration file acting as a",
                             "TODO list."),
        "force_exclusion":  ("Force excluding files specified in the",
                             "configuration `Exclude` even if they are",
                             "explicitly passed as arguments."),
        "format":           ("Choose an output formatter. This option",
                             "can be specified multiple times to enable",
                             "multiple formatters at the same time.",
                             *describe()),
        "out":              ("Write output to a file instead of STDOUT.",
                             "This option applies to the previously",
                             "specified --format, or the default format",
                             "if no format is specified."),
        "fail_level":        "Minimum severity for exit with error code.",
        "show_cops":        ("Shows the given cops, or all cops by",
                             "default, and their configurations for the",
                             "current directory."),
        "fail_fast":        ("Inspect files in order of modification",
                             "time and stop after the first file",
                             "containing offenses."),
        "debug":             "Display debug info.",
        "display_cop_names": "Display cop names in offense messages.",
        "rails":             "Run extra Rails cops.",
        "lint":              "Run only lint cops.",
        "auto_correct":      "Auto-correct offenses.",
        "no_color":          "Disable color output.",
        "version":           "Display version.",
        "verbose_version":   "Display verbose version.",
    })


BANNER = "Usage: kuma [options] [file1, file2, ...]"
EXITING_OPTIONS = ("version", "verbose_version", "show_cops")
DROPPED_OPTIONS = ("-s", "--silent")
DEPRECATED_OPTIONS = MappingProxyType({
    "-e": ("--format", "emacs"),
    "--emacs": ("--format", "emacs"),
})
REMOVAL_VERSION = "1.0.0"


class FormatterPlan:
    """
    Ordered list of formatter entries built from --format/--out.

    Each entry is a list: the formatter first, then the output paths attached
    to it. push() opens a new entry; attach() adds a path to the most recent
    entry, opening a default-formatter entry first when there is none.

        >>> plan = FormatterPlan()
        >>> plan.attach("x.txt")
        >>> plan.entries
        [['progress', 'x.txt']]
    """

    def __init__(self, entries=()):
        self.entries = [list(entry) for entry in entries]

    def push(self, formatter, /):
        self.entries.append([formatter])

    def attach(self, path, /):
        if not self.entries:
            self.push(DEFAULT_FORMATTER)
        self.entries[-1].append(path)

    def __iter__(self):
        return iter(self.entries)

    def __len__(self):
        return len(self.entries)

    def __repr__(self):
        return "FormatterPlan(%r)" % self.entries


class Options:
    """
    Command-line options of kuma.

    Parameters
    - qualifier: callable(name, origin) → qualified cop name, applied to --only entries.
    - loader: callable(feature) run for every --require.
    - shell: when True (default) warnings are printed to stderr; otherwise they
      go through warnings.warn.
    - colorful: colorize printed warnings.
    """

    def __init__(self, *, qualifier=qualified_cop_name, loader=require, shell=True, colorful=False):
        if not callable(qualifier):
            raise TypeError("options 'qualifier' must be callable")
        if not callable(loader):
            raise TypeError("options 'loader' must be callable")
        self.qualifier = qualifier
        self.loader = loader
        self.shell = bool(shell)
        self.colorful = bool(colorful)

        self._options = {}
        self._plan = Unset

    def trigger(self, fault, /, **options):
        trigger(fault, **({"shell": self.shell, "colorful": self.colorful} | options))

    def parse(self, args, /):
        """
        Parse `args` into (options, remaining).

        Raises
        - IncompatibleOptionsError: more than one exiting option was given.
        - UnknownSwitchError, AmbiguousSwitchError, MissingArgumentError,
          FlagAssignmentError: bad syntax.
        - DelegatedOptionError: --require or cop qualification failed.

        Exits
        - 0 after printing help for -h/--help.
        - 1 after a warning when --auto-gen-config is combined with other arguments.
        """
        args = self._ignore_dropped_options(list(args))
        args = self._convert_deprecated_options(args)

        self._options = {}
        self._plan = Unset

        remaining = self._build().parse(args)

        if len(incompatible := [key for key in self._options if key in EXITING_OPTIONS]) > 1:
            raise IncompatibleOptionsError(
                "incompatible cli options: %r" % incompatible,
                title="incompatible options",
                code=FaultCode.INCOMPATIBLE_OPTIONS,
                input=tuple(incompatible),
                hint="pass only one of %s" % ", ".join("--" + key.replace("_", "-") for key in incompatible),
                docs=getdoc(FaultCode.INCOMPATIBLE_OPTIONS),
            )

        return self._options, remaining

    def summarize(self):
        """
        Help text, as printed by -h/--help.
        """
        self._options = {}
        self._plan = Unset
        return self._build().summarize()

    def _build(self):
        parser = Parser(BANNER, shell=self.shell, colorful=self.colorful)

        self._option(parser, "--only COP1,COP2,...", callback=self._only)

        self._add_configuration_options(parser)
        self._add_formatting_options(parser)

        self._option(parser, "-r", "--require FILE", callback=self.loader)
        self._option(parser, "--fail-level SEVERITY")

        self._add_flags_with_optional_args(parser)
        self._add_boolean_flags(parser)
        return parser

    def _add_configuration_options(self, parser):
        self._option(parser, "-c", "--config FILE")
        self._option(parser, "--auto-gen-config", standalone=True, callback=self._auto_gen_config)
        self._option(parser, "--force-exclusion")

    def _add_formatting_options(self, parser):
        self._option(parser, "-f", "--format FORMATTER", store=False, callback=lambda key: self._formatters().push(key))
        self._option(parser, "-o", "--out FILE", store=False, callback=lambda path: self._formatters().attach(path))

    def _add_flags_with_optional_args(self, parser):
        self._option(parser, "--show-cops [COP1,COP2,...]", callback=self._show_cops)

    def _add_boolean_flags(self, parser):
        self._option(parser, "-F", "--fail-fast")
        self._option(parser, "-d", "--debug")
        self._option(parser, "-D", "--display-cop-names")
        self._option(parser, "-R", "--rails")
        self._option(parser, "-l", "--lint")
        self._option(parser, "-a", "--auto-correct")

        self._options["color"] = True
        self._option(parser, "-n", "--no-color", store=False, callback=self._no_color)

        self._option(parser, "-v", "--version")
        self._option(parser, "-V", "--verbose-version")

    def _option(self, parser, *tokens, store=True, callback=Unset, **options):
        """
        Register a switch built from `tokens`, with its help text from OptionsHelp.

        The handler stores the parsed value under the switch's key (True for
        flags) unless `store` is False, then calls `callback` with the value.
        """
        key = keyify(tokens)
        argument = define(*tokens, descr=OptionsHelp.TEXT.get(key, ()), **options)

        @rename(key)
        def handler(value):
            if store:
                self._options[key] = value
            if callback is not Unset:
                callback(value)

        parser.on(argument, handler)

    def _formatters(self):
        if self._plan is Unset:
            self._plan = FormatterPlan()
            self._options["formatters"] = self._plan.entries
        return self._plan

    def _only(self, value):
        self._options["only"] = [self.qualifier(name, "--only option") for name in value.split(",") if name]

    def _show_cops(self, value):
        self._options["show_cops"] = [] if value is None else [name for name in value.split(",") if name]

    def _no_color(self, value):
        self._options["color"] = False

    def _auto_gen_config(self, value):
        self._plan = FormatterPlan([[DEFAULT_FORMATTER], [DisabledConfigFormatter, AUTO_GENERATED_FILE]])
        self._options["formatters"] = self._plan.entries

    def _ignore_dropped_options(self, args):
        # -s/--silent do not raise errors since external tools still pass them.
        kept = [arg for arg in args if arg not in DROPPED_OPTIONS]
        if len(kept) == len(args):
            return args

        self.trigger(DroppedArgumentWarning(
            "-s/--silent options is dropped. `emacs` and `files` formatters no longer display summary.",
            title="dropped option",
            code=FaultCode.DROPPED_ARGUMENT,
            input=tuple(arg for arg in args if arg in DROPPED_OPTIONS),
            hint="remove -s/--silent from the command line",
            docs=getdoc(FaultCode.DROPPED_ARGUMENT),
        ))
        return kept

    def _convert_deprecated_options(self, args):
        converted = []
        for arg in args:
            if arg not in DEPRECATED_OPTIONS:
                converted.append(arg)
                continue
            replacement = DEPRECATED_OPTIONS[arg]
            self._deprecate("%s option" % arg, " ".join(replacement), REMOVAL_VERSION, input=arg)
            converted.extend(replacement)
        return converted

    def _deprecate(self, subject, alternative=Unset, version=Unset, **options):
        message = "%s is deprecated" % subject
        if version is not Unset:
            message += " and will be removed in Kuma %s" % version
        message += "."
        if alternative is not Unset:
            message += " Please use %s instead." % alternative

        self.trigger(DeprecatedArgumentWarning(
            message,
            title="deprecated option",
            code=FaultCode.DEPRECATED_ARGUMENT,
            hint="use %s" % alternative if alternative is not Unset else None,
            docs=getdoc(FaultCode.DEPRECATED_ARGUMENT),
            **options,
        ))


__all__ = (
    "OptionsHelp",
    "FormatterPlan",
    "Options",
    "BANNER",
    "EXITING_OPTIONS",
)
