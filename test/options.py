"""
Options module behavioral tests (the kuma command line).

Scope
- Validate the options mapping produced for every switch family.
- Validate legacy handling (dropped -s/--silent, deprecated -e/--emacs).
- Validate exiting-option exclusivity and --auto-gen-config restrictions.
- Validate the help text, byte for byte.

Conventions
- Test method names follow CamelCase per project convention.
- Options are built with injected qualifier/loader so no cop registry or file
  system is involved.
- Warnings are printed (shell mode) and captured from stderr.
"""

from __future__ import annotations

import contextlib
import io
import unittest
from unittest import TestCase

from kuma import Options, FormatterPlan, DisabledConfigFormatter
from kuma.faults import (
    IncompatibleOptionsError,
    UnknownSwitchError,
    AmbiguousSwitchError,
    MissingArgumentError,
    FlagAssignmentError,
    DelegatedOptionError,
    DeprecatedArgumentWarning,
    DroppedArgumentWarning,
)

HELP = """\
Usage: kuma [options] [file1, file2, ...]
        --only COP1,COP2,...         Run only the given cop(s).
    -c, --config FILE                Specify configuration file.
        --auto-gen-config            Generate a configuration file acting as a
                                     TODO list.
        --force-exclusion            Force excluding files specified in the
                                     configuration `Exclude` even if they are
                                     explicitly passed as arguments.
    -f, --format FORMATTER           Choose an output formatter. This option
                                     can be specified multiple times to enable
                                     multiple formatters at the same time.
                                       [p]rogress (default)
                                       [s]imple
                                       [c]lang
                                       [d]isabled cops via inline comments
                                       [fu]ubar
                                       [e]macs
                                       [j]son
                                       [h]tml
                                       [fi]les
                                       [o]ffenses
                                       custom formatter class name
    -o, --out FILE                   Write output to a file instead of STDOUT.
                                     This option applies to the previously
                                     specified --format, or the default format
                                     if no format is specified.
    -r, --require FILE               Require Python file.
        --fail-level SEVERITY        Minimum severity for exit with error code.
        --show-cops [COP1,COP2,...]  Shows the given cops, or all cops by
                                     default, and their configurations for the
                                     current directory.
    -F, --fail-fast                  Inspect files in order of modification
                                     time and stop after the first file
                                     containing offenses.
    -d, --debug                      Display debug info.
    -D, --display-cop-names          Display cop names in offense messages.
    -R, --rails                      Run extra Rails cops.
    -l, --lint                       Run only lint cops.
    -a, --auto-correct               Auto-correct offenses.
    -n, --no-color                   Disable color output.
    -v, --version                    Display version.
    -V, --verbose-version            Display verbose version.
"""


class OptionsTestCase(TestCase):

    def setUp(self):
        self.qualified = []
        self.required = []
        self.options = Options(qualifier=self.qualify, loader=self.required.append)

    def qualify(self, name, origin):
        self.qualified.append((name, origin))
        return "Lint/" + name if "/" not in name else name

    def parse(self, *args):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            options, paths = self.options.parse(list(args))
        self.stderr = stderr.getvalue()
        return options, paths


class TestOptionsMapping(OptionsTestCase):

    def testNoArguments(self):
        self.assertEqual(self.parse(), ({"color": True}, []))

    def testPositionalsKeepOrder(self):
        options, paths = self.parse("lib", "-d", "spec", "-", "app.rb")
        self.assertEqual(paths, ["lib", "spec", "-", "app.rb"])
        self.assertEqual(options, {"color": True, "debug": True})

    def testBooleanFlags(self):
        options, _ = self.parse("-F", "-d", "-D", "-R", "-l", "-a")
        for key in ("fail_fast", "debug", "display_cop_names", "rails", "lint", "auto_correct"):
            self.assertIs(options[key], True)

    def testShortCluster(self):
        options, _ = self.parse("-aD")
        self.assertEqual(options, {"color": True, "auto_correct": True, "display_cop_names": True})

    def testNoColor(self):
        options, _ = self.parse("--no-color")
        self.assertEqual(options, {"color": False})

    def testValueOptions(self):
        options, _ = self.parse("-c", "conf.yml", "--fail-level", "warning", "--force-exclusion")
        self.assertEqual(options["config"], "conf.yml")
        self.assertEqual(options["fail_level"], "warning")
        self.assertIs(options["force_exclusion"], True)

    def testRequiredValueTakesNextTokenVerbatim(self):
        options, paths = self.parse("-c", "--debug", "lib")
        self.assertEqual(options["config"], "--debug")
        self.assertNotIn("debug", options)
        self.assertEqual(paths, ["lib"])

    def testUniqueLongPrefixes(self):
        options, _ = self.parse("--auto-c", "--disp", "--form=json", "--fail-l", "error")
        self.assertIs(options["auto_correct"], True)
        self.assertIs(options["display_cop_names"], True)
        self.assertEqual(options["formatters"], [["json"]])
        self.assertEqual(options["fail_level"], "error")

    def testTerminator(self):
        options, paths = self.parse("-d", "--", "-a", "lib")
        self.assertEqual(options, {"color": True, "debug": True})
        self.assertEqual(paths, ["-a", "lib"])

    def testOnlyIsQualified(self):
        options, _ = self.parse("--only", "Debugger,,Style/Tab")
        self.assertEqual(options["only"], ["Lint/Debugger", "Style/Tab"])
        self.assertEqual(self.qualified, [("Debugger", "--only option"), ("Style/Tab", "--only option")])

    def testShowCopsTakesSeparateArgument(self):
        options, paths = self.parse("--show-cops", "Lint/Debugger")
        self.assertEqual(options["show_cops"], ["Lint/Debugger"])
        self.assertEqual(paths, [])

    def testShowCopsWithoutArgument(self):
        for args in (["--show-cops"], ["--show-cops", "-d"], ["--show-cops", "--", "lib"]):
            with self.subTest(args=args):
                options, _ = self.parse(*args)
                self.assertEqual(options["show_cops"], [])

    def testShowCopsWithArgument(self):
        options, _ = self.parse("--show-cops=Lint/Debugger,Style/Tab,")
        self.assertEqual(options["show_cops"], ["Lint/Debugger", "Style/Tab"])

    def testRequireCallsLoader(self):
        options, _ = self.parse("-r", "first.py", "--require", "second")
        self.assertEqual(self.required, ["first.py", "second"])
        self.assertEqual(options["require"], "second")

    def testRequireFailureIsDelegated(self):
        def loader(feature):
            raise FileNotFoundError("cannot load such file -- %s" % feature)

        options = Options(qualifier=self.qualify, loader=loader)
        with self.assertRaises(DelegatedOptionError) as context:
            options.parse(["-r", "missing.py"])
        self.assertIsInstance(context.exception.__cause__, FileNotFoundError)

    def testParseDoesNotMutateArguments(self):
        args = ["-s", "-e", "lib"]
        with contextlib.redirect_stderr(io.StringIO()):
            self.options.parse(args)
        self.assertEqual(args, ["-s", "-e", "lib"])

    def testParseResetsBetweenCalls(self):
        first, _ = self.parse("-d", "-f", "json")
        second, _ = self.parse("-a")
        self.assertEqual(second, {"color": True, "auto_correct": True})
        self.assertEqual(first["formatters"], [["json"]])


class TestOptionsFormatters(OptionsTestCase):

    def testFormatAndOutAccumulate(self):
        options, _ = self.parse("-f", "simple", "--format", "json", "-o", "x.json")
        self.assertEqual(options["formatters"], [["simple"], ["json", "x.json"]])

    def testOutBeforeFormatUsesDefault(self):
        options, _ = self.parse("-o", "x.txt")
        self.assertEqual(options["formatters"], [["progress", "x.txt"]])

    def testSeveralOutputsForOneFormatter(self):
        options, _ = self.parse("-fjson", "-o", "a.json", "--out=b.json")
        self.assertEqual(options["formatters"], [["json", "a.json", "b.json"]])

    def testFormatAndOutKeysAreNotStored(self):
        options, _ = self.parse("-f", "json", "-o", "x.json")
        self.assertNotIn("format", options)
        self.assertNotIn("out", options)

    def testFormatterPlan(self):
        plan = FormatterPlan()
        plan.attach("x.txt")
        plan.push("json")
        plan.attach("y.json")
        self.assertEqual(list(plan), [["progress", "x.txt"], ["json", "y.json"]])
        self.assertEqual(len(plan), 2)


class TestOptionsLegacy(OptionsTestCase):

    def testDeprecatedEmacsIsConverted(self):
        converted, paths = self.parse("-e", "lib")
        self.assertIn(
            "-e option is deprecated and will be removed in Kuma 1.0.0. Please use --format emacs instead.",
            self.stderr,
        )
        self.assertEqual((converted, paths), self.parse("--format", "emacs", "lib"))
        self.assertEqual(converted["formatters"], [["emacs"]])

    def testDeprecatedLongEmacsIsConverted(self):
        options, _ = self.parse("--emacs")
        self.assertIn("--emacs option is deprecated", self.stderr)
        self.assertEqual(options["formatters"], [["emacs"]])

    def testDroppedSilentIsIgnored(self):
        options, paths = self.parse("-s", "lib", "--silent")
        self.assertEqual(options, {"color": True})
        self.assertEqual(paths, ["lib"])
        self.assertIn(
            "-s/--silent options is dropped. `emacs` and `files` formatters no longer display summary.",
            self.stderr,
        )

    def testWarningsOutsideShell(self):
        options = Options(qualifier=self.qualify, loader=self.required.append, shell=False)
        with self.assertWarns(DroppedArgumentWarning):
            options.parse(["-s"])
        with self.assertWarns(DeprecatedArgumentWarning):
            options.parse(["-e"])


class TestOptionsExclusivity(OptionsTestCase):

    def testSingleExitingOptionIsAccepted(self):
        for args in (["-v"], ["--verbose-version"], ["--show-cops"]):
            with self.subTest(args=args):
                self.parse(*args)

    def testIncompatibleExitingOptions(self):
        with self.assertRaises(IncompatibleOptionsError) as context:
            self.parse("--version", "--show-cops")
        self.assertEqual(context.exception.message, "incompatible cli options: ['version', 'show_cops']")
        self.assertEqual(context.exception.options["input"], ("version", "show_cops"))

    def testIncompatibleAllExitingOptions(self):
        with self.assertRaises(IncompatibleOptionsError) as context:
            self.parse("-V", "--show-cops=Lint/Debugger", "-v")
        self.assertEqual(
            context.exception.message,
            "incompatible cli options: ['verbose_version', 'show_cops', 'version']",
        )

    def testAutoGenConfigAlone(self):
        options, paths = self.parse("--auto-gen-config")
        self.assertEqual(options["formatters"], [["progress"], [DisabledConfigFormatter, ".kuma_todo.yml"]])
        self.assertIs(options["auto_gen_config"], True)
        self.assertEqual(paths, [])

    def testAutoGenConfigCombinedExits(self):
        for args in (["--auto-gen-config", "lib"], ["-d", "--auto-gen-config"]):
            stderr = io.StringIO()
            with self.subTest(args=args), contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit) as context:
                self.options.parse(args)
            self.assertEqual(context.exception.code, 1)
            self.assertIn("--auto-gen-config can not be combined with any other arguments.", stderr.getvalue())


class TestOptionsFaults(OptionsTestCase):

    def testUnknownSwitch(self):
        with self.assertRaises(UnknownSwitchError):
            self.parse("--colour")

    def testMissingArgument(self):
        for args in (["-c"], ["lib", "--fail-level"], ["--only"]):
            with self.subTest(args=args), self.assertRaises(MissingArgumentError):
                self.parse(*args)

    def testAmbiguousLongPrefix(self):
        for prefix in ("--auto", "--fail", "--f"):
            with self.subTest(prefix=prefix), self.assertRaises(AmbiguousSwitchError):
                self.parse(prefix)

    def testFlagAssignment(self):
        with self.assertRaises(FlagAssignmentError):
            self.parse("--debug=yes")


class TestOptionsHelp(OptionsTestCase):

    def testHelpPrintsAndExits(self):
        for args in (["-h"], ["--help"], ["lib", "-d", "--help", "--bogus"]):
            stdout = io.StringIO()
            with self.subTest(args=args), contextlib.redirect_stdout(stdout), self.assertRaises(SystemExit) as context:
                self.options.parse(args)
            self.assertEqual(context.exception.code, 0)
            self.assertEqual(stdout.getvalue(), HELP)

    def testSummarize(self):
        self.assertEqual(self.options.summarize() + "\n", HELP)

    def testHelpListsEveryFormatter(self):
        help = self.options.summarize()
        for line in ("[p]rogress (default)", "[s]imple", "[c]lang", "[d]isabled cops via inline comments",
                     "[fu]ubar", "[e]macs", "[j]son", "[h]tml", "[fi]les", "[o]ffenses",
                     "custom formatter class name"):
            self.assertIn(" " * 39 + line + "\n", help + "\n")


if __name__ == "__main__":
    unittest.main()
