"""
Formatter registry as seen from the command line.

The formatters themselves live in the inspection engine; this module only
knows their keys (for help and for the --format/--out plan) plus the pieces
--auto-gen-config refers to.
"""
from types import MappingProxyType

from .utils import abbreviate

DEFAULT_FORMATTER = "progress"

# Written by --auto-gen-config, relative to the working directory.
AUTO_GENERATED_FILE = ".kuma_todo.yml"

# key -> label shown in help (the key itself when no label is needed)
BUILTIN_FORMATTERS_FOR_KEYS = MappingProxyType({
    "progress": "progress (default)",
    "simple": "simple",
    "clang": "clang",
    "disabled": "disabled cops via inline comments",
    "fuubar": "fuubar",
    "emacs": "emacs",
    "json": "json",
    "html": "html",
    "files": "files",
    "offenses": "offenses",
})


class DisabledConfigFormatter:
    """
    Marker for the formatter that writes a configuration disabling every cop
    with offenses. Used as the formatter of the second --auto-gen-config entry.
    """
    key = "disabled-config"


def describe():
    """
    Help lines advertising the builtin formatter keys.

    Each key is shown with its shortest unique prefix in brackets, e.g.
    "  [fu]ubar", followed by a final line for custom formatters.
    """
    prefixes = abbreviate(BUILTIN_FORMATTERS_FOR_KEYS)
    lines = []
    for key, label in BUILTIN_FORMATTERS_FOR_KEYS.items():
        prefix = prefixes[key]
        lines.append("  [%s]%s" % (prefix, label[len(prefix):]))
    lines.append("  custom formatter class name")
    return lines


__all__ = (
    "DEFAULT_FORMATTER",
    "AUTO_GENERATED_FILE",
    "BUILTIN_FORMATTERS_FOR_KEYS",
    "DisabledConfigFormatter",
    "describe",
)
