"""
Cop names as seen from the command line.

Cops are identified by qualified names, "Department/Name" (e.g., "Lint/Debugger").
Users may pass the bare "Name" on the command line; qualification maps it back
to the single registered cop carrying that name.

Plugins loaded through --require register their cops here:

    from kuma.cop import registry
    registry.register("Style/TrailingWhitespace", descr="Avoid trailing whitespace.")
"""
import re

from .faults import AmbiguousCopNameWarning, FaultCode, getdoc, trigger
from .utils import Unset, coalesce


class Registry:
    """
    Ordered collection of known cops (qualified name -> description).
    """

    def __init__(self):
        self._cops = {}

    def register(self, name, /, *, descr=Unset):
        """
        Add a cop. The name must be qualified ("Department/Name").
        """
        if not isinstance(name, str) or not re.fullmatch(r"\w+(/\w+)+", name):
            raise ValueError("cop names must be qualified as 'Department/Name', got %r" % (name,))
        self._cops[name] = coalesce(descr)
        return name

    def describe(self, name, /):
        return self._cops[name]

    def clear(self):
        self._cops.clear()

    def __contains__(self, name):
        return name in self._cops

    def __iter__(self):
        return iter(self._cops)

    def __len__(self):
        return len(self._cops)

    def qualify(self, name, origin, /, **options):
        """
        Return the qualified form of `name`.

        - Qualified names (containing "/") are returned unchanged.
        - A bare name matching exactly one registered cop is qualified.
        - A bare name matching several cops triggers AmbiguousCopNameWarning and
          is returned unchanged.
        - Unknown names are returned unchanged.

        `origin` names where the cop name came from (e.g., "--only option") and
        is used in the warning. Extra options are forwarded to trigger().
        """
        if "/" in name:
            return name

        candidates = [cop for cop in self._cops if cop.rsplit("/", 1)[-1] == name]
        if len(candidates) == 1:
            return candidates[0]
        if candidates:
            trigger(AmbiguousCopNameWarning(
                "ambiguous cop name %r used in %s needs department qualifier" % (name, origin),
                title="ambiguous cop name",
                code=FaultCode.AMBIGUOUS_COP_NAME,
                input=name,
                candidates=tuple(candidates),
                hint="did you mean %s?" % " or ".join(candidates),
                docs=getdoc(FaultCode.AMBIGUOUS_COP_NAME),
            ), **({"shell": True} | options))
        return name


registry = Registry()


def qualified_cop_name(name, origin, /):
    """
    Qualify `name` against the process-wide registry.
    """
    return registry.qualify(name, origin)


__all__ = (
    "Registry",
    "registry",
    "qualified_cop_name",
)
