"""
Plugin loading for --require.

A plugin is either a Python file (loaded from its path) or an importable
module name. Loading runs the plugin's top-level code once per process, which
is where plugins register cops (see kuma.cop.registry).
"""
import importlib
import importlib.util
import os.path
import sys


def _modname(path):
    stem = os.path.splitext(os.path.basename(path))[0]
    return "_kuma_plugin_%s_%x" % ("".join(c if c.isalnum() else "_" for c in stem), abs(hash(path)))


def require(feature, /):
    """
    Load a plugin and return its module.

    - "path/to/plugin.py" or any existing file: executed as a fresh module.
    - anything else: imported with importlib.import_module (e.g., "kuma_rails").

    Loading the same plugin twice returns the cached module.

    Raises
    - FileNotFoundError: a ".py" path that does not exist.
    - ImportError: the module cannot be imported.
    """
    if not isinstance(feature, str) or not feature.strip():
        raise ValueError("require() argument must be a non-empty string")

    if not (feature.endswith(".py") or os.path.isfile(feature)):
        return importlib.import_module(feature)

    path = os.path.abspath(feature)
    if not os.path.isfile(path):
        raise FileNotFoundError("cannot load such file -- %s" % feature)

    if (name := _modname(path)) in sys.modules:
        return sys.modules[name]

    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ImportError("cannot load such file -- %s" % feature, path=path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        del sys.modules[name]
        raise
    return module


__all__ = (
    "require",
)
