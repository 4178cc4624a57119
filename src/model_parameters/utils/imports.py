"""Loading user-supplied transformer tables.

Transformers cannot be written in YAML, so the CLI loads them from Python
code given as ``"module.path:NAME"`` or ``"./path/to/file.py:NAME"``. The
named object must be a mapping of parameter id to callable.
"""

from __future__ import annotations
from contextlib import contextmanager
from importlib import import_module, util
from pathlib import Path
import os
import sys
import types
from typing import Any, Callable, Dict, Mapping, Optional


@contextmanager
def _prepend_sys_path(path: str):
    """Temporarily put ``path`` first on sys.path."""
    p = str(Path(path).resolve())
    added = p not in sys.path
    if added:
        sys.path.insert(0, p)
    try:
        yield
    finally:
        if added and p in sys.path:
            sys.path.remove(p)


def _import_from_file(pyfile: str) -> types.ModuleType:
    py = Path(pyfile).resolve()
    if not py.exists():
        raise ModuleNotFoundError(f"No such file: {py}")
    spec = util.spec_from_file_location(py.stem, py)
    if spec is None or spec.loader is None:
        raise ModuleNotFoundError(f"Could not load module from {py}")
    mod = util.module_from_spec(spec)
    spec.loader.exec_module(mod)  # type: ignore[attr-defined]
    return mod


def load_symbol(qualified: str, project_root: Optional[str] = None) -> Any:
    """Load ``NAME`` from ``"module.path:NAME"`` or ``"file.py:NAME"``.

    Module paths are imported with ``project_root`` (default: cwd) on
    sys.path, so transformer modules next to a config file just work.

    Raises:
        ValueError: If ``qualified`` has no ``:NAME`` part
        ModuleNotFoundError: If the module or file cannot be imported
        AttributeError: If the module has no such attribute
    """
    module_part, sep, symbol = qualified.partition(":")
    if not sep or not module_part or not symbol:
        raise ValueError(f"Expected 'module_or_file:NAME' format, got: {qualified}")

    if module_part.endswith(".py") or "/" in module_part or "\\" in module_part:
        mod = _import_from_file(module_part)
    else:
        root = Path(project_root or os.getcwd()).resolve()
        with _prepend_sys_path(str(root)):
            mod = import_module(module_part)

    if not hasattr(mod, symbol):
        raise AttributeError(f"Module {module_part} has no attribute '{symbol}'")
    return getattr(mod, symbol)


def load_transformers(qualified: str, project_root: Optional[str] = None) -> Dict[str, Callable]:
    """Load a ``{parameter id: transformer}`` mapping.

    Raises:
        TypeError: If the object is not a mapping of callables
    """
    table = load_symbol(qualified, project_root)
    if not isinstance(table, Mapping):
        raise TypeError(f"{qualified} must be a mapping of parameter id to callable, got {type(table).__name__}")
    not_callable = sorted(str(k) for k, v in table.items() if not callable(v))
    if not_callable:
        raise TypeError(f"Transformers in {qualified} are not callable: {not_callable}")
    return {str(k): v for k, v in table.items()}
