"""Project settings from ``pyproject.toml``.

The ``[tool.model-parameters]`` table supplies CLI defaults:

.. code-block:: toml

    [tool.model-parameters]
    transformers = "models.gas:TRANSFORMERS"
    seed = 42

Explicit command-line options always win.
"""

from pathlib import Path
from typing import Any, Dict, Optional
import tomllib

SECTION = "model-parameters"
KNOWN_KEYS = ("transformers", "seed")


def read_pyproject(root: Optional[Path] = None) -> Dict[str, Any]:
    """Read the ``[tool.model-parameters]`` section.

    Args:
        root: Directory holding pyproject.toml (default: cwd)

    Returns:
        The section, or an empty dict if the file or section is missing

    Raises:
        tomllib.TOMLDecodeError: If TOML is malformed
        ValueError: If the section holds unknown keys or badly typed values
    """
    pyproject_path = (root or Path.cwd()) / "pyproject.toml"
    if not pyproject_path.exists():
        return {}

    with open(pyproject_path, "rb") as f:
        data = tomllib.load(f)

    section = data.get("tool", {}).get(SECTION, {})
    unknown = sorted(set(section) - set(KNOWN_KEYS))
    if unknown:
        raise ValueError(f"Unknown keys in [tool.{SECTION}]: {unknown}. Available: {list(KNOWN_KEYS)}")
    seed = section.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise ValueError(f"[tool.{SECTION}] seed must be an integer, got {seed!r}")
    if not isinstance(section.get("transformers", ""), str):
        raise ValueError(f"[tool.{SECTION}] transformers must be a 'module:NAME' string")
    return section
