"""Turning transform results into flat, serializable records."""

from typing import Any, Dict, Mapping

import numpy as np

from ..constants import PATH_SEP


def to_python(value: Any) -> Any:
    """Convert numpy scalars and arrays (also nested) to plain Python objects."""
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, Mapping):
        return {str(k): to_python(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_python(v) for v in value]
    return value


def flatten(value: Any, prefix: str = "") -> Dict[str, Any]:
    """Flatten nested mappings into ``{"a.b": leaf}`` columns.

    Lists and tuples (e.g. a nested broadcaster's records) are flattened
    by position into ``prefix.0``, ``prefix.1``, ... Any other value becomes a
    single column named ``prefix`` (or ``"value"`` at the top level).

    Example:
        >>> flatten({"gas": {"T": 303.15, "p": 1e5}, "n": 2})
        {'gas.T': 303.15, 'gas.p': 100000.0, 'n': 2}
    """
    if isinstance(value, (list, tuple)):
        value = {str(i): item for i, item in enumerate(value)}
    elif not isinstance(value, Mapping):
        return {prefix or "value": to_python(value)}
    flat: Dict[str, Any] = {}
    for key, item in value.items():
        name = f"{prefix}{PATH_SEP}{key}" if prefix else str(key)
        flat.update(flatten(item, name))
    return flat
