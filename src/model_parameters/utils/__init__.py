"""Utility helpers for model-parameters."""

from .imports import load_symbol, load_transformers
from .records import flatten, to_python
from .text import default_output_path, slugify

__all__ = [
    "load_symbol",
    "load_transformers",
    "flatten",
    "to_python",
    "default_output_path",
    "slugify",
]
