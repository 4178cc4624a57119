"""Shared random source for parameter perturbations.

Every ``PerturbedParameter`` draws from the generator returned by
``get_rng()``. Reproducibility is up to the caller: call ``seed()`` before
transforming a tree.
"""

from typing import Optional

import numpy as np

_rng: np.random.Generator = np.random.default_rng()


def get_rng() -> np.random.Generator:
    """Return the process-wide generator."""
    return _rng


def seed(value: Optional[int] = None) -> np.random.Generator:
    """Replace the process-wide generator with a freshly seeded one.

    Args:
        value: Seed passed to ``numpy.random.default_rng``; None draws fresh
            entropy from the OS.

    Returns:
        The new generator
    """
    global _rng
    _rng = np.random.default_rng(value)
    return _rng
