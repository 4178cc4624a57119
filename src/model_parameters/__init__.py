"""model-parameters: named, unit-aware, perturbable model parameters.

This package provides parameter trees for simulation and engineering tools:
single values with units, containers, mutually exclusive options, randomly
perturbed values and broadcast batches of samples, plus a unit conversion
registry and a YAML loader.
"""

# Export the public API
from .api import *  # noqa: F403, F401
from .api import __all__, __version__  # noqa: F401
