"""Parameter model for model-parameters.

This module provides the five parameter variants, their shared metadata and
the ``parameter`` construction entry point.
"""

from .base import (
    ParameterBase,
    delegates_metadata,
    identity,
)
from .types import (
    AbstractParameter,
    Parameter,
    ParameterContainer,
    ParameterOptions,
    PerturbedParameter,
    ParameterBroadcaster,
    as_dict,
)
from .factory import (
    PARAMETER_SIGNATURES,
    build,
    build_parameter_signatures,
    parameter,
)

__all__ = [
    # Base
    "ParameterBase",
    "delegates_metadata",
    "identity",
    # Variants
    "AbstractParameter",
    "Parameter",
    "ParameterContainer",
    "ParameterOptions",
    "PerturbedParameter",
    "ParameterBroadcaster",
    "as_dict",
    # Construction
    "PARAMETER_SIGNATURES",
    "build",
    "build_parameter_signatures",
    "parameter",
]
