"""Public API for model-parameters.

This module provides the complete public API: parameter variants and their
construction, the unit registry, signature dispatch and YAML loading.
"""

# Parameters
from .parameters import (
    AbstractParameter,
    ParameterBase,
    Parameter,
    ParameterContainer,
    ParameterOptions,
    PerturbedParameter,
    ParameterBroadcaster,
    PARAMETER_SIGNATURES,
    build_parameter_signatures,
    identity,
    parameter,
)

# Units
from .units import (
    Conversion,
    UnitRegistry,
    default_registry,
    register,
    to_si,
    from_si,
    convert,
    get_to_si_converter,
    get_from_si_converter,
)

# Dispatch
from .dispatch import SignatureRegistry

# Configuration loading
from .config import (
    name_id_desc,
    param_from_dict,
    install_transformers,
    load_yaml_config,
    update_from_config,
)

# Errors
from .errors import (
    ParameterNotFoundError,
    UnitNotFoundError,
    AmbiguousSignatureError,
    SignatureRegistrationError,
    MissingFieldError,
)

# Random source
from .rng import get_rng, seed

from .constants import BROADCAST_SIZE_ID

# Version
try:
    from importlib.metadata import version
    __version__ = version("model-parameters")
except Exception:
    __version__ = "0.1.0"

# Public API Export List
__all__ = [
    # Parameters
    "AbstractParameter",
    "ParameterBase",
    "Parameter",
    "ParameterContainer",
    "ParameterOptions",
    "PerturbedParameter",
    "ParameterBroadcaster",
    "PARAMETER_SIGNATURES",
    "build_parameter_signatures",
    "identity",
    "parameter",

    # Units
    "Conversion",
    "UnitRegistry",
    "default_registry",
    "register",
    "to_si",
    "from_si",
    "convert",
    "get_to_si_converter",
    "get_from_si_converter",

    # Dispatch
    "SignatureRegistry",

    # Configuration
    "name_id_desc",
    "param_from_dict",
    "install_transformers",
    "load_yaml_config",
    "update_from_config",

    # Errors
    "ParameterNotFoundError",
    "UnitNotFoundError",
    "AmbiguousSignatureError",
    "SignatureRegistrationError",
    "MissingFieldError",

    # Random source
    "get_rng",
    "seed",

    # Constants
    "BROADCAST_SIZE_ID",

    # Version
    "__version__",
]
