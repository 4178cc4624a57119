"""Single construction entry point for parameters.

``parameter(**kwargs)`` picks the variant from the argument names present:

=============================  ========================
Arguments                      Variant
=============================  ========================
``value``                      ``Parameter``
``value``, ``perturbation``    ``PerturbedParameter``
``children``                   ``ParameterContainer``
``children``, ``selection``    ``ParameterOptions``
``children``, ``size``         ``ParameterBroadcaster``
=============================  ========================

Anything else (metadata only) builds a ``Parameter``.
"""

from typing import Any, Mapping, Optional

from ..dispatch import SignatureRegistry
from .types import (
    AbstractParameter,
    Parameter,
    ParameterBroadcaster,
    ParameterContainer,
    ParameterOptions,
    PerturbedParameter,
)


def build_parameter_signatures() -> SignatureRegistry:
    """Create the signature registry used by ``parameter``."""
    registry = SignatureRegistry(default=lambda args: Parameter(**args))
    registry.register(["value"], lambda args: Parameter(**args))
    registry.register(["value", "perturbation"], lambda args: PerturbedParameter(**args), extends=True)
    registry.register(["children"], lambda args: ParameterContainer(**args))
    registry.register(["children", "selection"], lambda args: ParameterOptions(**args), extends=True)
    registry.register(["children", "size"], lambda args: ParameterBroadcaster(**args), extends=True)
    return registry


PARAMETER_SIGNATURES: SignatureRegistry = build_parameter_signatures()


def parameter(signatures: Optional[SignatureRegistry] = None, **kwargs: Any) -> AbstractParameter:
    """Build a parameter of the variant matching the given argument names.

    Args:
        signatures: Registry to dispatch with, ``PARAMETER_SIGNATURES`` by default
        **kwargs: Variant arguments plus ``id``, ``name``, ``description``
            and ``transformer``

    Example:
        >>> mass = parameter(id="mass", value=300.0, units="g", perturbation=0.1)
        >>> type(mass).__name__
        'PerturbedParameter'
    """
    return build(kwargs, signatures)


def build(args: Mapping[str, Any], signatures: Optional[SignatureRegistry] = None) -> AbstractParameter:
    """``parameter`` taking the arguments as one mapping."""
    registry = PARAMETER_SIGNATURES if signatures is None else signatures
    return registry.dispatch(args)
