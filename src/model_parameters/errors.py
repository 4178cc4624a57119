"""Exception types raised by model-parameters.

Lookups that fail subclass ``KeyError`` so callers can treat them like
missing mapping keys; configuration problems subclass ``ValueError``.
"""


class ParameterNotFoundError(KeyError):
    """A child id is not present in a container, options or broadcaster."""


class UnitNotFoundError(KeyError):
    """A unit name was never registered in the unit registry."""


class AmbiguousSignatureError(ValueError):
    """More than one equally specific signature matches a call."""


class SignatureRegistrationError(ValueError):
    """A signature cannot be registered, or no builder is available."""


class MissingFieldError(ValueError):
    """A configuration record lacks a required field."""
