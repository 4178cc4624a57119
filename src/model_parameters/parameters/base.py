"""Metadata shared by every parameter variant.

Each variant owns metadata by composition: a leaf holds a ``ParameterBase``
directly, composite variants hold the object they wrap and forward metadata
to it through ``delegates_metadata``. Changing the name of a perturbed
parameter therefore changes the name of the leaf it wraps.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional


def identity(x: Any) -> Any:
    """Return ``x`` unchanged."""
    return x


@dataclass
class ParameterBase:
    """Identification and transformer of a parameter.

    Attributes:
        id: Identifier, unique among siblings; validated on every assignment
        name: Display name, defaults to ``id``
        description: Free-form description
        transformer: Maps the stored value to the usable value
    """
    id: str = "id"
    name: Optional[str] = None
    description: str = ""
    transformer: Callable = identity

    def __post_init__(self):
        if self.name is None:
            self.name = self.id

    def __setattr__(self, key: str, value: Any) -> None:
        if key == "id" and (not isinstance(value, str) or not value):
            raise ValueError(f"Parameter id must be a non-empty string, got {value!r}")
        super().__setattr__(key, value)


METADATA_FIELDS = ("id", "name", "description", "transformer")


def _forwarding_property(attr: str, field_name: str) -> property:
    def getter(self):
        return getattr(getattr(self, attr), field_name)

    def setter(self, value):
        setattr(getattr(self, attr), field_name, value)

    getter.__doc__ = f"Parameter {field_name} (stored on ``{attr}``)."
    return property(getter, setter)


def delegates_metadata(attr: str):
    """Class decorator forwarding the metadata properties to ``self.<attr>``.

    Example:
        @delegates_metadata("base")
        class MyParameter:
            def __init__(self, base):
                self.base = base
    """
    def decorator(cls):
        for field_name in METADATA_FIELDS:
            setattr(cls, field_name, _forwarding_property(attr, field_name))
        return cls
    return decorator
