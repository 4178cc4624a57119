"""Unit conversion registry.

Maps unit names to a pair of functions converting values to and from the
corresponding SI unit. Two lookup styles are offered on purpose:

- ``to_si``/``from_si`` are strict and raise ``UnitNotFoundError`` for an
  unregistered unit.
- ``get_to_si_converter``/``get_from_si_converter`` are lenient and return a
  caller-supplied default (identity unless told otherwise), which is what
  parameter transformers usually want.

A module-level registry pre-populated with the standard conversions backs
the module functions. Registration is not synchronized: finish registering
before reading from several threads.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Union

from .errors import UnitNotFoundError
from .parameters.base import identity

logger = logging.getLogger(__name__)

Converter = Callable[[Any], Any]


@dataclass(frozen=True)
class Conversion:
    """Forward and backward conversion between a unit and its SI unit.

    Attributes:
        to_si: Converts a value in the unit to SI
        from_si: Converts an SI value to the unit
    """
    to_si: Converter
    from_si: Converter


class UnitRegistry:
    """Table of unit name to ``Conversion``."""

    def __init__(self):
        self._conversions: Dict[str, Conversion] = {}

    @classmethod
    def standard(cls) -> "UnitRegistry":
        """Create a registry holding the standard conversions."""
        registry = cls()
        register_standard_units(registry)
        return registry

    def register(self, names: Union[str, Iterable[str]], to_si: Converter, from_si: Converter) -> None:
        """Register a conversion under one or several aliases.

        Re-registering a name replaces its previous conversion.

        Args:
            names: Unit name or iterable of aliases sharing the conversion
            to_si: Function converting from the unit to SI
            from_si: Function converting from SI to the unit
        """
        if isinstance(names, str):
            names = [names]
        conversion = Conversion(to_si, from_si)
        for name in names:
            if name in self._conversions:
                logger.debug(f"Overwriting conversion for unit '{name}'")
            self._conversions[name] = conversion

    def _lookup(self, unit: str) -> Conversion:
        try:
            return self._conversions[unit]
        except KeyError:
            raise UnitNotFoundError(f"Unknown unit: {unit!r}") from None

    def to_si(self, value: Any, unit: str) -> Any:
        """Convert ``value`` expressed in ``unit`` to SI.

        Raises:
            UnitNotFoundError: If ``unit`` is not registered
        """
        return self._lookup(unit).to_si(value)

    def from_si(self, value: Any, unit: str) -> Any:
        """Convert an SI ``value`` to ``unit``.

        Raises:
            UnitNotFoundError: If ``unit`` is not registered
        """
        return self._lookup(unit).from_si(value)

    def convert(self, value: Any, from_unit: str, to_unit: str) -> Any:
        """Convert ``value`` between two registered units through SI."""
        return self.from_si(self.to_si(value, from_unit), to_unit)

    def get_to_si_converter(self, unit: str, default: Converter = identity) -> Converter:
        """Return the to-SI function of ``unit``, or ``default`` if unknown."""
        conversion = self._conversions.get(unit)
        return default if conversion is None else conversion.to_si

    def get_from_si_converter(self, unit: str, default: Converter = identity) -> Converter:
        """Return the from-SI function of ``unit``, or ``default`` if unknown."""
        conversion = self._conversions.get(unit)
        return default if conversion is None else conversion.from_si

    def units(self) -> List[str]:
        """Registered unit names in registration order."""
        return list(self._conversions)

    def copy(self) -> "UnitRegistry":
        """Independent registry with the same conversions."""
        other = UnitRegistry()
        other._conversions = dict(self._conversions)
        return other

    def __contains__(self, unit: str) -> bool:
        return unit in self._conversions

    def __len__(self) -> int:
        return len(self._conversions)


def register_standard_units(registry: UnitRegistry) -> UnitRegistry:
    """Install length, mass, time, velocity, diffusivity, area, volume and
    temperature conversions into ``registry``."""
    # Length
    registry.register("m", identity, identity)
    registry.register("cm", lambda x: x / 100, lambda x: x * 100)
    registry.register("mm", lambda x: x / 1000, lambda x: x * 1000)
    registry.register(["um", "μm"], lambda x: x / 1e6, lambda x: x * 1e6)
    registry.register("km", lambda x: x * 1000, lambda x: x / 1000)
    registry.register("nm", lambda x: x / 1e9, lambda x: x * 1e9)

    # Mass
    registry.register("kg", identity, identity)
    registry.register("g", lambda x: x / 1000, lambda x: x * 1000)
    registry.register(["t", "tonne"], lambda x: x * 1000, lambda x: x / 1000)

    # Time
    registry.register(["s", "sec", "second", "seconds"], identity, identity)
    registry.register(["h", "hour", "hours", "hr", "hrs"], lambda x: x * 3600, lambda x: x / 3600)
    registry.register(["min", "minute", "minutes"], lambda x: x * 60, lambda x: x / 60)
    registry.register(["day", "d", "days"], lambda x: x * 86400, lambda x: x / 86400)

    # Velocity
    registry.register("m/s", identity, identity)
    registry.register(["km/h", "kmph"], lambda x: x * 10 / 36, lambda x: x * 36 / 10)
    registry.register(
        ["L/m2.h", "L/(m2.h)", "L/(m^2 h)", "L/(m^2.h)"],
        lambda x: x / 1000 / 3600,
        lambda x: x * 1000 * 3600,
    )

    # Diffusivity
    registry.register(["m2/s", "m^2/s"], identity, identity)
    registry.register(["cm2/s", "cm^2/s"], lambda x: x / 10000, lambda x: x * 10000)

    # Area
    registry.register(["m2", "m^2"], identity, identity)
    registry.register(["cm2", "cm^2"], lambda x: x / 10000, lambda x: x * 10000)

    # Volume
    registry.register(["m3", "m^3"], identity, identity)
    registry.register(["L", "l"], lambda x: x / 1000, lambda x: x * 1000)
    registry.register(["ml", "mL", "cm3", "cm^3"], lambda x: x / 1e6, lambda x: x * 1e6)

    # Temperature is an offset, not a scale
    registry.register("K", identity, identity)
    registry.register(["°C", "C"], lambda x: x + 273.15, lambda x: x - 273.15)

    return registry


default_registry: UnitRegistry = UnitRegistry.standard()


def register(names: Union[str, Iterable[str]], to_si: Converter, from_si: Converter) -> None:
    """Register a conversion in the default registry."""
    default_registry.register(names, to_si, from_si)


def to_si(value: Any, unit: str) -> Any:
    """Convert ``value`` to SI using the default registry (strict)."""
    return default_registry.to_si(value, unit)


def from_si(value: Any, unit: str) -> Any:
    """Convert an SI ``value`` to ``unit`` using the default registry (strict)."""
    return default_registry.from_si(value, unit)


def convert(value: Any, from_unit: str, to_unit: str) -> Any:
    """Convert between two units of the default registry."""
    return default_registry.convert(value, from_unit, to_unit)


def get_to_si_converter(unit: str, default: Converter = identity) -> Converter:
    """Lenient to-SI lookup in the default registry."""
    return default_registry.get_to_si_converter(unit, default)


def get_from_si_converter(unit: str, default: Converter = identity) -> Converter:
    """Lenient from-SI lookup in the default registry."""
    return default_registry.get_from_si_converter(unit, default)
