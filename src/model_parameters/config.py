"""Building parameter trees from YAML configuration.

A configuration record is a mapping with ``name`` and/or ``id``, an optional
``description`` and the keys of one variant:

.. code-block:: yaml

    id: idealgas
    name: Ideal gas
    children:
      - {id: temperature, value: 30.0, units: °C}
      - {id: pressure, value: 2.0, units: bar, perturbation: 0.05}
      - id: model
        selection: ideal
        options:
          - {id: ideal, value: 1.0}
          - {id: vdw, value: 0.9}

The variant is picked from the keys present, using the same signature
dispatch as ``parameter``:

- ``value``: ``Parameter`` (``units`` optional)
- ``value`` + ``perturbation``: ``PerturbedParameter``
- ``children``: ``ParameterContainer``
- ``children`` + ``size``: ``ParameterBroadcaster``
- ``options``: ``ParameterOptions`` (``selection`` optional, first option by default)

YAML cannot hold functions, so transformers are supplied separately as a
mapping of parameter id to callable and installed after the tree is built.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

import yaml

from .constants import NO_UNITS
from .dispatch import SignatureRegistry
from .errors import MissingFieldError
from .parameters import (
    AbstractParameter,
    Parameter,
    ParameterBroadcaster,
    ParameterContainer,
    ParameterOptions,
    PerturbedParameter,
)

logger = logging.getLogger(__name__)


def name_id_desc(record: Mapping[str, Any]) -> Tuple[str, str, str]:
    """Extract ``(name, id, description)`` from a record.

    A missing ``name`` is copied from ``id`` and vice versa.

    Raises:
        MissingFieldError: If both ``name`` and ``id`` are missing
    """
    name = record.get("name")
    pid = record.get("id")
    if name is None and pid is None:
        raise MissingFieldError(f"Either name or id must be provided; got keys {sorted(record)}")
    if name is None:
        name = pid
    elif pid is None:
        pid = name
    return str(name), str(pid), str(record.get("description", ""))


def _metadata(record: Mapping[str, Any]) -> Dict[str, Any]:
    name, pid, description = name_id_desc(record)
    return {"name": name, "id": pid, "description": description}


def _records(record: Mapping[str, Any], key: str) -> List[Mapping[str, Any]]:
    items = record[key]
    if not isinstance(items, list) or not all(isinstance(item, Mapping) for item in items):
        raise ValueError(f"'{key}' of {record.get('id', record.get('name'))!r} must be a list of mappings")
    return items


def _no_variant(record: Mapping[str, Any]) -> AbstractParameter:
    _, pid, _ = name_id_desc(record)
    raise MissingFieldError(
        f"Parameter {pid!r} needs one of 'value', 'children' or 'options'; got keys {sorted(record)}"
    )


def build_config_signatures() -> SignatureRegistry:
    """Create the registry mapping record keys to parameter builders."""
    registry = SignatureRegistry(default=_no_variant)

    def children(record, key):
        return [param_from_dict(item, signatures=registry) for item in _records(record, key)]

    @registry.register(["value"])
    def leaf(record):
        return Parameter(
            value=record["value"],
            units=str(record.get("units", NO_UNITS)),
            **_metadata(record),
        )

    @registry.register(["value", "perturbation"], extends=True)
    def perturbed(record):
        return PerturbedParameter(leaf(record), float(record["perturbation"]))

    @registry.register(["children"])
    def container(record):
        return ParameterContainer(children=children(record, "children"), **_metadata(record))

    @registry.register(["children", "size"], extends=True)
    def broadcaster(record):
        return ParameterBroadcaster(
            children=children(record, "children"),
            size=record["size"],
            **_metadata(record),
        )

    @registry.register(["options"])
    def options(record):
        selection = record.get("selection")
        return ParameterOptions(
            children=children(record, "options"),
            selection=None if selection is None else str(selection),
            **_metadata(record),
        )

    return registry


CONFIG_SIGNATURES: SignatureRegistry = build_config_signatures()


def install_transformers(p: AbstractParameter, transformers: Mapping[str, Callable]) -> AbstractParameter:
    """Set the transformer of every parameter whose id is in ``transformers``.

    Returns:
        ``p``, for chaining
    """
    used = set()

    def visit(node):
        if node.id in transformers:
            node.transformer = transformers[node.id]
            used.add(node.id)
        return True

    p.traverse(visit)
    unused = sorted(set(transformers) - used)
    if unused:
        logger.warning(f"Transformers for unknown parameters ignored: {unused}")
    return p


def param_from_dict(
    record: Mapping[str, Any],
    transformers: Optional[Mapping[str, Callable]] = None,
    signatures: Optional[SignatureRegistry] = None,
) -> AbstractParameter:
    """Build a parameter tree from a parsed configuration record.

    Args:
        record: Parsed mapping, typically from ``yaml.safe_load``
        transformers: Optional mapping of parameter id to transformer
        signatures: Registry to dispatch with, ``CONFIG_SIGNATURES`` by default

    Raises:
        MissingFieldError: If a record has neither name nor id, or no variant keys
        AmbiguousSignatureError: If a record mixes keys of several variants
    """
    if not isinstance(record, Mapping):
        raise ValueError(f"Parameter record must be a mapping, got {type(record).__name__}")
    registry = CONFIG_SIGNATURES if signatures is None else signatures
    p = registry.dispatch(record)
    if transformers:
        install_transformers(p, transformers)
    return p


def read_yaml(path: Union[str, Path]) -> Any:
    """Parse a YAML file with ``yaml.safe_load``."""
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_yaml_config(
    path: Union[str, Path],
    transformers: Optional[Mapping[str, Callable]] = None,
) -> AbstractParameter:
    """Build a parameter tree from a YAML file.

    Args:
        path: YAML file holding one top-level parameter record
        transformers: Optional mapping of parameter id to transformer

    Raises:
        FileNotFoundError: If the file does not exist
        yaml.YAMLError: If the YAML is malformed
    """
    logger.info(f"Loading parameters from {path}")
    return param_from_dict(read_yaml(path), transformers)


def update_from_config(p: AbstractParameter, path: Union[str, Path]) -> AbstractParameter:
    """Apply raw values from a YAML file to an existing tree.

    The file holds what ``p.set_value`` accepts, e.g. a nested mapping of
    child ids to values for containers. Unknown ids are skipped with a
    warning.

    Returns:
        ``p``, for chaining
    """
    logger.info(f"Updating {p.id!r} from {path}")
    values = read_yaml(path)
    if values is None:
        return p
    p.set_value(values)
    return p
