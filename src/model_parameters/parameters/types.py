"""Parameter variants.

Five variants share one capability surface (``AbstractParameter``):

- ``Parameter``: a single value with units
- ``ParameterContainer``: an ordered group of child parameters
- ``ParameterOptions``: a container of alternatives, one of them selected
- ``PerturbedParameter``: a ``Parameter`` whose transform is randomly
  perturbed by a relative fraction
- ``ParameterBroadcaster``: a container transformed ``n`` times into a list
  of independent samples

Composite variants wrap the object they build on instead of inheriting from
it: options and broadcasters wrap a ``ParameterContainer``, a perturbed
parameter wraps a ``Parameter``. Metadata is forwarded to the wrapped object.

``value()`` is the stored value; ``transform()`` applies the transformer and
is recomputed on every call, so perturbed parameters draw fresh randomness
each time.
"""

import logging
from numbers import Integral
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable

from ..constants import BROADCAST_SIZE_DESCRIPTION, BROADCAST_SIZE_ID, BROADCAST_SIZE_NAME, NO_UNITS
from ..errors import ParameterNotFoundError
from ..rng import get_rng
from .base import ParameterBase, delegates_metadata, identity

logger = logging.getLogger(__name__)

_MISSING = object()

Visitor = Callable[["AbstractParameter"], Any]


@runtime_checkable
class AbstractParameter(Protocol):
    """Operations every parameter variant supports."""

    id: str
    name: str
    description: str
    transformer: Callable

    def value(self) -> Any:
        """Stored (untransformed) value."""
        ...

    def set_value(self, new_value: Any) -> None:
        """Replace the stored value."""
        ...

    def transform(self) -> Any:
        """Usable value: the transformer applied to the value."""
        ...

    def traverse(self, visitor: Visitor) -> None:
        """Depth-first pre-order walk; children are visited only if
        ``visitor`` returns a truthy value for their parent."""
        ...

    def perturb(self, spec: Any) -> "AbstractParameter":
        """Attach perturbations; see the concrete variants."""
        ...


def as_dict(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Default container transformer: the child results as a plain dict."""
    return dict(values)


def _check_children(children: Sequence[Any], owner: str) -> List[AbstractParameter]:
    children = list(children)
    for child in children:
        if not isinstance(child, AbstractParameter):
            raise TypeError(f"Children of {owner!r} must be parameters, got {type(child).__name__}")
    ids = [child.id for child in children]
    if len(ids) != len(set(ids)):
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        raise ValueError(f"Duplicate parameter ids in {owner!r}: {duplicates}")
    return children


def _check_size(size: Any) -> int:
    # bool is an Integral subclass but never a valid size
    if isinstance(size, bool) or not isinstance(size, Integral):
        raise ValueError(f"Broadcast size must be an int, got {type(size).__name__}")
    if size < 0:
        raise ValueError(f"Broadcast size must be non-negative, got {size}")
    return int(size)


@delegates_metadata("base")
class Parameter:
    """Single value with units.

    Args:
        value: Stored value
        units: Units of measure, ``"-"`` for dimensionless
        id: Identifier, unique among siblings
        name: Display name, defaults to ``id``
        description: Free-form description
        transformer: Function of the value giving the usable value
    """

    def __init__(
        self,
        *,
        value: Any = 0,
        units: str = NO_UNITS,
        id: str = "id",
        name: Optional[str] = None,
        description: str = "",
        transformer: Callable = identity,
    ):
        self.base = ParameterBase(id, name, description, transformer)
        self._value = value
        self.units = units

    def value(self) -> Any:
        return self._value

    def set_value(self, new_value: Any) -> None:
        self._value = new_value

    @property
    def perturbation(self) -> float:
        """A bare parameter carries no perturbation."""
        return 0.0

    def transform(self) -> Any:
        return self.transformer(self._value)

    def traverse(self, visitor: Visitor) -> None:
        visitor(self)

    def perturb(self, perturbation: float) -> "PerturbedParameter":
        """Wrap this parameter in a new ``PerturbedParameter``.

        The parameter itself is left untouched; callers must store the
        returned object, e.g. ``container[p.id] = p.perturb(0.1)``.
        """
        return PerturbedParameter(self, perturbation)

    def __repr__(self) -> str:
        return f"Parameter(id={self.id!r}, value={self._value!r}, units={self.units!r})"


@delegates_metadata("base")
class ParameterContainer:
    """Ordered group of child parameters addressed by id.

    The transformer receives one mapping of child id to the child's
    transformed value, in child order, and defaults to ``as_dict``.

    Lookups return the live child: mutating it mutates the tree.
    """

    def __init__(
        self,
        *,
        children: Sequence[AbstractParameter] = (),
        id: str = "id",
        name: Optional[str] = None,
        description: str = "",
        transformer: Callable = as_dict,
    ):
        self.base = ParameterBase(id, name, description, transformer)
        self._children = _check_children(children, id)

    @property
    def children(self) -> Tuple[AbstractParameter, ...]:
        return tuple(self._children)

    def _index(self, key: str) -> Optional[int]:
        for i, child in enumerate(self._children):
            if child.id == key:
                return i
        return None

    def get(self, key: str, default: Any = _MISSING) -> Any:
        """Return the child with id ``key``.

        Raises:
            ParameterNotFoundError: If there is no such child and no default
        """
        i = self._index(key)
        if i is not None:
            return self._children[i]
        if default is _MISSING:
            raise ParameterNotFoundError(f"Parameter {key!r} not found in {self.id!r}. Available: {self.ids()}")
        return default

    def ids(self) -> List[str]:
        """Child ids in order."""
        return [child.id for child in self._children]

    def __getitem__(self, key: str) -> AbstractParameter:
        return self.get(key)

    def __setitem__(self, key: str, child: AbstractParameter) -> None:
        """Replace the child with id ``key``; its variant may change."""
        i = self._index(key)
        if i is None:
            raise ParameterNotFoundError(f"Parameter {key!r} not found in {self.id!r}. Available: {self.ids()}")
        _check_children([child], self.id)
        j = self._index(child.id)
        if j is not None and j != i:
            raise ValueError(f"Duplicate parameter ids in {self.id!r}: ['{child.id}']")
        self._children[i] = child

    def __contains__(self, key: str) -> bool:
        return self._index(key) is not None

    def __len__(self) -> int:
        return len(self._children)

    def _checked_children(self) -> List[AbstractParameter]:
        # children can be renamed after construction
        return _check_children(self._children, self.id)

    def value(self) -> Dict[str, Any]:
        return {child.id: child.value() for child in self._checked_children()}

    def set_value(self, new_value: Mapping[str, Any]) -> None:
        """Update children from a mapping of child id to new value.

        Children absent from the mapping keep their values. Ids that match no
        child are skipped with a warning.
        """
        for key, val in new_value.items():
            child = self.get(key, None)
            if child is None:
                logger.warning(f"Parameter {key!r} not found in {self.id!r}; value not set")
                continue
            child.set_value(val)

    def transform(self) -> Any:
        return self.transformer({child.id: child.transform() for child in self._checked_children()})

    def traverse(self, visitor: Visitor) -> None:
        if visitor(self):
            for child in list(self._children):
                child.traverse(visitor)

    def perturb(self, perturbations: Mapping[str, float]) -> "ParameterContainer":
        """Perturb children by id, replacing each child with its perturbed form.

        Ids that match no child are skipped with a warning; the remaining
        ids are still processed.

        Returns:
            This container
        """
        for key, fraction in perturbations.items():
            child = self.get(key, None)
            if child is None:
                logger.warning(f"Parameter {key!r} not found in {self.id!r}; perturbation skipped")
                continue
            self[key] = child.perturb(fraction)
        return self

    def __repr__(self) -> str:
        return f"ParameterContainer(id={self.id!r}, children={self.ids()})"


@delegates_metadata("base")
class ParameterOptions:
    """Mutually exclusive alternatives, exactly one of them selected.

    ``value()`` and ``transform()`` act on the selected child only; the
    transformer is applied to the selected child's transform and defaults to
    identity.

    Args:
        children: The alternatives
        selection: Id of the selected child, defaults to the first one

    Raises:
        ParameterNotFoundError: If ``selection`` names no child
    """

    def __init__(
        self,
        *,
        children: Sequence[AbstractParameter] = (),
        selection: Optional[str] = None,
        id: str = "id",
        name: Optional[str] = None,
        description: str = "",
        transformer: Callable = identity,
    ):
        self.base = ParameterContainer(
            children=children, id=id, name=name, description=description, transformer=transformer
        )
        if selection is None:
            if not len(self.base):
                raise ValueError(f"Options {id!r} need at least one child")
            selection = self.base.ids()[0]
        self._selected_index = 0
        self.selection = selection

    @property
    def selection(self) -> str:
        """Id of the selected child.

        The selection is held by position, so it follows the child through
        renames and replacements.
        """
        return self.base.children[self._selected_index].id

    @selection.setter
    def selection(self, key: str) -> None:
        i = self.base._index(key)
        if i is None:
            raise ParameterNotFoundError(
                f"Cannot select {key!r} in {self.id!r}. Available: {self.base.ids()}"
            )
        self._selected_index = i

    @property
    def selected(self) -> AbstractParameter:
        return self.base.children[self._selected_index]

    @property
    def children(self) -> Tuple[AbstractParameter, ...]:
        return self.base.children

    def get(self, key: str, default: Any = _MISSING) -> Any:
        return self.base.get(key, default)

    def __getitem__(self, key: str) -> AbstractParameter:
        return self.base[key]

    def __setitem__(self, key: str, child: AbstractParameter) -> None:
        self.base[key] = child

    def __contains__(self, key: str) -> bool:
        return key in self.base

    def __len__(self) -> int:
        return len(self.base)

    def value(self) -> Any:
        return self.selected.value()

    def set_value(self, new_value: Any) -> None:
        """Set the value of the selected child."""
        self.selected.set_value(new_value)

    def transform(self) -> Any:
        return self.transformer(self.selected.transform())

    def traverse(self, visitor: Visitor) -> None:
        if visitor(self):
            for child in self.base.children:
                child.traverse(visitor)

    def perturb(self, perturbations: Mapping[str, float]) -> "ParameterOptions":
        self.base.perturb(perturbations)
        return self

    def __repr__(self) -> str:
        return f"ParameterOptions(id={self.id!r}, selection={self.selection!r}, children={self.base.ids()})"


@delegates_metadata("parameter")
class PerturbedParameter:
    """Parameter whose transform is scaled by ``1 + perturbation * U``.

    ``U`` is drawn uniformly from [-1, 1] on every ``transform()`` call from
    the shared generator (see ``model_parameters.rng``). ``perturbation`` is
    a relative fraction expected in [0, 1]; it is not clamped.

    Either wrap an existing ``Parameter``::

        PerturbedParameter(mass, 0.1)

    or pass the leaf's keyword arguments::

        PerturbedParameter(id="mass", value=300.0, units="g", perturbation=0.1)
    """

    def __init__(self, parameter: Optional[Parameter] = None, perturbation: float = 0.0, **leaf_fields: Any):
        if parameter is None:
            parameter = Parameter(**leaf_fields)
        elif leaf_fields:
            raise TypeError(f"Unexpected arguments with a wrapped parameter: {sorted(leaf_fields)}")
        elif not isinstance(parameter, Parameter):
            raise TypeError(f"PerturbedParameter wraps a Parameter, got {type(parameter).__name__}")
        self.parameter = parameter
        self.perturbation = perturbation

    @property
    def perturbation(self) -> float:
        return self._perturbation

    @perturbation.setter
    def perturbation(self, fraction: float) -> None:
        self._perturbation = float(fraction)

    @property
    def units(self) -> str:
        return self.parameter.units

    @units.setter
    def units(self, units: str) -> None:
        self.parameter.units = units

    def value(self) -> Any:
        return self.parameter.value()

    def set_value(self, new_value: Any) -> None:
        self.parameter.set_value(new_value)

    def transform(self) -> Any:
        u = get_rng().uniform(-1.0, 1.0)
        return self.parameter.transform() * (1.0 + self._perturbation * u)

    def traverse(self, visitor: Visitor) -> None:
        if visitor(self):
            self.parameter.traverse(visitor)

    def perturb(self, perturbation: float) -> "PerturbedParameter":
        """Replace the perturbation fraction in place and return self."""
        self.perturbation = perturbation
        return self

    def __repr__(self) -> str:
        return (
            f"PerturbedParameter(id={self.id!r}, value={self.value()!r}, "
            f"units={self.units!r}, perturbation={self._perturbation!r})"
        )


@delegates_metadata("base")
class ParameterBroadcaster:
    """Container sampled ``broadcast_size`` times.

    ``transform()`` returns a list with one transform of the wrapped
    container per item, so perturbed descendants are drawn independently
    for every item. The size lives in its own ``Parameter`` addressed by
    ``size_id`` (``"broadcastsize"`` unless overridden).

    Raises:
        ValueError: If ``size`` is not a non-negative int
    """

    def __init__(
        self,
        *,
        children: Sequence[AbstractParameter] = (),
        size: int = 1,
        size_name: str = BROADCAST_SIZE_NAME,
        size_id: str = BROADCAST_SIZE_ID,
        size_desc: str = BROADCAST_SIZE_DESCRIPTION,
        id: str = "id",
        name: Optional[str] = None,
        description: str = "",
        transformer: Callable = as_dict,
    ):
        self.base = ParameterContainer(
            children=children, id=id, name=name, description=description, transformer=transformer
        )
        if size_id in self.base:
            raise ValueError(f"Child id {size_id!r} of {id!r} clashes with the broadcast size id")
        self.size_parameter = Parameter(
            id=size_id, name=size_name, value=_check_size(size), description=size_desc
        )

    @property
    def broadcast_size(self) -> int:
        return self.size_parameter.value()

    @broadcast_size.setter
    def broadcast_size(self, n: int) -> None:
        self.size_parameter.set_value(_check_size(n))

    @property
    def children(self) -> Tuple[AbstractParameter, ...]:
        return self.base.children

    def get(self, key: str, default: Any = _MISSING) -> Any:
        if key == self.size_parameter.id:
            return self.size_parameter
        return self.base.get(key, default)

    def __getitem__(self, key: str) -> AbstractParameter:
        return self.get(key)

    def __setitem__(self, key: str, child: AbstractParameter) -> None:
        if key == self.size_parameter.id:
            if child.id != key:
                raise ValueError(f"Broadcast size parameter must keep the id {key!r}, got {child.id!r}")
            _check_size(child.value())
            self.size_parameter = child
        else:
            self.base[key] = child

    def __contains__(self, key: str) -> bool:
        return key == self.size_parameter.id or key in self.base

    def __len__(self) -> int:
        return len(self.base)

    def value(self) -> Dict[str, Any]:
        values = self.base.value()
        values[self.size_parameter.id] = self.size_parameter.value()
        return values

    def set_value(self, new_value: Mapping[str, Any]) -> None:
        """Update children and, under the size id, the broadcast size."""
        new_value = dict(new_value)
        if self.size_parameter.id in new_value:
            self.broadcast_size = new_value.pop(self.size_parameter.id)
        self.base.set_value(new_value)

    def transform(self) -> List[Any]:
        n = _check_size(self.broadcast_size)
        return [self.base.transform() for _ in range(n)]

    def traverse(self, visitor: Visitor) -> None:
        if visitor(self):
            self.size_parameter.traverse(visitor)
            for child in self.base.children:
                child.traverse(visitor)

    def perturb(self, perturbations: Mapping[str, float]) -> "ParameterBroadcaster":
        self.base.perturb(perturbations)
        return self

    def __repr__(self) -> str:
        return (
            f"ParameterBroadcaster(id={self.id!r}, size={self.broadcast_size!r}, "
            f"children={self.base.ids()})"
        )
