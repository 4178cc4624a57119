"""Signature-based dispatch on the names present in an argument mapping.

A ``SignatureRegistry`` holds builders keyed by the set of argument names
they require. Signatures live in a trie, one level per name, in the order
they were registered, so ``["value", "perturbation"]`` sits below
``["value"]``. Dispatching a call selects the most specific signature whose
names are all present:

    >>> registry = SignatureRegistry(default=lambda args: ("leaf", args))
    >>> registry.register(["children"], lambda args: "container")
    >>> registry.register(["children", "size"], lambda args: "broadcaster", extends=True)
    >>> registry.dispatch({"children": [], "size": 3})
    'broadcaster'

Two matching signatures where neither contains the other are ambiguous and
raise ``AmbiguousSignatureError``.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Collection, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from .errors import AmbiguousSignatureError, SignatureRegistrationError

logger = logging.getLogger(__name__)

Builder = Callable[[Mapping[str, Any]], Any]


@dataclass
class _Node:
    """Trie node; ``builder`` is set when the path to it is a signature."""
    builder: Optional[Builder] = None
    children: Dict[str, "_Node"] = field(default_factory=dict)


class SignatureRegistry:
    """Registry of argument-name signatures and their builders.

    Args:
        default: Builder used when no signature matches. Without a default,
            an unmatched dispatch raises ``SignatureRegistrationError``.
    """

    def __init__(self, default: Optional[Builder] = None):
        self.default = default
        self._root = _Node()
        # Set of names -> trie path it was registered under
        self._paths: Dict[FrozenSet[str], Tuple[str, ...]] = {}

    def register(
        self,
        names: Sequence[str],
        builder: Optional[Builder] = None,
        *,
        extends: bool = False,
    ):
        """Associate ``builder`` with the signature ``names``.

        Can be used as a decorator when ``builder`` is omitted.

        Args:
            names: Required argument names, most general first
            builder: Callable receiving the full argument mapping
            extends: Assert that ``names[:-1]`` is already registered

        Raises:
            SignatureRegistrationError: If ``names`` is empty or repeats a
                name, or ``extends`` is set and the prefix is not registered
        """
        if builder is None:
            def decorator(func: Builder) -> Builder:
                self.register(names, func, extends=extends)
                return func
            return decorator

        path = tuple(names)
        if not path:
            raise SignatureRegistrationError("Signature must name at least one argument")
        if len(set(path)) != len(path):
            raise SignatureRegistrationError(f"Signature repeats argument names: {list(path)}")

        if extends and frozenset(path[:-1]) not in self._paths:
            raise SignatureRegistrationError(
                f"Signature {list(path)} extends unregistered signature {list(path[:-1])}"
            )

        # Same set under another order replaces the existing builder
        existing = self._paths.get(frozenset(path))
        if existing is not None:
            path = existing

        node = self._root
        for name in path:
            node = node.children.setdefault(name, _Node())
        node.builder = builder
        self._paths[frozenset(path)] = path

    def signatures(self) -> List[Tuple[str, ...]]:
        """Registered signatures as name tuples."""
        return list(self._paths.values())

    def match(self, keys: Collection[str]) -> List[Tuple[str, ...]]:
        """Return the maximal registered signatures contained in ``keys``.

        A matching signature is maximal when no other matching signature is
        a strict superset of it.
        """
        keys = set(keys)
        matched: List[Tuple[str, ...]] = []

        def walk(node: _Node, path: Tuple[str, ...]) -> None:
            if node.builder is not None:
                matched.append(path)
            for name, child in node.children.items():
                if name in keys:
                    walk(child, path + (name,))

        walk(self._root, ())
        sets = [frozenset(p) for p in matched]
        return [
            path for path, names in zip(matched, sets)
            if not any(names < other for other in sets)
        ]

    def resolve(self, keys: Collection[str]) -> Builder:
        """Return the builder ``dispatch`` would call for ``keys``."""
        candidates = self.match(keys)
        if len(candidates) > 1:
            raise AmbiguousSignatureError(
                f"Arguments {sorted(keys)} match several signatures: "
                f"{sorted(list(c) for c in candidates)}"
            )
        if not candidates:
            if self.default is None:
                raise SignatureRegistrationError(
                    f"No signature matches arguments {sorted(keys)} and no default builder is set"
                )
            logger.debug(f"No signature matches {sorted(keys)}; using default builder")
            return self.default

        node = self._root
        for name in candidates[0]:
            node = node.children[name]
        logger.debug(f"Arguments {sorted(keys)} dispatched to signature {list(candidates[0])}")
        return node.builder

    def dispatch(self, args: Mapping[str, Any]) -> Any:
        """Call the builder of the most specific signature present in ``args``.

        The builder receives the full ``args`` mapping.

        Raises:
            AmbiguousSignatureError: If several maximal signatures match
            SignatureRegistrationError: If nothing matches and there is no default
        """
        return self.resolve(args.keys())(args)

    def __contains__(self, names: Iterable[str]) -> bool:
        return frozenset(names) in self._paths

    def __len__(self) -> int:
        return len(self._paths)
