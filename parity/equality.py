"""
Equality Dispatch Engine for Parity.

Decides whether two values are equal by trying, in strict priority
order, the comparison capabilities their runtime types implement:

    1. None handling
    2. Equatable against the declared type
    3. Comparable against the declared type (errors are inconclusive)
    4. Generic ordering (errors are inconclusive)
    5. Structural equality, with nested elements compared by this engine
    6. Equatable against the other value's runtime type
    7. Comparable against the other value's runtime type (errors are inconclusive)
    8. Plain ==

No comparer here computes hash codes. They must not be used to key
hash-based containers, so no hashing operation is exposed at all.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from .capabilities import Comparable, Equatable, StructurallyEquatable, declares
from .ordering import compare_values, has_ordering

logger = logging.getLogger(__name__)


# =============================================================================
# STRUCTURAL EQUALITY
# =============================================================================

# Built-in containers compared element by element
STRUCTURAL_TYPES: tuple[type, ...] = (list, tuple, dict)


def is_structurally_equatable(value: Any) -> bool:
    return isinstance(value, StructurallyEquatable) or isinstance(value, STRUCTURAL_TYPES)


def structural_equals(x: Any, y: Any, comparer: TypeErasedEqualityComparer) -> bool:
    """
    Compare two composite values element by element with `comparer`.

    Lists only match lists and tuples only match tuples, as with ==.
    Dictionaries must share their key set; values go through `comparer`.
    """
    if x is y:
        return True

    if isinstance(x, StructurallyEquatable):
        return bool(x.structural_equals(y, comparer))

    if isinstance(x, dict):
        if not isinstance(y, dict) or x.keys() != y.keys():
            return False
        return all(comparer.equals(x[key], y[key]) for key in x)

    container = list if isinstance(x, list) else tuple
    if not isinstance(y, container) or len(x) != len(y):
        return False
    return all(comparer.equals(a, b) for a, b in zip(x, y))


# =============================================================================
# EQUALITY COMPARERS
# =============================================================================

class EqualityComparer:
    """
    Capability-dispatched equality for values of a declared type.

    Args:
        declared_type: Static type the compared values are known to share.
            Steps 2 and 3 of the dispatch only fire for capabilities
            declared against this type (or a supertype of it).
        inner_comparer: Comparer handed down to every comparer this one
            specializes for nested elements. Defaults lazily to an
            EqualityComparer over object.
    """

    def __init__(
        self,
        declared_type: type = object,
        inner_comparer: Optional[Any] = None,
    ):
        self.declared_type = declared_type
        self._inner_comparer = inner_comparer
        self._type_erased: Optional[TypeErasedEqualityComparer] = None

    def __repr__(self) -> str:
        return f"EqualityComparer({self.declared_type.__qualname__})"

    @property
    def inner_comparer(self) -> Any:
        # Built on first use
        if self._inner_comparer is None:
            self._inner_comparer = EqualityComparer()
        return self._inner_comparer

    @property
    def type_erased(self) -> TypeErasedEqualityComparer:
        """Adapter injected into structural comparisons."""
        if self._type_erased is None:
            self._type_erased = TypeErasedEqualityComparer(self.inner_comparer)
        return self._type_erased

    @staticmethod
    def from_comparer(comparer: Callable[[Any, Any], bool]) -> FuncEqualityComparer:
        """Build a comparer that delegates non-None pairs to `comparer`."""
        return FuncEqualityComparer(comparer)

    def equals(self, x: Any, y: Any) -> bool:
        if x is None and y is None:
            return True
        if x is None or y is None:
            return False

        x_type = type(x)

        if declares(x_type, Equatable, self.declared_type):
            return bool(x.equals(y))

        if declares(x_type, Comparable, self.declared_type):
            try:
                return x.compare_to(y) == 0
            except Exception as exc:
                logger.debug("%s.compare_to raised %r; continuing", x_type.__qualname__, exc)

        if has_ordering(x):
            try:
                return compare_values(x, y) == 0
            except Exception as exc:
                logger.debug("Ordering %s against %s raised %r; continuing",
                             x_type.__qualname__, type(y).__qualname__, exc)

        if is_structurally_equatable(x) and structural_equals(x, y, self.type_erased):
            return True

        y_type = type(y)

        if declares(x_type, Equatable, y_type):
            return bool(x.equals(y))

        if declares(x_type, Comparable, y_type):
            try:
                return x.compare_to(y) == 0
            except Exception as exc:
                logger.debug("%s.compare_to(%s) raised %r; continuing",
                             x_type.__qualname__, y_type.__qualname__, exc)

        return bool(x == y)


class FuncEqualityComparer:
    """Equality decided by a caller-supplied predicate."""

    def __init__(self, comparer: Callable[[Any, Any], bool]):
        self.comparer = comparer

    def equals(self, x: Any, y: Any) -> bool:
        if x is None:
            return y is None
        if y is None:
            return False
        return bool(self.comparer(x, y))


class TypeErasedEqualityComparer:
    """
    Element comparer for structural equality.

    For each pair it specializes an EqualityComparer to the pair's
    runtime type (or object when the types differ). Specialized
    comparers are built once per type and reused.
    """

    def __init__(self, inner_comparer: Any):
        self.inner_comparer = inner_comparer
        self._specialized: dict[type, EqualityComparer] = {}

    def comparer_for(self, object_type: type) -> EqualityComparer:
        comparer = self._specialized.get(object_type)
        if comparer is None:
            comparer = self._specialized.setdefault(
                object_type,
                EqualityComparer(object_type, inner_comparer=self.inner_comparer),
            )
        return comparer

    def equals(self, x: Any, y: Any) -> bool:
        if x is None:
            return y is None
        if y is None:
            return False

        object_type = type(x) if type(x) is type(y) else object
        return self.comparer_for(object_type).equals(x, y)
