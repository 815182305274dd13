"""
Comparison capabilities for Parity.

Types opt into precise equality by inheriting one of the capability
base classes below. The equality dispatcher inspects which capabilities
a runtime type declares, and against which target types, to decide how
two values are compared.

Capabilities:
    Equatable[T]           — equals(other: T) -> bool
    Comparable[T]          — compare_to(other: T) -> int (zero means equal)
    Orderable              — compare_to(other: object) -> int
    StructurallyEquatable  — structural_equals(other, comparer) -> bool

A class declares its target type through the generic parameter:

    class Money(Equatable["Money"]):
        def equals(self, other: "Money") -> bool:
            ...

String and forward-reference parameters are resolved against the
declaring class's own name and module globals.
"""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, ForwardRef, Generic, Optional, TypeVar, get_args, get_origin

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# CAPABILITY BASE CLASSES
# =============================================================================

class Equatable(ABC, Generic[T]):
    """Equality against values of a declared target type."""

    @abstractmethod
    def equals(self, other: T) -> bool:
        ...


class Comparable(ABC, Generic[T]):
    """Three-way ordering against values of a declared target type."""

    @abstractmethod
    def compare_to(self, other: T) -> int:
        ...


class Orderable(ABC):
    """
    Three-way ordering against any object.

    compare_to returns a negative number, zero, or a positive number.
    Implementations may raise when the other value cannot be ordered
    against this one; callers treat that as "cannot decide".
    """

    @abstractmethod
    def compare_to(self, other: object) -> int:
        ...


class StructurallyEquatable(ABC):
    """
    Element-wise equality for composite value types.

    The comparer passed in decides equality of the individual elements,
    so nested elements get the same precision as top-level values.
    """

    @abstractmethod
    def structural_equals(self, other: object, comparer: Any) -> bool:
        ...


# =============================================================================
# CAPABILITY DISCOVERY
# =============================================================================

def _resolve_target(arg: Any, owner: type) -> Optional[type]:
    """Resolve one generic argument of a capability base to a class."""
    if isinstance(arg, TypeVar) or arg is Any:
        return object
    if isinstance(arg, type):
        return arg

    if isinstance(arg, ForwardRef):
        name = arg.__forward_arg__
    elif isinstance(arg, str):
        name = arg
    else:
        origin = get_origin(arg)
        return origin if isinstance(origin, type) else None

    if name == owner.__name__:
        return owner

    module = sys.modules.get(owner.__module__)
    candidate = getattr(module, name, None) if module is not None else None
    if isinstance(candidate, type):
        return candidate

    logger.debug("Cannot resolve %r declared by %s", name, owner.__qualname__)
    return None


@lru_cache(maxsize=None)
def declared_targets(cls: type, capability: type) -> tuple[type, ...]:
    """
    Target types that `cls` declares `capability` against.

    Walks the MRO; for every class whose own bases include the
    capability, collects the resolved generic arguments. A class that
    inherits the capability without parameterizing it targets itself.
    """
    if not issubclass(cls, capability):
        return ()

    targets: list[type] = []
    for klass in cls.__mro__:
        bases = klass.__dict__.get("__orig_bases__", klass.__bases__)
        for base in bases:
            if base is capability:
                targets.append(klass)
            elif get_origin(base) is capability:
                for arg in get_args(base):
                    resolved = _resolve_target(arg, klass)
                    if resolved is not None:
                        targets.append(resolved)

    return tuple(dict.fromkeys(targets))


def declares(cls: type, capability: type, target: type) -> bool:
    """True if `cls` declares `capability` against a supertype of `target`."""
    return any(issubclass(target, declared) for declared in declared_targets(cls, capability))
