"""
Equivalence Engine for Parity.

Decides whether two values are structurally equivalent:

- primitives, enums and strings compare by ==, bridging numeric types
  by coercion (5 is equivalent to 5.0 and to Decimal("5"))
- ordered value types (dates, decimals, Orderable) compare three-way
- collections compare as multisets, ignoring order
- anything else compares member by member (mappings by key)

Strict mode forbids extra collection elements and extra members on the
actual side. Loose mode ignores them.

The first discrepancy is returned as an EquivalenceFailure. Cyclic
object graphs are detected by identity and reported as circular
references instead of recursing forever.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable, Mapping
from typing import Any, Callable, Optional

from .accessors import AccessorCache, default_accessor_cache, is_public
from .failures import EquivalenceFailure
from .ordering import compare_values, has_ordering, is_primitive, try_convert

logger = logging.getLogger(__name__)


# =============================================================================
# REFERENCE TRACKING
# =============================================================================

class ReferenceSet:
    """
    Identity-based set of the values on the current comparison path.

    Entries hold a strong reference so that an id cannot be recycled by
    another object while its entry is present.
    """

    def __init__(self):
        self._entries: dict[int, Any] = {}

    def __contains__(self, value: Any) -> bool:
        return id(value) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, value: Any) -> None:
        self._entries[id(value)] = value

    def discard(self, value: Any) -> None:
        self._entries.pop(id(value), None)


# =============================================================================
# CLASSIFICATION
# =============================================================================

def is_named_tuple(value: Any) -> bool:
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def is_opaque(value: Any) -> bool:
    """
    Functions, methods, classes and modules.

    Their state is code, not members, so they compare by == alone.
    """
    return inspect.isroutine(value) or inspect.isclass(value) or inspect.ismodule(value)


def is_sequence(value: Any) -> bool:
    """Iterables compared as multisets: not scalars, mappings or named tuples."""
    if is_primitive(value) or isinstance(value, Mapping) or is_named_tuple(value):
        return False
    return isinstance(value, Iterable)


def _join(path: str, name: Any) -> str:
    return f"{path}.{name}" if path else str(name)


# =============================================================================
# VERIFIER
# =============================================================================

class EquivalenceVerifier:
    """State of one top-level comparison: strictness, cache and reference sets."""

    def __init__(self, strict: bool, accessor_cache: AccessorCache):
        self.strict = strict
        self.accessor_cache = accessor_cache
        self.expected_refs = ReferenceSet()
        self.actual_refs = ReferenceSet()

    def verify(self, expected: Any, actual: Any, path: str) -> Optional[EquivalenceFailure]:
        if expected is None:
            if actual is None:
                return None
            return EquivalenceFailure.value_mismatch(expected, actual, path)
        if actual is None:
            return EquivalenceFailure.value_mismatch(expected, actual, path)

        if expected is actual:
            return None

        if expected in self.expected_refs:
            return EquivalenceFailure.circular_reference("expected", path)
        if actual in self.actual_refs:
            return EquivalenceFailure.circular_reference("actual", path)

        self.expected_refs.add(expected)
        self.actual_refs.add(actual)
        try:
            if is_primitive(expected):
                return self._verify_intrinsic(expected, actual, path)

            if has_ordering(expected):
                return self._verify_ordered(expected, actual, path)

            if is_opaque(expected) or is_opaque(actual):
                if expected == actual:
                    return None
                return EquivalenceFailure.value_mismatch(expected, actual, path)

            expected_is_sequence = is_sequence(expected)
            actual_is_sequence = is_sequence(actual)
            if expected_is_sequence and actual_is_sequence:
                return self._verify_collection(expected, actual, path)
            if expected_is_sequence or actual_is_sequence or is_primitive(actual):
                return EquivalenceFailure.value_mismatch(expected, actual, path)

            return self._verify_members(expected, actual, path)
        finally:
            self.expected_refs.discard(expected)
            self.actual_refs.discard(actual)

    # -------------------------------------------------------------------------
    # Scalars
    # -------------------------------------------------------------------------

    def _verify_intrinsic(self, expected: Any, actual: Any, path: str) -> Optional[EquivalenceFailure]:
        if expected == actual:
            return None

        converted = try_convert(expected, type(actual))
        if converted is not None and converted == actual:
            return None

        converted = try_convert(actual, type(expected))
        if converted is not None and converted == expected:
            return None

        return EquivalenceFailure.value_mismatch(expected, actual, path)

    def _verify_ordered(self, expected: Any, actual: Any, path: str) -> Optional[EquivalenceFailure]:
        try:
            if compare_values(expected, actual) == 0:
                return None
        except Exception as exc:
            return EquivalenceFailure.value_mismatch(expected, actual, path, cause=exc)

        # Symmetric fallback: actual's ordering may still report zero
        if not has_ordering(actual):
            return EquivalenceFailure.value_mismatch(expected, actual, path)
        try:
            if compare_values(actual, expected) == 0:
                return None
        except Exception as exc:
            return EquivalenceFailure.value_mismatch(expected, actual, path, cause=exc)

        return EquivalenceFailure.value_mismatch(expected, actual, path)

    # -------------------------------------------------------------------------
    # Collections
    # -------------------------------------------------------------------------

    def _verify_collection(self, expected: Iterable, actual: Iterable, path: str) -> Optional[EquivalenceFailure]:
        expected_values = list(expected)
        actual_original = list(actual)
        remaining = list(actual_original)

        for expected_value in expected_values:
            for index, actual_value in enumerate(remaining):
                if self.verify(expected_value, actual_value, "") is None:
                    del remaining[index]
                    break
            else:
                return EquivalenceFailure.missing_collection_value(expected_value, actual_original, path)

        if self.strict and remaining:
            return EquivalenceFailure.extra_collection_value(expected_values, actual_original, remaining, path)

        return None

    # -------------------------------------------------------------------------
    # Composites
    # -------------------------------------------------------------------------

    def members_of(self, value: Any) -> dict[Any, Callable[[Any], Any]]:
        """
        Ordered member name -> getter map of a composite value.

        Mappings expose their keys, named tuples their fields, and any
        other object its cached accessor table followed by public
        instance attributes the table does not already list.
        """
        if isinstance(value, Mapping):
            return {key: (lambda m, key=key: m[key]) for key in value}

        if is_named_tuple(value):
            return {name: (lambda t, name=name: getattr(t, name)) for name in type(value)._fields}

        members = {
            accessor.name: accessor.read
            for accessor in self.accessor_cache.accessors_for(type(value))
        }
        for name in getattr(value, "__dict__", {}):
            if is_public(name) and name not in members:
                members[name] = lambda obj, name=name: getattr(obj, name)
        return members

    def _verify_members(self, expected: Any, actual: Any, path: str) -> Optional[EquivalenceFailure]:
        expected_members = self.members_of(expected)
        actual_members = self.members_of(actual)

        def mismatch() -> EquivalenceFailure:
            return EquivalenceFailure.member_list_mismatch(
                [str(name) for name in expected_members],
                [str(name) for name in actual_members],
                path,
            )

        if self.strict and len(expected_members) != len(actual_members):
            return mismatch()

        for name, expected_getter in expected_members.items():
            actual_getter = actual_members.get(name)
            if actual_getter is None:
                return mismatch()

            failure = self.verify(expected_getter(expected), actual_getter(actual), _join(path, name))
            if failure is not None:
                return failure

        return None


# =============================================================================
# PUBLIC API
# =============================================================================

def verify_equivalence(
    expected: Any,
    actual: Any,
    strict: bool,
    accessor_cache: Optional[AccessorCache] = None,
) -> Optional[EquivalenceFailure]:
    """
    Verify that `actual` is equivalent to `expected`.

    Args:
        expected: The value the caller expects
        actual: The value under test
        strict: Forbid extra collection elements and extra members
        accessor_cache: Member accessor cache; the process-wide
            default_accessor_cache when omitted

    Returns:
        None when the values are equivalent, otherwise the first
        EquivalenceFailure found
    """
    if accessor_cache is None:
        accessor_cache = default_accessor_cache

    failure = EquivalenceVerifier(strict, accessor_cache).verify(expected, actual, "")
    if failure is not None:
        logger.debug("Equivalence failure (%s) at %r", failure.kind.value, failure.path)
    return failure
