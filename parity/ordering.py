"""
Ordering and numeric coercion shared by the equality and equivalence engines.

Ordered value types are compared three-way: explicit Orderable
implementations through compare_to, built-in value types (dates,
decimals, fractions, UUIDs) through their rich comparisons.

Numeric coercion converts a number into another numeric type so that
values of different representations can be compared. Conversion into
int rounds half to even (5.7 becomes 6, 4.5 becomes 4), so it may lose
precision; callers accept that.
"""

from __future__ import annotations

import numbers
from datetime import date, time, timedelta
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Any, Optional
from uuid import UUID

from .capabilities import Orderable


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

# Scalars compared by plain equality (plus numeric coercion)
PRIMITIVE_TYPES: tuple[type, ...] = (bool, int, float, complex, str, bytes)

# Built-in value types with a meaningful three-way ordering
# (datetime.datetime is covered by its base class datetime.date)
ORDERED_VALUE_TYPES: tuple[type, ...] = (date, time, timedelta, Decimal, Fraction, UUID)

# Types a number may be coerced into
COERCIBLE_NUMERIC_TYPES: tuple[type, ...] = (int, float, complex)


# =============================================================================
# CLASSIFICATION
# =============================================================================

def is_primitive(value: Any) -> bool:
    """Primitive scalars, strings, bytes and enum members."""
    return isinstance(value, PRIMITIVE_TYPES) or isinstance(value, Enum)


def has_ordering(value: Any) -> bool:
    """True if the value exposes a generic three-way ordering."""
    return isinstance(value, Orderable) or isinstance(value, ORDERED_VALUE_TYPES)


# =============================================================================
# ORDERING
# =============================================================================

def compare_values(left: Any, right: Any) -> int:
    """
    Three-way compare `left` against `right`.

    Returns:
        Negative, zero or positive, like Orderable.compare_to

    Raises:
        Whatever the underlying ordering raises (TypeError for
        incompatible operands, decimal.InvalidOperation, ...)
    """
    if isinstance(left, Orderable):
        return left.compare_to(right)

    if left < right:
        return -1
    if left > right:
        return 1
    return 0


# =============================================================================
# NUMERIC COERCION
# =============================================================================

def try_convert(value: Any, target_type: type) -> Optional[Any]:
    """
    Convert a number into `target_type`.

    Returns:
        The converted value, or None when the target is not a
        coercible numeric type or the conversion fails
    """
    if target_type not in COERCIBLE_NUMERIC_TYPES:
        return None
    if not isinstance(value, numbers.Number):
        return None

    try:
        if target_type is int:
            return round(value)
        return target_type(value)
    except (TypeError, ValueError, OverflowError, ArithmeticError):
        return None
