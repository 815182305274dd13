# Parity Comparison Engine
# Equality dispatch and structural equivalence for assertion libraries

"""
Two questions about two arbitrary values:

    equal       — EqualityComparer.equals(x, y)
    equivalent  — verify_equivalence(expected, actual, strict)

Equality is decided by the comparison capabilities the values' types
implement. Equivalence is a recursive, order-insensitive structural
comparison that explains the first discrepancy it finds.
"""

from .accessors import Accessor, AccessorCache, default_accessor_cache
from .capabilities import Comparable, Equatable, Orderable, StructurallyEquatable
from .equality import EqualityComparer, FuncEqualityComparer, TypeErasedEqualityComparer
from .equivalence import EquivalenceVerifier, ReferenceSet, verify_equivalence
from .failures import EquivalenceError, EquivalenceFailure, FailureKind

__version__ = "0.1.0"

__all__ = [
    "Accessor",
    "AccessorCache",
    "Comparable",
    "EqualityComparer",
    "EquivalenceError",
    "EquivalenceFailure",
    "EquivalenceVerifier",
    "Equatable",
    "FailureKind",
    "FuncEqualityComparer",
    "Orderable",
    "ReferenceSet",
    "StructurallyEquatable",
    "TypeErasedEqualityComparer",
    "default_accessor_cache",
    "verify_equivalence",
]
