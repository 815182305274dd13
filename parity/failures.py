"""
Equivalence failures for Parity.

A failed equivalence check produces exactly one EquivalenceFailure
describing the first discrepancy found: what kind it is, where it sits
(the dotted member path), and the values involved. Failures are
returned, never raised, so callers can collect, log or render them.
Callers that do want an exception use EquivalenceFailure.to_error().

Failure kinds:
    VALUE_MISMATCH            — two values differ
    MISSING_COLLECTION_VALUE  — an expected element has no equivalent
    EXTRA_COLLECTION_VALUE    — strict mode found unmatched actual elements
    MEMBER_LIST_MISMATCH      — the two composites expose different members
    CIRCULAR_REFERENCE        — a value was reached again on its own path
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Sequence


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

FAILURE_TITLE = "Equivalence failure"

# Collections longer than this are elided in failure messages
MAX_LISTED_ITEMS = 10

# Width of the "Expected: " / "Actual:   " labels
LABEL_WIDTH = 10


# =============================================================================
# FAILURE KINDS
# =============================================================================

class FailureKind(Enum):
    VALUE_MISMATCH = "value_mismatch"
    MISSING_COLLECTION_VALUE = "missing_collection_value"
    EXTRA_COLLECTION_VALUE = "extra_collection_value"
    MEMBER_LIST_MISMATCH = "member_list_mismatch"
    CIRCULAR_REFERENCE = "circular_reference"


class EquivalenceError(AssertionError):
    """Raised by callers that turn an EquivalenceFailure into an assertion."""

    def __init__(self, failure: EquivalenceFailure):
        self.failure = failure
        super().__init__(failure.message())


# =============================================================================
# RENDERING HELPERS
# =============================================================================

def format_items(items: Sequence[Any], formatter: Callable[[Any], str] = repr) -> str:
    """Render a collection as [a, b, ...], eliding past MAX_LISTED_ITEMS."""
    shown = [formatter(item) for item in list(items)[:MAX_LISTED_ITEMS]]
    if len(items) > MAX_LISTED_ITEMS:
        shown.append("...")
    return "[" + ", ".join(shown) + "]"


def _line(label: str, text: str) -> str:
    return f"{label + ':':<{LABEL_WIDTH}}{text}"


# =============================================================================
# FAILURE
# =============================================================================

@dataclass(frozen=True)
class EquivalenceFailure:
    """
    A single discrepancy found while verifying equivalence.

    Which fields are populated depends on the kind:
    - VALUE_MISMATCH: expected, actual, optional cause
    - MISSING_COLLECTION_VALUE: expected (the element), actual (full actual list)
    - EXTRA_COLLECTION_VALUE: expected (list), actual (full list), leftovers
    - MEMBER_LIST_MISMATCH: expected_members, actual_members
    - CIRCULAR_REFERENCE: location ("expected.<path>" or "actual.<path>")
    """
    kind: FailureKind
    path: str = ""
    expected: Any = None
    actual: Any = None
    cause: Optional[BaseException] = None
    expected_members: tuple[str, ...] = ()
    actual_members: tuple[str, ...] = ()
    leftovers: list[Any] = field(default_factory=list)
    location: str = ""

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def value_mismatch(
        cls,
        expected: Any,
        actual: Any,
        path: str,
        cause: Optional[BaseException] = None,
    ) -> EquivalenceFailure:
        return cls(FailureKind.VALUE_MISMATCH, path=path, expected=expected, actual=actual, cause=cause)

    @classmethod
    def circular_reference(cls, side: str, path: str) -> EquivalenceFailure:
        location = f"{side}.{path}" if path else side
        return cls(FailureKind.CIRCULAR_REFERENCE, path=path, location=location)

    @classmethod
    def missing_collection_value(
        cls,
        expected: Any,
        actual: list[Any],
        path: str,
    ) -> EquivalenceFailure:
        return cls(FailureKind.MISSING_COLLECTION_VALUE, path=path, expected=expected, actual=actual)

    @classmethod
    def extra_collection_value(
        cls,
        expected: list[Any],
        actual: list[Any],
        leftovers: list[Any],
        path: str,
    ) -> EquivalenceFailure:
        return cls(
            FailureKind.EXTRA_COLLECTION_VALUE,
            path=path,
            expected=expected,
            actual=actual,
            leftovers=leftovers,
        )

    @classmethod
    def member_list_mismatch(
        cls,
        expected_members: Sequence[str],
        actual_members: Sequence[str],
        path: str,
    ) -> EquivalenceFailure:
        return cls(
            FailureKind.MEMBER_LIST_MISMATCH,
            path=path,
            expected_members=tuple(expected_members),
            actual_members=tuple(actual_members),
        )

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    @property
    def side(self) -> Optional[str]:
        """Offending side of a circular reference ("expected" or "actual")."""
        if self.kind != FailureKind.CIRCULAR_REFERENCE:
            return None
        return self.location.split(".", 1)[0]

    def _in_member(self) -> str:
        return f" in member '{self.path}'" if self.path else ""

    def message(self, formatter: Callable[[Any], str] = repr) -> str:
        """
        Human-readable description of the failure.

        Args:
            formatter: Renders a single value for display. The default
                is repr; assertion libraries inject their own renderer.
        """
        if self.kind == FailureKind.VALUE_MISMATCH:
            header = FAILURE_TITLE
            if self.path:
                header += f": Mismatched value on member '{self.path}'"
            lines = [
                header,
                _line("Expected", formatter(self.expected)),
                _line("Actual", formatter(self.actual)),
            ]
            if self.cause is not None:
                lines.append(_line("Cause", f"{type(self.cause).__name__}: {self.cause}"))
            return "\n".join(lines)

        if self.kind == FailureKind.CIRCULAR_REFERENCE:
            return f"{FAILURE_TITLE}: Circular reference found in '{self.location}'"

        if self.kind == FailureKind.MISSING_COLLECTION_VALUE:
            return "\n".join([
                f"{FAILURE_TITLE}: Collection value not found{self._in_member()}",
                _line("Expected", formatter(self.expected)),
                _line("In", format_items(self.actual, formatter)),
            ])

        if self.kind == FailureKind.EXTRA_COLLECTION_VALUE:
            return "\n".join([
                f"{FAILURE_TITLE}: Extra values found{self._in_member()}",
                _line("Expected", format_items(self.expected, formatter)),
                _line(
                    "Actual",
                    f"{format_items(self.leftovers, formatter)} left over from "
                    f"{format_items(self.actual, formatter)}",
                ),
            ])

        prefix = f"{self.path}." if self.path else ""
        return "\n".join([
            f"{FAILURE_TITLE}: Mismatched member list",
            _line("Expected", format_items([prefix + name for name in self.expected_members], str)),
            _line("Actual", format_items([prefix + name for name in self.actual_members], str)),
        ])

    def to_error(self) -> EquivalenceError:
        return EquivalenceError(self)

    def __str__(self) -> str:
        return self.message()
