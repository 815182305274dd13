"""
Tests for equivalence failures and their messages.

These tests verify:
1. Each factory populates the fields of its failure kind
2. Messages locate the discrepancy by member path
3. The display formatter is injectable
4. Failures convert into assertion errors
"""

import pytest

from parity.failures import (
    MAX_LISTED_ITEMS,
    EquivalenceError,
    EquivalenceFailure,
    FailureKind,
    format_items,
)
from parity.equivalence import verify_equivalence


# =============================================================================
# MESSAGE TESTS
# =============================================================================

class TestValueMismatchMessage:
    """Test value mismatch rendering."""

    def test_top_level(self):
        failure = EquivalenceFailure.value_mismatch(1, 2, "")

        assert failure.message() == (
            "Equivalence failure\n"
            "Expected: 1\n"
            "Actual:   2"
        )

    def test_with_member_path(self):
        failure = EquivalenceFailure.value_mismatch("a", "b", "inner.name")

        assert failure.message() == (
            "Equivalence failure: Mismatched value on member 'inner.name'\n"
            "Expected: 'a'\n"
            "Actual:   'b'"
        )

    def test_with_cause(self):
        failure = EquivalenceFailure.value_mismatch(1, "x", "", cause=TypeError("boom"))

        assert failure.message().endswith("Cause:    TypeError: boom")


class TestCircularReferenceMessage:
    """Test circular reference rendering."""

    def test_location_includes_side_and_path(self):
        failure = EquivalenceFailure.circular_reference("expected", "next")

        assert failure.kind == FailureKind.CIRCULAR_REFERENCE
        assert failure.location == "expected.next"
        assert failure.message() == "Equivalence failure: Circular reference found in 'expected.next'"

    def test_top_level_location(self):
        failure = EquivalenceFailure.circular_reference("actual", "")

        assert failure.location == "actual"
        assert failure.side == "actual"

    def test_side_only_for_circular_references(self):
        assert EquivalenceFailure.value_mismatch(1, 2, "").side is None


class TestCollectionMessages:
    """Test collection failure rendering."""

    def test_missing_value(self):
        failure = EquivalenceFailure.missing_collection_value(3, [1, 2], "")

        assert failure.message() == (
            "Equivalence failure: Collection value not found\n"
            "Expected: 3\n"
            "In:       [1, 2]"
        )

    def test_missing_value_in_member(self):
        failure = EquivalenceFailure.missing_collection_value(3, [1, 2], "items")

        assert failure.message().startswith(
            "Equivalence failure: Collection value not found in member 'items'"
        )

    def test_extra_values(self):
        failure = EquivalenceFailure.extra_collection_value([1, 2], [1, 2, 3], [3], "")

        assert failure.message() == (
            "Equivalence failure: Extra values found\n"
            "Expected: [1, 2]\n"
            "Actual:   [3] left over from [1, 2, 3]"
        )

    def test_long_collections_are_elided(self):
        items = list(range(MAX_LISTED_ITEMS + 5))

        rendered = format_items(items)

        assert rendered.endswith(", ...]")
        assert str(MAX_LISTED_ITEMS - 1) in rendered
        assert str(MAX_LISTED_ITEMS + 1) not in rendered


class TestMemberListMessage:
    """Test member list rendering."""

    def test_member_names_are_prefixed_with_path(self):
        failure = EquivalenceFailure.member_list_mismatch(["A", "B"], ["A", "B", "C"], "inner")

        assert failure.message() == (
            "Equivalence failure: Mismatched member list\n"
            "Expected: [inner.A, inner.B]\n"
            "Actual:   [inner.A, inner.B, inner.C]"
        )

    def test_top_level_member_names(self):
        failure = EquivalenceFailure.member_list_mismatch(["A"], ["B"], "")

        assert "Expected: [A]" in failure.message()


class TestFormatter:
    """Test the injectable display formatter."""

    def test_formatter_is_applied_to_values(self):
        failure = EquivalenceFailure.value_mismatch(1, 2, "")

        message = failure.message(formatter=lambda value: f"<{value}>")

        assert "Expected: <1>" in message
        assert "Actual:   <2>" in message

    def test_formatter_is_applied_to_items(self):
        failure = EquivalenceFailure.missing_collection_value(3, [1, 2], "")

        assert "In:       [<1>, <2>]" in failure.message(formatter=lambda value: f"<{value}>")


# =============================================================================
# ERROR CONVERSION
# =============================================================================

class TestEquivalenceError:
    """Test conversion into an assertion error."""

    def test_to_error(self):
        failure = verify_equivalence([1, 2], [1, 2, 3], strict=True)

        error = failure.to_error()

        assert isinstance(error, AssertionError)
        assert isinstance(error, EquivalenceError)
        assert error.failure is failure
        assert str(error) == failure.message()

    def test_raise(self):
        failure = verify_equivalence({"a": 1}, {"a": 2}, strict=False)

        with pytest.raises(AssertionError, match="Mismatched value on member 'a'"):
            raise failure.to_error()

    def test_str_is_message(self):
        failure = EquivalenceFailure.value_mismatch(1, 2, "x")

        assert str(failure) == failure.message()
