"""
Tests for the Member Accessor Cache.

These tests verify:
1. Member selection (public fields and readable properties only)
2. Deterministic ordering
3. Per-type memoization, including concurrent first access
"""

import pytest
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import FrozenInstanceError, dataclass
from functools import cached_property

from parity.accessors import (
    Accessor,
    AccessorCache,
    build_accessor_table,
    default_accessor_cache,
)


# =============================================================================
# SAMPLE TYPES
# =============================================================================

@dataclass
class Point:
    x: int
    y: int
    _hidden: int = 0

    @property
    def manhattan(self) -> int:
        return abs(self.x) + abs(self.y)


class Slotted:
    __slots__ = ("a", "b", "_c")

    def __init__(self, a, b):
        self.a = a
        self.b = b
        self._c = None


class Widget:
    CONSTANT = 5

    def __init__(self, value):
        self.value = value

    @property
    def doubled(self):
        return self.value * 2

    @property
    def _private(self):
        return "private"

    @cached_property
    def expensive(self):
        return self.value ** 2

    write_only = property(None, lambda self, v: None)

    @classmethod
    def build(cls):
        return cls(1)

    @staticmethod
    def helper():
        return None

    def method(self):
        return None


class Parent:
    @property
    def inherited(self):
        return "parent"


class Child(Parent):
    @property
    def own(self):
        return "child"


class Shadowing(Parent):
    inherited = "plain attribute"


# =============================================================================
# SELECTION TESTS
# =============================================================================

class TestSelection:
    """Test which members make it into an accessor table."""

    def test_dataclass_fields_then_properties(self):
        """Public dataclass fields come first, then properties."""
        assert AccessorCache().names_for(Point) == ["x", "y", "manhattan"]

    def test_slots_are_fields(self):
        assert AccessorCache().names_for(Slotted) == ["a", "b"]

    def test_only_readable_public_properties(self):
        """Methods, class constants, private and write-only properties are excluded."""
        assert AccessorCache().names_for(Widget) == ["doubled", "expensive"]

    def test_base_class_members_come_first(self):
        assert AccessorCache().names_for(Child) == ["inherited", "own"]

    def test_shadowed_property_is_dropped(self):
        """A subclass that replaces a property with a plain attribute loses it."""
        assert AccessorCache().names_for(Shadowing) == []

    def test_plain_class_has_no_declared_members(self):
        """Instance attributes are not part of the per-type table."""
        class Plain:
            def __init__(self):
                self.value = 1

        assert AccessorCache().names_for(Plain) == []


class TestAccessor:
    """Test reading values through accessors."""

    def test_read_field_and_property(self):
        table = AccessorCache().accessors_for(Point)
        point = Point(3, -4)

        assert [accessor.read(point) for accessor in table] == [3, -4, 7]

    def test_read_cached_property(self):
        table = {a.name: a for a in AccessorCache().accessors_for(Widget)}

        assert table["expensive"].read(Widget(3)) == 9

    def test_accessor_is_immutable(self):
        accessor = Accessor(name="x", getter=lambda value: value)

        with pytest.raises(FrozenInstanceError):
            accessor.name = "y"


# =============================================================================
# CACHE TESTS
# =============================================================================

class TestCache:
    """Test memoization."""

    def test_table_is_memoized(self):
        cache = AccessorCache()

        first = cache.accessors_for(Point)
        assert cache.accessors_for(Point) is first
        assert len(cache) == 1
        assert Point in cache

    def test_uncached_builds_are_fresh(self):
        """build_accessor_table computes a new table every time."""
        assert build_accessor_table(Point) is not build_accessor_table(Point)
        assert [a.name for a in build_accessor_table(Point)] == ["x", "y", "manhattan"]

    def test_clear(self):
        cache = AccessorCache()
        cache.accessors_for(Point)
        cache.clear()

        assert len(cache) == 0
        assert Point not in cache

    def test_caches_are_independent(self):
        cache = AccessorCache()
        cache.accessors_for(Slotted)

        assert Slotted in cache
        assert Widget not in cache

    def test_default_cache_exists(self):
        assert isinstance(default_accessor_cache, AccessorCache)

    def test_concurrent_first_access_returns_one_table(self):
        """Racing threads may compute twice but all see the same stored table."""
        cache = AccessorCache()
        workers = 16
        barrier = threading.Barrier(workers)

        class Fresh:
            @property
            def value(self):
                return 1

        def lookup(_):
            barrier.wait()
            return cache.accessors_for(Fresh)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            tables = list(pool.map(lookup, range(workers)))

        assert all(table is tables[0] for table in tables)
        assert [a.name for a in tables[0]] == ["value"]
        assert len(cache) == 1
