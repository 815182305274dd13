"""
Member Accessor Cache for Parity.

The equivalence engine compares composite values member by member.
Finding those members is reflective work, so the result is memoized
per runtime type in an AccessorCache.

Selection (public means the name has no leading underscore):
    Fields      — dataclass fields and __slots__ entries
    Properties  — property, functools.cached_property and C-level
                  getset descriptors that can be read

Fields come first, then properties. Within each group, base classes
come before subclasses and members keep their declaration order.
The order only makes diagnostics deterministic; it never changes
whether two values are equivalent.
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
import operator
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Callable, Iterator

logger = logging.getLogger(__name__)


# =============================================================================
# ACCESSOR
# =============================================================================

@dataclass(frozen=True)
class Accessor:
    """A named, read-only access path into a composite value."""
    name: str
    getter: Callable[[Any], Any]

    def read(self, value: Any) -> Any:
        return self.getter(value)


def is_public(name: str) -> bool:
    return not name.startswith("_")


# =============================================================================
# TABLE CONSTRUCTION
# =============================================================================

def _declaring_classes(cls: type) -> Iterator[type]:
    """Classes of the MRO, base classes first, object excluded."""
    for klass in reversed(cls.__mro__):
        if klass is not object:
            yield klass


def _field_names(cls: type) -> list[str]:
    names: list[str] = []

    if dataclasses.is_dataclass(cls):
        names.extend(f.name for f in dataclasses.fields(cls))

    for klass in _declaring_classes(cls):
        for name, attr in vars(klass).items():
            if inspect.ismemberdescriptor(attr):
                names.append(name)

    return [name for name in dict.fromkeys(names) if is_public(name)]


def _is_readable_property(attr: Any) -> bool:
    if isinstance(attr, property):
        return attr.fget is not None
    return isinstance(attr, cached_property) or inspect.isgetsetdescriptor(attr)


def _property_names(cls: type) -> list[str]:
    names: list[str] = []

    for klass in _declaring_classes(cls):
        for name, attr in vars(klass).items():
            if is_public(name) and _is_readable_property(attr):
                names.append(name)

    # A subclass may shadow an inherited property with something else
    return [
        name for name in dict.fromkeys(names)
        if _is_readable_property(inspect.getattr_static(cls, name, None))
    ]


def build_accessor_table(cls: type) -> tuple[Accessor, ...]:
    """Compute the ordered accessor list for `cls` (uncached)."""
    fields = _field_names(cls)
    properties = [name for name in _property_names(cls) if name not in fields]

    return tuple(
        Accessor(name=name, getter=operator.attrgetter(name))
        for name in fields + properties
    )


# =============================================================================
# CACHE
# =============================================================================

class AccessorCache:
    """
    Per-type memo of accessor tables.

    Safe under concurrent first access: two threads may both build the
    table for a new type, but only the first stored table is ever
    returned.
    """

    def __init__(self):
        self._tables: dict[type, tuple[Accessor, ...]] = {}

    def __len__(self) -> int:
        return len(self._tables)

    def __contains__(self, cls: type) -> bool:
        return cls in self._tables

    def accessors_for(self, cls: type) -> tuple[Accessor, ...]:
        table = self._tables.get(cls)
        if table is None:
            table = self._tables.setdefault(cls, build_accessor_table(cls))
            logger.debug("Accessor table for %s: %s",
                         cls.__qualname__, [a.name for a in table])
        return table

    def names_for(self, cls: type) -> list[str]:
        return [accessor.name for accessor in self.accessors_for(cls)]

    def clear(self) -> None:
        self._tables.clear()


# Process-wide cache used when callers do not supply their own
default_accessor_cache = AccessorCache()
