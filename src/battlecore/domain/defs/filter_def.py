"""Filter expression trees used by selectors and gating checks."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple


@dataclass(slots=True)
class FilterTest:
    """Leaf comparison ``<metric of actor> <op> <value>``."""

    key: str
    op: str
    value: Any = None


@dataclass(slots=True)
class Filter:
    """
    Boolean filter node.

    Every populated branch is ANDed: ``all_of`` (AND over children),
    ``any_of`` (OR over children), ``negate`` (NOT) and ``test`` (leaf).
    """

    all_of: Tuple[Filter, ...] | None = None
    any_of: Tuple[Filter, ...] | None = None
    negate: Filter | None = None
    test: FilterTest | None = None

    @classmethod
    def where(cls, key: str, op: str, value: Any) -> Filter:
        """Shorthand for a single-test filter."""
        return cls(test=FilterTest(key=key, op=op, value=value))
