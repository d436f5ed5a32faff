"""Target selector definition."""
from __future__ import annotations

from dataclasses import dataclass

from .filter_def import Filter


@dataclass(slots=True)
class TargetSelector:
    """Describes how an action or effect picks its targets."""

    side: str = "enemy"
    mode: str = "single"
    count: int | None = None
    of_what: str | None = None
    condition: Filter | None = None
    include_dead: bool = False
