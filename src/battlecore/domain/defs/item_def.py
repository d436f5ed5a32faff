"""Item definition structures."""
from __future__ import annotations

from dataclasses import dataclass

from .action_def import ActionDef


@dataclass(slots=True)
class ItemDef(ActionDef):
    """Usable item drawn from the shared battle inventory."""

    consumable: bool = True

    @property
    def action_type(self) -> str:
        return "item"
