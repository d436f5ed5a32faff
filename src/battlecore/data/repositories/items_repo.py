"""Items repository."""
from __future__ import annotations

from typing import Dict

from battlecore.data.repositories.base import RepositoryBase
from battlecore.domain.defs import ItemDef

from .parsing import optional, parse_action_fields, require_bool


class ItemsRepository(RepositoryBase[ItemDef]):
    """Loads usable items drawn from the shared battle inventory."""

    def __init__(self, base_path=None) -> None:
        super().__init__("items.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ItemDef]:
        items: Dict[str, ItemDef] = {}
        for raw_id, item_data, context in self._entries(raw, "item"):
            items[raw_id] = ItemDef(
                **parse_action_fields(raw_id, item_data, context),
                consumable=optional(item_data, "consumable", require_bool, context, True),
            )
        return items
