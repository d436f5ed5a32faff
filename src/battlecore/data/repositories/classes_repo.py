"""Classes repository."""
from __future__ import annotations

from typing import Dict

from battlecore.data.repositories.base import RepositoryBase
from battlecore.domain.defs import ClassDef

from .parsing import assert_required, optional, parse_drops, parse_stat_block, require_str, require_str_list


class ClassesRepository(RepositoryBase[ClassDef]):
    """Loads playable class presets."""

    def __init__(self, base_path=None) -> None:
        super().__init__("classes.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ClassDef]:
        classes: Dict[str, ClassDef] = {}
        for raw_id, class_data, context in self._entries(raw, "class"):
            assert_required(class_data, {"base"}, context)
            classes[raw_id] = ClassDef(
                id=raw_id,
                name=optional(class_data, "name", require_str, context, raw_id),
                base=parse_stat_block(class_data["base"], f"{context}.base"),
                skills=tuple(optional(class_data, "skills", require_str_list, context, [])),
                start_items=optional(class_data, "startItems", parse_drops, context, ()),
            )
        return classes
