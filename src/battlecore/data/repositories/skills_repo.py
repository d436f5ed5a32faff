"""Skills repository."""
from __future__ import annotations

from typing import Dict

from battlecore.data.repositories.base import RepositoryBase
from battlecore.domain.defs import SkillDef

from .parsing import parse_action_fields


class SkillsRepository(RepositoryBase[SkillDef]):
    """Loads data-defined combat skills."""

    def __init__(self, base_path=None) -> None:
        super().__init__("skills.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, SkillDef]:
        skills: Dict[str, SkillDef] = {}
        for raw_id, skill_data, context in self._entries(raw, "skill"):
            skills[raw_id] = SkillDef(**parse_action_fields(raw_id, skill_data, context))
        return skills
