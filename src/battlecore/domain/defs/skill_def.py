"""Skill definition structures."""
from __future__ import annotations

from dataclasses import dataclass

from .action_def import ActionDef


@dataclass(slots=True)
class SkillDef(ActionDef):
    """A repeatable combat skill."""

    @property
    def action_type(self) -> str:
        return "skill"
