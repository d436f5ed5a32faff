"""UI-agnostic battle controller that separates state progression from rendering."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Sequence

from battlecore.domain.battle_models import BattleEnd, BattleState, UseResult, is_player_side, push_log
from battlecore.domain.defs import ItemDef, SkillDef
from battlecore.services.battle_service import BattleService

BattleActionType = Literal["skill", "item", "flee", "wait"]

DEFAULT_MAX_ROUNDS = 100


@dataclass(slots=True)
class BattleAction:
    """Represents a structured action decision for the current actor."""

    action_type: BattleActionType
    action_id: str | None = None
    target_ids: Sequence[str] | None = None


@dataclass(slots=True)
class AvailableActions:
    skills: List[SkillDef] = field(default_factory=list)
    items: List[ItemDef] = field(default_factory=list)

    @property
    def can_use_skill(self) -> bool:
        return bool(self.skills)

    @property
    def can_use_item(self) -> bool:
        return bool(self.items)


class BattleController:
    """
    UI-agnostic controller for battle state progression.

    Wraps BattleService and exposes structured state: whose turn it is,
    which actions are available and automatic turns for AI-driven actors.
    It never renders or prompts; callers read ``BattleState.log``.
    """

    def __init__(self, battle_service: BattleService) -> None:
        self._service = battle_service

    def current_actor_id(self, state: BattleState) -> str | None:
        return self._service.current_actor_id(state)

    def is_player_side_turn(self, state: BattleState) -> bool:
        actor_id = state.current_actor_id
        if not actor_id:
            return False
        return is_player_side(state, actor_id)

    def is_enemy_turn(self, state: BattleState) -> bool:
        actor_id = state.current_actor_id
        if not actor_id:
            return False
        return actor_id in state.side_enemy

    def get_available_actions(self, state: BattleState) -> AvailableActions:
        actor_id = state.current_actor_id
        if not actor_id:
            return AvailableActions()
        return AvailableActions(
            skills=self._service.get_available_skills(state, actor_id),
            items=self._service.get_available_items(state, actor_id),
        )

    def apply_action(self, state: BattleState, action: BattleAction) -> UseResult:
        """Apply a decision for the current actor. Does not end the turn."""
        actor_id = state.current_actor_id
        if not actor_id:
            raise ValueError("No current actor.")

        if action.action_type == "skill":
            if not action.action_id:
                raise ValueError("Skill action requires action_id.")
            return self._service.use_skill(state, action.action_id, actor_id, action.target_ids)

        if action.action_type == "item":
            if not action.action_id:
                raise ValueError("Item action requires action_id.")
            return self._service.use_item(state, action.action_id, actor_id, action.target_ids)

        if action.action_type == "flee":
            return self._service.attempt_flee(state, actor_id)

        if action.action_type == "wait":
            actor = state.actors[actor_id]
            push_log(state, f"{actor.name} waits cautiously.")
            return UseResult(ok=True, log=state.log[-1:])

        raise ValueError(f"Unknown action type: {action.action_type}")

    def choose_auto_action(self, state: BattleState) -> BattleAction:
        """Pick the usable skill with the highest AI weight (first listed wins ties)."""
        actor_id = state.current_actor_id
        if not actor_id:
            return BattleAction(action_type="wait")
        best: SkillDef | None = None
        for skill in self._service.get_available_skills(state, actor_id):
            if best is None or skill.ai_weight > best.ai_weight:
                best = skill
        if best is None:
            return BattleAction(action_type="wait")
        return BattleAction(action_type="skill", action_id=best.id)

    def run_auto_turn(self, state: BattleState) -> UseResult | None:
        """Play the current actor's whole turn automatically and advance the cursor."""
        if state.ended is not None:
            return None
        result: UseResult | None = None
        if self._service.start_turn(state):
            result = self.apply_action(state, self.choose_auto_action(state))
        self._service.end_turn(state)
        return result

    def run_auto_battle(self, state: BattleState, max_rounds: int = DEFAULT_MAX_ROUNDS) -> BattleEnd | None:
        """Drive every actor automatically until the battle ends or ``max_rounds`` have passed."""
        while state.ended is None and state.turn <= max_rounds and state.order:
            self.run_auto_turn(state)
        return state.ended
