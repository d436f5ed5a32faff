"""Battle service wiring the engine components around one content bundle."""
from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from battlecore.domain.battle_models import BattleState, InventoryEntry, UseResult, create_battle_state, push_log
from battlecore.domain.content import ContentBundle
from battlecore.domain.defs import ItemDef, SkillDef
from battlecore.domain.entities import Actor
from battlecore.domain.inventory import item_quantity
from battlecore.services.action_service import ActionExecutor
from battlecore.services.effect_service import EffectExecutor
from battlecore.services.errors import BattleSetupError, FactoryError
from battlecore.services.factories import create_enemy_from_id, create_player_from_class_id, make_instance_id
from battlecore.services.status_service import StatusEngine
from battlecore.services.turn_service import TurnController

logger = logging.getLogger(__name__)


class BattleService:
    """Deterministic battle orchestrator over data-defined skills, items and statuses."""

    def __init__(self, content: ContentBundle) -> None:
        self._content = content
        self._effects = EffectExecutor(content)
        self._actions = ActionExecutor(content, self._effects)
        self._turns = TurnController(self._effects.statuses, self._actions)

    @property
    def content(self) -> ContentBundle:
        return self._content

    @property
    def statuses(self) -> StatusEngine:
        return self._effects.statuses

    @property
    def effects(self) -> EffectExecutor:
        return self._effects

    @property
    def actions(self) -> ActionExecutor:
        return self._actions

    @property
    def turns(self) -> TurnController:
        return self._turns

    # -----------------------
    # Battle Lifecycle
    # -----------------------
    def create_player(self, class_id: str, name: str, actor_id: str = "hero", level: int = 1) -> Actor:
        """Instantiate a player actor from a class preset."""
        try:
            return create_player_from_class_id(class_id, name, self._content.classes, actor_id, level)
        except FactoryError as exc:
            raise BattleSetupError(str(exc)) from exc

    def start_battle(
        self,
        party: Sequence[Actor],
        enemy_ids: Sequence[str],
        *,
        level: int = 1,
        seed: int = 0,
        inventory: Iterable[InventoryEntry] | None = None,
    ) -> BattleState:
        """
        Build a battle between ``party`` and fresh instances of ``enemy_ids``.

        Repeated enemy ids get numbered instance ids (``slime``, ``slime_2``).
        Without an explicit ``inventory`` the party starts with the combined
        start items of its classes.
        """

        if not party:
            raise BattleSetupError("Cannot start a battle without party members.")
        if not enemy_ids:
            raise BattleSetupError("Cannot start a battle without enemies.")

        taken = [actor.id for actor in party]
        enemies: List[Actor] = []
        for enemy_id in enemy_ids:
            instance_id = make_instance_id(enemy_id, taken)
            try:
                enemy = create_enemy_from_id(enemy_id, self._content.enemies, level, instance_id)
            except FactoryError as exc:
                raise BattleSetupError(str(exc)) from exc
            taken.append(instance_id)
            enemies.append(enemy)

        if inventory is None:
            inventory = self._starting_inventory(party)
        try:
            state = create_battle_state(party, enemies, seed=seed, inventory=inventory)
        except ValueError as exc:
            raise BattleSetupError(str(exc)) from exc

        names = ", ".join(enemy.name for enemy in enemies)
        push_log(state, f"Battle start! {names} appeared.")
        push_log(state, "Turn 1")
        logger.debug("Started battle seed=%s party=%s enemies=%s", seed, taken[: len(party)], taken[len(party) :])
        return state

    def _starting_inventory(self, party: Sequence[Actor]) -> List[InventoryEntry]:
        entries: List[InventoryEntry] = []
        for actor in party:
            class_def = self._content.classes.get(actor.clazz or "")
            if class_def is None:
                continue
            for drop in class_def.start_items:
                for entry in entries:
                    if entry.item_id == drop.item_id:
                        entry.qty += drop.qty
                        break
                else:
                    entries.append(InventoryEntry(item_id=drop.item_id, qty=drop.qty))
        return entries

    # -----------------------
    # Actions
    # -----------------------
    def get_skill(self, skill_id: str) -> SkillDef:
        try:
            return self._content.skills[skill_id]
        except KeyError as exc:
            raise KeyError(f"Skill '{skill_id}' is not defined.") from exc

    def get_item(self, item_id: str) -> ItemDef:
        try:
            return self._content.items[item_id]
        except KeyError as exc:
            raise KeyError(f"Item '{item_id}' is not defined.") from exc

    def use_skill(
        self,
        state: BattleState,
        skill: str | SkillDef,
        actor_id: str,
        target_ids: Sequence[str] | None = None,
    ) -> UseResult:
        skill_def = self.get_skill(skill) if isinstance(skill, str) else skill
        return self._actions.use_skill(state, skill_def, actor_id, target_ids)

    def use_item(
        self,
        state: BattleState,
        item: str | ItemDef,
        actor_id: str,
        target_ids: Sequence[str] | None = None,
    ) -> UseResult:
        item_def = self.get_item(item) if isinstance(item, str) else item
        return self._actions.use_item(state, item_def, actor_id, target_ids)

    def attempt_flee(self, state: BattleState, actor_id: str) -> UseResult:
        return self._actions.attempt_flee(state, actor_id)

    def get_available_skills(self, state: BattleState, actor_id: str) -> List[SkillDef]:
        """Skills the actor knows that pass validation and currently have targets."""
        actor = state.actors.get(actor_id)
        if actor is None or actor.meta is None:
            return []
        available: List[SkillDef] = []
        for skill_id in actor.meta.skill_ids:
            skill = self._content.skills.get(skill_id)
            if skill is None:
                logger.warning("Actor %s references unknown skill '%s'", actor_id, skill_id)
                continue
            if self._is_ready(state, skill, actor_id):
                available.append(skill)
        return available

    def get_available_items(self, state: BattleState, actor_id: str) -> List[ItemDef]:
        """Items held in the shared inventory that the actor could use right now."""
        available: List[ItemDef] = []
        for entry in state.inventory:
            item = self._content.items.get(entry.item_id)
            if item is None or item_quantity(state, item.id) <= 0:
                continue
            if self._is_ready(state, item, actor_id):
                available.append(item)
        return available

    def _is_ready(self, state: BattleState, action: SkillDef | ItemDef, actor_id: str) -> bool:
        if self._actions.check_usable(state, action, actor_id) is not None:
            return False
        return bool(self._actions.collect_usable_targets(state, action, actor_id))

    # -----------------------
    # Turns
    # -----------------------
    def current_actor_id(self, state: BattleState) -> str | None:
        return self._turns.current_actor_id(state)

    def start_turn(self, state: BattleState) -> bool:
        return self._turns.start_turn(state)

    def end_turn(self, state: BattleState) -> None:
        self._turns.end_turn(state)
