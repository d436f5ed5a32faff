"""Turn order progression."""
from __future__ import annotations

import logging

from battlecore.domain.battle_models import BattleState, push_log
from battlecore.services.action_service import ActionExecutor
from battlecore.services.status_service import StatusEngine

logger = logging.getLogger(__name__)


class TurnController:
    """Owns the current-actor cursor and the per-turn bookkeeping around it."""

    def __init__(self, statuses: StatusEngine, actions: ActionExecutor) -> None:
        self._statuses = statuses
        self._actions = actions

    @staticmethod
    def current_actor_id(state: BattleState) -> str | None:
        return state.current_actor_id

    def start_turn(self, state: BattleState) -> bool:
        """Fire the incoming actor's turn-start hooks and report whether it may act."""
        if state.ended is not None:
            return False
        actor_id = state.current_actor_id
        actor = state.actors.get(actor_id) if actor_id else None
        if actor is None:
            return False
        if not actor.alive:
            push_log(state, f"{actor.name} cannot act.")
            return False

        self._statuses.tick_start_of_turn(state, actor.id)
        self._actions.finish_if_over(state)
        if state.ended is not None or not actor.alive:
            return False
        if actor.id in state.prevented:
            message = state.prevented[actor.id]
            push_log(state, message or f"{actor.name} is unable to act.")
            return False
        return True

    def end_turn(self, state: BattleState) -> None:
        """
        Close the current actor's turn and move the cursor to the next actor.

        Ticks the outgoing actor's statuses and taunt, clears its prevented
        flag, counts every cooldown down by one and logs ``Turn N`` when the
        order wraps. Does nothing once the battle has ended.
        """

        if state.ended is not None or not state.order:
            return
        outgoing = state.current_actor_id
        if outgoing is not None:
            self._statuses.tick_end_of_turn(state, outgoing)
            state.prevented.pop(outgoing, None)
            if state.ended is not None:
                self._actions.finish_if_over(state)
                return
        self._tick_cooldowns(state)

        state.current = (state.current + 1) % len(state.order)
        if state.current == 0:
            state.turn += 1
            push_log(state, f"Turn {state.turn}")

        self._actions.finish_if_over(state)

    @staticmethod
    def _tick_cooldowns(state: BattleState) -> None:
        for actor_id in list(state.cooldowns):
            remaining = {
                action_id: turns - 1 for action_id, turns in state.cooldowns[actor_id].items() if turns > 1
            }
            if remaining:
                state.cooldowns[actor_id] = remaining
            else:
                del state.cooldowns[actor_id]
