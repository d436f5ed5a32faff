"""Battle controllers."""

from .battle_controller import AvailableActions, BattleAction, BattleController

__all__ = ["AvailableActions", "BattleAction", "BattleController"]
