"""Service layer exports."""

from .errors import BattleSetupError, FactoryError
from .battle_service import BattleService

__all__ = [
    "BattleService",
    "BattleSetupError",
    "FactoryError",
]
