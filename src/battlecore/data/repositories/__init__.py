"""Repository exports."""

from .balance_repo import BalanceRepository
from .classes_repo import ClassesRepository
from .enemies_repo import EnemiesRepository
from .items_repo import ItemsRepository
from .skills_repo import SkillsRepository
from .statuses_repo import StatusesRepository

__all__ = [
    "BalanceRepository",
    "ClassesRepository",
    "EnemiesRepository",
    "ItemsRepository",
    "SkillsRepository",
    "StatusesRepository",
]
