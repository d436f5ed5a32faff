"""Runtime entity exports."""

from .actor import Actor, ActorMeta, ItemDrop, StatusInstance
from .stats import RESOURCE_ATTRS, STAT_ATTRS, Stats

__all__ = [
    "Actor",
    "ActorMeta",
    "ItemDrop",
    "RESOURCE_ATTRS",
    "STAT_ATTRS",
    "StatusInstance",
    "Stats",
]
