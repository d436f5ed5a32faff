"""Balance table repository."""
from __future__ import annotations

from typing import Dict

from battlecore.data.errors import DataValidationError
from battlecore.data.repositories.base import RepositoryBase
from battlecore.domain.defs import Balance

from .parsing import optional, require_mapping, require_number, require_number_map

BALANCE_KEY = "balance"

_NUMERIC_FIELDS = {
    "BASE_HIT": "base_hit",
    "BASE_CRIT": "base_crit",
    "CRIT_MULT": "crit_mult",
    "DODGE_FLOOR": "dodge_floor",
    "HIT_CEIL": "hit_ceil",
    "FLEE_BASE": "flee_base",
}


class BalanceRepository(RepositoryBase[Balance]):
    """Loads the single combat balance table; missing keys keep their defaults."""

    def __init__(self, base_path=None) -> None:
        super().__init__("balance.json", base_path)

    def load(self) -> Balance:
        return self.get(BALANCE_KEY)

    def _build(self, raw: dict[str, object]) -> Dict[str, Balance]:
        context = "balance"
        balance = Balance()
        for key, attr in _NUMERIC_FIELDS.items():
            value = optional(raw, key, require_number, context)
            if value is not None:
                setattr(balance, attr, float(value))
        if raw.get("ELEMENT_MATRIX") is not None:
            matrix = require_mapping(raw["ELEMENT_MATRIX"], f"{context}.ELEMENT_MATRIX")
            balance.element_matrix = {
                str(element): require_number_map(row, f"{context}.ELEMENT_MATRIX.{element}")
                for element, row in matrix.items()
            }
        if raw.get("RESISTS_BY_TAG") is not None:
            balance.resists_by_tag = require_number_map(raw["RESISTS_BY_TAG"], f"{context}.RESISTS_BY_TAG")
        if balance.dodge_floor > balance.hit_ceil:
            raise DataValidationError("balance.DODGE_FLOOR must not exceed balance.HIT_CEIL.")
        return {BALANCE_KEY: balance}
