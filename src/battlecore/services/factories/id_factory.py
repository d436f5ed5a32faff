"""Utilities for creating deterministic instance identifiers."""
from __future__ import annotations

from typing import Collection


def make_instance_id(prefix: str, taken: Collection[str]) -> str:
    """Return ``prefix`` or the first free ``prefix_N`` (N >= 2) not in ``taken``."""
    if prefix not in taken:
        return prefix
    suffix = 2
    while f"{prefix}_{suffix}" in taken:
        suffix += 1
    return f"{prefix}_{suffix}"
