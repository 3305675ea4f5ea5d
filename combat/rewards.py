"""Encounter rewards
What a won encounter yields: harvested materials per part and gold per tier.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .card import Monster
from .enums import MonsterTier

BROKEN_PART_YIELD = 2
INTACT_PART_YIELD = 1

GOLD_BY_TIER: dict[MonsterTier, int] = {
    MonsterTier.SMALL: 25,
    MonsterTier.LARGE: 50,
    MonsterTier.ELITE: 75,
    MonsterTier.BOSS: 100,
}


@dataclass(slots=True)
class EncounterReward:
    """Rewards for one defeated monster"""

    monster_id: str
    gold: int
    materials: dict[str, int] = field(default_factory=dict)


def material_key(monster_id: str, part_id: str) -> str:
    """Inventory key of a harvested material"""
    return f"{monster_id}:{part_id}"


def harvest_materials(monster: Monster) -> dict[str, int]:
    """Materials per part id: broken parts yield 2, intact parts 1"""
    return {
        part.id: BROKEN_PART_YIELD if part.broken else INTACT_PART_YIELD
        for part in monster.parts
    }


def gold_for_tier(tier: MonsterTier | str) -> int:
    if isinstance(tier, str):
        tier = MonsterTier(tier)
    return GOLD_BY_TIER[tier]


def compute_reward(monster: Monster) -> EncounterReward:
    """Read the reward off a defeated monster (broken flags included)"""
    return EncounterReward(
        monster_id=monster.id,
        gold=gold_for_tier(monster.tier),
        materials=harvest_materials(monster),
    )
