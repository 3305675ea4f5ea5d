# -*- coding: utf-8 -*-
"""
Damage system
Computes and applies damage to monster parts and to the player.

Kept out of the engine so damage rules can be tested on their own.
"""

from __future__ import annotations
from typing import List, TYPE_CHECKING
from dataclasses import dataclass
import logging

from .events import EventType
from .status_effects import EffectKind

if TYPE_CHECKING:
    from .card import MonsterPart
    from .context import CombatContext
    from .status_effects import EffectSet

logger = logging.getLogger(__name__)


@dataclass
class PartDamageResult:
    """Outcome of damaging one part"""
    part: 'MonsterPart'
    damage: int                # damage applied to the part and to total health
    broke_part: bool           # this hit broke the part
    total_health: int          # monster total health afterwards


@dataclass
class PlayerDamageResult:
    """Outcome of a hit on the player"""
    raw_damage: int            # attack damage after weakness / resistance
    blocked: int               # absorbed by block
    damage: int                # health actually lost
    health: int                # player health afterwards


class DamageSystem:
    """
    Damage system

    Responsible for:
    - damage dealt by the player (part weakness, player buff)
    - damage taken by the player (weakness, resistance, block)
    - part breaks and total health bookkeeping
    """

    def __init__(self, ctx: 'CombatContext'):
        """
        Args:
            ctx: combat context
        """
        self.ctx = ctx

    # ==================== Player -> monster ====================

    def calculate_part_damage(self, base_damage: int, part: 'MonsterPart') -> int:
        """
        Damage a player attack deals to ``part``

        base + the part's weakness + the player's buff, floored at 0.
        """
        state = self.ctx.state
        return calculate_damage_with_modifiers(
            base_damage,
            [
                part.effects.magnitude(EffectKind.WEAKNESS),
                state.player_effects.magnitude(EffectKind.BUFF),
            ],
        )

    def damage_part(self, part: 'MonsterPart', damage: int) -> PartDamageResult:
        """
        Apply damage to a part and to the monster's total health

        The part's health and the total health are clamped at 0
        independently; total health goes down by the full damage even when
        the part had less health left. Emits PART_BROKEN (first break only)
        then MONSTER_DAMAGED.

        Args:
            part: target part
            damage: final damage

        Returns:
            PartDamageResult
        """
        monster = self.ctx.state.monster
        damage = max(0, damage)
        old_health = part.health

        broke = part.take_damage(damage)
        if broke:
            logger.info("Part broken | monster=%s part=%s", monster.id, part.id)
            self.ctx.event_bus.emit(EventType.PART_BROKEN, part=part)

        monster.total_health = max(0, monster.total_health - damage)

        logger.debug(
            "Part damaged | part=%s damage=%d health=%d→%d total=%d",
            part.id, damage, old_health, part.health, monster.total_health,
        )
        self.ctx.event_bus.emit(
            EventType.MONSTER_DAMAGED,
            part=part,
            damage=damage,
            total_health=monster.total_health,
        )
        return PartDamageResult(part, damage, broke, monster.total_health)

    def attack_part(self, part: 'MonsterPart', base_damage: int) -> PartDamageResult:
        """Compute and apply a player attack against one part"""
        return self.damage_part(part, self.calculate_part_damage(base_damage, part))

    # ==================== Monster -> player ====================

    def calculate_player_damage(self, base_damage: int) -> int:
        """
        Damage an attack deals to the player before block

        base + weakness - resistance. With an active resistance effect the
        result is floored at 1, so even a zero-damage hit lands one point.
        Otherwise it is floored at 0.
        """
        effects: 'EffectSet' = self.ctx.state.player_effects
        damage = base_damage + effects.magnitude(EffectKind.WEAKNESS)
        if effects.has(EffectKind.RESISTANCE):
            return max(1, damage - effects.magnitude(EffectKind.RESISTANCE))
        return max(0, damage)

    def hit_player(self, base_damage: int) -> PlayerDamageResult:
        """
        Resolve a monster hit on the player: modifiers, then block

        Emits PLAYER_DAMAGED. Block is not consumed here; the monster turn
        resets it afterwards.
        """
        state = self.ctx.state
        raw = self.calculate_player_damage(base_damage)
        after_block = max(0, raw - state.player_block)
        old_health = state.player_health
        state.damage_player(after_block)

        logger.info(
            "Player hit | raw=%d block=%d damage=%d health=%d→%d",
            raw, state.player_block, after_block, old_health, state.player_health,
        )
        self.ctx.event_bus.emit(EventType.PLAYER_DAMAGED, damage=after_block)
        return PlayerDamageResult(
            raw_damage=raw,
            blocked=raw - after_block,
            damage=after_block,
            health=state.player_health,
        )

    def damage_player_directly(self, damage: int) -> int:
        """
        Damage that ignores block and modifiers (damage over time)

        Returns:
            Health lost
        """
        state = self.ctx.state
        before = state.player_health
        state.damage_player(damage)
        lost = before - state.player_health
        self.ctx.event_bus.emit(EventType.PLAYER_DAMAGED, damage=lost)
        return lost


# ==================== Helpers ====================


def calculate_damage_with_modifiers(
    base_damage: int,
    modifiers: List[int]
) -> int:
    """
    Damage with additive modifiers

    Args:
        base_damage: base damage
        modifiers: modifier values

    Returns:
        Final damage (at least 0)
    """
    total = base_damage + sum(modifiers)
    return max(0, total)
