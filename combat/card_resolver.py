"""Card resolver

Resolves a played card by kind:
- attack: damage the targeted part(s), apply the card's effects, grant block
- defense: grant block
- movement: reposition the player
- special: heal and / or a self effect

followed by the card's extra draws and its status-on-hit.

Depends only on the CombatContext protocol and the DamageSystem.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .enums import CardKind, TargetMode, TargetType
from .events import EventType
from .status_effects import EffectKind, StatusEffect, on_hit_effect

if TYPE_CHECKING:
    from .card import Card, CardEffect, MonsterPart
    from .context import CombatContext
    from .damage_system import DamageSystem

logger = logging.getLogger(__name__)


class CardResolver:
    """Card resolver: applies one card's effects to the combat state."""

    def __init__(self, ctx: CombatContext, damage_sys: DamageSystem) -> None:
        self.ctx = ctx
        self.damage_sys = damage_sys
        self._handlers = {
            CardKind.ATTACK: self.resolve_attack,
            CardKind.DEFENSE: self.resolve_defense,
            CardKind.MOVEMENT: self.resolve_movement,
            CardKind.SPECIAL: self.resolve_special,
        }

    def resolve(self, card: Card, target_position: int | None = None) -> None:
        """Apply ``card``; the caller has already validated the target"""
        handler = self._handlers[card.kind]
        handler(card, target_position)

        if card.draw_count > 0:
            drawn = self.ctx.draw_cards(card.draw_count)
            logger.debug("Card draw | card=%s requested=%d drawn=%d",
                         card.id, card.draw_count, drawn)

        if card.status_on_hit is not None:
            self.apply_status_on_hit(card, target_position)

    # ==================== Targets ====================

    def target_parts(self, card: Card, target_position: int | None) -> list[MonsterPart]:
        """Parts a card affects: every part for ``all``, else the part at the target"""
        state = self.ctx.state
        if card.target_mode is TargetMode.ALL:
            return list(state.monster.parts)
        if card.target_mode is TargetMode.SELF or target_position is None:
            return []
        part = state.part_at_position(target_position)
        return [part] if part is not None else []

    # ==================== Card kinds ====================

    def resolve_attack(self, card: Card, target_position: int | None) -> None:
        targets = self.target_parts(card, target_position)
        for part in targets:
            self.damage_sys.attack_part(part, card.damage)

        for card_effect in card.applied_effects:
            self.apply_monster_effect(card_effect, targets)

        if card.block > 0:
            self._grant_block(card.block)

    def resolve_defense(self, card: Card, target_position: int | None) -> None:
        if card.block > 0:
            self._grant_block(card.block)

    def resolve_movement(self, card: Card, target_position: int | None) -> None:
        if target_position is None:
            return
        self.ctx.state.move_player(target_position)
        logger.debug("Player moved by card | card=%s position=%d", card.id, target_position)
        self.ctx.event_bus.emit(EventType.PLAYER_MOVED, position=target_position, free=False)

    def resolve_special(self, card: Card, target_position: int | None) -> None:
        state = self.ctx.state
        if card.heal > 0:
            restored = state.heal_player(card.heal)
            logger.debug("Player healed | card=%s heal=%d restored=%d",
                         card.id, card.heal, restored)
            self.ctx.event_bus.emit(EventType.PLAYER_HEALED, amount=card.heal)

        if card.self_effect is not None:
            self.apply_player_effect(card.self_effect)

    # ==================== Effects ====================

    def apply_monster_effect(self, card_effect: CardEffect, parts: list[MonsterPart]) -> None:
        """Put a card's effect on the hit parts (replacing any of the same kind)"""
        kind = _effect_kind(card_effect.kind)
        if kind is None:
            logger.warning("Unknown card effect ignored | kind=%s", card_effect.kind)
            return
        for part in parts:
            effect = StatusEffect(kind, card_effect.duration, card_effect.value)
            part.effects.apply(effect)
            logger.debug("Monster effect applied | part=%s effect=%s", part.id, effect)
            self.ctx.event_bus.emit(EventType.MONSTER_EFFECT_APPLIED, effect=effect, part=part)

    def apply_player_effect(self, card_effect: CardEffect) -> None:
        """Self effect on the player; only ``buff`` has behaviour"""
        if _effect_kind(card_effect.kind) is not EffectKind.BUFF:
            logger.info("Self effect has no behaviour | kind=%s", card_effect.kind)
            return
        effect = StatusEffect(EffectKind.BUFF, card_effect.duration, card_effect.value)
        self.ctx.state.player_effects.apply(effect)
        logger.debug("Player effect applied | effect=%s", effect)
        self.ctx.event_bus.emit(EventType.PLAYER_EFFECT_APPLIED, effect=effect)

    def apply_status_on_hit(self, card: Card, target_position: int | None) -> None:
        """Apply the card's on-hit status (fixed defaults) to what it targets"""
        if on_hit_effect(card.status_on_hit) is None:
            return
        for part in self.target_parts(card, target_position):
            # fresh instance per part
            effect = on_hit_effect(card.status_on_hit)
            part.effects.apply(effect)
            logger.debug("Status applied | part=%s effect=%s", part.id, effect)
            self.ctx.event_bus.emit(
                EventType.STATUS_EFFECT_APPLIED,
                effect=effect,
                target_type=TargetType.MONSTER.value,
                part_id=part.id,
            )

    def _grant_block(self, amount: int) -> None:
        state = self.ctx.state
        state.player_block += amount
        logger.debug("Block gained | amount=%d total=%d", amount, state.player_block)
        self.ctx.event_bus.emit(EventType.PLAYER_BLOCKED, block=amount)


def _effect_kind(kind: str) -> EffectKind | None:
    try:
        return EffectKind(kind)
    except ValueError:
        return None
