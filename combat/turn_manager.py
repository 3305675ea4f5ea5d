"""Turn manager
Runs the turn-boundary steps of a combat: status effect triggers and ticks
at turn end / turn start, and the monster's attack.

Split out of CombatEngine so turn sequencing can be tested on its own.
Victory / defeat checks between steps stay with the engine.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .enums import TargetType
from .events import EventType
from .status_effects import TriggerPhase, resolve_effect_trigger

if TYPE_CHECKING:
    from .card import MonsterAttack, MonsterPart
    from .context import CombatContext
    from .damage_system import DamageSystem

logger = logging.getLogger(__name__)


class TurnManager:
    """Turn manager

    Responsible for:
    - player / monster-part effect triggers at turn end and turn start
    - effect duration ticking
    - the monster turn (stun check, damage, block reset, intention advance)
    """

    def __init__(self, ctx: CombatContext, damage_sys: DamageSystem):
        """
        Args:
            ctx: combat context
            damage_sys: damage system used for effect and attack damage
        """
        self.ctx = ctx
        self.damage_sys = damage_sys

    # ==================== Turn end ====================

    def process_player_turn_end(self) -> None:
        """Fire the player's turn-end triggers, then tick player effects"""
        self._trigger_player_effects(TriggerPhase.TURN_END)
        expired = self.ctx.state.player_effects.tick()
        for effect in expired:
            logger.debug("Player effect expired | kind=%s", effect.kind.value)

    def process_monster_turn_end(self) -> None:
        """Fire each part's turn-end triggers, then tick that part's effects"""
        for part in self.ctx.state.monster.parts:
            self._trigger_part_effects(part, TriggerPhase.TURN_END)
            expired = part.effects.tick()
            for effect in expired:
                logger.debug("Part effect expired | part=%s kind=%s",
                             part.id, effect.kind.value)

    # ==================== Turn start ====================

    def begin_next_turn(self) -> int:
        """Advance the turn counter; returns the new turn number"""
        state = self.ctx.state
        state.turn += 1
        logger.debug("Turn %d begins", state.turn)
        return state.turn

    def process_turn_start(self) -> None:
        """Fire turn-start triggers: player first, then each part"""
        self._trigger_player_effects(TriggerPhase.TURN_START)
        for part in self.ctx.state.monster.parts:
            self._trigger_part_effects(part, TriggerPhase.TURN_START)

    # ==================== Monster turn ====================

    def execute_monster_turn(self) -> bool:
        """Resolve the current monster attack

        A stunned monster (any part carrying stun) skips its damage. If the
        attack leaves the player at 0 health this returns False right away,
        without resetting block or advancing the intention.

        Returns:
            False if the player was defeated
        """
        state = self.ctx.state
        attack = state.current_attack
        if attack is None:
            return True

        if state.is_monster_stunned:
            logger.info("Monster stunned, attack skipped | attack=%s", attack.id)
            self.ctx.event_bus.emit(EventType.MONSTER_STUNNED)
        elif attack.targets(state.player_position):
            self.damage_sys.hit_player(attack.damage)
            if state.is_player_defeated:
                return False
        else:
            logger.debug("Attack missed | attack=%s position=%d",
                         attack.id, state.player_position)

        state.player_block = 0
        next_attack = state.advance_attack()
        logger.debug("Monster intention advanced | next=%s",
                     next_attack.id if next_attack else None)
        return True

    def reveal_intention(self) -> MonsterAttack | None:
        """Publish the current attack and open the player's turn budget

        Sets the card allowance from the attack and resets the per-turn
        counters.
        """
        state = self.ctx.state
        attack = state.current_attack
        if attack is None:
            return None
        state.player_card_allowance = attack.player_card_allowance
        state.reset_turn_counters()
        logger.debug("Intention revealed | attack=%s allowance=%d",
                     attack.id, attack.player_card_allowance)
        self.ctx.event_bus.emit(EventType.MONSTER_INTENTION_REVEALED, attack=attack)
        return attack

    # ==================== Triggers ====================

    def _trigger_player_effects(self, phase: TriggerPhase) -> None:
        for effect in self.ctx.state.player_effects:
            delta = resolve_effect_trigger(effect.kind, phase, effect.magnitude)
            if delta is None:
                continue
            self.damage_sys.damage_player_directly(delta.damage)
            logger.debug("Player effect triggered | kind=%s damage=%d",
                         effect.kind.value, delta.damage)
            self.ctx.event_bus.emit(
                EventType.STATUS_EFFECT_ACTIVATED,
                effect_type=effect.kind.value,
                effect_name=effect.name,
                target=TargetType.PLAYER.value,
            )

    def _trigger_part_effects(self, part: MonsterPart, phase: TriggerPhase) -> None:
        for effect in part.effects:
            delta = resolve_effect_trigger(effect.kind, phase, effect.magnitude)
            if delta is None:
                continue
            self.damage_sys.damage_part(part, delta.damage)
            logger.debug("Part effect triggered | part=%s kind=%s damage=%d",
                         part.id, effect.kind.value, delta.damage)
            self.ctx.event_bus.emit(
                EventType.STATUS_EFFECT_ACTIVATED,
                effect_type=effect.kind.value,
                effect_name=effect.name,
                target=TargetType.MONSTER.value,
                part_id=part.id,
            )
