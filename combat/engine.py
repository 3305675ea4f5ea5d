# -*- coding: utf-8 -*-
"""
Combat engine
Facade over one encounter: validates player operations, sequences turns
and publishes every state change on the event bus.

The engine owns its CombatState exclusively; collaborators observe it
through events and never mutate it.
"""

from __future__ import annotations
from typing import Optional, TYPE_CHECKING
import logging
import random

from .card_resolver import CardResolver
from .config import CombatConfig, get_config
from .damage_system import DamageSystem
from .enums import CombatOutcome, CombatPhase
from .events import EventBus, EventType
from .exceptions import (
    CardLimitError,
    CardNotFoundError,
    CombatNotActiveError,
    InvalidActionError,
    InvalidPhaseError,
    InvalidTargetError,
    NoFreeMoveError,
)
from .phase_fsm import CombatPhaseFSM
from .state import CombatState
from .turn_manager import TurnManager
from .win_checker import WinConditionChecker

if TYPE_CHECKING:
    from .card import Card, Monster, MonsterAttack, RosterSnapshot

logger = logging.getLogger(__name__)


class CombatEngine:
    """
    Combat engine

    Usage::

        engine = CombatEngine()
        engine.start_combat(roster, monster_template)
        engine.play_card("quick_slash", target_position=0)
        engine.move_player(2)
        engine.end_player_turn()

    Rejected operations return False and publish an ERROR event without
    touching state. Calling an operation with no active combat raises
    CombatNotActiveError.
    """

    def __init__(
        self,
        event_bus: Optional[EventBus] = None,
        config: Optional[CombatConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            event_bus: bus to publish on (a new one by default)
            config: combat config (the shared config by default)
            rng: random source for shuffles; inject a seeded one for replays
        """
        self._config: CombatConfig = config or get_config()
        self._event_bus: EventBus = event_bus or EventBus(max_history=self._config.event_history)
        self._rng: random.Random = rng or random.Random()
        self._state: Optional[CombatState] = None
        self._fsm: CombatPhaseFSM = CombatPhaseFSM()
        self.outcome: Optional[CombatOutcome] = None

        # subsystems
        self.damage_sys = DamageSystem(self)
        self.card_resolver = CardResolver(self, self.damage_sys)
        self.turn_manager = TurnManager(self, self.damage_sys)
        self.win_checker = WinConditionChecker(self)

    # ==================== Context ====================

    @property
    def state(self) -> CombatState:
        """The combat state; stays readable after combat ends"""
        if self._state is None:
            raise CombatNotActiveError(current_phase=self._fsm.current.name)
        return self._state

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def config(self) -> CombatConfig:
        return self._config

    @property
    def phase(self) -> CombatPhase:
        return self._fsm.current

    @property
    def is_active(self) -> bool:
        return self._state is not None and not self._fsm.is_over

    @property
    def is_over(self) -> bool:
        return self._fsm.is_over

    # ==================== Lifecycle ====================

    def start_combat(self, roster: RosterSnapshot, template: Monster) -> CombatState:
        """
        Start an encounter

        Builds the state from the roster and a clone of ``template``, draws
        the opening hand, reveals the first intention and opens the player's
        turn.

        Raises:
            InvalidPhaseError: a combat is already running on this engine
        """
        if self.is_active:
            raise InvalidPhaseError(
                "Combat already in progress",
                current_phase=self._fsm.current.name,
            )

        self._fsm = CombatPhaseFSM()
        self.outcome = None
        self._fsm.transition(CombatPhase.COMBAT_START)
        self._state = CombatState.initialize(roster, template, rng=self._rng, config=self._config)

        logger.info(
            "Combat started | monster=%s tier=%s health=%d player=%d/%d deck=%d",
            template.id, template.tier.value, self._state.monster.total_health,
            roster.health, roster.max_health, len(roster.deck),
        )

        self.draw_up_to_hand_size()
        self.reveal_monster_intention()
        self._event_bus.emit(EventType.COMBAT_STARTED, player=roster, monster=self._state.monster)
        self._fsm.transition(CombatPhase.PLAYER_TURN)
        return self._state

    def end_combat(self, outcome: CombatOutcome) -> None:
        """
        End the encounter

        The monster copy stays on the state so rewards can be read from it.
        Victory payloads carry the ids of the broken parts.
        """
        state = self.state
        if self._fsm.is_over:
            return
        self._fsm.transition(CombatPhase.COMBAT_END)
        self.outcome = outcome

        payload = {"result": outcome.value}
        if outcome is CombatOutcome.VICTORY:
            payload["broken_parts"] = [p.id for p in state.monster.broken_parts]

        logger.info(
            "Combat ended | result=%s turn=%d player_health=%d broken=%s",
            outcome.value, state.turn, state.player_health,
            [p.id for p in state.monster.broken_parts],
        )
        self._event_bus.emit(EventType.COMBAT_ENDED, **payload)

    # ==================== Drawing ====================

    def draw_cards(self, count: int) -> int:
        """
        Draw ``count`` cards, refilling the deck from the discard pile when
        it runs out

        Returns:
            Number of cards actually drawn
        """
        state = self.state
        drawn = 0
        for _ in range(count):
            result = state.draw_card()
            if result.reshuffled:
                logger.debug("Discard pile shuffled into deck | deck=%d", len(state.deck))
                self._event_bus.emit(EventType.DECK_SHUFFLED)
            if result.card is None:
                break
            drawn += 1
            self._event_bus.emit(EventType.CARD_DRAWN, card=result.card)
        return drawn

    def draw_up_to_hand_size(self) -> int:
        """Draw until the hand holds ``hand_size`` cards or nothing is left"""
        state = self.state
        drawn = 0
        while len(state.hand) < self._config.hand_size:
            if self.draw_cards(1) == 0:
                break
            drawn += 1
        return drawn

    def reveal_monster_intention(self) -> Optional[MonsterAttack]:
        """Publish the upcoming attack and reset the player's turn budget"""
        return self.turn_manager.reveal_intention()

    # ==================== Player operations ====================

    def play_card(self, card_id: str, target_position: Optional[int] = None) -> bool:
        """
        Play a card from hand

        Args:
            card_id: id of the card (the first matching hand instance is used)
            target_position: grid position for targeted cards

        Returns:
            Whether the card was played
        """
        state = self._require_player_turn()
        try:
            card = self._validate_play(card_id, target_position)
        except InvalidActionError as e:
            return self._reject(e)

        logger.info("Card played | card=%s target=%s", card.id, target_position)
        self._event_bus.emit(EventType.CARD_PLAYED, card=card, target_position=target_position)

        self.card_resolver.resolve(card, target_position)
        state.move_hand_to_discard(card.id)
        state.cards_played_this_turn += 1

        if self.win_checker.is_monster_defeated():
            self.end_combat(CombatOutcome.VICTORY)
        return True

    def move_player(self, position: int) -> bool:
        """
        Use the turn's free move

        Returns:
            Whether the player moved
        """
        state = self._require_player_turn()
        try:
            self._validate_position(position)
            if state.free_moves_left <= 0:
                raise NoFreeMoveError()
        except InvalidActionError as e:
            return self._reject(e)

        state.move_player(position)
        state.moves_made_this_turn += 1
        logger.debug("Free move | position=%d", position)
        self._event_bus.emit(EventType.PLAYER_MOVED, position=position, free=True)
        return True

    def discard_to_move(self, card_id: str, position: int) -> bool:
        """
        Discard a hand card to move

        Uses neither the card allowance nor the free move.

        Returns:
            Whether the player moved
        """
        state = self._require_player_turn()
        try:
            if not state.has_card_in_hand(card_id):
                raise CardNotFoundError(card_id=card_id)
            self._validate_position(position)
        except InvalidActionError as e:
            return self._reject(e)

        card = state.move_hand_to_discard(card_id)
        state.move_player(position)
        logger.debug("Discard to move | card=%s position=%d", card_id, position)
        self._event_bus.emit(EventType.CARD_DISCARDED, card=card)
        self._event_bus.emit(EventType.PLAYER_MOVED, position=position, free=False)
        return True

    def end_player_turn(self) -> bool:
        """
        End the player's turn and run the monster's

        Order: player turn-end effects, monster attack, monster-part
        turn-end effects, next turn, turn-start effects, draw, new
        intention. Stops as soon as the combat is decided.

        Returns:
            True once the turn has been processed
        """
        state = self._require_player_turn()
        tm = self.turn_manager

        tm.process_player_turn_end()
        if self._check_combat_end():
            return True

        self._fsm.transition(CombatPhase.MONSTER_TURN)
        if not tm.execute_monster_turn():
            self.end_combat(CombatOutcome.DEFEAT)
            return True

        tm.process_monster_turn_end()
        if self._check_combat_end():
            return True

        tm.begin_next_turn()
        tm.process_turn_start()
        if self._check_combat_end():
            return True

        self.draw_up_to_hand_size()
        tm.reveal_intention()
        self._fsm.transition(CombatPhase.PLAYER_TURN)

        self._event_bus.emit(
            EventType.TURN_ENDED,
            current_turn=state.turn,
            player_cards_allowed=state.player_card_allowance,
        )
        return True

    # ==================== Internals ====================

    def _require_player_turn(self) -> CombatState:
        state = self.state
        if self._fsm.is_over:
            raise CombatNotActiveError("Combat has ended", current_phase=self._fsm.current.name)
        if not self._fsm.can_act():
            raise InvalidPhaseError(
                "Not the player's turn",
                current_phase=self._fsm.current.name,
                expected_phase=CombatPhase.PLAYER_TURN.name,
            )
        return state

    def _validate_play(self, card_id: str, target_position: Optional[int]) -> Card:
        state = self.state
        index = state.find_in_hand(card_id)
        if index == -1:
            raise CardNotFoundError(card_id=card_id)
        if state.cards_played_this_turn >= state.player_card_allowance:
            raise CardLimitError(
                allowed=state.player_card_allowance,
                played=state.cards_played_this_turn,
            )

        card = state.hand[index]
        if card.needs_target and target_position is None:
            raise InvalidTargetError(f"{card.name} needs a target position", reason="missing")
        if target_position is not None:
            self._validate_position(target_position)
        return card

    def _validate_position(self, position: int) -> None:
        if not self._config.is_valid_position(position):
            raise InvalidTargetError(
                f"Position {position} is out of range",
                position=position,
                reason="out_of_range",
            )

    def _reject(self, error: InvalidActionError) -> bool:
        logger.info("Action rejected | %s", error)
        self._event_bus.emit(EventType.ERROR, message=error.message)
        return False

    def _check_combat_end(self) -> bool:
        info = self.win_checker.check_combat_over()
        if info.is_over:
            self.end_combat(info.outcome)
        return info.is_over
