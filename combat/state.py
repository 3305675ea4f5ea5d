"""Combat state
The mutable record of one encounter: player resources, card piles,
the owned monster copy, the current intention and the turn counters.

Only the combat engine mutates a ``CombatState``.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from .card import Card, Monster, MonsterAttack, MonsterPart, RosterSnapshot, clone_monster
from .config import CombatConfig, get_config
from .enums import AttackKind, WeaponType
from .status_effects import EffectKind, EffectSet

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DrawResult:
    """Outcome of a single draw"""

    card: Card | None
    reshuffled: bool = False


@dataclass
class CombatState:
    """Aggregate root for one combat encounter

    A card instance is always in exactly one of ``deck``, ``hand`` or
    ``discard``; the three piles together hold a constant number of cards.
    """

    monster: Monster
    player_health: int
    player_max_health: int
    weapon: WeaponType | None = None
    player_block: int = 0
    player_position: int = 1
    deck: list[Card] = field(default_factory=list)
    hand: list[Card] = field(default_factory=list)
    discard: list[Card] = field(default_factory=list)
    player_effects: EffectSet = field(default_factory=EffectSet)

    attack_index: int = 0
    current_attack: MonsterAttack | None = None

    turn: int = 1
    player_card_allowance: int = 3
    cards_played_this_turn: int = 0
    moves_made_this_turn: int = 0

    rng: random.Random = field(default_factory=random.Random, repr=False)
    config: CombatConfig = field(default_factory=get_config, repr=False)

    @classmethod
    def initialize(
        cls,
        roster: RosterSnapshot,
        template: Monster,
        rng: random.Random | None = None,
        config: CombatConfig | None = None,
    ) -> CombatState:
        """Build a fresh state for one encounter

        Clones the monster, shuffles a copy of the roster deck and resets
        every counter. The first intention is attack 0 of the pattern.
        """
        config = config or get_config()
        monster = clone_monster(template)
        state = cls(
            monster=monster,
            player_health=roster.health,
            player_max_health=roster.max_health,
            weapon=roster.weapon,
            player_position=config.start_position,
            deck=list(roster.deck),
            player_card_allowance=config.default_card_allowance,
            rng=rng or random.Random(),
            config=config,
        )
        state.shuffle_deck()
        state.attack_index = 0
        state.current_attack = monster.attack_pattern[0] if monster.attack_pattern else None
        logger.debug(
            "Combat state initialized | monster=%s deck=%d health=%d/%d",
            monster.id, len(state.deck), state.player_health, state.player_max_health,
        )
        return state

    # ==================== Card piles ====================

    @property
    def total_cards(self) -> int:
        return len(self.deck) + len(self.hand) + len(self.discard)

    def shuffle_deck(self) -> None:
        """Fisher-Yates shuffle of the draw pile"""
        deck = self.deck
        for i in range(len(deck) - 1, 0, -1):
            j = self.rng.randint(0, i)
            deck[i], deck[j] = deck[j], deck[i]

    def shuffle_discard_into_deck(self) -> None:
        """Move the whole discard pile into the deck and shuffle"""
        self.deck.extend(self.discard)
        self.discard.clear()
        self.shuffle_deck()

    def draw_card(self) -> DrawResult:
        """Draw one card from the deck tail into the hand

        An empty deck is refilled from the discard pile first; with both
        empty this is a no-op.
        """
        reshuffled = False
        if not self.deck and self.discard:
            self.shuffle_discard_into_deck()
            reshuffled = True
        if not self.deck:
            return DrawResult(None, reshuffled)
        card = self.deck.pop()
        self.hand.append(card)
        return DrawResult(card, reshuffled)

    def find_in_hand(self, card_id: str) -> int:
        """Position of the first hand card with ``card_id``, or -1"""
        for i, card in enumerate(self.hand):
            if card.id == card_id:
                return i
        return -1

    def has_card_in_hand(self, card_id: str) -> bool:
        return self.find_in_hand(card_id) != -1

    def move_hand_to_discard(self, card_id: str) -> Card | None:
        """Move one hand card to the discard pile"""
        index = self.find_in_hand(card_id)
        if index == -1:
            return None
        card = self.hand.pop(index)
        self.discard.append(card)
        return card

    # ==================== Monster ====================

    def part_at_position(self, position: int) -> MonsterPart | None:
        """Resolve a grid position to a monster part

        Large, elite and boss monsters map positions 0/1/2 to parts 0/1/2.
        Every other shape resolves all positions to the first part.
        """
        parts = self.monster.parts
        if not parts:
            return None
        if self.monster.tier.has_positional_parts:
            if 0 <= position < len(parts) and position < self.config.position_count:
                return parts[position]
            return None
        return parts[0]

    @property
    def is_monster_stunned(self) -> bool:
        return any(part.effects.has(EffectKind.STUN) for part in self.monster.parts)

    def _next_attack_index(self) -> int:
        pattern = self.monster.attack_pattern
        index = (self.attack_index + 1) % len(pattern)
        selected = pattern[index]
        if selected.kind is AttackKind.CHARGE and selected.followup_attack_id:
            followup = self.monster.find_attack_index(selected.followup_attack_id)
            if followup != -1:
                return followup
        return index

    def peek_next_attack(self) -> MonsterAttack | None:
        """The attack ``advance_attack`` would select next"""
        if not self.monster.attack_pattern:
            return None
        return self.monster.attack_pattern[self._next_attack_index()]

    def advance_attack(self) -> MonsterAttack | None:
        """Move the intention pointer one step around the pattern

        Landing on a charge attack re-targets its followup in the same step
        when the pattern contains it.
        """
        if not self.monster.attack_pattern:
            return None
        self.attack_index = self._next_attack_index()
        self.current_attack = self.monster.attack_pattern[self.attack_index]
        return self.current_attack

    # ==================== Player ====================

    def damage_player(self, amount: int) -> int:
        """Reduce player health (clamped at 0); returns the new health"""
        self.player_health = max(0, self.player_health - max(0, amount))
        return self.player_health

    def heal_player(self, amount: int) -> int:
        """Restore health up to the max; returns the amount restored"""
        before = self.player_health
        self.player_health = min(self.player_max_health, self.player_health + max(0, amount))
        return self.player_health - before

    def move_player(self, position: int) -> None:
        self.player_position = position

    def reset_turn_counters(self) -> None:
        self.cards_played_this_turn = 0
        self.moves_made_this_turn = 0

    @property
    def free_moves_left(self) -> int:
        return max(0, self.config.free_moves_per_turn - self.moves_made_this_turn)

    @property
    def cards_left_this_turn(self) -> int:
        return max(0, self.player_card_allowance - self.cards_played_this_turn)

    @property
    def is_player_defeated(self) -> bool:
        return self.player_health <= 0
