"""Tests for combat.state and the structural monster clone."""

import random

from combat.card import clone_monster
from combat.enums import AttackKind, MonsterTier
from combat.state import CombatState
from combat.status_effects import create_stun_effect

from tests.factories import (
    make_attack,
    make_card,
    make_config,
    make_guard,
    make_monster,
    make_roster,
)


def _state(deck=None, monster=None, seed=3) -> CombatState:
    deck = deck if deck is not None else [make_card(f"card_{i}") for i in range(10)]
    return CombatState.initialize(
        make_roster(deck), monster or make_monster(),
        rng=random.Random(seed), config=make_config(),
    )


class TestInitialize:
    def test_fresh_counters(self):
        state = _state()
        assert state.turn == 1
        assert state.player_position == 1
        assert state.player_block == 0
        assert state.cards_played_this_turn == 0
        assert state.moves_made_this_turn == 0
        assert state.hand == []
        assert state.discard == []
        assert len(state.deck) == 10

    def test_first_intention_is_first_attack(self):
        first = make_attack("first")
        state = _state(monster=make_monster(pattern=[first, make_attack("second")]))
        assert state.attack_index == 0
        assert state.current_attack is first

    def test_deck_is_shuffled_copy(self):
        deck = [make_card(f"card_{i}") for i in range(10)]
        roster = make_roster(deck)
        state = CombatState.initialize(roster, make_monster(), rng=random.Random(1))
        assert sorted(c.id for c in state.deck) == sorted(c.id for c in deck)
        assert list(roster.deck) == deck

    def test_same_seed_same_order(self):
        a = _state(seed=42)
        b = _state(seed=42)
        assert [c.id for c in a.deck] == [c.id for c in b.deck]

    def test_monster_is_cloned(self):
        template = make_monster()
        state = _state(monster=template)
        state.monster.parts[0].take_damage(50)
        state.monster.total_health = 0
        assert template.parts[0].health == 20
        assert template.parts[0].broken is False
        assert template.total_health == 65


class TestClone:
    def test_clone_gets_fresh_effect_sets(self):
        template = make_monster()
        template.parts[0].effects.apply(create_stun_effect())
        clone = clone_monster(template)
        assert len(clone.parts[0].effects) == 0
        assert clone.parts[0] is not template.parts[0]
        assert clone.attack_pattern == template.attack_pattern


class TestDrawing:
    def test_draw_from_tail(self):
        state = _state()
        tail = state.deck[-1]
        result = state.draw_card()
        assert result.card is tail
        assert result.reshuffled is False
        assert state.hand == [tail]

    def test_empty_deck_reshuffles_discard(self):
        state = _state()
        state.discard.extend(state.deck)
        state.deck.clear()
        result = state.draw_card()
        assert result.reshuffled is True
        assert result.card is not None
        assert len(state.deck) == 9
        assert state.discard == []

    def test_both_empty_is_noop(self):
        state = _state(deck=[])
        result = state.draw_card()
        assert result.card is None
        assert state.total_cards == 0

    def test_move_hand_to_discard_by_first_match(self):
        state = _state(deck=[make_guard(), make_guard(), make_card("strike")])
        for _ in range(3):
            state.draw_card()
        moved = state.move_hand_to_discard("guard")
        assert moved.id == "guard"
        assert [c.id for c in state.hand].count("guard") == 1
        assert state.total_cards == 3
        assert state.move_hand_to_discard("missing") is None

    def test_find_in_hand(self):
        state = _state(deck=[make_card("a")])
        state.draw_card()
        assert state.find_in_hand("a") == 0
        assert state.find_in_hand("b") == -1
        assert state.has_card_in_hand("a")


class TestPositions:
    def test_large_monster_positions_map_to_parts(self):
        state = _state()
        assert [state.part_at_position(i).id for i in range(3)] == ["head", "body", "tail"]
        assert state.part_at_position(3) is None

    def test_small_monster_every_position_is_first_part(self):
        state = _state(monster=make_monster(health=(12,), tier=MonsterTier.SMALL))
        assert {state.part_at_position(i).id for i in range(3)} == {"head"}


class TestAttackCycling:
    def test_pattern_cycles(self):
        pattern = [make_attack("a"), make_attack("b"), make_attack("c")]
        state = _state(monster=make_monster(pattern=pattern))
        seen = [state.advance_attack().id for _ in range(4)]
        assert seen == ["b", "c", "a", "b"]

    def test_landing_on_charge_selects_followup(self):
        pattern = [
            make_attack("basic_attack"),
            make_attack("charge", damage=0, targets=(), kind=AttackKind.CHARGE,
                        followup="charged_attack"),
            make_attack("sweep"),
            make_attack("charged_attack", damage=12, kind=AttackKind.HEAVY),
        ]
        state = _state(monster=make_monster(pattern=pattern))
        assert state.peek_next_attack().id == "charged_attack"
        assert state.advance_attack().id == "charged_attack"
        assert state.attack_index == 3
        assert state.advance_attack().id == "basic_attack"

    def test_charge_at_start_runs_before_followup(self):
        pattern = [
            make_attack("charge", damage=0, targets=(), kind=AttackKind.CHARGE,
                        followup="charged_attack"),
            make_attack("basic"),
            make_attack("charged_attack", damage=12, kind=AttackKind.HEAVY),
        ]
        state = _state(monster=make_monster(pattern=pattern))
        assert state.current_attack.id == "charge"
        assert state.advance_attack().id == "basic"
        assert state.advance_attack().id == "charged_attack"
        # wrapping around lands on the charge again
        assert state.advance_attack().id == "charged_attack"
        assert state.attack_index == 2

    def test_charge_with_missing_followup_cycles(self):
        pattern = [
            make_attack("charge", kind=AttackKind.CHARGE, followup="not_here"),
            make_attack("basic"),
        ]
        state = _state(monster=make_monster(pattern=pattern))
        assert state.advance_attack().id == "basic"
        assert state.advance_attack().id == "charge"


class TestPlayerHelpers:
    def test_damage_clamped(self):
        state = _state()
        assert state.damage_player(80) == 0
        assert state.is_player_defeated

    def test_heal_clamped_to_max(self):
        state = _state()
        state.player_health = 48
        assert state.heal_player(4) == 2
        assert state.player_health == 50

    def test_stunned_if_any_part_stunned(self):
        state = _state()
        assert state.is_monster_stunned is False
        state.monster.parts[2].effects.apply(create_stun_effect())
        assert state.is_monster_stunned is True

    def test_turn_budget(self):
        state = _state()
        state.player_card_allowance = 2
        state.cards_played_this_turn = 1
        state.moves_made_this_turn = 1
        assert state.cards_left_this_turn == 1
        assert state.free_moves_left == 0
        state.reset_turn_counters()
        assert state.free_moves_left == 1
