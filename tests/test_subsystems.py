"""
Subsystem unit tests
Covers TurnManager and WinConditionChecker against a mock context
"""

import random
from unittest.mock import MagicMock

import pytest

from combat.damage_system import DamageSystem
from combat.enums import CombatOutcome
from combat.events import EventBus, EventType
from combat.state import CombatState
from combat.status_effects import create_burning_effect, create_stun_effect
from combat.turn_manager import TurnManager
from combat.win_checker import WinConditionChecker

from tests.factories import EventRecorder, make_attack, make_card, make_config, make_monster, make_roster

# ==================== Shared fixtures ====================


@pytest.fixture
def ctx():
    """Mock context with a real state and bus"""
    context = MagicMock()
    pattern = [make_attack("a", allowance=2), make_attack("b", targets=(2,), allowance=1)]
    context.state = CombatState.initialize(
        make_roster([make_card()]), make_monster(pattern=pattern),
        rng=random.Random(0), config=make_config(),
    )
    context.event_bus = EventBus()
    return context


@pytest.fixture
def recorder(ctx):
    return EventRecorder(ctx.event_bus)


@pytest.fixture
def turns(ctx):
    return TurnManager(ctx, DamageSystem(ctx))


# ==================== TurnManager ====================


class TestTurnManager:
    def test_reveal_sets_allowance_and_resets_counters(self, ctx, turns, recorder):
        ctx.state.cards_played_this_turn = 2
        ctx.state.moves_made_this_turn = 1

        attack = turns.reveal_intention()

        assert attack.id == "a"
        assert ctx.state.player_card_allowance == 2
        assert ctx.state.cards_played_this_turn == 0
        assert ctx.state.free_moves_left == 1
        assert recorder.of(EventType.MONSTER_INTENTION_REVEALED)[0]["attack"] is attack

    def test_monster_turn_hits_and_advances(self, ctx, turns):
        ctx.state.player_block = 2
        assert turns.execute_monster_turn() is True
        assert ctx.state.player_health == 47
        assert ctx.state.player_block == 0
        assert ctx.state.current_attack.id == "b"

    def test_missed_attack_still_advances(self, ctx, turns, recorder):
        ctx.state.advance_attack()
        turns.execute_monster_turn()
        assert ctx.state.player_health == 50
        assert recorder.of(EventType.PLAYER_DAMAGED) == []
        assert ctx.state.current_attack.id == "a"

    def test_stunned_monster_skips_damage(self, ctx, turns, recorder):
        ctx.state.monster.parts[1].effects.apply(create_stun_effect())
        assert turns.execute_monster_turn() is True
        assert ctx.state.player_health == 50
        assert recorder.types == [EventType.MONSTER_STUNNED]

    def test_lethal_attack_stops_early(self, ctx, turns):
        ctx.state.player_block = 1
        ctx.state.player_health = 4
        assert turns.execute_monster_turn() is False
        assert ctx.state.player_block == 1
        assert ctx.state.current_attack.id == "a"

    def test_part_burning_fires_then_ticks(self, ctx, turns, recorder):
        tail = ctx.state.monster.parts[2]
        tail.effects.apply(create_burning_effect(duration=1, damage_per_turn=5))

        turns.process_monster_turn_end()

        assert tail.health == 10
        assert ctx.state.monster.total_health == 60
        assert len(tail.effects) == 0
        assert recorder.of(EventType.STATUS_EFFECT_ACTIVATED)[0]["part_id"] == "tail"

    def test_turn_start_does_not_fire_burning(self, ctx, turns):
        ctx.state.player_effects.apply(create_burning_effect())
        turns.process_turn_start()
        assert ctx.state.player_health == 50

    def test_begin_next_turn(self, ctx, turns):
        assert turns.begin_next_turn() == 2
        assert ctx.state.turn == 2


# ==================== WinConditionChecker ====================


class TestWinConditionChecker:
    def test_ongoing(self, ctx):
        info = WinConditionChecker(ctx).check_combat_over()
        assert info.is_over is False
        assert info.outcome is None

    def test_victory(self, ctx):
        ctx.state.monster.total_health = 0
        checker = WinConditionChecker(ctx)
        assert checker.check_combat_over().outcome is CombatOutcome.VICTORY
        assert checker.is_monster_defeated()

    def test_defeat(self, ctx):
        ctx.state.player_health = 0
        checker = WinConditionChecker(ctx)
        assert checker.check_combat_over().outcome is CombatOutcome.DEFEAT
        assert checker.is_player_defeated()

    def test_victory_wins_a_tie(self, ctx):
        ctx.state.monster.total_health = 0
        ctx.state.player_health = 0
        info = WinConditionChecker(ctx).check_combat_over()
        assert info.outcome is CombatOutcome.VICTORY
        assert WinConditionChecker(ctx).is_combat_over()
