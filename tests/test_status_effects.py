"""Tests for combat.status_effects module."""

import pytest

from combat.status_effects import (
    EffectDelta,
    EffectKind,
    EffectSet,
    StatusEffect,
    TriggerPhase,
    create_bleeding_effect,
    create_buff_effect,
    create_burning_effect,
    create_poison_effect,
    create_resistance_effect,
    create_sharpness_effect,
    create_stun_effect,
    has_trigger,
    on_hit_effect,
    resolve_effect_trigger,
)


class TestStatusEffect:
    def test_string_kind_converted(self):
        effect = StatusEffect("poison", 3, 3)
        assert effect.kind is EffectKind.POISON
        assert effect.name == "Poison"

    def test_decremented_returns_copy(self):
        effect = create_poison_effect()
        ticked = effect.decremented()
        assert ticked.duration == 2
        assert effect.duration == 3

    def test_to_dict(self):
        assert create_burning_effect().to_dict() == {
            "kind": "burning", "duration": 2, "magnitude": 5,
        }


class TestFactories:
    @pytest.mark.parametrize("factory, kind, duration, magnitude", [
        (create_poison_effect, EffectKind.POISON, 3, 3),
        (create_burning_effect, EffectKind.BURNING, 2, 5),
        (create_bleeding_effect, EffectKind.BLEEDING, 3, 2),
        (create_stun_effect, EffectKind.STUN, 1, 0),
        (create_buff_effect, EffectKind.BUFF, 3, 2),
        (create_resistance_effect, EffectKind.RESISTANCE, 3, 2),
        (create_sharpness_effect, EffectKind.SHARPNESS, 3, 0),
    ])
    def test_defaults(self, factory, kind, duration, magnitude):
        effect = factory()
        assert (effect.kind, effect.duration, effect.magnitude) == (kind, duration, magnitude)

    def test_on_hit_defaults(self):
        assert on_hit_effect("poison") == StatusEffect(EffectKind.POISON, 3, 3)
        assert on_hit_effect(EffectKind.BURNING) == StatusEffect(EffectKind.BURNING, 2, 5)
        assert on_hit_effect("bleeding") == StatusEffect(EffectKind.BLEEDING, 3, 2)
        assert on_hit_effect("stun") == StatusEffect(EffectKind.STUN, 1, 0)

    def test_on_hit_unknown_kinds_ignored(self):
        assert on_hit_effect(None) is None
        assert on_hit_effect("frostbite") is None
        assert on_hit_effect(EffectKind.BUFF) is None


class TestTriggers:
    def test_damage_over_time_table(self):
        assert has_trigger(EffectKind.POISON, TriggerPhase.TURN_END)
        assert has_trigger(EffectKind.BURNING, TriggerPhase.TURN_END)
        assert has_trigger(EffectKind.BLEEDING, TriggerPhase.TURN_START)
        assert not has_trigger(EffectKind.POISON, TriggerPhase.TURN_START)
        assert not has_trigger(EffectKind.BLEEDING, TriggerPhase.TURN_END)

    def test_resolve_returns_delta(self):
        assert resolve_effect_trigger(EffectKind.POISON, TriggerPhase.TURN_END, 3) == EffectDelta(damage=3)

    @pytest.mark.parametrize("kind", [
        EffectKind.STUN, EffectKind.BUFF, EffectKind.WEAKNESS,
        EffectKind.RESISTANCE, EffectKind.SHARPNESS,
    ])
    def test_passive_kinds_have_no_trigger(self, kind):
        for phase in TriggerPhase:
            assert resolve_effect_trigger(kind, phase, 5) is None


class TestEffectSet:
    def setup_method(self):
        self.effects = EffectSet()

    def test_apply_replaces_same_kind_in_place(self):
        self.effects.apply(create_poison_effect(3, 3))
        self.effects.apply(create_stun_effect())
        old = self.effects.apply(create_poison_effect(1, 9))

        assert old == StatusEffect(EffectKind.POISON, 3, 3)
        assert len(self.effects) == 2
        assert [e.kind for e in self.effects] == [EffectKind.POISON, EffectKind.STUN]
        assert self.effects.get(EffectKind.POISON).magnitude == 9

    def test_magnitude_of_missing_kind_is_zero(self):
        assert self.effects.magnitude(EffectKind.WEAKNESS) == 0

    def test_tick_expires_effects(self):
        self.effects.apply(create_stun_effect(1))
        self.effects.apply(create_poison_effect(2, 3))

        expired = self.effects.tick()

        assert [e.kind for e in expired] == [EffectKind.STUN]
        assert EffectKind.STUN not in self.effects
        assert self.effects.get(EffectKind.POISON).duration == 1

    def test_remove(self):
        self.effects.apply(create_buff_effect())
        removed = self.effects.remove(EffectKind.BUFF)
        assert removed.kind is EffectKind.BUFF
        assert self.effects.remove(EffectKind.BUFF) is None
        assert len(self.effects) == 0

    def test_copy_is_independent(self):
        self.effects.apply(create_buff_effect())
        clone = self.effects.copy()
        clone.clear()
        assert self.effects.has(EffectKind.BUFF)

    def test_iteration_is_snapshot(self):
        self.effects.apply(create_buff_effect())
        self.effects.apply(create_stun_effect())
        for effect in self.effects:
            self.effects.remove(effect.kind)
        assert len(self.effects) == 0
