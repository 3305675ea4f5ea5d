"""Status effect model

Effects are plain data (kind, duration, magnitude). Their behaviour is
looked up by kind through ``resolve_effect_trigger``; the engine is the only
thing that executes it. That keeps cloned monsters and player state free of
callbacks.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator


class EffectKind(Enum):
    """Status effect kind"""

    POISON = "poison"
    BLEEDING = "bleeding"
    BURNING = "burning"
    STUN = "stun"
    BUFF = "buff"  # bonus damage on the player's attacks
    WEAKNESS = "weakness"  # extra damage taken
    RESISTANCE = "resistance"  # damage reduction
    SHARPNESS = "sharpness"  # reserved hook, no behaviour

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES: dict[EffectKind, str] = {
    EffectKind.POISON: "Poison",
    EffectKind.BLEEDING: "Bleeding",
    EffectKind.BURNING: "Burning",
    EffectKind.STUN: "Stunned",
    EffectKind.BUFF: "Attack Up",
    EffectKind.WEAKNESS: "Weakness Exploit",
    EffectKind.RESISTANCE: "Resistance",
    EffectKind.SHARPNESS: "Sharpened Weapon",
}


class TriggerPhase(Enum):
    """Turn boundary at which an effect may fire"""

    TURN_START = "turn_start"
    TURN_END = "turn_end"


@dataclass(frozen=True, slots=True)
class StatusEffect:
    """One active status effect

    Attributes:
        kind: effect kind
        duration: remaining turn boundaries (>= 1 while active)
        magnitude: damage per tick or bonus amount
    """

    kind: EffectKind
    duration: int
    magnitude: int = 0

    def __post_init__(self):
        if isinstance(self.kind, str):
            object.__setattr__(self, "kind", EffectKind(self.kind))

    @property
    def name(self) -> str:
        return self.kind.display_name

    def decremented(self) -> StatusEffect:
        return replace(self, duration=self.duration - 1)

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "duration": self.duration, "magnitude": self.magnitude}


@dataclass(frozen=True, slots=True)
class EffectDelta:
    """State change produced by one effect trigger"""

    damage: int = 0


# kind -> boundary at which it deals its magnitude as damage
_TRIGGERS: dict[EffectKind, TriggerPhase] = {
    EffectKind.POISON: TriggerPhase.TURN_END,
    EffectKind.BURNING: TriggerPhase.TURN_END,
    EffectKind.BLEEDING: TriggerPhase.TURN_START,
}


def has_trigger(kind: EffectKind, phase: TriggerPhase) -> bool:
    """Whether ``kind`` fires at ``phase``"""
    return _TRIGGERS.get(kind) is phase


def resolve_effect_trigger(
    kind: EffectKind, phase: TriggerPhase, magnitude: int = 0
) -> EffectDelta | None:
    """Pure lookup of what an effect does at a turn boundary

    Args:
        kind: effect kind
        phase: turn boundary being processed
        magnitude: the effect's magnitude

    Returns:
        The delta to apply to the afflicted target, or None when the kind
        has no trigger at this phase.
    """
    if not has_trigger(kind, phase):
        return None
    return EffectDelta(damage=max(0, magnitude))


class EffectSet:
    """Ordered set of status effects keyed by kind

    At most one effect per kind; applying a kind that is already present
    replaces it in place (newest wins, nothing stacks).
    """

    __slots__ = ("_effects",)

    def __init__(self, effects: list[StatusEffect] | None = None):
        self._effects: list[StatusEffect] = []
        for effect in effects or []:
            self.apply(effect)

    def apply(self, effect: StatusEffect) -> StatusEffect | None:
        """Attach an effect, replacing any existing one of the same kind

        Returns:
            The replaced effect, if any
        """
        for i, existing in enumerate(self._effects):
            if existing.kind is effect.kind:
                self._effects[i] = effect
                return existing
        self._effects.append(effect)
        return None

    def get(self, kind: EffectKind) -> StatusEffect | None:
        for effect in self._effects:
            if effect.kind is kind:
                return effect
        return None

    def has(self, kind: EffectKind) -> bool:
        return self.get(kind) is not None

    def magnitude(self, kind: EffectKind) -> int:
        """Magnitude of the active effect of ``kind`` (0 when absent)"""
        effect = self.get(kind)
        return effect.magnitude if effect else 0

    def remove(self, kind: EffectKind) -> StatusEffect | None:
        for i, effect in enumerate(self._effects):
            if effect.kind is kind:
                return self._effects.pop(i)
        return None

    def tick(self) -> list[StatusEffect]:
        """Decrement every effect by one and drop the expired ones

        Returns:
            The effects that expired
        """
        remaining: list[StatusEffect] = []
        expired: list[StatusEffect] = []
        for effect in self._effects:
            ticked = effect.decremented()
            if ticked.duration > 0:
                remaining.append(ticked)
            else:
                expired.append(ticked)
        self._effects = remaining
        return expired

    def clear(self) -> None:
        self._effects.clear()

    def copy(self) -> EffectSet:
        return EffectSet(list(self._effects))

    def __iter__(self) -> Iterator[StatusEffect]:
        # iterate over a snapshot so callers may apply/remove while looping
        return iter(list(self._effects))

    def __len__(self) -> int:
        return len(self._effects)

    def __contains__(self, kind: object) -> bool:
        return isinstance(kind, EffectKind) and self.has(kind)

    def __repr__(self) -> str:
        inner = ", ".join(f"{e.kind.value}({e.duration}/{e.magnitude})" for e in self._effects)
        return f"EffectSet([{inner}])"


# ==================== Factories ====================


def create_poison_effect(duration: int = 3, damage_per_turn: int = 3) -> StatusEffect:
    return StatusEffect(EffectKind.POISON, duration, damage_per_turn)


def create_bleeding_effect(duration: int = 3, damage_per_turn: int = 2) -> StatusEffect:
    return StatusEffect(EffectKind.BLEEDING, duration, damage_per_turn)


def create_burning_effect(duration: int = 2, damage_per_turn: int = 5) -> StatusEffect:
    return StatusEffect(EffectKind.BURNING, duration, damage_per_turn)


def create_stun_effect(duration: int = 1) -> StatusEffect:
    return StatusEffect(EffectKind.STUN, duration)


def create_buff_effect(duration: int = 3, value: int = 2) -> StatusEffect:
    return StatusEffect(EffectKind.BUFF, duration, value)


def create_weakness_effect(duration: int = 3, value: int = 2) -> StatusEffect:
    return StatusEffect(EffectKind.WEAKNESS, duration, value)


def create_resistance_effect(duration: int = 3, value: int = 2) -> StatusEffect:
    return StatusEffect(EffectKind.RESISTANCE, duration, value)


def create_sharpness_effect(duration: int = 3) -> StatusEffect:
    return StatusEffect(EffectKind.SHARPNESS, duration)


# Fixed defaults for a card's status-on-hit
_ON_HIT_FACTORIES = {
    EffectKind.POISON: lambda: create_poison_effect(3, 3),
    EffectKind.BURNING: lambda: create_burning_effect(2, 5),
    EffectKind.BLEEDING: lambda: create_bleeding_effect(3, 2),
    EffectKind.STUN: lambda: create_stun_effect(1),
}


def on_hit_effect(kind: EffectKind | str | None) -> StatusEffect | None:
    """Build the default effect a card's ``status_on_hit`` applies

    Unknown or unsupported kinds yield None.
    """
    if kind is None:
        return None
    if isinstance(kind, str):
        try:
            kind = EffectKind(kind)
        except ValueError:
            return None
    factory = _ON_HIT_FACTORIES.get(kind)
    return factory() if factory else None
