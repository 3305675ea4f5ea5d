"""Card and monster data
Defines cards, monster parts, attacks and monsters plus the structural clone
used to give each combat its own monster copy
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .enums import AttackKind, CardKind, MonsterTier, TargetMode, WeaponType
from .status_effects import EffectKind, EffectSet


@dataclass(frozen=True, slots=True)
class CardEffect:
    """Effect descriptor carried by a card (``applied_effects`` / ``self_effect``)

    ``kind`` stays a plain string so unrecognised kinds can pass through
    as a no-op.
    """

    kind: str
    duration: int = 1
    value: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "duration": self.duration, "value": self.value}


@dataclass(frozen=True, slots=True)
class Card:
    """Card (immutable value object)

    Attributes:
        id: card id (duplicates are legal inside a deck)
        name: display name
        weapon: weapon the card belongs to
        kind: attack / defense / movement / special
        cost: display only, never spent
        damage: base damage (attack cards)
        block: block granted
        heal: health restored (special cards)
        draw_count: extra cards drawn after the primary effect
        charge_turns: charge time, carried as data only
        target_mode: how the card picks its target
        status_on_hit: status applied to whatever the card hits
        applied_effects: effects applied to the hit target(s), e.g. stun
        self_effect: effect applied to the player, e.g. buff
    """

    id: str
    name: str
    weapon: WeaponType
    kind: CardKind
    cost: int = 1
    damage: int = 0
    block: int = 0
    heal: int = 0
    draw_count: int = 0
    charge_turns: int = 0
    target_mode: TargetMode = TargetMode.SINGLE
    status_on_hit: EffectKind | None = None
    applied_effects: tuple[CardEffect, ...] = ()
    self_effect: CardEffect | None = None
    description: str = ""

    def __post_init__(self):
        if isinstance(self.weapon, str):
            object.__setattr__(self, "weapon", WeaponType(self.weapon))
        if isinstance(self.kind, str):
            object.__setattr__(self, "kind", CardKind(self.kind))
        if isinstance(self.target_mode, str):
            object.__setattr__(self, "target_mode", TargetMode(self.target_mode))
        if isinstance(self.status_on_hit, str):
            object.__setattr__(self, "status_on_hit", EffectKind(self.status_on_hit))
        if isinstance(self.applied_effects, list):
            object.__setattr__(self, "applied_effects", tuple(self.applied_effects))

    @property
    def needs_target(self) -> bool:
        """Whether playing this card requires a target position"""
        if self.kind is CardKind.MOVEMENT:
            return True
        return self.kind is CardKind.ATTACK and self.target_mode.needs_position

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Card({self.id}, {self.name})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "weapon": self.weapon.value,
            "kind": self.kind.value,
            "cost": self.cost,
            "damage": self.damage,
            "block": self.block,
            "heal": self.heal,
            "draw_count": self.draw_count,
            "charge_turns": self.charge_turns,
            "target_mode": self.target_mode.value,
            "status_on_hit": self.status_on_hit.value if self.status_on_hit else None,
            "applied_effects": [e.to_dict() for e in self.applied_effects],
            "self_effect": self.self_effect.to_dict() if self.self_effect else None,
            "description": self.description,
        }


@dataclass(slots=True)
class MonsterPart:
    """One breakable monster part

    ``broken`` only ever goes from False to True within a combat.
    """

    id: str
    name: str
    health: int
    max_health: int = 0
    broken: bool = False
    effects: EffectSet = field(default_factory=EffectSet)

    def __post_init__(self):
        if not self.max_health:
            self.max_health = self.health

    def take_damage(self, damage: int) -> bool:
        """Reduce health (clamped at 0)

        Returns:
            True if this hit broke the part
        """
        self.health = max(0, self.health - max(0, damage))
        if self.health == 0 and not self.broken:
            self.broken = True
            return True
        return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "health": self.health,
            "max_health": self.max_health,
            "broken": self.broken,
            "effects": [e.to_dict() for e in self.effects],
        }


@dataclass(frozen=True, slots=True)
class MonsterAttack:
    """Monster attack (one entry of the attack pattern)"""

    id: str
    name: str
    kind: AttackKind
    damage: int = 0
    target_positions: frozenset[int] = frozenset()
    player_card_allowance: int = 3
    followup_attack_id: str | None = None
    description: str = ""

    def __post_init__(self):
        if isinstance(self.kind, str):
            object.__setattr__(self, "kind", AttackKind(self.kind))
        if not isinstance(self.target_positions, frozenset):
            object.__setattr__(self, "target_positions", frozenset(self.target_positions))

    def targets(self, position: int) -> bool:
        return position in self.target_positions

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind.value,
            "damage": self.damage,
            "target_positions": sorted(self.target_positions),
            "player_card_allowance": self.player_card_allowance,
            "followup_attack_id": self.followup_attack_id,
            "description": self.description,
        }


@dataclass(slots=True)
class Monster:
    """Monster

    ``total_health`` is tracked on its own and is not recomputed from parts.
    """

    id: str
    name: str
    tier: MonsterTier
    parts: list[MonsterPart]
    total_health: int
    attack_pattern: tuple[MonsterAttack, ...]
    description: str = ""

    def __post_init__(self):
        if isinstance(self.tier, str):
            self.tier = MonsterTier(self.tier)
        if not isinstance(self.attack_pattern, tuple):
            self.attack_pattern = tuple(self.attack_pattern)

    @property
    def is_defeated(self) -> bool:
        return self.total_health <= 0

    @property
    def broken_parts(self) -> list[MonsterPart]:
        return [p for p in self.parts if p.broken]

    def get_part(self, part_id: str) -> MonsterPart | None:
        for part in self.parts:
            if part.id == part_id:
                return part
        return None

    def find_attack_index(self, attack_id: str) -> int:
        """Index of ``attack_id`` in the pattern, or -1"""
        for i, attack in enumerate(self.attack_pattern):
            if attack.id == attack_id:
                return i
        return -1

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "tier": self.tier.value,
            "parts": [p.to_dict() for p in self.parts],
            "total_health": self.total_health,
            "attack_pattern": [a.to_dict() for a in self.attack_pattern],
            "description": self.description,
        }


@dataclass(frozen=True, slots=True)
class RosterSnapshot:
    """What the progression layer hands the engine at combat start"""

    health: int
    max_health: int
    weapon: WeaponType
    deck: tuple[Card, ...]

    def __post_init__(self):
        if isinstance(self.weapon, str):
            object.__setattr__(self, "weapon", WeaponType(self.weapon))
        if not isinstance(self.deck, tuple):
            object.__setattr__(self, "deck", tuple(self.deck))


def clone_part(part: MonsterPart) -> MonsterPart:
    """Field-by-field copy of a part with a fresh, empty effect set"""
    return MonsterPart(
        id=part.id,
        name=part.name,
        health=part.health,
        max_health=part.max_health,
        broken=part.broken,
        effects=EffectSet(),
    )


def clone_monster(template: Monster) -> Monster:
    """Structural copy of a monster template

    Parts are copied so combat damage never touches the shared template;
    attacks are frozen and can be shared.
    """
    return Monster(
        id=template.id,
        name=template.name,
        tier=template.tier,
        parts=[clone_part(p) for p in template.parts],
        total_health=template.total_health,
        attack_pattern=tuple(template.attack_pattern),
        description=template.description,
    )
