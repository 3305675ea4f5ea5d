"""Pydantic validation models for combat data contracts

External data (roster snapshots from the progression layer, monster
templates and card definitions from content files) is validated here before
it is turned into the engine's dataclasses.

Design:
  - validation models are kept apart from the domain dataclasses
  - each model has ``to_domain()``
  - ``extra="forbid"`` rejects unknown fields
  - the ``load_*`` helpers wrap pydantic.ValidationError in ContentError
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .card import Card, CardEffect, Monster, MonsterAttack, MonsterPart, RosterSnapshot
from .enums import AttackKind, CardKind, MonsterTier, TargetMode, WeaponType
from .exceptions import ContentError
from .status_effects import EffectKind

# Positions on the combat grid
GRID_POSITIONS = range(3)
# Part count for tiers with one part per position
POSITIONAL_PART_COUNT = 3


# ====================================================================== #
#  Cards                                                                 #
# ====================================================================== #


class CardEffectModel(BaseModel):
    """Card effect descriptor (applied_effects / self_effect)"""

    model_config = ConfigDict(extra="forbid")

    kind: str = Field(min_length=1)
    duration: int = Field(default=1, ge=1)
    value: int = 0

    def to_domain(self) -> CardEffect:
        return CardEffect(kind=self.kind, duration=self.duration, value=self.value)


class CardModel(BaseModel):
    """Card definition"""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    weapon: WeaponType
    kind: CardKind
    cost: int = Field(default=1, ge=0)
    damage: int = Field(default=0, ge=0)
    block: int = Field(default=0, ge=0)
    heal: int = Field(default=0, ge=0)
    draw_count: int = Field(default=0, ge=0)
    charge_turns: int = Field(default=0, ge=0)
    target_mode: TargetMode = TargetMode.SINGLE
    status_on_hit: EffectKind | None = None
    applied_effects: list[CardEffectModel] = Field(default_factory=list)
    self_effect: CardEffectModel | None = None
    description: str = ""

    def to_domain(self) -> Card:
        return Card(
            id=self.id,
            name=self.name,
            weapon=self.weapon,
            kind=self.kind,
            cost=self.cost,
            damage=self.damage,
            block=self.block,
            heal=self.heal,
            draw_count=self.draw_count,
            charge_turns=self.charge_turns,
            target_mode=self.target_mode,
            status_on_hit=self.status_on_hit,
            applied_effects=tuple(e.to_domain() for e in self.applied_effects),
            self_effect=self.self_effect.to_domain() if self.self_effect else None,
            description=self.description,
        )


# ====================================================================== #
#  Monsters                                                              #
# ====================================================================== #


class MonsterPartModel(BaseModel):
    """Monster part definition"""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    health: int = Field(gt=0)

    def to_domain(self) -> MonsterPart:
        return MonsterPart(id=self.id, name=self.name, health=self.health, max_health=self.health)


class MonsterAttackModel(BaseModel):
    """One attack of a monster's pattern"""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    kind: AttackKind
    damage: int = Field(default=0, ge=0)
    target_positions: list[int] = Field(default_factory=list)
    player_card_allowance: int = Field(default=3, ge=0)
    followup_attack_id: str | None = None
    description: str = ""

    @field_validator("target_positions")
    @classmethod
    def positions_on_grid(cls, v: list[int]) -> list[int]:
        for pos in v:
            if pos not in GRID_POSITIONS:
                raise ValueError(f"target position {pos} is off the grid")
        return v

    def to_domain(self) -> MonsterAttack:
        return MonsterAttack(
            id=self.id,
            name=self.name,
            kind=self.kind,
            damage=self.damage,
            target_positions=frozenset(self.target_positions),
            player_card_allowance=self.player_card_allowance,
            followup_attack_id=self.followup_attack_id,
            description=self.description,
        )


class MonsterTemplateModel(BaseModel):
    """Monster template

    ``total_health`` defaults to the sum of the parts' health.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    tier: MonsterTier
    parts: list[MonsterPartModel] = Field(min_length=1)
    total_health: int | None = Field(default=None, gt=0)
    attack_pattern: list[MonsterAttackModel] = Field(min_length=1)
    description: str = ""

    @model_validator(mode="after")
    def check_shape(self) -> MonsterTemplateModel:
        if self.tier.has_positional_parts and len(self.parts) != POSITIONAL_PART_COUNT:
            raise ValueError(
                f"{self.tier.value} monsters need {POSITIONAL_PART_COUNT} parts, "
                f"got {len(self.parts)}"
            )
        part_ids = [p.id for p in self.parts]
        if len(set(part_ids)) != len(part_ids):
            raise ValueError(f"duplicate part ids: {part_ids}")
        if self.total_health is None:
            self.total_health = sum(p.health for p in self.parts)
        return self

    def to_domain(self) -> Monster:
        return Monster(
            id=self.id,
            name=self.name,
            tier=self.tier,
            parts=[p.to_domain() for p in self.parts],
            total_health=self.total_health,
            attack_pattern=tuple(a.to_domain() for a in self.attack_pattern),
            description=self.description,
        )


# ====================================================================== #
#  Roster                                                                #
# ====================================================================== #


class RosterSnapshotModel(BaseModel):
    """What the progression layer hands over at combat start"""

    model_config = ConfigDict(extra="forbid")

    health: int = Field(gt=0)
    max_health: int = Field(gt=0)
    weapon: WeaponType
    deck: list[CardModel] = Field(min_length=1)

    @model_validator(mode="after")
    def health_within_max(self) -> RosterSnapshotModel:
        if self.health > self.max_health:
            raise ValueError(f"health {self.health} exceeds max_health {self.max_health}")
        return self

    def to_domain(self) -> RosterSnapshot:
        return RosterSnapshot(
            health=self.health,
            max_health=self.max_health,
            weapon=self.weapon,
            deck=tuple(c.to_domain() for c in self.deck),
        )


# ====================================================================== #
#  Loaders                                                               #
# ====================================================================== #


def load_card(data: dict[str, Any]) -> Card:
    """Validate one card definition

    Raises:
        ContentError: validation failed
    """
    return _load(CardModel, data, "card").to_domain()


def load_monster_template(data: dict[str, Any]) -> Monster:
    """Validate a monster template

    Raises:
        ContentError: validation failed
    """
    return _load(MonsterTemplateModel, data, "monster").to_domain()


def load_roster(data: dict[str, Any]) -> RosterSnapshot:
    """Validate a roster snapshot

    Raises:
        ContentError: validation failed
    """
    return _load(RosterSnapshotModel, data, "roster").to_domain()


def _load(model_cls: type[BaseModel], data: Any, source: str) -> Any:
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        raise ContentError(
            f"Invalid {source} data",
            source=source,
            reason=str(e),
        ) from e
