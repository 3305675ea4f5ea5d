# -*- coding: utf-8 -*-
"""
Monster hunt combat core
Turn-based combat resolution: cards, monster parts and attack patterns,
status effects, the event bus and the combat engine, plus the data
contracts and progression hooks around them.
"""

from .card import Card, CardEffect, Monster, MonsterAttack, MonsterPart, RosterSnapshot
from .config import CombatConfig, get_config, reset_config
from .content import ContentCatalog, get_catalog
from .driver import EncounterDriver
from .engine import CombatEngine
from .enums import (
    AttackKind, CardKind, CombatOutcome, CombatPhase, MonsterTier,
    TargetMode, TargetType, WeaponType,
)
from .events import CombatEvent, EventBus, EventType
from .exceptions import (
    CardLimitError, CardNotFoundError, CombatError, CombatNotActiveError,
    ContentError, InvalidActionError, InvalidPhaseError, InvalidTargetError,
    NoFreeMoveError,
)
from .progression import InMemoryProgressionRepository, ProgressionRepository, RunData
from .state import CombatState
from .status_effects import EffectKind, EffectSet, StatusEffect

__all__ = [
    # Cards and monsters
    'Card', 'CardEffect', 'Monster', 'MonsterAttack', 'MonsterPart', 'RosterSnapshot',
    # Enums
    'AttackKind', 'CardKind', 'CombatOutcome', 'CombatPhase', 'MonsterTier',
    'TargetMode', 'TargetType', 'WeaponType',
    # Status effects
    'EffectKind', 'EffectSet', 'StatusEffect',
    # Engine
    'CombatEngine', 'CombatState', 'CombatConfig', 'get_config', 'reset_config',
    # Events
    'CombatEvent', 'EventBus', 'EventType',
    # Errors
    'CombatError', 'InvalidActionError', 'CardNotFoundError', 'CardLimitError',
    'InvalidTargetError', 'NoFreeMoveError', 'InvalidPhaseError',
    'CombatNotActiveError', 'ContentError',
    # Content and progression
    'ContentCatalog', 'get_catalog', 'EncounterDriver',
    'InMemoryProgressionRepository', 'ProgressionRepository', 'RunData',
]

__version__ = '0.1.0'
