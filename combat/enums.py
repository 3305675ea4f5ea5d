"""Combat enums, kept apart from the data classes to avoid circular imports

``state.py``, ``turn_manager.py`` and ``engine.py`` all import from here
directly instead of reaching into ``card.py`` or ``engine.py``.
"""

from enum import Enum


class CardKind(Enum):
    """Card kind"""

    ATTACK = "attack"
    DEFENSE = "defense"
    MOVEMENT = "movement"
    SPECIAL = "special"


class TargetMode(Enum):
    """How a card picks its target"""

    SINGLE = "single"  # one position, resolved to a monster part
    ALL = "all"  # every part
    SELF = "self"  # the player
    POSITION = "position"  # a chosen grid position (movement)

    @property
    def needs_position(self) -> bool:
        return self in (TargetMode.SINGLE, TargetMode.POSITION)


class WeaponType(Enum):
    """Weapon a card or roster belongs to"""

    SWORD_AND_SHIELD = "sword_and_shield"
    GREATSWORD = "greatsword"
    BOW = "bow"


class MonsterTier(Enum):
    """Monster tier (affects rewards, not engine rules)"""

    SMALL = "small"
    LARGE = "large"
    ELITE = "elite"
    BOSS = "boss"

    @property
    def has_positional_parts(self) -> bool:
        """Whether positions 0/1/2 map to three distinct parts"""
        return self in (MonsterTier.LARGE, MonsterTier.ELITE, MonsterTier.BOSS)


class AttackKind(Enum):
    """Monster attack kind"""

    BASIC = "basic"
    SWEEP = "sweep"
    HEAVY = "heavy"
    CHARGE = "charge"
    REPOSITION = "reposition"


class CombatPhase(Enum):
    """Combat phase"""

    NOT_STARTED = "not_started"
    COMBAT_START = "combat_start"
    PLAYER_TURN = "player_turn"
    MONSTER_TURN = "monster_turn"
    COMBAT_END = "combat_end"


class CombatOutcome(Enum):
    """Combat result"""

    VICTORY = "victory"
    DEFEAT = "defeat"


class TargetType(Enum):
    """Who carries a status effect"""

    PLAYER = "player"
    MONSTER = "monster"
