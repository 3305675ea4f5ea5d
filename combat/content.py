# -*- coding: utf-8 -*-
"""
Content catalog
Loads the bundled card and monster definitions from ``combat/data``.

Every entry goes through the pydantic models in ``schemas`` before it
becomes a domain object, so a bad data file fails at load time.
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Optional
import json
import logging

from .card import Card, Monster, RosterSnapshot
from .enums import WeaponType
from .exceptions import ContentError
from .schemas import load_card, load_monster_template, load_roster

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"

DEFAULT_PLAYER_HEALTH = 50


class ContentCatalog:
    """
    Content catalog
    Cards by id, starting decks per weapon, monsters by id
    """

    def __init__(self, data_dir: Optional[str] = None):
        """
        Args:
            data_dir: directory holding cards.json and monsters.json
                      (the bundled data by default)
        """
        self._data_dir = Path(data_dir) if data_dir else DATA_DIR
        self._cards: Dict[str, Card] = {}
        self._status_card_ids: List[str] = []
        self._starting_decks: Dict[WeaponType, List[str]] = {}
        self._monsters: Dict[str, Monster] = {}
        self._encounters: Dict[str, List[str]] = {}

        self.load_cards(self._data_dir / "cards.json")
        self.load_monsters(self._data_dir / "monsters.json")

    # ==================== Loading ====================

    def load_cards(self, path: Path) -> None:
        """
        Load card definitions and starting decks

        Raises:
            ContentError: missing file, bad card data or an unknown deck entry
        """
        data = _read_json(path)
        self._cards.clear()
        self._status_card_ids.clear()

        for card_data in data.get("cards", []):
            card = load_card(card_data)
            self._cards[card.id] = card
        for card_data in data.get("status_cards", []):
            card = load_card(card_data)
            self._cards[card.id] = card
            self._status_card_ids.append(card.id)

        self._starting_decks.clear()
        for weapon_value, card_ids in data.get("starting_decks", {}).items():
            weapon = _weapon(weapon_value, str(path))
            for card_id in card_ids:
                if card_id not in self._cards:
                    raise ContentError(
                        f"Starting deck for {weapon_value} uses unknown card {card_id}",
                        source=str(path),
                    )
            self._starting_decks[weapon] = list(card_ids)

        logger.debug("Loaded %d cards (%d status cards) from %s",
                     len(self._cards), len(self._status_card_ids), path)

    def load_monsters(self, path: Path) -> None:
        """
        Load monster attacks, templates and encounter pools

        Attack patterns in the file reference attacks by id.

        Raises:
            ContentError: missing file, bad monster data or an unknown reference
        """
        data = _read_json(path)
        attacks: Dict[str, Dict[str, Any]] = {a["id"]: a for a in data.get("attacks", [])}

        self._monsters.clear()
        for monster_data in data.get("monsters", []):
            resolved = dict(monster_data)
            pattern = []
            for attack_id in monster_data.get("attack_pattern", []):
                if attack_id not in attacks:
                    raise ContentError(
                        f"Monster {monster_data.get('id')} uses unknown attack {attack_id}",
                        source=str(path),
                    )
                pattern.append(attacks[attack_id])
            resolved["attack_pattern"] = pattern
            monster = load_monster_template(resolved)
            self._monsters[monster.id] = monster

        self._encounters = {
            stage: list(ids) for stage, ids in data.get("encounters", {}).items()
        }
        for stage, ids in self._encounters.items():
            for monster_id in ids:
                if monster_id not in self._monsters:
                    raise ContentError(
                        f"Encounter pool {stage} uses unknown monster {monster_id}",
                        source=str(path),
                    )

        logger.debug("Loaded %d monsters from %s", len(self._monsters), path)

    # ==================== Cards ====================

    def get_card(self, card_id: str) -> Optional[Card]:
        return self._cards.get(card_id)

    def get_all_cards(self) -> List[Card]:
        return list(self._cards.values())

    def get_status_cards(self) -> List[Card]:
        return [self._cards[cid] for cid in self._status_card_ids]

    def starting_deck(self, weapon: WeaponType | str) -> List[Card]:
        """
        Starting deck for a weapon, one Card per copy

        Raises:
            ContentError: no starting deck for the weapon
        """
        weapon = _weapon(weapon, "starting_decks")
        card_ids = self._starting_decks.get(weapon)
        if card_ids is None:
            raise ContentError(f"No starting deck for {weapon.value}", source="starting_decks")
        return [self._cards[cid] for cid in card_ids]

    def build_roster(
        self,
        weapon: WeaponType | str,
        health: int = DEFAULT_PLAYER_HEALTH,
        max_health: int = DEFAULT_PLAYER_HEALTH,
        deck: Optional[List[str]] = None,
    ) -> RosterSnapshot:
        """
        Build a validated roster snapshot

        Args:
            weapon: the hunter's weapon
            health: current health
            max_health: max health
            deck: card ids (the weapon's starting deck by default)

        Raises:
            ContentError: unknown card or invalid roster
        """
        weapon = _weapon(weapon, "roster")
        if deck is None:
            cards = self.starting_deck(weapon)
        else:
            cards = []
            for card_id in deck:
                card = self.get_card(card_id)
                if card is None:
                    raise ContentError(f"Unknown card {card_id}", source="roster")
                cards.append(card)
        return load_roster({
            "health": health,
            "max_health": max_health,
            "weapon": weapon.value,
            "deck": [c.to_dict() for c in cards],
        })

    # ==================== Monsters ====================

    def get_monster(self, monster_id: str) -> Optional[Monster]:
        """Monster template; callers must not mutate it"""
        return self._monsters.get(monster_id)

    def get_all_monsters(self) -> List[Monster]:
        return list(self._monsters.values())

    def encounter_pool(self, stage: str) -> List[Monster]:
        """Monsters listed for an encounter stage (early / mid / late / boss)"""
        return [self._monsters[mid] for mid in self._encounters.get(stage, [])]


def _read_json(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ContentError(f"Content file not found: {path}", source=str(path))
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ContentError(f"Content file is not valid JSON: {path}",
                           source=str(path), reason=str(e)) from e


def _weapon(value: WeaponType | str, source: str) -> WeaponType:
    if isinstance(value, WeaponType):
        return value
    try:
        return WeaponType(value)
    except ValueError as e:
        raise ContentError(f"Unknown weapon {value}", source=source) from e


_catalog: Optional[ContentCatalog] = None


def get_catalog() -> ContentCatalog:
    """Shared catalog over the bundled data (lazy)"""
    global _catalog
    if _catalog is None:
        _catalog = ContentCatalog()
    return _catalog
