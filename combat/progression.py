"""Progression collaborator
The combat core's view of the meta-progression layer: the current run, and
where harvested materials and run results go. Persistence format is the
repository's business; ``InMemoryProgressionRepository`` keeps everything in
memory.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from .card import Card
from .enums import WeaponType
from .exceptions import CombatError
from .rewards import material_key

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DefeatRecord:
    """One monster defeated during a run"""

    monster_id: str
    parts_harvested: dict[str, int] = field(default_factory=dict)


@dataclass
class RunData:
    """State of one run"""

    run_id: int
    weapon: WeaponType
    deck: list[Card]
    current_health: int
    max_health: int
    gold: int = 0
    monsters_defeated: list[DefeatRecord] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "weapon": self.weapon.value,
            "deck": [c.id for c in self.deck],
            "current_health": self.current_health,
            "max_health": self.max_health,
            "gold": self.gold,
            "monsters_defeated": [
                {"monster_id": r.monster_id, "parts_harvested": dict(r.parts_harvested)}
                for r in self.monsters_defeated
            ],
        }


@runtime_checkable
class ProgressionRepository(Protocol):
    """What the combat layer needs from progression"""

    def get_current_run(self) -> RunData | None:
        ...

    def commit_run_result(self, successful: bool) -> None:
        """Close the current run"""
        ...

    def add_harvested_materials(self, monster_id: str, materials: dict[str, int]) -> None:
        """Record materials harvested from a defeated monster in the current run"""
        ...


class NoActiveRunError(CombatError):
    """Progression operation with no run in progress"""

    def __init__(self, message: str = "No run in progress"):
        super().__init__(message)


class InMemoryProgressionRepository:
    """In-memory progression store

    Harvested materials stay on the run until it is committed as
    successful; a failed run forfeits them.
    """

    def __init__(self, max_health: int = 100):
        self.max_health = max_health
        self._current_run: RunData | None = None
        self._completed_runs: list[RunData] = []
        self._materials: dict[str, int] = {}
        self._run_ids = itertools.count(1)

    def start_run(self, weapon: WeaponType | str, deck: list[Card]) -> RunData:
        if isinstance(weapon, str):
            weapon = WeaponType(weapon)
        self._current_run = RunData(
            run_id=next(self._run_ids),
            weapon=weapon,
            deck=list(deck),
            current_health=self.max_health,
            max_health=self.max_health,
        )
        logger.info("Run started | run=%d weapon=%s deck=%d",
                    self._current_run.run_id, weapon.value, len(deck))
        return self._current_run

    def get_current_run(self) -> RunData | None:
        return self._current_run

    def add_harvested_materials(self, monster_id: str, materials: dict[str, int]) -> None:
        run = self._require_run()
        run.monsters_defeated.append(DefeatRecord(monster_id, dict(materials)))
        logger.debug("Materials harvested | run=%d monster=%s materials=%s",
                     run.run_id, monster_id, materials)

    def commit_run_result(self, successful: bool) -> None:
        run = self._require_run()
        if successful:
            for record in run.monsters_defeated:
                for part_id, quantity in record.parts_harvested.items():
                    key = material_key(record.monster_id, part_id)
                    self._materials[key] = self._materials.get(key, 0) + quantity
            self._completed_runs.append(run)
        logger.info("Run committed | run=%d successful=%s gold=%d",
                    run.run_id, successful, run.gold)
        self._current_run = None

    @property
    def materials(self) -> dict[str, int]:
        """Material inventory keyed ``monster_id:part_id``"""
        return dict(self._materials)

    @property
    def completed_runs(self) -> list[RunData]:
        return list(self._completed_runs)

    def _require_run(self) -> RunData:
        if self._current_run is None:
            raise NoActiveRunError()
        return self._current_run
