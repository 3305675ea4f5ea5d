"""Encounter driver
Runs one encounter between the progression layer and a CombatEngine:
builds the roster from the current run, starts combat and, when combat
ends, hands the result back to the repository.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .card import RosterSnapshot
from .engine import CombatEngine
from .enums import CombatOutcome
from .events import CombatEvent, EventType
from .progression import NoActiveRunError
from .rewards import EncounterReward, compute_reward

if TYPE_CHECKING:
    from .card import Monster
    from .progression import ProgressionRepository
    from .state import CombatState

logger = logging.getLogger(__name__)


class EncounterDriver:
    """Wires one engine to a progression repository

    Usage::

        driver = EncounterDriver(repository)
        driver.start(catalog.get_monster("great_jagras"))
        driver.engine.play_card("quick_slash", 0)
        ...
        driver.reward  # set after a victory
    """

    def __init__(self, repository: ProgressionRepository, engine: CombatEngine | None = None):
        self.repository = repository
        self.engine = engine or CombatEngine()
        self.outcome: CombatOutcome | None = None
        self.reward: EncounterReward | None = None
        self.error: NoActiveRunError | None = None
        self.engine.event_bus.subscribe(EventType.COMBAT_ENDED, self._on_combat_ended)

    def start(self, template: Monster) -> CombatState:
        """Start combat against ``template`` with the current run's roster

        Raises:
            NoActiveRunError: the repository has no run in progress
        """
        run = self.repository.get_current_run()
        if run is None:
            raise NoActiveRunError()
        roster = RosterSnapshot(
            health=run.current_health,
            max_health=run.max_health,
            weapon=run.weapon,
            deck=tuple(run.deck),
        )
        self.outcome = None
        self.reward = None
        self.error = None
        logger.info("Encounter starting | run=%d monster=%s", run.run_id, template.id)
        return self.engine.start_combat(roster, template)

    def _on_combat_ended(self, event: CombatEvent) -> None:
        """Commit the result to the repository

        Runs inside the event bus, which only logs handler exceptions. A run
        that vanished before combat ended is therefore kept on ``self.error``
        instead of being raised.
        """
        self.outcome = CombatOutcome(event["result"])
        run = self.repository.get_current_run()
        if run is None:
            self.error = NoActiveRunError("Combat ended with no run in progress")
            logger.warning("Encounter result dropped | outcome=%s reason=no active run",
                           self.outcome.value)
            return

        if self.outcome is CombatOutcome.DEFEAT:
            logger.info("Encounter lost, run failed")
            self.repository.commit_run_result(False)
            return

        # broken flags are read before the engine is discarded
        state = self.engine.state
        reward = compute_reward(state.monster)
        self.repository.add_harvested_materials(reward.monster_id, reward.materials)

        run.gold += reward.gold
        run.current_health = state.player_health
        self.reward = reward
        logger.info("Encounter won | monster=%s gold=%d materials=%s",
                    reward.monster_id, reward.gold, reward.materials)
