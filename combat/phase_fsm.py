"""Combat phase finite state machine

Validates phase transitions so the engine can never, for example, run a
monster turn after combat has ended.
"""

from __future__ import annotations

import logging

from .enums import CombatPhase
from .exceptions import InvalidPhaseError

logger = logging.getLogger(__name__)

# current phase -> phases it may move to
VALID_TRANSITIONS: dict[CombatPhase, set[CombatPhase]] = {
    CombatPhase.NOT_STARTED: {CombatPhase.COMBAT_START},
    CombatPhase.COMBAT_START: {CombatPhase.PLAYER_TURN},
    CombatPhase.PLAYER_TURN: {CombatPhase.MONSTER_TURN, CombatPhase.COMBAT_END},
    CombatPhase.MONSTER_TURN: {CombatPhase.PLAYER_TURN, CombatPhase.COMBAT_END},
    CombatPhase.COMBAT_END: set(),
}


class InvalidPhaseTransition(InvalidPhaseError):
    """Raised on an illegal phase change, e.g. COMBAT_END -> PLAYER_TURN"""

    def __init__(
        self,
        current_phase: CombatPhase,
        target_phase: CombatPhase,
    ):
        message = f"Invalid phase transition: {current_phase.name} → {target_phase.name}"
        super().__init__(
            message=message,
            current_phase=current_phase.name,
            expected_phase=target_phase.name,
        )
        self.from_phase = current_phase
        self.to_phase = target_phase


class CombatPhaseFSM:
    """Combat phase state machine

    Usage::

        fsm = CombatPhaseFSM()
        fsm.transition(CombatPhase.COMBAT_START)   # OK
        fsm.transition(CombatPhase.MONSTER_TURN)   # raises InvalidPhaseTransition
    """

    def __init__(self) -> None:
        self._phase: CombatPhase = CombatPhase.NOT_STARTED

    @property
    def current(self) -> CombatPhase:
        return self._phase

    def transition(self, target: CombatPhase) -> None:
        """Move to ``target``

        Raises:
            InvalidPhaseTransition: if the transition is not allowed
        """
        valid = VALID_TRANSITIONS.get(self._phase, set())
        if target not in valid:
            raise InvalidPhaseTransition(self._phase, target)
        logger.debug("Phase transition: %s → %s", self._phase.name, target.name)
        self._phase = target

    def can_transition(self, target: CombatPhase) -> bool:
        return target in VALID_TRANSITIONS.get(self._phase, set())

    def can_act(self) -> bool:
        """Whether player operations are accepted"""
        return self._phase == CombatPhase.PLAYER_TURN

    @property
    def is_over(self) -> bool:
        return self._phase == CombatPhase.COMBAT_END
