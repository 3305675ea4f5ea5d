"""CombatContext protocol

The minimal surface the subsystems (DamageSystem / CardResolver /
TurnManager / WinConditionChecker) need from the engine. Subsystems depend on
this Protocol rather than on ``CombatEngine`` so tests can hand them a stub.
"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Protocol,
    runtime_checkable,
)

if TYPE_CHECKING:
    from .config import CombatConfig
    from .enums import CombatOutcome
    from .events import EventBus
    from .state import CombatState


@runtime_checkable
class CombatContext(Protocol):
    """What subsystems may see and do

    ``CombatEngine`` satisfies this structurally.
    """

    @property
    def state(self) -> CombatState:
        """The active combat state"""
        ...

    @property
    def event_bus(self) -> EventBus:
        ...

    @property
    def config(self) -> CombatConfig:
        ...

    def draw_cards(self, count: int) -> int:
        """Draw ``count`` cards with the reshuffle rule; returns cards drawn"""
        ...

    def end_combat(self, outcome: CombatOutcome) -> None:
        ...
