"""Win condition checker
Decides whether a combat is over and how it ended.

Victory: monster total health <= 0. Defeat: player health <= 0.
When both hold at the same check, victory wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .enums import CombatOutcome

if TYPE_CHECKING:
    from .context import CombatContext


@dataclass(slots=True)
class CombatOverInfo:
    """Combat end information"""

    is_over: bool
    outcome: CombatOutcome | None
    message: str


class WinConditionChecker:
    """Win condition checker"""

    def __init__(self, ctx: CombatContext):
        """
        Args:
            ctx: combat context
        """
        self.ctx = ctx

    def check_combat_over(self) -> CombatOverInfo:
        """Check whether the combat has ended

        Returns:
            CombatOverInfo
        """
        state = self.ctx.state
        if state.monster.is_defeated:
            return CombatOverInfo(
                is_over=True,
                outcome=CombatOutcome.VICTORY,
                message=f"{state.monster.name} has been defeated",
            )
        if state.is_player_defeated:
            return CombatOverInfo(
                is_over=True,
                outcome=CombatOutcome.DEFEAT,
                message="The hunter has fallen",
            )
        return CombatOverInfo(is_over=False, outcome=None, message="")

    def is_monster_defeated(self) -> bool:
        return self.ctx.state.monster.is_defeated

    def is_player_defeated(self) -> bool:
        return self.ctx.state.is_player_defeated

    def is_combat_over(self) -> bool:
        return self.check_combat_over().is_over
