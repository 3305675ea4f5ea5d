"""Combat exceptions
Explicit error types for the combat core, each carrying a message and details
"""


class CombatError(Exception):
    """Base class for all combat errors

    Every combat-related exception derives from this class so callers
    can catch the whole family at once.
    """

    def __init__(self, message: str, details: dict | None = None):
        """Initialize the error

        Args:
            message: human-readable message
            details: extra structured details (optional)
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# ==================== Invalid operations ====================


class InvalidActionError(CombatError):
    """Invalid action

    Raised when the player attempts an action the rules do not allow.
    The engine turns these into ``ERROR`` events.
    """

    def __init__(self, message: str | None = None, action_type: str | None = None):
        if message is None:
            message = "Invalid action"
        details = {}
        if action_type:
            details["action_type"] = action_type
        super().__init__(message, details)
        self.action_type = action_type


class CardNotFoundError(InvalidActionError):
    """The requested card is not in the player's hand"""

    def __init__(self, message: str | None = None, card_id: str | None = None):
        if message is None:
            message = f"Card not in hand: {card_id}" if card_id else "Card not in hand"
        super().__init__(message, action_type="play_card")
        self.card_id = card_id
        if card_id:
            self.details["card_id"] = card_id


class CardLimitError(InvalidActionError):
    """The per-turn card allowance has been spent"""

    def __init__(self, message: str | None = None, allowed: int = 0, played: int = 0):
        if message is None:
            message = "Cannot play more cards this turn"
        super().__init__(message, action_type="play_card")
        self.allowed = allowed
        self.played = played
        self.details.update({"allowed": allowed, "played": played})


class InvalidTargetError(InvalidActionError):
    """Missing or out-of-range target position"""

    def __init__(
        self,
        message: str | None = None,
        position: int | None = None,
        reason: str | None = None,
    ):
        if message is None:
            message = "Invalid target position"
        super().__init__(message)
        self.position = position
        self.reason = reason
        if position is not None:
            self.details["position"] = position
        if reason:
            self.details["reason"] = reason


class NoFreeMoveError(InvalidActionError):
    """The free move for this turn has already been used"""

    def __init__(self, message: str | None = None):
        if message is None:
            message = "No free moves left this turn. Discard a card to move again."
        super().__init__(message, action_type="move")


# ==================== Combat state ====================


class InvalidPhaseError(CombatError):
    """Operation attempted in the wrong combat phase"""

    def __init__(
        self,
        message: str | None = None,
        current_phase: str | None = None,
        expected_phase: str | None = None,
    ):
        if message is None:
            message = "Invalid combat phase"
        details = {}
        if current_phase:
            details["current_phase"] = current_phase
        if expected_phase:
            details["expected_phase"] = expected_phase
        super().__init__(message, details)
        self.current_phase = current_phase
        self.expected_phase = expected_phase


class CombatNotActiveError(InvalidPhaseError):
    """Engine used before ``start_combat`` or after combat ended

    This is a programming error on the driver side, not a rejected move.
    """

    def __init__(self, message: str | None = None, current_phase: str | None = None):
        if message is None:
            message = "No active combat"
        super().__init__(message, current_phase=current_phase)


# ==================== Content / data ====================


class ContentError(CombatError):
    """Roster, card or monster data failed validation or lookup"""

    def __init__(
        self,
        message: str | None = None,
        source: str | None = None,
        reason: str | None = None,
    ):
        if message is None:
            message = "Invalid combat content"
        details = {}
        if source:
            details["source"] = source
        if reason:
            details["reason"] = reason
        super().__init__(message, details)
        self.source = source
        self.reason = reason
