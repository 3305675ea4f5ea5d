"""Event bus
Observer pattern used to decouple the combat engine from presentation and
progression layers. Delivery is synchronous and in emission order;
handlers are read-only observers.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional

if TYPE_CHECKING:
    from .card import Card, MonsterPart

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Combat event types"""

    # Combat lifecycle
    COMBAT_STARTED = "combatStarted"
    COMBAT_ENDED = "combatEnded"
    TURN_ENDED = "turnEnded"

    # Cards
    CARD_PLAYED = "cardPlayed"
    CARD_DRAWN = "cardDrawn"
    CARD_DISCARDED = "cardDiscarded"
    DECK_SHUFFLED = "deckShuffled"

    # Player
    PLAYER_MOVED = "playerMoved"
    PLAYER_DAMAGED = "playerDamaged"
    PLAYER_HEALED = "playerHealed"
    PLAYER_BLOCKED = "playerBlocked"

    # Monster
    MONSTER_DAMAGED = "monsterDamaged"
    PART_BROKEN = "partBroken"
    MONSTER_STUNNED = "monsterStunned"
    MONSTER_INTENTION_REVEALED = "monsterIntentionRevealed"

    # Status effects
    STATUS_EFFECT_APPLIED = "statusEffectApplied"
    STATUS_EFFECT_ACTIVATED = "statusEffectActivated"
    MONSTER_EFFECT_APPLIED = "monsterEffectApplied"
    PLAYER_EFFECT_APPLIED = "playerEffectApplied"

    # Rejected operations
    ERROR = "error"


@dataclass
class CombatEvent:
    """
    Combat event
    Carries the event type and its payload
    """
    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def card(self) -> Optional['Card']:
        return self.data.get('card')

    @property
    def part(self) -> Optional['MonsterPart']:
        return self.data.get('part')

    @property
    def damage(self) -> int:
        return self.data.get('damage', 0)

    @property
    def message(self) -> str:
        return self.data.get('message', '')

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)


EventHandler = Callable[[CombatEvent], None]


class EventBus:
    """
    Event bus
    Publishes events and fans them out to subscribers
    """

    def __init__(self, max_history: int = 100):
        # event type -> [(priority, handler)]
        self._handlers: dict[EventType, list[tuple[int, EventHandler]]] = defaultdict(list)
        # handlers listening to every event
        self._global_handlers: list[tuple[int, EventHandler]] = []
        self._event_history: list[CombatEvent] = []
        self._max_history: int = max_history

    def subscribe(self, event_type: EventType, handler: EventHandler,
                  priority: int = 0) -> None:
        """
        Subscribe to one event type

        Args:
            event_type: event type
            handler: callback
            priority: higher runs first; equal priorities keep subscription order
        """
        self._handlers[event_type].append((priority, handler))
        # sort is stable, so equal priorities stay in subscription order
        self._handlers[event_type].sort(key=lambda x: x[0], reverse=True)

    def subscribe_all(self, handler: EventHandler, priority: int = 0) -> None:
        """Subscribe to every event type"""
        self._global_handlers.append((priority, handler))
        self._global_handlers.sort(key=lambda x: x[0], reverse=True)

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        self._handlers[event_type] = [
            (p, h) for p, h in self._handlers[event_type] if h != handler
        ]

    def unsubscribe_all(self, handler: EventHandler) -> None:
        """Remove a handler from every subscription"""
        self._global_handlers = [
            (p, h) for p, h in self._global_handlers if h != handler
        ]
        for event_type in list(self._handlers):
            self.unsubscribe(event_type, handler)

    def publish(self, event: CombatEvent) -> CombatEvent:
        """
        Publish an event

        Global handlers run first, then handlers for the event's type.
        A handler that raises is logged and skipped.

        Args:
            event: the event

        Returns:
            The published event
        """
        self._event_history.append(event)
        if len(self._event_history) > self._max_history:
            self._event_history = self._event_history[-self._max_history:]

        handlers = list(self._global_handlers) + list(self._handlers.get(event.event_type, []))
        for _, handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception("Event handler failed | event=%s", event.event_type.value)

        return event

    def emit(self, event_type: EventType, **kwargs) -> CombatEvent:
        """
        Shortcut for publishing an event

        Args:
            event_type: event type
            **kwargs: payload

        Returns:
            The published event
        """
        event = CombatEvent(event_type=event_type, data=kwargs)
        return self.publish(event)

    def clear(self) -> None:
        """Drop every subscription"""
        self._handlers.clear()
        self._global_handlers.clear()

    def get_history(self, count: int = 10) -> list[CombatEvent]:
        """Most recent events"""
        return self._event_history[-count:]
