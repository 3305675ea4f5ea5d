"""Property-based tests for the event bus.

Core invariants:
1. Higher-priority handlers always run before lower-priority ones
2. After unsubscribe a handler is no longer called
3. A raising handler does not stop later handlers
4. History never exceeds max_history
"""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from combat.events import CombatEvent, EventBus, EventType

# ---------------------------------------------------------------------------
# Property 1: priority order
# ---------------------------------------------------------------------------

@given(
    priorities=st.lists(
        st.integers(min_value=-100, max_value=100),
        min_size=2,
        max_size=20,
    )
)
@settings(max_examples=200)
def test_handlers_called_in_priority_order(priorities: list[int]) -> None:
    bus = EventBus()
    call_order: list[tuple[int, int]] = []

    for i, prio in enumerate(priorities):
        def handler(event: CombatEvent, p: int = prio, n: int = i) -> None:
            call_order.append((p, n))

        bus.subscribe(EventType.CARD_PLAYED, handler, priority=prio)

    bus.emit(EventType.CARD_PLAYED)

    # descending priority, subscription order among equals
    expected = sorted(enumerate(priorities), key=lambda x: -x[1])
    assert call_order == [(p, n) for n, p in expected]


# ---------------------------------------------------------------------------
# Property 2: unsubscribe
# ---------------------------------------------------------------------------

@given(n_handlers=st.integers(1, 10), removed=st.data())
@settings(max_examples=100)
def test_unsubscribed_handler_not_called(n_handlers: int, removed) -> None:
    bus = EventBus()
    calls: list[int] = []
    handlers = []
    for i in range(n_handlers):
        def handler(event: CombatEvent, n: int = i) -> None:
            calls.append(n)
        handlers.append(handler)
        bus.subscribe(EventType.PART_BROKEN, handler)

    victim = removed.draw(st.integers(0, n_handlers - 1))
    bus.unsubscribe(EventType.PART_BROKEN, handlers[victim])
    bus.emit(EventType.PART_BROKEN)

    assert victim not in calls
    assert len(calls) == n_handlers - 1


# ---------------------------------------------------------------------------
# Property 3: failing handlers are isolated
# ---------------------------------------------------------------------------

@given(failing=st.lists(st.booleans(), min_size=1, max_size=10))
@settings(max_examples=100)
def test_raising_handler_does_not_stop_delivery(failing: list[bool]) -> None:
    bus = EventBus()
    called: list[int] = []

    for i, fails in enumerate(failing):
        def handler(event: CombatEvent, n: int = i, boom: bool = fails) -> None:
            called.append(n)
            if boom:
                raise RuntimeError("handler failed")

        bus.subscribe(EventType.TURN_ENDED, handler)

    bus.emit(EventType.TURN_ENDED)

    assert called == list(range(len(failing)))


# ---------------------------------------------------------------------------
# Property 4: bounded history
# ---------------------------------------------------------------------------

@given(
    max_history=st.integers(1, 50),
    n_events=st.integers(0, 120),
)
@settings(max_examples=100)
def test_history_bounded(max_history: int, n_events: int) -> None:
    bus = EventBus(max_history=max_history)
    for i in range(n_events):
        bus.emit(EventType.CARD_DRAWN, index=i)

    history = bus.get_history(count=1000)
    assert len(history) == min(max_history, n_events)
    if history:
        assert history[-1]["index"] == n_events - 1
