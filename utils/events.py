"""
Snake AI - Events
Training lifecycle event definitions, tracking and listeners.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional


class EventType(Enum):
    """Types of events that can occur during training."""
    TRAINING_STARTED = auto()
    TRAINING_PAUSED = auto()
    TRAINING_RESUMED = auto()
    TRAINING_STOPPED = auto()
    TRAINING_COMPLETE = auto()
    THROTTLE_CHANGED = auto()
    EPISODE_COMPLETED = auto()


@dataclass
class Event:
    """A training event."""
    episode: int
    event_type: EventType
    message: str
    data: Optional[dict] = None


Listener = Callable[[Event], None]


class EventTracker:
    """Tracks events for analysis and fans them out to listeners."""

    def __init__(self, max_events: int = 1000):
        self.events: list[Event] = []
        self.max_events = max_events
        self._listeners: dict[EventType, list[Listener]] = {}

    def record(self, episode: int, event_type: EventType, message: str,
               data: Optional[dict] = None) -> Event:
        """Record an event and notify its listeners."""
        event = Event(episode, event_type, message, data)
        self.events.append(event)

        # Trim old events
        if len(self.events) > self.max_events:
            self.events = self.events[-self.max_events:]

        for listener in list(self._listeners.get(event_type, ())):
            listener(event)
        return event

    def subscribe(self, event_type: EventType, listener: Listener):
        self._listeners.setdefault(event_type, []).append(listener)

    def unsubscribe(self, event_type: EventType, listener: Listener) -> bool:
        """Remove a listener. Returns False if it was not registered."""
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)
            return True
        return False

    def clear_listeners(self):
        self._listeners.clear()

    def listener_count(self) -> int:
        return sum(len(v) for v in self._listeners.values())

    def count_by_type(self, event_type: EventType, since_episode: int = 0) -> int:
        """Count events of a type since an episode."""
        return sum(1 for e in self.events
                   if e.event_type == event_type and e.episode >= since_episode)

    def get_statistics(self, since_episode: int = 0) -> dict:
        """Get event statistics."""
        stats = {}
        for event_type in EventType:
            stats[event_type.name] = self.count_by_type(event_type, since_episode)
        return stats
