"""
Base Domain Classes

Building blocks used by the domain apps:
- ValueObject: Immutable objects compared by value
- DomainEvent: Events that represent something that happened
- EventRecorderMixin: Lets a Django model collect domain events until the
  surrounding unit of work commits
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import List
from uuid import UUID, uuid4


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


@dataclass(kw_only=True)
class DomainEvent:
    """
    Base class for domain events

    Domain events represent something that happened in the domain.
    They are published after the transaction that produced them commits.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=datetime.now)
    aggregate_id: UUID | None = None

    def to_dict(self) -> dict:
        """Convert event to dictionary for serialization"""
        return {
            'event_id': str(self.event_id),
            'event_type': self.__class__.__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': str(self.aggregate_id) if self.aggregate_id else None,
        }


class EventRecorderMixin:
    """
    Collects domain events on a model instance

    Aggregate roots (Booking, Review, ...) record events while their state
    changes; the unit of work pulls them out and publishes them once the
    transaction has committed.
    """

    def add_event(self, event: DomainEvent):
        """Add a domain event to be published"""
        if not hasattr(self, '_pending_events'):
            self._pending_events = []
        self._pending_events.append(event)

    def clear_events(self):
        """Clear all collected events (called after collecting)"""
        self._pending_events = []

    @property
    def events(self) -> List[DomainEvent]:
        """Get copy of collected events"""
        return list(getattr(self, '_pending_events', []))
