"""Transaction events and helpers to search them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


class EventNotFoundError(LookupError):
    """Raised when an event or attribute being searched for does not exist."""


@dataclass(frozen=True)
class Attribute:
    """A key/value pair attached to an event."""

    key: str
    value: str


@dataclass(frozen=True)
class Event:
    """An event emitted while executing a block or a message."""

    type: str
    attributes: tuple[Attribute, ...] = ()


@dataclass(frozen=True)
class MessageLog:
    """The events emitted by the message at the given index of a transaction."""

    msg_index: int
    events: tuple[Event, ...] = ()


@dataclass(frozen=True)
class Tx:
    """A transaction included in a block."""

    hash: str
    height: int
    logs: tuple[MessageLog, ...] = ()

    def find_event_by_type(self, index: int, event_type: str) -> Event:
        """Return the first event of the given type emitted by the message at index."""
        for log in self.logs:
            if log.msg_index != index:
                continue
            for event in log.events:
                if event.type == event_type:
                    return event
        raise EventNotFoundError(
            f"no {event_type} event found inside tx with hash {self.hash}"
        )

    def find_attribute_by_key(self, event: Event, key: str) -> str:
        """Return the value of the attribute with the given key inside event."""
        for attribute in event.attributes:
            if attribute.key == key:
                return attribute.value
        raise EventNotFoundError(
            f"no event with attribute {key} found inside tx with hash {self.hash}"
        )


def find_events_by_type(events: Iterable[Event], event_type: str) -> list[Event]:
    """Return all the events having the given type, in order."""
    return [event for event in events if event.type == event_type]


def find_attribute_by_key(event: Event, key: str) -> Attribute:
    """Return the first attribute of event having the given key."""
    for attribute in event.attributes:
        if attribute.key == key:
            return attribute
    raise EventNotFoundError(f"no attribute with key {key} found inside event with type {event.type}")