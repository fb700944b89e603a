"""Publish channels for task lifecycle events.

The executor only needs `publish`; transports decide what happens next.
InMemoryEventBus records events and lets a consumer iterate them live,
EventQueueBus forwards them to an a2a-sdk EventQueue.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, AsyncIterator, List, Protocol, Union, runtime_checkable

from a2a.types import Task, TaskStatusUpdateEvent

if TYPE_CHECKING:
    from a2a.server.events import EventQueue

LOGGER = logging.getLogger(__name__)

ExecutionEvent = Union[Task, TaskStatusUpdateEvent]


def is_final(event: ExecutionEvent) -> bool:
    """Whether an event terminates the execution it belongs to."""
    return isinstance(event, TaskStatusUpdateEvent) and event.final


@runtime_checkable
class ExecutionEventBus(Protocol):
    """Per-execution channel the executor writes lifecycle events to."""

    async def publish(self, event: ExecutionEvent) -> None:
        ...


class InMemoryEventBus:
    """Event bus that keeps every published event.

    `events` holds the full ordered record; `stream()` yields events as they
    are published and stops after the final one.
    """

    def __init__(self) -> None:
        self.events: List[ExecutionEvent] = []
        self._queue: asyncio.Queue[ExecutionEvent] = asyncio.Queue()

    async def publish(self, event: ExecutionEvent) -> None:
        self.events.append(event)
        await self._queue.put(event)
        LOGGER.debug(f"Published {event.kind} event ({len(self.events)} total)")

    async def stream(self) -> AsyncIterator[ExecutionEvent]:
        while True:
            event = await self._queue.get()
            yield event
            if is_final(event):
                return

    @property
    def final_event(self) -> TaskStatusUpdateEvent | None:
        for event in reversed(self.events):
            if is_final(event):
                return event
        return None


class EventQueueBus:
    """Adapter publishing to an a2a-sdk EventQueue."""

    def __init__(self, event_queue: "EventQueue") -> None:
        self._event_queue = event_queue

    async def publish(self, event: ExecutionEvent) -> None:
        await self._event_queue.enqueue_event(event)


__all__ = [
    "EventQueueBus",
    "ExecutionEvent",
    "ExecutionEventBus",
    "InMemoryEventBus",
    "is_final",
]
