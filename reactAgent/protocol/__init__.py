"""A2A protocol glue: message builders and event buses."""

from .event_bus import (
    EventQueueBus,
    ExecutionEvent,
    ExecutionEventBus,
    InMemoryEventBus,
    is_final,
)
from .messages import (
    message_text,
    new_agent_message,
    project_history,
    status_update,
    submitted_task,
)

__all__ = [
    "EventQueueBus",
    "ExecutionEvent",
    "ExecutionEventBus",
    "InMemoryEventBus",
    "is_final",
    "message_text",
    "new_agent_message",
    "project_history",
    "status_update",
    "submitted_task",
]
