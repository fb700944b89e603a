"""Builders for the A2A objects published during a task execution."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from a2a.types import (
    Message,
    Part,
    Role,
    Task,
    TaskState,
    TaskStatus,
    TaskStatusUpdateEvent,
    TextPart,
)

from reactAgent.agent.schema import AgentTurn


def utc_now() -> str:
    """Current UTC time as an ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat()


def new_agent_message(
    text: str,
    task_id: str,
    context_id: str,
    message_id: Optional[str] = None,
) -> Message:
    """Create an agent message with a single text part; the id is fresh unless given."""
    return Message(
        role=Role.agent,
        message_id=message_id or str(uuid.uuid4()),
        parts=[Part(root=TextPart(text=text))],
        task_id=task_id,
        context_id=context_id,
    )


def status_update(
    task_id: str,
    context_id: str,
    state: TaskState,
    message: Optional[Message] = None,
    final: bool = False,
) -> TaskStatusUpdateEvent:
    return TaskStatusUpdateEvent(
        task_id=task_id,
        context_id=context_id,
        status=TaskStatus(state=state, message=message, timestamp=utc_now()),
        final=final,
    )


def submitted_task(task_id: str, context_id: str, user_message: Message) -> Task:
    """Initial task snapshot; history starts with the triggering message."""
    return Task(
        id=task_id,
        context_id=context_id,
        status=TaskStatus(state=TaskState.submitted, timestamp=utc_now()),
        history=[user_message],
        metadata=user_message.metadata,
    )


def message_text(message: Message) -> str:
    """Join the non-empty text parts of a message with newlines.

    File and data parts are ignored.
    """
    texts = []
    for part in message.parts:
        inner = getattr(part, "root", part)
        if isinstance(inner, TextPart) and inner.text:
            texts.append(inner.text)
    return "\n".join(texts)


def project_history(messages: Iterable[Message]) -> List[AgentTurn]:
    """Project stored A2A messages to reasoning turns.

    Messages without text keep their place with empty content.
    """
    return [
        AgentTurn(
            role="assistant" if message.role == Role.agent else "user",
            content=message_text(message),
            message_id=message.message_id,
        )
        for message in messages
    ]


__all__ = [
    "message_text",
    "new_agent_message",
    "project_history",
    "status_update",
    "submitted_task",
    "utc_now",
]
