"""Data shapes exchanged with the reasoning adapter.

AgentTurn is what goes in (one projected history entry); Frame is what comes
out (one streamed step of the reasoning graph). Frames are a closed set of
variants, each knowing how to render itself as the text published to clients:

- TextFrame: the latest message carries content
- ToolCallFrame: the latest message only requests tool calls
- UnknownFrame: anything else, rendered as a JSON dump of the payload

Every frame says explicitly whether the graph is waiting for more input, and
frames built from a model reply carry that reply's message id.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

TurnRole = Literal["user", "assistant"]


@dataclass(frozen=True, slots=True)
class AgentTurn:
    """One history entry projected to plain text."""

    role: TurnRole
    content: str
    message_id: Optional[str] = None


def _to_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


@dataclass(frozen=True, slots=True)
class Frame:
    """Base class of all streamed frames."""

    awaiting_input: bool = field(default=False, kw_only=True)
    message_id: Optional[str] = field(default=None, kw_only=True)

    def render(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class TextFrame(Frame):
    text: str

    def render(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class ToolCallFrame(Frame):
    tool_calls: List[Dict[str, Any]]

    def render(self) -> str:
        return _to_json(self.tool_calls)


@dataclass(frozen=True, slots=True)
class UnknownFrame(Frame):
    payload: Any

    def render(self) -> str:
        if isinstance(self.payload, str):
            return self.payload
        return _to_json(self.payload)


__all__ = [
    "AgentTurn",
    "Frame",
    "TextFrame",
    "ToolCallFrame",
    "UnknownFrame",
    "TurnRole",
]
