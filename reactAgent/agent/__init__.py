"""Reasoning adapter and the frames it streams."""

from .adapter import LangGraphReasoningAdapter, ReasoningAdapter
from .schema import AgentTurn, Frame, TextFrame, ToolCallFrame, UnknownFrame

__all__ = [
    "AgentTurn",
    "Frame",
    "LangGraphReasoningAdapter",
    "ReasoningAdapter",
    "TextFrame",
    "ToolCallFrame",
    "UnknownFrame",
]
