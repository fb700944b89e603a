"""Checkpointer for LangGraph state persistence.

The ReAct graph checkpoints its state per conversation (thread_id = A2A context id),
which is also how a paused graph is detected after a stream ends.
"""

from __future__ import annotations

from langgraph.checkpoint.memory import MemorySaver


def build_checkpointer() -> MemorySaver:
    """Build an in-memory LangGraph checkpointer.

    State lives as long as the process, matching the conversation store.

    Returns:
        MemorySaver instance for LangGraph checkpointing
    """
    return MemorySaver()
