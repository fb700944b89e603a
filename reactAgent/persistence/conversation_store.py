"""In-process conversation history keyed by A2A context id."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterable, List

from a2a.types import Message

LOGGER = logging.getLogger(__name__)


class ConversationStore:
    """Ordered message history per conversation.

    Lives for the lifetime of the process; nothing is written to disk.
    `get` and `put` copy the sequence so callers never share a list with
    the store. `lock` hands out one asyncio.Lock per conversation for
    callers that need read-modify-write to be exclusive.
    """

    def __init__(self) -> None:
        self._histories: Dict[str, List[Message]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def get(self, context_id: str) -> List[Message]:
        """Return a copy of the history for a conversation (empty if unknown)."""
        return list(self._histories.get(context_id, []))

    def put(self, context_id: str, messages: Iterable[Message]) -> None:
        """Replace the stored history for a conversation."""
        self._histories[context_id] = list(messages)
        LOGGER.debug(f"Stored {len(self._histories[context_id])} messages for context {context_id}")

    def lock(self, context_id: str) -> asyncio.Lock:
        """Return the lock guarding a conversation, creating it on first use."""
        if context_id not in self._locks:
            self._locks[context_id] = asyncio.Lock()
        return self._locks[context_id]

    def conversation_ids(self) -> List[str]:
        return list(self._histories.keys())

    def __contains__(self, context_id: object) -> bool:
        return context_id in self._histories

    def __len__(self) -> int:
        return len(self._histories)


__all__ = ["ConversationStore"]
