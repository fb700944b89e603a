"""Persistence utilities."""

from .cancellation import CancellationRegistry
from .checkpointer import build_checkpointer
from .conversation_store import ConversationStore

__all__ = ["CancellationRegistry", "ConversationStore", "build_checkpointer"]
