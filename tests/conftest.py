"""Pytest configuration and fixtures for all tests.

Provides a scripted reasoning adapter so executor tests never reach a real model.
"""

import asyncio
import os
import sys
import uuid
from pathlib import Path
from typing import List, Optional, Sequence

import pytest

# Ensure project root is in PYTHONPATH for imports to work
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Settings must not pick up a developer's MCP servers or log directory
os.environ.setdefault("MCP_ENABLED", "false")

from a2a.types import DataPart, Message, Part, Role, TextPart  # noqa: E402

from reactAgent.agent.schema import AgentTurn, Frame  # noqa: E402


class ScriptedAdapter:
    """Reasoning adapter double yielding a fixed list of frames.

    Records every call; `error` is raised after the frames are exhausted,
    `before_frame` runs before each frame is yielded.
    """

    def __init__(self, frames: Sequence[Frame] = (), error: Optional[Exception] = None, before_frame=None):
        self.frames = list(frames)
        self.error = error
        self.before_frame = before_frame
        self.calls: List[tuple] = []
        self.frames_yielded = 0
        self.closed = False

    async def stream(self, history: Sequence[AgentTurn], conversation_key: str):
        self.calls.append((list(history), conversation_key))
        for index, frame in enumerate(self.frames):
            if self.before_frame is not None:
                self.before_frame(index)
            await asyncio.sleep(0)
            self.frames_yielded += 1
            yield frame
        if self.error is not None:
            raise self.error

    async def aclose(self):
        self.closed = True


def make_user_message(
    text: Optional[str] = "hello",
    *,
    message_id: Optional[str] = None,
    context_id: Optional[str] = None,
    data: Optional[dict] = None,
) -> Message:
    parts = []
    if text is not None:
        parts.append(Part(root=TextPart(text=text)))
    if data is not None:
        parts.append(Part(root=DataPart(data=data)))
    return Message(
        role=Role.user,
        message_id=message_id or str(uuid.uuid4()),
        parts=parts,
        context_id=context_id,
    )


@pytest.fixture
def scripted_adapter():
    return ScriptedAdapter


@pytest.fixture
def make_message():
    return make_user_message
