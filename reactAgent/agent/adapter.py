"""Reasoning adapter: runs the LangGraph ReAct agent and streams frames.

The executor only depends on the ReasoningAdapter protocol. The LangGraph
implementation assembles its tools once, builds a prebuilt ReAct graph
with a checkpointer keyed by conversation, and turns every streamed state
into a Frame.
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import logging
from typing import (
    Any,
    AsyncIterator,
    Callable,
    List,
    Optional,
    Protocol,
    Sequence,
    runtime_checkable,
)

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_core.tools import BaseTool

from reactAgent.agent.schema import AgentTurn, Frame, TextFrame, ToolCallFrame, UnknownFrame
from reactAgent.tools.mcp import MCPServerManager, ToolDiscovery, discover_tools

LOGGER = logging.getLogger(__name__)

INTERRUPT_KEY = "__interrupt__"

GraphFactory = Callable[[BaseChatModel, List[BaseTool], Any], Any]


@runtime_checkable
class ReasoningAdapter(Protocol):
    """Runs the reasoning engine over a conversation history."""

    def stream(self, history: Sequence[AgentTurn], conversation_key: str) -> AsyncIterator[Frame]:
        ...


def build_react_graph(model: BaseChatModel, tools: List[BaseTool], checkpointer: Any):
    """Default graph factory: LangGraph's prebuilt ReAct agent."""
    from langgraph.prebuilt import create_react_agent

    return create_react_agent(model, tools, checkpointer=checkpointer)


def to_langchain_messages(history: Sequence[AgentTurn]) -> List[BaseMessage]:
    """Convert projected turns to LangChain messages.

    Turns without content are skipped. Message ids are kept so the graph's
    add_messages reducer recognises turns it has already checkpointed.
    """
    messages: List[BaseMessage] = []
    for turn in history:
        if not turn.content:
            continue
        if turn.role == "assistant":
            messages.append(AIMessage(content=turn.content, id=turn.message_id))
        else:
            messages.append(HumanMessage(content=turn.content, id=turn.message_id))
    return messages


def message_to_frame(message: Any) -> Frame:
    """Classify the latest message of a streamed state.

    Frames built from a model reply keep the reply's id, so the stored
    agent message and the checkpointed AIMessage are the same message.
    """
    message_id = message.id if isinstance(message, AIMessage) else None

    content = getattr(message, "content", None)
    if content:
        if isinstance(content, str):
            return TextFrame(content, message_id=message_id)
        return TextFrame(json.dumps(content, ensure_ascii=False, default=str), message_id=message_id)

    tool_calls = getattr(message, "tool_calls", None)
    if tool_calls:
        return ToolCallFrame([dict(call) for call in tool_calls], message_id=message_id)

    if hasattr(message, "model_dump"):
        return UnknownFrame(message.model_dump(), message_id=message_id)
    return UnknownFrame(message)


def chunk_to_frame(chunk: Any) -> Frame:
    """Turn one `stream_mode="values"` chunk into a frame."""
    if not isinstance(chunk, dict):
        return UnknownFrame(chunk)

    if chunk.get(INTERRUPT_KEY):
        interrupts = chunk[INTERRUPT_KEY]
        values = [getattr(item, "value", item) for item in interrupts]
        payload = values[0] if len(values) == 1 else values
        return UnknownFrame(payload, awaiting_input=True)

    messages = chunk.get("messages") or []
    if not messages:
        return UnknownFrame(chunk)
    return message_to_frame(messages[-1])


class LangGraphReasoningAdapter:
    """ReasoningAdapter backed by a LangGraph ReAct agent.

    Initialization (tool discovery and graph compilation) happens once, on
    the first `initialize()` or `stream()` call; concurrent callers wait for
    the same run. Discovery failures degrade to the local tools, any other
    initialization error propagates to every caller.

    Frames are yielded as soon as the graph produces them. An `__interrupt__`
    chunk marks its frame `awaiting_input`; when the stream ends without
    one but the checkpointed state still has pending nodes, the last frame
    is yielded once more with `awaiting_input` set.
    """

    def __init__(
        self,
        model: BaseChatModel,
        *,
        local_tools: Sequence[BaseTool] = (),
        mcp_config: Optional[dict] = None,
        checkpointer: Any = None,
        recursion_limit: int = 25,
        graph_factory: GraphFactory = build_react_graph,
    ):
        self.model = model
        self.local_tools = list(local_tools)
        self.mcp_config = mcp_config or {"servers": {}, "settings": {}}
        self.checkpointer = checkpointer
        self.recursion_limit = recursion_limit
        self.graph_factory = graph_factory

        self.mcp_manager: Optional[MCPServerManager] = None
        self.discovery: Optional[ToolDiscovery] = None
        self._graph = None
        self._init_lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return self._graph is not None

    async def initialize(self):
        """Assemble tools and compile the graph; returns the compiled graph."""
        async with self._init_lock:
            if self._graph is not None:
                return self._graph

            self.mcp_manager = MCPServerManager(self.mcp_config)
            self.discovery = await discover_tools(self.local_tools, self.mcp_config, self.mcp_manager)
            if self.discovery.degraded:
                LOGGER.warning(
                    f"Reasoning adapter running with reduced tool set: {self.discovery.degraded_reason}"
                )

            self._graph = self.graph_factory(self.model, self.discovery.tools, self.checkpointer)
            LOGGER.info(
                f"Reasoning adapter initialized with {len(self.discovery.tools)} tools: "
                f"{self.discovery.tool_names}"
            )
            return self._graph

    def _run_config(self, conversation_key: str) -> dict:
        return {
            "configurable": {"thread_id": conversation_key},
            "recursion_limit": self.recursion_limit,
        }

    async def stream(self, history: Sequence[AgentTurn], conversation_key: str) -> AsyncIterator[Frame]:
        graph = await self.initialize()
        config = self._run_config(conversation_key)
        inputs = {"messages": to_langchain_messages(history)}

        last: Optional[Frame] = None
        async for chunk in graph.astream(inputs, config=config, stream_mode="values"):
            last = chunk_to_frame(chunk)
            yield last

        if last is None or last.awaiting_input:
            return

        # A graph paused without an interrupt chunk repeats its last frame flagged
        if await self._graph_paused(graph, config):
            yield dataclasses.replace(last, awaiting_input=True)

    async def _graph_paused(self, graph: Any, config: dict) -> bool:
        """Whether the checkpointed graph still has nodes to run."""
        if self.checkpointer is None:
            return False
        snapshot = await graph.aget_state(config)
        return bool(snapshot.next)

    async def aclose(self):
        """Release MCP connections. Errors are logged, never raised."""
        if self.mcp_manager is None:
            return
        try:
            await self.mcp_manager.shutdown()
        except Exception as e:
            LOGGER.error(f"Error closing MCP connections: {e}")


__all__ = [
    "LangGraphReasoningAdapter",
    "ReasoningAdapter",
    "build_react_graph",
    "chunk_to_frame",
    "message_to_frame",
    "to_langchain_messages",
]
