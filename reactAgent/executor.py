"""ReactAgentExecutor - drives one A2A task per inbound user message.

Event sequence of a normal execution:

    task(submitted)            only when no existing task was referenced
    status-update(working)     "Processing your request..."
    status-update(working)     one per streamed frame
    status-update(completed | input-required, final=True)

Cancellation is cooperative: the registry is polled before the reasoning
step starts and before each frame is published. A task whose history has
no text at all fails before anything else is published. Exactly one event
with final=True is published per execution and nothing follows it.

Only the triggering user message and the final agent message enter the
conversation history; intermediate progress messages never do. The final
agent message keeps the id of the model reply it renders.

Any error after the input check, event bus faults included, ends the task
as failed. Only a failure to publish that failed event reaches the caller.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from typing import List, Optional

from a2a.types import Message, Task, TaskState

from reactAgent.agent.adapter import ReasoningAdapter
from reactAgent.agent.schema import Frame
from reactAgent.persistence import CancellationRegistry, ConversationStore
from reactAgent.protocol.event_bus import ExecutionEvent, ExecutionEventBus, is_final
from reactAgent.protocol.messages import (
    new_agent_message,
    project_history,
    status_update,
    submitted_task,
)

LOGGER = logging.getLogger(__name__)

WORKING_TEXT = "Processing your request..."
NO_MESSAGE_TEXT = "No message found to process."
DEFAULT_RESPONSE_TEXT = "Completed."


@dataclass
class ExecutionRequest:
    """Inbound request context handed over by the transport.

    `task` references an existing task to continue; `task_id` and
    `context_id` are ids the transport already allocated for a new task.
    """

    user_message: Message
    task: Optional[Task] = None
    task_id: Optional[str] = None
    context_id: Optional[str] = None


class _Execution:
    """Publishing state of one execution."""

    def __init__(self, task_id: str, context_id: str, event_bus: ExecutionEventBus):
        self.task_id = task_id
        self.context_id = context_id
        self.event_bus = event_bus
        self.finished = False

    async def publish(self, event: ExecutionEvent) -> None:
        if self.finished:
            raise RuntimeError(f"Task {self.task_id} already published its final event")
        await self.event_bus.publish(event)
        if is_final(event):
            self.finished = True

    async def update(self, state: TaskState, text: Optional[str] = None, final: bool = False) -> None:
        message = new_agent_message(text, self.task_id, self.context_id) if text is not None else None
        await self.publish(status_update(self.task_id, self.context_id, state, message, final=final))


class ReactAgentExecutor:
    """Task orchestrator between the A2A event stream and the reasoning adapter.

    Args:
        adapter: Reasoning adapter producing frames for a history
        conversations: Conversation store (a fresh one when omitted)
        cancellations: Cancellation registry (a fresh one when omitted)
        serialize_conversations: Run executions of the same conversation one
            at a time, so history read-modify-write cannot interleave
    """

    def __init__(
        self,
        adapter: ReasoningAdapter,
        *,
        conversations: Optional[ConversationStore] = None,
        cancellations: Optional[CancellationRegistry] = None,
        serialize_conversations: bool = True,
    ):
        self.adapter = adapter
        self.conversations = conversations if conversations is not None else ConversationStore()
        self.cancellations = cancellations if cancellations is not None else CancellationRegistry()
        self.serialize_conversations = serialize_conversations

    async def cancel_task(self, task_id: str) -> None:
        """Request cancellation; the running execution publishes the final event."""
        self.cancellations.mark_cancelled(task_id)

    async def cleanup(self) -> None:
        """Release adapter resources. Failures are logged, never raised."""
        aclose = getattr(self.adapter, "aclose", None)
        if aclose is None:
            return
        try:
            await aclose()
            LOGGER.info("Executor resources released")
        except Exception as e:
            LOGGER.error(f"Error during executor cleanup: {e}")

    async def execute(self, request: ExecutionRequest, event_bus: ExecutionEventBus) -> None:
        """Run one task for the request's user message, publishing to `event_bus`."""
        user_message = request.user_message
        existing_task = request.task

        task_id = existing_task.id if existing_task else (request.task_id or str(uuid.uuid4()))
        context_id = self._resolve_context_id(request)

        LOGGER.info(
            f"Processing message {user_message.message_id} for task {task_id} (context: {context_id})"
        )

        execution = _Execution(task_id, context_id, event_bus)
        if self.serialize_conversations:
            async with self.conversations.lock(context_id):
                await self._run(execution, user_message, existing_task)
        else:
            await self._run(execution, user_message, existing_task)

    def _resolve_context_id(self, request: ExecutionRequest) -> str:
        message_context = request.user_message.context_id
        task = request.task

        if task is not None:
            if message_context and message_context != task.context_id:
                LOGGER.warning(
                    f"Message context {message_context} differs from task {task.id} "
                    f"context {task.context_id}; keeping the task's context"
                )
            return task.context_id

        return message_context or request.context_id or str(uuid.uuid4())

    def _append_user_message(self, context_id: str, user_message: Message) -> List[Message]:
        history = self.conversations.get(context_id)
        if not any(m.message_id == user_message.message_id for m in history):
            history.append(user_message)
        self.conversations.put(context_id, history)
        return history

    async def _run(
        self,
        execution: _Execution,
        user_message: Message,
        existing_task: Optional[Task],
    ) -> None:
        task_id, context_id = execution.task_id, execution.context_id

        history = self._append_user_message(context_id, user_message)
        turns = project_history(history)

        if not any(turn.content for turn in turns):
            LOGGER.warning(f"No valid text messages found in history for task {task_id}.")
            await execution.update(TaskState.failed, NO_MESSAGE_TEXT, final=True)
            return

        try:
            if existing_task is None:
                await execution.publish(submitted_task(task_id, context_id, user_message))

            await execution.update(TaskState.working, WORKING_TEXT)

            if self.cancellations.is_cancelled(task_id):
                LOGGER.info(f"Request cancelled for task: {task_id}")
                await execution.update(TaskState.canceled, final=True)
                return

            last_frame: Optional[Frame] = None

            frames = self.adapter.stream(turns, context_id)
            try:
                async for frame in frames:
                    if self.cancellations.is_cancelled(task_id):
                        LOGGER.info(f"Request cancelled during execution for task: {task_id}")
                        await execution.update(TaskState.canceled, final=True)
                        return

                    repeated = (
                        last_frame is not None
                        and frame.awaiting_input
                        and frame == replace(last_frame, awaiting_input=True)
                    )
                    last_frame = frame
                    # A frame repeated only to flag awaiting input is not progress
                    if not repeated:
                        await execution.update(TaskState.working, frame.render())
            finally:
                aclose = getattr(frames, "aclose", None)
                if aclose is not None:
                    await aclose()

            agent_message = self._final_message(history, last_frame, task_id, context_id)
            self.conversations.put(context_id, [*history, agent_message])

            awaiting_input = last_frame is not None and last_frame.awaiting_input
            final_state = TaskState.input_required if awaiting_input else TaskState.completed
            await execution.publish(
                status_update(task_id, context_id, final_state, agent_message, final=True)
            )
            LOGGER.info(f"Task {task_id} finished with state: {final_state.value}")

        except Exception as e:
            LOGGER.exception(f"Error processing task {task_id}")
            if execution.finished:
                return
            # Drop the agent message if it was stored before the failure
            self.conversations.put(context_id, history)
            await execution.update(TaskState.failed, f"Agent error: {e}", final=True)

    @staticmethod
    def _final_message(
        history: List[Message],
        last_frame: Optional[Frame],
        task_id: str,
        context_id: str,
    ) -> Message:
        """Agent message persisted for the execution.

        It reuses the model reply's id so the reasoning engine recognises the
        reply when the history is replayed on the next turn.
        """
        if last_frame is None:
            return new_agent_message(DEFAULT_RESPONSE_TEXT, task_id, context_id)

        message_id = last_frame.message_id
        if message_id and any(m.message_id == message_id for m in history):
            message_id = None
        return new_agent_message(last_frame.render() or DEFAULT_RESPONSE_TEXT, task_id, context_id, message_id)


__all__ = [
    "DEFAULT_RESPONSE_TEXT",
    "ExecutionRequest",
    "NO_MESSAGE_TEXT",
    "ReactAgentExecutor",
    "WORKING_TEXT",
]
