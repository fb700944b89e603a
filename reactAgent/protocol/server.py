"""Bridge from the a2a-sdk server seam to ReactAgentExecutor.

a2a-sdk's request handlers drive an `AgentExecutor` with a RequestContext
and an EventQueue; this class maps both onto the executor's own request
and event bus types.
"""

from __future__ import annotations

import logging

from a2a.server.agent_execution import AgentExecutor, RequestContext
from a2a.server.events import EventQueue

from reactAgent.executor import ExecutionRequest, ReactAgentExecutor
from reactAgent.protocol.event_bus import EventQueueBus

LOGGER = logging.getLogger(__name__)


class A2AAgentExecutor(AgentExecutor):
    """a2a-sdk AgentExecutor delegating to a ReactAgentExecutor."""

    def __init__(self, executor: ReactAgentExecutor):
        self.executor = executor

    async def execute(self, context: RequestContext, event_queue: EventQueue) -> None:
        if context.message is None:
            raise ValueError("A2A request carries no message to process")

        request = ExecutionRequest(
            user_message=context.message,
            task=context.current_task,
            task_id=context.task_id,
            context_id=context.context_id,
        )
        await self.executor.execute(request, EventQueueBus(event_queue))

    async def cancel(self, context: RequestContext, event_queue: EventQueue) -> None:
        task_id = context.task_id or (context.current_task.id if context.current_task else None)
        if not task_id:
            raise ValueError("A2A cancel request does not reference a task")

        LOGGER.info(f"Cancel requested for task: {task_id}")
        await self.executor.cancel_task(task_id)


__all__ = ["A2AAgentExecutor"]
