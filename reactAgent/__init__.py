"""reactAgent - LangGraph ReAct agent exposed through A2A task events."""

from reactAgent.executor import ExecutionRequest, ReactAgentExecutor

__version__ = "0.1.0"
__all__ = ["ExecutionRequest", "ReactAgentExecutor"]
