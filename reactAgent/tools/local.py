"""Tools that ship with the agent and need no external server."""

from datetime import datetime
from typing import Literal

from langchain_core.tools import tool
from pydantic import BaseModel, Field


class CalculatorInput(BaseModel):
    operation: Literal["add", "subtract", "multiply", "divide"] = Field(
        description="Arithmetic operation to perform"
    )
    a: float = Field(description="First number")
    b: float = Field(description="Second number")


@tool(args_schema=CalculatorInput)
def calculator(operation: str, a: float, b: float) -> str:
    """Useful for performing mathematical calculations."""
    if operation == "add":
        result = a + b
    elif operation == "subtract":
        result = a - b
    elif operation == "multiply":
        result = a * b
    elif operation == "divide":
        if b == 0:
            raise ValueError("Division by zero is not allowed")
        result = a / b
    else:
        raise ValueError(f"Unknown operation: {operation}")
    return f"Result of {operation}({a:g}, {b:g}) = {result:g}"


@tool
def get_current_time() -> str:
    """Get the current date and time.

    Returns:
        Local datetime, e.g. "Current time: 2025-10-23 10:30:00"
    """
    return f"Current time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"


LOCAL_TOOLS = [calculator, get_current_time]


__all__ = ["LOCAL_TOOLS", "calculator", "get_current_time"]
