"""Unit tests for the tools shipped with the agent."""

import re

import pytest

from reactAgent.tools import LOCAL_TOOLS, calculator, get_current_time


class TestCalculator:

    @pytest.mark.parametrize(
        "operation, a, b, expected",
        [
            ("add", 2, 2, "Result of add(2, 2) = 4"),
            ("subtract", 10, 4.5, "Result of subtract(10, 4.5) = 5.5"),
            ("multiply", 12, 7, "Result of multiply(12, 7) = 84"),
            ("divide", 1, 4, "Result of divide(1, 4) = 0.25"),
        ],
    )
    def test_operations(self, operation, a, b, expected):
        assert calculator.invoke({"operation": operation, "a": a, "b": b}) == expected

    def test_divide_by_zero(self):
        with pytest.raises(ValueError, match="Division by zero"):
            calculator.invoke({"operation": "divide", "a": 1, "b": 0})

    def test_unknown_operation_rejected_by_schema(self):
        with pytest.raises(Exception):
            calculator.invoke({"operation": "power", "a": 2, "b": 3})

    def test_schema_describes_arguments(self):
        assert set(calculator.args) == {"operation", "a", "b"}
        assert calculator.description.startswith("Useful for performing mathematical calculations")


def test_current_time_format():
    result = get_current_time.invoke({})
    assert re.fullmatch(r"Current time: \d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", result)


def test_local_tool_names():
    assert [t.name for t in LOCAL_TOOLS] == ["calculator", "get_current_time"]
