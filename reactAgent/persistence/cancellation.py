"""Process-wide set of task ids marked for cancellation."""

from __future__ import annotations

import logging
from typing import Set

LOGGER = logging.getLogger(__name__)


class CancellationRegistry:
    """Monotonic cancellation markers.

    A marked task id stays marked until the process exits. The registry is
    only polled; it never notifies or waits on the execution it targets.
    """

    def __init__(self) -> None:
        self._cancelled: Set[str] = set()

    def mark_cancelled(self, task_id: str) -> None:
        """Mark a task as cancelled. Marking twice is a no-op."""
        if task_id not in self._cancelled:
            self._cancelled.add(task_id)
            LOGGER.info(f"Task marked for cancellation: {task_id}")

    def is_cancelled(self, task_id: str) -> bool:
        return task_id in self._cancelled

    def __len__(self) -> int:
        return len(self._cancelled)


__all__ = ["CancellationRegistry"]
