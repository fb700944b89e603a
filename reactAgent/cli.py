"""Command line front end: sends user messages to the executor and prints
the A2A event stream as it is published.

Usage:
    # Interactive mode (default)
    react-agent

    # Single message
    react-agent --message "What is 12 times 7?"

    # Continue an earlier conversation of this process
    react-agent --context-id 5c1e...
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import uuid
from typing import Callable, Dict, Optional

from a2a.types import Message, Part, Role, Task, TaskStatusUpdateEvent, TextPart

from reactAgent.config import get_settings
from reactAgent.executor import ExecutionRequest, ReactAgentExecutor
from reactAgent.protocol import ExecutionEvent, InMemoryEventBus, message_text
from reactAgent.runtime import build_executor
from reactAgent.utils import setup_logging

LOGGER = logging.getLogger(__name__)


def user_message(text: str, context_id: Optional[str]) -> Message:
    return Message(
        role=Role.user,
        message_id=str(uuid.uuid4()),
        parts=[Part(root=TextPart(text=text))],
        context_id=context_id,
    )


def format_event(event: ExecutionEvent) -> str:
    """One display line per event."""
    if isinstance(event, Task):
        return f"[task {event.id[:8]}] {event.status.state.value}"

    if isinstance(event, TaskStatusUpdateEvent):
        state = event.status.state.value
        text = message_text(event.status.message) if event.status.message else ""
        marker = " (final)" if event.final else ""
        return f"[{state}{marker}] {text}".rstrip()

    return str(event)


class ReactAgentCLI:
    """Interactive loop keeping one conversation id across turns."""

    COMMANDS: Dict[str, str] = {
        "/quit": "Exit",
        "/exit": "Exit",
        "/help": "Show this help",
        "/new": "Start a new conversation",
        "/history": "Show the stored history of the current conversation",
        "/conversations": "List the conversations of this process",
    }

    def __init__(self, executor: ReactAgentExecutor, context_id: Optional[str] = None):
        self.executor = executor
        self.context_id = context_id
        self._handlers: Dict[str, Callable[[], bool]] = {
            "/quit": lambda: False,
            "/exit": lambda: False,
            "/help": self._handle_help,
            "/new": self._handle_new,
            "/history": self._handle_history,
            "/conversations": self._handle_conversations,
        }

    async def send(self, text: str) -> None:
        """Run one task and print its events as they arrive."""
        message = user_message(text, self.context_id)
        event_bus = InMemoryEventBus()

        printer = asyncio.create_task(self._print_events(event_bus))
        try:
            await self.executor.execute(ExecutionRequest(user_message=message), event_bus)
        finally:
            if event_bus.final_event is None:
                printer.cancel()
            await asyncio.gather(printer, return_exceptions=True)

    async def _print_events(self, event_bus: InMemoryEventBus) -> None:
        async for event in event_bus.stream():
            print(format_event(event))
            if self.context_id is None:
                self.context_id = event.context_id

    async def run(self) -> None:
        print("ReAct agent over A2A. Type /help for commands.")
        while True:
            try:
                user_input = (await asyncio.to_thread(input, "\nYou> ")).strip()
            except (KeyboardInterrupt, EOFError):
                print("\nBye!")
                break

            if not user_input:
                continue

            if user_input.startswith("/"):
                handler = self._handlers.get(user_input.split()[0])
                if handler is None:
                    print(f"Unknown command: {user_input}")
                    continue
                if not handler():
                    break
                continue

            await self.send(user_input)

    def _handle_help(self) -> bool:
        for command, description in self.COMMANDS.items():
            print(f"  {command:<15} {description}")
        return True

    def _handle_new(self) -> bool:
        self.context_id = None
        print("Started a new conversation.")
        return True

    def _handle_history(self) -> bool:
        if self.context_id not in self.executor.conversations:
            print("No conversation yet.")
            return True
        for message in self.executor.conversations.get(self.context_id):
            print(f"  {message.role.value}> {message_text(message)}")
        return True

    def _handle_conversations(self) -> bool:
        ids = self.executor.conversations.conversation_ids()
        if not ids:
            print("No conversation yet.")
        for context_id in ids:
            marker = "*" if context_id == self.context_id else " "
            print(f" {marker}{context_id}")
        return True


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="ReAct agent exposed through A2A task events",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--message", type=str, help="Send a single message and exit")
    parser.add_argument("--context-id", type=str, help="Conversation id to continue")
    parser.add_argument("--log-level", type=str, help="Console log level (default: from LOG_LEVEL)")
    return parser.parse_args(argv)


async def amain(argv=None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(args.log_level or settings.observability.log_level, settings.observability.log_dir)

    LOGGER.info("Starting ReAct agent CLI")
    executor = await build_executor(settings=settings)
    try:
        cli = ReactAgentCLI(executor, context_id=args.context_id)
        if args.message:
            await cli.send(args.message)
        else:
            await cli.run()
    finally:
        await executor.cleanup()
    return 0


def main() -> None:
    try:
        sys.exit(asyncio.run(amain()))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
