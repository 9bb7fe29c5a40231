"""
Console Context
===============

The handle a command receives while it executes.

Commands never touch the console's internals directly. Everything a
command may do (print, queue more lines, pause the queue, ask whether
another command exists) goes through this facade, so a misbehaving
command cannot corrupt the queue or history.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from command_console.console import Console
    from command_console.registry import CommandRegistry
    from command_console.variables import VariableStore

ERROR_PREFIX = "[ERROR] "
WARNING_PREFIX = "[WARNING] "


class ConsoleContext:
    """Facade over one Console instance."""

    def __init__(self, console: Console):
        self._console = console

    @property
    def registry(self) -> CommandRegistry:
        return self._console.registry

    @property
    def variables(self) -> VariableStore:
        return self._console.variables

    @property
    def config(self):
        return self._console.config

    def write_line(self, message: str) -> None:
        self._console.write(message)

    def write_error(self, message: str) -> None:
        self._console.write(f"{ERROR_PREFIX}{message}")

    def write_warning(self, message: str) -> None:
        self._console.write(f"{WARNING_PREFIX}{message}")

    def enqueue_command(self, command: str) -> None:
        """Queue a line behind everything already pending. Not recorded in history."""
        self._console.enqueue(command)

    def set_wait_frames(self, frames: int) -> None:
        """Hold the queue for ``frames`` ticks after the current one."""
        self._console.queue.gate.frames_remaining = max(0, frames)

    def set_wait_for_load(self, wait: bool) -> None:
        self._console.queue.gate.wait_for_load(wait)

    def is_command_registered(self, name: str) -> bool:
        return name in self._console.registry
