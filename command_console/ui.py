"""
Console UI Boundary
===================

What the console core needs from whatever displays it.

The widget, terminal or overlay that shows console output lives
outside this package. It only has to implement ``ConsoleUI``. Two
implementations ship here:

    BufferedUI    keeps output in memory (headless hosts, tests)
    TerminalUI    prints to a stream (the interactive demo)
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import TextIO


class ConsoleUI(ABC):
    """Display side of the console."""

    def init(self) -> None:
        pass

    def shutdown(self) -> None:
        pass

    @abstractmethod
    def output_string(self, message: str) -> None:
        ...

    def is_open(self) -> bool:
        return True

    def set_open(self, open: bool) -> None:
        pass

    def console_update(self) -> None:
        """Called at the start of every tick, before the queue drains."""

    def console_late_update(self) -> None:
        pass

    def set_prompt(self, prompt: str) -> None:
        pass


class BufferedUI(ConsoleUI):
    """Collects output lines in a list."""

    def __init__(self):
        self.lines: list[str] = []
        self.prompt = ""
        self._open = False

    def output_string(self, message: str) -> None:
        self.lines.append(message)

    def is_open(self) -> bool:
        return self._open

    def set_open(self, open: bool) -> None:
        self._open = open

    def set_prompt(self, prompt: str) -> None:
        self.prompt = prompt

    def take(self) -> list[str]:
        """Return and forget everything collected so far."""
        lines, self.lines = self.lines, []
        return lines


class TerminalUI(ConsoleUI):
    """Writes each output line to a text stream."""

    def __init__(self, stream: TextIO = None, prompt: str = "] "):
        self.stream = stream or sys.stdout
        self.prompt = prompt

    def output_string(self, message: str) -> None:
        print(message, file=self.stream)

    def set_prompt(self, prompt: str) -> None:
        self.prompt = prompt
