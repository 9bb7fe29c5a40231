"""
Command Registry
================

The table of named console commands.

Role in the System
------------------
Every line the console executes is resolved here first. The first
token is lowercased and looked up; a hit routes the rest of the tokens
to that command, a miss lets the dispatcher fall back to the variable
table.

    User types: "Spawn cube 0 1 0"
                  ↓
    Dispatcher lowercases "Spawn" → "spawn"
                  ↓
    registry.lookup("spawn") → SpawnCommand
                  ↓
    validate(["cube", "0", "1", "0"]) → execute(args, context)

Design Decisions
----------------
- Names are case-insensitive and stored lowercase. Registering "Say"
  after "say" is a duplicate.
- A duplicate registration is rejected and the existing entry is kept.
  The caller gets False back; nothing is raised, because bootstrap code
  commonly registers a batch and should not stop at the first clash.
- Commands carry an integer tag. Tag 0 means "ungrouped"; any other
  value lets a plugin remove all of its commands in one call with
  unregister_by_tag().
- The registry does not instantiate or discover commands. Whoever
  bootstraps the console builds the Command objects and hands them in.

Classes
-------
Category
    Grouping used by the help listing.

CommandResult
    Structured outcome of one command execution.

Command (ABC)
    Base class for all console commands. Subclass to add commands.
    Required: name, description, usage(), execute(args, context).
    Optional: category, tag, validate(args).

CommandRegistry
    Name → Command mapping with register / unregister / lookup.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from command_console.context import ConsoleContext

logger = logging.getLogger(__name__)


class Category(Enum):
    """Help-listing groups, in display order."""
    GENERAL = "General"
    SYSTEM = "System"
    SCRIPTING = "Scripting"
    DEBUG = "Debug"
    DEVELOPMENT = "Development"
    GAME = "Game"
    TESTING = "Testing"

    def __str__(self) -> str:
        return self.value

    @property
    def order(self) -> int:
        return list(Category).index(self)


@dataclass
class CommandResult:
    """Structured output from a command execution.

    Attributes
    ----------
    command : str
        The command name that produced this result.

    summary : str
        One line printed after the command ran. Empty means the
        command already wrote everything it wanted through the
        context.

    details : dict
        Structured data for callers that want more than text
        (for example the spawned object's position).

    error : str or None
        If set, the command was recognized but could not do its job.
        The dispatcher prints it as an error line.
    """
    command: str
    summary: str = ""
    details: dict = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        """Check if this result represents an error."""
        return self.error is not None

    @classmethod
    def ok(cls, command: str, summary: str = "", **details) -> "CommandResult":
        return cls(command=command, summary=summary, details=details)

    @classmethod
    def failed(cls, command: str, error: str) -> "CommandResult":
        return cls(command=command, error=error)


class Command(ABC):
    """Base class for all console commands.

    Required Properties
    -------------------
    name : str
        What the user types. Compared case-insensitively.

    description : str
        One-line description shown in ``help`` listings.

    Required Methods
    ----------------
    usage() -> str
        Usage text, printed by ``help <name>`` and after a failed
        validation.

    execute(args, context) -> CommandResult
        Run the command. ``args`` are the tokens after the name.
        Output goes through ``context``; the returned result carries
        the final status.

    Optional
    --------
    category : Category
        Defaults to GENERAL.
    tag : int
        Defaults to 0 (ungrouped).
    validate(args) -> bool
        Checked before execute(). Defaults to accepting anything.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        ...

    @property
    def category(self) -> Category:
        return Category.GENERAL

    @property
    def tag(self) -> int:
        return 0

    @abstractmethod
    def usage(self) -> str:
        ...

    def validate(self, args: list[str]) -> bool:
        return True

    @abstractmethod
    def execute(self, args: list[str], context: ConsoleContext) -> CommandResult:
        ...

    # ─── Helpers for subclasses ─────────────────────────────────────

    def parse_int(self, arg: str, context: ConsoleContext,
                  param_name: str = "value") -> Optional[int]:
        """Parse an integer argument, writing an error line on failure."""
        try:
            return int(arg)
        except ValueError:
            context.write_error(f"Invalid {param_name}: '{arg}'. Expected integer value.")
            return None

    def check_arg_count(self, args: list[str], context: ConsoleContext,
                        minimum: int, maximum: Optional[int] = None) -> bool:
        """Check ``minimum <= len(args) <= maximum`` and print usage if not.

        With ``maximum`` omitted the count must equal ``minimum``.
        """
        if maximum is None:
            maximum = minimum
        if minimum <= len(args) <= maximum:
            return True

        expected = str(minimum) if minimum == maximum else f"{minimum}-{maximum}"
        context.write_error(f"Invalid argument count. Expected {expected}, got {len(args)}")
        context.write_line(self.usage())
        return False


class CommandRegistry:
    """Name → Command table.

    Lookups are case-insensitive. Iteration order is registration
    order, which is the order tab completion enumerates names in.
    """

    def __init__(self):
        self._commands: dict[str, Command] = {}

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._commands

    def register(self, command: Command) -> bool:
        """Register a command.

        Returns
        -------
        bool
            True if added. False if ``command`` is None or its name
            (case-insensitively) is already taken; the existing entry
            is left in place.
        """
        if command is None:
            logger.error("Cannot register null command")
            return False

        key = command.name.lower()
        if key in self._commands:
            logger.warning(f"Command '{key}' is already registered")
            return False

        self._commands[key] = command
        return True

    def register_all(self, commands: Iterable[Command]) -> int:
        """Register each command in turn; returns how many were added."""
        return sum(1 for command in commands if self.register(command))

    def unregister(self, name: str) -> bool:
        return self._commands.pop(name.lower(), None) is not None

    def unregister_by_tag(self, tag: int) -> int:
        """Remove every command carrying ``tag``; returns the count removed."""
        doomed = [key for key, command in self._commands.items() if command.tag == tag]
        for key in doomed:
            del self._commands[key]
        return len(doomed)

    def lookup(self, name: str) -> Optional[Command]:
        return self._commands.get(name.lower())

    def names(self) -> list[str]:
        """Registered (lowercase) names in registration order."""
        return list(self._commands)

    def all_names(self) -> set[str]:
        return set(self._commands)

    def all_commands(self, category: Optional[Category] = None) -> list[Command]:
        """All commands, optionally only those in ``category``."""
        if category is None:
            return list(self._commands.values())
        return [c for c in self._commands.values() if c.category == category]

    def clear(self) -> None:
        self._commands.clear()
