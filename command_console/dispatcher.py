"""
Command Dispatcher
==================

Resolves one command line and runs it.

Role in the System
------------------
This is the single place a console line turns into an action. The
execution queue calls it for every line it pops; hosts may also call it
directly for immediate execution.

    Line: "wait 3"
              ↓
    Echo ">wait 3"
              ↓
    tokenize → ["wait", "3"]
              ↓
    registry.lookup("wait") → WaitCommand
              ↓
    validate(["3"]) → execute(["3"], context) → CommandResult
              ↓
    Print summary or error

    Line: "sv.rate 30"
              ↓
    No command named "sv.rate" → variables["sv.rate"] = "30"

    Line: "frobnicate"
              ↓
    Neither command nor variable → "Unknown command: frobnicate"

Design Decisions
----------------
- Command and variable names are case-insensitive. The unknown-command
  message repeats the name exactly as typed.
- Validation failure prints the usage text and does not execute.
- Nothing escapes this boundary. An exception raised by a command is
  logged and reported as one output line, so a broken command can
  never stop the queue or the host's tick loop.
- Variable assignment takes exactly one token. ``name a b`` is reported
  as too many arguments rather than joined.
"""

from __future__ import annotations

import logging
from typing import Callable

from command_console.context import ConsoleContext, ERROR_PREFIX
from command_console.registry import CommandRegistry, CommandResult
from command_console.tokenizer import MAX_TOKENS, tokenize
from command_console.variables import VariableStore

logger = logging.getLogger(__name__)

ECHO_PREFIX = ">"


class Dispatcher:
    """Routes command lines to registered commands or variables.

    Parameters
    ----------
    registry : CommandRegistry
        Commands, consulted first.
    variables : VariableStore
        Fallback for names that are not commands.
    context : ConsoleContext
        Handed to every command as it executes.
    output : callable
        Receives every line the dispatcher prints.
    max_tokens : int
        Token cap passed to the tokenizer.
    """

    def __init__(self, registry: CommandRegistry, variables: VariableStore,
                 context: ConsoleContext, output: Callable[[str], None],
                 max_tokens: int = MAX_TOKENS):
        self.registry = registry
        self.variables = variables
        self.context = context
        self._output = output
        self.max_tokens = max_tokens

    def execute(self, line: str) -> None:
        """Tokenize, resolve and run one command line."""
        self._output(ECHO_PREFIX + line)

        tokens = tokenize(line, self.max_tokens)
        if not tokens:
            return

        name = tokens[0].lower()
        args = tokens[1:]

        command = self.registry.lookup(name)
        if command is not None:
            self._run_command(command, name, args)
            return

        var = self.variables.get(name)
        if var is not None:
            if not args:
                self._output(f"{var.name} = {var.value}")
            elif len(args) == 1:
                var.value = args[0]
            else:
                self._output("Too many arguments")
            return

        self._output(f"Unknown command: {tokens[0]}")

    def _run_command(self, command, name: str, args: list[str]) -> None:
        try:
            if not command.validate(args):
                self._output(f"Invalid arguments for command '{name}'")
                self._output(command.usage())
                return

            result = command.execute(args, self.context)
        except Exception as e:
            logger.exception(f"Command '{name}' raised")
            self._output(f"Error executing command '{name}': {e}")
            return

        if result is None:
            return
        if not isinstance(result, CommandResult):
            logger.error(f"Command '{name}' returned {type(result).__name__}, not CommandResult")
            self._output(f"Error executing command '{name}': unexpected result")
            return
        if result.is_error:
            self._output(f"{ERROR_PREFIX}{result.error}")
        elif result.summary:
            self._output(result.summary)
