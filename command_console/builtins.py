"""
Built-in Commands
=================

The commands every console starts with.

    help [cmd]          List commands, or show one command in detail
    vars [filter]       List variables and their values
    wait [n]            Hold the queue for n ticks (default 1)
    waitload            Hold the queue until the host reports load done
    exec [-s] <file>    Queue every command in a script file

``help``, ``vars``, ``wait`` and ``exec`` are registered by the console
itself before any host-supplied commands; a host passing another
instance of one of those types has it skipped (see BUILTIN_TYPES).
``waitload`` is only useful to hosts that have a loading phase, so it
is offered here but registered by the host.

Script Files
------------
One command per line. Blank lines and lines starting with ``//`` are
skipped. A single ``exec`` queues at most ``max_commands`` + 1 lines;
the line that crosses the limit is still queued, an overflow error is
printed, and the rest of the file is dropped.

    // autoexec.cfg
    sv.rate 60
    waitload
    spawn cube 0 1 0
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from command_console.context import ConsoleContext
from command_console.registry import Category, Command, CommandResult

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "//"
SILENT_FLAG = "-s"
DEFAULT_MAX_SCRIPT_COMMANDS = 128


class HelpCommand(Command):
    """``help`` / ``help <command>``"""

    @property
    def name(self) -> str:
        return "help"

    @property
    def description(self) -> str:
        return "Show available commands"

    def usage(self) -> str:
        return ("Usage: help [command_name]\n"
                "  help          - Show all commands\n"
                "  help <cmd>    - Show detailed help for specific command")

    def validate(self, args: list[str]) -> bool:
        return len(args) <= 1

    def execute(self, args: list[str], context: ConsoleContext) -> CommandResult:
        if args:
            return self._show_command(args[0], context)

        context.write_line("Available commands:")
        commands = sorted(context.registry.all_commands(),
                          key=lambda c: (c.category.order, c.name.lower()))
        last_category = None
        for command in commands:
            if command.category != last_category:
                context.write_line(f"--- {command.category} ---")
                last_category = command.category
            context.write_line(f"  {command.name.lower():<15} - {command.description}")

        context.write_line("Use 'help <command>' for detailed information about a command.")
        return CommandResult.ok(self.name, count=len(commands))

    def _show_command(self, name: str, context: ConsoleContext) -> CommandResult:
        command = context.registry.lookup(name)
        if command is None:
            return CommandResult.failed(self.name, f"Unknown command: {name}")

        context.write_line(f"Command: {command.name.lower()}")
        context.write_line(f"Category: {command.category}")
        context.write_line(f"Description: {command.description}")
        context.write_line(command.usage())
        return CommandResult.ok(self.name)


class VarsCommand(Command):
    """``vars`` / ``vars <filter>``"""

    @property
    def name(self) -> str:
        return "vars"

    @property
    def description(self) -> str:
        return "Show available configuration variables"

    @property
    def category(self) -> Category:
        return Category.SYSTEM

    def usage(self) -> str:
        return ("Usage: vars [filter]\n"
                "  vars          - Show all variables\n"
                "  vars <filter> - Show variables containing filter text")

    def validate(self, args: list[str]) -> bool:
        return len(args) <= 1

    def execute(self, args: list[str], context: ConsoleContext) -> CommandResult:
        variables = sorted(context.variables, key=lambda v: v.name)

        if not args:
            if not variables:
                return CommandResult.ok(self.name, "No configuration variables registered.")
            context.write_line("Configuration Variables:")
        else:
            needle = args[0].lower()
            variables = [v for v in variables if needle in v.name]
            if not variables:
                return CommandResult.ok(self.name, f"No variables found matching '{args[0]}'")
            context.write_line(f"Variables matching '{args[0]}':")

        for var in variables:
            context.write_line(f"  {var.name:<25} = {var.value}")
        return CommandResult.ok(self.name, names=[v.name for v in variables])


class WaitCommand(Command):
    """``wait`` / ``wait <frames>``"""

    @property
    def name(self) -> str:
        return "wait"

    @property
    def description(self) -> str:
        return "Wait for next frame or specified number of frames"

    @property
    def category(self) -> Category:
        return Category.SCRIPTING

    def usage(self) -> str:
        return ("Usage: wait [n]\n"
                "  wait    - Wait for 1 frame\n"
                "  wait n  - Wait for n frames")

    def validate(self, args: list[str]) -> bool:
        if len(args) > 1:
            return False
        if args:
            try:
                return int(args[0]) >= 0
            except ValueError:
                return False
        return True

    def execute(self, args: list[str], context: ConsoleContext) -> CommandResult:
        frames = 1
        if args:
            frames = self.parse_int(args[0], context, "frame count")
            if frames is None:
                return CommandResult.failed(self.name, self.usage())
            if frames < 0:
                return CommandResult.failed(self.name, "Frame count must be non-negative")

        context.set_wait_frames(frames)
        return CommandResult.ok(self.name, f"Waiting {frames} frame(s)...", frames=frames)


class WaitLoadCommand(Command):
    """``waitload``"""

    @property
    def name(self) -> str:
        return "waitload"

    @property
    def description(self) -> str:
        return "Wait for level load to complete"

    @property
    def category(self) -> Category:
        return Category.SCRIPTING

    def usage(self) -> str:
        return ("Usage: waitload\n"
                "Pauses command execution until the current level finishes loading.")

    def validate(self, args: list[str]) -> bool:
        return not args

    def execute(self, args: list[str], context: ConsoleContext) -> CommandResult:
        context.set_wait_for_load(True)
        return CommandResult.ok(self.name, "Waiting for level load to complete...")


class ExecCommand(Command):
    """``exec <file>`` / ``exec -s <file>``

    Parameters
    ----------
    script_dir : str or Path
        Relative file names are resolved against this directory.
    max_commands : int
        Overflow threshold for a single invocation.
    """

    def __init__(self, script_dir: Union[str, Path] = ".",
                 max_commands: int = DEFAULT_MAX_SCRIPT_COMMANDS):
        self.script_dir = Path(script_dir)
        self.max_commands = max_commands

    @property
    def name(self) -> str:
        return "exec"

    @property
    def description(self) -> str:
        return "Execute commands from file"

    @property
    def category(self) -> Category:
        return Category.SCRIPTING

    def usage(self) -> str:
        return ("Usage: exec [-s] <filename>\n"
                "  exec file.txt     - Execute commands from file.txt\n"
                "  exec -s file.txt  - Execute silently (suppress file not found errors)")

    def validate(self, args: list[str]) -> bool:
        return len(args) == 1 or (len(args) == 2 and args[0] == SILENT_FLAG)

    def resolve(self, filename: str) -> Path:
        path = Path(filename).expanduser()
        if not path.is_absolute():
            path = self.script_dir / path
        return path

    def execute(self, args: list[str], context: ConsoleContext) -> CommandResult:
        silent = len(args) == 2 and args[0] == SILENT_FLAG
        filename = args[-1]
        path = self.resolve(filename)

        if not path.is_file():
            if silent:
                return CommandResult.ok(self.name, queued=0)
            return CommandResult.failed(self.name, f"File not found: {filename}")

        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"exec could not read {path}: {e}")
            if silent:
                return CommandResult.ok(self.name, queued=0)
            return CommandResult.failed(self.name, f"Exec failed: {e}")

        count = 0
        overflow = False
        for line in lines:
            line = line.strip()
            if not line or line.startswith(COMMENT_PREFIX):
                continue

            context.enqueue_command(line)
            count += 1

            if count > self.max_commands:
                overflow = True
                context.write_error("Command overflow detected. "
                                    "Stopping execution to prevent system overload.")
                break

        logger.debug(f"exec {path}: queued {count} commands (overflow={overflow})")
        summary = "" if silent else f"Executed {count} commands from {filename}"
        return CommandResult.ok(self.name, summary, queued=count, overflow=overflow)


BUILTIN_TYPES = (HelpCommand, VarsCommand, WaitCommand, ExecCommand)


def builtin_commands(script_dir: Union[str, Path] = ".",
                     max_script_commands: int = DEFAULT_MAX_SCRIPT_COMMANDS) -> list[Command]:
    """Fresh instances of the commands the console always registers."""
    return [
        HelpCommand(),
        VarsCommand(),
        WaitCommand(),
        ExecCommand(script_dir, max_script_commands),
    ]
