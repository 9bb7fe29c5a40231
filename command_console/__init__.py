"""
Command Console
===============

An in-process interactive console: type a line, it is tokenized,
resolved against registered commands or console variables, and run
either right away or on a later tick.

Architecture Overview
---------------------
The console sits between whatever collects input (a terminal, an
in-game overlay) and the host application. Lines are queued, and the
host calls ``update()`` once per frame to drain the queue. Commands
can pause the queue for a number of frames (``wait``) or until the
host reports that loading finished (``waitload``), which is what makes
multi-step scripts run in order against a live application.

    ┌─────────────┐    ┌───────────────┐    ┌────────────┐    ┌──────────┐
    │ Input line  │───►│ Execution     │───►│ Dispatcher │───►│ Command  │
    │ (+ history) │    │ queue + gate  │    │            │    │ or var   │
    └─────────────┘    └───────▲───────┘    └─────┬──────┘    └──────────┘
                               │ once per tick    │
                        host update()        output lines ──► ConsoleUI

Integration
-----------
    from command_console import create_console, BufferedUI
    from command_console.spawn import SpawnCommand, Scene

    scene = Scene()
    console = create_console(BufferedUI(), commands=[SpawnCommand(scene)])

    console.enqueue_with_history("spawn sphere 0 2 0 red")
    console.update()          # call once per frame

Extending the Command System
-----------------------------
To add a command, subclass Command and hand an instance to
``create_console`` (or ``Console.init``):

    from command_console import Command, CommandResult

    class SayCommand(Command):
        @property
        def name(self) -> str:
            return "say"

        @property
        def description(self) -> str:
            return "Print a message"

        def usage(self) -> str:
            return 'Usage: say "<text>"'

        def validate(self, args):
            return len(args) == 1

        def execute(self, args, context) -> CommandResult:
            return CommandResult.ok(self.name, args[0])

Nothing is discovered automatically; the host decides which commands
exist by listing them.

Module Structure
----------------
    command_console/
    ├── __init__.py          ← This file. Public API and create_console().
    ├── console.py           ← Console: owns all state; init / reset / update.
    ├── tokenizer.py         ← Quote-aware line splitting.
    ├── registry.py          ← Command ABC, CommandResult, CommandRegistry.
    ├── dispatcher.py        ← Line → command or variable, error boundary.
    ├── execution_queue.py   ← FIFO + frame/load gate, drained per tick.
    ├── history.py           ← Ring buffer with up/down recall.
    ├── completion.py        ← Tab completion with common-prefix extension.
    ├── context.py           ← Facade handed to executing commands.
    ├── variables.py         ← Console variables (name → string value).
    ├── builtins.py          ← help, vars, wait, waitload, exec.
    ├── spawn.py             ← Example host command.
    ├── ui.py                ← ConsoleUI boundary, buffered + terminal.
    ├── config.py            ← YAML configuration and CLI overrides.
    └── demo.py              ← Interactive terminal driver.

Dependencies
------------
PyYAML for configuration files. Everything else is standard library.
Uses: yaml, argparse, abc, dataclasses, collections, logging.

License
-------
GPL 3.0

"""

from __future__ import annotations

from typing import Iterable, Optional

from command_console.config import ConsoleConfig
from command_console.console import Console
from command_console.context import ConsoleContext
from command_console.registry import Category, Command, CommandRegistry, CommandResult
from command_console.tokenizer import tokenize
from command_console.ui import BufferedUI, ConsoleUI, TerminalUI
from command_console.variables import ConfigVar, VariableStore


def create_console(ui: ConsoleUI, commands: Iterable[Command] = (),
                   config: Optional[ConsoleConfig] = None,
                   variables: Optional[VariableStore] = None) -> Console:
    """Build and initialise a console in one call."""
    console = Console(config, variables)
    console.init(ui, commands)
    return console


__all__ = [
    'BufferedUI',
    'Category',
    'Command',
    'CommandRegistry',
    'CommandResult',
    'ConfigVar',
    'Console',
    'ConsoleConfig',
    'ConsoleContext',
    'ConsoleUI',
    'TerminalUI',
    'VariableStore',
    'create_console',
    'tokenize',
]
