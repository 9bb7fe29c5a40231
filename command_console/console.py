"""
Console
=======

One explicit object holding all console state.

Architecture Overview
---------------------
    ┌──────────────┐ enqueue_with_history ┌────────────────┐
    │  Input side  │─────────────────────►│ HistoryRing    │
    │  (widget,    │                      └────────────────┘
    │   terminal)  │ enqueue              ┌────────────────┐
    │              │─────────────────────►│ ExecutionQueue │
    │              │ complete / recall    │  + GateState   │
    └──────────────┘                      └───────┬────────┘
                                                  │ drain_tick (once per update)
                                          ┌───────▼────────┐
                                          │  Dispatcher    │──► ConsoleUI
                                          └───┬────────┬───┘
                                   lookup     │        │  fallback
                                  ┌───────────▼──┐  ┌──▼────────────┐
                                  │CommandRegistry│ │ VariableStore │
                                  └──────────────┘  └───────────────┘

Lifecycle
---------
    console = Console(config)
    console.init(ui, commands=[SpawnCommand(scene)])   # built-ins first
    ...
    every frame:   console.update()
    after a load:  console.notify_load_complete()
    ...
    console.reset()    # back to empty, ready for another init()

``reset()`` is distinct from process exit: a host that reloads its
scripting layer can reset and re-init the same instance. Tests simply
build a fresh Console each time.

Threading
---------
Single-threaded. The host calls every method from its main loop. No
locking is done.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from command_console.builtins import BUILTIN_TYPES, builtin_commands
from command_console.completion import TabCompleter
from command_console.config import ConsoleConfig
from command_console.context import ConsoleContext
from command_console.dispatcher import Dispatcher
from command_console.execution_queue import ExecutionQueue
from command_console.history import HistoryRing
from command_console.registry import Command, CommandRegistry
from command_console.ui import ConsoleUI
from command_console.variables import VariableStore

logger = logging.getLogger(__name__)

SHOW_LAST_LINE_VAR = "console.showlastline"


class Console:
    """Registry, queue, gate, history and dispatcher for one console.

    Parameters
    ----------
    config : ConsoleConfig, optional
        Limits and startup behaviour. Defaults are used if omitted.
    variables : VariableStore, optional
        The variable table to fall back to. Hosts that already keep
        their settings in a VariableStore pass it here so the console
        reads and writes the same objects.
    """

    def __init__(self, config: Optional[ConsoleConfig] = None,
                 variables: Optional[VariableStore] = None):
        self.config = config or ConsoleConfig()
        self.variables = variables if variables is not None else VariableStore()
        self.registry = CommandRegistry()
        self.history = HistoryRing(self.config.history.capacity)
        self.context = ConsoleContext(self)
        self.dispatcher = Dispatcher(
            self.registry,
            self.variables,
            self.context,
            self.write,
            max_tokens=self.config.parser.max_tokens,
        )
        self.queue = ExecutionQueue(
            self.dispatcher.execute,
            max_per_tick=self.config.queue.max_commands_per_tick,
        )
        self.completer = TabCompleter(
            [self.registry.names, self.variables.names],
            show=self.write,
        )
        self.ui: Optional[ConsoleUI] = None
        self.last_line = ""

    # ─── Lifecycle ──────────────────────────────────────────────────

    @property
    def is_initialized(self) -> bool:
        return self.ui is not None

    def init(self, ui: ConsoleUI, commands: Iterable[Command] = ()) -> None:
        """Attach a UI and register built-in plus host commands.

        Raises
        ------
        RuntimeError
            If already initialised. Call reset() first.
        """
        if self.ui is not None:
            raise RuntimeError("Console is already initialized; call reset() first")

        self.ui = ui
        ui.init()

        scripts = self.config.scripts
        self.registry.register_all(builtin_commands(scripts.script_dir, scripts.max_commands))

        for command in commands:
            if isinstance(command, BUILTIN_TYPES):
                logger.debug(f"Skipping built-in command type {type(command).__name__}")
                continue
            self.registry.register(command)
        logger.info(f"Console command registry: registered {len(self.registry)} commands")

        if SHOW_LAST_LINE_VAR not in self.variables:
            self.variables.register(SHOW_LAST_LINE_VAR, "0",
                                    "Show last logged line briefly at top of screen")
        self._apply_initial_variables()

        self.write("Console ready")

        if scripts.startup_script:
            self.enqueue(f'exec -s "{scripts.startup_script}"')

    def _apply_initial_variables(self) -> None:
        for name, value in self.config.variables.items():
            if not self.variables.set(name, value):
                self.variables.register(name, value)

    def shutdown(self) -> None:
        if self.ui is not None:
            self.ui.shutdown()

    def reset(self) -> None:
        """Drop all state. The console can be init()-ed again afterwards."""
        self.ui = None
        self.registry.clear()
        self.queue.clear()
        self.history.clear()
        self.last_line = ""

    # ─── Output ─────────────────────────────────────────────────────

    def write(self, message: str) -> None:
        show_last = self.variables.get(SHOW_LAST_LINE_VAR)
        if show_last is not None and show_last.int_value > 0:
            self.last_line = message

        logger.debug(message)
        if self.ui is not None:
            self.ui.output_string(message)

    # ─── Execution ──────────────────────────────────────────────────

    def execute(self, line: str) -> None:
        """Run ``line`` immediately, bypassing the queue and its gate."""
        self.dispatcher.execute(line)

    def enqueue(self, line: str) -> None:
        self.queue.enqueue(line)

    def enqueue_with_history(self, line: str) -> None:
        """Queue a line the user typed, recording it for recall."""
        self.history.record(line)
        self.queue.enqueue(line)

    def update(self) -> int:
        """One tick: let the UI update, then drain the queue.

        Returns the number of commands that ran.
        """
        if self.ui is not None:
            self.ui.console_update()
        return self.queue.drain_tick()

    def late_update(self) -> None:
        if self.ui is not None:
            self.ui.console_late_update()

    def notify_load_complete(self) -> None:
        self.queue.notify_load_complete()

    @property
    def pending_count(self) -> int:
        return len(self.queue)

    @property
    def is_gated(self) -> bool:
        return self.queue.gate.is_closed

    @property
    def is_idle(self) -> bool:
        return not self.queue and not self.is_gated

    # ─── Input helpers ──────────────────────────────────────────────

    def complete(self, prefix: str) -> str:
        return self.completer.complete(prefix)

    def recall_previous(self, current: str = "") -> str:
        return self.history.recall_previous(current)

    def recall_next(self) -> str:
        return self.history.recall_next()

    # ─── UI pass-through ────────────────────────────────────────────

    def is_open(self) -> bool:
        return self.ui is not None and self.ui.is_open()

    def set_open(self, open: bool) -> None:
        if self.ui is not None:
            self.ui.set_open(open)

    def set_prompt(self, prompt: str) -> None:
        if self.ui is not None:
            self.ui.set_prompt(prompt)
