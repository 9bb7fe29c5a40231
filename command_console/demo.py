#!/usr/bin/env python3
"""
Command Console — Interactive Demo

Simulates a host application with a frame loop. Every line you type
is queued with history and the demo then runs frames until the queue
is idle. Try:

    help
    spawn sphere 0 2 0 red
    say "hello world"
    wait 3
    waitload            (then /load to finish the "level load")
    console.showlastline 1
    vars

Demo-only controls (not console commands):

    /tab <prefix>   tab-complete a prefix
    /up /down       walk the history
    /tick [n]       run n frames by hand
    /load           report that loading finished
    /scene          list spawned objects
    /quit
"""

from __future__ import annotations

import logging
import sys

from command_console import Command, CommandResult, TerminalUI, create_console
from command_console.builtins import WaitLoadCommand
from command_console.config import setup_configuration
from command_console.spawn import Scene, SpawnCommand

# Frames run after a line before control goes back to the prompt
MAX_FRAMES_PER_LINE = 1000


class SayCommand(Command):

    @property
    def name(self) -> str:
        return "say"

    @property
    def description(self) -> str:
        return "Print a message"

    def usage(self) -> str:
        return 'Usage: say <text> | say "<text with spaces>"'

    def validate(self, args: list[str]) -> bool:
        return len(args) >= 1

    def execute(self, args, context) -> CommandResult:
        return CommandResult.ok(self.name, " ".join(args))


def history_up(console, edit_line: str) -> str:
    return console.recall_previous(edit_line) or edit_line


def history_down(console, edit_line: str) -> str:
    """Step forward; at the live line the current edit is kept."""
    if not console.history.is_browsing:
        return edit_line
    return console.recall_next()


def run_frames(console, limit: int = MAX_FRAMES_PER_LINE) -> int:
    """Tick until nothing is pending, or the queue waits on a load."""
    frames = 0
    while console.pending_count and frames < limit:
        if console.queue.gate.waiting_for_load and not console.queue.gate.load_signalled:
            print("  [demo] queue is waiting for load; type /load")
            break
        console.update()
        console.late_update()
        frames += 1
    return frames


def main(argv=None) -> int:
    config, should_exit = setup_configuration(argv)
    if should_exit:
        return 0 if config is None else 1

    logging.basicConfig(level=config.console.level, format='%(levelname)s %(name)s: %(message)s')

    scene = Scene()
    ui = TerminalUI()
    console = create_console(
        ui,
        commands=[WaitLoadCommand(), SpawnCommand(scene), SayCommand()],
        config=config,
    )
    console.set_open(True)
    run_frames(console)

    print("=" * 60)
    print("  Command Console — Demo")
    print("  Type help for commands, /quit to exit")
    print("=" * 60)

    edit_line = ""
    while True:
        try:
            line = input(ui.prompt).strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break

        if not line:
            continue

        if line == "/quit":
            break
        elif line.startswith("/tab"):
            prefix = line[len("/tab"):].strip()
            print(f"  [demo] {console.complete(prefix)!r}")
        elif line == "/up":
            edit_line = history_up(console, edit_line)
            print(f"  [demo] {edit_line!r}")
        elif line == "/down":
            edit_line = history_down(console, edit_line)
            print(f"  [demo] {edit_line!r}")
        elif line.startswith("/tick"):
            count = line[len("/tick"):].strip()
            for _ in range(int(count) if count.isdigit() else 1):
                console.update()
        elif line == "/load":
            console.notify_load_complete()
            run_frames(console)
        elif line == "/scene":
            for obj in scene.objects:
                print(f"  {obj.name}: {obj.primitive} at {obj.position}, {obj.color}")
        else:
            edit_line = ""
            console.enqueue_with_history(line)
            frames = run_frames(console)
            logging.getLogger(__name__).debug(f"ran {frames} frame(s)")

    console.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
