"""
Deferred Execution Queue
========================

FIFO of command lines waiting to run, drained once per tick.

Role in the System
------------------
Lines typed at the console, lines read by ``exec`` from a script, and
lines queued by other commands all land here. The host calls
``drain_tick()`` once per frame; the queue hands lines to the
dispatcher until it runs dry or a command closes the gate.

    enqueue("wait 2")  enqueue("say hi")

    tick 1:  run "wait 2"  → gate frames = 2, stop
    tick 2:  frames 2 → 1, nothing runs
    tick 3:  frames 1 → 0, nothing runs
    tick 4:  run "say hi"  → queue empty

States
------
    Idle      queue empty                   nothing to do this tick
    Draining  popping and dispatching       until empty or gated
    Gated     frames > 0 or waiting on load nothing runs this tick

The gate is re-read after every single dispatch, and lines queued by a
running command go to the tail. A script that queues fifty lines
therefore has them run in the same tick, behind whatever was already
waiting, unless one of them closes the gate.

The frame countdown is measured in ticks, not in queued lines: it keeps
counting down while the queue is empty.

Load Gate
---------
``waitload`` marks the gate as waiting for load. While the host has not
called ``notify_load_complete()`` the queue stays gated. Once the
signal has arrived the next tick clears the gate and carries on
draining. A load signal arriving while nothing is waiting is dropped.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class QueueState(Enum):
    IDLE = "idle"
    DRAINING = "draining"
    GATED = "gated"


@dataclass
class GateState:
    """Frame countdown plus wait-for-load flag.

    Attributes
    ----------
    frames_remaining : int
        Ticks still to skip. Never negative.
    waiting_for_load : bool
        Set by ``waitload``; cleared on the first tick after the load
        signal.
    load_signalled : bool
        The host reported load completion while ``waiting_for_load``.
    """
    frames_remaining: int = 0
    waiting_for_load: bool = False
    load_signalled: bool = False

    @property
    def is_closed(self) -> bool:
        return self.frames_remaining > 0 or self.waiting_for_load

    def wait_for_load(self, wait: bool = True) -> None:
        self.waiting_for_load = wait
        self.load_signalled = False

    def signal_load_complete(self) -> None:
        if self.waiting_for_load:
            self.load_signalled = True

    def clear(self) -> None:
        self.frames_remaining = 0
        self.waiting_for_load = False
        self.load_signalled = False


class ExecutionQueue:
    """Ordered queue of pending command lines with frame/load gating.

    Parameters
    ----------
    dispatch : callable
        Called with each line as it is popped. Expected not to raise;
        the dispatcher turns command failures into output lines.
    max_per_tick : int, optional
        Cap on lines dispatched per tick. 0 or None drains until the
        queue is empty or the gate closes.
    """

    def __init__(self, dispatch: Callable[[str], None], max_per_tick: Optional[int] = None):
        self._dispatch = dispatch
        self._pending: deque[str] = deque()
        self.gate = GateState()
        self.max_per_tick = max_per_tick or None

    def __len__(self) -> int:
        return len(self._pending)

    @property
    def pending(self) -> list[str]:
        """Snapshot of the queued lines, head first."""
        return list(self._pending)

    @property
    def state(self) -> QueueState:
        if self.gate.is_closed:
            return QueueState.GATED
        if not self._pending:
            return QueueState.IDLE
        return QueueState.DRAINING

    def enqueue(self, command: str) -> None:
        logger.debug(f"cmd: {command}")
        self._pending.append(command)

    def notify_load_complete(self) -> None:
        self.gate.signal_load_complete()

    def drain_tick(self) -> int:
        """Run one tick's worth of queued commands.

        Returns
        -------
        int
            How many lines were dispatched this tick.
        """
        gate = self.gate
        if gate.frames_remaining > 0:
            gate.frames_remaining -= 1
            return 0

        if gate.waiting_for_load:
            if not gate.load_signalled:
                return 0
            gate.waiting_for_load = False
            gate.load_signalled = False

        executed = 0
        while self._pending:
            # Pop before dispatching: the command may queue more lines
            command = self._pending.popleft()
            self._dispatch(command)
            executed += 1

            if gate.is_closed:
                break
            if self.max_per_tick is not None and executed >= self.max_per_tick:
                break

        return executed

    def clear(self) -> None:
        self._pending.clear()
        self.gate.clear()
