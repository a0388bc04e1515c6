"""
Intcode VM - Pipe Channel

A refillable inbox and a bounded outbox. Used to link engines in a
feedback loop: the orchestrator drains one engine's outbox into the next
engine's inbox between turns.

  empty inbox            -> UNAVAILABLE (engine suspends, not exhausted)
  outbox at capacity     -> BACKPRESSURE (engine suspends on OUT)

With capacity=1 an engine yields after every single output, so signals
move around the loop one value at a time.
"""

from collections import deque
from typing import Iterable, List, Optional

from .base import Channel, InputResult, Signal


class PipeChannel(Channel):

    def __init__(self, inputs: Iterable[int] = (), capacity: Optional[int] = None):
        if capacity is not None and capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._inbox = deque(inputs)
        self._outbox: deque = deque()
        self.capacity = capacity
        self.last_output: Optional[int] = None

    def feed(self, *values: int):
        self._inbox.extend(values)

    def drain(self) -> List[int]:
        """Remove and return every pending output, oldest first."""
        values = list(self._outbox)
        self._outbox.clear()
        return values

    @property
    def inbox_size(self) -> int:
        return len(self._inbox)

    @property
    def outbox_size(self) -> int:
        return len(self._outbox)

    def produce_input(self) -> InputResult:
        if not self._inbox:
            return Signal.UNAVAILABLE
        return self._inbox.popleft()

    def accept_output(self, value: int) -> Signal:
        if self.capacity is not None and len(self._outbox) >= self.capacity:
            return Signal.BACKPRESSURE
        self._outbox.append(value)
        self.last_output = value
        return Signal.ACCEPTED
