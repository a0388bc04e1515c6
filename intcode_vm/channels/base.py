"""
Intcode VM - I/O Channel Interface

The engine talks to the outside world only through a Channel:

  produce_input()        -> int | Signal.UNAVAILABLE | Signal.EXHAUSTED
  accept_output(value)   -> Signal.ACCEPTED | Signal.BACKPRESSURE

UNAVAILABLE means "not yet": a suspendable engine parks on the IN
instruction and retries it on the next run(). EXHAUSTED means "never":
the engine faults with InputExhausted. BACKPRESSURE is the output-side
"not yet".

The engine only borrows a channel for the duration of one run() call.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Union


class Signal(Enum):
    UNAVAILABLE = 'UNAVAILABLE'
    EXHAUSTED = 'EXHAUSTED'
    ACCEPTED = 'ACCEPTED'
    BACKPRESSURE = 'BACKPRESSURE'


InputResult = Union[int, Signal]


class Channel(ABC):
    """Capability consumed by the engine to obtain input and deliver output."""

    @abstractmethod
    def produce_input(self) -> InputResult:
        """Return the next input value, or UNAVAILABLE / EXHAUSTED."""

    @abstractmethod
    def accept_output(self, value: int) -> Signal:
        """Take one output value. Return ACCEPTED or BACKPRESSURE."""
