"""
Intcode VM - Batch Queue Channel

A pre-loaded list of inputs consumed front to back, and a list that
collects every output. Running out of input is permanent (EXHAUSTED),
so a batch run either completes or faults; it never suspends.
"""

from collections import deque
from typing import Iterable, List, Optional

from .base import Channel, InputResult, Signal


class BatchQueue(Channel):
    """Fixed input sequence, collected output list."""

    def __init__(self, inputs: Iterable[int] = ()):
        self._inputs = deque(inputs)
        self.outputs: List[int] = []

    def push(self, *values: int):
        """Append inputs (before the run that consumes them)."""
        self._inputs.extend(values)

    @property
    def pending(self) -> int:
        return len(self._inputs)

    def produce_input(self) -> InputResult:
        if not self._inputs:
            return Signal.EXHAUSTED
        return self._inputs.popleft()

    def accept_output(self, value: int) -> Signal:
        self.outputs.append(value)
        return Signal.ACCEPTED

    def take_outputs(self) -> List[int]:
        """Return collected outputs and start a fresh list."""
        outputs, self.outputs = self.outputs, []
        return outputs

    @property
    def last_output(self) -> Optional[int]:
        return self.outputs[-1] if self.outputs else None
