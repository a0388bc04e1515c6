"""
Intcode VM - Network Mailbox Channel

The network interface of one node:

  input   1. the node's own address (once, at boot)
          2. queued packet values, x then y, oldest packet first
          3. one idle value (-1) per turn once the queue is empty
          4. UNAVAILABLE - the node suspends until its next turn
  output  collected flat; packets() groups them into (dest, x, y)

The router calls begin_turn() before every run so each turn sees at most
one idle value.
"""

from collections import deque
from typing import List, Tuple

from ..config import IDLE_VALUE
from .base import Channel, InputResult, Signal

Packet = Tuple[int, int]
Message = Tuple[int, int, int]


class Mailbox(Channel):

    def __init__(self, address: int, idle_value: int = IDLE_VALUE):
        self.address = address
        self.idle_value = idle_value
        self._incoming = deque([address])
        self._outgoing: List[int] = []
        self._idle_armed = True

    def begin_turn(self):
        """Allow one more idle value to be handed out."""
        self._idle_armed = True

    def receive(self, packet: Packet):
        """Queue a packet for this node."""
        x, y = packet
        self._incoming.append(x)
        self._incoming.append(y)

    @property
    def pending(self) -> int:
        return len(self._incoming)

    def produce_input(self) -> InputResult:
        if self._incoming:
            return self._incoming.popleft()
        if self._idle_armed:
            self._idle_armed = False
            return self.idle_value
        return Signal.UNAVAILABLE

    def accept_output(self, value: int) -> Signal:
        self._outgoing.append(value)
        return Signal.ACCEPTED

    def packets(self) -> List[Message]:
        """Remove and return every complete (dest, x, y) triple.

        An incomplete trailing triple stays buffered for the next turn.
        """
        complete = len(self._outgoing) - len(self._outgoing) % 3
        flat, self._outgoing = self._outgoing[:complete], self._outgoing[complete:]
        return [(flat[i], flat[i + 1], flat[i + 2]) for i in range(0, complete, 3)]
