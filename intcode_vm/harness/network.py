"""
Intcode VM - Message-Routed Network

M nodes, one engine + one Mailbox each, addressed 0..M-1. Packets are
(dest, x, y) triples emitted by a node and routed by a single FIFO queue:

  dest is an active node     x, y are queued in its mailbox and the node
                             runs at once; its own packets join the queue
  anything else              intercepted by the idle monitor (NAT)

When the queue drains, every live node gets one idle turn (one -1 input).
If that sweep sends nothing either, the network is idle and the monitor
replays its latest packet to node 0. The run ends the first time the
monitor replays the same packet twice in a row.

Everything is single-threaded; "parallel" nodes are just engines taking
turns in a fixed order, so a run is fully deterministic.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, Iterable, List, Optional

from ..channels.mailbox import Mailbox, Message, Packet
from ..config import IDLE_VALUE, MONITOR_ADDRESS, NETWORK_SIZE
from ..emu import IntcodeEngine, StopReason
from ..errors import NetworkStalled, ProgramFaulted

log = logging.getLogger(__name__)


@dataclass
class NetworkResult:
    first_monitor_packet: Packet
    repeated_packet: Packet
    packets_routed: int = 0
    packets_intercepted: int = 0
    replays: int = 0


class NetworkNode:
    """One addressed engine and its mailbox."""

    def __init__(self, address: int, program: Iterable[int], idle_value: int = IDLE_VALUE):
        self.address = address
        self.engine = IntcodeEngine(program, suspendable=True)
        self.mailbox = Mailbox(address, idle_value)

    @property
    def active(self) -> bool:
        return not self.engine.status.terminal

    def turn(self) -> List[Message]:
        """Run until the node waits for input again; return the packets it sent."""
        self.mailbox.begin_turn()
        if self.engine.run(self.mailbox) is StopReason.FAULTED:
            raise ProgramFaulted(self.engine.fault, f"node {self.address}")
        return self.mailbox.packets()


class Network:

    def __init__(self, program: Iterable[int], size: int = NETWORK_SIZE,
                 monitor_address: int = MONITOR_ADDRESS, idle_value: int = IDLE_VALUE):
        if size < 1:
            raise ValueError(f"Network size must be >= 1, got {size}")
        if 0 <= monitor_address < size:
            raise ValueError(f"Monitor address {monitor_address} collides with a node address")
        program = list(program)
        self.monitor_address = monitor_address
        self.nodes: Dict[int, NetworkNode] = {
            addr: NetworkNode(addr, program, idle_value) for addr in range(size)
        }
        self._queue: Deque[Message] = deque()

        self.first_monitor_packet: Optional[Packet] = None
        self.monitor_packet: Optional[Packet] = None
        self.packets_routed = 0
        self.packets_intercepted = 0
        self.replays = 0

    def run(self) -> NetworkResult:
        """Boot every node and route packets until the monitor repeats itself."""
        for node in self.nodes.values():
            self._queue.extend(node.turn())

        last_replayed: Optional[Packet] = None
        while True:
            self._route()
            if self._idle_sweep():
                continue

            if self.monitor_packet is None:
                raise NetworkStalled("Network is idle and the monitor has nothing to replay")
            if self.monitor_packet == last_replayed:
                log.info("Monitor replayed %s twice in a row", self.monitor_packet)
                return NetworkResult(
                    first_monitor_packet=self.first_monitor_packet,
                    repeated_packet=self.monitor_packet,
                    packets_routed=self.packets_routed,
                    packets_intercepted=self.packets_intercepted,
                    replays=self.replays,
                )

            last_replayed = self.monitor_packet
            self.replays += 1
            log.debug("Network idle, replaying %s to node 0", last_replayed)
            self._deliver(self.nodes[0], last_replayed)

    def _route(self):
        while self._queue:
            dest, x, y = self._queue.popleft()
            node = self.nodes.get(dest)
            if node is not None and node.active:
                self._deliver(node, (x, y))
            else:
                self._intercept(dest, (x, y))

    def _deliver(self, node: NetworkNode, packet: Packet):
        self.packets_routed += 1
        node.mailbox.receive(packet)
        self._queue.extend(node.turn())

    def _intercept(self, dest: int, packet: Packet):
        self.packets_intercepted += 1
        if dest != self.monitor_address:
            log.debug("Packet %s for unknown or halted node %d intercepted", packet, dest)
        if self.first_monitor_packet is None:
            self.first_monitor_packet = packet
            log.info("First packet reached the monitor: %s", packet)
        self.monitor_packet = packet

    def _idle_sweep(self) -> bool:
        """Give every live node one idle turn. True if anything was sent."""
        for node in self.nodes.values():
            if node.active:
                self._queue.extend(node.turn())
        return bool(self._queue)
