"""
Network Tests for the Intcode VM.

Uses a small hand-assembled NIC program:

    boot      read own address A; node 0 also sends (1, 5, 0)
    loop      read x; on -1 keep polling
              read y; send (A + 1, x, min(y + 1, 10))

Packets walk up the address range; the last node's packet has no
destination and is intercepted by the monitor, which replays it to
node 0 whenever the network goes idle. y saturates at 10, so the
monitor eventually replays (5, 10) twice.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from intcode_vm.errors import NetworkStalled, ProgramFaulted
from intcode_vm.harness import Network, NetworkNode

NIC = [
    3, 100,                 # 0   IN   A
    1005, 100, 11,          # 2   JT   A, #11
    104, 1,                 # 5   OUT  #1
    104, 5,                 # 7   OUT  #5
    104, 0,                 # 9   OUT  #0
    3, 101,                 # 11  IN   x
    1008, 101, -1, 103,     # 13  EQ   x, #-1 -> t
    1005, 103, 11,          # 17  JT   t, #11
    3, 102,                 # 20  IN   y
    1001, 100, 1, 103,      # 22  ADD  A, #1 -> t
    4, 103,                 # 26  OUT  t
    4, 101,                 # 28  OUT  x
    1007, 102, 10, 104,     # 30  LT   y, #10 -> f
    1, 102, 104, 102,       # 34  ADD  y, f -> y
    4, 102,                 # 38  OUT  y
    1105, 1, 11,            # 40  JT   #1, #11
    99,
]

# Reads its address, then polls forever without sending
SILENT = [3, 100, 3, 101, 1105, 1, 2]


class TestNetwork:

    def test_monitor_packets(self):
        result = Network(NIC, size=4).run()
        assert result.first_monitor_packet == (5, 3)
        assert result.repeated_packet == (5, 10)
        assert result.replays == 3

    def test_counters(self):
        result = Network(NIC, size=4).run()
        assert result.packets_intercepted == 4
        assert result.packets_routed == 15

    def test_single_node(self):
        result = Network(NIC, size=1).run()
        assert result.first_monitor_packet == (5, 0)
        assert result.repeated_packet == (5, 10)

    def test_default_size(self):
        result = Network(NIC).run()
        assert result.first_monitor_packet == (5, 10)
        assert result.repeated_packet == (5, 10)
        assert result.replays == 1

    def test_stalled(self):
        with pytest.raises(NetworkStalled):
            Network(SILENT, size=3).run()

    def test_node_fault(self):
        with pytest.raises(ProgramFaulted) as exc:
            Network([3, 100, 42], size=2).run()
        assert "node 0" in str(exc.value)

    def test_monitor_collision(self):
        with pytest.raises(ValueError):
            Network(NIC, size=4, monitor_address=2)

    def test_bad_size(self):
        with pytest.raises(ValueError):
            Network(NIC, size=0)


class TestNetworkNode:

    def test_boot_turn(self):
        node = NetworkNode(0, NIC)
        assert node.turn() == [(1, 5, 0)]
        assert node.active

    def test_forwarding(self):
        node = NetworkNode(2, NIC)
        assert node.turn() == []
        node.mailbox.receive((7, 1))
        assert node.turn() == [(3, 7, 2)]
