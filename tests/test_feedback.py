"""
Amplifier Tests for the Intcode VM.

Serial chains, feedback loops and the phase-order search, checked
against the published sample programs.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from intcode_vm.errors import LoopStalled, ProgramFaulted
from intcode_vm.harness import run_chain, run_feedback_loop, max_thruster_signal

CHAIN_A = [3, 15, 3, 16, 1002, 16, 10, 16, 1, 16, 15, 15, 4, 15, 99, 0, 0]
CHAIN_B = [3, 23, 3, 24, 1002, 24, 10, 24, 1002, 23, -1, 23, 101, 5, 23, 23,
           1, 24, 23, 23, 4, 23, 99, 0, 0]
CHAIN_C = [3, 31, 3, 32, 1002, 32, 10, 32, 1001, 31, -2, 31, 1007, 31, 0, 33,
           1002, 33, 7, 33, 1, 33, 31, 31, 1, 32, 31, 31, 4, 31, 99, 0, 0, 0]

LOOP_A = [3, 26, 1001, 26, -4, 26, 3, 27, 1002, 27, 2, 27, 1, 27, 26, 27, 4, 27,
          1001, 28, -1, 28, 1005, 28, 6, 99, 0, 0, 5]
LOOP_B = [3, 52, 1001, 52, -5, 52, 3, 53, 1, 52, 56, 54, 1007, 54, 5, 55, 1005, 55,
          26, 1001, 54, -5, 54, 1105, 1, 12, 1, 53, 54, 53, 1008, 54, 0, 55, 1001,
          55, 1, 55, 2, 53, 55, 53, 4, 53, 1001, 56, -1, 56, 1005, 56, 6, 99, 0, 0,
          0, 0, 10]

# Reads phase and signal, then keeps asking for input without ever writing
NEVER_OUTPUTS = [3, 0, 3, 0, 1105, 1, 2]


class TestChain:

    @pytest.mark.parametrize("program, phases, expected", [
        (CHAIN_A, [4, 3, 2, 1, 0], 43210),
        (CHAIN_B, [0, 1, 2, 3, 4], 54321),
        (CHAIN_C, [1, 0, 4, 3, 2], 65210),
    ])
    def test_samples(self, program, phases, expected):
        assert run_chain(program, phases) == expected

    @pytest.mark.parametrize("program, expected", [
        (CHAIN_A, 43210), (CHAIN_B, 54321), (CHAIN_C, 65210),
    ])
    def test_best_order(self, program, expected):
        assert max_thruster_signal(program) == expected

    def test_fault(self):
        with pytest.raises(ProgramFaulted) as exc:
            run_chain([42], [0, 1])
        assert "stage 0" in str(exc.value)

    def test_no_output(self):
        with pytest.raises(ProgramFaulted):
            run_chain([3, 0, 3, 0, 99], [0])


class TestFeedbackLoop:

    @pytest.mark.parametrize("program, phases, expected", [
        (LOOP_A, [9, 8, 7, 6, 5], 139629729),
        (LOOP_B, [9, 7, 8, 5, 6], 18216),
    ])
    def test_samples(self, program, phases, expected):
        assert run_feedback_loop(program, phases) == expected

    @pytest.mark.parametrize("program, expected", [
        (LOOP_A, 139629729), (LOOP_B, 18216),
    ])
    def test_best_order(self, program, expected):
        assert max_thruster_signal(program, feedback=True) == expected

    def test_chain_program_in_a_loop(self):
        # Each stage halts after one output, so the loop is just a chain
        assert run_feedback_loop(CHAIN_A, [4, 3, 2, 1, 0]) == 43210

    def test_stall(self):
        with pytest.raises(LoopStalled):
            run_feedback_loop(NEVER_OUTPUTS, [5, 6, 7])

    def test_fault(self):
        with pytest.raises(ProgramFaulted):
            run_feedback_loop([42], [5, 6])

    def test_empty_phases(self):
        with pytest.raises(ValueError):
            run_feedback_loop(LOOP_A, [])


class TestSearch:

    def test_all_orders_fail(self):
        assert max_thruster_signal([42]) is None
        assert max_thruster_signal(NEVER_OUTPUTS, feedback=True) is None

    def test_custom_phases(self):
        assert max_thruster_signal(CHAIN_A, phases=[0, 1]) == 10
