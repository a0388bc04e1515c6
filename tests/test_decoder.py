"""
Decoder Tests for the Intcode VM.

Digit extraction, sign preservation, and the opcode table.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from intcode_vm.cpu.decoder import (
    decode, decode_instruction, Instruction, Mode, OPCODES,
    ADD, MUL, IN, OUT, JT, JF, LT, EQ, ARB, HALT,
)
from intcode_vm.errors import InvalidOpcode
from intcode_vm.mem.memory import Memory


class TestDecode:

    @pytest.mark.parametrize("word, expected", [
        (1,      (1, 0, 0, 0)),
        (99,     (99, 0, 0, 0)),
        (1002,   (2, 0, 1, 0)),
        (1101,   (1, 1, 1, 0)),
        (21107,  (7, 1, 1, 2)),
        (10107,  (7, 1, 0, 1)),
        (204,    (4, 2, 0, 0)),
        (109,    (9, 1, 0, 0)),
        (0,      (0, 0, 0, 0)),
    ])
    def test_digit_extraction(self, word, expected):
        instr = decode(word)
        assert (instr.opcode, instr.mode1, instr.mode2, instr.mode3) == expected

    @pytest.mark.parametrize("word, expected", [
        (-1102,  (-2, -1, -1, 0)),
        (-11199, (-99, -1, -1, -1)),
        (-1,     (-1, 0, 0, 0)),
        (-99,    (-99, 0, 0, 0)),
    ])
    def test_sign_preserved(self, word, expected):
        """Negative words never alias a valid opcode or mode."""
        instr = decode(word)
        assert (instr.opcode, instr.mode1, instr.mode2, instr.mode3) == expected
        assert not instr.known

    def test_decode_is_pure(self):
        assert decode(1002) == decode(1002)
        assert decode(1002) == Instruction(MUL, 0, 1, 0)

    def test_modes_tuple(self):
        assert decode(21002).modes == (0, 1, 2)


class TestOpcodeTable:

    def test_all_opcodes_present(self):
        assert set(OPCODES) == {ADD, MUL, IN, OUT, JT, JF, LT, EQ, ARB, HALT}

    @pytest.mark.parametrize("opcode, length", [
        (ADD, 4), (MUL, 4), (IN, 2), (OUT, 2), (JT, 3),
        (JF, 3), (LT, 4), (EQ, 4), (ARB, 2), (HALT, 1),
    ])
    def test_instruction_length(self, opcode, length):
        assert Instruction(opcode).length == length

    def test_write_targets(self):
        for opcode in (ADD, MUL, LT, EQ):
            assert OPCODES[opcode][1] == 'RRW'
        assert OPCODES[IN][1] == 'W'

    def test_unknown_mnemonic(self):
        instr = Instruction(42)
        assert instr.mnemonic == '???'
        assert instr.signature == ''


class TestDecodeInstruction:

    def test_known(self):
        instr = decode_instruction(Memory([1002, 4, 3, 4, 33]), 0)
        assert instr.mnemonic == 'MUL'
        assert instr.modes[:2] == (Mode.POSITION, Mode.IMMEDIATE)

    def test_unknown_opcode(self):
        with pytest.raises(InvalidOpcode) as exc:
            decode_instruction(Memory([42]), 0)
        assert exc.value.ip == 0

    def test_negative_word(self):
        with pytest.raises(InvalidOpcode):
            decode_instruction(Memory([-1102]), 0)

    def test_bad_mode_digit(self):
        with pytest.raises(InvalidOpcode):
            decode_instruction(Memory([301, 0, 0, 0]), 0)

    def test_mode_digit_on_unused_parameter_ignored(self):
        # OUT takes one parameter; the third mode digit is never consulted
        instr = decode_instruction(Memory([30104, 7]), 0)
        assert instr.opcode == OUT
