"""
Intcode VM - Instruction Decoder / Opcode Table

An instruction word packs the opcode in its two low decimal digits and
one addressing-mode digit per parameter above that:

      ABCDE
        1002
  DE - two-digit opcode             (02 = MUL)
  C  - mode of 1st parameter        (0 = position)
  B  - mode of 2nd parameter        (1 = immediate)
  A  - mode of 3rd parameter        (0 = position, leading zero omitted)

Digit extraction uses truncating division, not Python's floor division,
so the sign of a corrupted (negative) word carries into every field:
decode(-1102) is (-2, -1, -1, 0). A negative opcode or mode can never
alias a valid one and is reported as InvalidOpcode by the engine.

Addressing modes:
  POSITION   0  parameter names an address
  IMMEDIATE  1  parameter is the value itself (never a write target)
  RELATIVE   2  parameter is an offset from the relative base
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Tuple

from ..errors import InvalidOpcode


class Mode(IntEnum):
    POSITION = 0
    IMMEDIATE = 1
    RELATIVE = 2


# ──────────────────────────────────────────────
# Opcode numbers
# ──────────────────────────────────────────────

ADD  = 1
MUL  = 2
IN   = 3
OUT  = 4
JT   = 5
JF   = 6
LT   = 7
EQ   = 8
ARB  = 9
HALT = 99

# Parameter roles used in operand signatures
READ  = 'R'   # operand is read (any mode)
WRITE = 'W'   # operand is a write target (position or relative only)


# ──────────────────────────────────────────────
# Opcode table
# ──────────────────────────────────────────────
# Format: opcode -> (mnemonic, operand signature)
# The signature lists one role per parameter, in order. Non-jumping
# instructions advance the IP by 1 + len(signature).

OPCODES: Dict[int, Tuple[str, str]] = {
    ADD:  ('ADD',  'RRW'),
    MUL:  ('MUL',  'RRW'),
    IN:   ('IN',   'W'),
    OUT:  ('OUT',  'R'),
    JT:   ('JT',   'RR'),
    JF:   ('JF',   'RR'),
    LT:   ('LT',   'RRW'),
    EQ:   ('EQ',   'RRW'),
    ARB:  ('ARB',  'R'),
    HALT: ('HALT', ''),
}


@dataclass(frozen=True)
class Instruction:
    """One decoded instruction word. Fields keep their raw (signed) values."""
    opcode: int
    mode1: int = 0
    mode2: int = 0
    mode3: int = 0

    @property
    def modes(self) -> Tuple[int, int, int]:
        return (self.mode1, self.mode2, self.mode3)

    @property
    def known(self) -> bool:
        return self.opcode in OPCODES

    @property
    def mnemonic(self) -> str:
        return OPCODES[self.opcode][0] if self.known else '???'

    @property
    def signature(self) -> str:
        return OPCODES[self.opcode][1] if self.known else ''

    @property
    def length(self) -> int:
        """Words occupied by the instruction including its operands."""
        return 1 + len(self.signature)


def _tdivmod(value: int, divisor: int) -> Tuple[int, int]:
    """divmod() that truncates toward zero, so the remainder keeps value's sign."""
    quotient = abs(value) // divisor
    if value < 0:
        quotient = -quotient
    return quotient, value - quotient * divisor


def decode(word: int) -> Instruction:
    """Split an instruction word into opcode and three mode digits.

    Pure function. Sign is preserved through every field.
    """
    mode3, rest = _tdivmod(word, 10_000)
    mode2, rest = _tdivmod(rest, 1_000)
    mode1, opcode = _tdivmod(rest, 100)
    return Instruction(opcode, mode1, mode2, mode3)


def decode_instruction(memory, ip: int) -> Instruction:
    """Fetch and decode the instruction at ip.

    Raises InvalidOpcode for an unknown opcode, or for a mode digit that is
    not one of the three addressing modes on any parameter the opcode uses.
    """
    instr = decode(memory.read(ip))
    if not instr.known:
        raise InvalidOpcode(f"Unknown opcode {instr.opcode} (word {memory.read(ip)})", ip)
    for i, _role in enumerate(instr.signature):
        mode = instr.modes[i]
        if mode not in (Mode.POSITION, Mode.IMMEDIATE, Mode.RELATIVE):
            raise InvalidOpcode(
                f"Unknown mode {mode} for parameter {i + 1} of {instr.mnemonic}", ip)
    return instr
