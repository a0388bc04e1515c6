"""
Intcode VM - Disassembler

Linear-sweep listing of a program image. Intcode freely mixes code and
data (and rewrites itself), so the listing is a best-effort static view:
every word that decodes as a known opcode with valid mode digits and fits
in the image is shown as an instruction, anything else as one DATA word.

Operand rendering:
    [n]       position mode, address n
    #n        immediate value n
    [rb+n]    relative mode, offset n from the relative base

Usage:
    for entry in disassemble([1002, 4, 3, 4, 33]):
        print(entry.format())
    # 000000: 1002 4 3 4          MUL [4], #3, [4]
    # 000004: 33                  DATA 33
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .cpu.decoder import decode, Instruction, Mode

MNEMONIC_DATA = "DATA"


@dataclass
class DisassembledInstruction:
    """One listing line."""
    address: int
    words: Tuple[int, ...]
    mnemonic: str
    operands: List[str] = field(default_factory=list)
    length: int = 0         # Words covered (set in post-init)

    def __post_init__(self):
        self.length = len(self.words)

    @property
    def is_data(self) -> bool:
        return self.mnemonic == MNEMONIC_DATA

    @property
    def words_str(self) -> str:
        return " ".join(str(w) for w in self.words)

    def format(self, words_width: int = 20) -> str:
        """Format as a single listing line."""
        asm = f"{self.mnemonic} {', '.join(self.operands)}".strip()
        return f"{self.address:06d}: {self.words_str.ljust(words_width)}{asm}"


def format_operand(mode: int, raw: int) -> str:
    if mode == Mode.IMMEDIATE:
        return f"#{raw}"
    if mode == Mode.RELATIVE:
        return f"[rb{raw:+d}]"
    return f"[{raw}]"


def _valid_modes(instr: Instruction) -> bool:
    return all(instr.modes[i] in (Mode.POSITION, Mode.IMMEDIATE, Mode.RELATIVE)
               for i in range(len(instr.signature)))


def decode_one(words: List[int], offset: int) -> DisassembledInstruction:
    """Decode the entry at offset (always at least one word)."""
    word = words[offset]
    instr = decode(word)
    if (not instr.known or not _valid_modes(instr)
            or offset + instr.length > len(words)):
        return DisassembledInstruction(offset, (word,), MNEMONIC_DATA, [str(word)])

    raw = tuple(words[offset:offset + instr.length])
    operands = [format_operand(instr.modes[i], value) for i, value in enumerate(raw[1:])]
    return DisassembledInstruction(offset, raw, instr.mnemonic, operands)


def disassemble(program: Iterable[int], start: int = 0,
                count: Optional[int] = None) -> List[DisassembledInstruction]:
    """Disassemble from start; stop after count entries or at the end."""
    words = list(program)
    if start < 0:
        raise ValueError(f"Negative start address: {start}")
    results: List[DisassembledInstruction] = []
    offset = start
    while offset < len(words):
        if count is not None and len(results) >= count:
            break
        entry = decode_one(words, offset)
        results.append(entry)
        offset += entry.length
    return results
