"""
Intcode VM
==========
An interpreter for Intcode, a tiny self-modifying instruction set over a
sparse, unbounded integer memory, plus the orchestration patterns used
to drive several interpreters at once.

Architecture:
    ┌──────────┐    ┌──────────┐    ┌──────────────┐    ┌───────────────┐
    │ Program  │───>│  Memory  │───>│    Engine    │<──>│  I/O Channel  │
    │ (.txt)   │    │ (sparse) │    │ (decode/exec)│    │ (queue, pipe, │
    └──────────┘    └──────────┘    └──────────────┘    │  mailbox, ...)│
                                           ▲            └───────────────┘
                                           │
                                    ┌──────────────┐
                                    │   Harness    │  feedback loop,
                                    │ (run/resume) │  network, play()
                                    └──────────────┘

    - loader.py:     program text -> list of ints
    - mem/:          sparse word store, watchpoints, snapshots
    - cpu/:          decoder, opcode table, ALU, execution state
    - emu.py:        IntcodeEngine; step() / run() -> StopReason
    - channels/:     the I/O capability and its concrete variants
    - harness/:      multi-engine scheduling (all single-threaded)
    - disasm.py:     static listing for debugging programs
"""

__version__ = "1.0.0"

from .errors import (
    IntcodeError, VMFault, InvalidOpcode, InvalidAddress, InputExhausted,
    OutputRejected, ProgramFaulted, LoopStalled, NetworkStalled, ProgramFormatError,
)
from .mem.memory import Memory
from .cpu.decoder import decode, Instruction, Mode, OPCODES
from .cpu.regs import Status
from .emu import IntcodeEngine, StopReason
from .channels import (
    Channel, Signal, BatchQueue, PipeChannel, InteractiveController,
    TileScreen, Tile, Mailbox, TextStream,
)
from .harness import (
    run_program, run_chain, run_feedback_loop, max_thruster_signal,
    Network, NetworkResult, play, TextSession, run_script,
)
from .loader import parse_program, load_program, patch_program
from .disasm import disassemble
