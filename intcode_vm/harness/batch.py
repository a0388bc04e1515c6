"""
Intcode VM - One-shot Batch Runs

The simplest way to drive the VM: a fresh non-suspendable engine, a
fixed input list, run to halt, collect outputs.
"""

from typing import Dict, Iterable, List, Optional

from ..channels.batch import BatchQueue
from ..emu import IntcodeEngine, StopReason
from ..errors import ProgramFaulted
from ..loader import patch_program


def run_program(program: Iterable[int], inputs: Iterable[int] = (),
                patches: Optional[Dict[int, int]] = None) -> List[int]:
    """Run program to completion and return its outputs.

    Raises ProgramFaulted if the program faults.
    """
    engine = IntcodeEngine(patch_program(program, patches))
    io = BatchQueue(inputs)
    if engine.run(io) is StopReason.FAULTED:
        raise ProgramFaulted(engine.fault)
    return io.outputs


def run_to_memory(program: Iterable[int],
                  patches: Optional[Dict[int, int]] = None) -> List[int]:
    """Run an I/O-free program and return its final memory contents."""
    engine = IntcodeEngine(patch_program(program, patches))
    if engine.run(BatchQueue()) is StopReason.FAULTED:
        raise ProgramFaulted(engine.fault)
    return engine.mem.to_list()
