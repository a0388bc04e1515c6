"""
Intcode VM - Execution State

The whole CPU state of an Intcode machine:
  ip             instruction pointer (non-negative)
  relative_base  offset added to RELATIVE-mode operands (signed)
  status         run status, see Status
  steps          executed-instruction counter

Status transitions:
  RUNNING -> WAITING_FOR_INPUT    input not yet available (suspendable only)
  RUNNING -> WAITING_FOR_OUTPUT   output refused for now (suspendable only)
  WAITING_* -> RUNNING            on the next run()
  RUNNING -> HALTED               opcode 99
  RUNNING -> FAULTED              any VMFault
HALTED and FAULTED are terminal.
"""

from enum import Enum


class Status(Enum):
    RUNNING = 'RUNNING'
    WAITING_FOR_INPUT = 'WAITING_FOR_INPUT'
    WAITING_FOR_OUTPUT = 'WAITING_FOR_OUTPUT'
    HALTED = 'HALTED'
    FAULTED = 'FAULTED'

    @property
    def terminal(self) -> bool:
        return self in (Status.HALTED, Status.FAULTED)

    @property
    def waiting(self) -> bool:
        return self in (Status.WAITING_FOR_INPUT, Status.WAITING_FOR_OUTPUT)


class ExecutionState:
    """Instruction pointer, relative base and run status of one engine."""

    __slots__ = ('ip', 'relative_base', 'status', 'steps')

    def __init__(self):
        self.ip: int = 0
        self.relative_base: int = 0
        self.status: Status = Status.RUNNING
        self.steps: int = 0

    def display(self) -> str:
        """Format state for debugging."""
        return (f"IP={self.ip:<6d} RB={self.relative_base:<6d} "
                f"STEPS={self.steps} [{self.status.value}]")

    def reset(self):
        """Reset to the power-on state."""
        self.ip = 0
        self.relative_base = 0
        self.status = Status.RUNNING
        self.steps = 0
