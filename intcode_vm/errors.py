"""
Intcode VM - Error Taxonomy

Two families live here:

  VMFault            raised inside an instruction handler. The engine
                     catches it in step(), records it on ``engine.fault``
                     and reports StopReason.FAULTED. Callers never see
                     these raised out of run().
  IntcodeError       everything raised *to* callers: orchestration
                     failures and program-text problems.

VMFault subclasses:
  InvalidOpcode      unknown opcode or parameter-mode digit
  InvalidAddress     negative effective address, or an Immediate write target
  InputExhausted     channel is permanently out of input
  OutputRejected     channel refused an output value
"""

from typing import Optional


class IntcodeError(Exception):
    """Base class for every error this package raises."""


class VMFault(IntcodeError):
    """A fault raised while executing one instruction."""

    def __init__(self, message: str, ip: Optional[int] = None):
        self.ip = ip
        self.message = message
        super().__init__(f"ip={ip}: {message}" if ip is not None else message)


class InvalidOpcode(VMFault):
    pass


class InvalidAddress(VMFault):
    pass


class InputExhausted(VMFault):
    pass


class OutputRejected(VMFault):
    pass


class ProgramFaulted(IntcodeError):
    """An engine driven by a harness stopped with StopReason.FAULTED."""

    def __init__(self, fault: Optional[VMFault], context: str = ""):
        self.fault = fault
        if fault is None:
            message = context or "program faulted"
        else:
            message = f"{context}: {fault}" if context else str(fault)
        super().__init__(message)


class LoopStalled(IntcodeError):
    """A feedback loop completed a full round without any engine progressing."""


class NetworkStalled(IntcodeError):
    """Every node is idle and the monitor has nothing to replay."""


class ProgramFormatError(IntcodeError):
    """Raised when program text cannot be parsed."""

    def __init__(self, message: str, field_index: int = -1, field_text: str = ""):
        self.field_index = field_index
        self.field_text = field_text
        if field_index >= 0:
            message = f"Field {field_index} ({field_text!r}): {message}"
        super().__init__(message)
