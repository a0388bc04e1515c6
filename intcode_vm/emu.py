"""
Intcode VM - Execution Engine

Integrates:
  - Execution state (cpu/regs.py)
  - Sparse memory (mem/memory.py)
  - Instruction decoder (cpu/decoder.py)
  - Arithmetic / comparison ops (cpu/alu.py)
  - A caller-supplied I/O Channel (channels/base.py)

Execution model (one step):
  1. Fetch the word at IP and decode opcode + mode digits
  2. Resolve every operand: read values, resolve write addresses
  3. Execute the handler (this is the only place effects happen)
  4. Advance IP, or jump

Operands are fully resolved before the handler runs, so a fault never
leaves an instruction half applied. IN resolves its target address before
asking the channel for a value, so an invalid target never consumes input.

Stop reasons returned by run():
  HALTED     opcode 99
  SUSPENDED  IN found no input yet / OUT met backpressure (suspendable only);
             IP still points at the same instruction, run() retries it
  FAULTED    any VMFault (see errors.py); the fault is kept on engine.fault
"""

import logging
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Union

from .channels.base import Channel, Signal
from .cpu import alu
from .cpu.decoder import (
    decode_instruction, Instruction, Mode, READ,
    ADD, MUL, IN, OUT, JT, JF, LT, EQ, ARB, HALT,
)
from .cpu.regs import ExecutionState, Status
from .errors import (
    VMFault, InvalidAddress, InputExhausted, OutputRejected,
)
from .mem.memory import Memory

log = logging.getLogger(__name__)


class StopReason(Enum):
    HALTED = 'HALTED'
    SUSPENDED = 'SUSPENDED'
    FAULTED = 'FAULTED'


class IntcodeEngine:
    """Intcode virtual machine.

    One engine owns one Memory. The same class covers both batch use
    (suspendable=False: missing input or refused output is a fault) and
    co-routine use (suspendable=True: the engine parks and returns
    StopReason.SUSPENDED, and the next run() picks up at the same IN/OUT).

    Usage:
        engine = IntcodeEngine([3, 0, 4, 0, 99])
        io = BatchQueue([42])
        reason = engine.run(io)      # StopReason.HALTED
        io.outputs                   # [42]
    """

    def __init__(self, program: Union[Iterable[int], Memory] = (),
                 suspendable: bool = False):
        if isinstance(program, Memory):
            self.mem = program.copy()
        else:
            self.mem = Memory(program)
        self._initial = self.mem.copy()

        self.state = ExecutionState()
        self.suspendable = suspendable
        self.fault: Optional[VMFault] = None

        # Trace output
        self._trace = False
        self._trace_output: List[str] = []

        # Opcode -> handler(operands, channel) -> jump target or None
        self._dispatch = self._build_dispatch()

    @property
    def status(self) -> Status:
        return self.state.status

    @property
    def halted(self) -> bool:
        return self.state.status is Status.HALTED

    @property
    def faulted(self) -> bool:
        return self.state.status is Status.FAULTED

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self, channel: Optional[Channel] = None) -> Optional[StopReason]:
        """Execute one instruction. Returns a StopReason if stopped, else None."""
        status = self.state.status
        if status is Status.HALTED:
            return StopReason.HALTED
        if status is Status.FAULTED:
            return StopReason.FAULTED

        ip = self.state.ip
        try:
            instr = decode_instruction(self.mem, ip)
            operands = self._decode_operands(instr)

            if self._trace:
                self._record_trace(ip, instr, operands)

            target = self._dispatch[instr.opcode](operands, channel)
        except _Suspend as suspend:
            self.state.status = suspend.status
            log.debug("Suspended at ip=%d (%s)", ip, suspend.status.value)
            return StopReason.SUSPENDED
        except _HaltException:
            self.state.status = Status.HALTED
            self.state.steps += 1
            log.debug("Halted at ip=%d after %d steps", ip, self.state.steps)
            return StopReason.HALTED
        except VMFault as e:
            self.fault = e
            self.state.status = Status.FAULTED
            log.debug("Faulted: %s [%s]", e, self.state.display())
            return StopReason.FAULTED

        self.state.ip = ip + instr.length if target is None else target
        self.state.status = Status.RUNNING
        self.state.steps += 1
        return None

    def run(self, channel: Optional[Channel] = None) -> StopReason:
        """Run until the program halts, suspends or faults."""
        while True:
            reason = self.step(channel)
            if reason is not None:
                return reason

    def reset(self):
        """Restore the initial program and power-on state."""
        self.mem = self._initial.copy()
        self.state.reset()
        self.fault = None
        self._trace_output.clear()

    # ══════════════════════════════════════════════
    # Operand decoding
    # ══════════════════════════════════════════════

    def _decode_operands(self, instr: Instruction) -> List[int]:
        """Resolve every parameter of instr.

        READ parameters resolve to a value, WRITE parameters to an address.
        """
        ip = self.state.ip
        operands = []
        for i, role in enumerate(instr.signature):
            raw = self.mem.read(ip + 1 + i)
            mode = instr.modes[i]

            if mode == Mode.IMMEDIATE:
                if role != READ:
                    raise InvalidAddress(
                        f"{instr.mnemonic} write target (parameter {i + 1}) "
                        f"is in immediate mode", ip)
                operands.append(raw)
                continue

            if mode == Mode.POSITION:
                addr = raw
            else:  # RELATIVE
                addr = self.state.relative_base + raw
            if addr < 0:
                raise InvalidAddress(
                    f"{instr.mnemonic} parameter {i + 1} resolves to "
                    f"negative address {addr}", ip)

            operands.append(self.mem.read(addr) if role == READ else addr)
        return operands

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════
    # Handler signature: handler(operands, channel) -> Optional[int]
    # Returning an int jumps there; None advances past the instruction.

    def _build_dispatch(self) -> Dict[int, Callable]:
        return {
            ADD:  self._op_add,
            MUL:  self._op_mul,
            IN:   self._op_in,
            OUT:  self._op_out,
            JT:   self._op_jt,
            JF:   self._op_jf,
            LT:   self._op_lt,
            EQ:   self._op_eq,
            ARB:  self._op_arb,
            HALT: self._op_halt,
        }

    # ── Arithmetic / comparison ──

    def _op_add(self, ops, channel):
        a, b, dest = ops
        self.mem.write(dest, alu.add(a, b))

    def _op_mul(self, ops, channel):
        a, b, dest = ops
        self.mem.write(dest, alu.mul(a, b))

    def _op_lt(self, ops, channel):
        a, b, dest = ops
        self.mem.write(dest, alu.less_than(a, b))

    def _op_eq(self, ops, channel):
        a, b, dest = ops
        self.mem.write(dest, alu.equals(a, b))

    # ── I/O ──

    def _op_in(self, ops, channel):
        dest = ops[0]
        ip = self.state.ip
        if channel is None:
            raise InputExhausted("IN with no channel attached", ip)

        value = channel.produce_input()
        if value is Signal.UNAVAILABLE:
            if self.suspendable:
                raise _Suspend(Status.WAITING_FOR_INPUT)
            raise InputExhausted("Input not available", ip)
        if value is Signal.EXHAUSTED:
            raise InputExhausted("Input exhausted", ip)

        self.mem.write(dest, int(value))

    def _op_out(self, ops, channel):
        value = ops[0]
        ip = self.state.ip
        if channel is None:
            raise OutputRejected("OUT with no channel attached", ip)

        try:
            result = channel.accept_output(value)
        except ValueError as e:
            raise OutputRejected(f"Output {value} rejected: {e}", ip) from e

        if result is Signal.BACKPRESSURE:
            if self.suspendable:
                raise _Suspend(Status.WAITING_FOR_OUTPUT)
            raise OutputRejected(f"Output {value} refused", ip)

    # ── Jumps ──

    def _jump_target(self, target: int) -> int:
        if target < 0:
            raise InvalidAddress(f"Jump to negative address {target}", self.state.ip)
        return target

    def _op_jt(self, ops, channel):
        cond, target = ops
        if alu.is_true(cond):
            return self._jump_target(target)
        return None

    def _op_jf(self, ops, channel):
        cond, target = ops
        if alu.is_false(cond):
            return self._jump_target(target)
        return None

    # ── Control ──

    def _op_arb(self, ops, channel):
        self.state.relative_base += ops[0]

    def _op_halt(self, ops, channel):
        raise _HaltException("HALT")

    # ══════════════════════════════════════════════
    # Trace / Debug
    # ══════════════════════════════════════════════

    def enable_trace(self, enable: bool = True):
        """Enable instruction trace logging."""
        self._trace = enable

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()

    def _record_trace(self, ip: int, instr: Instruction, operands: List[int]):
        modes = ''.join(str(m) for m in instr.modes[:len(instr.signature)])
        ops = ' '.join(str(v) for v in operands)
        line = f"{ip:06d}: {instr.mnemonic:4s} {modes:3s} {ops:<24s} RB={self.state.relative_base}"
        self._trace_output.append(line)
        log.debug(line)


# Internal exceptions for flow control
class _HaltException(Exception):
    pass


class _Suspend(Exception):
    def __init__(self, status: Status):
        self.status = status
        super().__init__(status.value)
