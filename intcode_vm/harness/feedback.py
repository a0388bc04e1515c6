"""
Intcode VM - Amplifier Chains and Feedback Loops

Two ways of wiring one program into a row of amplifiers, each amplifier a
separate engine with its own memory:

  serial chain     A -> B -> C -> D -> E
                   every stage runs to halt once, input [phase, signal]
  feedback loop    A -> B -> C -> D -> E -> A ...
                   stages suspend on IN/OUT and are resumed round-robin
                   until the last stage halts

    links[i] is stage i's PipeChannel. After each turn the orchestrator
    drains stage i's outbox into links[i + 1] (mod N). Capacity 1 means
    a stage yields after every output, so signals move one at a time.

The loop result is the last value the final stage emitted before halting.
"""

import itertools
import logging
from typing import Iterable, List, Optional, Sequence

from ..channels.batch import BatchQueue
from ..channels.pipe import PipeChannel
from ..config import CHAIN_PHASES, FEEDBACK_PHASES, INITIAL_SIGNAL
from ..emu import IntcodeEngine, StopReason
from ..errors import LoopStalled, ProgramFaulted

log = logging.getLogger(__name__)


def run_chain(program: Sequence[int], phases: Iterable[int],
              signal: int = INITIAL_SIGNAL) -> int:
    """Run a serial amplifier chain and return the final stage's output."""
    for stage, phase in enumerate(phases):
        engine = IntcodeEngine(program)
        io = BatchQueue([phase, signal])
        if engine.run(io) is StopReason.FAULTED:
            raise ProgramFaulted(engine.fault, f"stage {stage} (phase {phase})")
        if io.last_output is None:
            raise ProgramFaulted(None, f"stage {stage} (phase {phase}) produced no output")
        signal = io.last_output
    return signal


def run_feedback_loop(program: Sequence[int], phases: Iterable[int],
                      signal: int = INITIAL_SIGNAL) -> int:
    """Run a feedback loop to completion and return the last thruster signal.

    Raises ProgramFaulted if any stage faults or the final stage never
    produced output, and LoopStalled if a whole round makes no progress.
    """
    phases = list(phases)
    if not phases:
        raise ValueError("A feedback loop needs at least one stage")

    engines = [IntcodeEngine(program, suspendable=True) for _ in phases]
    links = [PipeChannel([phase], capacity=1) for phase in phases]
    links[0].feed(signal)

    last = len(engines) - 1
    last_signal: Optional[int] = None
    rounds = 0

    while True:
        rounds += 1
        progressed = False
        for i, engine in enumerate(engines):
            if engine.halted:
                continue
            before = engine.state.steps
            reason = engine.run(links[i])
            if reason is StopReason.FAULTED:
                raise ProgramFaulted(engine.fault, f"stage {i} (phase {phases[i]})")
            if engine.state.steps != before:
                progressed = True

            outputs = links[i].drain()
            if outputs:
                links[(i + 1) % len(engines)].feed(*outputs)
                if i == last:
                    last_signal = outputs[-1]

        if engines[last].halted:
            log.debug("Feedback loop %s finished after %d rounds", phases, rounds)
            if last_signal is None:
                raise ProgramFaulted(None, "final stage halted without output")
            return last_signal

        if not progressed:
            waiting = [f"{i}:{e.status.value}" for i, e in enumerate(engines)]
            raise LoopStalled(f"No stage progressed in round {rounds} ({', '.join(waiting)})")


def max_thruster_signal(program: Sequence[int], phases: Optional[Iterable[int]] = None,
                        feedback: bool = False) -> Optional[int]:
    """Try every ordering of phases and return the best final signal.

    Orderings whose run faults or stalls are skipped. Returns None if
    none of them completes.
    """
    if phases is None:
        phases = FEEDBACK_PHASES if feedback else CHAIN_PHASES
    runner = run_feedback_loop if feedback else run_chain
    program = list(program)

    best: Optional[int] = None
    best_order: List[int] = []
    for order in itertools.permutations(phases):
        try:
            value = runner(program, order)
        except (ProgramFaulted, LoopStalled) as e:
            log.debug("Phase order %s failed: %s", order, e)
            continue
        if best is None or value > best:
            best, best_order = value, list(order)

    if best is not None:
        log.info("Best phase order %s -> %d", best_order, best)
    return best
