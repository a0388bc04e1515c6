"""
Intcode VM - Interactive Drivers

  play()         run a program against an InteractiveController (arcade
                 cabinet, robot, ...). The controller computes every input
                 synchronously, so the program normally runs straight to
                 halt; a controller with nothing to say yet answers
                 UNAVAILABLE and play() resumes once poll() reports news.
  TextSession    an ASCII program held at its prompt. send() feeds one
                 command line and returns whatever the program printed
                 before it asked for more.
"""

import logging
from typing import Callable, Dict, Iterable, Optional, Tuple

from ..channels.interactive import InteractiveController
from ..channels.text import TextStream
from ..emu import IntcodeEngine, StopReason
from ..errors import ProgramFaulted
from ..loader import patch_program

log = logging.getLogger(__name__)


def play(program: Iterable[int], controller: InteractiveController,
         patches: Optional[Dict[int, int]] = None) -> StopReason:
    """Drive program with controller until it halts or the controller goes quiet."""
    engine = IntcodeEngine(patch_program(program, patches), suspendable=True)
    while True:
        reason = engine.run(controller)
        if reason is StopReason.FAULTED:
            raise ProgramFaulted(engine.fault, type(controller).__name__)
        if reason is StopReason.SUSPENDED and controller.poll():
            continue
        log.debug("play() stopped: %s after %d steps, %d records",
                  reason.value, engine.state.steps, controller.records)
        return reason


class TextSession:
    """A suspendable engine speaking ASCII through a TextStream."""

    def __init__(self, program: Iterable[int], echo: Optional[Callable[[str], None]] = None,
                 patches: Optional[Dict[int, int]] = None):
        self.engine = IntcodeEngine(patch_program(program, patches), suspendable=True)
        self.stream = TextStream(echo=echo)

    @property
    def finished(self) -> bool:
        return self.engine.halted

    @property
    def result(self) -> Optional[int]:
        return self.stream.result

    def resume(self) -> str:
        """Run until the program halts or waits for input; return new text."""
        if self.engine.run(self.stream) is StopReason.FAULTED:
            raise ProgramFaulted(self.engine.fault, "text session")
        return self.stream.read_text()

    def send(self, line: str) -> str:
        self.stream.feed_line(line)
        return self.resume()


def run_script(program: Iterable[int], script: str,
               echo: Optional[Callable[[str], None]] = None) -> Tuple[str, Optional[int]]:
    """Feed a whole command script, run, and return (text, result)."""
    session = TextSession(program, echo=echo)
    session.stream.feed(script)
    text = session.resume()
    if not session.finished:
        log.info("Script consumed; program is waiting for more input")
    return text, session.result
