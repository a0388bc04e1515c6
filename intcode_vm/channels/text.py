"""
Intcode VM - Scripted Text Stream Channel

For programs that speak ASCII. Input is a queue of character codes taken
from command text; output codes 0..255 are rendered as text, anything
outside the byte range is an out-of-band result (a score, a damage
report, a dust count).

An empty input queue is UNAVAILABLE rather than EXHAUSTED, so a session
can pause at a prompt, be fed another command, and resume.
"""

from collections import deque
from typing import Callable, List, Optional

from .base import Channel, InputResult, Signal


class TextStream(Channel):

    def __init__(self, script: str = "", echo: Optional[Callable[[str], None]] = None):
        self._buffer: deque = deque()
        self._text: List[str] = []
        self.transcript: List[str] = []
        self.result: Optional[int] = None
        self.echo = echo
        self.feed(script)

    def feed(self, text: str):
        """Queue text as input character codes."""
        self._buffer.extend(ord(ch) for ch in text)

    def feed_line(self, line: str):
        """Queue one command line, adding the trailing newline."""
        self.feed(line if line.endswith('\n') else line + '\n')

    @property
    def pending(self) -> int:
        return len(self._buffer)

    def produce_input(self) -> InputResult:
        if not self._buffer:
            return Signal.UNAVAILABLE
        code = self._buffer.popleft()
        if self.echo is not None:
            self.echo(chr(code))
        return code

    def accept_output(self, value: int) -> Signal:
        if 0 <= value <= 0xFF:
            ch = chr(value)
            self._text.append(ch)
            self.transcript.append(ch)
            if self.echo is not None:
                self.echo(ch)
        else:
            self.result = value
        return Signal.ACCEPTED

    def read_text(self) -> str:
        """Return text produced since the last call."""
        text = ''.join(self._text)
        self._text.clear()
        return text

    @property
    def full_text(self) -> str:
        return ''.join(self.transcript)
