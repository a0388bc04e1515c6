"""
Intcode VM - Interactive Controller Channels

An interactive controller sits between the engine's raw integer I/O and
some world state:

  - outputs are gathered into fixed-width records (e.g. x, y, tile) and
    handed to on_record() once complete; a record never reaches the
    controller half-built
  - every input is computed on demand by next_input() from whatever the
    controller currently knows, so control is closed-loop and synchronous

TileScreen is the arcade-cabinet controller: it decodes (x, y, tile)
records, takes (-1, 0, score) records as score updates, and steers the
joystick toward the ball.
"""

from abc import abstractmethod
from enum import IntEnum
from typing import Callable, Dict, List, Optional, Tuple

from ..config import SCORE_POSITION
from .base import Channel, InputResult, Signal


class InteractiveController(Channel):
    """Base class: record decoding on output, computed input."""

    record_width = 1

    def __init__(self, record_width: Optional[int] = None):
        if record_width is not None:
            self.record_width = record_width
        self._partial: List[int] = []
        self.records = 0
        self.inputs = 0

    @abstractmethod
    def next_input(self) -> InputResult:
        """Compute the next input value from current state."""

    @abstractmethod
    def on_record(self, *record: int):
        """React to one complete output record.

        Raise ValueError for a record the controller cannot interpret.
        """

    def poll(self) -> bool:
        """Called when the engine parks on an UNAVAILABLE input.

        Return True to resume it (new input is ready), False to stop.
        """
        return False

    @property
    def partial(self) -> Tuple[int, ...]:
        """Outputs received toward the next record."""
        return tuple(self._partial)

    def produce_input(self) -> InputResult:
        value = self.next_input()
        if not isinstance(value, Signal):
            self.inputs += 1
        return value

    def accept_output(self, value: int) -> Signal:
        self._partial.append(value)
        if len(self._partial) == self.record_width:
            record, self._partial = self._partial, []
            self.records += 1
            self.on_record(*record)
        return Signal.ACCEPTED


class Tile(IntEnum):
    EMPTY = 0
    WALL = 1
    BLOCK = 2
    PADDLE = 3
    BALL = 4

    @property
    def glyph(self) -> str:
        return _GLYPHS[self]


_GLYPHS = {
    Tile.EMPTY: ' ',
    Tile.WALL: '█',
    Tile.BLOCK: '#',
    Tile.PADDLE: '=',
    Tile.BALL: 'o',
}

Position = Tuple[int, int]


class TileScreen(InteractiveController):
    """Arcade screen + joystick.

    Joystick input: -1 tilts left, 0 stays neutral, 1 tilts right.
    """

    record_width = 3

    def __init__(self, display: Optional[Callable[[str], None]] = None):
        super().__init__()
        self.tiles: Dict[Position, Tile] = {}
        self.score = 0
        self.ball_x = 0
        self.paddle_x = 0
        self.display = display

    def on_record(self, x: int, y: int, value: int):
        if (x, y) == SCORE_POSITION:
            self.score = value
            return
        tile = Tile(value)
        self.tiles[(x, y)] = tile
        if tile is Tile.BALL:
            self.ball_x = x
        elif tile is Tile.PADDLE:
            self.paddle_x = x

    def next_input(self) -> int:
        if self.display is not None:
            self.display(self.render())
        if self.paddle_x < self.ball_x:
            return 1
        if self.paddle_x > self.ball_x:
            return -1
        return 0

    def count(self, tile: Tile) -> int:
        return sum(1 for t in self.tiles.values() if t is tile)

    def render(self) -> str:
        """Draw the known screen; never-drawn cells show as '?'."""
        if not self.tiles:
            return f"Score: {self.score}"
        xs = [x for x, _ in self.tiles]
        ys = [y for _, y in self.tiles]
        rows = []
        for y in range(min(ys), max(ys) + 1):
            rows.append(''.join(
                self.tiles[(x, y)].glyph if (x, y) in self.tiles else '?'
                for x in range(min(xs), max(xs) + 1)
            ))
        rows.append(f"Score: {self.score}")
        return '\n'.join(rows)
