"""
Intcode VM - I/O Channel implementations

  BatchQueue             fixed input list, collected output list
  PipeChannel            refillable inbox + bounded outbox (feedback links)
  InteractiveController  record-decoding controller base, TileScreen
  Mailbox                network interface: address, packets, idle value
  TextStream             character-code command script, text + result output
"""

from .base import Channel, Signal
from .batch import BatchQueue
from .pipe import PipeChannel
from .interactive import InteractiveController, TileScreen, Tile
from .mailbox import Mailbox
from .text import TextStream

__all__ = [
    'Channel', 'Signal', 'BatchQueue', 'PipeChannel',
    'InteractiveController', 'TileScreen', 'Tile', 'Mailbox', 'TextStream',
]
