"""
Intcode VM - Sparse Word Memory

Memory is a mapping from non-negative address to integer word. Only
addresses that have been written are stored; every other address reads
as zero, so a program may touch addresses far beyond its own length
without any pre-allocation.

  read(addr)          any addr >= 0, unset locations read 0
  write(addr, value)  any addr >= 0, the store grows as needed

Negative addresses are rejected with ValueError. The engine checks every
effective address before it gets here and reports InvalidAddress itself.

Watchpoints and snapshots exist for debugging self-modifying programs:
attach a callback to an address, or snapshot before/after a run and diff.
"""

from typing import Callable, Dict, Iterable, List, Optional, Tuple


class Memory:
    """Sparse, unbounded integer store owned by exactly one engine."""

    def __init__(self, program: Iterable[int] = ()):
        self._mem: Dict[int, int] = {}
        self._extent = 0

        # Watchpoints: addr -> [callback(addr, old_val, new_val)]
        self._watchpoints: Dict[int, List[Callable]] = {}

        self.load_program(program)

    # --- Core read/write ---

    def read(self, addr: int) -> int:
        """Read the word at addr. Never-written locations read 0."""
        if addr < 0:
            raise ValueError(f"Negative address: {addr}")
        return self._mem.get(addr, 0)

    def write(self, addr: int, value: int):
        """Write a word, extending the store if needed.

        Watchpoint callbacks fire before the new value lands.
        """
        if addr < 0:
            raise ValueError(f"Negative address: {addr}")
        if addr in self._watchpoints:
            old = self._mem.get(addr, 0)
            for cb in self._watchpoints[addr]:
                cb(addr, old, value)
        self._mem[addr] = value
        if addr >= self._extent:
            self._extent = addr + 1

    def __getitem__(self, addr: int) -> int:
        return self.read(addr)

    def __setitem__(self, addr: int, value: int):
        self.write(addr, value)

    # --- Bulk load ---

    def load_program(self, values: Iterable[int], base: int = 0):
        """Copy a sequence of words into memory starting at base.

        Bypasses watchpoints; used to set up initial contents.
        """
        if base < 0:
            raise ValueError(f"Negative base address: {base}")
        for addr, value in enumerate(values, start=base):
            self._mem[addr] = int(value)
            if addr >= self._extent:
                self._extent = addr + 1

    # --- Size / export ---

    @property
    def extent(self) -> int:
        """One past the highest address ever set."""
        return self._extent

    def __len__(self) -> int:
        return self._extent

    def to_list(self, length: Optional[int] = None) -> List[int]:
        """Dense copy of addresses 0..length-1 (default: the whole extent)."""
        if length is None:
            length = self._extent
        return [self._mem.get(addr, 0) for addr in range(length)]

    def copy(self) -> "Memory":
        """Independent copy of the contents (watchpoints are not copied)."""
        clone = Memory()
        clone._mem = dict(self._mem)
        clone._extent = self._extent
        return clone

    # --- Watchpoints ---

    def add_watchpoint(self, addr: int, callback: Callable):
        """Call callback(addr, old_val, new_val) on every write to addr."""
        self._watchpoints.setdefault(addr, []).append(callback)

    def remove_watchpoint(self, addr: int, callback: Optional[Callable] = None):
        """Remove a watchpoint. If callback is None, removes all on that addr."""
        if addr in self._watchpoints:
            if callback is None:
                del self._watchpoints[addr]
            else:
                self._watchpoints[addr] = [
                    cb for cb in self._watchpoints[addr] if cb != callback
                ]
                if not self._watchpoints[addr]:
                    del self._watchpoints[addr]

    # --- Snapshots ---

    def snapshot(self) -> Dict[int, int]:
        """Capture the stored words for later diffing."""
        return dict(self._mem)

    @staticmethod
    def diff_snapshots(snap_a: Dict[int, int],
                       snap_b: Dict[int, int]) -> Dict[int, Tuple[int, int]]:
        """Return {addr: (old, new)} for every address whose value differs.

        Missing addresses count as 0 on either side.
        """
        changes = {}
        for addr in sorted(set(snap_a) | set(snap_b)):
            old = snap_a.get(addr, 0)
            new = snap_b.get(addr, 0)
            if old != new:
                changes[addr] = (old, new)
        return changes

    # --- Dump ---

    def dump(self, start: int = 0, length: Optional[int] = None,
             per_line: int = 8) -> str:
        """Produce a decimal word dump for debugging."""
        if length is None:
            length = max(self._extent - start, 0)
        lines = []
        for offset in range(0, length, per_line):
            addr = start + offset
            count = min(per_line, length - offset)
            words = ' '.join(f'{self._mem.get(addr + i, 0):>8d}' for i in range(count))
            lines.append(f'{addr:06d}  {words}')
        return '\n'.join(lines)
