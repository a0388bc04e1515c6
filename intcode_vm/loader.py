"""
Intcode VM - Program Loading

Program text is a comma-separated list of signed decimal integers, with
optional whitespace around each field:

    1002,4,3,4,33
    109, 1, 204, -1, 99\n

A trailing comma or newline is tolerated. Anything else that does not
parse as an integer raises ProgramFormatError naming the field.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .errors import ProgramFormatError


def parse_program(text: str) -> List[int]:
    """Parse program text into a list of words."""
    fields = text.split(',')
    if fields and not fields[-1].strip():
        fields.pop()
    program = []
    for index, field in enumerate(fields):
        field = field.strip()
        if not field:
            raise ProgramFormatError("empty field", index, field)
        try:
            program.append(int(field, 10))
        except ValueError:
            raise ProgramFormatError("not a signed decimal integer", index, field) from None
    return program


def load_program(path: Union[str, Path]) -> List[int]:
    """Read and parse a program file."""
    return parse_program(Path(path).read_text(encoding='utf-8'))


def patch_program(program: Iterable[int],
                  patches: Optional[Dict[int, int]] = None) -> List[int]:
    """Return a copy of program with {address: value} patches applied.

    Addresses past the end extend the copy with zeros.
    """
    patched = list(program)
    for addr, value in (patches or {}).items():
        if addr < 0:
            raise ValueError(f"Negative patch address: {addr}")
        if addr >= len(patched):
            patched.extend([0] * (addr + 1 - len(patched)))
        patched[addr] = value
    return patched


def parse_patch(spec: str) -> Dict[int, int]:
    """Parse 'ADDR=VALUE' (as given on the command line) into a patch dict."""
    addr_text, sep, value_text = spec.partition('=')
    if not sep:
        raise ValueError(f"Patch must look like ADDR=VALUE, got {spec!r}")
    return {int(addr_text.strip()): int(value_text.strip())}
