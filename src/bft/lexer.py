from __future__ import annotations

import enum
import logging

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, List, Optional, Tuple, Union

if TYPE_CHECKING:
    from .validator import JumpTable

logger = logging.getLogger(__name__)


class Opcode(enum.Enum):
    MOVE_LEFT = ('<', 'Move left one location')
    MOVE_RIGHT = ('>', 'Move right one location')
    INCREMENT = ('+', 'Increment current location')
    DECREMENT = ('-', 'Decrement current location')
    INPUT = (',', 'Accept one byte of input')
    OUTPUT = ('.', 'Output the current byte')
    LOOP_START = ('[', 'Start looping')
    LOOP_END = (']', 'Finish looping')

    def __init__(self, symbol: str, description: str) -> None:
        self.symbol = symbol
        self.description = description

    def __str__(self) -> str:
        return self.description

    @classmethod
    def from_byte(cls, byte: int) -> Optional[Opcode]:
        return _BYTE_TO_OPCODE.get(byte)


_BYTE_TO_OPCODE = {ord(op.symbol): op for op in Opcode}


@dataclass(frozen=True)
class AnnotatedInstruction:
    opcode: Opcode
    line: int
    column: int

    @property
    def location(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass
class Program:
    """A tokenized program plus, once validated, its jump table.

    The instruction sequence never changes after construction; the only
    mutation allowed is attaching the jump table through ``validate``.
    """

    source: str
    instructions: Tuple[AnnotatedInstruction, ...]
    jump_table: Optional[JumpTable] = field(default=None, compare=False)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> Program:
        p = Path(path)
        return tokenize(str(p), p.read_bytes())

    def __len__(self) -> int:
        return len(self.instructions)

    def __iter__(self) -> Iterator[AnnotatedInstruction]:
        return iter(self.instructions)

    def __getitem__(self, index: int) -> AnnotatedInstruction:
        return self.instructions[index]

    @property
    def is_validated(self) -> bool:
        return self.jump_table is not None

    def validate(self) -> JumpTable:
        from .validator import validate_brackets

        table = validate_brackets(self)
        if self.jump_table is None:
            self.jump_table = table
        return table

    def source_text(self) -> str:
        return ''.join(inst.opcode.symbol for inst in self.instructions)


def tokenize(source: str, data: Union[bytes, bytearray, str]) -> Program:
    if isinstance(data, str):
        data = data.encode('utf-8')

    instructions: List[AnnotatedInstruction] = []
    # '\r' of a '\r\n' pair stays at the end of the line as a plain comment byte.
    for line_no_0, line in enumerate(bytes(data).split(b'\n')):
        for col_no_0, byte in enumerate(line):
            op = _BYTE_TO_OPCODE.get(byte)
            if op is None:
                continue
            instructions.append(AnnotatedInstruction(op, line_no_0 + 1, col_no_0 + 1))

    logger.debug("%s: %d instructions from %d bytes", source, len(instructions), len(data))
    return Program(source=source, instructions=tuple(instructions))
