from __future__ import annotations

import logging

from typing import List, Sequence, Tuple

import numpy as np

from .errors import UnmatchedLoopEnd, UnmatchedLoopStart
from .lexer import AnnotatedInstruction, Opcode, Program

logger = logging.getLogger(__name__)


class JumpTable:
    """Matched loop brackets as two parallel index arrays.

    ``forward[start]`` is the index of the ``]`` closing the ``[`` at
    ``start``; ``backward[end]`` is the reverse. Slots of non-loop
    instructions point at themselves.
    """

    def __init__(self, size: int, pairs: Sequence[Tuple[int, int]]) -> None:
        self.forward = np.arange(size, dtype=np.intp)
        self.backward = np.arange(size, dtype=np.intp)
        self._pairs = sorted(pairs)
        for start, end in self._pairs:
            self.forward[start] = end
            self.backward[end] = start

    def __len__(self) -> int:
        return len(self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JumpTable):
            return NotImplemented
        return (
            len(self.forward) == len(other.forward)
            and self._pairs == other._pairs
        )

    def __repr__(self) -> str:
        return f"JumpTable(size={len(self.forward)}, pairs={self._pairs!r})"

    def pairs(self) -> List[Tuple[int, int]]:
        return list(self._pairs)

    def target(self, index: int) -> int:
        # A loop instruction is either a start or an end, never both.
        fwd = int(self.forward[index])
        if fwd != index:
            return fwd
        return int(self.backward[index])


def validate_brackets(program: Program) -> JumpTable:
    """Match every ``[`` with its ``]`` in a single left-to-right pass.

    Raises ``UnmatchedLoopEnd`` at the first ``]`` with nothing open, or
    ``UnmatchedLoopStart`` at the innermost ``[`` still open at the end.
    """
    instructions: Sequence[AnnotatedInstruction] = program.instructions
    stack: List[int] = []
    pairs: List[Tuple[int, int]] = []

    for idx, inst in enumerate(instructions):
        if inst.opcode is Opcode.LOOP_START:
            stack.append(idx)
        elif inst.opcode is Opcode.LOOP_END:
            if not stack:
                raise UnmatchedLoopEnd(program.source, inst.line, inst.column)
            pairs.append((stack.pop(), idx))

    if stack:
        inst = instructions[stack.pop()]
        raise UnmatchedLoopStart(program.source, inst.line, inst.column)

    logger.debug("%s: %d matched loop pairs", program.source, len(pairs))
    return JumpTable(len(instructions), pairs)
