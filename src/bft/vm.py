from __future__ import annotations

import logging
import sys

from typing import BinaryIO, Optional

from .errors import BFTError, IoFailure, TapeOverflow, TapeUnderflow
from .lexer import AnnotatedInstruction, Opcode, Program
from .state import Tape, TapeConfig

logger = logging.getLogger(__name__)


class Machine:
    """Runs a validated program against a fresh tape.

    End of input leaves the current cell unchanged. A failing instruction
    stops the run where it is: the tape keeps every change made before it.
    """

    def __init__(
        self,
        config: Optional[TapeConfig] = None,
        *,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[BinaryIO] = None,
    ):
        self.config = config or TapeConfig()
        self.stdin = stdin
        self.stdout = stdout
        self.tape = Tape(self.config)
        self.pc = 0
        self.steps = 0
        self._used = False

    @property
    def head(self) -> int:
        return self.tape.head

    def reset(self) -> None:
        self.tape = Tape(self.config)
        self.pc = 0
        self.steps = 0
        self._used = False

    def run(self, program: Program) -> int:
        if program.jump_table is None:
            program.validate()
        table = program.jump_table

        if self._used:
            self.reset()
        self._used = True
        stdin = self.stdin if self.stdin is not None else sys.stdin.buffer
        stdout = self.stdout if self.stdout is not None else sys.stdout.buffer
        tape = self.tape
        instructions = program.instructions
        length = len(instructions)

        logger.debug('%s: running %d instructions on %d cells (growable=%s, %d-bit)',
                     program.source, length, len(tape), tape.growable, self.config.cell_bits)

        try:
            while self.pc < length:
                inst = instructions[self.pc]
                op = inst.opcode

                if op is Opcode.INCREMENT:
                    tape.add(1)
                elif op is Opcode.DECREMENT:
                    tape.add(-1)
                elif op is Opcode.MOVE_RIGHT:
                    nxt = tape.head + 1
                    if nxt >= len(tape):
                        if not tape.growable:
                            raise TapeOverflow(program.source, inst.line, inst.column, len(tape))
                        tape.grow_to(nxt)
                    tape.head = nxt
                elif op is Opcode.MOVE_LEFT:
                    if tape.head == 0:
                        raise TapeUnderflow(program.source, inst.line, inst.column)
                    tape.head -= 1
                elif op is Opcode.OUTPUT:
                    self._write(program, inst, stdout, tape.value)
                elif op is Opcode.INPUT:
                    data = self._read(program, inst, stdin)
                    if data:
                        tape.value = data[0]
                elif op is Opcode.LOOP_START:
                    if tape.value == 0:
                        self.pc = int(table.forward[self.pc])
                elif op is Opcode.LOOP_END:
                    if tape.value != 0:
                        self.pc = int(table.backward[self.pc])

                self.pc += 1
                self.steps += 1
        except BFTError:
            # the run already failed; that error is the one to report
            try:
                stdout.flush()
            except (OSError, ValueError) as e:
                logger.debug('%s: flush after failed run: %s', program.source, e)
            raise

        self._flush(program, instructions[-1] if length else None, stdout)

        logger.debug('%s: finished after %d steps, head at %d', program.source, self.steps, tape.head)
        return self.steps

    def _read(self, program: Program, inst: AnnotatedInstruction, stream: BinaryIO) -> bytes:
        try:
            return stream.read(1)
        except (OSError, ValueError) as e:
            raise IoFailure(program.source, inst.line, inst.column, str(e)) from e

    def _write(self, program: Program, inst: AnnotatedInstruction, stream: BinaryIO, value: int) -> None:
        try:
            stream.write(bytes((value & 0xFF,)))
        except (OSError, ValueError) as e:
            raise IoFailure(program.source, inst.line, inst.column, str(e)) from e

    def _flush(self, program: Program, inst: Optional[AnnotatedInstruction], stream: BinaryIO) -> None:
        try:
            stream.flush()
        except (OSError, ValueError) as e:
            line, column = (inst.line, inst.column) if inst else (1, 1)
            raise IoFailure(program.source, line, column, f"flush failed: {e}") from e
