from __future__ import annotations

import io

from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .lexer import Program, tokenize
from .state import TapeConfig
from .vm import Machine


@dataclass(frozen=True)
class RunOptions:
    tape: TapeConfig = field(default_factory=TapeConfig)
    stdin: Optional[BinaryIO] = None
    stdout: Optional[BinaryIO] = None


@dataclass(frozen=True)
class RunResult:
    steps: int
    head: int
    output: Optional[bytes] = None


def run_program(program: Program, *, options: Optional[RunOptions] = None) -> RunResult:
    opts = options or RunOptions()
    machine = Machine(opts.tape, stdin=opts.stdin, stdout=opts.stdout)
    steps = machine.run(program)
    return RunResult(steps=steps, head=machine.head)


def run_bytes(
    data: Union[bytes, str],
    *,
    source: str = '<string>',
    input_data: bytes = b'',
    options: Optional[RunOptions] = None,
) -> RunResult:
    """Tokenize, validate and run ``data``.

    Streams set in ``options`` are used as given. Otherwise input comes from
    ``input_data`` and the output is captured into ``RunResult.output``.
    """
    opts = options or RunOptions()
    stdin = opts.stdin if opts.stdin is not None else io.BytesIO(input_data)
    out = None if opts.stdout is not None else io.BytesIO()
    machine = Machine(opts.tape, stdin=stdin, stdout=opts.stdout if out is None else out)
    program = tokenize(source, data)
    program.validate()
    steps = machine.run(program)
    return RunResult(steps=steps, head=machine.head, output=None if out is None else out.getvalue())


def run_string(
    code: str,
    *,
    source: str = '<string>',
    input_data: bytes = b'',
    options: Optional[RunOptions] = None,
) -> RunResult:
    return run_bytes(code.encode('utf-8'), source=source, input_data=input_data, options=options)


def run_file(path: Union[str, Path], *, options: Optional[RunOptions] = None) -> RunResult:
    program = Program.from_file(path)
    program.validate()
    return run_program(program, options=options)
