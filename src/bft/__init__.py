from .lexer import AnnotatedInstruction, Opcode, Program, tokenize
from .validator import JumpTable, validate_brackets
from .state import DEFAULT_CAPACITY, Tape, TapeConfig
from .vm import Machine
from .errors import (
    BFTError,
    ExecutionError,
    IoFailure,
    StructuralError,
    TapeOverflow,
    TapeUnderflow,
    UnmatchedLoopEnd,
    UnmatchedLoopStart,
    format_diagnostic,
)
from .api import RunOptions, RunResult, run_bytes, run_file, run_program, run_string

__all__ = [
    'AnnotatedInstruction',
    'Opcode',
    'Program',
    'tokenize',
    'JumpTable',
    'validate_brackets',
    'DEFAULT_CAPACITY',
    'Tape',
    'TapeConfig',
    'Machine',
    'BFTError',
    'ExecutionError',
    'IoFailure',
    'StructuralError',
    'TapeOverflow',
    'TapeUnderflow',
    'UnmatchedLoopEnd',
    'UnmatchedLoopStart',
    'format_diagnostic',
    'RunOptions',
    'RunResult',
    'run_bytes',
    'run_file',
    'run_program',
    'run_string',
]
