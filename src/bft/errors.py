from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


def _build_context(lines: List[str], line_no_1: int, column: int, *, context: int = 2) -> str:
    idx = max(1, min(line_no_1, len(lines)))
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
        if i == idx and column > 0:
            out.append(f"  {'':4s} | {' ' * (column - 1)}^")
    return "\n".join(out)


def _hint_for(error: BFTError) -> Optional[str]:
    if isinstance(error, UnmatchedLoopEnd):
        return "Every ']' needs an earlier '[' to close. Check for a stray or extra ']'."
    if isinstance(error, UnmatchedLoopStart):
        return "This '[' is never closed. Add the matching ']' after the loop body."
    if isinstance(error, TapeOverflow):
        return 'Give the tape a larger capacity or make it growable.'
    if isinstance(error, TapeUnderflow):
        return 'The tape only extends to the right; cell 0 is the leftmost cell.'
    return None


@dataclass
class BFTError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class LocatedError(BFTError):
    source: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.source}:{self.line}:{self.column}: {self.message}"


class StructuralError(LocatedError):
    """Raised by bracket validation, before anything executes."""


class ExecutionError(LocatedError):
    """Raised by the machine while running a program."""


class UnmatchedLoopEnd(StructuralError):
    def __init__(self, source: str, line: int, column: int) -> None:
        super().__init__("unexpected closing bracket ']'", source, line, column)


class UnmatchedLoopStart(StructuralError):
    def __init__(self, source: str, line: int, column: int) -> None:
        super().__init__("unmatched bracket '['", source, line, column)


class TapeUnderflow(ExecutionError):
    def __init__(self, source: str, line: int, column: int) -> None:
        super().__init__('data pointer moved left of cell 0', source, line, column)


class TapeOverflow(ExecutionError):
    def __init__(self, source: str, line: int, column: int, capacity: int) -> None:
        super().__init__(
            f'data pointer moved past the end of a fixed tape of {capacity} cells',
            source, line, column,
        )
        self.capacity = capacity


class IoFailure(ExecutionError):
    def __init__(self, source: str, line: int, column: int, reason: str) -> None:
        super().__init__(f'I/O failure: {reason}', source, line, column)


def format_diagnostic(error: BFTError, source: Optional[bytes] = None) -> str:
    """Render an error with the surrounding source lines and a hint, if any."""
    head = str(error)
    if source is None or not isinstance(error, LocatedError):
        return head
    lines = source.decode('latin-1').split('\n')
    ctx = _build_context([ln.rstrip('\r') for ln in lines], error.line, error.column)
    hint = _hint_for(error)
    hint_block = f"\nHint: {hint}" if hint else ""
    return f"{head}\n{ctx}{hint_block}"
