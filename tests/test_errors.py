#!/usr/bin/env python3
"""
Diagnostic rendering for structural and runtime errors.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from bft import (
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


def test_one_line_messages():
    assert str(UnmatchedLoopStart("mod.test", 12, 45)) == "mod.test:12:45: unmatched bracket '['"
    assert str(UnmatchedLoopEnd("mod.test", 42, 78)) == "mod.test:42:78: unexpected closing bracket ']'"
    assert str(TapeOverflow("p.bf", 3, 4, 100)) == (
        "p.bf:3:4: data pointer moved past the end of a fixed tape of 100 cells"
    )
    assert str(IoFailure("p.bf", 1, 2, "broken pipe")) == "p.bf:1:2: I/O failure: broken pipe"


def test_taxonomy():
    assert issubclass(UnmatchedLoopStart, StructuralError)
    assert issubclass(UnmatchedLoopEnd, StructuralError)
    for cls in (TapeUnderflow, TapeOverflow, IoFailure):
        assert issubclass(cls, ExecutionError)
    assert issubclass(StructuralError, BFTError)
    assert issubclass(ExecutionError, BFTError)
    assert issubclass(BFTError, Exception)


def test_errors_compare_by_location():
    assert UnmatchedLoopEnd("a", 1, 2) == UnmatchedLoopEnd("a", 1, 2)
    assert UnmatchedLoopEnd("a", 1, 2) != UnmatchedLoopEnd("a", 1, 3)
    assert UnmatchedLoopEnd("a", 1, 2) != UnmatchedLoopStart("a", 1, 2)


def test_context_block_marks_line_and_column():
    source = b"+\n  ]\n-\n"
    text = format_diagnostic(UnmatchedLoopEnd("x.bf", 2, 3), source)
    lines = text.split("\n")

    assert lines[0] == "x.bf:2:3: unexpected closing bracket ']'"
    assert lines[1] == "     1 | +"
    assert lines[2] == ">    2 |   ]"
    assert lines[3] == "       |   ^"
    assert lines[4] == "     3 | -"
    assert lines[-1].startswith("Hint: ")


def test_context_strips_carriage_returns():
    text = format_diagnostic(UnmatchedLoopStart("x.bf", 1, 1), b"[\r\n")
    assert ">    1 | [\n" in text


def test_without_source_is_one_line():
    err = TapeUnderflow("x.bf", 1, 1)
    assert format_diagnostic(err) == str(err)
    assert format_diagnostic(BFTError("plain")) == "plain"


def test_io_failure_has_no_hint():
    text = format_diagnostic(IoFailure("x.bf", 1, 1, "gone"), b",")
    assert "Hint:" not in text


def test_overflow_hint_does_not_name_cli_flags():
    text = format_diagnostic(TapeOverflow("x.bf", 1, 1, 1), b">")
    hint = text.split("\n")[-1]
    assert hint.startswith("Hint: ")
    assert "--" not in hint
