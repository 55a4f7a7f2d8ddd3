#!/usr/bin/env python3
"""
Bracket matching: jump table construction and structural errors.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from bft import Opcode, UnmatchedLoopEnd, UnmatchedLoopStart, tokenize, validate_brackets


def _check_nesting(program, table):
    pairs = table.pairs()
    for start, end in pairs:
        assert program[start].opcode is Opcode.LOOP_START
        assert program[end].opcode is Opcode.LOOP_END
        assert start < end
        assert table.target(start) == end
        assert table.target(end) == start
    for a_start, a_end in pairs:
        for b_start, b_end in pairs:
            # disjoint or nested, never partially overlapping
            assert not (a_start < b_start < a_end < b_end)


def test_proper_brackets():
    program = tokenize("mod.test", b"[[[]][][[[]]]]")
    table = validate_brackets(program)

    assert len(table) == 7
    _check_nesting(program, table)
    assert table.target(0) == 13


@pytest.mark.parametrize("code", [
    b"[]",
    b"+[->+<]>.",
    b"[[[]][][[[]]]]",
    b"a[b[c]d[e[f]g]h]i",
    b"[\n[\n]\n]\n[]",
])
def test_matched_pairs_are_properly_nested(code):
    program = tokenize("nest", code)
    table = validate_brackets(program)

    loops = sum(1 for i in program if i.opcode is Opcode.LOOP_START)
    assert len(table) == loops
    _check_nesting(program, table)


def test_missing_left_bracket():
    program = tokenize("mod.test", b"[[][][]]]")
    with pytest.raises(UnmatchedLoopEnd) as exc:
        validate_brackets(program)
    assert exc.value == UnmatchedLoopEnd("mod.test", 1, 9)


def test_missing_right_bracket():
    program = tokenize("mod.test", b"[[][][]")
    with pytest.raises(UnmatchedLoopStart) as exc:
        validate_brackets(program)
    assert exc.value == UnmatchedLoopStart("mod.test", 1, 1)


def test_out_of_order_pairs():
    program = tokenize("mod.test", b"[[]]][")
    with pytest.raises(UnmatchedLoopEnd) as exc:
        validate_brackets(program)
    assert (exc.value.line, exc.value.column) == (1, 5)


def test_innermost_open_bracket_is_reported():
    program = tokenize("mod.test", b"[\n  [\n    [ ]")
    with pytest.raises(UnmatchedLoopStart) as exc:
        validate_brackets(program)
    assert (exc.value.line, exc.value.column) == (2, 3)


def test_first_stray_close_wins():
    program = tokenize("mod.test", b"+]\n]")
    with pytest.raises(UnmatchedLoopEnd) as exc:
        validate_brackets(program)
    assert (exc.value.line, exc.value.column) == (1, 2)


def test_empty_program_is_valid():
    table = validate_brackets(tokenize("empty", b"no code"))
    assert len(table) == 0
    assert table.pairs() == []


def test_validate_attaches_table_and_is_idempotent():
    program = tokenize("t", b"+[>[-]<-]")
    first = program.validate()

    assert program.jump_table is first
    assert program.is_validated

    again = program.validate()
    assert again == first
    assert again.pairs() == first.pairs()
    assert program.jump_table is first


def test_failed_validation_leaves_program_unvalidated():
    program = tokenize("t", b"[")
    with pytest.raises(UnmatchedLoopStart):
        program.validate()
    assert program.jump_table is None


def test_non_loop_slots_map_to_themselves():
    program = tokenize("t", b"+[-]")
    table = program.validate()

    assert int(table.forward[0]) == 0
    assert int(table.forward[1]) == 3
    assert int(table.backward[3]) == 1
    assert int(table.backward[2]) == 2
