#!/usr/bin/env python3
"""
Compiler tests: filtering, run-length folding, the [-] rewrite and loop pairing.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from bfengine import (AddValue, BFError, ClearCell, CompileError, JumpIfNonZero,
                      JumpIfZero, Program, ReadRequest, ShiftLeft, ShiftRight,
                      SubValue, UnbalancedBracketsError, Write, compile_source)
from bfengine.api import CompileOptions, compile_file, compile_string
from bfengine.compiler import fold, rewrite_clear_loops
from bfengine.lexer import strip_comments, tokenize


def instrs(source, **kwargs):
    return list(compile_source(source, **kwargs))


def assert_pairing(program):
    for i, instr in enumerate(program):
        if isinstance(instr, JumpIfZero):
            partner = program[instr.target]
            assert isinstance(partner, JumpIfNonZero)
            assert partner.target == i
            assert instr.target > i
        elif isinstance(instr, JumpIfNonZero):
            partner = program[instr.target]
            assert isinstance(partner, JumpIfZero)
            assert partner.target == i


def test_comments_are_dropped_before_folding():
    assert strip_comments("a+b-c[d]e") == "+-[]"
    assert instrs("++ two more ++") == [AddValue(4)]
    assert instrs("hello + world -") == [AddValue(1), SubValue(1)]


def test_tokens_remember_line_and_column():
    tokens = tokenize("x+\n  >")
    assert [(t.symbol, t.line, t.column) for t in tokens] == [('+', 1, 2), ('>', 2, 3)]


def test_runs_fold_into_counted_instructions():
    assert instrs("+++>>--<<<") == [AddValue(3), ShiftRight(2), SubValue(2), ShiftLeft(3)]


def test_io_is_never_folded():
    assert instrs("..,,") == [Write(), Write(), ReadRequest(), ReadRequest()]


def test_long_run_fits_one_instruction():
    assert instrs("+" * 100_000) == [AddValue(100_000)]
    assert instrs(">" * 29_999) == [ShiftRight(29_999)]


def test_clear_loop_is_rewritten():
    assert instrs("+[-]") == [AddValue(1), ClearCell()]
    assert instrs("[[-]]") == [JumpIfZero(2), ClearCell(), JumpIfNonZero(0)]
    assert instrs("[-][-]") == [ClearCell(), ClearCell()]


@pytest.mark.parametrize("source", ["[--]", "[+]", "[-<]", "[->+<]"])
def test_other_zeroing_shapes_are_left_alone(source):
    program = compile_source(source)
    assert ClearCell() not in program.instructions
    assert isinstance(program[0], JumpIfZero)


def test_clear_rewrite_inside_larger_loop():
    ops = rewrite_clear_loops(fold(tokenize("[[-]-]")))
    assert [op.symbol for op in ops] == ['[', 'C', '-', ']']


def test_literal_level_keeps_every_symbol():
    assert instrs("++[-]", optimize_level=0) == [
        AddValue(1), AddValue(1), JumpIfZero(4), SubValue(1), JumpIfNonZero(2),
    ]


def test_fold_level_skips_clear_rewrite():
    assert instrs("++[-]", optimize_level=1) == [AddValue(2), JumpIfZero(3), SubValue(1), JumpIfNonZero(1)]


def test_out_of_range_levels_are_clamped():
    assert instrs("++", optimize_level=-3) == [AddValue(1), AddValue(1)]
    assert instrs("[-]", optimize_level=9) == [ClearCell()]


@pytest.mark.parametrize("source", [
    "[",
    "]",
    "][",
    "[[]",
    "[]]",
    "+[[>]<",
    "[[[[]]]",
    "[[[]]]]",
    "+[>[<-]",
])
def test_unbalanced_brackets_fail(source):
    with pytest.raises(UnbalancedBracketsError):
        compile_source(source)


def test_unbalanced_error_points_at_bracket():
    with pytest.raises(UnbalancedBracketsError) as excinfo:
        compile_source("+\n +[\n.")
    err = excinfo.value
    assert isinstance(err, CompileError)
    assert isinstance(err, BFError)
    assert (err.line, err.column) == (2, 3)
    assert "Unmatched '['" in str(err)
    assert ">    2 |  +[" in err.context
    assert "Hint:" in str(err)


def test_stray_close_is_reported():
    with pytest.raises(UnbalancedBracketsError) as excinfo:
        compile_source("+]")
    assert "Unmatched ']'" in str(excinfo.value)
    assert excinfo.value.column == 2


@pytest.mark.parametrize("source", [
    "[]",
    "+[>+<-]",
    "[[[]]][][[]]",
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]>>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++.",
])
@pytest.mark.parametrize("level", [0, 1, 2])
def test_pairing_is_symmetric(source, level):
    assert_pairing(compile_source(source, optimize_level=level))


def test_program_rejects_unpaired_jumps():
    with pytest.raises(UnbalancedBracketsError):
        Program([JumpIfZero(5)])
    with pytest.raises(UnbalancedBracketsError):
        Program([JumpIfZero(1), JumpIfZero(0)])
    with pytest.raises(UnbalancedBracketsError):
        Program([JumpIfNonZero(1), JumpIfZero(0)])
    with pytest.raises(ValueError):
        Program([AddValue(0)])


def test_program_is_immutable_sequence():
    program = compile_source("+>.")
    assert len(program) == 3
    assert program.instructions == (AddValue(1), ShiftRight(1), Write())
    with pytest.raises(AttributeError):
        program.instructions = ()
    with pytest.raises(TypeError):
        program.instructions[0] = Write()
    assert program == compile_source("+ > .")


def test_contains_read():
    assert compile_source("+,.").contains_read
    assert not compile_source("+.").contains_read
    assert not compile_source("").contains_read


def test_emit_renders_source():
    assert compile_source("a+++[-]>>.,").emit() == "+++[-]>>.,"
    assert compile_source("[->+<]").emit() == "[->+<]"


def test_api_compile_helpers(tmp_path):
    path = tmp_path / "clear.bf"
    path.write_text("clear it: [-]\n", encoding="utf-8")
    assert list(compile_file(path)) == [ClearCell()]
    literal = compile_string("[-]", options=CompileOptions(optimize_level=0))
    assert len(literal) == 3
