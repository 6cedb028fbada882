"""Source text -> Program.

The pipeline is filter, run-length fold, clear-loop peephole, bracket pairing.
Each stage is a plain function over a list of ``_Op`` so the stages can be
tested in isolation.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from .errors import make_unbalanced_error
from .ir import (AddValue, ClearCell, Instruction, JumpIfNonZero, JumpIfZero,
                 Program, ReadRequest, ShiftLeft, ShiftRight, SubValue, Write)
from .lexer import Token, tokenize

logger = logging.getLogger(__name__)

MAX_OPTIMIZE_LEVEL = 2
FOLDABLE = frozenset("+-<>")
CLEAR = "C"

_COUNTED = {
    '+': AddValue,
    '-': SubValue,
    '>': ShiftRight,
    '<': ShiftLeft,
}

_SINGLE = {
    '.': Write,
    ',': ReadRequest,
    CLEAR: ClearCell,
}


@dataclass(frozen=True)
class _Op:
    symbol: str   # one of the 8 symbols, or CLEAR
    count: int
    token: Token  # first source token of the op


def lower(tokens: List[Token]) -> List[_Op]:
    """One op per token, no folding."""
    return [_Op(t.symbol, 1, t) for t in tokens]


def fold(tokens: List[Token]) -> List[_Op]:
    """Merge runs of identical +, -, > and < into counted ops."""
    out: List[_Op] = []
    i = 0
    while i < len(tokens):
        t = tokens[i]
        if t.symbol in FOLDABLE:
            j = i
            while j < len(tokens) and tokens[j].symbol == t.symbol:
                j += 1
            out.append(_Op(t.symbol, j - i, t))
            i = j
            continue
        out.append(_Op(t.symbol, 1, t))
        i += 1
    return out


def _is_clear_loop(a: _Op, b: _Op, c: _Op) -> bool:
    return a.symbol == '[' and b.symbol == '-' and b.count == 1 and c.symbol == ']'


def rewrite_clear_loops(ops: List[_Op]) -> List[_Op]:
    """Replace each exact ``[`` ``-1`` ``]`` window with a single clear op."""
    out: List[_Op] = []
    i = 0
    while i < len(ops):
        if i + 2 < len(ops) and _is_clear_loop(ops[i], ops[i + 1], ops[i + 2]):
            out.append(_Op(CLEAR, 1, ops[i].token))
            i += 3
            continue
        out.append(ops[i])
        i += 1
    return out


def resolve_jumps(ops: List[_Op], source: str) -> List[Instruction]:
    """Pair loop brackets and build the final instruction list."""
    targets: List[Optional[int]] = [None] * len(ops)
    stack: List[int] = []
    for i, op in enumerate(ops):
        if op.symbol == '[':
            stack.append(i)
        elif op.symbol == ']':
            if not stack:
                raise make_unbalanced_error(
                    message="Unmatched ']'",
                    source=source,
                    line=op.token.line,
                    column=op.token.column,
                )
            start = stack.pop()
            targets[start] = i
            targets[i] = start

    if stack:
        # the earliest open bracket is the first one a forward scan fails to close
        t = ops[stack[0]].token
        raise make_unbalanced_error(
            message="Unmatched '['",
            source=source,
            line=t.line,
            column=t.column,
        )

    instrs: List[Instruction] = []
    for i, op in enumerate(ops):
        if op.symbol in _COUNTED:
            instrs.append(_COUNTED[op.symbol](op.count))
        elif op.symbol == '[':
            instrs.append(JumpIfZero(targets[i]))
        elif op.symbol == ']':
            instrs.append(JumpIfNonZero(targets[i]))
        else:
            instrs.append(_SINGLE[op.symbol]())
    return instrs


def compile_source(source: str, *, optimize_level: Optional[int] = None) -> Program:
    """Compile source text into a Program.

    optimize_level:
      0: one instruction per symbol
      1: run-length folding
      2: folding + clear-loop rewrite (default)

    Raises UnbalancedBracketsError when the loops do not pair up.
    """
    level = MAX_OPTIMIZE_LEVEL if optimize_level is None else int(optimize_level)
    level = max(0, min(MAX_OPTIMIZE_LEVEL, level))

    tokens = tokenize(source)
    ops = fold(tokens) if level >= 1 else lower(tokens)
    if level >= 2:
        ops = rewrite_clear_loops(ops)

    program = Program(resolve_jumps(ops, source))
    logger.debug("compiled %d symbols into %d instructions (level %d, contains_read=%s)",
                 len(tokens), len(program), level, program.contains_read)
    return program
