"""numba-compiled run loop.

The kernel works on an integer encoding of a Program and only executes the
instructions it can finish without help. It stops *before* a ReadRequest or a
shift that would leave the tape, and the engine runs that instruction through
its interpreted ``step()``, so suspension and error reporting stay in one place.
"""
from __future__ import annotations

from typing import Tuple

import numpy as np
from numba import njit

from .ir import (AddValue, ClearCell, JumpIfNonZero, JumpIfZero, Program,
                 ReadRequest, ShiftLeft, ShiftRight, SubValue, Write)

# Opcodes
OP_ADD = 0
OP_SUB = 1
OP_RIGHT = 2
OP_LEFT = 3
OP_JZ = 4
OP_JNZ = 5
OP_WRITE = 6
OP_READ = 7
OP_CLEAR = 8

# Stop reasons
STOP_END = 0     # counter reached the end of the program
STOP_LIMIT = 1   # max_steps executed
STOP_OUTPUT = 2  # output slab is full, drain and call again
STOP_DEFER = 3   # next instruction must go through Engine.step()

_OPCODES = {
    AddValue: OP_ADD,
    SubValue: OP_SUB,
    ShiftRight: OP_RIGHT,
    ShiftLeft: OP_LEFT,
    JumpIfZero: OP_JZ,
    JumpIfNonZero: OP_JNZ,
    Write: OP_WRITE,
    ReadRequest: OP_READ,
    ClearCell: OP_CLEAR,
}


def encode(program: Program) -> Tuple[np.ndarray, np.ndarray]:
    """Return (opcodes, operands) arrays for the kernel."""
    n = len(program)
    ops = np.empty(n, dtype=np.int64)
    args = np.zeros(n, dtype=np.int64)
    for i, instr in enumerate(program):
        ops[i] = _OPCODES[type(instr)]
        if isinstance(instr, (JumpIfZero, JumpIfNonZero)):
            args[i] = instr.target
        elif isinstance(instr, (AddValue, SubValue, ShiftRight, ShiftLeft)):
            args[i] = instr.count
    return ops, args


@njit(cache=True)
def run_kernel(ops, args, tape, pc, pointer, out, max_steps):
    """
    Execute from ``pc`` until the program ends or a stop condition hits.

    ``max_steps < 0`` means no limit. Returns
    (pc, pointer, out_len, steps, stop_reason).
    """
    capacity = tape.shape[0]
    n = ops.shape[0]
    out_cap = out.shape[0]
    out_len = 0
    steps = 0
    stop = STOP_END

    while pc < n:
        if max_steps >= 0 and steps >= max_steps:
            stop = STOP_LIMIT
            break

        op = ops[pc]
        if op == OP_ADD:
            tape[pointer] = (tape[pointer] + args[pc]) & 255
        elif op == OP_SUB:
            tape[pointer] = (tape[pointer] - args[pc]) & 255
        elif op == OP_RIGHT:
            if pointer + args[pc] >= capacity:
                stop = STOP_DEFER
                break
            pointer += args[pc]
        elif op == OP_LEFT:
            if pointer - args[pc] < 0:
                stop = STOP_DEFER
                break
            pointer -= args[pc]
        elif op == OP_JZ:
            if tape[pointer] == 0:
                pc = args[pc]
        elif op == OP_JNZ:
            if tape[pointer] != 0:
                pc = args[pc]
        elif op == OP_WRITE:
            if out_len == out_cap:
                stop = STOP_OUTPUT
                break
            out[out_len] = tape[pointer]
            out_len += 1
        elif op == OP_CLEAR:
            tape[pointer] = 0
        else:
            # OP_READ
            stop = STOP_DEFER
            break

        pc += 1
        steps += 1

    return pc, pointer, out_len, steps, stop
