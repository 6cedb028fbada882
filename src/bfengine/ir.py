"""Compiled instruction set.

Every instruction is a frozen dataclass; a ``Program`` is an immutable tuple of
them whose loop jumps have already been paired by the compiler.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple, Union

from .errors import UnbalancedBracketsError


# ---------------- Instructions ----------------
@dataclass(frozen=True)
class AddValue:
    count: int  # run length of '+'


@dataclass(frozen=True)
class SubValue:
    count: int  # run length of '-'


@dataclass(frozen=True)
class ShiftRight:
    count: int  # run length of '>'


@dataclass(frozen=True)
class ShiftLeft:
    count: int  # run length of '<'


@dataclass(frozen=True)
class JumpIfZero:
    target: int  # index of the matching JumpIfNonZero


@dataclass(frozen=True)
class JumpIfNonZero:
    target: int  # index of the matching JumpIfZero


@dataclass(frozen=True)
class Write:
    pass


@dataclass(frozen=True)
class ReadRequest:
    pass


@dataclass(frozen=True)
class ClearCell:
    pass  # emits "[-]"


Instruction = Union[AddValue, SubValue, ShiftRight, ShiftLeft,
                    JumpIfZero, JumpIfNonZero, Write, ReadRequest, ClearCell]

COUNTED = (AddValue, SubValue, ShiftRight, ShiftLeft)

_SYMBOLS = {
    AddValue: '+',
    SubValue: '-',
    ShiftRight: '>',
    ShiftLeft: '<',
    JumpIfZero: '[',
    JumpIfNonZero: ']',
    Write: '.',
    ReadRequest: ',',
}


def symbol_of(instr: Instruction) -> str:
    """Source symbol an instruction was compiled from ('[-]' for ClearCell)."""
    if isinstance(instr, ClearCell):
        return "[-]"
    return _SYMBOLS[type(instr)]


# ---------------- Program ----------------
class Program:
    """Immutable, jump-resolved instruction sequence.

    Construction checks that every ``JumpIfZero`` and ``JumpIfNonZero`` point at
    each other, so a Program with unpaired loops can never exist.
    """

    __slots__ = ("_instructions", "_contains_read")

    def __init__(self, instructions: Sequence[Instruction] = ()):
        instrs = tuple(instructions)
        _check_pairing(instrs)
        self._instructions: Tuple[Instruction, ...] = instrs
        self._contains_read = any(isinstance(i, ReadRequest) for i in instrs)

    @property
    def instructions(self) -> Tuple[Instruction, ...]:
        return self._instructions

    @property
    def contains_read(self) -> bool:
        return self._contains_read

    def __len__(self) -> int:
        return len(self._instructions)

    def __getitem__(self, index: int) -> Instruction:
        return self._instructions[index]

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self._instructions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Program):
            return NotImplemented
        return self._instructions == other._instructions

    def __hash__(self) -> int:
        return hash(self._instructions)

    def __repr__(self) -> str:
        return f"Program({len(self._instructions)} instructions, contains_read={self._contains_read})"

    def emit(self) -> str:
        """Render back to source text."""
        out: List[str] = []
        for instr in self._instructions:
            if isinstance(instr, COUNTED):
                out.append(symbol_of(instr) * instr.count)
            else:
                out.append(symbol_of(instr))
        return "".join(out)


def _check_pairing(instrs: Tuple[Instruction, ...]) -> None:
    n = len(instrs)
    for i, instr in enumerate(instrs):
        if isinstance(instr, COUNTED) and instr.count < 1:
            raise ValueError(f"Instruction {i} has run length {instr.count}; counts start at 1")
        if isinstance(instr, (JumpIfZero, JumpIfNonZero)):
            j = instr.target
            partner = JumpIfNonZero if isinstance(instr, JumpIfZero) else JumpIfZero
            ok = (0 <= j < n
                  and isinstance(instrs[j], partner)
                  and instrs[j].target == i
                  and ((j > i) == isinstance(instr, JumpIfZero)))
            if not ok:
                raise UnbalancedBracketsError(
                    message=f"CompileError: loop instruction {i} is not paired with a matching loop instruction",
                    line=0,
                    column=i,
                    context="",
                )
