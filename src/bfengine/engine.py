from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Iterable, List, Optional, Union

import numpy as np

from .errors import (AwaitingInputError, EmptyInputError, NonAsciiInputError,
                     ProgramCounterError)
from .ir import (AddValue, ClearCell, JumpIfNonZero, JumpIfZero, Program,
                 ReadRequest, ShiftLeft, ShiftRight, SubValue, Write)
from .jit import STOP_DEFER, STOP_LIMIT, encode, run_kernel
from .state import (TAPE_CAPACITY, DataPointer, EngineSnapshot, ExecutionMode,
                    ProgramCounter, StopReason)

logger = logging.getLogger(__name__)

InputData = Union[bytes, bytearray, str, Iterable[int]]

DEFAULT_OUTPUT_SLAB = 4096


def _as_values(data: InputData) -> List[int]:
    if isinstance(data, str):
        return [ord(ch) for ch in data]
    return [int(v) for v in data]


class Engine:
    """Stepwise executor for a compiled Program.

    The engine never blocks and never does I/O. A ReadRequest only switches the
    mode to AWAITING_INPUT; the caller then feeds a byte with
    ``supply_input()`` whenever it has one, and keeps stepping.
    """

    def __init__(self, program: Program, *, capacity: int = TAPE_CAPACITY, jit: bool = True,
                 output_slab: int = DEFAULT_OUTPUT_SLAB):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        if output_slab < 1:
            raise ValueError("output_slab must be at least 1")
        self.capacity = capacity
        self.jit = jit
        self.tape = np.zeros(capacity, dtype=np.uint8)
        self._slab = np.zeros(output_slab, dtype=np.uint8)
        self._pointer = DataPointer(capacity)
        self._counter = ProgramCounter(0)
        self._output = bytearray()
        self._input: Deque[int] = deque()
        self._mode = ExecutionMode.RUNNING
        self.steps = 0
        self.load(program)

    def load(self, program: Program) -> None:
        """Re-initialise in place with a new program, reusing the tape."""
        self.program = program
        self.tape.fill(0)
        self._pointer.reset()
        self._counter.reset(length=len(program))
        self._output.clear()
        self._input.clear()
        self._mode = ExecutionMode.RUNNING
        self.steps = 0
        self._ops, self._args = encode(program)
        logger.debug("loaded %r (jit=%s)", program, self.jit)

    def reset(self) -> None:
        self.load(self.program)

    # ---------------- Queries ----------------
    @property
    def mode(self) -> ExecutionMode:
        return self._mode

    @property
    def awaiting_input(self) -> bool:
        return self._mode is ExecutionMode.AWAITING_INPUT

    @property
    def is_complete(self) -> bool:
        return self._counter.at_end

    @property
    def contains_read(self) -> bool:
        return self.program.contains_read

    @property
    def pending_input(self) -> int:
        return len(self._input)

    @property
    def pointer(self) -> int:
        return self._pointer.index

    @property
    def counter(self) -> int:
        return self._counter.index

    @property
    def current_cell(self) -> int:
        return int(self.tape[self._pointer.index])

    def snapshot(self) -> EngineSnapshot:
        return EngineSnapshot(
            counter=self._counter.index,
            pointer=self._pointer.index,
            cell=self.current_cell,
            mode=self._mode,
            steps=self.steps,
            pending_input=len(self._input),
        )

    def tape_window(self, start: int, stop: int) -> bytes:
        start = max(0, start)
        stop = min(self.capacity, stop)
        return self.tape[start:stop].tobytes()

    def drain_output(self) -> bytes:
        """Return everything written since the last drain and clear it."""
        out = bytes(self._output)
        self._output.clear()
        return out

    # ---------------- Execution ----------------
    def step(self) -> None:
        """Execute the instruction at the program counter.

        Raises AwaitingInputError while suspended, ProgramCounterError once the
        program is complete, and BoundsError for a shift off the tape. A failed
        step changes nothing.
        """
        if self._mode is ExecutionMode.AWAITING_INPUT:
            raise AwaitingInputError(message="Execution is suspended until input is supplied.")
        if self._counter.at_end:
            raise ProgramCounterError(
                message="Program has already reached its end.",
                counter=self._counter.index,
                length=self._counter.length,
            )

        instr = self.program[self._counter.index]
        p = self._pointer.index

        if isinstance(instr, AddValue):
            self.tape[p] = (int(self.tape[p]) + instr.count) & 0xFF
        elif isinstance(instr, SubValue):
            self.tape[p] = (int(self.tape[p]) - instr.count) & 0xFF
        elif isinstance(instr, ShiftRight):
            self._pointer.shift(instr.count)
        elif isinstance(instr, ShiftLeft):
            self._pointer.shift(-instr.count)
        elif isinstance(instr, Write):
            self._output.append(int(self.tape[p]))
        elif isinstance(instr, ClearCell):
            self.tape[p] = 0
        elif isinstance(instr, ReadRequest):
            self._mode = ExecutionMode.AWAITING_INPUT
            logger.debug("suspended for input at instruction %d", self._counter.index)
        elif isinstance(instr, JumpIfZero):
            if self.tape[p] == 0:
                self._counter.jump(instr.target)
        elif isinstance(instr, JumpIfNonZero):
            if self.tape[p] != 0:
                self._counter.jump(instr.target)
        else:
            raise AssertionError(f"Unknown instruction {instr!r}")

        self._counter.advance()
        self.steps += 1

    def supply_input(self, data: InputData) -> None:
        """Feed input.

        While suspended, the head of the staging queue is consumed into the
        current cell and execution resumes. While running, ``data`` is only
        queued for a later read.
        """
        values = _as_values(data)
        if self._mode is ExecutionMode.RUNNING:
            self._input.extend(values)
            return

        if not values and not self._input:
            raise EmptyInputError(message="Input is empty and no queued input remains.")
        self._input.extend(values)
        value = self._input.popleft()
        if not 0 <= value <= 127:
            raise NonAsciiInputError(message=f"Input contains non-ASCII code {value}.", value=value)
        self.tape[self._pointer.index] = value
        self._mode = ExecutionMode.RUNNING

    def run(self, max_steps: Optional[int] = None) -> StopReason:
        """Step until the program ends, suspends for input, or max_steps run out.

        Errors raised by a step propagate to the caller with the engine left
        at the failing instruction.
        """
        if max_steps is not None and max_steps < 0:
            raise ValueError("max_steps must be non-negative")
        if self._mode is ExecutionMode.AWAITING_INPUT:
            return StopReason.AWAITING_INPUT
        if self.jit:
            return self._run_jit(max_steps)
        return self._run_interpreted(max_steps)

    def _run_interpreted(self, max_steps: Optional[int]) -> StopReason:
        executed = 0
        if not self.program.contains_read:
            # cannot suspend: no mode check per iteration
            while not self._counter.at_end:
                if max_steps is not None and executed >= max_steps:
                    return StopReason.STEP_LIMIT
                self.step()
                executed += 1
            return StopReason.COMPLETE

        while not self._counter.at_end:
            if max_steps is not None and executed >= max_steps:
                return StopReason.STEP_LIMIT
            self.step()
            executed += 1
            if self._mode is ExecutionMode.AWAITING_INPUT:
                return StopReason.AWAITING_INPUT
        return StopReason.COMPLETE

    def _run_jit(self, max_steps: Optional[int]) -> StopReason:
        executed = 0
        while not self._counter.at_end:
            remaining = -1 if max_steps is None else max_steps - executed
            if remaining == 0:
                return StopReason.STEP_LIMIT

            pc, pointer, out_len, steps, stop = run_kernel(
                self._ops, self._args, self.tape,
                self._counter.index, self._pointer.index,
                self._slab, remaining,
            )
            self._counter.index = int(pc)
            self._pointer.index = int(pointer)
            self.steps += int(steps)
            executed += int(steps)
            if out_len:
                self._output += self._slab[:out_len].tobytes()
            logger.debug("jit slice: %d steps, stop=%d, pc=%d", steps, stop, pc)

            if stop == STOP_LIMIT:
                return StopReason.STEP_LIMIT
            if stop == STOP_DEFER:
                self.step()
                executed += 1
                if self._mode is ExecutionMode.AWAITING_INPUT:
                    return StopReason.AWAITING_INPUT
        return StopReason.COMPLETE
