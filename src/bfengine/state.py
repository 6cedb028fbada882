from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import ProgramCounterError, make_bounds_error

TAPE_CAPACITY = 30_000


class ExecutionMode(Enum):
    RUNNING = "running"
    AWAITING_INPUT = "awaiting_input"


class StopReason(Enum):
    COMPLETE = "complete"
    AWAITING_INPUT = "awaiting_input"
    STEP_LIMIT = "step_limit"


@dataclass
class DataPointer:
    capacity: int = TAPE_CAPACITY
    index: int = 0

    def shift(self, offset: int) -> None:
        """Move by the whole offset, or raise BoundsError and stay put."""
        new = self.index + offset
        if not 0 <= new < self.capacity:
            raise make_bounds_error(pointer=self.index, offset=offset, capacity=self.capacity)
        self.index = new

    def reset(self) -> None:
        self.index = 0


@dataclass
class ProgramCounter:
    length: int
    index: int = 0

    @property
    def at_end(self) -> bool:
        return self.index == self.length

    def advance(self) -> None:
        if self.index >= self.length:
            raise ProgramCounterError(
                message=f"Counter {self.index} is past the end of the program ({self.length} instructions).",
                counter=self.index,
                length=self.length,
            )
        self.index += 1

    def jump(self, target: int) -> None:
        if not 0 <= target < self.length:
            raise ProgramCounterError(
                message=f"Jump target {target} is outside the program ({self.length} instructions).",
                counter=target,
                length=self.length,
            )
        self.index = target

    def reset(self, *, length: int) -> None:
        self.length = length
        self.index = 0


@dataclass(frozen=True)
class EngineSnapshot:
    counter: int
    pointer: int
    cell: int
    mode: ExecutionMode
    steps: int
    pending_input: int
