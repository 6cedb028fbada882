from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


def _build_context(lines: List[str], line_no_1: int, *, context: int = 2) -> str:
    if not lines:
        return ""
    idx = min(max(1, line_no_1), len(lines))
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
    return "\n".join(out)


def _hint_for(message: str) -> Optional[str]:
    msg = message.lower()
    if "unmatched '['" in msg:
        return 'Every "[" needs a "]" later in the source. Check for a missing "]" or a stray "[" in a comment.'
    if "unmatched ']'" in msg:
        return 'This "]" closes no loop. Check for a missing "[" or a stray "]" in a comment.'
    return None


@dataclass
class BFError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class CompileError(BFError):
    line: int
    column: int
    context: str


@dataclass
class UnbalancedBracketsError(CompileError):
    pass


@dataclass
class BoundsError(BFError):
    pointer: int
    offset: int
    capacity: int


@dataclass
class ProgramCounterError(BFError):
    counter: int
    length: int


@dataclass
class InputError(BFError):
    pass


@dataclass
class EmptyInputError(InputError):
    pass


@dataclass
class NonAsciiInputError(InputError):
    value: int


@dataclass
class AwaitingInputError(BFError):
    pass


def make_unbalanced_error(*, message: str, source: str, line: int, column: int) -> UnbalancedBracketsError:
    lines = source.split('\n')
    ctx = _build_context(lines, line)
    hint = _hint_for(message)
    hint_block = f"\nHint: {hint}" if hint else ""
    return UnbalancedBracketsError(
        message=f"CompileError: {message} (line {line}, column {column})\n{ctx}{hint_block}",
        line=line,
        column=column,
        context=ctx,
    )


def make_bounds_error(*, pointer: int, offset: int, capacity: int) -> BoundsError:
    if offset > 0:
        message = (f"Pointer shift by {offset} from cell {pointer} runs past the last cell "
                   f"of memory ({capacity - 1}).")
    else:
        message = f"Pointer shift by {offset} from cell {pointer} runs before the first cell of memory."
    return BoundsError(message=message, pointer=pointer, offset=offset, capacity=capacity)
