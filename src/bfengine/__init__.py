from .api import CompileOptions, compile_file, compile_string, run_string
from .compiler import compile_source
from .engine import Engine
from .errors import (AwaitingInputError, BFError, BoundsError, CompileError,
                     EmptyInputError, InputError, NonAsciiInputError,
                     ProgramCounterError, UnbalancedBracketsError)
from .ir import (AddValue, ClearCell, Instruction, JumpIfNonZero, JumpIfZero,
                 Program, ReadRequest, ShiftLeft, ShiftRight, SubValue, Write)
from .state import TAPE_CAPACITY, EngineSnapshot, ExecutionMode, StopReason

__all__ = [
    'compile_source',
    'CompileOptions',
    'compile_string',
    'compile_file',
    'run_string',
    'Engine',
    'EngineSnapshot',
    'ExecutionMode',
    'StopReason',
    'TAPE_CAPACITY',
    'Program',
    'Instruction',
    'AddValue',
    'SubValue',
    'ShiftRight',
    'ShiftLeft',
    'JumpIfZero',
    'JumpIfNonZero',
    'Write',
    'ReadRequest',
    'ClearCell',
    'BFError',
    'CompileError',
    'UnbalancedBracketsError',
    'BoundsError',
    'ProgramCounterError',
    'InputError',
    'EmptyInputError',
    'NonAsciiInputError',
    'AwaitingInputError',
]
