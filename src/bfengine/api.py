from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .compiler import compile_source
from .engine import Engine
from .errors import EmptyInputError
from .ir import Program
from .state import StopReason


@dataclass(frozen=True)
class CompileOptions:
    optimize_level: Optional[int] = None


def compile_string(source: str, *, options: Optional[CompileOptions] = None) -> Program:
    opt_level = None if options is None else options.optimize_level
    return compile_source(source, optimize_level=opt_level)


def compile_file(path: str | Path, *, options: Optional[CompileOptions] = None, encoding: str = "utf-8") -> Program:
    p = Path(path)
    return compile_string(p.read_text(encoding=encoding), options=options)


def run_string(source: str, input_data: str = "", *, options: Optional[CompileOptions] = None,
               jit: bool = True) -> str:
    """Compile and run to completion, feeding ``input_data`` to the reads.

    Raises EmptyInputError if the program reads more than ``input_data`` holds.
    """
    engine = Engine(compile_string(source, options=options), jit=jit)
    engine.supply_input(input_data)
    while engine.run() is StopReason.AWAITING_INPUT:
        if not engine.pending_input:
            raise EmptyInputError(message="Program asked for more input than was provided.")
        engine.supply_input(b"")
    return engine.drain_output().decode("latin-1")
