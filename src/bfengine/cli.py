"""Console driver: interactive line mode and file execution mode."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from .compiler import MAX_OPTIMIZE_LEVEL, compile_source
from .engine import Engine
from .errors import BFError
from .ir import Program


def print_description(out: TextIO) -> None:
    out.write("Brainfuck Interpreter - interactive mode\n")
    out.write("    Usage: Input a brainfuck code, then press 'Enter'.\n")
    out.write("           For terminating this interpreter, input 'q'\n")
    out.write("           then press 'Enter'.\n")


def print_description_at_file(out: TextIO) -> None:
    out.write("Brainfuck Interpreter - file execution mode\n")


def execute(program: Program, *, stdin: TextIO, stdout: TextIO, jit: bool = True) -> bool:
    """Run a program to completion, prompting on stdin whenever it needs input.

    Returns False if the run stopped on an error.
    """
    engine = Engine(program, jit=jit)
    while True:
        if not engine.awaiting_input:
            if engine.is_complete:
                stdout.write(engine.drain_output().decode("latin-1") + "\n")
                return True
            try:
                engine.run()
            except BFError as e:
                stdout.write(f"error: {e}\n")
                return False
            continue

        data = ""
        # only prompt once the queued input is used up
        if engine.pending_input == 0:
            result = engine.drain_output()
            if result:
                stdout.write(result.decode("latin-1") + "\n")
            stdout.write("$ input queue <- ")
            stdout.flush()
            line = stdin.readline()
            if not line:
                stdout.write("error: input closed while the program was waiting for input\n")
                return False
            data = line.strip()
        try:
            engine.supply_input(data)
        except BFError as e:
            stdout.write(f"error: {e}\n")
            return False


def exec_loop(*, stdin: TextIO, stdout: TextIO, optimize_level: Optional[int] = None,
              jit: bool = True, emit: bool = False) -> int:
    while True:
        stdout.write("$ input : ")
        stdout.flush()
        line = stdin.readline()
        if not line:
            stdout.write("\n")
            return 0
        if line.strip() == "q":
            stdout.write("See you!\n")
            return 0
        try:
            program = compile_source(line, optimize_level=optimize_level)
        except BFError as e:
            stdout.write(f"error: {e}\n")
            continue
        if emit:
            stdout.write(program.emit() + "\n")
            continue
        execute(program, stdin=stdin, stdout=stdout, jit=jit)


def file_exec(path: str, *, stdin: TextIO, stdout: TextIO, optimize_level: Optional[int] = None,
              jit: bool = True, emit: bool = False) -> int:
    try:
        source = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        stdout.write(f"error: {e}\n")
        return 1
    if not source:
        stdout.write("This file is empty.\n")
        return 0
    try:
        program = compile_source(source, optimize_level=optimize_level)
    except BFError as e:
        stdout.write(f"error: {e}\n")
        return 1
    if emit:
        stdout.write(program.emit() + "\n")
        return 0
    return 0 if execute(program, stdin=stdin, stdout=stdout, jit=jit) else 1


def main(argv: Optional[List[str]] = None, *, stdin: Optional[TextIO] = None,
         stdout: Optional[TextIO] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Brainfuck interpreter (interactive without FILE, file execution with FILE)."
    )
    parser.add_argument("file", nargs="?", help="source file to execute")
    parser.add_argument("-O", "--optimize-level", type=int, default=MAX_OPTIMIZE_LEVEL,
                        help=f"0..{MAX_OPTIMIZE_LEVEL} (0 = literal, 1 = fold runs, 2 = also rewrite [-])")
    parser.add_argument("--no-jit", action="store_true", help="Run with the interpreted loop only")
    parser.add_argument("--emit", action="store_true", help="Print the compiled program as source instead of running it")
    parser.add_argument("--debug", action="store_true", help="Log engine activity to stderr")
    args = parser.parse_args(argv)

    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)5s %(name)s: %(message)s")

    opts = dict(optimize_level=args.optimize_level, jit=not args.no_jit, emit=args.emit)
    if args.file is None:
        print_description(stdout)
        return exec_loop(stdin=stdin, stdout=stdout, **opts)
    print_description_at_file(stdout)
    return file_exec(args.file, stdin=stdin, stdout=stdout, **opts)


if __name__ == "__main__":
    raise SystemExit(main())
