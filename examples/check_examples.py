#!/usr/bin/env python3

import os
import subprocess
import sys


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


def _extract_program_output(stdout: str) -> str:
    """Drop the mode banner the CLI prints before running a file."""
    banner = "Brainfuck Interpreter - file execution mode\n"
    if stdout.startswith(banner):
        return stdout[len(banner):]
    return stdout


def _norm(s: str) -> str:
    return s.replace('\r\n', '\n')


def _run_example(path: str, *, input_data: str | None, timeout_s: float = 60.0) -> dict:
    cmd = [sys.executable, "-m", "bfengine", path]
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [os.path.join(ROOT, "src"), env.get("PYTHONPATH")]))
    try:
        p = subprocess.run(
            cmd,
            input=input_data,
            text=True,
            capture_output=True,
            cwd=ROOT,
            env=env,
            timeout=timeout_s,
        )
        return {
            "ok": p.returncode == 0,
            "returncode": p.returncode,
            "stdout": p.stdout,
            "stderr": p.stderr,
            "timeout": False,
        }
    except subprocess.TimeoutExpired as e:
        return {
            "ok": False,
            "returncode": None,
            "stdout": e.stdout or "",
            "stderr": (e.stderr or "") + "\n[TIMEOUT]",
            "timeout": True,
        }


def main() -> int:
    examples = [
        {
            "file": "examples/hello_world.bf",
            "input": None,
            "check": lambda out: out == "Hello World!\n\n",
            "expect": "exactly equals 'Hello World!\\n' plus the closing newline",
        },
        {
            "file": "examples/echo3.bf",
            "input": "abc\n",
            "check": lambda out: out == "$ input queue <- abc\n",
            "expect": "one prompt, then 'abc'",
        },
        {
            "file": "examples/add_digits.bf",
            "input": "34\n",
            "check": lambda out: out.endswith("7\n"),
            "expect": "ends with '7\\n'",
        },
    ]

    print("=== bfengine Examples Verification ===")

    any_fail = False
    for ex in examples:
        r = _run_example(ex["file"], input_data=ex["input"])
        prog_out = _norm(_extract_program_output(r["stdout"]))

        passed = r["ok"] and ex["check"](prog_out)
        status = "PASS" if passed else "FAIL"
        print(f"\n[{status}] {ex['file']}")

        if passed:
            continue

        any_fail = True
        print(f"Expected: {ex['expect']}")
        print(f"Return code: {r['returncode']}  Timeout: {r['timeout']}")
        print("--- program output (extracted) ---")
        print(prog_out)
        print("--- stderr ---")
        print(r["stderr"])

    if any_fail:
        print("\nSome examples FAILED.")
        return 1

    print("\nAll examples passed (output checks).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
