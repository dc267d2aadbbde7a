from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import List, Optional

from .evaluator import Interpreter
from .types import NiklasRuntimeError, VarType
from .utils import debug_py_trace_enabled, env_delay

USAGE = "usage: niklas [--delay MS] [--repl] [FILE | - | SOURCE]"

def make_interpreter(delay: Optional[int] = None) -> Interpreter:
    """Interpreter with `delay` preset from the argument or NIKLAS_DELAY."""
    interp = Interpreter()

    if delay is None:
        delay = env_delay()

    if delay is not None:
        interp.add_variable(False, "delay", VarType.NUMBER, delay)

    return interp

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.is_file():
        return candidate.read_text(encoding="utf-8")

    return arg

def _parse_delay(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise SystemExit(f"--delay expects an integer number of milliseconds, got {raw!r}") from None

def report_error(exc: BaseException, prefix: str) -> None:
    print(f"{prefix}{exc}", file=sys.stderr)

    if debug_py_trace_enabled():
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")

def main(argv: Optional[List[str]] = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    delay: Optional[int] = None
    want_repl = False
    arg = None
    it = iter(args)

    for token in it:
        if token in ("-h", "--help"):
            print(USAGE)
            return

        if token == "--repl":
            want_repl = True
            continue

        if token.startswith("--delay="):
            delay = _parse_delay(token.split("=", 1)[1])
            continue

        if token == "--delay":
            try:
                delay = _parse_delay(next(it))
            except StopIteration:
                raise SystemExit("--delay flag requires a value") from None
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}\n{USAGE}")

    if want_repl or (arg is None and sys.stdin.isatty()):
        from .repl import repl  # prompt_toolkit is only needed interactively

        repl(delay=delay)
        return

    source = _load_source(arg)
    interp = make_interpreter(delay)

    try:
        interp.run(source)
    except NiklasRuntimeError as exc:
        report_error(exc, "niklas failed with errors: ")
        raise SystemExit(1) from None

if __name__ == "__main__":
    main()
