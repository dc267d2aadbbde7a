"""Interactive REPL for Niklas, powered by prompt_toolkit."""

from __future__ import annotations

import re
import sys
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .evaluator import Interpreter
from .lexer import LexError, tokenize
from .repl_highlight import NiklasLexer
from .runner import make_interpreter, report_error
from .token_types import TT
from .types import NiklasRuntimeError
from .utils import debug_py_trace_enabled, set_debug_py_trace

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the REPL environment", ""),
}

_DEPTH = {
    TT.LPAR: 1,
    TT.LBRACE: 1,
    TT.COMMENT_OPEN: 1,
    TT.RPAR: -1,
    TT.RBRACE: -1,
    TT.COMMENT_CLOSE: -1,
}


def is_complete(text: str) -> bool:
    """
    True when *text* can be submitted: every brace, parenthesis and block
    comment opened is closed. Lex errors count as complete so the error is
    reported instead of waiting for more input.
    """
    try:
        tokens = tokenize(text)
    except LexError:
        return True

    depth = 0
    for tok in tokens:
        depth += _DEPTH.get(tok.type, 0)

    return depth <= 0


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def _handle_slash(line: str, interp_box: list[Interpreter], delay: Optional[int]) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            set_debug_py_trace(True)
        elif arg.lower() in ("off", "0", "false", "no"):
            set_debug_py_trace(False)
        elif arg == "":
            set_debug_py_trace(not debug_py_trace_enabled())
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state}")
        return True

    if cmd == "/reset":
        interp_box[0] = make_interpreter(delay)
        print("Environment reset.")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def _compute_indent(text: str) -> str:
    """Indent the next line one level deeper per unclosed brace."""
    try:
        tokens = tokenize(text)
    except LexError:
        return ""

    depth = 0
    for tok in tokens:
        if tok.type == TT.LBRACE:
            depth += 1
        elif tok.type == TT.RBRACE:
            depth = max(depth - 1, 0)

    return " " * (4 * depth)


def eval_input(text: str, interp: Interpreter) -> None:
    """Run one submission and echo a bare-expression result."""
    try:
        result = interp.run(text)
    except NiklasRuntimeError as exc:
        report_error(exc, "Error: ")
        return

    if result is not None:
        print(result)


def repl(delay: Optional[int] = None) -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    # Use a mutable box so /reset can swap the interpreter.
    interp_box: list[Interpreter] = [make_interpreter(delay)]

    history = InMemoryHistory()
    lexer = NiklasLexer()

    bindings = KeyBindings()

    @bindings.add("backspace")
    def _backspace(event):
        buf = event.app.current_buffer
        buf.delete_before_cursor(1)
        if buf.text.startswith("/"):
            buf.start_completion()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer
        text = buf.text

        if text.lstrip().startswith("/") or is_complete(text):
            buf.validate_and_handle()
            return

        buf.insert_text("\n" + _compute_indent(text))

    session: PromptSession[str] = PromptSession(
        history=history,
        lexer=lexer,
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("niklas repl, Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt(">>> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if _handle_slash(text, interp_box, delay):
            continue

        eval_input(text, interp_box[0])
        sys.stdout.flush()
