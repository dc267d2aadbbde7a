from __future__ import annotations

import os
from typing import Optional

PY_TRACE_ENV = "NIKLAS_DEBUG_PY_TRACE"
DELAY_ENV = "NIKLAS_DELAY"

def debug_py_trace_enabled() -> bool:
    """True when NIKLAS_DEBUG_PY_TRACE asks for Python tracebacks on errors."""
    return os.environ.get(PY_TRACE_ENV, "").lower() in ("1", "true", "yes", "on")

def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        os.environ[PY_TRACE_ENV] = "1"
    else:
        os.environ.pop(PY_TRACE_ENV, None)

def env_delay() -> Optional[int]:
    raw = os.environ.get(DELAY_ENV)

    if raw is None or not raw.strip():
        return None

    try:
        return int(raw)
    except ValueError:
        raise SystemExit(f"{DELAY_ENV} must be an integer number of milliseconds, got {raw!r}") from None
