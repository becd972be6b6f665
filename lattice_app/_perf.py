# lattice_app/_perf.py
"""
Timing and outcome tallies for batch runs.

`timed` brackets a step with <name>.start / <name>.end records: both go to
the optional PerfLog as JSON lines, the end record also to the logger at
DEBUG with the elapsed milliseconds.
"""

from __future__ import annotations

import json
import os
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional


def _now_ms() -> float:
    return time.perf_counter() * 1000.0


@dataclass
class PerfLog:
    """Append-only JSONL file of timing events."""

    path: str

    def event(self, name: str, **fields: Any) -> None:
        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        record = {"event": name, "t_ms": int(_now_ms()), **fields}
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")


@contextmanager
def timed(logger, name: str, *, perf: Optional[PerfLog] = None, **fields: Any) -> Iterator[None]:
    t0 = _now_ms()
    if perf is not None:
        perf.event(f"{name}.start", **fields)
    try:
        yield
    finally:
        dt_ms = int(_now_ms() - t0)
        if perf is not None:
            perf.event(f"{name}.end", dt_ms=dt_ms, **fields)
        ctx = " ".join(f"{k}={fields[k]}" for k in sorted(fields))
        logger.debug("%s %s dt_ms=%d", name, ctx, dt_ms)


class RunStats:
    """Lattices processed in one driver run, failures keyed by error type."""

    def __init__(self) -> None:
        self.ok = 0
        self.failures: Dict[str, int] = {}

    def record_ok(self) -> None:
        self.ok += 1

    def record_failure(self, exc: BaseException) -> None:
        key = type(exc).__name__
        self.failures[key] = self.failures.get(key, 0) + 1

    @property
    def failed(self) -> int:
        return sum(self.failures.values())

    def summary(self) -> str:
        s = f"ok={self.ok} failed={self.failed}"
        if self.failures:
            s += " (" + ", ".join(f"{k}={v}" for k, v in sorted(self.failures.items())) + ")"
        return s
