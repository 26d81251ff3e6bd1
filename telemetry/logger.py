from __future__ import annotations

import json
import os
import threading
from typing import Any, Dict, Iterator, List, Optional, TextIO

import numpy as np


def _jsonable(value: Any) -> Any:
    """json.dumps fallback for numpy values that end up in records."""
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


class TelemetryLogger:
    """Append-only JSONL sink for simulation ticks.

    Each record is usually a `Simulation.snapshot()`: step, time and the
    state of every robot. The file is created on the first record, so a run
    that logs nothing leaves nothing behind. With `append=False` an existing
    file is truncated instead of extended.
    """

    def __init__(self, path: str, append: bool = True) -> None:
        self.path = path
        self.mode = "a" if append else "w"
        self.records = 0
        self._lock = threading.Lock()
        self._fp: Optional[TextIO] = None
        self._closed = False

    def __enter__(self) -> "TelemetryLogger":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def log_step(self, record: Dict[str, Any]) -> None:
        """Write one tick record as a single line."""
        line = json.dumps(record, separators=(",", ":"), default=_jsonable)
        with self._lock:
            if self._closed:
                raise ValueError(f"telemetry log {self.path} is closed")
            if self._fp is None:
                os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
                self._fp = open(self.path, self.mode, encoding="utf-8")
            self._fp.write(line + "\n")
            self._fp.flush()
            self.records += 1

    def close(self) -> None:
        with self._lock:
            self._closed = True
            if self._fp is not None:
                self._fp.close()
                self._fp = None


def iter_records(path: str) -> Iterator[Dict[str, Any]]:
    """Yield records from a telemetry file, skipping blank lines."""
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                yield json.loads(line)


def robot_track(path: str, name: str) -> List[Dict[str, Any]]:
    """All logged states of one robot, in tick order."""
    track = []
    for record in iter_records(path):
        for robot in record.get("robots", []):
            if robot.get("name") == name:
                track.append({"time": record.get("time"), **robot})
    return track
