from __future__ import annotations

import numpy as np
import pytest

from telemetry.logger import TelemetryLogger, iter_records


def test_unused_logger_creates_no_file(tmp_path) -> None:
    path = tmp_path / "runs" / "empty.jsonl"
    with TelemetryLogger(str(path)):
        pass
    assert not path.exists()


def test_numpy_values_are_written_as_plain_json(tmp_path) -> None:
    path = tmp_path / "np.jsonl"
    with TelemetryLogger(str(path)) as logger:
        logger.log_step({"x": np.float32(1.5), "ir": np.array([0.25, 1.0])})
        assert logger.records == 1
    assert list(iter_records(str(path))) == [{"x": 1.5, "ir": [0.25, 1.0]}]


def test_truncate_mode_replaces_previous_run(tmp_path) -> None:
    path = str(tmp_path / "run.jsonl")
    for step in (1, 2):
        with TelemetryLogger(path) as logger:
            logger.log_step({"step": step})
    assert [r["step"] for r in iter_records(path)] == [1, 2]

    with TelemetryLogger(path, append=False) as logger:
        logger.log_step({"step": 3})
    assert [r["step"] for r in iter_records(path)] == [3]


def test_logging_after_close_raises(tmp_path) -> None:
    logger = TelemetryLogger(str(tmp_path / "closed.jsonl"))
    logger.close()
    with pytest.raises(ValueError):
        logger.log_step({"step": 1})
