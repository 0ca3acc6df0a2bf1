#!/usr/bin/env python3
"""Run metrics for the changelog CLI, appended to a JSONL file.

Only the CLI records metrics; the formatter and its collaborators never
touch the metrics file. A metrics file that cannot be written is logged
and skipped so it never fails a changelog run.
"""

from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Any, Dict, Optional

from configs.config import Config

logger = logging.getLogger(__name__)

METRICS_FILE = "metrics.log"

# Metric names
PULL_REQUESTS = "changelog.pull_requests"
GENERATED = "changelog.generated"
GENERATION = "changelog.generation"

_MAX_LABEL = 200


def _metrics_file() -> Optional[Path]:
    settings = Config.observability()
    if not settings["metrics_enabled"]:
        return None
    return Path(settings["metrics_root"]) / METRICS_FILE


def _record(metric: str, value: Any, labels: Dict[str, Any]) -> Dict[str, Any]:
    rec: Dict[str, Any] = {"ts": int(time.time()), "metric": metric, "value": value}
    for k, v in labels.items():
        if isinstance(v, str) and len(v) > _MAX_LABEL:
            v = v[:_MAX_LABEL] + "…"
        rec[k] = v
    return rec


def incr(metric: str, value: Any = 1, **labels: Any) -> bool:
    """Append one metric record.

    Args:
        metric: Metric name, one of the constants in this module
        value: Counter increment or measured value
        **labels: Extra fields such as the release version

    Returns:
        True if the record was written, False if metrics are disabled or the
        file could not be written
    """
    path = _metrics_file()
    if path is None:
        return False
    line = json.dumps(_record(metric, value, labels), separators=(",", ":"), ensure_ascii=False) + "\n"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(line)
            f.flush()
            os.fsync(f.fileno())
    except OSError as e:
        logger.warning(f"Skipping metric {metric}: cannot write {path}: {e}")
        return False
    return True


class Timer:
    """Context manager recording ``<metric>.latency_s`` for successful blocks."""

    def __init__(self, metric: str, **labels: Any):
        self.metric = metric
        self.labels = labels
        self.elapsed = 0.0
        self._t0 = 0.0

    def __enter__(self):
        self._t0 = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = time.perf_counter() - self._t0
        if exc_type is None:
            incr(f"{self.metric}.latency_s", value=self.elapsed, **self.labels)
        return False
