#!filepath: demandcv/observability/instrumentation.py
from __future__ import annotations

from dataclasses import dataclass, field
from contextlib import contextmanager
from collections import OrderedDict
from typing import Dict

from demandcv.observability.timer import Timer
from demandcv import logs


@dataclass
class Instrumentation:
    """
    Leaf-only timing for a selection run.

    - record=True  : leaf scope, written to the timeline
    - record=False : parent scope, wall-time boundary only
    """

    enabled: bool = True
    timeline: Dict[str, float] = field(default_factory=OrderedDict)

    def __post_init__(self):
        self._timer = Timer(enabled=self.enabled)

    def timer(self, name: str, *, record: bool = True):
        inst = self

        @contextmanager
        def _ctx():
            if not inst.enabled:
                yield
                return

            inst._timer.start(name)
            try:
                yield
            finally:
                elapsed = inst._timer.end(name)
                if record:
                    inst.timeline[name] = elapsed

        return _ctx()

    def report_timeline(self, run_id: str) -> float:
        logs.info(f"[Timeline] ===== timeline for run {run_id} =====")

        total = 0.0
        for name, sec in self.timeline.items():
            logs.info(f"[Timeline] {str(name):<30} {sec:>8.3f}s")
            total += sec

        logs.info(f"[Timeline] Total{'':<27} {total:>8.3f}s")
        return total


class NoOpInstrumentation:
    """Used when observability is disabled."""

    timeline: Dict[str, float] = {}

    def timer(self, name: str, *, record: bool = True):
        return _NoOpTimer()

    def report_timeline(self, run_id: str) -> float:
        return 0.0


class _NoOpTimer:
    def __enter__(self):
        pass

    def __exit__(self, exc_type, exc, tb):
        pass
