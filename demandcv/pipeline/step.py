# demandcv/pipeline/step.py
from __future__ import annotations

from typing import Any

from demandcv.observability.instrumentation import (
    Instrumentation,
    NoOpInstrumentation,
)


class PipelineStep:
    """
    Pipeline step base class.

    - orchestration only: engines own the computation
    - instrumentation is optional; step behaviour never depends on it
    """

    stage: str = ""

    def __init__(self, inst: Instrumentation | None = None):
        self.inst: Instrumentation | NoOpInstrumentation = (
            inst if inst is not None else NoOpInstrumentation()
        )

    @property
    def step_name(self) -> str:
        return self.__class__.__name__

    def timed(self):
        """Step-level wall-time boundary (not recorded in the timeline)."""
        return self.inst.timer(self.step_name, record=False)

    def run(self, ctx: Any) -> Any:
        raise NotImplementedError
