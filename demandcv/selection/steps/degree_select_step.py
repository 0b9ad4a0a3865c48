# demandcv/selection/steps/degree_select_step.py
from __future__ import annotations

from demandcv.pipeline.step import PipelineStep
from demandcv.selection.context import SelectionContext
from demandcv.selection.engines.degree_select_engine import DegreeSelectEngine


class DegreeSelectStep(PipelineStep):
    """
    Contract:
    - consumes ctx.summaries
    - produces ctx.result
    """

    stage = "select"

    def __init__(self, engine: DegreeSelectEngine, inst=None):
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: SelectionContext) -> SelectionContext:
        if ctx.summaries is None:
            raise RuntimeError(f"[{self.step_name}] no summaries in context")

        ctx.result = self.engine.select(ctx.summaries)
        return ctx
