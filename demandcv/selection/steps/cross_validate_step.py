# demandcv/selection/steps/cross_validate_step.py
from __future__ import annotations

from typing import Sequence

from demandcv.pipeline.step import PipelineStep
from demandcv.selection.context import SelectionContext
from demandcv.selection.engines.cross_validate_engine import CrossValidateEngine


class CrossValidateStep(PipelineStep):
    """
    Contract:
    - consumes ctx.folds
    - produces ctx.error_matrix / ctx.summaries
    - any evaluation failure propagates (no partial matrix)
    """

    stage = "cross_validate"

    def __init__(self, engine: CrossValidateEngine, degrees: Sequence[int], inst=None):
        super().__init__(inst)
        self.engine = engine
        self.degrees = list(degrees)

    def run(self, ctx: SelectionContext) -> SelectionContext:
        if not ctx.folds:
            raise RuntimeError(f"[{self.step_name}] no folds in context")

        with self.inst.timer(self.step_name):
            matrix = self.engine.error_matrix(ctx.folds, self.degrees)

        ctx.error_matrix = matrix
        ctx.summaries = self.engine.summarize(matrix)
        return ctx
