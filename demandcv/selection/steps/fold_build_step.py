# demandcv/selection/steps/fold_build_step.py
from __future__ import annotations

from demandcv import logs
from demandcv.pipeline.step import PipelineStep
from demandcv.selection.context import SelectionContext
from demandcv.selection.engines.fold_build_engine import FoldBuilder


class FoldBuildStep(PipelineStep):
    """
    Contract:
    - consumes ctx.dataset
    - produces ctx.folds
    """

    stage = "folds"

    def __init__(self, builder: FoldBuilder, num_folds: int, inst=None):
        super().__init__(inst)
        self.builder = builder
        self.num_folds = num_folds

    def run(self, ctx: SelectionContext) -> SelectionContext:
        if ctx.dataset is None:
            raise RuntimeError(f"[{self.step_name}] no dataset in context")

        with self.inst.timer(self.step_name):
            ctx.folds = self.builder.build(ctx.dataset, self.num_folds)

        logs.info(f"[{self.step_name}] strategy={self.builder.name} folds={len(ctx.folds)}")
        return ctx
