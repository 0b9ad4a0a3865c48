# demandcv/selection/steps/dataset_build_step.py
from __future__ import annotations

from demandcv import logs
from demandcv.data.dataset_build_engine import DatasetBuildEngine
from demandcv.pipeline.step import PipelineStep
from demandcv.selection.context import SelectionContext


class DatasetBuildStep(PipelineStep):
    """
    Contract:
    - consumes ctx.table if already attached, otherwise reads cfg.data.path
    - produces ctx.dataset
    """

    stage = "dataset"

    def __init__(self, engine: DatasetBuildEngine, inst=None):
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: SelectionContext) -> SelectionContext:
        with self.timed():
            if ctx.table is None:
                with self.inst.timer("DatasetBuildStep.load"):
                    ctx.table = self.engine.load()

            with self.inst.timer("DatasetBuildStep.build"):
                ctx.dataset = self.engine.build(ctx.table)

        logs.info(f"[{self.step_name}] n={len(ctx.dataset)}")
        return ctx
