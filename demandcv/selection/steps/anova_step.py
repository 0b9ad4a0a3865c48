# demandcv/selection/steps/anova_step.py
from __future__ import annotations

from typing import Sequence

from demandcv import logs
from demandcv.pipeline.step import PipelineStep
from demandcv.selection.context import SelectionContext
from demandcv.selection.engines.anova_engine import NestedAnovaEngine
from demandcv.utils.errors import CrossValidationError


class AnovaStep(PipelineStep):
    """
    Contract:
    - consumes ctx.dataset
    - produces ctx.anova (informational, never changes ctx.result)
    - a table that cannot be computed leaves ctx.anova = None and
      the run continues
    """

    stage = "anova"

    def __init__(self, engine: NestedAnovaEngine, degrees: Sequence[int], inst=None):
        super().__init__(inst)
        self.engine = engine
        self.degrees = list(degrees)

    def run(self, ctx: SelectionContext) -> SelectionContext:
        if ctx.dataset is None:
            raise RuntimeError(f"[{self.step_name}] no dataset in context")

        with self.inst.timer(self.step_name):
            try:
                ctx.anova = self.engine.compare(ctx.dataset, self.degrees)
            except (ValueError, CrossValidationError) as e:
                logs.warning(f"[{self.step_name}] skipped: {e}")
                ctx.anova = None
                return ctx

        for row in ctx.anova.itertuples(index=False):
            logs.info(
                f"[{self.step_name}] degree={row.degree} rss={row.rss:.4f} "
                f"F={row.F:.4f} p={row.p_value:.4g}"
            )
        return ctx
