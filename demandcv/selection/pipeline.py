# demandcv/selection/pipeline.py
from __future__ import annotations

from typing import List, Optional

import pandas as pd

from demandcv import logs
from demandcv.config.app_config import AppConfig
from demandcv.observability.instrumentation import Instrumentation
from demandcv.pipeline.step import PipelineStep
from demandcv.selection.context import SelectionContext
from demandcv.utils.path import PathManager


class SelectionPipeline:
    """
    SelectionPipeline

    Semantics:
    - steps run in order on one SelectionContext
    - the first failing step aborts the run; nothing is retried
    """

    def __init__(
            self,
            *,
            steps: List[PipelineStep],
            pm: PathManager,
            inst: Instrumentation,
            cfg: AppConfig,
    ):
        self.steps = steps
        self.pm = pm
        self.inst = inst
        self.cfg = cfg

    @logs.catch("selection run failed")
    def run(self, run_id: str, table: Optional[pd.DataFrame] = None) -> SelectionContext:
        logs.info(f"[SelectionPipeline] START run_id={run_id}")

        ctx = SelectionContext(
            run_id=run_id,
            cfg=self.cfg,
            inst=self.inst,
            report_dir=self.pm.report_dir(run_id, base=self.cfg.report.dir),
            table=table,
        )

        for step in self.steps:
            ctx = step.run(ctx)

        self.inst.report_timeline(run_id)
        logs.info(
            f"[SelectionPipeline] DONE run_id={run_id} degree={ctx.result.degree}"
        )
        return ctx
