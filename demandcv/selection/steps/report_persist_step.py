# demandcv/selection/steps/report_persist_step.py
from __future__ import annotations

import json
from datetime import datetime, timezone

from demandcv import logs
from demandcv.pipeline.step import PipelineStep
from demandcv.selection.context import SelectionContext


class ReportPersistStep(PipelineStep):
    """
    Persist run-scoped reports under ctx.report_dir:

    - error_matrix.csv    degree x fold RMSE
    - degree_summary.csv  mean / se per degree
    - anova.csv           only when ctx.anova is set
    - selection.json      chosen degree + run metadata
    """

    stage = "report"

    def run(self, ctx: SelectionContext) -> SelectionContext:
        if ctx.result is None or ctx.error_matrix is None:
            raise RuntimeError(f"[{self.step_name}] nothing to persist")

        out_dir = ctx.report_dir
        out_dir.mkdir(parents=True, exist_ok=True)

        ctx.error_matrix.to_frame().to_csv(out_dir / "error_matrix.csv")
        ctx.result.summary_frame().to_csv(out_dir / "degree_summary.csv", index=False)

        if ctx.anova is not None:
            ctx.anova.to_csv(out_dir / "anova.csv", index=False)

        meta = {
            "run_id": ctx.run_id,
            "created_at": datetime.now(timezone.utc).isoformat(),
            "strategy": ctx.cfg.selection.strategy,
            "num_folds": ctx.cfg.selection.num_folds,
            "degree": ctx.result.degree,
            "best_degree": ctx.result.best_degree,
            "threshold": ctx.result.threshold,
        }
        (out_dir / "selection.json").write_text(json.dumps(meta, indent=2))

        logs.info(f"[{self.step_name}] reports written to {out_dir}")
        return ctx
