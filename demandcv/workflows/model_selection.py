# demandcv/workflows/model_selection.py
from __future__ import annotations

from datetime import datetime

from demandcv.config.app_config import AppConfig
from demandcv.data.dataset_build_engine import DatasetBuildEngine
from demandcv.observability.instrumentation import Instrumentation
from demandcv.selection.engines.anova_engine import NestedAnovaEngine
from demandcv.selection.engines.cross_validate_engine import CrossValidateEngine
from demandcv.selection.engines.degree_select_engine import DegreeSelectEngine
from demandcv.selection.engines.fold_build_engine import resolve_fold_builder
from demandcv.selection.pipeline import SelectionPipeline
from demandcv.selection.steps.anova_step import AnovaStep
from demandcv.selection.steps.cross_validate_step import CrossValidateStep
from demandcv.selection.steps.dataset_build_step import DatasetBuildStep
from demandcv.selection.steps.degree_select_step import DegreeSelectStep
from demandcv.selection.steps.fold_build_step import FoldBuildStep
from demandcv.selection.steps.report_persist_step import ReportPersistStep
from demandcv.utils.path import PathManager


def build_model_selection(cfg: AppConfig | None = None) -> SelectionPipeline:
    """
    Model selection workflow:

    dataset -> folds -> cross-validate -> select [-> anova] [-> report]
    """

    if cfg is None:
        cfg = AppConfig.load()
    sel = cfg.selection
    pm = PathManager()
    inst = Instrumentation()

    steps = [
        DatasetBuildStep(DatasetBuildEngine(cfg.data), inst=inst),
        FoldBuildStep(resolve_fold_builder(sel), sel.num_folds, inst=inst),
        CrossValidateStep(CrossValidateEngine.from_config(sel), sel.degrees, inst=inst),
        DegreeSelectStep(DegreeSelectEngine(sel.degrees), inst=inst),
    ]

    if cfg.report.with_anova and sel.max_degree >= 2:
        steps.append(AnovaStep(NestedAnovaEngine(), sel.degrees, inst=inst))

    if cfg.report.enabled:
        steps.append(ReportPersistStep(inst=inst))

    return SelectionPipeline(steps=steps, pm=pm, inst=inst, cfg=cfg)


def new_run_id() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S")
