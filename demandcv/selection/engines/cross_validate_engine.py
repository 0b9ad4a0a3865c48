# demandcv/selection/engines/cross_validate_engine.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from demandcv import logs
from demandcv.core.types import Dataset, DegreeSummary, ErrorMatrix, Fold
from demandcv.pipeline.parallel.executor import ParallelExecutor
from demandcv.pipeline.parallel.types import ParallelKind
from demandcv.selection.engines.fold_build_engine import FoldBuilder, build_folds
from demandcv.selection.engines.polynomial_fit_engine import PolynomialEvaluateEngine
from demandcv.utils.errors import EmptyTestSetError


@dataclass(frozen=True)
class CellTask:
    """One (degree, fold) evaluation; owns exactly one ErrorMatrix cell."""

    degree: int
    fold: Fold
    skip_empty_test: bool
    cond_threshold: float
    ill_conditioned: str


def evaluate_cell(task: CellTask) -> float:
    """
    Module-level so that it pickles into worker processes.
    """
    engine = PolynomialEvaluateEngine(
        cond_threshold=task.cond_threshold,
        ill_conditioned=task.ill_conditioned,
    )
    try:
        return engine.evaluate(task.fold.train, task.fold.test, task.degree)
    except EmptyTestSetError:
        if not task.skip_empty_test:
            raise
        logs.warning(
            f"[CrossValidateEngine] skip degree={task.degree} fold={task.fold.index}: empty test set"
        )
        return float("nan")


class CrossValidateEngine:
    """
    CrossValidateEngine

    Responsibility:
    - evaluate every (degree, fold) cell
    - gather cells into a write-once ErrorMatrix
    - summarise per degree: mean / sample SD (ddof=1) across fold groups

    Contract:
    - any cell failure aborts the whole run (no partial matrix)
    - NaN cells only come from skipped empty test sets
    - deterministic for a deterministic fold list
    """

    def __init__(
            self,
            *,
            skip_empty_test: bool = False,
            cond_threshold: float = 1e10,
            ill_conditioned: str = "warn",
            max_workers: int | None = 1,
    ):
        self.skip_empty_test = skip_empty_test
        self.cond_threshold = cond_threshold
        self.ill_conditioned = ill_conditioned
        self.max_workers = max_workers

    @classmethod
    def from_config(cls, cfg) -> "CrossValidateEngine":
        return cls(
            skip_empty_test=cfg.skip_empty_test,
            cond_threshold=cfg.cond_threshold,
            ill_conditioned=cfg.ill_conditioned,
            max_workers=cfg.max_workers,
        )

    # ======================================================================
    # Public API
    # ======================================================================
    def error_matrix(self, folds: Sequence[Fold], degrees: Sequence[int]) -> ErrorMatrix:
        degrees = _check_degrees(degrees)
        if not folds:
            raise ValueError("cross-validation needs at least one fold")

        tasks = [
            CellTask(
                degree=d,
                fold=fold,
                skip_empty_test=self.skip_empty_test,
                cond_threshold=self.cond_threshold,
                ill_conditioned=self.ill_conditioned,
            )
            for d in degrees
            for fold in folds
        ]

        results = ParallelExecutor.run(
            kind=ParallelKind.CELL,
            items=tasks,
            handler=evaluate_cell,
            max_workers=self.max_workers,
        )

        values = np.asarray(results, dtype=float).reshape(len(degrees), len(folds))

        return ErrorMatrix(
            degrees=tuple(degrees),
            fold_indices=tuple(f.index for f in folds),
            fold_groups=tuple(f.group for f in folds),
            values=values,
        )

    def summarize(self, matrix: ErrorMatrix) -> List[DegreeSummary]:
        groups = np.asarray(matrix.fold_groups)
        group_ids = list(dict.fromkeys(matrix.fold_groups))

        summaries: List[DegreeSummary] = []
        for degree in matrix.degrees:
            row = matrix.row(degree)
            scores = _group_means(row, groups, group_ids)
            mean_rmse, se_rmse = _mean_and_sd(scores)

            logs.info(
                f"[CrossValidateEngine] degree={degree} "
                f"mean_rmse={mean_rmse:.6f} se_rmse={se_rmse:.6f} n={scores.size}"
            )
            summaries.append(DegreeSummary(degree=degree, mean_rmse=mean_rmse, se_rmse=se_rmse))

        return summaries

    def run(
            self,
            dataset: Dataset,
            num_folds: int,
            degrees: Sequence[int],
            builder: FoldBuilder | None = None,
    ) -> Tuple[ErrorMatrix, List[DegreeSummary]]:
        folds = build_folds(dataset, num_folds, builder=builder)
        matrix = self.error_matrix(folds, degrees)
        return matrix, self.summarize(matrix)


# ----------------------------------------------------------------------
# Internal
# ----------------------------------------------------------------------
def _check_degrees(degrees: Sequence[int]) -> List[int]:
    out = [int(d) for d in degrees]
    if not out:
        raise ValueError("degrees must not be empty")
    if any(d < 1 for d in out):
        raise ValueError(f"degrees must be positive, got {out}")
    if len(set(out)) != len(out):
        raise ValueError(f"degrees must be unique, got {out}")
    return out


def _group_means(row: np.ndarray, groups: np.ndarray, group_ids: list) -> np.ndarray:
    """
    One score per fold group; skipped (NaN) cells are left out,
    and a group with no scored cell is left out entirely.
    """
    scores = []
    for g in group_ids:
        cells = row[groups == g]
        cells = cells[~np.isnan(cells)]
        if cells.size:
            scores.append(cells.mean())
    return np.asarray(scores, dtype=float)


def _mean_and_sd(scores: np.ndarray) -> Tuple[float, float]:
    # cross-group sample SD, not SD / sqrt(n)
    if scores.size == 0:
        return float("nan"), float("nan")
    mean = float(np.mean(scores))
    sd = float(np.std(scores, ddof=1)) if scores.size > 1 else float("nan")
    return mean, sd


def cross_validate(
        dataset: Dataset,
        num_folds: int,
        degrees: Sequence[int],
        builder: FoldBuilder | None = None,
) -> Tuple[ErrorMatrix, List[DegreeSummary]]:
    """Rolling-origin cross-validation with default engine settings."""
    return CrossValidateEngine().run(dataset, num_folds, degrees, builder=builder)
