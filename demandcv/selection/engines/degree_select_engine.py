# demandcv/selection/engines/degree_select_engine.py
from __future__ import annotations

import math
from typing import Dict, Iterable, Optional, Sequence

from demandcv import logs
from demandcv.core.types import DegreeSummary, SelectionResult
from demandcv.utils.errors import IncompleteSummaryError


class DegreeSelectEngine:
    """
    One-standard-error rule.

    1. best    = argmin mean_rmse (ties -> smallest degree)
    2. limit   = best.mean_rmse + best.se_rmse
    3. choose  = smallest degree, scanning up from 1, with mean_rmse <= limit

    Returns `best` itself when no smaller degree is within the limit.
    """

    def __init__(self, degrees: Optional[Iterable[int]] = None):
        self.degrees = sorted(set(degrees)) if degrees is not None else None

    def select(self, summaries: Sequence[DegreeSummary]) -> SelectionResult:
        table = self._index(summaries)
        expected = self._expected_degrees(table)
        self._check_complete(table, expected)

        best = min(expected, key=lambda d: (table[d].mean_rmse, d))
        se = table[best].se_rmse
        # a single-fold run has no SD; the rule then reduces to argmin
        threshold = table[best].mean_rmse + (se if math.isfinite(se) else 0.0)

        chosen = next(d for d in expected if table[d].mean_rmse <= threshold)

        logs.info(
            f"[DegreeSelectEngine] best={best} "
            f"mean={table[best].mean_rmse:.6f} se={se:.6f} "
            f"threshold={threshold:.6f} chosen={chosen}"
        )

        return SelectionResult(
            degree=chosen,
            best_degree=best,
            threshold=threshold,
            summaries=tuple(table[d] for d in expected),
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    @staticmethod
    def _index(summaries: Sequence[DegreeSummary]) -> Dict[int, DegreeSummary]:
        table: Dict[int, DegreeSummary] = {}
        for s in summaries:
            if s.degree in table:
                raise ValueError(f"duplicate summary for degree={s.degree}")
            table[s.degree] = s
        return table

    def _expected_degrees(self, table: Dict[int, DegreeSummary]) -> list[int]:
        if self.degrees:
            return self.degrees
        if self.degrees is not None or not table:
            raise IncompleteSummaryError("empty summary table")
        return list(range(1, max(table) + 1))

    @staticmethod
    def _check_complete(table: Dict[int, DegreeSummary], expected: Sequence[int]) -> None:
        missing = [d for d in expected if d not in table]
        if missing:
            raise IncompleteSummaryError(f"summary table is missing degrees {missing}")

        undefined = [d for d in expected if not math.isfinite(table[d].mean_rmse)]
        if undefined:
            raise IncompleteSummaryError(f"mean_rmse undefined for degrees {undefined}")


def select_degree(
        summaries: Sequence[DegreeSummary],
        degrees: Optional[Iterable[int]] = None,
) -> int:
    """Degree chosen by the one-standard-error rule."""
    return DegreeSelectEngine(degrees).select(summaries).degree
