# demandcv/selection/engines/anova_engine.py
from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd
from scipy.stats import f as f_dist

from demandcv.core.types import Dataset
from demandcv.selection.engines.polynomial_fit_engine import make_polynomial_model


class NestedAnovaEngine:
    """
    NestedAnovaEngine

    Responsibility:
    - fit every degree on the FULL dataset
    - sequential F-tests of each degree against the previous one

    Informational only: the selected degree always comes from
    cross-validation. Uses the largest model's residual variance as the
    common error estimate, like a multi-model anova table.
    """

    def compare(self, dataset: Dataset, degrees: Sequence[int]) -> pd.DataFrame:
        degrees = sorted(int(d) for d in degrees)
        if len(degrees) < 2:
            raise ValueError("need at least two degrees to compare")

        x = dataset.predictors().reshape(-1, 1)
        y = dataset.responses()
        n = len(y)

        rss = []
        for d in degrees:
            model = make_polynomial_model(d).fit(x, y)
            resid = y - model.predict(x)
            rss.append(float(np.sum(resid ** 2)))

        res_df = [n - d - 1 for d in degrees]
        if res_df[-1] <= 0:
            raise ValueError(
                f"degree={degrees[-1]} leaves no residual degrees of freedom (n={n})"
            )
        scale = rss[-1] / res_df[-1]

        rows = []
        for i, d in enumerate(degrees):
            row = {"degree": d, "res_df": res_df[i], "rss": rss[i]}
            if i == 0:
                row.update(df=np.nan, sum_sq=np.nan, F=np.nan, p_value=np.nan)
            else:
                df = res_df[i - 1] - res_df[i]
                sum_sq = rss[i - 1] - rss[i]
                F = (sum_sq / df) / scale
                row.update(
                    df=df,
                    sum_sq=sum_sq,
                    F=F,
                    p_value=float(f_dist.sf(F, df, res_df[-1])),
                )
            rows.append(row)

        return pd.DataFrame(rows, columns=["degree", "res_df", "rss", "df", "sum_sq", "F", "p_value"])
