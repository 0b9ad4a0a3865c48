# demandcv/features/temperature_feature_engine.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np
import pandas as pd
from sklearn.decomposition import PCA
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler

from demandcv import logs


@dataclass(frozen=True)
class PrincipalComponentFeature:
    values: pd.Series
    loadings: np.ndarray
    explained_variance_ratio: float


class TemperatureFeatureEngine:
    """
    TemperatureFeatureEngine

    Responsibility:
    - collapse correlated temperature readings (tmax, tmin, ...) into
      their first principal component
    - expose the correlation table used to inspect those readings

    Contract:
    - columns are standardized before PCA
    - sign is fixed so the first column loads positively
      (PC1 rises with temperature)
    """

    def __init__(self, columns: Sequence[str]):
        if len(columns) < 1:
            raise ValueError("need at least one temperature column")
        self.columns: List[str] = list(columns)

    def principal_component(self, df: pd.DataFrame, name: str = "pc1") -> PrincipalComponentFeature:
        missing = [c for c in self.columns if c not in df.columns]
        if missing:
            raise KeyError(f"temperature columns not found: {missing}")

        X = df[self.columns].to_numpy(dtype=float)
        if not np.isfinite(X).all():
            raise ValueError("temperature columns contain NaN / inf; sanitize first")

        model = Pipeline(
            [
                ("scale", StandardScaler()),
                ("pca", PCA(n_components=1)),
            ]
        )
        scores = model.fit_transform(X)[:, 0]
        pca: PCA = model.named_steps["pca"]
        loadings = pca.components_[0].copy()

        if loadings[0] < 0:
            loadings = -loadings
            scores = -scores

        ratio = float(pca.explained_variance_ratio_[0])
        logs.info(
            f"[TemperatureFeatureEngine] {name} from {self.columns} "
            f"explained_variance_ratio={ratio:.4f}"
        )

        return PrincipalComponentFeature(
            values=pd.Series(scores, index=df.index, name=name),
            loadings=loadings,
            explained_variance_ratio=ratio,
        )

    def correlation_table(self, df: pd.DataFrame, response_column: str) -> pd.DataFrame:
        return df[self.columns + [response_column]].corr()
