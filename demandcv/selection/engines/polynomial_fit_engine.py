# demandcv/selection/engines/polynomial_fit_engine.py
from __future__ import annotations

import numpy as np
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.linear_model import LinearRegression
from sklearn.pipeline import Pipeline

from demandcv import logs
from demandcv.core.types import Dataset
from demandcv.utils.errors import (
    EmptyTestSetError,
    IllConditionedFitError,
    InsufficientDataError,
)


class OrthogonalPolynomialFeatures(TransformerMixin, BaseEstimator):
    """
    Orthogonal polynomial basis of a single predictor.

    fit():
      - centre x, QR-decompose the raw power basis
      - keep the recurrence coefficients (alpha_, norm2_)
    transform():
      - rebuild the basis for any x by the three-term recurrence
        P_{i+1}(x) = (x - alpha_i) P_i(x) - (norm2_{i+1} / norm2_i) P_{i-1}(x)
      - columns scaled to unit norm on the training points

    Same construction as R's poly(); on the training x the columns are
    orthonormal, which keeps high degrees well conditioned.
    """

    def __init__(self, degree: int = 1):
        self.degree = degree

    def fit(self, X, y=None):
        x = _as_1d(X)
        degree = int(self.degree)

        if degree < 1:
            raise ValueError(f"degree must be >= 1, got {degree}")
        if np.unique(x).size <= degree:
            raise InsufficientDataError(
                f"degree={degree} must be less than the number of unique "
                f"predictor values ({np.unique(x).size})"
            )

        xbar = x.mean()
        xc = x - xbar
        vander = np.vander(xc, degree + 1, increasing=True)
        q, r = np.linalg.qr(vander)
        z = q * np.diag(r)

        norm2 = np.sum(z ** 2, axis=0)
        alpha = (np.sum(xc[:, None] * z ** 2, axis=0) / norm2 + xbar)[:degree]

        self.alpha_ = alpha
        self.norm2_ = np.concatenate([[1.0], norm2])
        self.n_features_in_ = 1
        return self

    def transform(self, X):
        x = _as_1d(X)
        degree = int(self.degree)
        alpha, norm2 = self.alpha_, self.norm2_

        z = np.ones((x.size, degree + 1))
        z[:, 1] = x - alpha[0]
        for i in range(1, degree):
            z[:, i + 1] = (x - alpha[i]) * z[:, i] - (norm2[i + 1] / norm2[i]) * z[:, i - 1]

        z = z / np.sqrt(norm2[1:])
        return z[:, 1:]


def _as_1d(X) -> np.ndarray:
    x = np.asarray(X, dtype=float)
    if x.ndim == 2:
        if x.shape[1] != 1:
            raise ValueError(f"expected a single predictor column, got shape {x.shape}")
        x = x[:, 0]
    return x.ravel()


def make_polynomial_model(degree: int) -> Pipeline:
    return Pipeline(
        [
            ("basis", OrthogonalPolynomialFeatures(degree=degree)),
            ("ols", LinearRegression()),
        ]
    )


class PolynomialEvaluateEngine:
    """
    PolynomialEvaluateEngine

    Responsibility:
    - fit a degree-d polynomial on ONE train slice
    - score it (RMSE) on the matching test slice

    Contract:
    - pure: same (train, test, degree) -> same RMSE
    - never reads the test slice while fitting
    """

    def __init__(self, cond_threshold: float = 1e10, ill_conditioned: str = "warn"):
        if ill_conditioned not in ("warn", "raise"):
            raise ValueError(f"ill_conditioned must be 'warn' or 'raise', got {ill_conditioned!r}")
        self.cond_threshold = cond_threshold
        self.ill_conditioned = ill_conditioned

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def fit(self, train: Dataset, degree: int) -> Pipeline:
        if len(train) < degree + 1:
            raise InsufficientDataError(
                f"degree={degree} needs at least {degree + 1} train observations, got {len(train)}"
            )

        x = train.predictors().reshape(-1, 1)
        y = train.responses()

        model = make_polynomial_model(degree)
        model.fit(x, y)

        self._check_condition(model, x, degree)
        return model

    def evaluate(self, train: Dataset, test: Dataset, degree: int) -> float:
        if len(test) == 0:
            raise EmptyTestSetError(f"degree={degree}: empty test slice")

        model = self.fit(train, degree)
        preds = model.predict(test.predictors().reshape(-1, 1))

        return rmse(preds, test.responses())

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _check_condition(self, model: Pipeline, x: np.ndarray, degree: int) -> None:
        basis = model.named_steps["basis"].transform(x)
        design = np.column_stack([np.ones(len(x)), basis])
        cond = float(np.linalg.cond(design))

        if np.isfinite(cond) and cond <= self.cond_threshold:
            return

        message = (
            f"degree={degree} design matrix condition number {cond:.3e} "
            f"exceeds {self.cond_threshold:.3e}"
        )
        if self.ill_conditioned == "raise":
            raise IllConditionedFitError(message, condition_number=cond)
        logs.warning(f"[PolynomialEvaluateEngine] {message}")


def rmse(preds: np.ndarray, y_true: np.ndarray) -> float:
    preds = np.asarray(preds, dtype=float)
    y_true = np.asarray(y_true, dtype=float)
    return float(np.sqrt(np.mean((preds - y_true) ** 2)))


def evaluate(train: Dataset, test: Dataset, degree: int) -> float:
    """RMSE of a degree-`degree` polynomial fitted on train, scored on test."""
    return PolynomialEvaluateEngine().evaluate(train, test, degree)
