"""
{#!filepath: demandcv/core/types.py}

Value objects (FINAL / FROZEN)

Observation -> Dataset -> Fold -> ErrorMatrix -> DegreeSummary -> SelectionResult

Invariants:
- Every object here is immutable once built
- Dataset order is temporal: sorted by (period_index, sub_period)
- ErrorMatrix cells are written once, by the aggregator, before any read
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Sequence, Tuple

import numpy as np
import pandas as pd


@dataclass(frozen=True, slots=True)
class Observation:
    period_index: int
    predictor: float
    response: float
    sub_period: int = 0


@dataclass(frozen=True)
class Dataset:
    """
    Ordered, read-only sequence of observations.
    """

    observations: Tuple[Observation, ...]

    def __post_init__(self):
        ordered = tuple(sorted(self.observations, key=lambda o: (o.period_index, o.sub_period)))
        object.__setattr__(self, "observations", ordered)

    @classmethod
    def from_records(cls, records: Iterable[Observation]) -> "Dataset":
        return cls(observations=tuple(records))

    def __len__(self) -> int:
        return len(self.observations)

    def __iter__(self) -> Iterator[Observation]:
        return iter(self.observations)

    def __getitem__(self, item):
        return self.observations[item]

    @property
    def periods(self) -> List[int]:
        """Distinct period buckets that actually hold data, ascending."""
        return sorted({o.period_index for o in self.observations})

    @property
    def first_period(self) -> int:
        if not self.observations:
            raise ValueError("empty dataset has no first period")
        return self.observations[0].period_index

    @property
    def last_period(self) -> int:
        if not self.observations:
            raise ValueError("empty dataset has no last period")
        return self.observations[-1].period_index

    def predictors(self) -> np.ndarray:
        return np.fromiter((o.predictor for o in self.observations), dtype=float, count=len(self))

    def responses(self) -> np.ndarray:
        return np.fromiter((o.response for o in self.observations), dtype=float, count=len(self))

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "period_index": [o.period_index for o in self.observations],
                "sub_period": [o.sub_period for o in self.observations],
                "predictor": self.predictors(),
                "response": self.responses(),
            }
        )


@dataclass(frozen=True)
class Fold:
    """
    One train/test split.

    group: folds sharing a group are averaged together before the
    cross-fold statistics are taken (one group per randomized repeat,
    one group per fold for rolling-origin folds).
    """

    index: int
    train: Dataset
    test: Dataset
    group: int = 0


@dataclass(frozen=True, eq=False)
class ErrorMatrix:
    """
    Out-of-sample RMSE, rows = degrees, columns = folds.

    NaN marks a skipped cell (empty test set with skip_empty_test).
    """

    degrees: Tuple[int, ...]
    fold_indices: Tuple[int, ...]
    fold_groups: Tuple[int, ...]
    values: np.ndarray = field(repr=False)

    def __post_init__(self):
        values = np.array(self.values, dtype=float, copy=True)
        if values.shape != (len(self.degrees), len(self.fold_indices)):
            raise ValueError(
                f"ErrorMatrix shape {values.shape} does not match "
                f"{len(self.degrees)} degrees x {len(self.fold_indices)} folds"
            )
        if len(self.fold_groups) != len(self.fold_indices):
            raise ValueError("fold_groups must align with fold_indices")
        values.setflags(write=False)
        object.__setattr__(self, "values", values)

    def row(self, degree: int) -> np.ndarray:
        return self.values[self.degrees.index(degree)]

    def cell(self, degree: int, fold_index: int) -> float:
        return float(self.values[self.degrees.index(degree), self.fold_indices.index(fold_index)])

    def to_frame(self) -> pd.DataFrame:
        df = pd.DataFrame(
            self.values,
            index=pd.Index(self.degrees, name="degree"),
            columns=pd.Index(self.fold_indices, name="fold"),
        )
        return df


@dataclass(frozen=True)
class DegreeSummary:
    degree: int
    mean_rmse: float
    se_rmse: float


@dataclass(frozen=True)
class SelectionResult:
    degree: int
    best_degree: int
    threshold: float
    summaries: Tuple[DegreeSummary, ...]

    def summary_frame(self) -> pd.DataFrame:
        return summaries_to_frame(self.summaries)


def summaries_to_frame(summaries: Sequence[DegreeSummary]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "degree": [s.degree for s in summaries],
            "mean_rmse": [s.mean_rmse for s in summaries],
            "se_rmse": [s.se_rmse for s in summaries],
        }
    )
