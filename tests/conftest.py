# tests/conftest.py
from __future__ import annotations

from typing import Callable

import numpy as np
import pandas as pd
import pytest
from loguru import logger

from demandcv.core.types import Dataset, Observation


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


def seasonal_temperature(month: int, rng: np.random.Generator) -> float:
    return 15.0 + 10.0 * np.sin(2 * np.pi * month / 12) + rng.normal(0.0, 2.0)


@pytest.fixture
def make_quadratic_dataset() -> Callable[..., Dataset]:
    """
    Factory: response = 3 * predictor^2 + noise, one row per (year, month).

    Usage:
        ds = make_quadratic_dataset()
        ds = make_quadratic_dataset(years=5, per_year=1, noise=0.0)
    """

    def _make(
            years: int = 19,
            per_year: int = 12,
            noise: float = 1.0,
            seed: int = 0,
            start: int = 2001,
            skip_years: tuple = (),
    ) -> Dataset:
        rng = np.random.default_rng(seed)
        records = []
        for year in range(start, start + years):
            for month in range(1, per_year + 1):
                x = seasonal_temperature(month, rng)
                y = 3.0 * x ** 2 + rng.normal(0.0, noise)
                if year in skip_years:
                    continue
                records.append(Observation(period_index=year, predictor=x, response=y, sub_period=month))
        return Dataset.from_records(records)

    return _make


@pytest.fixture
def sales_weather_frame() -> pd.DataFrame:
    """
    Prepared sales/weather table: 19 years x 12 months,
    tmin drives demand quadratically, tmax = tmin + ~9 degrees.
    """
    rng = np.random.default_rng(7)
    rows = []
    for year in range(2001, 2020):
        for month in range(1, 13):
            tmin = seasonal_temperature(month, rng)
            rows.append(
                dict(
                    year=year,
                    nmonth=month,
                    tmin=tmin,
                    tmax=tmin + 9.0 + rng.normal(0.0, 1.0),
                    prcp=abs(rng.normal(3.0, 1.0)),
                    all_sectors=3.0 * tmin ** 2 + rng.normal(0.0, 5.0),
                )
            )
    return pd.DataFrame(rows)
