from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd

from demandcv import logs
from demandcv.config.data_config import DataConfig
from demandcv.core.types import Dataset, Observation
from demandcv.features.temperature_feature_engine import TemperatureFeatureEngine
from demandcv.utils.errors import UserInputError
from demandcv.utils.path import PathManager

_MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


class DatasetBuildEngine:
    """
    DatasetBuildEngine

    Responsibility:
    - turn the prepared sales/weather table into a Dataset
    - own ALL table handling:
        - column checks
        - numeric sanitization (inf / NaN)
        - row filtering (drop_na)
        - predictor derivation (raw column or PC1 of temperatures)

    Contract:
    - returned Dataset is sorted by (year, month)
    - period_index = year, sub_period = month number (0 if absent)
    """

    def __init__(self, cfg: DataConfig):
        self.cfg = cfg

    # ======================================================================
    # Public API
    # ======================================================================
    def load(self, path: Optional[Path | str] = None) -> pd.DataFrame:
        path = PathManager.resolve(path if path is not None else self.cfg.path)
        if not path.exists():
            raise UserInputError(f"dataset not found: {path}")

        df = pd.read_csv(path)
        logs.info(f"[DatasetBuildEngine] loaded {len(df)} rows from {path}")
        return df

    def prepare(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Sanitize the table and attach the predictor column.
        """
        cfg = self.cfg
        needed = [cfg.year_column, cfg.response_column]
        if cfg.predictor_column == "pc1":
            needed += cfg.temperature_columns
        else:
            needed.append(cfg.predictor_column)

        missing = [c for c in needed if c not in df.columns]
        if missing:
            raise UserInputError(f"dataset is missing columns: {missing}")

        out = df.copy()
        numeric = [c for c in needed if c != cfg.year_column]
        out[numeric] = out[numeric].apply(pd.to_numeric, errors="coerce")

        # ==============================================================
        # Numeric sanitization
        # ==============================================================
        out[numeric] = out[numeric].replace([np.inf, -np.inf], np.nan)

        if cfg.drop_na:
            before = len(out)
            out = out.dropna(subset=numeric + [cfg.year_column])
            dropped = before - len(out)
            if dropped:
                logs.warning(f"[DatasetBuildEngine] dropped {dropped} rows with NaN / inf")

        if cfg.predictor_column == "pc1":
            feature = TemperatureFeatureEngine(cfg.temperature_columns).principal_component(out)
            out["pc1"] = feature.values

        return out

    def build(self, df: pd.DataFrame) -> Dataset:
        cfg = self.cfg
        prepared = self.prepare(df)

        years = prepared[cfg.year_column].astype(int).to_numpy()
        months = self._month_numbers(prepared)
        predictors = prepared[cfg.predictor_column].to_numpy(dtype=float)
        responses = prepared[cfg.response_column].to_numpy(dtype=float)

        dataset = Dataset.from_records(
            Observation(
                period_index=int(year),
                predictor=float(x),
                response=float(y),
                sub_period=int(month),
            )
            for year, month, x, y in zip(years, months, predictors, responses)
        )

        if len(dataset):
            logs.info(
                f"[DatasetBuildEngine] built dataset n={len(dataset)} "
                f"periods={dataset.first_period}..{dataset.last_period}"
            )
        return dataset

    def load_dataset(self, path: Optional[Path | str] = None) -> Dataset:
        return self.build(self.load(path))

    # ======================================================================
    # Internal
    # ======================================================================
    def _month_numbers(self, df: pd.DataFrame) -> np.ndarray:
        col = self.cfg.month_column
        if col not in df.columns:
            return np.zeros(len(df), dtype=int)

        raw = df[col]
        if pd.api.types.is_numeric_dtype(raw):
            return raw.fillna(0).astype(int).to_numpy()

        # "Jan".."Dec", as written by the table-joining step
        mapped = raw.astype(str).str[:3].str.title().map(
            {name: i + 1 for i, name in enumerate(_MONTHS)}
        )
        if mapped.isna().any():
            bad = sorted(raw[mapped.isna()].astype(str).unique())
            raise UserInputError(f"unrecognised month values in {col!r}: {bad}")
        return mapped.astype(int).to_numpy()
