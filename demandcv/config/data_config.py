#!filepath: demandcv/config/data_config.py
from typing import List

from pydantic import BaseModel, Field


class DataConfig(BaseModel):
    """
    Columns of the prepared sales/weather table.

    predictor_column:
      - "pc1"  -> first principal component of temperature_columns
      - other  -> used as-is (e.g. "tmin")
    """
    path: str = "data/sales_weather.csv"
    year_column: str = "year"
    month_column: str = "nmonth"
    response_column: str = "all_sectors"
    temperature_columns: List[str] = Field(
        default_factory=lambda: ["tmax", "tmin"]
    )
    predictor_column: str = "pc1"
    drop_na: bool = True
