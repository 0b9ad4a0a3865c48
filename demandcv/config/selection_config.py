# demandcv/config/selection_config.py
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator


class SelectionConfig(BaseModel):
    """
    SelectionConfig

    strategy:
      - rolling      : rolling-origin folds, one period bucket per test set
      - random_kfold : `repeats` shuffles of the full dataset into num_folds folds
    """

    # folds
    strategy: Literal["rolling", "random_kfold"] = "rolling"
    num_folds: int = Field(default=18, ge=2)
    repeats: int = Field(default=100, ge=2)
    seed: int = 17

    # degrees
    max_degree: int = Field(default=6, ge=1)

    # failure policy
    skip_empty_test: bool = False
    cond_threshold: float = Field(default=1e10, gt=0)
    ill_conditioned: Literal["warn", "raise"] = "warn"

    # execution
    max_workers: Optional[int] = 1

    @model_validator(mode="after")
    def _check_workers(self) -> "SelectionConfig":
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be >= 1 or null")
        return self

    @property
    def degrees(self) -> List[int]:
        return list(range(1, self.max_degree + 1))
