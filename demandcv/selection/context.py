# demandcv/selection/context.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

import pandas as pd

from demandcv.core.types import (
    Dataset,
    DegreeSummary,
    ErrorMatrix,
    Fold,
    SelectionResult,
)


@dataclass
class SelectionContext:
    """
    SelectionContext

    Semantics:
    - One context == one selection run
    - Steps fill the slots in order; each slot is written once
    - Slots hold immutable value objects only
    """

    # -------------------------
    # Identity
    # -------------------------
    run_id: str

    # -------------------------
    # Static bindings
    # -------------------------
    cfg: Any
    inst: Any
    report_dir: Path

    # -------------------------
    # Run state
    # -------------------------
    table: Optional[pd.DataFrame] = None
    dataset: Optional[Dataset] = None
    folds: Optional[List[Fold]] = None
    error_matrix: Optional[ErrorMatrix] = None
    summaries: Optional[List[DegreeSummary]] = None
    result: Optional[SelectionResult] = None
    anova: Optional[pd.DataFrame] = None
