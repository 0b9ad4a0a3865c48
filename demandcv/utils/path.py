#!filepath: demandcv/utils/path.py
from pathlib import Path
from typing import Optional

from demandcv import logs


class PathManager:
    """
    Project directory layout:

    <root>
     ├── data/
     │     └── sales_weather.csv
     └── reports/
           └── <run_id>/
                 ├── error_matrix.csv
                 ├── degree_summary.csv
                 └── anova.csv
    """

    _root: Optional[Path] = None

    # ---------------------------------------------------------
    # root detection
    # ---------------------------------------------------------
    @classmethod
    def detect_root(cls) -> Path:
        """
        This file lives at <root>/demandcv/utils/path.py,
        so root = parents[2].
        """
        current = Path(__file__).resolve()
        root = current.parents[2]
        logs.debug(f"[PathManager] detect_root = {root}")
        return root

    @classmethod
    def root(cls) -> Path:
        if cls._root is None:
            cls._root = cls.detect_root()
        return cls._root

    @classmethod
    def set_root(cls, new_root: Path | str | None):
        if new_root is None:
            cls._root = None
        else:
            cls._root = Path(new_root).resolve()
        logs.debug(f"[PathManager] set_root = {cls._root}")

    # ---------------------------------------------------------
    # Top-level dirs
    # ---------------------------------------------------------
    @classmethod
    def data_dir(cls) -> Path:
        return cls.root() / "data"

    @classmethod
    def report_root(cls) -> Path:
        return cls.root() / "reports"

    @classmethod
    def resolve(cls, path: str | Path) -> Path:
        """Relative paths are taken from the project root."""
        p = Path(path)
        return p if p.is_absolute() else cls.root() / p

    # ---------------------------------------------------------
    # Run-scoped dirs
    # ---------------------------------------------------------
    @classmethod
    def report_dir(cls, run_id: str, base: str | Path | None = None) -> Path:
        base_dir = cls.resolve(base) if base is not None else cls.report_root()
        return base_dir / run_id
