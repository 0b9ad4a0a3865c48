#!filepath: demandcv/config/app_config.py
import yaml
from pydantic import BaseModel, Field
from dotenv import load_dotenv
import os

from .log_config import LogConfig
from .data_config import DataConfig
from .selection_config import SelectionConfig
from .report_config import ReportConfig


def project_root() -> str:
    """
    Project root derived from this file's location:
    demandcv/config/app_config.py -> demandcv/config -> demandcv -> project_root
    """
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "../../"))


class AppConfig(BaseModel):
    log: LogConfig = Field(default_factory=LogConfig)
    data: DataConfig = Field(default_factory=DataConfig)
    selection: SelectionConfig = Field(default_factory=SelectionConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        Load YAML config + .env
        - defaults to demandcv/config/base.yml
        - independent of the current working directory
        """
        root = project_root()

        # 1) .env at project root
        env_path = os.path.join(root, ".env")
        load_dotenv(env_path)

        # 2) resolve config file
        if path is None:
            path = os.path.join(root, "demandcv/config/base.yml")

        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        # 3) read YAML, then apply env overrides
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        data_path = os.getenv("DEMANDCV_DATA_PATH")
        if data_path:
            raw.setdefault("data", {})["path"] = data_path

        log_level = os.getenv("DEMANDCV_LOG_LEVEL")
        if log_level:
            raw.setdefault("log", {})["level"] = log_level

        return cls(**raw)
