# tests/base_test/test_app_config.py
import yaml
import pytest
from pydantic import ValidationError

from demandcv import AppConfig
from demandcv.config.data_config import DataConfig
from demandcv.config.log_config import LogConfig
from demandcv.config.selection_config import SelectionConfig


@pytest.fixture
def sample_config_file(tmp_path):
    data = {
        "log": {
            "dir": "logs",
            "rotation": "1 day",
            "retention": "30 days",
            "level": "DEBUG",
        },
        "data": {
            "path": "data/dc.csv",
            "predictor_column": "tmin",
        },
        "selection": {
            "strategy": "random_kfold",
            "num_folds": 10,
            "repeats": 100,
            "max_degree": 4,
        },
    }

    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml.safe_dump(data), encoding="utf-8")
    return config_file


def test_app_config_load(sample_config_file, monkeypatch):
    monkeypatch.delenv("DEMANDCV_DATA_PATH", raising=False)
    monkeypatch.delenv("DEMANDCV_LOG_LEVEL", raising=False)

    cfg = AppConfig.load(path=str(sample_config_file))

    assert isinstance(cfg.log, LogConfig)
    assert isinstance(cfg.data, DataConfig)
    assert cfg.log.level == "DEBUG"
    assert cfg.data.predictor_column == "tmin"
    assert cfg.data.response_column == "all_sectors"
    assert cfg.selection.strategy == "random_kfold"
    assert cfg.selection.degrees == [1, 2, 3, 4]
    assert cfg.report.enabled is True


def test_default_config_file_loads(monkeypatch):
    monkeypatch.delenv("DEMANDCV_DATA_PATH", raising=False)
    monkeypatch.delenv("DEMANDCV_LOG_LEVEL", raising=False)

    cfg = AppConfig.load()

    assert cfg.selection.num_folds == 18
    assert cfg.selection.max_degree == 6
    assert cfg.selection.strategy == "rolling"
    assert cfg.data.temperature_columns == ["tmax", "tmin"]


def test_env_overrides(sample_config_file, monkeypatch):
    monkeypatch.setenv("DEMANDCV_DATA_PATH", "/tmp/other.csv")
    monkeypatch.setenv("DEMANDCV_LOG_LEVEL", "WARNING")

    cfg = AppConfig.load(path=str(sample_config_file))

    assert cfg.data.path == "/tmp/other.csv"
    assert cfg.log.level == "WARNING"


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        AppConfig.load(path=str(tmp_path / "missing.yml"))


def test_selection_config_validation():
    with pytest.raises(ValidationError):
        SelectionConfig(strategy="bootstrap")
    with pytest.raises(ValidationError):
        SelectionConfig(max_workers=0)
    with pytest.raises(ValidationError):
        SelectionConfig(num_folds=1)

    assert SelectionConfig(max_workers=None).max_workers is None
