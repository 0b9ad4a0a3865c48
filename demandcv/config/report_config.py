# demandcv/config/report_config.py
from pydantic import BaseModel


class ReportConfig(BaseModel):
    enabled: bool = True
    dir: str = "reports"
    with_anova: bool = True
