from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_OUTLIER_RESERVED_SIZE = 30.0
DEFAULT_OUTLIER_LABEL = "nan/inf/null"


class OutliersConfig(BaseModel):
    enabled: bool = True
    reserved_size: float = Field(default=DEFAULT_OUTLIER_RESERVED_SIZE, ge=0.0)
    label: str = DEFAULT_OUTLIER_LABEL


class TicksConfig(BaseModel):
    count: int = Field(default=10, ge=1)
    max_precision: int = Field(default=20, ge=1, le=20)


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    output_range: tuple[float, float] = (0.0, 500.0)
    outliers: OutliersConfig = Field(default_factory=OutliersConfig)
    ticks: TicksConfig = Field(default_factory=TicksConfig)
    log_level: str = "INFO"

    @field_validator("output_range")
    @classmethod
    def _distinct_endpoints(cls, value: tuple[float, float]) -> tuple[float, float]:
        if value[0] == value[1]:
            raise ValueError("output_range endpoints must differ")
        return value

    @model_validator(mode="after")
    def _room_for_outlier_slot(self) -> AppConfig:
        width = abs(self.output_range[1] - self.output_range[0])
        if self.outliers.enabled and width <= self.outliers.reserved_size:
            raise ValueError(
                f"output_range width {width} must exceed outliers.reserved_size "
                f"{self.outliers.reserved_size}"
            )
        return self


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    return AppConfig.model_validate(data)
