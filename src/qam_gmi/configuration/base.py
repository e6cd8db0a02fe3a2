import json
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from qam_gmi.configuration.enums import WorkerBackend
from qam_gmi.constellation.enums import ConstellationType, LabelingType
from qam_gmi.information.enums import MetricType


class CapacitySettings(BaseModel):
    """Settings of a capacity evaluation run."""

    constellation_type: ConstellationType = ConstellationType.QAM
    constellation_order: int = Field(default=16, ge=1)
    labeling: LabelingType = LabelingType.GRAY
    constellation_path: Optional[str] = None  # overrides the generated constellation
    constellation_key: str = "C"  # variable name inside .mat files
    signal_noise_ratios: List[float] = Field(default_factory=lambda: [0.0, 5.0, 10.0, 15.0, 20.0])
    metrics: List[MetricType] = Field(default_factory=lambda: [MetricType.MI, MetricType.GMI])
    worker_backend: WorkerBackend = WorkerBackend.THREAD
    num_workers: Optional[int] = Field(default=None, ge=1)
    log_level: str = "INFO"
    output_dir: str = "images"

    @field_validator("signal_noise_ratios")
    @classmethod
    def _not_empty(cls, value: List[float]) -> List[float]:
        if not value:
            raise ValueError("At least one SNR value is required.")
        return value

    @field_validator("metrics")
    @classmethod
    def _unique_metrics(cls, value: List[MetricType]) -> List[MetricType]:
        if not value:
            raise ValueError("At least one metric is required.")
        return list(dict.fromkeys(value))

    @classmethod
    def from_json(cls, path: str) -> "CapacitySettings":
        with open(path, "r", encoding="utf-8") as file:
            return cls.model_validate(json.load(file))

    def __str__(self) -> str:
        lines = [f"{name}: {value}" for name, value in self.model_dump().items()]
        return "\n".join(lines)
