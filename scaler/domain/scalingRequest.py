from dataclasses import dataclass
from typing import Optional

from scaler.domain.capacity import Units
from scaler.domain.utilizationMetric import UtilizationMetric


@dataclass(frozen=True)
class ScalingRequest:
    project_id: str
    instance_id: str
    current_size: int
    units: Units
    metrics: tuple[UtilizationMetric, ...]
    scaling_method: str
    scale_out_cooling_minutes: float
    scale_in_cooling_minutes: float
    min_size: int
    max_size: int
    step_size: int
    overload_step_size: int
    overload_cooling_minutes: Optional[float] = None
    is_overloaded: bool = False
    scale_in_limit: Optional[float] = None

    @property
    def instance_key(self) -> str:
        return f"projects/{self.project_id}/instances/{self.instance_id}"


"""
{
  "projectId": "my-project", "instanceId": "orders",
  "currentSize": 1000, "units": "PROCESSING_UNITS",
  "metrics": [{"name": "high_priority_cpu", "value": 80, "threshold": 65}],
  "scalingMethod": "DIRECT",
  "scaleOutCoolingMinutes": 5, "scaleInCoolingMinutes": 30,
  "overloadCoolingMinutes": null, "isOverloaded": false
}
"""
