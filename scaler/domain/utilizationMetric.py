from dataclasses import dataclass
from typing import Final

DEFAULT_MARGIN: Final[float] = 5.0

# Recommended maximum utilization (percent) for the metrics the poller reports
DEFAULT_THRESHOLDS: Final[dict[str, float]] = {
    "high_priority_cpu": 65.0,
    "rolling_24_hr": 90.0,
    "storage": 75.0,
}


@dataclass(frozen=True)
class UtilizationMetric:
    name: str
    value: float
    threshold: float
    margin: float = DEFAULT_MARGIN

    def is_above_range(self) -> bool:
        return self.value > self.threshold + self.margin

    def is_below_range(self) -> bool:
        return self.value < self.threshold - self.margin

    def is_within_range(self) -> bool:
        return not (self.is_above_range() or self.is_below_range())
