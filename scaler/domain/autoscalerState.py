from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AutoscalerState:
    last_scaling_timestamp: int = 0
    current_size: Optional[int] = None

    @property
    def never_scaled(self) -> bool:
        return not self.last_scaling_timestamp
