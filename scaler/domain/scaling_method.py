from abc import ABC, abstractmethod

from scaler.domain.scalingRequest import ScalingRequest


class ScalingMethod(ABC):
    @abstractmethod
    def calculate_size(self, request: ScalingRequest) -> int:
        pass
