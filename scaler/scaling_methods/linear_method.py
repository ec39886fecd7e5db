from scaler.domain.capacity import round_up
from scaler.domain.scaling_method import ScalingMethod
from scaler.domain.scalingRequest import ScalingRequest
from scaler.domain.utilizationMetric import UtilizationMetric
from scaler.scaling_methods.base import suggest_from_metrics


class LinearScalingMethod(ScalingMethod):
    def calculate_size(self, request: ScalingRequest) -> int:
        return suggest_from_metrics(request, "LINEAR", self._size_for_metric)

    @staticmethod
    def _size_for_metric(request: ScalingRequest, metric: UtilizationMetric) -> int:
        if metric.is_within_range():
            return request.current_size

        size = round_up(request.current_size * metric.value / metric.threshold, request.units)

        if size < request.current_size and request.scale_in_limit:
            lowest = round_up(request.current_size * (1 - request.scale_in_limit / 100), request.units)
            size = max(size, lowest)

        return size
