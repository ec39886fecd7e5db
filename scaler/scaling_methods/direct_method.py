from scaler.domain.capacity import round_up
from scaler.domain.scaling_method import ScalingMethod
from scaler.domain.scalingRequest import ScalingRequest
from scaler.domain.utilizationMetric import UtilizationMetric
from scaler.scaling_methods.base import suggest_from_metrics


class DirectScalingMethod(ScalingMethod):
    """
    Goes straight to the smallest size that keeps every metric at or below its
    threshold. Utilization is assumed to fall in proportion to added capacity.
    """

    def calculate_size(self, request: ScalingRequest) -> int:
        return suggest_from_metrics(request, "DIRECT", self._size_for_metric)

    @staticmethod
    def _size_for_metric(request: ScalingRequest, metric: UtilizationMetric) -> int:
        return round_up(request.current_size * metric.value / metric.threshold, request.units)
