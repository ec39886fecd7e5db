from scaler.domain.capacity import round_down, round_up
from scaler.domain.scaling_method import ScalingMethod
from scaler.domain.scalingRequest import ScalingRequest
from scaler.domain.utilizationMetric import UtilizationMetric
from scaler.scaling_methods.base import suggest_from_metrics


class StepwiseScalingMethod(ScalingMethod):
    """
    Moves one fixed step at a time: `step_size` up or down, or
    `overload_step_size` up while the instance is overloaded.
    """

    def calculate_size(self, request: ScalingRequest) -> int:
        return suggest_from_metrics(request, "STEPWISE", self._size_for_metric)

    @staticmethod
    def _size_for_metric(request: ScalingRequest, metric: UtilizationMetric) -> int:
        if metric.is_above_range():
            step = request.overload_step_size if request.is_overloaded else request.step_size
            return round_up(request.current_size + step, request.units)

        if metric.is_below_range():
            return round_down(request.current_size - request.step_size, request.units)

        return request.current_size
