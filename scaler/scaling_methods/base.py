import logging
from typing import Callable

from scaler.domain.capacity import clamp
from scaler.domain.scalingRequest import ScalingRequest
from scaler.domain.utilizationMetric import UtilizationMetric

logger = logging.getLogger(__name__)

MetricSizer = Callable[[ScalingRequest, UtilizationMetric], int]


def _range_note(metric: UtilizationMetric) -> str:
    if metric.is_above_range():
        return "ABOVE the range"
    if metric.is_below_range():
        return "BELOW the range"
    return "within the range"


def suggest_from_metrics(request: ScalingRequest, method_name: str, size_for_metric: MetricSizer) -> int:
    """
    Asks `size_for_metric` for a size per metric and keeps the largest one,
    so a scale-in only happens when every metric agrees with it.

    The result never drops below min_size nor exceeds max_size.
    """
    logger.debug(
        f"{request.instance_key}: {method_name} size suggestions "
        f"(min={request.min_size}, current={request.current_size}, "
        f"max={request.max_size} {request.units.value})"
    )

    suggested = request.min_size
    for metric in request.metrics:
        size = size_for_metric(request, metric)
        logger.debug(
            f"\t{metric.name}={metric.value}% is {_range_note(metric)} "
            f"[{metric.threshold - metric.margin}, {metric.threshold + metric.margin}] "
            f"=> suggests {size} {request.units.value}"
        )
        suggested = max(suggested, size)

    return clamp(suggested, request.min_size, request.max_size)
