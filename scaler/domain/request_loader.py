import json
import math
from typing import Any, Mapping, Optional

from scaler.domain.capacity import Units, is_valid_size
from scaler.domain.errors import MalformedRequestError
from scaler.domain.scalingRequest import ScalingRequest
from scaler.domain.utilizationMetric import DEFAULT_MARGIN, DEFAULT_THRESHOLDS, UtilizationMetric

DEFAULT_SCALING_METHOD = "STEPWISE"
DEFAULT_SCALE_OUT_COOLING_MINUTES = 5
DEFAULT_SCALE_IN_COOLING_MINUTES = 30

# units -> (min_size, max_size, step_size, overload_step_size)
DEFAULT_LIMITS: dict[Units, tuple[int, int, int, int]] = {
    Units.NODES: (1, 3, 2, 5),
    Units.PROCESSING_UNITS: (100, 2000, 200, 500),
}


def _require(data: Mapping[str, Any], key: str) -> Any:
    if data.get(key) is None:
        raise MalformedRequestError(f"Missing required field '{key}'")
    return data[key]


def _text(data: Mapping[str, Any], key: str) -> str:
    value = _require(data, key)
    if not isinstance(value, str) or not value:
        raise MalformedRequestError(f"Field '{key}' must be a non-empty string, got {value!r}")
    return value


def _number(data: Mapping[str, Any], key: str, default: Optional[float] = None) -> float:
    value = data.get(key)
    if value is None:
        if default is None:
            raise MalformedRequestError(f"Missing required field '{key}'")
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedRequestError(f"Field '{key}' must be a number, got {value!r}")
    if not math.isfinite(value):
        raise MalformedRequestError(f"Field '{key}' must be a finite number, got {value!r}")
    if value < 0:
        raise MalformedRequestError(f"Field '{key}' must not be negative, got {value!r}")
    return value


def _integer(data: Mapping[str, Any], key: str, default: Optional[int] = None) -> int:
    value = _number(data, key, default)
    if int(value) != value or value < 1:
        raise MalformedRequestError(f"Field '{key}' must be a positive integer, got {value!r}")
    return int(value)


def _parse_units(data: Mapping[str, Any]) -> Units:
    raw = _text(data, "units")
    try:
        return Units(raw.upper())
    except ValueError as exc:
        raise MalformedRequestError(f"Unknown units '{raw}'") from exc


def _parse_metric(entry: Any) -> UtilizationMetric:
    if not isinstance(entry, Mapping):
        raise MalformedRequestError(f"Metric must be an object, got {entry!r}")

    name = _text(entry, "name")
    default_threshold = DEFAULT_THRESHOLDS.get(name.lower())
    if entry.get("threshold") is None and default_threshold is None:
        raise MalformedRequestError(f"Metric '{name}' has no threshold and no default is known")

    threshold = _number(entry, "threshold", default_threshold)
    if threshold == 0:
        raise MalformedRequestError(f"Metric '{name}' threshold must be above zero")

    return UtilizationMetric(
        name=name,
        value=_number(entry, "value"),
        threshold=threshold,
        margin=_number(entry, "margin", DEFAULT_MARGIN),
    )


def parse_request(data: Any) -> ScalingRequest:
    """
    Builds a ScalingRequest from the JSON document delivered by the poller.

    Raises MalformedRequestError before anything is processed when a required
    field is missing or a value is out of range.
    """
    if not isinstance(data, Mapping):
        raise MalformedRequestError(f"Scaling request must be a JSON object, got {type(data).__name__}")

    units = _parse_units(data)
    min_default, max_default, step_default, overload_step_default = DEFAULT_LIMITS[units]

    raw_metrics = _require(data, "metrics")
    if not isinstance(raw_metrics, list) or not raw_metrics:
        raise MalformedRequestError("Field 'metrics' must be a non-empty list")

    min_size = _integer(data, "minSize", min_default)
    max_size = _integer(data, "maxSize", max_default)
    for key, size in (("minSize", min_size), ("maxSize", max_size)):
        if not is_valid_size(size, units):
            raise MalformedRequestError(f"Field '{key}' is not a valid size in {units.value}: {size}")
    if min_size > max_size:
        raise MalformedRequestError(f"minSize ({min_size}) is larger than maxSize ({max_size})")

    overload_cooling = data.get("overloadCoolingMinutes")
    if overload_cooling is not None:
        overload_cooling = _number(data, "overloadCoolingMinutes")

    scale_in_limit = data.get("scaleInLimit")
    if scale_in_limit is not None:
        scale_in_limit = _number(data, "scaleInLimit")
        if not 0 < scale_in_limit <= 100:
            raise MalformedRequestError(f"Field 'scaleInLimit' must be in (0, 100], got {scale_in_limit}")

    is_overloaded = data.get("isOverloaded", False)
    if not isinstance(is_overloaded, bool):
        raise MalformedRequestError(f"Field 'isOverloaded' must be a boolean, got {is_overloaded!r}")

    scaling_method = data.get("scalingMethod") or DEFAULT_SCALING_METHOD
    if not isinstance(scaling_method, str):
        raise MalformedRequestError(f"Field 'scalingMethod' must be a string, got {scaling_method!r}")

    return ScalingRequest(
        project_id=_text(data, "projectId"),
        instance_id=_text(data, "instanceId"),
        current_size=_integer(data, "currentSize"),
        units=units,
        metrics=tuple(_parse_metric(m) for m in raw_metrics),
        scaling_method=scaling_method,
        scale_out_cooling_minutes=_number(data, "scaleOutCoolingMinutes", DEFAULT_SCALE_OUT_COOLING_MINUTES),
        scale_in_cooling_minutes=_number(data, "scaleInCoolingMinutes", DEFAULT_SCALE_IN_COOLING_MINUTES),
        overload_cooling_minutes=overload_cooling,
        is_overloaded=is_overloaded,
        min_size=min_size,
        max_size=max_size,
        step_size=_integer(data, "stepSize", step_default),
        overload_step_size=_integer(data, "overloadStepSize", overload_step_default),
        scale_in_limit=scale_in_limit,
    )


def load_request(path: str) -> ScalingRequest:
    with open(path, 'r') as f:
        data = json.load(f)

    return parse_request(data)
