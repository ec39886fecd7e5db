import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from scaler.domain.scaling_method import ScalingMethod
from scaler.scaling_methods.direct_method import DirectScalingMethod
from scaler.scaling_methods.linear_method import LinearScalingMethod
from scaler.scaling_methods.stepwise_method import StepwiseScalingMethod

logger = logging.getLogger(__name__)


class ScalingMethodName(str, Enum):
    DIRECT = "DIRECT"
    LINEAR = "LINEAR"
    STEPWISE = "STEPWISE"


DEFAULT_METHOD = ScalingMethodName.STEPWISE


@dataclass(frozen=True)
class ResolvedMethod:
    variant: ScalingMethodName
    method: ScalingMethod
    warning: Optional[str] = None


class ScalingMethodRegistry:
    def __init__(self) -> None:
        self._methods: dict[ScalingMethodName, ScalingMethod] = {
            ScalingMethodName.DIRECT: DirectScalingMethod(),
            ScalingMethodName.LINEAR: LinearScalingMethod(),
            ScalingMethodName.STEPWISE: StepwiseScalingMethod(),
        }

    def resolve(self, method_name: Optional[str]) -> ResolvedMethod:
        """
        Maps a configured method name onto its variant. Unknown names fall back
        to the default method with a warning instead of failing the decision.
        """
        warning = None
        try:
            variant = ScalingMethodName((method_name or "").strip().upper())
        except ValueError:
            variant = DEFAULT_METHOD
            warning = f"Unknown scaling method '{method_name}', using {DEFAULT_METHOD.value}"
            logger.warning(warning)

        return ResolvedMethod(variant=variant, method=self._methods[variant], warning=warning)
