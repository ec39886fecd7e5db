from typing import Final, Optional

from scaler.domain.cooldownDecision import CooldownDecision
from scaler.domain.scalingRequest import ScalingRequest

MS_IN_1_MIN: Final[int] = 60_000

SCALE_OUT = "scale out"
SCALE_IN = "scale in"


def cooldown_minutes(request: ScalingRequest, suggested_size: int) -> tuple[str, float]:
    direction = SCALE_OUT if suggested_size > request.current_size else SCALE_IN
    minutes = (request.scale_out_cooling_minutes if direction == SCALE_OUT
               else request.scale_in_cooling_minutes)

    if request.is_overloaded:
        minutes = (request.overload_cooling_minutes
                   if request.overload_cooling_minutes is not None
                   else request.scale_out_cooling_minutes)

    return direction, minutes


def evaluate_cooldown(
        request: ScalingRequest,
        last_action_timestamp: Optional[int],
        suggested_size: int,
        now: int,
) -> CooldownDecision:
    """
    Decides whether a resize towards `suggested_size` is still blocked by the
    cooldown started at `last_action_timestamp` (epoch millis).

    The first action for an instance is never blocked, and the cooldown is
    over at exactly `cooldown_ms` after the last action.
    """
    direction, minutes = cooldown_minutes(request, suggested_size)
    cooldown_ms = int(round(minutes * MS_IN_1_MIN))

    if not last_action_timestamp:
        return CooldownDecision(
            blocked=False,
            direction=direction,
            cooldown_ms=cooldown_ms,
            during_overload=request.is_overloaded,
        )

    elapsed_ms = now - last_action_timestamp
    return CooldownDecision(
        blocked=elapsed_ms < cooldown_ms,
        direction=direction,
        cooldown_ms=cooldown_ms,
        elapsed_ms=elapsed_ms,
        during_overload=request.is_overloaded,
    )


def is_within_cooldown(
        request: ScalingRequest,
        last_action_timestamp: Optional[int],
        suggested_size: int,
        now: int,
) -> bool:
    return evaluate_cooldown(request, last_action_timestamp, suggested_size, now).blocked


def humanize_millis(millis: int) -> str:
    seconds = max(0, int(millis // 1000))
    parts = []
    for label, size in (("day", 86_400), ("hour", 3_600), ("minute", 60), ("second", 1)):
        count, seconds = divmod(seconds, size)
        if count:
            parts.append(f"{count} {label}{'s' if count > 1 else ''}")
    return " ".join(parts) if parts else "0 seconds"
