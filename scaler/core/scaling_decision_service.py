import logging
import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from scaler.core.cooldown_evaluator import evaluate_cooldown, humanize_millis
from scaler.core.decision_events import DecisionEvent, DecisionState, EventSink, log_event
from scaler.core.scaling_method_registry import ScalingMethodRegistry
from scaler.domain.capacity import capacity_for
from scaler.domain.capacity_requester import CapacityRequester
from scaler.domain.cooldownDecision import CooldownDecision
from scaler.domain.errors import CapacityRequestError, StateStoreError
from scaler.domain.scalingRequest import ScalingRequest
from scaler.domain.state_store import StateStore


class DecisionOutcome(str, Enum):
    NO_OP = "NO_OP"
    COOLDOWN_BLOCKED = "COOLDOWN_BLOCKED"
    DONE = "DONE"
    FAILED = "FAILED"


@dataclass
class ScalingDecision:
    outcome: DecisionOutcome
    instance_key: str
    current_size: int
    suggested_size: int
    units: str
    method: str
    cooldown: Optional[CooldownDecision] = None
    operation: Optional[str] = None
    error: Optional[str] = None
    warnings: list[str] = field(default_factory=list)
    events: list[DecisionEvent] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.outcome is not DecisionOutcome.FAILED

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "instanceKey": self.instance_key,
            "currentSize": self.current_size,
            "suggestedSize": self.suggested_size,
            "units": self.units,
            "method": self.method,
            "cooldown": asdict(self.cooldown) if self.cooldown else None,
            "operation": self.operation,
            "error": self.error,
            "warnings": self.warnings,
            "events": [e.to_dict() for e in self.events],
        }


def now_millis() -> int:
    return int(time.time() * 1000)


def _describe_cooldown(cooldown: CooldownDecision) -> str:
    overload = " during overload" if cooldown.during_overload else ""
    if cooldown.elapsed_ms is None:
        history = "No previous scaling operation found"
    else:
        history = f"Last scaling operation was {humanize_millis(cooldown.elapsed_ms)} ago"
    return f"{history}; cooldown for {cooldown.direction}{overload} is {humanize_millis(cooldown.cooldown_ms)}"


class ScalingDecisionService:
    """
    Runs one scaling request through the decision state machine:

    RECEIVED -> SIZE_COMPUTED -> NO_OP | COOLDOWN_BLOCKED | ACTING -> DONE | FAILED

    The state read, cooldown check, resize call and state write happen inside
    one state-store transaction, so two decisions for the same instance can
    never both pass the cooldown. State is written only after the control
    plane accepted the resize; a refused resize starts no cooldown window.
    """

    def __init__(
            self,
            state_store: StateStore,
            capacity_requester: CapacityRequester,
            registry: Optional[ScalingMethodRegistry] = None,
            clock: Callable[[], int] = now_millis,
            event_sink: EventSink = log_event,
    ) -> None:
        self.state_store = state_store
        self.capacity_requester = capacity_requester
        self.registry = registry or ScalingMethodRegistry()
        self.clock = clock
        self.event_sink = event_sink

    def process(self, request: ScalingRequest) -> ScalingDecision:
        key = request.instance_key
        units = request.units.value
        events: list[DecisionEvent] = []

        def emit(state: DecisionState, message: str, level: int = logging.INFO, **details: Any) -> None:
            event = DecisionEvent(state=state, instance_key=key, message=message, level=level, details=details)
            events.append(event)
            self.event_sink(event)

        emit(DecisionState.RECEIVED,
             f"Scaling request received: {request.current_size} {units}, method {request.scaling_method}",
             currentSize=request.current_size, units=units)

        resolved = self.registry.resolve(request.scaling_method)
        warnings = [resolved.warning] if resolved.warning else []
        suggested = resolved.method.calculate_size(request)

        emit(DecisionState.SIZE_COMPUTED,
             f"{resolved.variant.value} suggests {suggested} {units}"
             + (f" ({resolved.warning})" if resolved.warning else ""),
             level=logging.WARNING if resolved.warning else logging.INFO,
             method=resolved.variant.value, suggestedSize=suggested)

        def finish(outcome: DecisionOutcome, **extra: Any) -> ScalingDecision:
            return ScalingDecision(
                outcome=outcome,
                instance_key=key,
                current_size=request.current_size,
                suggested_size=suggested,
                units=units,
                method=resolved.variant.value,
                warnings=warnings,
                events=events,
                **extra,
            )

        if suggested == request.current_size:
            emit(DecisionState.NO_OP, f"has {request.current_size} {units}, no scaling needed at the moment")
            return finish(DecisionOutcome.NO_OP)

        cooldown: Optional[CooldownDecision] = None
        try:
            with self.state_store.transaction(key) as tx:
                now = self.clock()
                state = tx.get()
                cooldown = evaluate_cooldown(request, state.last_scaling_timestamp, suggested, now)

                if cooldown.blocked:
                    emit(DecisionState.COOLDOWN_BLOCKED,
                         f"{_describe_cooldown(cooldown)} => Autoscale NOT allowed yet",
                         elapsedMs=cooldown.elapsed_ms, cooldownMs=cooldown.cooldown_ms,
                         direction=cooldown.direction)
                    return finish(DecisionOutcome.COOLDOWN_BLOCKED, cooldown=cooldown)

                emit(DecisionState.ACTING,
                     f"{_describe_cooldown(cooldown)} => Scaling to {suggested} {units}",
                     elapsedMs=cooldown.elapsed_ms, cooldownMs=cooldown.cooldown_ms,
                     direction=cooldown.direction, targetSize=suggested)

                try:
                    operation = self.capacity_requester.resize(key, capacity_for(suggested, request.units))
                except CapacityRequestError as exc:
                    emit(DecisionState.FAILED,
                         f"Unsuccessful scaling attempt to {suggested} {units}: {exc}",
                         level=logging.ERROR, targetSize=suggested)
                    return finish(DecisionOutcome.FAILED, cooldown=cooldown, error=str(exc))

                tx.set(now, suggested)
        except StateStoreError as exc:
            emit(DecisionState.FAILED,
                 f"State store failure while scaling to {suggested} {units}: {exc}",
                 level=logging.ERROR, targetSize=suggested)
            return finish(DecisionOutcome.FAILED, cooldown=cooldown, error=str(exc))

        emit(DecisionState.DONE, f"Scaling to {suggested} {units} accepted as {operation}",
             targetSize=suggested, operation=operation)
        return finish(DecisionOutcome.DONE, cooldown=cooldown, operation=operation)
