import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class DecisionState(str, Enum):
    RECEIVED = "RECEIVED"
    SIZE_COMPUTED = "SIZE_COMPUTED"
    NO_OP = "NO_OP"
    COOLDOWN_BLOCKED = "COOLDOWN_BLOCKED"
    ACTING = "ACTING"
    DONE = "DONE"
    FAILED = "FAILED"


@dataclass(frozen=True)
class DecisionEvent:
    state: DecisionState
    instance_key: str
    message: str
    level: int = logging.INFO
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "instanceKey": self.instance_key,
            "message": self.message,
            "level": logging.getLevelName(self.level),
            "details": self.details,
        }


EventSink = Callable[[DecisionEvent], None]


def log_event(event: DecisionEvent) -> None:
    logger.log(event.level, f"----- {event.instance_key} [{event.state.value}]: {event.message}")
