from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CooldownDecision:
    blocked: bool
    direction: str
    cooldown_ms: int
    elapsed_ms: Optional[int] = None
    during_overload: bool = False
