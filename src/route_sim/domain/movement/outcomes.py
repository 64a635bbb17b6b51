# route_sim/domain/movement/outcomes.py
from dataclasses import dataclass
from typing import Literal

from route_sim.domain.entities.geography import Path

ExhaustedReason = Literal["schedule_finished", "malformed_trip"]


@dataclass(frozen=True)
class WaitFor:
    # <= 0 means "go now"
    seconds: float


@dataclass(frozen=True)
class NextPath:
    path: Path


@dataclass(frozen=True)
class Exhausted:
    """No more waits or paths will follow."""

    reason: ExhaustedReason = "schedule_finished"


NEVER = Exhausted()

WaitOutcome = WaitFor | Exhausted
PathOutcome = NextPath | Exhausted
