# route_sim/io/business_events.py

from dataclasses import dataclass
from typing import Literal


# Base type for analytics events (not scheduled in the kernel!)
@dataclass
class BizEvent:
    run_id: str
    t: float  # simulation time
    seq: int  # per-run emission sequence (for total ordering)
    name: str  # stable event name


@dataclass
class EntitySpawnedBiz(BizEvent):
    entity_id: int
    loc: tuple[float, float]
    scheduled: bool


@dataclass
class PathAssignedBiz(BizEvent):
    entity_id: int
    origin: tuple[float, float]
    destination: tuple[float, float]
    waypoints: int
    distance_m: float
    speed_mps: float
    eta_t: float


@dataclass
class StopReachedBiz(BizEvent):
    entity_id: int
    loc: tuple[float, float]
    wait_s: float | None = None


@dataclass
class EntityRetiredBiz(BizEvent):
    entity_id: int
    reason: Literal["schedule_finished", "malformed_trip"]
