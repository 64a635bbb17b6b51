import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from route_sim.domain.errors import UnknownStopError


# Core geometry types used by movement
@dataclass(frozen=True)
class Point:
    x: float  # meters in projected CRS
    y: float


def distance(a: Point, b: Point) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def total_distance(points: Sequence[Point]) -> float:
    """Length of the polyline through ``points``; 0 for fewer than two points."""
    return sum(distance(points[i], points[i + 1]) for i in range(len(points) - 1))


def resolve_stops(ids: Sequence[str], table: Mapping[str, Point]) -> list[Point]:
    out = []
    for stop_id in ids:
        try:
            out.append(table[stop_id])
        except KeyError:
            raise UnknownStopError(stop_id) from None
    return out


@dataclass
class Path:
    """Waypoints to follow at a single speed. Consumed once by the caller."""

    speed_mps: float
    waypoints: list[Point] = field(default_factory=list)

    def add_waypoint(self, p: Point) -> None:
        self.waypoints.append(p)

    @property
    def total_length_m(self) -> float:
        return total_distance(self.waypoints)

    @property
    def start(self) -> Point | None:
        return self.waypoints[0] if self.waypoints else None

    @property
    def end(self) -> Point | None:
        return self.waypoints[-1] if self.waypoints else None

    def travel_time_s(self) -> float:
        L = self.total_length_m
        if L == 0:
            return 0.0
        return L / max(self.speed_mps, 1e-9)
