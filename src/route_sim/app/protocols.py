from __future__ import annotations

from typing import Protocol, runtime_checkable

from route_sim.domain.entities.geography import Path, Point


# ------------- Collaborators --------------------
@runtime_checkable
class PathFinder(Protocol):
    """
    Shortest-path oracle.
    Returns the ordered positions from a to b, both ends included.
    `[a]` when a == b, `[]` when b is unreachable from a.
    Units: meters.
    """

    def shortest_path(self, a: Point, b: Point) -> list[Point]: ...


@runtime_checkable
class SpeedSampler(Protocol):
    """
    Return speed in meters/second at time t_s.
    Must be >= 0.1 m/s to avoid degenerate division.
    """

    def speed_mps(self, t_s: float, **kw) -> float: ...


@runtime_checkable
class WaitTimePolicy(Protocol):
    """Pause in seconds after arriving at a stop (unscheduled movement)."""

    def wait_s(self) -> float: ...


@runtime_checkable
class TimeSource(Protocol):
    @property
    def now(self) -> float: ...


# ------------- Movement --------------------
@runtime_checkable
class PathSource(Protocol):
    """
    Responsibilities:
      • Tell the outer loop how long to wait before the next path.
      • Produce the next path, or report that there will be no more.
      • Track the entity's last known position.
    next_wait_time() and next_path() are called strictly alternately.
    """

    @property
    def last_location(self) -> Point | None: ...

    def initial_location(self) -> Point: ...
    def stops(self) -> list[Point]: ...
    def next_wait_time(self): ...  # -> WaitFor | Exhausted
    def next_path(self): ...  # -> NextPath | Exhausted
    def replicate(self) -> PathSource: ...


__all__ = [
    "Path",
    "PathFinder",
    "PathSource",
    "Point",
    "SpeedSampler",
    "TimeSource",
    "WaitTimePolicy",
]
