# route_sim/domain/movement/route_movement.py
from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType

from route_sim.app.protocols import (
    PathFinder,
    PathSource,
    SpeedSampler,
    TimeSource,
    WaitTimePolicy,
)
from route_sim.domain.entities.geography import Point
from route_sim.domain.entities.route import RouteCatalog
from route_sim.domain.entities.schedule import VehicleSchedule
from route_sim.domain.movement.outcomes import PathOutcome, WaitOutcome
from route_sim.domain.movement.scheduled import ScheduledRouteWalker, ScheduleTiming
from route_sim.domain.movement.unscheduled import UnscheduledRouteWalker


class RouteMovement:
    """
    Entity-facing movement model over predetermined routes.

    Wraps exactly one path source, chosen at construction:
      • UnscheduledRouteWalker: repeat a route's stops forever;
      • ScheduledRouteWalker: follow a vehicle timetable.
    Prototype instances are built with the classmethods; every simulated
    entity gets its own instance via replicate().
    """

    def __init__(self, source: PathSource):
        self._source = source

    @classmethod
    def unscheduled(
        cls,
        catalog: RouteCatalog,
        *,
        path_finder: PathFinder,
        speed_sampler: SpeedSampler,
        wait_policy: WaitTimePolicy,
        clock: TimeSource,
    ) -> RouteMovement:
        walker = UnscheduledRouteWalker(
            route=catalog.prototype_route(),
            catalog=catalog,
            path_finder=path_finder,
            speed_sampler=speed_sampler,
            wait_policy=wait_policy,
            clock=clock,
        )
        return cls(walker)

    @classmethod
    def scheduled(
        cls,
        schedule: VehicleSchedule,
        *,
        stop_table: Mapping[str, Point],
        path_finder: PathFinder,
        clock: TimeSource,
        route_stop_ids: Sequence[str] | None = None,
        timing: ScheduleTiming | None = None,
    ) -> RouteMovement:
        walker = ScheduledRouteWalker(
            schedule=schedule,
            stop_table=MappingProxyType(dict(stop_table)),
            path_finder=path_finder,
            clock=clock,
            route_stop_ids=tuple(route_stop_ids) if route_stop_ids is not None else None,
            timing=timing,
        )
        return cls(walker)

    @property
    def source(self) -> PathSource:
        return self._source

    @property
    def is_scheduled(self) -> bool:
        return isinstance(self._source, ScheduledRouteWalker)

    def set_schedule(self, schedule: VehicleSchedule) -> None:
        if not isinstance(self._source, ScheduledRouteWalker):
            raise TypeError("set_schedule() needs a scheduled movement")
        self._source.set_schedule(schedule)

    # ------------ simulation loop API --------------

    def get_initial_location(self) -> Point:
        return self._source.initial_location()

    def get_last_location(self) -> Point | None:
        return self._source.last_location

    def generate_wait_time(self) -> WaitOutcome:
        return self._source.next_wait_time()

    def get_path(self) -> PathOutcome:
        return self._source.next_path()

    def get_stops(self) -> list[Point]:
        return self._source.stops()

    def replicate(self) -> RouteMovement:
        return RouteMovement(self._source.replicate())
