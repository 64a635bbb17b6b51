# route_sim/domain/movement/unscheduled.py
from __future__ import annotations

import logging

from route_sim.app.protocols import PathFinder, SpeedSampler, TimeSource, WaitTimePolicy
from route_sim.domain.entities.geography import Path, Point
from route_sim.domain.entities.route import MapRoute, RouteCatalog
from route_sim.domain.errors import DisconnectedMapError
from route_sim.domain.movement.outcomes import NextPath, WaitFor

log = logging.getLogger(__name__)


class UnscheduledRouteWalker:
    """Cycles through the stops of one route forever."""

    def __init__(
        self,
        *,
        route: MapRoute,
        catalog: RouteCatalog,
        path_finder: PathFinder,
        speed_sampler: SpeedSampler,
        wait_policy: WaitTimePolicy,
        clock: TimeSource,
    ):
        self.route = route
        self.catalog = catalog
        self.path_finder = path_finder
        self.speed_sampler = speed_sampler
        self.wait_policy = wait_policy
        self.clock = clock
        self._last: Point | None = None

    @property
    def last_location(self) -> Point | None:
        return self._last

    def next_stop(self) -> Point:
        return self.route.next_stop()

    def stops(self) -> list[Point]:
        return self.route.get_stops()

    def initial_location(self) -> Point:
        if self._last is None:
            self._last = self.route.next_stop()
        return self._last

    def next_wait_time(self) -> WaitFor:
        return WaitFor(self.wait_policy.wait_s())

    def next_path(self) -> NextPath:
        if self._last is None:
            self.initial_location()
        to = self.route.next_stop()
        nodes = self.path_finder.shortest_path(self._last, to)
        # should never fire if the map was checked when it was read
        if not nodes:
            raise DisconnectedMapError(self._last, to)

        p = Path(self.speed_sampler.speed_mps(self.clock.now))
        for node in nodes:
            p.add_waypoint(node)
        log.debug(
            "unscheduled_path",
            extra={"extra": {"to": (to.x, to.y), "waypoints": len(nodes), "speed": p.speed_mps}},
        )
        self._last = to
        return NextPath(p)

    def replicate(self) -> UnscheduledRouteWalker:
        """New walker on the catalog's next route (round-robin)."""
        return UnscheduledRouteWalker(
            route=self.catalog.checkout(),
            catalog=self.catalog,
            path_finder=self.path_finder,
            speed_sampler=self.speed_sampler,
            wait_policy=self.wait_policy,
            clock=self.clock,
        )
