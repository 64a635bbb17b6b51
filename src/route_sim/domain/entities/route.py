# route_sim/domain/entities/route.py
from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Literal

from route_sim.domain.entities.geography import Point, resolve_stops
from route_sim.domain.errors import ConfigurationError

RouteType = Literal["circular", "ping_pong"]


@dataclass
class MapRoute:
    """
    Ordered stops plus a per-entity cursor.
    circular:  0, 1, ..., n-1, 0, 1, ...
    ping_pong: 0, 1, ..., n-1, n-2, ..., 1, 0, 1, ...
    The stop tuple is shared between replicas; only the cursor is copied.
    """

    stops: tuple[Point, ...]
    route_type: RouteType = "circular"
    stop_ids: tuple[str, ...] | None = None
    next_index: int = 0
    direction: int = field(default=1, repr=False)

    def __post_init__(self):
        if not self.stops:
            raise ConfigurationError("route must have at least one stop")
        if self.route_type not in ("circular", "ping_pong"):
            raise ConfigurationError(f"unknown route type {self.route_type!r}")
        self.set_next_index(self.next_index)

    @classmethod
    def from_ids(
        cls, ids: Sequence[str], table: Mapping[str, Point], route_type: RouteType = "circular"
    ) -> MapRoute:
        return cls(tuple(resolve_stops(ids, table)), route_type, stop_ids=tuple(ids))

    @property
    def n_stops(self) -> int:
        return len(self.stops)

    def set_next_index(self, index: int) -> None:
        if not 0 <= index < len(self.stops):
            raise ConfigurationError(
                f"stop index {index} out of range for route with {len(self.stops)} stops"
            )
        self.next_index = index

    def next_stop(self) -> Point:
        stop = self.stops[self.next_index]
        n = len(self.stops)
        if n == 1:
            return stop
        if self.route_type == "circular":
            self.next_index = (self.next_index + 1) % n
        else:
            self.next_index += self.direction
            if not 0 <= self.next_index < n:
                self.direction = -self.direction
                self.next_index += 2 * self.direction
        return stop

    def get_stops(self) -> list[Point]:
        return list(self.stops)

    def replicate(self) -> MapRoute:
        return MapRoute(
            self.stops,
            self.route_type,
            stop_ids=self.stop_ids,
            next_index=self.next_index,
            direction=self.direction,
        )


class RouteCatalog:
    """
    Routes shared by one group of entities.

    Hands out per-entity route copies in round-robin order. The counter is
    state of this catalog only; two catalogs never influence each other.
    """

    def __init__(
        self,
        routes: Sequence[MapRoute],
        *,
        first_stop_index: int | None = None,
        rng=None,
    ):
        if not routes:
            raise ConfigurationError("route catalog needs at least one route")
        self.routes = tuple(routes)
        # negative means "random", same as not configured
        if first_stop_index is not None and first_stop_index < 0:
            first_stop_index = None
        if first_stop_index is not None:
            shortest = min(r.n_stops for r in self.routes)
            if first_stop_index >= shortest:
                raise ConfigurationError(
                    f"Too high first stop's index ({first_stop_index}) "
                    f"for route with only {shortest} stops"
                )
        elif rng is None:
            raise ConfigurationError("random first stop placement needs an rng")
        self.first_stop_index = first_stop_index
        self.rng = rng
        self.next_route_index = 0

    def __len__(self) -> int:
        return len(self.routes)

    def prototype_route(self) -> MapRoute:
        """Copy of the current route, cursor untouched and counter not advanced."""
        return self.routes[self.next_route_index].replicate()

    def checkout(self) -> MapRoute:
        route = self.routes[self.next_route_index].replicate()
        route.set_next_index(self._first_index(route))
        self.next_route_index = (self.next_route_index + 1) % len(self.routes)
        return route

    def _first_index(self, route: MapRoute) -> int:
        if self.first_stop_index is not None:
            return self.first_stop_index
        n = route.n_stops
        return int(self.rng.integers(0, n - 1)) if n > 1 else 0
