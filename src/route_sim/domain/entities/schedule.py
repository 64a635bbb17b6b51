from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from route_sim.domain.errors import ConfigurationError


@dataclass(frozen=True)
class StopVisit:
    stop_id: str
    arr_t: float  # planned arrival, sim seconds
    dep_t: float  # planned departure, sim seconds


Trip = tuple[StopVisit, ...]


@dataclass(frozen=True)
class VehicleSchedule:
    """Timetable of one vehicle: ordered trips, each an ordered run of visits.

    Visit times are assumed non-decreasing within a trip; this is not checked.
    """

    vehicle_id: str
    trips: tuple[Trip, ...]

    def __post_init__(self):
        if not self.trips:
            raise ConfigurationError(f"schedule of vehicle {self.vehicle_id} has no trips")
        for i, trip in enumerate(self.trips):
            if not trip:
                raise ConfigurationError(f"trip {i} of vehicle {self.vehicle_id} is empty")

    @classmethod
    def from_trips(cls, vehicle_id: str, trips: Iterable[Sequence[StopVisit]]) -> VehicleSchedule:
        return cls(vehicle_id, tuple(tuple(t) for t in trips))

    @property
    def n_trips(self) -> int:
        return len(self.trips)

    def visit(self, trip_index: int, stop_index: int) -> StopVisit:
        return self.trips[trip_index][stop_index]

    def first_visit(self) -> StopVisit:
        return self.trips[0][0]

    def stop_ids(self) -> list[str]:
        """Distinct stop ids in order of first visit."""
        seen: dict[str, None] = {}
        for trip in self.trips:
            for v in trip:
                seen.setdefault(v.stop_id, None)
        return list(seen)
