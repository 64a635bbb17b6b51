# route_sim/domain/movement/scheduled.py
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from route_sim.app.protocols import PathFinder, TimeSource
from route_sim.domain.entities.geography import Path, Point, total_distance
from route_sim.domain.entities.schedule import StopVisit, VehicleSchedule
from route_sim.domain.errors import TimetableDriftError, UnknownStopError
from route_sim.domain.movement.outcomes import NEVER, Exhausted, NextPath, WaitFor

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleTiming:
    # ~60 km/h; used when the timetable leaves no time for a leg
    fallback_speed_mps: float = 16.7
    # ~120 km/h; faster than that usually means a road is missing from the map
    max_plausible_speed_mps: float = 33.3
    max_lateness_s: float = 60.0


# ---------- cursor predicates


def passed_last_stop(trip_index: int, stop_index: int, schedule: VehicleSchedule) -> bool:
    return trip_index >= schedule.n_trips


def is_last_stop(trip_index: int, stop_index: int, schedule: VehicleSchedule) -> bool:
    return (
        trip_index == schedule.n_trips - 1
        and stop_index == len(schedule.trips[trip_index]) - 1
    )


def should_start_next_trip(trip_index: int, stop_index: int, schedule: VehicleSchedule) -> bool:
    if trip_index == schedule.n_trips - 1:
        return False
    return stop_index == len(schedule.trips[trip_index]) - 1


def leg_speed(distance_m: float, budget_s: float) -> float:
    if distance_m == 0 and budget_s == 0:
        return 0.0
    return distance_m / budget_s


class ScheduledRouteWalker:
    """
    Follows a vehicle timetable trip by trip.

    The cursor (trip_index, stop_index) points at the next visit to travel to;
    current_visit is where the vehicle physically is. next_wait_time() moves the
    cursor, next_path() builds the leg current_visit -> cursor.
    """

    def __init__(
        self,
        *,
        schedule: VehicleSchedule,
        stop_table: Mapping[str, Point],
        path_finder: PathFinder,
        clock: TimeSource,
        route_stop_ids: Sequence[str] | None = None,
        timing: ScheduleTiming | None = None,
    ):
        self.schedule = schedule
        self.stop_table = stop_table
        self.path_finder = path_finder
        self.clock = clock
        self.route_stop_ids = route_stop_ids
        self.timing = timing or ScheduleTiming()

        self.trip_index = 0
        self.stop_index = 0
        self.current_visit: StopVisit | None = None
        self._last: Point | None = None

    # ------------ bookkeeping --------------

    @property
    def last_location(self) -> Point | None:
        return self._last

    @property
    def finished(self) -> bool:
        return passed_last_stop(self.trip_index, self.stop_index, self.schedule)

    def _locate(self, stop_id: str) -> Point:
        try:
            return self.stop_table[stop_id]
        except KeyError:
            raise UnknownStopError(stop_id) from None

    def initial_location(self) -> Point:
        self._last = self._locate(self.schedule.first_visit().stop_id)
        return self._last

    def stops(self) -> list[Point]:
        ids = self.route_stop_ids if self.route_stop_ids is not None else self.schedule.stop_ids()
        return [self._locate(i) for i in ids]

    def set_schedule(self, schedule: VehicleSchedule) -> None:
        # cursor is kept; assign before the first next_wait_time()
        self.schedule = schedule

    # ------------ state machine --------------

    def next_wait_time(self) -> WaitFor | Exhausted:
        ti, si, sched = self.trip_index, self.stop_index, self.schedule
        now = self.clock.now

        if passed_last_stop(ti, si, sched):
            return NEVER

        if is_last_stop(ti, si, sched):
            self.trip_index += 1
            return WaitFor(0.0)

        if ti == 0 and si == 0:
            # before start of the schedule; may be negative if the sim starts late
            self.current_visit = sched.visit(0, 0)
            self.stop_index = 1
            return WaitFor(self.current_visit.dep_t - now)

        wait = sched.visit(ti, si).dep_t - now
        if should_start_next_trip(ti, si, sched):
            self.trip_index += 1
            self.stop_index = 0
            return WaitFor(wait)

        self.stop_index += 1
        if wait < 0:
            log.debug(
                "running_late",
                extra={"extra": {"vehicle_id": sched.vehicle_id, "behind_s": -wait, "t": now}},
            )
            wait = 0.0
        return WaitFor(wait)

    def next_path(self) -> NextPath | Exhausted:
        ti, si, sched = self.trip_index, self.stop_index, self.schedule
        if passed_last_stop(ti, si, sched):
            return NEVER
        if si >= len(sched.trips[ti]):
            log.error(
                "malformed_trip",
                extra={"extra": {"vehicle_id": sched.vehicle_id, "trip": ti, "stop": si}},
            )
            return Exhausted("malformed_trip")

        nxt = sched.visit(ti, si)
        cur = self.current_visit or sched.first_visit()
        to = self._locate(nxt.stop_id)
        frm = self._locate(cur.stop_id)

        nodes = self.path_finder.shortest_path(frm, to)
        dist = total_distance(nodes)
        now = self.clock.now

        budget = nxt.arr_t - now
        if budget <= 0:
            if budget <= -self.timing.max_lateness_s:
                raise TimetableDriftError(sched.vehicle_id, nxt.stop_id, budget)
            budget = dist / self.timing.fallback_speed_mps
        speed = leg_speed(dist, budget)

        if speed > self.timing.max_plausible_speed_mps:
            log.warning(
                "speed %.1fkm/h is required for vehicle-%s between stop-%s to stop-%s",
                speed * 3.6,
                sched.vehicle_id,
                cur.stop_id,
                nxt.stop_id,
                extra={
                    "extra": {
                        "vehicle_id": sched.vehicle_id,
                        "from_stop": cur.stop_id,
                        "to_stop": nxt.stop_id,
                        "speed_mps": speed,
                        "t": now,
                    }
                },
            )

        p = Path(speed)
        for node in nodes:
            p.add_waypoint(node)

        self.current_visit = nxt
        self._last = to
        return NextPath(p)

    def replicate(self) -> ScheduledRouteWalker:
        """Fresh cursor on the same (shared) schedule and lookup tables."""
        return ScheduledRouteWalker(
            schedule=self.schedule,
            stop_table=self.stop_table,
            path_finder=self.path_finder,
            clock=self.clock,
            route_stop_ids=self.route_stop_ids,
            timing=self.timing,
        )
