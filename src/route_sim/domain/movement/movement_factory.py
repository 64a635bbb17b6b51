# route_sim/domain/movement/movement_factory.py
from collections.abc import Mapping

from route_sim.app.protocols import PathFinder, TimeSource
from route_sim.config.models import (
    ScheduledMovementModel,
    TimingModel,
    UnscheduledMovementModel,
    VehicleScheduleModel,
)
from route_sim.domain.entities.geography import Point
from route_sim.domain.entities.route import MapRoute, RouteCatalog
from route_sim.domain.entities.schedule import StopVisit, VehicleSchedule
from route_sim.domain.movement.route_movement import RouteMovement
from route_sim.domain.movement.scheduled import ScheduleTiming
from route_sim.runtime.registries import make_speed, make_wait_policy
from route_sim.sim.rng import RNGRegistry


def stop_table_from(stops: Mapping[str, tuple[float, float]]) -> dict[str, Point]:
    return {sid: Point(float(x), float(y)) for sid, (x, y) in stops.items()}


def schedule_from(cfg: VehicleScheduleModel) -> VehicleSchedule:
    return VehicleSchedule.from_trips(
        cfg.vehicle_id,
        ([StopVisit(v.stop_id, v.arr_t, v.dep_t) for v in trip] for trip in cfg.trips),
    )


def timing_from(cfg: TimingModel) -> ScheduleTiming:
    return ScheduleTiming(
        fallback_speed_mps=cfg.fallback_speed_mps,
        max_plausible_speed_mps=cfg.max_plausible_speed_mps,
        max_lateness_s=cfg.max_lateness_s,
    )


def build_unscheduled(
    cfg: UnscheduledMovementModel,
    *,
    stop_table: Mapping[str, Point],
    path_finder: PathFinder,
    clock: TimeSource,
    rng_registry: RNGRegistry,
) -> list[RouteMovement]:
    routes = [MapRoute.from_ids(ids, stop_table, cfg.route_type) for ids in cfg.routes]
    catalog = RouteCatalog(
        routes,
        first_stop_index=cfg.first_stop_index,
        rng=rng_registry.stream("placement"),
    )
    proto = RouteMovement.unscheduled(
        catalog,
        path_finder=path_finder,
        speed_sampler=make_speed(cfg.speed_sampler, rng=rng_registry.stream("speed_sampling")),
        wait_policy=make_wait_policy(cfg.wait_policy, rng=rng_registry.stream("wait_sampling")),
        clock=clock,
    )
    return [proto.replicate() for _ in range(cfg.entities)]


def build_scheduled(
    cfg: ScheduledMovementModel,
    *,
    stop_table: Mapping[str, Point],
    path_finder: PathFinder,
    clock: TimeSource,
) -> list[RouteMovement]:
    """One entity per vehicle: clone the prototype, then hand it its own timetable."""
    schedules = [schedule_from(v) for v in cfg.vehicles]
    first = cfg.vehicles[0]
    proto = RouteMovement.scheduled(
        schedules[0],
        stop_table=stop_table,
        path_finder=path_finder,
        clock=clock,
        route_stop_ids=first.route_stop_ids,
        timing=timing_from(cfg.timing),
    )
    out = []
    for vcfg, sched in zip(cfg.vehicles, schedules, strict=True):
        m = proto.replicate()
        m.set_schedule(sched)
        m.source.route_stop_ids = tuple(vcfg.route_stop_ids) if vcfg.route_stop_ids else None
        out.append(m)
    return out
