# route_sim/app/controllers/movement.py
import itertools
import logging
from dataclasses import dataclass

from route_sim.app.events import LegArrive, PathDue, SpawnEntity
from route_sim.domain.entities.geography import Path, Point
from route_sim.domain.movement.outcomes import Exhausted, NextPath, WaitFor
from route_sim.domain.movement.route_movement import RouteMovement
from route_sim.io.business_events import (
    EntityRetiredBiz,
    EntitySpawnedBiz,
    PathAssignedBiz,
    StopReachedBiz,
)
from route_sim.io.kernel_logging import KernelLogging
from route_sim.sim.clock import SimClock

log = logging.getLogger(__name__)


def _xy(p: Point | None) -> tuple[float, float] | None:
    return None if p is None else (p.x, p.y)


@dataclass
class EntityState:
    entity_id: int
    movement: RouteMovement
    leg: int = 0
    path: Path | None = None
    retired: str | None = None


class MovementHandler:
    """
    Outer loop for route-following entities:
        spawn -> wait -> PathDue -> get_path -> LegArrive -> wait -> ...
    until the movement model reports it is exhausted.
    """

    def __init__(
        self,
        clock: SimClock,
        *,
        run_id: str = "local",
        logging_hooks: KernelLogging | None = None,
    ):
        self.clock = clock
        self.run_id = run_id
        self.hooks = logging_hooks
        self.entities: dict[int, EntityState] = {}
        self._seq = itertools.count(1)

    def _biz(self, cls, t: float, **fields):
        if self.hooks is not None:
            ev = cls(run_id=self.run_id, t=t, seq=next(self._seq), name=cls.__name__, **fields)
            self.hooks.biz(ev)

    def add(self, entity_id: int, movement: RouteMovement, t: float = 0.0) -> SpawnEntity:
        if entity_id in self.entities:
            raise ValueError(f"entity {entity_id} already registered")
        self.entities[entity_id] = EntityState(entity_id, movement)
        return SpawnEntity(t=t, entity_id=entity_id)

    @property
    def active(self) -> list[int]:
        return [e.entity_id for e in self.entities.values() if e.retired is None]

    # ------------ helpers --------------

    def _retire(self, st: EntityState, outcome: Exhausted, t: float):
        st.retired = outcome.reason
        st.path = None
        log.info(
            "entity_retired",
            extra={"extra": {"entity_id": st.entity_id, "t": t, "reason": outcome.reason}},
        )
        self._biz(EntityRetiredBiz, t, entity_id=st.entity_id, reason=outcome.reason)
        return []

    def _next_wait(self, st: EntityState, t: float) -> PathDue | Exhausted:
        outcome = st.movement.generate_wait_time()
        if isinstance(outcome, Exhausted):
            return outcome
        assert isinstance(outcome, WaitFor)
        st.leg += 1
        # zero or negative waits mean "go now"
        return PathDue(t=t + max(0.0, outcome.seconds), entity_id=st.entity_id, leg=st.leg)

    # ------------ causal event handlers --------------

    def on_spawn(self, ev: SpawnEntity):
        st = self.entities.get(ev.entity_id)
        if st is None or st.retired is not None:
            return []
        loc = st.movement.get_initial_location()
        self._biz(
            EntitySpawnedBiz,
            ev.t,
            entity_id=st.entity_id,
            loc=_xy(loc),
            scheduled=st.movement.is_scheduled,
        )
        nxt = self._next_wait(st, ev.t)
        if isinstance(nxt, Exhausted):
            return self._retire(st, nxt, ev.t)
        return [nxt]

    def on_path_due(self, ev: PathDue):
        st = self.entities.get(ev.entity_id)
        if st is None or st.retired is not None or ev.leg != st.leg:
            return []  # stale
        origin = st.movement.get_last_location()
        outcome = st.movement.get_path()
        if isinstance(outcome, Exhausted):
            return self._retire(st, outcome, ev.t)
        assert isinstance(outcome, NextPath)
        path = outcome.path
        st.path = path
        eta = ev.t + path.travel_time_s()
        self._biz(
            PathAssignedBiz,
            ev.t,
            entity_id=st.entity_id,
            origin=_xy(origin),
            destination=_xy(path.end or origin),
            waypoints=len(path.waypoints),
            distance_m=path.total_length_m,
            speed_mps=path.speed_mps,
            eta_t=eta,
        )
        return [LegArrive(t=eta, entity_id=st.entity_id, leg=st.leg)]

    def on_leg_arrive(self, ev: LegArrive):
        st = self.entities.get(ev.entity_id)
        if st is None or st.retired is not None or ev.leg != st.leg:
            return []
        st.path = None
        nxt = self._next_wait(st, ev.t)
        self._biz(
            StopReachedBiz,
            ev.t,
            entity_id=st.entity_id,
            loc=_xy(st.movement.get_last_location()),
            wait_s=None if isinstance(nxt, Exhausted) else nxt.t - ev.t,
        )
        if isinstance(nxt, Exhausted):
            return self._retire(st, nxt, ev.t)
        return [nxt]
