# route_sim/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from route_sim.app.controllers.movement import MovementHandler
from route_sim.app.wiring import wire
from route_sim.config.models import ScenarioModel, UnscheduledMovementModel
from route_sim.domain.movement.movement_factory import (
    build_scheduled,
    build_unscheduled,
    stop_table_from,
)
from route_sim.domain.movement.route_movement import RouteMovement
from route_sim.io.kernel_logging import KernelLogging  # JSON logs
from route_sim.io.recorder import JsonlSink, Recorder, Sink
from route_sim.runtime.registries import make_path_finder
from route_sim.sim.clock import SimClock
from route_sim.sim.hooks import NoopHooks
from route_sim.sim.kernel import Kernel
from route_sim.sim.rng import RNGRegistry


@dataclass
class App:
    kernel: Kernel
    clock: SimClock
    rng: RNGRegistry
    movement: MovementHandler
    entities: list[RouteMovement]
    recorder: Recorder | None
    duration: float

    def run(self) -> int:
        return self.kernel.run(until=self.duration)


def build(
    cfg: ScenarioModel | Mapping,
    *,
    worker: int = 0,
    use_logging: bool = True,
    sinks: list[Sink] | None = None,
    deps: dict | None = None,
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, ScenarioModel) else ScenarioModel.model_validate(cfg)

    # 1) Clock & RNG
    clock = SimClock.utc_epoch(*model.sim.epoch)
    rng_registry = RNGRegistry(model.sim.seed, scenario=model.name, worker=worker)

    # 2) Kernel (with hooks) + recorder for analytics
    recorder = Recorder(*(sinks or [JsonlSink()])) if use_logging else None
    hooks = (
        KernelLogging(
            run_id=model.run_id,
            recorder=recorder,
            clock=clock,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
        if use_logging
        else NoopHooks()
    )
    kernel = Kernel(clock=clock, hooks=hooks)

    # 3) Shared, read-only collaborators
    stop_table = stop_table_from(model.stops)
    path_finder = make_path_finder(model.path_finder, deps=deps)

    # 4) One movement model per entity
    if isinstance(model.movement, UnscheduledMovementModel):
        entities = build_unscheduled(
            model.movement,
            stop_table=stop_table,
            path_finder=path_finder,
            clock=clock,
            rng_registry=rng_registry,
        )
    else:
        entities = build_scheduled(
            model.movement, stop_table=stop_table, path_finder=path_finder, clock=clock
        )

    # 5) Handler + wiring
    movement = MovementHandler(
        clock,
        run_id=model.run_id,
        logging_hooks=hooks if isinstance(hooks, KernelLogging) else None,
    )
    wire(kernel, movement=movement)

    # 6) Seed spawns
    for i, m in enumerate(entities):
        kernel.schedule(movement.add(i, m, t=0.0))

    return App(kernel, clock, rng_registry, movement, entities, recorder, float(model.sim.duration))
