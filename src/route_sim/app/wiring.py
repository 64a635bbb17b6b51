# route_sim/app/wiring.py
from route_sim.app.controllers.movement import MovementHandler
from route_sim.app.events import LegArrive, PathDue, SpawnEntity
from route_sim.sim.kernel import Kernel


def wire(kernel: Kernel, *, movement: MovementHandler) -> None:
    k = kernel

    k.on(SpawnEntity, movement.on_spawn)  # initial location + first wait
    k.on(PathDue, movement.on_path_due)  # wait over -> next path (or retire)
    k.on(LegArrive, movement.on_leg_arrive)  # end of path -> next wait
