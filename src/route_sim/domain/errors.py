# route_sim/domain/errors.py


class MovementError(RuntimeError):
    """Fatal movement condition: the input data or the map is broken."""


class DisconnectedMapError(MovementError):
    def __init__(self, a, b):
        super().__init__(f"No path from {a} to {b}. The simulation map isn't fully connected")
        self.a, self.b = a, b


class UnknownStopError(MovementError, KeyError):
    def __init__(self, stop_id: str):
        super().__init__(f"unknown stop id {stop_id!r}")
        self.stop_id = stop_id

    def __str__(self) -> str:
        return self.args[0]


class TimetableDriftError(MovementError):
    def __init__(self, vehicle_id: str, stop_id: str, budget_s: float):
        super().__init__(
            f"vehicle {vehicle_id} is {-budget_s:.1f}s late for stop {stop_id}; "
            "timetable and simulation clock have drifted apart"
        )
        self.vehicle_id, self.stop_id, self.budget_s = vehicle_id, stop_id, budget_s


class ConfigurationError(ValueError):
    pass
