import os
from typing import Annotated, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PositiveFloat,
    ValidationInfo,
    field_validator,
    model_validator,
)


class SimModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    epoch: tuple[int, int, int, int, int, int] = (1970, 1, 1, 0, 0, 0)
    seed: int = 0
    duration: int  # seconds


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = 1


# ----------------- PATH FINDERS ---------------------


class GraphByPath(BaseModel):
    model_config = ConfigDict(extra="forbid")
    by: Literal["path"] = "path"
    file: str
    fmt: Literal["pickle", "graphml"] = "pickle"

    @field_validator("file")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))


class PathFinderStraightModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["straight"] = "straight"


class PathFinderManhattanModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["manhattan"] = "manhattan"


class PathFinderNetworkModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["network"] = "network"
    graph: GraphByPath
    weight: str = "length_m"


PathFinderUnion = Annotated[
    PathFinderStraightModel | PathFinderManhattanModel | PathFinderNetworkModel,
    Field(discriminator="kind"),
]

# ----------------- SPEED SAMPLERS ---------------------


class SpeedSamplerGlobalModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["global"] = "global"
    v_mps: PositiveFloat = 8.94


class SpeedSamplerUniformModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["uniform"] = "uniform"
    min_mps: PositiveFloat = 7.0
    max_mps: PositiveFloat = 10.0

    @model_validator(mode="after")
    def _ordered(self):
        if self.max_mps < self.min_mps:
            raise ValueError("max_mps must be >= min_mps")
        return self


class SpeedSamplerDistributionModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["distribution"] = "distribution"
    dist: Literal["lognormal", "gamma"]
    params: dict[str, float] = Field(default_factory=dict)
    fallback_mps: PositiveFloat = 8.94


SpeedSamplerUnion = Annotated[
    SpeedSamplerGlobalModel | SpeedSamplerUniformModel | SpeedSamplerDistributionModel,
    Field(discriminator="kind"),
]

# ----------------- WAIT POLICIES ---------------------


class WaitPolicyFixedModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["fixed"] = "fixed"
    wait_s: float = 0.0

    @field_validator("wait_s")
    def _nonneg(cls, v: float, info: ValidationInfo) -> float:
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v


class WaitPolicyUniformModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["uniform"] = "uniform"
    min_s: float = 0.0
    max_s: float = 0.0

    @field_validator("min_s", "max_s")
    def _nonneg(cls, v: float, info: ValidationInfo) -> float:
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v

    @model_validator(mode="after")
    def _ordered(self):
        if self.max_s < self.min_s:
            raise ValueError("max_s must be >= min_s")
        return self


class WaitPolicyExponentialModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["exponential"] = "exponential"
    mean_s: PositiveFloat = 30.0
    min_s: float = 0.0
    max_s: float = 600.0


WaitPolicyUnion = Annotated[
    WaitPolicyFixedModel | WaitPolicyUniformModel | WaitPolicyExponentialModel,
    Field(discriminator="kind"),
]

# ----------------- MOVEMENT ---------------------


class TimingModel(BaseModel):
    """Tuning constants for timetable legs; defaults assume meters and seconds."""

    model_config = ConfigDict(extra="forbid")
    fallback_speed_mps: PositiveFloat = 16.7
    max_plausible_speed_mps: PositiveFloat = 33.3
    max_lateness_s: PositiveFloat = 60.0


class UnscheduledMovementModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["unscheduled"] = "unscheduled"
    routes: list[list[str]] = Field(min_length=1)
    route_type: Literal["circular", "ping_pong"] = "circular"
    first_stop_index: int | None = None  # None or negative => random
    entities: int = Field(default=1, ge=1)
    speed_sampler: SpeedSamplerUnion = Field(default_factory=SpeedSamplerGlobalModel)
    wait_policy: WaitPolicyUnion = Field(default_factory=WaitPolicyFixedModel)

    @model_validator(mode="after")
    def _check_routes(self):
        for i, r in enumerate(self.routes):
            if not r:
                raise ValueError(f"route {i} has no stops")
        idx = self.first_stop_index
        if idx is not None and idx >= 0:
            shortest = min(len(r) for r in self.routes)
            if idx >= shortest:
                raise ValueError(
                    f"Too high first stop's index ({idx}) for route with only {shortest} stops"
                )
        return self

    def stop_ids(self) -> set[str]:
        return {s for r in self.routes for s in r}


class StopVisitModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    stop_id: str
    arr_t: float
    dep_t: float


class VehicleScheduleModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    vehicle_id: str
    trips: list[list[StopVisitModel]] = Field(min_length=1)
    route_stop_ids: list[str] | None = None

    @field_validator("trips")
    @classmethod
    def _non_empty_trips(cls, v):
        for i, trip in enumerate(v):
            if not trip:
                raise ValueError(f"trip {i} has no visits")
        return v

    def stop_ids(self) -> set[str]:
        ids = {s.stop_id for trip in self.trips for s in trip}
        return ids | set(self.route_stop_ids or ())


class ScheduledMovementModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["scheduled"] = "scheduled"
    vehicles: list[VehicleScheduleModel] = Field(min_length=1)
    timing: TimingModel = Field(default_factory=TimingModel)

    @model_validator(mode="after")
    def _unique_vehicles(self):
        ids = [v.vehicle_id for v in self.vehicles]
        if len(ids) != len(set(ids)):
            raise ValueError("vehicle ids must be unique")
        return self

    def stop_ids(self) -> set[str]:
        return set().union(*(v.stop_ids() for v in self.vehicles))


MovementUnion = Annotated[
    UnscheduledMovementModel | ScheduledMovementModel, Field(discriminator="kind")
]


# ------------------------------------------------------------------


class ScenarioModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    run_id: str
    sim: SimModel
    log: LogModel = LogModel()
    stops: dict[str, tuple[float, float]] = Field(min_length=1)  # id -> (x, y) meters
    path_finder: PathFinderUnion = Field(default_factory=PathFinderStraightModel)
    movement: MovementUnion

    @model_validator(mode="after")
    def _stops_known(self):
        missing = sorted(self.movement.stop_ids() - self.stops.keys())
        if missing:
            raise ValueError(f"unknown stop ids: {missing}")
        return self
