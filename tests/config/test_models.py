# tests/config/test_models.py
import pytest
from pydantic import ValidationError

from route_sim.config.models import (
    PathFinderManhattanModel,
    PathFinderStraightModel,
    ScenarioModel,
    ScheduledMovementModel,
    UnscheduledMovementModel,
    WaitPolicyUniformModel,
)

STOPS = {"A": (0.0, 0.0), "B": (1000.0, 0.0), "C": (1000.0, 500.0)}


def scenario(movement, **over):
    d = {
        "name": "cfg",
        "run_id": "r1",
        "sim": {"duration": 600},
        "stops": STOPS,
        "movement": movement,
    }
    d.update(over)
    return d


def test_movement_kind_selects_model():
    m = ScenarioModel.model_validate(scenario({"kind": "unscheduled", "routes": [["A", "B"]]}))
    assert isinstance(m.movement, UnscheduledMovementModel)
    assert isinstance(m.path_finder, PathFinderStraightModel)
    assert m.movement.first_stop_index is None

    m = ScenarioModel.model_validate(
        scenario(
            {
                "kind": "scheduled",
                "vehicles": [
                    {"vehicle_id": "v1", "trips": [[{"stop_id": "A", "arr_t": 0, "dep_t": 5}]]}
                ],
            },
            path_finder={"kind": "manhattan"},
        )
    )
    assert isinstance(m.movement, ScheduledMovementModel)
    assert isinstance(m.path_finder, PathFinderManhattanModel)
    assert m.movement.timing.fallback_speed_mps == 16.7
    assert m.movement.timing.max_plausible_speed_mps == 33.3
    assert m.movement.timing.max_lateness_s == 60.0


def test_unknown_stop_ids_are_rejected():
    with pytest.raises(ValidationError, match="unknown stop ids"):
        ScenarioModel.model_validate(scenario({"kind": "unscheduled", "routes": [["A", "Q"]]}))


def test_unknown_route_stop_ids_are_rejected():
    mv = {
        "kind": "scheduled",
        "vehicles": [
            {
                "vehicle_id": "v1",
                "trips": [[{"stop_id": "A", "arr_t": 0, "dep_t": 0}]],
                "route_stop_ids": ["A", "Z"],
            }
        ],
    }
    with pytest.raises(ValidationError, match="Z"):
        ScenarioModel.model_validate(scenario(mv))


def test_first_stop_index_must_fit_shortest_route():
    with pytest.raises(ValidationError, match="Too high first stop's index"):
        UnscheduledMovementModel(routes=[["A", "B", "C"], ["A", "B"]], first_stop_index=2)
    ok = UnscheduledMovementModel(routes=[["A", "B", "C"], ["A", "B"]], first_stop_index=1)
    assert ok.first_stop_index == 1
    assert UnscheduledMovementModel(routes=[["A"]], first_stop_index=-1).first_stop_index == -1


def test_empty_routes_and_trips_are_rejected():
    with pytest.raises(ValidationError):
        UnscheduledMovementModel(routes=[])
    with pytest.raises(ValidationError, match="route 0 has no stops"):
        UnscheduledMovementModel(routes=[[]])
    with pytest.raises(ValidationError, match="trip 0 has no visits"):
        ScheduledMovementModel(vehicles=[{"vehicle_id": "v", "trips": [[]]}])


def test_vehicle_ids_must_be_unique():
    trip = [[{"stop_id": "A", "arr_t": 0, "dep_t": 0}]]
    with pytest.raises(ValidationError, match="unique"):
        ScheduledMovementModel(
            vehicles=[{"vehicle_id": "v", "trips": trip}, {"vehicle_id": "v", "trips": trip}]
        )


def test_extra_keys_are_forbidden():
    with pytest.raises(ValidationError):
        ScenarioModel.model_validate(
            scenario({"kind": "unscheduled", "routes": [["A"]], "speed": 3})
        )


def test_wait_range_must_be_ordered():
    with pytest.raises(ValidationError):
        WaitPolicyUniformModel(min_s=10.0, max_s=5.0)
    with pytest.raises(ValidationError):
        WaitPolicyUniformModel(min_s=-1.0)
