import pytest

from route_sim.domain.entities.route import MapRoute, RouteCatalog
from route_sim.domain.errors import DisconnectedMapError
from route_sim.domain.mechanics.mechanics_speeds import GlobalSpeedSampler
from route_sim.domain.movement.outcomes import NextPath, WaitFor
from route_sim.domain.movement.unscheduled import UnscheduledRouteWalker
from route_sim.policy.wait import FixedWaitPolicy


@pytest.fixture
def walker(stop_table, finder, clock) -> UnscheduledRouteWalker:
    route = MapRoute.from_ids(["A", "B", "C"], stop_table)
    catalog = RouteCatalog([route], first_stop_index=0)
    return UnscheduledRouteWalker(
        route=catalog.prototype_route(),
        catalog=catalog,
        path_finder=finder,
        speed_sampler=GlobalSpeedSampler(12.0),
        wait_policy=FixedWaitPolicy(15.0),
        clock=clock,
    )


def test_initial_location_consumes_first_stop_once(walker, stop_table):
    assert walker.last_location is None
    assert walker.initial_location() == stop_table["A"]
    assert walker.initial_location() == stop_table["A"]  # cached
    assert walker.route.next_index == 1


def test_paths_cycle_through_route(walker, stop_table, finder):
    walker.initial_location()
    ends = []
    for _ in range(4):
        out = walker.next_path()
        assert isinstance(out, NextPath)
        ends.append(out.path.end)
    assert ends == [stop_table[s] for s in ("B", "C", "A", "B")]
    assert finder.calls[0] == (stop_table["A"], stop_table["B"])
    assert walker.last_location == stop_table["B"]


def test_path_waypoints_come_from_oracle_and_speed_from_sampler(walker, stop_table):
    walker.initial_location()
    path = walker.next_path().path
    assert path.waypoints == [stop_table["A"], stop_table["B"]]
    assert path.speed_mps == 12.0
    assert path.total_length_m == pytest.approx(1000.0)


def test_wait_time_comes_from_policy(walker):
    assert walker.next_wait_time() == WaitFor(15.0)


def test_next_path_without_initial_location_starts_at_cursor(walker, stop_table):
    path = walker.next_path().path
    assert path.start == stop_table["A"]
    assert path.end == stop_table["B"]


def test_disconnected_map_is_fatal(stop_table, make_finder, clock):
    finder = make_finder(broken={(stop_table["A"], stop_table["B"])})
    route = MapRoute.from_ids(["A", "B"], stop_table)
    w = UnscheduledRouteWalker(
        route=route,
        catalog=RouteCatalog([route], first_stop_index=0),
        path_finder=finder,
        speed_sampler=GlobalSpeedSampler(10.0),
        wait_policy=FixedWaitPolicy(),
        clock=clock,
    )
    w.initial_location()
    with pytest.raises(DisconnectedMapError, match="isn't fully connected"):
        w.next_path()


def test_replicate_takes_next_catalog_route(stop_table, finder, clock):
    r1 = MapRoute.from_ids(["A", "B"], stop_table)
    r2 = MapRoute.from_ids(["C", "D"], stop_table)
    catalog = RouteCatalog([r1, r2], first_stop_index=0)
    proto = UnscheduledRouteWalker(
        route=catalog.prototype_route(),
        catalog=catalog,
        path_finder=finder,
        speed_sampler=GlobalSpeedSampler(10.0),
        wait_policy=FixedWaitPolicy(),
        clock=clock,
    )
    a, b, c = proto.replicate(), proto.replicate(), proto.replicate()
    assert a.stops()[0] == stop_table["A"]
    assert b.stops()[0] == stop_table["C"]
    assert c.stops()[0] == stop_table["A"]
    assert a.path_finder is proto.path_finder
    assert a.route is not c.route
