import pytest

from route_sim.domain.entities.geography import Point
from route_sim.domain.entities.route import MapRoute
from route_sim.domain.errors import ConfigurationError, UnknownStopError

P = [Point(float(i), 0.0) for i in range(5)]


@pytest.mark.parametrize("n", [1, 2, 5])
def test_circular_route_has_period_n(n):
    r = MapRoute(tuple(P[:n]))
    first = [r.next_stop() for _ in range(n)]
    assert sorted(first, key=lambda p: p.x) == P[:n]  # each stop exactly once
    second = [r.next_stop() for _ in range(n)]
    assert first == second


def test_circular_route_starts_from_configured_index():
    r = MapRoute(tuple(P[:4]), next_index=2)
    assert [r.next_stop().x for _ in range(5)] == [2, 3, 0, 1, 2]


def test_ping_pong_reverses_at_both_ends():
    r = MapRoute(tuple(P[:4]), route_type="ping_pong")
    assert [r.next_stop().x for _ in range(8)] == [0, 1, 2, 3, 2, 1, 0, 1]


def test_ping_pong_single_stop_stays_put():
    r = MapRoute((P[0],), route_type="ping_pong")
    assert [r.next_stop() for _ in range(3)] == [P[0]] * 3


def test_replicate_copies_cursor_but_shares_stops():
    r = MapRoute(tuple(P[:3]))
    r.next_stop()
    c = r.replicate()
    assert c.stops is r.stops
    assert c.next_index == 1
    c.next_stop()
    assert r.next_index == 1  # original untouched


def test_empty_route_and_bad_index_are_rejected():
    with pytest.raises(ConfigurationError):
        MapRoute(())
    with pytest.raises(ConfigurationError):
        MapRoute(tuple(P[:2]), next_index=2)
    with pytest.raises(ConfigurationError):
        MapRoute(tuple(P[:2]), route_type="zigzag")


def test_from_ids_resolves_through_stop_table(stop_table):
    r = MapRoute.from_ids(["A", "C"], stop_table)
    assert r.get_stops() == [stop_table["A"], stop_table["C"]]
    assert r.stop_ids == ("A", "C")
    with pytest.raises(UnknownStopError):
        MapRoute.from_ids(["A", "Z"], stop_table)
