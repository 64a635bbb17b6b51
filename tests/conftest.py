# tests/conftest.py
import pytest

from route_sim.domain.entities.geography import Point
from route_sim.domain.mechanics.mechanics_routers import StraightLinePathFinder
from route_sim.sim.clock import SimClock


class RecordingPathFinder(StraightLinePathFinder):
    """Straight-line oracle that remembers its queries; `broken` pairs are unreachable."""

    def __init__(self, broken: set[tuple[Point, Point]] | None = None):
        self.calls: list[tuple[Point, Point]] = []
        self.broken = broken or set()

    def shortest_path(self, a, b):
        self.calls.append((a, b))
        if (a, b) in self.broken:
            return []
        return super().shortest_path(a, b)


@pytest.fixture
def clock() -> SimClock:
    return SimClock.utc_epoch(2025, 1, 1)


@pytest.fixture
def finder() -> RecordingPathFinder:
    return RecordingPathFinder()


@pytest.fixture
def stop_table() -> dict[str, Point]:
    return {
        "A": Point(0.0, 0.0),
        "B": Point(1000.0, 0.0),
        "C": Point(1000.0, 500.0),
        "D": Point(0.0, 500.0),
    }


@pytest.fixture
def make_finder():
    return RecordingPathFinder
