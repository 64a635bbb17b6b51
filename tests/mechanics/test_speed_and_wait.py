# tests/mechanics/test_speed_and_wait.py
import numpy as np
import pytest

from route_sim.config.models import (
    PathFinderNetworkModel,
    SpeedSamplerGlobalModel,
    SpeedSamplerUniformModel,
    WaitPolicyExponentialModel,
    WaitPolicyFixedModel,
    WaitPolicyUniformModel,
)
from route_sim.domain.mechanics.mechanics_routers import NetworkPathFinder
from route_sim.domain.mechanics.mechanics_speeds import (
    DistDrawSpeedSampler,
    GlobalSpeedSampler,
    UniformSpeedSampler,
)
from route_sim.policy.wait import ExpWaitPolicy, FixedWaitPolicy, UniformWaitPolicy
from route_sim.runtime.registries import make_path_finder, make_speed, make_wait_policy


@pytest.fixture
def rng():
    return np.random.default_rng(11)


def test_global_speed_is_constant():
    s = GlobalSpeedSampler(12.5)
    assert s.speed_mps(0.0) == s.speed_mps(3600.0) == 12.5


def test_uniform_speed_stays_in_range(rng):
    s = UniformSpeedSampler(rng, 5.0, 9.0)
    draws = [s.speed_mps(0.0) for _ in range(200)]
    assert min(draws) >= 5.0 and max(draws) <= 9.0
    assert UniformSpeedSampler(rng, 4.0, 4.0).speed_mps(0.0) == 4.0


@pytest.mark.parametrize(
    "dist,params", [("lognormal", {"mu": 2.0, "sigma": 0.2}), ("gamma", {"k": 4})]
)
def test_distribution_speeds_are_positive(rng, dist, params):
    s = DistDrawSpeedSampler(rng, dist, params, fallback_mps=9.0)
    assert all(s.speed_mps(0.0) >= 0.1 for _ in range(100))


def test_unknown_distribution_uses_fallback(rng):
    assert DistDrawSpeedSampler(rng, "weibull", {}, fallback_mps=9.0).speed_mps(0.0) == 9.0


def test_wait_policies(rng):
    assert FixedWaitPolicy(20.0).wait_s() == 20.0
    u = UniformWaitPolicy(rng, 10.0, 30.0)
    assert all(10.0 <= u.wait_s() <= 30.0 for _ in range(100))
    assert UniformWaitPolicy(rng, 7.0, 7.0).wait_s() == 7.0
    e = ExpWaitPolicy(rng, mean_s=60.0, min_s=5.0, max_s=90.0)
    assert all(5.0 <= e.wait_s() <= 90.0 for _ in range(200))


def test_same_seed_same_draws():
    a = UniformWaitPolicy(np.random.default_rng(3), 0.0, 100.0)
    b = UniformWaitPolicy(np.random.default_rng(3), 0.0, 100.0)
    assert [a.wait_s() for _ in range(5)] == [b.wait_s() for _ in range(5)]


def test_registries_build_from_models(rng):
    assert isinstance(make_speed(SpeedSamplerGlobalModel(v_mps=3.0), rng=rng), GlobalSpeedSampler)
    assert isinstance(make_speed(SpeedSamplerUniformModel(), rng=rng), UniformSpeedSampler)
    assert isinstance(make_wait_policy(WaitPolicyFixedModel(wait_s=1.0), rng=rng), FixedWaitPolicy)
    wait = make_wait_policy(WaitPolicyUniformModel(max_s=2.0), rng=rng)
    assert isinstance(wait, UniformWaitPolicy)
    assert isinstance(make_wait_policy(WaitPolicyExponentialModel(), rng=rng), ExpWaitPolicy)


def test_network_finder_takes_prebuilt_graph():
    import networkx as nx

    G = nx.Graph()
    G.add_node("a", x=0.0, y=0.0)
    cfg = PathFinderNetworkModel(graph={"file": "unused.pkl"})
    f = make_path_finder(cfg, deps={"graph": G})
    assert isinstance(f, NetworkPathFinder)
    assert f.G is G
