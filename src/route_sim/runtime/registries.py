# runtime/registries.py
from collections.abc import Callable
from typing import Any

from route_sim.app.protocols import PathFinder, SpeedSampler, WaitTimePolicy
from route_sim.config.models import (
    PathFinderManhattanModel,
    PathFinderNetworkModel,
    PathFinderStraightModel,
    PathFinderUnion,
    SpeedSamplerDistributionModel,
    SpeedSamplerGlobalModel,
    SpeedSamplerUniformModel,
    SpeedSamplerUnion,
    WaitPolicyExponentialModel,
    WaitPolicyFixedModel,
    WaitPolicyUniformModel,
    WaitPolicyUnion,
)
from route_sim.domain.mechanics.mechanics_routers import (
    ManhattanPathFinder,
    NetworkPathFinder,
    StraightLinePathFinder,
)
from route_sim.domain.mechanics.mechanics_speeds import (
    DistDrawSpeedSampler,
    GlobalSpeedSampler,
    UniformSpeedSampler,
)
from route_sim.policy.wait import ExpWaitPolicy, FixedWaitPolicy, UniformWaitPolicy
from route_sim.runtime.resources import load_graph_from_path

SpeedFactory = Callable[[SpeedSamplerUnion, dict[str, Any]], SpeedSampler]
WaitFactory = Callable[[WaitPolicyUnion, dict[str, Any]], WaitTimePolicy]
PathFinderFactory = Callable[[PathFinderUnion, dict[str, Any]], PathFinder]

_speed_registry: dict[str, SpeedFactory] = {}
_wait_registry: dict[str, WaitFactory] = {}
_path_finder_registry: dict[str, PathFinderFactory] = {}


def _register(registry: dict, kind: str):
    def deco(fn):
        registry[kind] = fn
        return fn

    return deco


def _make(registry: dict, what: str, cfg, deps: dict):
    try:
        factory = registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown {what} kind {cfg.kind!r}") from None
    return factory(cfg, deps)


def register_speed(kind: str):
    return _register(_speed_registry, kind)


def register_wait(kind: str):
    return _register(_wait_registry, kind)


def register_path_finder(kind: str):
    return _register(_path_finder_registry, kind)


def make_speed(cfg: SpeedSamplerUnion, *, rng) -> SpeedSampler:
    return _make(_speed_registry, "speed sampler", cfg, {"rng": rng})


def make_wait_policy(cfg: WaitPolicyUnion, *, rng) -> WaitTimePolicy:
    return _make(_wait_registry, "wait policy", cfg, {"rng": rng})


def make_path_finder(cfg: PathFinderUnion, *, deps: dict | None = None) -> PathFinder:
    return _make(_path_finder_registry, "path finder", cfg, deps or {})


# ------------------- Speed samplers ---------------------------


@register_speed("global")
def _make_global(cfg: SpeedSamplerGlobalModel, deps):
    return GlobalSpeedSampler(cfg.v_mps)


@register_speed("uniform")
def _make_uniform_speed(cfg: SpeedSamplerUniformModel, deps):
    return UniformSpeedSampler(deps["rng"], cfg.min_mps, cfg.max_mps)


@register_speed("distribution")
def _make_dist(cfg: SpeedSamplerDistributionModel, deps):
    return DistDrawSpeedSampler(deps["rng"], cfg.dist, cfg.params, cfg.fallback_mps)


# ------------------- Wait policies ---------------------------


@register_wait("fixed")
def _make_fixed_wait(cfg: WaitPolicyFixedModel, deps):
    return FixedWaitPolicy(cfg.wait_s)


@register_wait("uniform")
def _make_uniform_wait(cfg: WaitPolicyUniformModel, deps):
    return UniformWaitPolicy(deps["rng"], cfg.min_s, cfg.max_s)


@register_wait("exponential")
def _make_exp_wait(cfg: WaitPolicyExponentialModel, deps):
    return ExpWaitPolicy(deps["rng"], cfg.mean_s, cfg.min_s, cfg.max_s)


# ------------------- Path finders ---------------------------


@register_path_finder("straight")
def _make_straight(cfg: PathFinderStraightModel, deps):
    return StraightLinePathFinder()


@register_path_finder("manhattan")
def _make_manhattan(cfg: PathFinderManhattanModel, deps):
    return ManhattanPathFinder()


@register_path_finder("network")
def _make_network(cfg: PathFinderNetworkModel, deps):
    # a prebuilt graph in deps wins over loading from disk
    g = deps["graph"] if "graph" in deps else load_graph_from_path(cfg.graph.file, cfg.graph.fmt)
    return NetworkPathFinder(g, weight=cfg.weight)
