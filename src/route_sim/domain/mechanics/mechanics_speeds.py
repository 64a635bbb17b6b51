from route_sim.app.protocols import SpeedSampler


class GlobalSpeedSampler(SpeedSampler):
    def __init__(self, v_mps: float):
        self.v = v_mps

    def speed_mps(self, t: float, **_):
        return self.v


class UniformSpeedSampler(SpeedSampler):
    """Uniform draw in [min_mps, max_mps] per path."""

    def __init__(self, rng, min_mps: float, max_mps: float):
        self.rng, self.lo, self.hi = rng, min_mps, max_mps

    def speed_mps(self, t: float, **_):
        if self.hi <= self.lo:
            return max(0.1, self.lo)
        return max(0.1, float(self.rng.uniform(self.lo, self.hi)))


class DistDrawSpeedSampler(SpeedSampler):
    def __init__(self, rng, dist: str, params: dict[str, float], fallback_mps: float):
        self.rng, self.dist, self.p, self.fb = rng, dist, params, fallback_mps

    def speed_mps(self, t: float, **_):
        if self.dist == "lognormal":
            return max(
                0.1, float(self.rng.lognormal(self.p.get("mu", 2.0), self.p.get("sigma", 0.25)))
            )
        if self.dist == "gamma":
            k = max(1, int(self.p.get("k", 9)))
            theta = self.p.get("theta", 1.0)
            return max(0.1, float(self.rng.gamma(k, theta)))
        return self.fb
