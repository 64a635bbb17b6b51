# route_sim/policy/wait.py
import numpy as np

from route_sim.app.protocols import WaitTimePolicy


class FixedWaitPolicy(WaitTimePolicy):
    def __init__(self, wait_s: float = 0.0):
        self.wait = wait_s

    def wait_s(self) -> float:
        return self.wait


class UniformWaitPolicy(WaitTimePolicy):
    def __init__(self, rng, min_s: float = 0.0, max_s: float = 0.0):
        self.rng, self.min_s, self.max_s = rng, min_s, max_s

    def wait_s(self) -> float:
        if self.max_s <= self.min_s:
            return self.min_s
        return float(self.rng.uniform(self.min_s, self.max_s))


class ExpWaitPolicy(WaitTimePolicy):
    """Truncated exponential dwell at a stop."""

    def __init__(self, rng, mean_s: float = 30.0, min_s: float = 0.0, max_s: float = 600.0):
        self.rng = rng
        self.mean_s, self.min_s, self.max_s = mean_s, min_s, max_s

    def wait_s(self) -> float:
        return float(np.clip(self.rng.exponential(self.mean_s), self.min_s, self.max_s))
