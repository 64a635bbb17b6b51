# sim/rng.py
from __future__ import annotations

from functools import cache
from zlib import crc32

import numpy as np


def _u32(x: int) -> int:
    return int(x & 0xFFFFFFFF)


def _tag(p: object) -> int:
    if isinstance(p, (int, np.integer)):
        return _u32(int(p))
    s = p if isinstance(p, str) else repr(p)
    return _u32(crc32(s.encode("utf-8")))


class RNGRegistry:
    """
    Deterministic numpy.random.Generator streams keyed by name.
    Entropy path: [master_seed, scenario, worker, name, *parts]; drawing from
    one stream never shifts another, and creation order does not matter.
    """

    def __init__(self, master_seed: int, *, scenario: str | int = 0, worker: int = 0):
        self.master_seed = _u32(master_seed)
        self.scenario_tag = _tag(str(scenario))
        self.worker = _u32(worker)

    @cache
    def _generator(self, key: tuple[int, ...]) -> np.random.Generator:
        entropy = [self.master_seed, self.scenario_tag, self.worker, *key]
        ss = np.random.SeedSequence(entropy=entropy)
        return np.random.Generator(np.random.PCG64(ss))

    def stream(self, name: str) -> np.random.Generator:
        return self._generator((_tag(name),))

    def substream(self, name: str, *parts: object) -> np.random.Generator:
        """e.g. reg.substream("placement", entity_id)"""
        return self._generator((_tag(name), *(_tag(p) for p in parts)))
