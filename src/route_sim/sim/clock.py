# sim/clock.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

SEC = 1.0
MIN = 60.0
HOUR = 3600.0
DAY = 24 * HOUR


def minutes(x: float) -> float:
    return x * MIN


def hours(x: float) -> float:
    return x * HOUR


@dataclass
class SimClock:
    """
    The single logical clock of a run.
    `now` is simulation seconds since `epoch`; it never goes backwards.
    Movement models only read it, the kernel advances it.
    """

    epoch: datetime  # wall-time of t=0; naive means UTC
    t: float = 0.0

    @classmethod
    def utc_epoch(cls, y: int, m: int, d: int, hh=0, mm=0, ss=0) -> SimClock:
        return cls(datetime(y, m, d, hh, mm, ss, tzinfo=UTC))

    @property
    def now(self) -> float:
        return self.t

    def advance_to(self, t: float) -> None:
        if t < self.t - 1e-9:
            raise RuntimeError(f"time went backwards: {t} < {self.t}")
        self.t = max(self.t, t)

    # wall -> sim seconds
    def to_sim(self, dt: datetime) -> float:
        epoch = self.epoch if self.epoch.tzinfo else self.epoch.replace(tzinfo=UTC)
        dt = dt if dt.tzinfo else dt.replace(tzinfo=UTC)
        return (dt - epoch).total_seconds()

    # sim seconds -> wall
    def to_wall(self, t: float | None = None) -> datetime:
        return self.epoch + timedelta(seconds=self.t if t is None else t)
