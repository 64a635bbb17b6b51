# app/events.py
from dataclasses import dataclass

from route_sim.sim.event import BaseEvent


@dataclass(order=True)
class SpawnEntity(BaseEvent):
    entity_id: int


@dataclass(order=True)
class PathDue(BaseEvent):
    """Entity has finished waiting and asks its movement model for a path."""

    entity_id: int
    leg: int  # versioning to make stale events harmless


@dataclass(order=True)
class LegArrive(BaseEvent):
    entity_id: int
    leg: int
