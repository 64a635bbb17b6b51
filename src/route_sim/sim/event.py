# sim/event.py
from dataclasses import dataclass, field


@dataclass(order=True)
class BaseEvent:
    """Anything the kernel can schedule. Ordered by time only."""

    t: float = field(compare=True)
