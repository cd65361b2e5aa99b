from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class Direction(Enum):
    UP = "UP"
    DOWN = "DOWN"
    IDLE = "IDLE"

    @classmethod
    def parse(cls, value) -> 'Direction':
        """Accept a Direction or its name in any case ('up', 'DOWN', ...)."""
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).upper()]
        except KeyError:
            raise ValueError(f"Unknown direction: {value!r}") from None


@dataclass(frozen=True)
class Request:
    """
    A floor-service request.

    External (hall) requests carry the direction the caller pressed, which
    is informational only. Internal (car) requests carry the id of the
    elevator whose panel was pressed.
    """
    floor: int
    direction: Direction = Direction.IDLE
    internal: bool = False
    elevator_id: Optional[int] = None

    @classmethod
    def external(cls, floor: int, direction) -> 'Request':
        return cls(floor=floor, direction=Direction.parse(direction), internal=False)

    @classmethod
    def car_call(cls, elevator_id: int, floor: int) -> 'Request':
        return cls(floor=floor, internal=True, elevator_id=elevator_id)

    def __str__(self):
        return (f"Request[floor={self.floor}, direction={self.direction.value}, "
                f"internal={self.internal}]")


@dataclass(frozen=True)
class ElevatorSnapshot:
    """Read-only view of an elevator, taken under its lock."""

    elevator_id: int
    name: str
    current_floor: int
    direction: Direction
    state: str
    up_stops: Tuple[int, ...]  # ascending
    down_stops: Tuple[int, ...]  # descending

    @property
    def has_pending_requests(self) -> bool:
        return bool(self.up_stops or self.down_stops)

    def to_dict(self) -> dict:
        return {
            'elevator_id': self.elevator_id,
            'name': self.name,
            'current_floor': self.current_floor,
            'direction': self.direction.value,
            'state': self.state,
            'up_stops': list(self.up_stops),
            'down_stops': list(self.down_stops),
        }
