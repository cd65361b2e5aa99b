"""
Simulation Configuration

Physical specifications of the bank and the timed request script.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from simulator.core.elevator import SERVICE_POLICIES
from simulator.core.request import Direction, Request


@dataclass
class BuildingConfig:
    """Building specifications (informational, requests are not bounds-checked)"""
    num_floors: int = 10

    def __post_init__(self):
        if self.num_floors < 2:
            raise ValueError("num_floors must be at least 2")


@dataclass
class ElevatorConfig:
    """Elevator specifications"""
    num_elevators: int = 3
    start_floor: int = 1  # Ground floor
    start_floors: Optional[List[int]] = None  # Per-elevator start floors
    floor_travel_time: float = 0.4  # seconds per floor
    service_policy: str = "FIXED_PRIORITY"

    def __post_init__(self):
        if self.num_elevators < 1:
            raise ValueError("num_elevators must be at least 1")
        if self.floor_travel_time < 0:
            raise ValueError("floor_travel_time cannot be negative")
        if self.service_policy not in SERVICE_POLICIES:
            raise ValueError(f"service_policy must be one of {SERVICE_POLICIES}")
        if self.start_floors is not None:
            if len(self.start_floors) != self.num_elevators:
                raise ValueError(f"start_floors list length ({len(self.start_floors)}) must match num_elevators ({self.num_elevators})")


@dataclass
class DoorConfig:
    """Door specifications"""
    dwell_time: float = 0.3  # seconds between opening and closing

    def __post_init__(self):
        if self.dwell_time < 0:
            raise ValueError("dwell_time cannot be negative")


def _is_int(value) -> bool:
    # bool is an int subclass but never a floor or an id
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class ScenarioRequest:
    """One scripted request, issued `at` seconds after the simulation starts"""
    at: float
    type: str  # external, internal
    floor: int
    direction: Optional[str] = None  # external only
    elevator_id: Optional[int] = None  # internal only

    def __post_init__(self):
        if self.at < 0:
            raise ValueError("request time 'at' cannot be negative")
        if not _is_int(self.floor):
            raise ValueError(f"request at {self.at}s needs an integer floor, got {self.floor!r}")
        if self.type == 'external':
            if self.direction is None:
                raise ValueError(f"external request at {self.at}s needs a direction")
            if Direction.parse(self.direction) is Direction.IDLE:
                raise ValueError("external request direction must be UP or DOWN")
        elif self.type == 'internal':
            if self.elevator_id is None:
                raise ValueError(f"internal request at {self.at}s needs an elevator_id")
            if not _is_int(self.elevator_id):
                raise ValueError(f"internal request at {self.at}s needs an integer elevator_id, "
                                 f"got {self.elevator_id!r}")
        else:
            raise ValueError(f"request type must be 'external' or 'internal', got {self.type!r}")

    def to_request(self) -> Request:
        if self.type == 'external':
            return Request.external(self.floor, self.direction)
        return Request.car_call(self.elevator_id, self.floor)

    def to_dict(self) -> Dict[str, Any]:
        result = {'at': self.at, 'type': self.type, 'floor': self.floor}
        if self.direction is not None:
            result['direction'] = self.direction
        if self.elevator_id is not None:
            result['elevator_id'] = self.elevator_id
        return result


@dataclass
class ScenarioConfig:
    """Timed request script"""
    requests: List[ScenarioRequest] = field(default_factory=list)
    duration: float = 10.0  # seconds to run after the first request

    def __post_init__(self):
        if self.duration <= 0:
            raise ValueError("duration must be positive")
        self.requests = sorted(self.requests, key=lambda r: r.at)


@dataclass
class SimulationConfig:
    """
    Complete simulation configuration

    Combines building, elevator, door and scenario settings.
    """
    building: BuildingConfig
    elevator: ElevatorConfig
    door: DoorConfig
    scenario: ScenarioConfig

    # Simulation control
    realtime_factor: float = 1.0  # 1.0 = realtime, 0.0 = as fast as possible
    event_log: Optional[str] = None  # JSON Lines output path
    plot: bool = False  # Save a trajectory diagram at the end
    verbose: bool = False  # Echo every broker publish

    def __post_init__(self):
        if self.realtime_factor < 0:
            raise ValueError("realtime_factor cannot be negative")

    @classmethod
    def from_dict(cls, data: dict) -> 'SimulationConfig':
        """Create SimulationConfig from dictionary"""
        sim_data = data.get('simulation', data)

        building_data = sim_data.get('building', {})
        building = BuildingConfig(
            num_floors=building_data.get('num_floors', 10)
        )

        elevator_data = sim_data.get('elevator', {})
        elevator = ElevatorConfig(
            num_elevators=elevator_data.get('num_elevators', 3),
            start_floor=elevator_data.get('start_floor', 1),
            start_floors=elevator_data.get('start_floors'),
            floor_travel_time=elevator_data.get('floor_travel_time', 0.4),
            service_policy=elevator_data.get('service_policy', 'FIXED_PRIORITY')
        )

        door_data = sim_data.get('door', {})
        door = DoorConfig(
            dwell_time=door_data.get('dwell_time', 0.3)
        )

        scenario_data = sim_data.get('scenario', {})
        scenario = ScenarioConfig(
            requests=[
                ScenarioRequest(
                    at=item.get('at', 0.0),
                    type=item.get('type', 'external'),
                    floor=item.get('floor'),
                    direction=item.get('direction'),
                    elevator_id=item.get('elevator_id')
                )
                for item in scenario_data.get('requests', [])
            ],
            duration=scenario_data.get('duration', 10.0)
        )

        return cls(
            building=building,
            elevator=elevator,
            door=door,
            scenario=scenario,
            realtime_factor=sim_data.get('realtime_factor', 1.0),
            event_log=sim_data.get('event_log'),
            plot=sim_data.get('plot', False),
            verbose=sim_data.get('verbose', False)
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        result = {
            'simulation': {
                'building': {
                    'num_floors': self.building.num_floors
                },
                'elevator': {
                    'num_elevators': self.elevator.num_elevators,
                    'start_floor': self.elevator.start_floor,
                    'floor_travel_time': self.elevator.floor_travel_time,
                    'service_policy': self.elevator.service_policy
                },
                'door': {
                    'dwell_time': self.door.dwell_time
                },
                'scenario': {
                    'requests': [r.to_dict() for r in self.scenario.requests],
                    'duration': self.scenario.duration
                },
                'realtime_factor': self.realtime_factor,
                'plot': self.plot,
                'verbose': self.verbose
            }
        }

        if self.elevator.start_floors is not None:
            result['simulation']['elevator']['start_floors'] = list(self.elevator.start_floors)
        if self.event_log is not None:
            result['simulation']['event_log'] = self.event_log

        return result

    def validate(self):
        """Validate configuration consistency"""
        num_elevators = self.elevator.num_elevators
        for request in self.scenario.requests:
            if request.type == 'internal' and not (1 <= request.elevator_id <= num_elevators):
                raise ValueError(f"scenario request at {request.at}s addresses elevator {request.elevator_id}, "
                                 f"but only elevators 1..{num_elevators} exist")
