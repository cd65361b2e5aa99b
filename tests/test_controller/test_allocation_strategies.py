import pytest

from controller.algorithms import (
    IdleFirstNearestStrategy,
    NearestCarStrategy,
    create_allocation_strategy,
)
from simulator.core.request import Direction, ElevatorSnapshot, Request


def snapshot(elevator_id, floor, direction=Direction.IDLE, up=(), down=()):
    return ElevatorSnapshot(
        elevator_id=elevator_id,
        name=f"Elevator_{elevator_id}",
        current_floor=floor,
        direction=direction,
        state="IDLE" if direction is Direction.IDLE else f"MOVING_{direction.value}",
        up_stops=tuple(up),
        down_stops=tuple(down),
    )


class TestIdleFirstNearest:
    def test_idle_before_busy(self):
        strategy = IdleFirstNearestStrategy()
        snapshots = [snapshot(1, 1, up=(9,)), snapshot(2, 1)]

        assert strategy.select_elevator(Request.external(5, "UP"), snapshots) == 2

    def test_fallback_to_nearest_busy(self):
        strategy = IdleFirstNearestStrategy()
        snapshots = [snapshot(1, 1, Direction.UP, up=(3,)), snapshot(2, 10, Direction.DOWN, down=(2,))]

        assert strategy.select_elevator(Request.external(7, "UP"), snapshots) == 2

    def test_tie_keeps_first(self):
        strategy = IdleFirstNearestStrategy()
        snapshots = [snapshot(1, 2, up=(8,)), snapshot(2, 8, down=(2,))]

        assert strategy.select_elevator(Request.external(5, "DOWN"), snapshots) == 1

    def test_empty_bank_is_an_error(self):
        with pytest.raises(ValueError):
            IdleFirstNearestStrategy().select_elevator(Request.external(5, "UP"), [])


class TestNearestCar:
    def test_car_moving_toward_call_in_same_direction(self):
        strategy = NearestCarStrategy(num_floors=10)
        snapshots = [snapshot(1, 2, Direction.UP, up=(9,)), snapshot(2, 9)]

        # 4 floors ahead of car 1 versus 3 floors for idle car 2
        assert strategy.select_elevator(Request.external(6, "UP"), snapshots) == 2
        # Car 1 is 1 floor away in its direction of travel
        assert strategy.select_elevator(Request.external(3, "UP"), snapshots) == 1

    def test_call_behind_car_costs_a_round_trip(self):
        strategy = NearestCarStrategy(num_floors=10)

        # UP car at 6 must reach the top and come back down to 4: 4 + 6
        assert strategy._calculate_circular_distance(6, Direction.UP, 4, Direction.UP) == 10
        # DOWN car at 6 must reach floor 1 and come back up to 8: 5 + 7
        assert strategy._calculate_circular_distance(6, Direction.DOWN, 8, Direction.DOWN) == 12
        assert strategy._calculate_circular_distance(6, Direction.IDLE, 8, Direction.DOWN) == 2

    def test_strategy_names(self):
        assert "Nearest Car" in NearestCarStrategy().get_strategy_name()
        assert "Idle First" in IdleFirstNearestStrategy().get_strategy_name()


def test_create_allocation_strategy_by_name():
    assert isinstance(create_allocation_strategy("IdleFirstNearest"), IdleFirstNearestStrategy)
    strategy = create_allocation_strategy("NearestCar", num_floors=20)
    assert isinstance(strategy, NearestCarStrategy)
    assert strategy.num_floors == 20


def test_create_allocation_strategy_rejects_unknown_name():
    with pytest.raises(ValueError, match="Unknown allocation strategy"):
        create_allocation_strategy("Random")
