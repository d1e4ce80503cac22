import pytest

from verkehrssim.behaviour import Behaviour, Driving, Parking
from verkehrssim.events import StartDriving
from verkehrssim.simobject import SimulationClock


class FakeVehicle:
    def __init__(self, name="Car", speed=50.0, section=0.0, total=0.0, clock=None):
        self.name = name
        self._speed = speed
        self.section_distance = section
        self.total_distance = total
        self.time = 0.0
        self.clock = clock if clock is not None else SimulationClock()

    def speed(self):
        return self._speed


class FakeRoad:
    def __init__(self, name="Road", length=100.0, barrier=None):
        self.name = name
        self.length = length
        self._barrier = length if barrier is None else barrier

    def barrier(self, vehicle):
        return self._barrier


def test_base_behaviour_drives_speed_times_interval():
    road = FakeRoad(length=100.0)
    vehicle = FakeVehicle(speed=40.0)
    result = Behaviour(road).distance(vehicle, 0.5)
    assert result == pytest.approx(40.0 * 0.5)


def test_base_behaviour_stops_at_road_end():
    road = FakeRoad(length=100.0)
    vehicle = FakeVehicle(speed=1000.0, section=80.0)
    behaviour = Behaviour(road)
    result = behaviour.distance(vehicle, 1.0)
    assert vehicle.section_distance + result == pytest.approx(road.length)
    assert behaviour.last_distance == result


def test_driving_unlimited_barrier_uses_full_distance():
    road = FakeRoad(length=500.0)
    vehicle = FakeVehicle(speed=60.0, section=10.0)
    assert Driving(road).distance(vehicle, 2.0) == pytest.approx(60.0 * 2.0)


def test_driving_stops_at_barrier():
    road = FakeRoad(length=500.0, barrier=120.0)
    vehicle = FakeVehicle(speed=100.0, section=90.0)
    result = Driving(road).distance(vehicle, 1.0)
    assert vehicle.section_distance + result == pytest.approx(120.0)


def test_driving_exactly_reaching_barrier():
    road = FakeRoad(length=100.0)
    vehicle = FakeVehicle(speed=50.0, section=50.0)
    result = Driving(road).distance(vehicle, 1.0)
    assert result == pytest.approx(50.0)


def test_parking_before_start_time_returns_zero():
    clock = SimulationClock()
    clock.advance(0.5)
    vehicle = FakeVehicle(clock=clock)
    parking = Parking(FakeRoad(), 1.0)
    assert parking.distance(vehicle, 0.5) == 0.0
    assert parking.started is False


def test_parking_raises_start_driving_once():
    clock = SimulationClock()
    clock.advance(1.0)
    road = FakeRoad()
    vehicle = FakeVehicle(clock=clock)
    parking = Parking(road, 1.0)
    with pytest.raises(StartDriving) as info:
        parking.distance(vehicle, 1.0)
    assert info.value.vehicle is vehicle
    assert info.value.road is road
    assert vehicle.time == clock.time
    assert parking.started is True


def test_parking_drives_after_start():
    clock = SimulationClock()
    clock.advance(2.0)
    road = FakeRoad(length=100.0)
    vehicle = FakeVehicle(speed=30.0, clock=clock)
    parking = Parking(road, 1.0)
    with pytest.raises(StartDriving):
        parking.distance(vehicle, 0.5)
    assert parking.distance(vehicle, 0.5) == pytest.approx(30.0 * 0.5)