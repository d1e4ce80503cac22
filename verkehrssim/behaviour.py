"""How a vehicle moves along the road it is currently assigned to."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from verkehrssim.events import StartDriving

if TYPE_CHECKING:
    from verkehrssim.simobject import SimulationClock

logger = logging.getLogger(__name__)


class _Vehicle(Protocol):
    name: str
    time: float
    clock: "SimulationClock"

    @property
    def section_distance(self) -> float: ...

    @property
    def total_distance(self) -> float: ...

    def speed(self) -> float: ...


class _Road(Protocol):
    name: str

    @property
    def length(self) -> float: ...

    def barrier(self, vehicle: _Vehicle) -> float: ...


class Behaviour:
    """Movement rule of a vehicle on one road.

    The base rule lets the vehicle drive at its current speed but never past
    the end of the road.
    """

    def __init__(self, road: _Road) -> None:
        self.road = road
        self.last_distance = 0.0

    def distance(self, vehicle: _Vehicle, interval: float) -> float:
        """Distance *vehicle* covers in *interval* hours, capped at the road's end."""
        possible = vehicle.speed() * interval
        remaining = self.road.length - vehicle.section_distance
        self.last_distance = min(possible, remaining)
        still_to_go = self.road.length - vehicle.total_distance - self.last_distance
        logger.info("%s can still drive %g", vehicle.name, still_to_go)
        return self.last_distance


class Driving(Behaviour):
    """Driving vehicle that stops at the road's barrier for it.

    The barrier is the end of the road, or the vehicle ahead where
    overtaking is forbidden.
    """

    def distance(self, vehicle: _Vehicle, interval: float) -> float:
        possible = vehicle.speed() * interval
        barrier = self.road.barrier(vehicle)
        if vehicle.section_distance + possible >= barrier:
            possible = barrier - vehicle.section_distance
        still_to_go = barrier - vehicle.section_distance - possible
        logger.info("%s can still drive %g", vehicle.name, still_to_go)
        self.last_distance = possible
        return possible


class Parking(Behaviour):
    """Parked vehicle that waits until *start_time* before it sets off."""

    def __init__(self, road: _Road, start_time: float) -> None:
        super().__init__(road)
        self.start_time = start_time
        self.started = False

    def distance(self, vehicle: _Vehicle, interval: float) -> float:
        """Zero while parked; raises :class:`StartDriving` once when it is time."""
        now = vehicle.clock.time
        if now < self.start_time:
            logger.info("Fahrzeug %s is parked, start time not reached", vehicle.name)
            return 0.0
        if not self.started:
            logger.info("Fahrzeug %s starts driving", vehicle.name)
            self.started = True
            vehicle.time = now
            raise StartDriving(vehicle, self.road)
        return super().distance(vehicle, interval)