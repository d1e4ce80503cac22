"""Vehicles that move along roads: the generic vehicle, cars and bicycles."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any, Optional

from verkehrssim.behaviour import Behaviour, Driving, Parking
from verkehrssim.events import EndOfRoad, StartDriving
from verkehrssim.simobject import SimulationClock, SimulationObject
from verkehrssim.simuclient import GraphicsError

if TYPE_CHECKING:
    from verkehrssim.simuclient import SimuClient

logger = logging.getLogger(__name__)

BICYCLE_MIN_SPEED = 12.0
BICYCLE_DECAY_DISTANCE = 20.0
BICYCLE_DECAY_FACTOR = 0.9


class Vehicle(SimulationObject):
    """A vehicle with a maximum speed that travels on the road it is assigned to."""

    def __init__(
        self,
        name: str = "",
        max_speed: float = 0.0,
        *,
        clock: Optional[SimulationClock] = None,
        client: Optional["SimuClient"] = None,
    ) -> None:
        super().__init__(name, clock)
        self.max_speed = max_speed if max_speed > 0 else 0.0
        self.total_distance = 0.0
        self.total_time = 0.0
        self.section_distance = 0.0
        self.behaviour: Optional[Behaviour] = None
        self.client = client

    @property
    def road(self) -> Optional[Any]:
        """The road the vehicle is currently on, if any."""
        return None if self.behaviour is None else self.behaviour.road

    def _advance(self) -> Optional[float]:
        """Ask the behaviour how far to move; None if nothing is to be done."""
        if self.behaviour is None:
            return None
        delta = self.clock.time - self.time
        if delta <= 0:
            return None
        return self.behaviour.distance(self, delta)

    def _book(self, distance: float) -> None:
        delta = self.clock.time - self.time
        self.section_distance += distance
        self.total_distance += distance
        self.total_time += delta
        self.time = self.clock.time

    def simulate(self) -> None:
        """Move the vehicle up to the clock's current time."""
        distance = self._advance()
        if distance is None:
            return
        self._book(distance)

    def speed(self) -> float:
        """Current speed in km/h."""
        return self.max_speed

    def refuel(self, amount: float = math.inf) -> float:
        """Add fuel and return how much was taken; a plain vehicle takes none."""
        return 0.0

    def draw(self, road: Any) -> bool:
        """Show the vehicle on the display; a plain vehicle is not drawn."""
        return False

    def new_route(self, road: Any) -> None:
        """Put the vehicle on *road* as a driving vehicle."""
        self.behaviour = Driving(road)
        logger.info("Fahrzeug %s added to road %s", self.name, road.name)
        self.section_distance = 0.0

    def park_on(self, road: Any, start_time: float) -> None:
        """Put the vehicle on *road* parked until *start_time*."""
        self.behaviour = Parking(road, start_time)
        self.section_distance = 0.0

    def start_driving(self) -> None:
        """Signal the road that the vehicle sets off."""
        if self.behaviour is None:
            raise RuntimeError(f"vehicle {self.name!r} is not on a road")
        raise StartDriving(self, self.behaviour.road)

    def assign_from(self, other: "Vehicle") -> "Vehicle":
        """Copy name and maximum speed; id and distances stay this vehicle's own."""
        if other is not self:
            self.name = other.name
            self.max_speed = other.max_speed
        return self

    def format_row(self) -> str:
        return (
            super().format_row()
            + f"{self.speed():<10.2f} | {self.total_distance:<10.2f} | "
        )

    @staticmethod
    def header() -> str:
        return (
            SimulationObject.header()
            + f"{'Max Speed':<10} | {'Mileage':<10} | {'Fuel':<10}{'Current Speed':<15}\n"
            + "-" * 55
        )

    def __lt__(self, other: "Vehicle") -> bool:
        if not isinstance(other, Vehicle):
            return NotImplemented
        return self.total_distance < other.total_distance

    __hash__ = SimulationObject.__hash__


class Car(Vehicle):
    """A car that uses fuel and obeys the road's speed limit."""

    def __init__(
        self,
        name: str = "",
        max_speed: float = 0.0,
        consumption: float = 0.0,
        tank_capacity: float = 50.0,
        *,
        clock: Optional[SimulationClock] = None,
        client: Optional["SimuClient"] = None,
    ) -> None:
        super().__init__(name, max_speed, clock=clock, client=client)
        self.consumption = consumption
        self.tank_capacity = tank_capacity
        self.tank_content = tank_capacity / 2.0

    def simulate(self) -> None:
        """Drive as far as fuel allows; raises EndOfRoad at the road's end."""
        distance = self._advance()
        if distance is None:
            return
        needed = distance / 100.0 * self.consumption
        if needed > self.tank_content:
            distance = self.tank_content / self.consumption * 100.0
            self.tank_content = 0.0
        else:
            self.tank_content -= needed
        self._book(distance)
        road = self.behaviour.road
        if self.section_distance >= road.length:
            raise EndOfRoad(self, road)

    def speed(self) -> float:
        if self.behaviour is not None:
            return min(self.max_speed, self.behaviour.road.speed_limit())
        return self.max_speed

    def refuel(self, amount: float = math.inf) -> float:
        """Fill up by *amount* (default: full) and return what was added."""
        space = self.tank_capacity - self.tank_content
        if amount == math.inf:
            amount = space
        added = min(amount, space)
        self.tank_content += added
        return added

    def draw(self, road: Any) -> bool:
        if self.client is None:
            return False
        try:
            return self.client.draw_car(
                self.name,
                road.name,
                self.total_distance / road.length,
                self.speed(),
                self.tank_content,
            )
        except GraphicsError as exc:
            logger.warning("cannot draw %s: %s", self.name, exc)
            return False

    def format_row(self) -> str:
        return super().format_row() + f"{self.tank_content:<10.2f}{self.speed():<15.2f}"


class Bicycle(Vehicle):
    """A bicycle that slows down by a tenth every 20 km, to no less than 12 km/h."""

    def simulate(self) -> None:
        """Ride up to the clock's current time."""
        super().simulate()

    def speed(self) -> float:
        reductions = int(self.total_distance / BICYCLE_DECAY_DISTANCE)
        current = self.max_speed * BICYCLE_DECAY_FACTOR**reductions
        return max(current, BICYCLE_MIN_SPEED)

    def draw(self, road: Any) -> bool:
        if self.client is None:
            return False
        try:
            return self.client.draw_bike(
                self.name,
                road.name,
                self.total_distance / road.length,
                self.speed(),
            )
        except GraphicsError as exc:
            logger.warning("cannot draw %s: %s", self.name, exc)
            return False

    def format_row(self) -> str:
        return super().format_row() + f"{'-':<10}{self.speed():<15.2f}"