"""Roads that carry vehicles and drive their simulation."""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import TYPE_CHECKING, Optional, Set, Tuple

from verkehrssim.deferred import DeferredList
from verkehrssim.events import VehicleEvent
from verkehrssim.simobject import SimulationClock, SimulationObject

if TYPE_CHECKING:
    from verkehrssim.vehicles import Vehicle

logger = logging.getLogger(__name__)


class SpeedLimit(Enum):
    """Speed limit category of a road."""

    UNLIMITED = 0
    LANDSTRASSE = 1
    INNERORTS = 2

    @property
    def km_h(self) -> float:
        """The limit in km/h; an unlimited road allows the largest float."""
        if self is SpeedLimit.LANDSTRASSE:
            return 100.0
        if self is SpeedLimit.INNERORTS:
            return 50.0
        return sys.float_info.max


class Road(SimulationObject):
    """A road of a given length holding the vehicles that travel on it.

    Changes to the vehicle list are deferred and take effect at the start and
    end of :meth:`simulate`, so vehicles may leave or join during a step.
    """

    def __init__(
        self,
        name: str = "",
        length: float = 0.0,
        limit: SpeedLimit = SpeedLimit.UNLIMITED,
        no_overtaking: bool = False,
        *,
        clock: Optional[SimulationClock] = None,
    ) -> None:
        super().__init__(name, clock)
        self._length = length
        self.limit = limit
        self.no_overtaking = no_overtaking
        self._vehicles: DeferredList["Vehicle"] = DeferredList()
        self._leaving: Set[int] = set()

    @property
    def length(self) -> float:
        return self._length

    @property
    def vehicles(self) -> Tuple["Vehicle", ...]:
        """Vehicles currently on the road, front of the list first."""
        return tuple(self._vehicles)

    def _commit(self) -> None:
        self._vehicles.update()
        self._leaving.clear()

    def accept(self, vehicle: "Vehicle") -> None:
        """Take *vehicle* on as a driving vehicle; it joins at the next update."""
        vehicle.new_route(self)
        self._vehicles.push_back(vehicle)

    def accept_parked(self, vehicle: "Vehicle", start_time: float) -> None:
        """Park *vehicle* at the front of the road until *start_time*."""
        vehicle.park_on(self, start_time)
        self._vehicles.push_front(vehicle)
        self._commit()
        logger.info(
            "Fahrzeug %s added to road %s, parked until %g",
            vehicle.name,
            self.name,
            start_time,
        )

    def release(self, vehicle: "Vehicle") -> Optional["Vehicle"]:
        """Hand *vehicle* over and schedule its removal; None if it is not here."""
        if vehicle.id in self._leaving:
            return None
        found = next((v for v in self._vehicles if v == vehicle), None)
        if found is None:
            return None
        self._leaving.add(found.id)
        self._vehicles.erase(found)
        return found

    def simulate(self) -> None:
        """Simulate and draw every vehicle, letting the road handle their events."""
        self._commit()
        for vehicle in self._vehicles:
            try:
                vehicle.simulate()
                vehicle.draw(self)
            except VehicleEvent as event:
                event.handle()
        self._commit()

    def barrier(self, vehicle: "Vehicle") -> float:
        """Position *vehicle* may not pass on this road.

        Without an overtaking ban this is the road's end. With one it is the
        position of the vehicle ahead, or the road's end if that vehicle has
        not moved yet or there is none ahead.
        """
        if not self.no_overtaking:
            return self._length
        items = list(self._vehicles)
        if not items:
            return 0.0
        index = next((i for i, v in enumerate(items) if v == vehicle), None)
        if index == 0:
            return self._length
        ahead = items[-1] if index is None else items[index - 1]
        position = ahead.section_distance
        return self._length if position == 0 else position

    def speed_limit(self) -> float:
        """Speed limit in km/h."""
        return self.limit.km_h

    def format_row(self) -> str:
        names = ", ".join(v.name for v in self._vehicles)
        return super().format_row() + f"{self._length:<10g} | ({names})"

    @staticmethod
    def header() -> str:
        return (
            f"{'ID':<5} | {'Name':<15} | {'Length':<10} | {'Fahrzeuge':<10}\n"
            + "-" * 55
        )

    def __str__(self) -> str:
        return self.format_row()

    __hash__ = SimulationObject.__hash__