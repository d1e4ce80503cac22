"""Events a vehicle raises while simulating, handled by the road it is on."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

logger = logging.getLogger(__name__)


class VehicleEvent(Exception, ABC):
    """Something happened to *vehicle* on *road* that the road must handle."""

    def __init__(self, vehicle: Any, road: Any) -> None:
        super().__init__(f"{type(self).__name__}: {vehicle.name} on {road.name}")
        self.vehicle = vehicle
        self.road = road

    @abstractmethod
    def handle(self) -> Optional[Any]:
        """React to the event on the road."""


class StartDriving(VehicleEvent):
    """A parked vehicle reached its start time and begins to drive."""

    def handle(self) -> Optional[Any]:
        """Take the vehicle off the road and put it back as a driving one."""
        vehicle = self.road.release(self.vehicle)
        if vehicle is None:
            logger.error("cannot start vehicle %s", self.vehicle.name)
            return None
        logger.warning(
            "vehicle %s started on road %s", self.vehicle.name, self.road.name
        )
        self.road.accept(vehicle)
        return vehicle


class EndOfRoad(VehicleEvent):
    """A vehicle reached the end of its road."""

    def handle(self) -> Optional[Any]:
        """Take the vehicle off the road and draw it one last time."""
        removed = self.road.release(self.vehicle)
        if removed is None:
            logger.error("cannot remove vehicle %s", self.vehicle.name)
            return None
        logger.warning(
            "vehicle %s reached the end of road %s and was removed",
            self.vehicle.name,
            self.road.name,
        )
        removed.draw(self.road)
        return removed