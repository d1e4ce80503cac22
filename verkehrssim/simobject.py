"""Simulation clock and the common base of all simulated objects."""

from __future__ import annotations

import itertools
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Iterator, Optional

logger = logging.getLogger(__name__)


@dataclass
class SimulationClock:
    """Global simulation time in hours."""

    time: float = 0.0

    def advance(self, step: float) -> float:
        """Move the clock forward by *step* and return the new time."""
        self.time += step
        return self.time

    def reset(self) -> None:
        """Set the clock back to zero."""
        self.time = 0.0


global_clock = SimulationClock()


class SimulationObject(ABC):
    """Named object with a unique id and a local time stamp."""

    _ids: ClassVar[Iterator[int]] = itertools.count(1)

    def __init__(self, name: str = "", clock: Optional[SimulationClock] = None) -> None:
        self._id = next(SimulationObject._ids)
        self.name = name
        self.time = 0.0
        self.clock = global_clock if clock is None else clock
        logger.debug('Simulationsobjekt created: Name="%s", ID=%d', name, self._id)

    @property
    def id(self) -> int:
        return self._id

    @abstractmethod
    def simulate(self) -> None:
        """Advance the object to the clock's current time."""

    def format_row(self) -> str:
        """Id and name columns of a table row."""
        return f"{self._id:<5} | {self.name:<15} | "

    @staticmethod
    def header() -> str:
        """Column titles matching :meth:`format_row`."""
        return f"{'ID':<5} | {'Name':<15} | "

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SimulationObject):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, id={self._id})"