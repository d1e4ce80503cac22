"""Discrete-time road traffic simulation with an optional graphics client."""

__version__ = "0.1.0"

__all__ = [
    "behaviour",
    "deferred",
    "events",
    "road",
    "scenarios",
    "simobject",
    "simuclient",
    "vehicles",
]