"""Demonstration runs of the traffic simulation, one per exercise."""

from __future__ import annotations

import argparse
import random
import sys
from typing import IO, Callable, Iterable, Iterator, List, Optional, Sequence, Tuple, TypeVar

from verkehrssim.deferred import DeferredList
from verkehrssim.road import Road, SpeedLimit
from verkehrssim.simobject import SimulationClock
from verkehrssim.simuclient import GraphicsError, SimuClient, sleep_ms
from verkehrssim.vehicles import Bicycle, Car, Vehicle

EPSILON = 1e-6
REFUEL_INTERVAL = 3.0
WINDOW_WIDTH = 800
WINDOW_HEIGHT = 500

T = TypeVar("T")


def _print_rows(vehicles: Iterable[Vehicle]) -> None:
    for vehicle in vehicles:
        print(vehicle.format_row())


def _print_time(clock: SimulationClock, rule: str) -> None:
    print(f"Current time: {clock.time:.2f} hours")
    print(rule)


def _safely(call: Callable[..., object], *args: object) -> bool:
    """Run a drawing call; a rejected request counts as not drawn."""
    try:
        return bool(call(*args))
    except GraphicsError:
        return False


def _open_display(client: Optional[SimuClient]) -> bool:
    if client is None:
        return False
    if client.initialized:
        return True
    return _safely(client.initialize, WINDOW_WIDTH, WINDOW_HEIGHT)


def _report(roads: Sequence[Road]) -> None:
    print(Vehicle.header())
    for road in roads:
        _print_rows(road.vehicles)
    print("================== vehicles done ==================")
    print(Road.header())
    for road in roads:
        print(road.format_row())
    print("=" * 34)
    print("=" * 34)


def task_1_1() -> List[Vehicle]:
    """Two vehicles without a road, simulated at 2 and 5 hours."""
    clock = SimulationClock()
    vehicles = [Vehicle("PKW1", 40.0, clock=clock), Vehicle("AUTO3", 30.0, clock=clock)]
    print(Vehicle.header())
    _print_rows(vehicles)
    for moment in (2.0, 5.0):
        clock.time = moment
        for vehicle in vehicles:
            vehicle.simulate()
        _print_rows(vehicles)
    return vehicles


def task_1a0() -> List[Vehicle]:
    """Three vehicles simulated in half-hour steps for ten hours."""
    clock = SimulationClock()
    vehicles = [
        Vehicle("Benz", 100.0, clock=clock),
        Vehicle("BMW", 80.0, clock=clock),
        Vehicle("Audi", 60.0, clock=clock),
    ]
    print(Vehicle.header())
    while clock.time <= 10.0:
        for vehicle in vehicles:
            vehicle.simulate()
        _print_rows(vehicles)
        _print_time(clock, "-" * 38)
        clock.advance(0.5)
    return vehicles


def _tokens(stream: IO[str]) -> Iterator[str]:
    for line in stream:
        yield from line.split()


def _ask(tokens: Iterator[str], prompt: str, convert: Callable[[str], T]) -> T:
    print(prompt, end="")
    try:
        raw = next(tokens)
    except StopIteration:
        raise ValueError("unexpected end of input") from None
    try:
        return convert(raw)
    except ValueError:
        raise ValueError(f"invalid input {raw!r}") from None


def task_2(stream: Optional[IO[str]] = None) -> List[Vehicle]:
    """Read cars and bicycles from *stream*, simulate eight hours, refuel every three."""
    tokens = _tokens(sys.stdin if stream is None else stream)
    clock = SimulationClock()

    car_count = _ask(tokens, "Number of cars: ", int)
    bike_count = _ask(tokens, "Number of bicycles: ", int)

    vehicles: List[Vehicle] = []
    for number in range(1, car_count + 1):
        name = _ask(tokens, f"Name of car {number}: ", str)
        max_speed = _ask(tokens, "Maximum speed (km/h): ", float)
        consumption = _ask(tokens, "Consumption per 100 km (l): ", float)
        capacity = _ask(tokens, "Tank capacity (l): ", float)
        vehicles.append(Car(name, max_speed, consumption, capacity, clock=clock))
    for number in range(1, bike_count + 1):
        name = _ask(tokens, f"Name of bicycle {number}: ", str)
        max_speed = _ask(tokens, "Maximum speed (km/h): ", float)
        vehicles.append(Bicycle(name, max_speed, clock=clock))

    print("\nVehicles created:")
    print(Vehicle.header())
    _print_rows(vehicles)

    last_refuel = 0.0
    while clock.time < 8.0:
        clock.advance(0.5)
        for vehicle in vehicles:
            vehicle.simulate()
        print(Vehicle.header())
        _print_rows(vehicles)

        due = last_refuel + REFUEL_INTERVAL
        if abs(clock.time - due) < EPSILON or clock.time > due:
            print(f"\nReached {due:g} hours, refuelling all cars.")
            for vehicle in vehicles:
                if isinstance(vehicle, Car):
                    added = vehicle.refuel()
                    print(f"{vehicle.name} refuelled: {added:g} l")
            last_refuel += REFUEL_INTERVAL

        _print_time(clock, "-" * 44)
        print()

    if len(vehicles) >= 2:
        first, second = vehicles[0], vehicles[1]
        if first < second:
            print(f"{first.name} has driven less than {second.name}")
        else:
            print(f"{first.name} has driven at least as far as {second.name}")
    return vehicles


def task_3() -> Tuple[Vehicle, Vehicle]:
    """Assign one vehicle to another and simulate both for eight hours."""
    clock = SimulationClock()
    first = Vehicle("Auto 1", 120.0, clock=clock)
    second = Vehicle("Auto 2", 150.0, clock=clock)

    print("Initial state:")
    print(Vehicle.header())
    _print_rows((first, second))

    first.assign_from(second)

    print("\nAfter assignment:")
    print(Vehicle.header())
    _print_rows((first, second))

    while clock.time < 8.0:
        clock.advance(0.5)
        first.simulate()
        second.simulate()
        print(Vehicle.header())
        _print_rows((first, second))
        _print_time(clock, "-" * 44)
        print()
    return first, second


def task_4() -> Road:
    """Create and show an empty motorway."""
    road = Road("Autobahn", 100.0, SpeedLimit.UNLIMITED, clock=SimulationClock())
    print(Road.header())
    print(road.format_row())
    return road


def task_5() -> Road:
    """Park two cars and a bicycle on a country road and let them set off."""
    clock = SimulationClock()
    road = Road("Landstrasse", 100.0, clock=clock)
    road.accept_parked(Car("BMW", 120.0, clock=clock), 1.0)
    road.accept_parked(Car("Audi", 130.0, clock=clock), 1.0)
    road.accept_parked(Bicycle("BMX", 25.0, clock=clock), 1.0)

    print("\nSimulating the vehicles on the road:")
    round_number = 1
    while clock.time <= 5.0:
        print(f"Round {round_number} begins")
        road.simulate()
        print(Road.header())
        print(road.format_row())
        print(Vehicle.header())
        _print_rows(road.vehicles)
        _print_time(clock, "-" * 38)
        clock.advance(0.5)
        round_number += 1
    return road


def _two_roads(
    client: Optional[SimuClient], pause_ms: int, finish: bool
) -> Tuple[Road, Road]:
    _open_display(client)
    clock = SimulationClock()
    country = Road("LandstrasseHin", 500.0, SpeedLimit.LANDSTRASSE, clock=clock)
    town = Road("LandstrasseRueck", 500.0, SpeedLimit.INNERORTS, clock=clock)

    country.accept(Car("BMW", 120.0, clock=clock, client=client))
    town.accept_parked(Car("Audi", 130.0, clock=clock, client=client), 1.0)

    if client is not None:
        _safely(client.draw_street, country.name, town.name, 500, [700, 250, 100, 250])
        _safely(client.draw_street, town.name, country.name, 500, [100, 300, 700, 300])

    while clock.time <= 3.0:
        print(f"Current time: {clock.time:g} hours")
        if client is not None:
            client.set_time(clock.time)
        country.simulate()
        town.simulate()
        _report((country, town))
        if pause_ms:
            sleep_ms(pause_ms)
        clock.advance(0.5)

    if finish and client is not None:
        client.close()
    return country, town


def task_6(client: Optional[SimuClient] = None) -> Tuple[Road, Road]:
    """Two roads with different speed limits, drawn on *client* if given."""
    return _two_roads(client, 0, finish=False)


def task_6_1(client: Optional[SimuClient] = None) -> Tuple[Road, Road]:
    """Like :func:`task_6`, pausing between steps and closing the display."""
    return _two_roads(client, 500, finish=True)


def task_6_2(client: Optional[SimuClient] = None) -> Vehicle:
    """Draw one street, a crossing and a standing car, then close the display."""
    if client is None:
        raise ValueError("this task needs a display client")
    _open_display(client)
    _safely(client.draw_street, "Patn", "ReturnPath", 500, [100, 250, 700, 250])
    _safely(client.draw_crossing, 200, 200)
    car = Vehicle("BMW", 120.0, clock=SimulationClock())
    _safely(client.draw_car, car.name, "Patn", 0.0, 0.0, 50.0)
    sleep_ms(2000)
    client.close()
    return car


def task_6_3(client: Optional[SimuClient] = None) -> Optional[Tuple[Road, Road]]:
    """Cars and a late-starting bicycle on a two-way street for seven hours.

    Returns None if a display client was given but could not be opened.
    """
    if client is not None and not _open_display(client):
        print("Graphics initialisation failed!", file=sys.stderr)
        return None

    clock = SimulationClock()
    there = Road("Hin", 100.0, SpeedLimit.UNLIMITED, clock=clock)
    back = Road("Rueck", 100.0, SpeedLimit.UNLIMITED, clock=clock)
    if client is not None:
        _safely(
            client.draw_street, there.name, back.name, int(there.length),
            [100, 250, 700, 250],
        )

    there.accept(Car("BMW", 120.0, 1.0, 50.0, clock=clock, client=client))
    there.accept_parked(Bicycle("Trek", 25.0, clock=clock, client=client), 1.0)
    back.accept(Car("Audi", 100.0, 1.0, 60.0, clock=clock, client=client))

    while clock.time <= 7.0:
        print(f"Current time: {clock.time:g} hours")
        if client is not None:
            client.set_time(clock.time)
        there.simulate()
        back.simulate()
        _report((there, back))
        clock.advance(0.5)
        sleep_ms(1000)

    if client is not None:
        client.close()
    return there, back


def task_6a(seed: int = 0) -> List[List[int]]:
    """Exercise the deferred list with random numbers.

    Returns the list's contents at each printed stage: filled, after
    scheduling removals, after applying them, after scheduling two
    insertions, and after applying those.
    """
    rng = random.Random(seed)
    numbers: DeferredList[int] = DeferredList()
    for _ in range(10):
        numbers.push_back(rng.randint(1, 10))
    numbers.update()

    stages: List[List[int]] = []

    def show(label: str) -> None:
        snapshot = list(numbers)
        stages.append(snapshot)
        print(f"{label}: " + "".join(f"{n} " for n in snapshot))

    show("Initial list")
    for number in numbers:
        if number > 5:
            numbers.erase(number)
    show("List after deletion (before update)")
    numbers.update()
    show("List after update")
    numbers.push_front(rng.randint(1, 10))
    numbers.push_back(rng.randint(1, 10))
    show("Final list after inserting two random values")
    numbers.update()
    show("List after update")
    return stages


_PLAIN_TASKS = {
    "1_1": task_1_1,
    "1a0": task_1a0,
    "3": task_3,
    "4": task_4,
    "5": task_5,
}
_DISPLAY_TASKS = {
    "6": task_6,
    "6_1": task_6_1,
    "6_2": task_6_2,
    "6_3": task_6_3,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one of the exercises; the default is 6_3."""
    choices = [*_PLAIN_TASKS, "2", *_DISPLAY_TASKS, "6a"]
    parser = argparse.ArgumentParser(
        prog="verkehrssim", description="Run a traffic simulation exercise."
    )
    parser.add_argument("task", nargs="?", default="6_3", choices=choices)
    parser.add_argument(
        "--no-display", action="store_true", help="simulate without the display server"
    )
    parser.add_argument("--seed", type=int, default=0, help="random seed for task 6a")
    args = parser.parse_args(argv)

    if args.task in _PLAIN_TASKS:
        _PLAIN_TASKS[args.task]()
    elif args.task == "2":
        try:
            task_2(sys.stdin)
        except ValueError as exc:
            parser.error(str(exc))
    elif args.task == "6a":
        task_6a(args.seed)
    else:
        if args.no_display and args.task == "6_2":
            parser.error("task 6_2 only draws; it cannot run without the display")
        client = None if args.no_display else SimuClient()
        _DISPLAY_TASKS[args.task](client)

    print("\n=== end of program ===")
    return 0