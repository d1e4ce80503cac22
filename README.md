# verkehrssim

A small discrete-time traffic simulation. Vehicles (cars and bicycles) travel
along roads while a simulation clock advances step by step. Roads carry a
speed limit and optionally a ban on overtaking, vehicles can be parked until a
start time, and cars use up fuel and can be refuelled. A client for a separate
graphics server can draw streets, crossings and vehicles.

The package has no dependencies beyond the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Building blocks

- `verkehrssim.deferred.DeferredList`: a list whose changes (`push_back`,
  `push_front`, `erase`) are queued and only applied by `update()`, in the
  order they were made. Iterating, `len()` and `in` always see the applied
  contents, so the list can be changed while it is being iterated. `clear()`
  applies pending changes and then empties the list; `pending` counts the
  changes not yet applied. Erasing an element that is not in the list raises
  `ValueError` at `update()`.
- `verkehrssim.simobject.SimulationClock`: the simulation time in hours, with
  `advance(step)` and `reset()`. A module-level `global_clock` is used by
  objects created without a clock of their own.
- `verkehrssim.simobject.SimulationObject`: the base of every simulated
  object, with a unique `id`, a `name`, a local `time`, equality by id, and
  `format_row()` / `header()` for table output.
- `verkehrssim.vehicles.Vehicle`, `Car` and `Bicycle`:
  - A `Vehicle` has a maximum speed (negative values become 0), a total
    distance, a total time and the distance covered on its current road.
    Vehicles compare with `<` by total distance; `assign_from(other)` copies
    name and maximum speed only.
  - A `Car` has a fuel consumption per 100 km and a tank that starts half
    full. It only drives as far as its fuel allows, never faster than the
    road's speed limit, and raises `EndOfRoad` once it reaches the end of its
    road. `refuel()` fills the tank (or adds a given amount, up to capacity)
    and returns what was added.
  - A `Bicycle` loses 10 % of its speed for every full 20 km driven, but never
    goes below 12 km/h.
  - Cars and bicycles given a `client` draw themselves on it through
    `draw(road)`; a rejected drawing request is logged and counts as not drawn.
- `verkehrssim.road.Road` and `SpeedLimit`: roads with a length, a speed limit
  (`UNLIMITED`, `LANDSTRASSE` at 100 km/h, `INNERORTS` at 50 km/h) and an
  optional `no_overtaking` flag. `accept(vehicle)` adds a driving vehicle at
  the back (it joins at the next `simulate()`), `accept_parked(vehicle,
  start_time)` parks one at the front straight away, and `release(vehicle)`
  takes one off. `simulate()` moves and draws every vehicle and lets the road
  handle the events they raise. `barrier(vehicle)` is the position a vehicle
  may not pass: the road's end, or with the overtaking ban the position of the
  vehicle ahead.
- `verkehrssim.behaviour.Behaviour`, `Driving` and `Parking`: how far a vehicle
  gets in a time interval on its road. A parked vehicle covers no distance
  until its start time, then raises `StartDriving` once.
- `verkehrssim.events.VehicleEvent`, `StartDriving` and `EndOfRoad`: events
  raised while simulating. Their `handle()` takes the vehicle off the road and
  either puts it back as a driving vehicle (`StartDriving`) or draws it one
  last time (`EndOfRoad`).
- `verkehrssim.simuclient.SimuClient`: a TCP client for the graphics server,
  with `initialize`, `draw_crossing`, `draw_street`, `draw_car`, `draw_bike`,
  `set_time`, `delete_vehicle` and `close`; it can be used as a context
  manager. Drawing calls return `False` while no connection is open; invalid
  arguments (sizes outside 100..2000, bad or duplicate street names, points
  outside the plan, speeds outside 0..300, tanks outside 0..999.9, positions
  outside 0..1) raise `GraphicsError`. `sleep_ms(milliseconds)` pauses.

## Running the scenarios

`verkehrssim.scenarios` holds one function per exercise. Run them from the
command line:

```
verkehrssim [TASK] [--no-display] [--seed SEED]
```

`TASK` is one of `1_1`, `1a0`, `2`, `3`, `4`, `5`, `6`, `6_1`, `6_2`, `6_3`
and `6a`; the default is `6_3`. Task `2` reads the numbers of cars and
bicycles and their data from standard input. Task `6a` exercises the deferred
list with random numbers drawn with `--seed` (default 0). Tasks `6`, `6_1`,
`6_2` and `6_3` draw on the graphics server; `--no-display` runs them without
it, except `6_2`, which only draws. See `verkehrssim --help`.

## What the package does not do

The graphics server itself is not part of this package. `SimuClient.initialize`
starts it by running `java -jar <server_jar> <port>`, with `server_jar`
defaulting to `../../Auf3/SimuServer.jar` relative to the working directory,
and then connects to it. By default the port is chosen from the current time
(8000 to 8999) rather than the one passed in; set `dynamic_port=False` to use
the given port, and `server_jar=None` to connect to a server that is already
running. Without a reachable server the drawing scenarios can only run with
`--no-display`.