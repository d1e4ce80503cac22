"""Client for the graphical traffic display server.

The display server is a separate program that is started on demand and
spoken to over TCP with short text commands terminated by ``#``.
"""

from __future__ import annotations

import socket
import string
import subprocess
import time
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

DEFAULT_SERVER_JAR = "../../Auf3/SimuServer.jar"
DEFAULT_ADDRESS = "127.0.0.1"
DEFAULT_PORT = "7654"

MIN_SIZE = 100
MAX_SIZE = 2000
MAX_STREET_NAME = 10
MAX_SPEED = 300.0
MAX_TANK = 999.9

_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_-")

Point = Tuple[int, int]


class GraphicsError(Exception):
    """Raised when the display server rejects or cannot take a request."""


def sleep_ms(milliseconds: int) -> None:
    """Pause for *milliseconds*; non-positive values do nothing."""
    if milliseconds > 0:
        time.sleep(milliseconds / 1000)


def _bad_char_position(name: str) -> Optional[int]:
    return next((i for i, c in enumerate(name) if c not in _NAME_CHARS), None)


class SimuClient:
    """Connection to the display server and the drawing commands it accepts.

    Drawing calls return ``False`` while no connection is open and ``True``
    once a command was sent. Invalid arguments are reported to the server as
    a message and raise :class:`GraphicsError`.
    """

    def __init__(
        self,
        *,
        server_jar: Optional[str] = DEFAULT_SERVER_JAR,
        dynamic_port: bool = True,
        connect_attempts: int = 4,
        startup_delay_ms: int = 2000,
        retry_delay_ms: int = 300,
        init_delay_ms: int = 100,
        draw_delay_ms: int = 50,
        connect_timeout: float = 5.0,
    ) -> None:
        self.server_jar = server_jar
        self.dynamic_port = dynamic_port
        self.connect_attempts = connect_attempts
        self.startup_delay_ms = startup_delay_ms
        self.retry_delay_ms = retry_delay_ms
        self.init_delay_ms = init_delay_ms
        self.draw_delay_ms = draw_delay_ms
        self.connect_timeout = connect_timeout

        self._socket: Optional[socket.socket] = None
        self._initialized = False
        self._size = (0, 0)
        self._streets: Dict[str, int] = {}
        self._time = 0.0
        self._address = DEFAULT_ADDRESS
        self._port = DEFAULT_PORT

    # ------------------------------------------------------------------ state

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def size(self) -> Tuple[int, int]:
        return self._size

    @property
    def streets(self) -> Dict[str, int]:
        """Registered street names with their access counts."""
        return dict(self._streets)

    @property
    def time(self) -> float:
        return self._time

    @property
    def port(self) -> str:
        return self._port

    # -------------------------------------------------------------- transport

    def _send(self, message: str) -> None:
        if self._socket is None:
            return
        try:
            self._socket.sendall(message.encode("utf-8"))
        except OSError as exc:
            print(f"Error sending message: {exc}")

    def _notify(self, text: str, send: bool = True) -> None:
        print(f"### SimuClient MESSAGE: {text}")
        if send:
            self._send(f"msg Simuclient MESSAGE: {text}#")

    def _fail(self, text: str, send: bool = True) -> GraphicsError:
        self._notify(text, send)
        return GraphicsError(text)

    def _drop_socket(self) -> None:
        if self._socket is not None:
            try:
                self._socket.close()
            finally:
                self._socket = None

    def _launch_server(self) -> None:
        if self.server_jar is None:
            return
        try:
            subprocess.Popen(["java", "-jar", self.server_jar, self._port])
        except OSError as exc:
            print(f"Error starting display server: {exc}")

    def _connect(self) -> socket.socket:
        for _ in range(self.connect_attempts):
            try:
                return socket.create_connection(
                    (self._address, int(self._port)), timeout=self.connect_timeout
                )
            except OSError:
                sleep_ms(self.retry_delay_ms)
        raise self._fail(
            "Connect nicht moeglich! (Firewall?) Grafikausgaben werden unterdrueckt.",
            send=False,
        )

    # --------------------------------------------------------------- commands

    def initialize(
        self,
        size_x: int,
        size_y: int,
        address: str = DEFAULT_ADDRESS,
        port: Union[str, int] = DEFAULT_PORT,
    ) -> bool:
        """Start the display server and open a window of the given size."""
        self._initialized = False
        self._drop_socket()
        for extent in (size_x, size_y):
            if extent < MIN_SIZE or extent > MAX_SIZE:
                raise self._fail("Groesse des Verkehrsplans < 100 oder > 2000.")

        self._address = address
        self._port = str(port)
        if self.dynamic_port:
            # Shared machines need a port that differs between runs.
            self._port = str(int(time.time()) % 1000 + 8000)

        self._launch_server()
        sleep_ms(self.startup_delay_ms)

        self._socket = self._connect()
        self._send(f"init {size_x} {size_y}#")
        sleep_ms(self.init_delay_ms)

        self._initialized = True
        self._size = (size_x, size_y)
        return True

    def _inside(self, x: int, y: int) -> Tuple[bool, bool]:
        width, height = self._size
        return 0 < x < width, 0 < y < height

    def draw_crossing(self, x: int, y: int) -> bool:
        """Draw a crossing at (*x*, *y*)."""
        if not self._initialized:
            return False
        x_ok, y_ok = self._inside(x, y)
        if not x_ok:
            return False
        if not y_ok:
            raise self._fail("Kreuzung ausserhalb des Verkehrsplans.")
        self._send(f"crossing {x} {y}#")
        return True

    def _check_street(self, name: str, new: bool) -> None:
        if not name:
            raise self._fail("Wegname ist leer.")
        # A disallowed character in the very first position is let through.
        if _bad_char_position(name):
            raise self._fail(
                "Wegname darf nur Buchstaben, Ziffern, -_ und keine Blanks enthalten."
            )
        if new:
            if len(name) > MAX_STREET_NAME:
                raise self._fail("Wegname zu lang (max. 10 Zeichen): ")
            if name in self._streets:
                raise self._fail("Wegname wurde schon verwendet.")
            self._streets[name] = 0
        else:
            if name not in self._streets:
                raise self._fail("Wegname ist undefiniert.")
            self._streets[name] += 1

    @staticmethod
    def _pairs(points: Iterable[Union[int, Sequence[int]]]) -> Tuple[List[Point], bool]:
        items = list(points)
        if items and all(isinstance(p, int) for p in items):
            it = iter(items)
            pairs = [(int(x), int(y)) for x, y in zip(it, it)]
            return pairs, len(items) % 2 == 1
        return [(int(p[0]), int(p[1])) for p in items], False

    def draw_street(
        self,
        way_to: str,
        way_back: str,
        length: int,
        points: Iterable[Union[int, Sequence[int]]],
    ) -> bool:
        """Draw a two-way street through *points*.

        *points* is a sequence of (x, y) pairs or a flat sequence of
        alternating x and y coordinates.
        """
        if not self._initialized:
            return False
        if length < 0:
            raise self._fail("Laenge des Weges kleiner 0.")
        pairs, leftover = self._pairs(points)
        if len(pairs) < 2:
            raise self._fail("Mindestens 2 Punkte fuer Strasse erforderlich.")
        self._check_street(way_to, True)
        self._check_street(way_back, True)

        parts = [f"street {way_to} {way_back} {length} {len(pairs)}"]
        for x, y in pairs:
            x_ok, y_ok = self._inside(x, y)
            if not x_ok:
                raise self._fail(
                    "Strassenpunkt ausserhalb des Verkehrsplans oder falsche Anzahl."
                )
            if not y_ok:
                raise self._fail("Strassenpunkt ausserhalb des Verkehrsplans.")
            parts.append(f"{x} {y}")
        if leftover:
            raise self._fail(
                "Strassenpunkt ausserhalb des Verkehrsplans oder falsche Anzahl."
            )
        self._send(" ".join(parts) + "#")
        return True

    def _draw_vehicle(
        self,
        kind: str,
        name: str,
        street: str,
        rel_position: float,
        speed: float,
        tank: float = 0.0,
    ) -> bool:
        if not self._initialized:
            return False
        if not name:
            raise self._fail("Fahrzeugname ist leer.")
        if _bad_char_position(name):
            raise self._fail(
                "Fahrzeugname darf nur Buchstaben, Ziffern, -_ und keine Blanks enthalten."
            )
        if speed < 0.0:
            raise self._fail("Geschwindigkeit < 0.")
        if speed > MAX_SPEED:
            raise self._fail(
                "PKW sind keine Formel1-Fahrzeuge. Geschwindigkeit > 300 km/h"
            )
        if tank < 0.0:
            raise self._fail("Tank < 0.0")
        if tank > MAX_TANK:
            raise self._fail("Versteckte Tanks nicht erlaubt. Tankinhalt nur < 1000 l")
        if not 0.0 <= rel_position <= 1.0:
            raise self._fail("Relative Position ausserhalb [0,1].")
        self._check_street(street, False)

        if kind == "c":
            message = f"sc {name} {street} {rel_position:7.4f} {speed:6.1f} {tank:6.1f}#"
        else:
            message = f"sb {name} {street} {rel_position:7.4f} {speed:6.1f}#"
        self._send(message)
        sleep_ms(self.draw_delay_ms)
        return True

    def draw_car(
        self, name: str, street: str, rel_position: float, speed: float, tank: float
    ) -> bool:
        """Show a car at *rel_position* (0..1) along *street*."""
        return self._draw_vehicle("c", name, street, rel_position, speed, tank)

    def draw_bike(
        self, name: str, street: str, rel_position: float, speed: float
    ) -> bool:
        """Show a bicycle at *rel_position* (0..1) along *street*."""
        return self._draw_vehicle("b", name, street, rel_position, speed)

    def set_time(self, time: float) -> None:
        """Show the global time; non-positive values repeat the last one."""
        if time > 0.0:
            self._time = time
        if self._initialized:
            self._send(f"time {self._time:g}#")

    def delete_vehicle(self, name: str) -> bool:
        """Remove a vehicle from the display; the server needs no command."""
        return True

    def close(self) -> None:
        """End the session and close the connection."""
        if not self._initialized:
            return
        self._notify("Simulation beendet.", send=False)
        self._send("close#")
        self._drop_socket()
        self._streets.clear()
        self._initialized = False

    def __enter__(self) -> "SimuClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()