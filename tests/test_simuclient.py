import socket
import threading
from unittest import mock

import pytest

from verkehrssim.simuclient import GraphicsError, SimuClient, sleep_ms


class _Recorder:
    def __init__(self):
        self._server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._server.bind(("127.0.0.1", 0))
        self._server.listen(1)
        self._server.settimeout(5)
        self.port = str(self._server.getsockname()[1])
        self._chunks = []
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self):
        try:
            conn, _ = self._server.accept()
        except OSError:
            return
        with conn:
            conn.settimeout(5)
            while True:
                try:
                    data = conn.recv(4096)
                except OSError:
                    break
                if not data:
                    break
                self._chunks.append(data)

    def received(self):
        self._thread.join(5)
        return b"".join(self._chunks).decode("utf-8")

    def stop(self):
        self._server.close()


@pytest.fixture
def recorder():
    rec = _Recorder()
    yield rec
    rec.stop()


def _quick_client(**kwargs):
    options = dict(
        server_jar=None,
        dynamic_port=False,
        connect_attempts=2,
        startup_delay_ms=0,
        retry_delay_ms=0,
        init_delay_ms=0,
        draw_delay_ms=0,
        connect_timeout=2.0,
    )
    options.update(kwargs)
    return SimuClient(**options)


@pytest.fixture
def client(recorder):
    c = _quick_client()
    assert c.initialize(800, 500, "127.0.0.1", recorder.port) is True
    yield c
    c.close()


def test_initialize_and_close_messages(recorder):
    c = _quick_client()
    c.initialize(800, 500, "127.0.0.1", recorder.port)
    assert c.initialized
    assert c.size == (800, 500)
    c.close()
    assert not c.initialized
    assert recorder.received() == "init 800 500#close#"


def test_initialize_rejects_bad_size():
    c = _quick_client()
    with pytest.raises(GraphicsError):
        c.initialize(50, 500, "127.0.0.1", "1")
    with pytest.raises(GraphicsError):
        c.initialize(800, 2001, "127.0.0.1", "1")
    assert not c.initialized


def test_initialize_fails_without_server():
    probe = socket.socket()
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    c = _quick_client()
    with pytest.raises(GraphicsError):
        c.initialize(800, 500, "127.0.0.1", port)
    assert not c.initialized


def test_initialize_starts_server_program(recorder):
    c = _quick_client(server_jar="server.jar")
    with mock.patch("verkehrssim.simuclient.subprocess.Popen") as popen:
        c.initialize(800, 500, "127.0.0.1", recorder.port)
    popen.assert_called_once_with(["java", "-jar", "server.jar", recorder.port])
    c.close()
    assert recorder.received().startswith("init 800 500#")


def test_crossing(client, recorder):
    assert client.draw_crossing(200, 200) is True
    client.close()
    assert "crossing 200 200#" in recorder.received()


def test_crossing_outside(client, recorder):
    assert client.draw_crossing(900, 200) is False
    with pytest.raises(GraphicsError):
        client.draw_crossing(200, 600)
    client.close()
    data = recorder.received()
    assert "crossing" not in data
    assert "msg Simuclient MESSAGE: Kreuzung ausserhalb des Verkehrsplans.#" in data


def test_street_with_pairs_and_flat_points(client, recorder):
    assert client.draw_street("Hin", "Rueck", 500, [(700, 250), (100, 250)])
    assert client.draw_street("A", "B", 40, [100, 200, 300, 400])
    client.close()
    data = recorder.received()
    assert "street Hin Rueck 500 2 700 250 100 250#" in data
    assert "street A B 40 2 100 200 300 400#" in data


def test_street_registers_names(client):
    client.draw_street("Hin", "Rueck", 500, [(700, 250), (100, 250)])
    assert client.streets == {"Hin": 0, "Rueck": 0}
    client.draw_car("BMW", "Hin", 0.0, 120.0, 25.0)
    assert client.streets["Hin"] == 1


@pytest.mark.parametrize(
    "way_to, way_back, length, points",
    [
        ("Hin", "Rueck", -1, [(100, 100), (200, 200)]),
        ("Hin", "Rueck", 10, [(100, 100)]),
        ("", "Rueck", 10, [(100, 100), (200, 200)]),
        ("Hin weg", "Rueck", 10, [(100, 100), (200, 200)]),
        ("Hin", "ElfZeichenXX", 10, [(100, 100), (200, 200)]),
        ("Hin", "Rueck", 10, [(100, 100), (900, 200)]),
        ("Hin", "Rueck", 10, [(100, 100), (200, 700)]),
        ("Hin", "Rueck", 10, [100, 100, 200, 200, 300]),
    ],
)
def test_street_errors(client, way_to, way_back, length, points):
    with pytest.raises(GraphicsError):
        client.draw_street(way_to, way_back, length, points)


def test_street_name_reused(client):
    client.draw_street("Hin", "Rueck", 500, [(700, 250), (100, 250)])
    with pytest.raises(GraphicsError, match="schon verwendet"):
        client.draw_street("Hin", "Neu", 500, [(700, 250), (100, 250)])


def test_car_and_bike_messages(client, recorder):
    client.draw_street("Hin", "Rueck", 500, [(700, 250), (100, 250)])
    assert client.draw_car("BMW", "Hin", 0.0, 120.0, 25.0) is True
    assert client.draw_bike("Trek", "Rueck", 0.5, 25.0) is True
    client.close()
    data = recorder.received()
    assert "sc BMW Hin  0.0000  120.0   25.0#" in data
    assert "sb Trek Rueck  0.5000   25.0#" in data


@pytest.mark.parametrize(
    "name, street, rel, speed, tank",
    [
        ("", "Hin", 0.5, 50.0, 10.0),
        ("B MW", "Hin", 0.5, 50.0, 10.0),
        ("BMW", "Hin", 0.5, -1.0, 10.0),
        ("BMW", "Hin", 0.5, 301.0, 10.0),
        ("BMW", "Hin", 0.5, 50.0, -0.5),
        ("BMW", "Hin", 0.5, 50.0, 1000.0),
        ("BMW", "Hin", 1.5, 50.0, 10.0),
        ("BMW", "Nirgends", 0.5, 50.0, 10.0),
    ],
)
def test_car_errors(client, name, street, rel, speed, tank):
    client.draw_street("Hin", "Rueck", 500, [(700, 250), (100, 250)])
    with pytest.raises(GraphicsError):
        client.draw_car(name, street, rel, speed, tank)


def test_undefined_street_message_sent(client, recorder):
    with pytest.raises(GraphicsError):
        client.draw_bike("Trek", "Nirgends", 0.1, 15.0)
    client.close()
    assert "msg Simuclient MESSAGE: Wegname ist undefiniert.#" in recorder.received()


def test_drawing_requires_initialization():
    c = _quick_client()
    assert c.draw_crossing(200, 200) is False
    assert c.draw_street("Hin", "Rueck", 10, [(1, 1), (2, 2)]) is False
    assert c.draw_car("BMW", "Hin", 0.5, 50.0, 10.0) is False
    assert c.draw_bike("Trek", "Hin", 0.5, 15.0) is False


def test_set_time(client, recorder):
    client.set_time(1.5)
    client.set_time(0.0)
    assert client.time == 1.5
    client.close()
    data = recorder.received()
    assert data.count("time 1.5#") == 2


def test_set_time_without_connection_keeps_value():
    c = _quick_client()
    c.set_time(2.5)
    c.set_time(-1.0)
    assert c.time == 2.5


def test_close_clears_streets(client):
    client.draw_street("Hin", "Rueck", 500, [(700, 250), (100, 250)])
    client.close()
    assert client.streets == {}
    assert client.draw_crossing(200, 200) is False


def test_context_manager_closes(recorder):
    with _quick_client() as c:
        c.initialize(800, 500, "127.0.0.1", recorder.port)
    assert not c.initialized
    assert recorder.received().endswith("close#")


def test_delete_vehicle_is_accepted():
    assert _quick_client().delete_vehicle("BMW") is True


def test_sleep_ms():
    with mock.patch("verkehrssim.simuclient.time.sleep") as fake_sleep:
        results = [sleep_ms(250), sleep_ms(0), sleep_ms(-5)]
    assert results == [None, None, None]
    assert fake_sleep.call_args_list == [mock.call(0.25)]