import pytest

from verkehrssim.simobject import SimulationClock, SimulationObject, global_clock


class _Dummy(SimulationObject):
    def simulate(self):
        self.time = self.clock.time


def test_clock_advance_and_reset():
    clock = SimulationClock()
    assert clock.advance(0.5) == 0.5
    assert clock.advance(0.5) == 1.0
    assert clock.time == 1.0
    clock.reset()
    assert clock.time == 0.0


def test_ids_are_unique_and_increasing():
    clock = SimulationClock()
    a = _Dummy("a", clock=clock)
    b = _Dummy("b", clock=clock)
    c = _Dummy(clock=clock)
    assert a.id < b.id < c.id
    assert a.format_row().startswith(f"{a.id:<5} | a")
    assert b.format_row().startswith(f"{b.id:<5} | b")


def test_equality_by_id():
    clock = SimulationClock()
    a = _Dummy("same", clock=clock)
    b = _Dummy("same", clock=clock)
    assert a == a
    assert not (a == b)
    assert len({a, b, a}) == 2
    assert a.format_row() != b.format_row()


def test_header_layout():
    assert SimulationObject.header() == "ID    | Name            | "


def test_format_row_matches_header_width():
    obj = _Dummy("BMW")
    row = obj.format_row()
    assert row.startswith(f"{obj.id:<5} | BMW")
    assert len(row) == len(SimulationObject.header())


def test_abstract_base_cannot_be_instantiated():
    with pytest.raises(TypeError):
        SimulationObject("x")


def test_default_clock_is_global_and_custom_clock_is_used():
    assert _Dummy().clock is global_clock
    clock = SimulationClock()
    obj = _Dummy("x", clock=clock)
    clock.advance(2.0)
    obj.simulate()
    assert obj.time == 2.0


def test_new_object_starts_at_time_zero():
    clock = SimulationClock()
    obj = _Dummy("t", clock=clock)
    assert obj.time == 0.0
    assert obj.name == "t"
    assert obj.format_row().startswith(f"{obj.id:<5} | t")