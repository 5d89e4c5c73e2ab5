import numpy as np
import pytest

from bioplanes.axes import CHANNEL, TIME, X, Z, AxisRole
from bioplanes.coords import Coordinate


def test_keyword_construction():
    coord = Coordinate(channel=1, time=3, Lifetime=2)
    assert coord[CHANNEL] == 1
    assert coord["time"] == 3
    assert coord[AxisRole.named("Lifetime")] == 2
    assert len(coord) == 3


def test_mapping_construction_accepts_labels_and_roles():
    coord = Coordinate({"Channel": 1, TIME: 2, "Lifetime": 0})
    assert coord == Coordinate(channel=1, time=2, Lifetime=0)


def test_numpy_integers_are_accepted():
    coord = Coordinate(time=np.int64(4))
    assert coord.time == 4
    assert type(coord.time) is int


def test_absent_axes_read_zero():
    coord = Coordinate(time=5)
    assert coord.channel == 0
    assert coord.z == 0
    assert coord.get("Lifetime") == 0
    assert "channel" not in coord
    assert "time" in coord


@pytest.mark.parametrize(
    "kwargs, error",
    [
        ({"time": -1}, ValueError),
        ({"time": 1.5}, TypeError),
        ({"time": True}, TypeError),
    ],
)
def test_invalid_indices(kwargs, error):
    with pytest.raises(error):
        Coordinate(**kwargs)


def test_planar_axes_are_rejected():
    with pytest.raises(ValueError):
        Coordinate({X: 0})
    with pytest.raises(ValueError):
        Coordinate({"Y": 2})


def test_equality_and_hash():
    a = Coordinate(channel=1, time=3)
    b = Coordinate(time=3, channel=1)
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b}) == 1
    assert a != Coordinate(channel=1, time=3, z=0)
    assert a != {"channel": 1, "time": 3}


def test_with_index_returns_copy():
    a = Coordinate(time=3)
    b = a.with_index(CHANNEL, 2)
    assert a == Coordinate(time=3)
    assert b == Coordinate(channel=2, time=3)


def test_items_sorted():
    coord = Coordinate({"Lifetime": 1, Z: 2, TIME: 0, "Angle": 4, CHANNEL: 3})
    labels = [role.label for role, _ in coord.items_sorted()]
    assert labels == ["Channel", "Time", "Z", "Angle", "Lifetime"]


def test_repr():
    assert repr(Coordinate(channel=1, time=3)) == "Coordinate(Channel=1, Time=3)"


def test_subspace_is_reflexive():
    coord = Coordinate(channel=1, time=3, z=2, Lifetime=1)
    assert coord.is_subspace_of(coord)


def test_full_coordinate_is_not_subspace_of_differing_coordinate():
    coord = Coordinate(channel=1, time=3)
    assert not coord.is_subspace_of(Coordinate(channel=0, time=3))
    assert not coord.is_subspace_of(Coordinate(channel=1, time=4))


def test_subspace_ignores_axes_the_query_omits():
    assert Coordinate(channel=1, time=3).is_subspace_of(Coordinate(time=3))
    assert Coordinate(channel=1, time=3).is_subspace_of(Coordinate())


def test_query_axes_missing_from_coordinate_compare_as_zero():
    coord = Coordinate(channel=1, time=3)
    assert coord.is_subspace_of(Coordinate(time=3, z=0))
    assert not coord.is_subspace_of(Coordinate(time=3, z=1))


def test_subspace_direction_puts_the_partial_coordinate_on_the_right():
    plane = Coordinate(channel=1, time=3, Lifetime=2)
    assert plane.is_subspace_of(Coordinate(time=3))
    assert not Coordinate(time=3).is_subspace_of(Coordinate(channel=1, time=3))
