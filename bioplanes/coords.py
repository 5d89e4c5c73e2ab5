"""Plane coordinates: which channel, time point, z-slice and extra axes a plane sits at."""

import operator
from collections.abc import Mapping
from typing import Dict, Iterator, Optional, Tuple, Union

from bioplanes.axes import CHANNEL, TIME, Z, AxisRole, resolve_role

AxisLike = Union[AxisRole, str]


class Coordinate(Mapping):
    """Immutable mapping from structural axis to a non-negative index.

    X and Y address pixels within a plane and are never part of a coordinate.
    Axes that are not present read as 0, matching the convention that a
    dataset without an axis has length 1 along it.

    Example:
        >>> c = Coordinate(channel=1, time=3)
        >>> c.time, c.z
        (3, 0)
        >>> Coordinate(channel=1, time=3).is_subspace_of(Coordinate(time=3))
        True
    """

    __slots__ = ("_indices", "_hash")

    def __init__(
        self,
        indices: Optional[Mapping[AxisLike, int]] = None,
        *,
        channel: Optional[int] = None,
        time: Optional[int] = None,
        z: Optional[int] = None,
        **named: int,
    ):
        items: Dict[AxisRole, int] = {}
        for axis, value in (indices or {}).items():
            items[resolve_role(axis)] = value
        for role, value in ((CHANNEL, channel), (TIME, time), (Z, z)):
            if value is not None:
                items[role] = value
        for label, value in named.items():
            items[AxisRole.named(label)] = value

        for role, value in items.items():
            if role.is_planar:
                raise ValueError(f"{role.label} addresses pixels, not planes")
            if isinstance(value, bool):
                raise TypeError(f"Index for {role.label} must be an int, got {value!r}")
            value = items[role] = operator.index(value)
            if value < 0:
                raise ValueError(f"Index for {role.label} must be non-negative, got {value}")

        self._indices = items
        self._hash = None

    def __getitem__(self, axis: AxisLike) -> int:
        return self._indices[resolve_role(axis)]

    def __iter__(self) -> Iterator[AxisRole]:
        return iter(self._indices)

    def __len__(self) -> int:
        return len(self._indices)

    def __contains__(self, axis) -> bool:
        try:
            return resolve_role(axis) in self._indices
        except TypeError:
            return False

    def __eq__(self, other):
        if isinstance(other, Coordinate):
            return self._indices == other._indices
        return NotImplemented

    def __hash__(self):
        if self._hash is None:
            self._hash = hash(frozenset(self._indices.items()))
        return self._hash

    def __repr__(self):
        parts = ", ".join(f"{role.label}={value}" for role, value in self.items_sorted())
        return f"Coordinate({parts})"

    def get(self, axis: AxisLike, default: int = 0) -> int:
        return self._indices.get(resolve_role(axis), default)

    @property
    def channel(self) -> int:
        return self.get(CHANNEL)

    @property
    def time(self) -> int:
        return self.get(TIME)

    @property
    def z(self) -> int:
        return self.get(Z)

    def with_index(self, axis: AxisLike, value: int) -> "Coordinate":
        """Copy of this coordinate with one axis set."""
        indices = dict(self._indices)
        indices[resolve_role(axis)] = value
        return Coordinate(indices)

    def items_sorted(self) -> Tuple[Tuple[AxisRole, int], ...]:
        """Entries ordered channel, time, z, then named axes alphabetically."""
        order = {CHANNEL: 0, TIME: 1, Z: 2}
        return tuple(
            sorted(self._indices.items(), key=lambda kv: (order.get(kv[0], 3), kv[0].label))
        )

    def is_subspace_of(self, query: "Coordinate") -> bool:
        """Check whether this coordinate matches every axis the query specifies.

        Axes the query omits are ignored. An axis the query specifies but this
        coordinate lacks is compared as 0. The query is the partial side:
        ``Coordinate(channel=1, time=3).is_subspace_of(Coordinate(time=3))`` is
        True, so extra axes on this coordinate never prevent a match. This is
        the direction :meth:`DatasetView.get_images_matching` relies on.
        """
        return all(self.get(role) == value for role, value in query.items())
