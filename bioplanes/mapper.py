"""Translation between raster indices and plane coordinates."""

from typing import Dict, List, Optional, Sequence

from loguru import logger

from bioplanes.axes import TIME, AxisDescriptor, AxisRole, structural_axes
from bioplanes.coords import Coordinate
from bioplanes.readers.base import FormatReader

FALLBACK_TAG = "axis-mismatch fallback"


class CoordinateMapper:
    """Map raster indices to coordinates and back for one dataset.

    The decomposition of a raster index is delegated to the format reader;
    the mapper routes each position component to the structural axis at the
    same rank (non-planar, non-interleaved axes ordered by ordinal).

    Some containers address planes purely by frame (video containers are the
    usual case) and report a position arity that does not match the dataset's
    axes. Those datasets degrade to time-only addressing: raster index equals
    time index and every other axis reads 0. This is lossy and is only correct
    for formats with a single structural axis; it is logged as a warning, not
    raised.

    :param axes: Normalized axis descriptors of the dataset
    :param reader: The open format reader
    """

    def __init__(self, axes, reader):
        # type: (Sequence[AxisDescriptor], FormatReader) -> None
        self._reader = reader
        self._structural = structural_axes(axes)
        self._raster_axes = [ax for ax in self._structural if not ax.interleaved]
        self._plane_count = reader.plane_count()
        self._fallback = self._detect_fallback()

    def _detect_fallback(self):
        # type: () -> bool
        if self._plane_count == 0:
            return False
        arity = len(self._reader.raster_to_position(0))
        if arity == len(self._raster_axes):
            return False
        logger.warning(
            f"{FALLBACK_TAG}: {self._reader.format_name or 'reader'} reports {arity} "
            f"position component(s) for {len(self._raster_axes)} raster axes, "
            "addressing planes by time only"
        )
        return True

    @property
    def fallback(self):
        # type: () -> bool
        """True when raster indices are mapped to time alone."""
        return self._fallback

    @property
    def structural_axes(self):
        # type: () -> List[AxisDescriptor]
        return list(self._structural)

    @property
    def raster_axes(self):
        # type: () -> List[AxisDescriptor]
        return list(self._raster_axes)

    def raster_to_coordinate(self, index):
        # type: (int) -> Coordinate
        """Coordinate of the plane at a raster index.

        :param index: Raster index in ``[0, plane_count)``
        :return: Coordinate holding every raster axis (X and Y excluded)
        """
        if self._fallback:
            return Coordinate(time=index)
        position = self._reader.raster_to_position(index)
        return _route(self._raster_axes, position)

    def coordinate_to_raster(self, coord):
        # type: (Coordinate) -> Optional[int]
        """Raster index of the plane holding a coordinate.

        Axes the coordinate omits read 0. An index past the end of any axis,
        or a non-zero index along an axis the dataset lacks, has no plane.

        :param coord: Full coordinate of the plane
        :return: Raster index, or None when the coordinate is out of bounds
        """
        if self._fallback:
            # every axis but time reads 0 in time-only addressing
            if any(value for role, value in coord.items() if role != TIME):
                return None
            if coord.time >= self._plane_count:
                return None
            return coord.time

        lengths = {ax.role: ax.length for ax in self._structural}
        for role, value in coord.items():
            if value >= lengths.get(role, 1):
                return None

        position = [coord.get(ax.role) for ax in self._raster_axes]
        raster = self._reader.position_to_raster(position)
        if raster >= self._plane_count:
            return None
        return raster

    def lengths_to_coordinate(self, values):
        # type: (Sequence[int]) -> Coordinate
        """Route one value per structural axis, in ordinal order, into a coordinate."""
        if len(values) != len(self._structural):
            raise ValueError(
                f"Expected {len(self._structural)} values, got {len(values)}"
            )
        return _route(self._structural, values)

    def max_indices(self):
        # type: () -> Coordinate
        """Zero-based maximum index along every structural axis."""
        # every axis but the two planar ones, wherever they sit
        return self.lengths_to_coordinate([ax.length - 1 for ax in self._structural])

    def extents(self):
        # type: () -> Coordinate
        """Length of every structural axis."""
        return self.lengths_to_coordinate([ax.length for ax in self._structural])


def _route(axes, values):
    # type: (Sequence[AxisDescriptor], Sequence[int]) -> Coordinate
    indices = {}  # type: Dict[AxisRole, int]
    for axis, value in zip(axes, values):
        if axis.role.is_planar:
            continue
        indices[axis.role] = int(value)
    return Coordinate(indices)
