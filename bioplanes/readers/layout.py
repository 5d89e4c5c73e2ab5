"""Plane layout shared by readers that expose dimension-ordered arrays.

bioio and plain numpy arrays describe pixel data with a dimension string such
as ``"TCZYX"`` or ``"TYXS"``. This module turns such a description into axis
descriptors and a raster sequence:

- ``X`` and ``Y`` are the planar axes.
- ``S`` (samples per pixel) larger than 1 is an interleaved channel axis at
  ordinal 0, so RGB planes decode one channel at a time.
- Every other dimension addresses planes. The raster sequence walks them in
  memory order, so the last non-planar dimension varies fastest.
"""

import sys
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from bioplanes import raster
from bioplanes.axes import CHANNEL, X, Y, AxisDescriptor, AxisRole, classify
from bioplanes.exceptions import FormatError, ReaderIOError
from bioplanes.models import PixelType, PlaneDescriptor

_KNOWN_DIMS = ("X", "Y", "C", "T", "Z")


@dataclass(frozen=True)
class DimLayout:
    """Result of mapping a dimension string onto axes.

    Attributes:
        axes: Axis descriptors in plane-layout order
        raster_dims: Plane-addressing dimension letters, fastest-varying first
        raster_lengths: Extent of each raster dimension
        fixed_dims: Size-1 dimensions that are not exposed as axes
        interleave: Samples per pixel stored inside each plane
    """

    axes: Tuple[AxisDescriptor, ...]
    raster_dims: Tuple[str, ...]
    raster_lengths: Tuple[int, ...]
    fixed_dims: Tuple[str, ...]
    interleave: int


def layout_from_dims(order, shape, calibration=None):
    # type: (str, Sequence[int], Optional[Dict[str, float]]) -> DimLayout
    """Build the axis layout for an array of the given dimension order.

    :param order: Dimension letters, e.g. ``"TCZYX"``
    :param shape: Extent of each dimension
    :param calibration: Physical step per dimension letter, if known
    :return: The plane layout
    :raises FormatError: If X or Y are missing or the order and shape disagree
    """
    if len(order) != len(shape):
        raise FormatError(f"Dimension order {order!r} does not match shape {tuple(shape)}")
    if len(set(order)) != len(order):
        raise FormatError(f"Duplicate dimensions in {order!r}")
    for required in ("X", "Y"):
        if required not in order:
            raise FormatError(f"Dimension order {order!r} lacks a {required} axis")

    calibration = calibration or {}
    sizes = dict(zip(order, (int(s) for s in shape)))
    interleave = sizes.get("S", 1)

    planar = []  # type: List[Tuple[str, AxisRole]]
    if interleave > 1:
        planar.append(("S", CHANNEL))
    planar.extend([("X", X), ("Y", Y)])

    non_planar = []  # type: List[Tuple[str, AxisRole]]
    fixed = []
    for dim in order:
        if dim in ("X", "Y", "S"):
            if dim == "S" and interleave == 1:
                fixed.append(dim)
            continue
        if dim == "C" and interleave > 1:
            # samples already claim the channel role
            if sizes[dim] == 1:
                fixed.append(dim)
                continue
            non_planar.append((dim, AxisRole.named(dim)))
            continue
        if dim not in _KNOWN_DIMS and sizes[dim] == 1:
            fixed.append(dim)
            continue
        non_planar.append((dim, classify(dim)))

    # memory order puts the last dimension fastest
    non_planar.reverse()

    axes = []
    for ordinal, (dim, role) in enumerate(planar + non_planar):
        axes.append(
            AxisDescriptor(
                role=role,
                index=ordinal,
                length=sizes[dim],
                calibration=calibration.get(dim),
                interleaved=dim == "S",
            )
        )

    return DimLayout(
        axes=tuple(axes),
        raster_dims=tuple(dim for dim, _ in non_planar),
        raster_lengths=tuple(sizes[dim] for dim, _ in non_planar),
        fixed_dims=tuple(fixed),
        interleave=interleave,
    )


class LayoutReader:
    """Format reader over a :class:`DimLayout`.

    Subclasses set ``format_name``, ``dataset_name`` and ``_layout`` and
    implement :meth:`_read_plane`.
    """

    format_name = ""
    dataset_name = ""
    _layout = None  # type: DimLayout

    def axes(self):
        # type: () -> List[AxisDescriptor]
        return list(self._layout.axes)

    def plane_count(self):
        # type: () -> int
        return raster.plane_count(self._layout.raster_lengths)

    def channel_names(self):
        # type: () -> Optional[List[str]]
        return None

    def raster_to_position(self, index):
        # type: (int) -> List[int]
        try:
            return raster.raster_to_position(self._layout.raster_lengths, index)
        except IndexError as e:
            raise FormatError(str(e)) from e

    def position_to_raster(self, position):
        # type: (Sequence[int]) -> int
        try:
            return raster.position_to_raster(self._layout.raster_lengths, position)
        except (IndexError, ValueError) as e:
            raise FormatError(str(e)) from e

    def read_plane_bytes(self, index):
        # type: (int) -> Tuple[bytes, PlaneDescriptor]
        position = self.raster_to_position(index)
        selection = dict(zip(self._layout.raster_dims, position))
        for dim in self._layout.fixed_dims:
            selection[dim] = 0

        logger.debug(f"{self.dataset_name} - reading plane {index}: {selection}")
        try:
            plane = self._read_plane(selection)
        except OSError as e:
            raise ReaderIOError(f"Failed to read plane {index}: {e}") from e
        except (IndexError, KeyError, ValueError) as e:
            raise FormatError(f"Failed to read plane {index}: {e}") from e

        plane = np.asarray(plane)
        expected_ndim = 3 if self._layout.interleave > 1 else 2
        if plane.ndim != expected_ndim:
            raise FormatError(f"Expected {expected_ndim}D plane, got {plane.ndim}D")

        try:
            pixel_type = PixelType.from_dtype(plane.dtype)
        except ValueError as e:
            raise FormatError(str(e)) from e

        byteorder = plane.dtype.byteorder
        little_endian = byteorder == "<" or (byteorder in ("=", "|") and sys.byteorder == "little")

        descriptor = PlaneDescriptor(
            pixel_type=pixel_type,
            bits_per_pixel=plane.dtype.itemsize * 8,
            little_endian=little_endian,
            multichannel=self._layout.interleave > 1,
            interleave_count=self._layout.interleave,
            width=plane.shape[1],
            height=plane.shape[0],
        )
        # C order puts samples fastest, then X, then Y
        return np.ascontiguousarray(plane).tobytes(), descriptor

    def _read_plane(self, selection):
        # type: (Dict[str, int]) -> np.ndarray
        """Return one plane shaped (Y, X) or (Y, X, S)."""
        raise NotImplementedError

    @property
    def _plane_order(self):
        # type: () -> str
        return "YXS" if self._layout.interleave > 1 else "YX"

    def close(self):
        # type: () -> None
        pass
