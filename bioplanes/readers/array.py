"""In-memory format reader over a numpy array."""

from typing import Dict, Optional

import numpy as np

from bioplanes.exceptions import FormatError, OpenError
from bioplanes.readers.layout import LayoutReader, layout_from_dims


class ArrayFormatReader(LayoutReader):
    """Serve planes from an array described by a dimension string.

    Example:
        >>> data = np.zeros((10, 2, 64, 64), dtype=np.uint16)
        >>> reader = ArrayFormatReader(data, "TCYX", name="timelapse")
        >>> reader.plane_count()
        20
    """

    format_name = "In-memory array"

    def __init__(self, array, dim_order, name="array", calibration=None):
        # type: (np.ndarray, str, str, Optional[Dict[str, float]]) -> None
        array = np.asarray(array)
        if array.ndim != len(dim_order):
            raise OpenError(
                f"Array has {array.ndim} dimensions but dim_order is {dim_order!r}"
            )
        self._array = array
        self._order = dim_order.upper()
        self.dataset_name = name
        try:
            self._layout = layout_from_dims(self._order, array.shape, calibration)
        except FormatError as e:
            raise OpenError(f"Invalid layout for {name}: {e}") from e

    def _read_plane(self, selection):
        index = tuple(
            selection[dim] if dim in selection else slice(None) for dim in self._order
        )
        plane = self._array[index]
        remaining = [dim for dim in self._order if dim not in selection]
        return np.transpose(plane, [remaining.index(dim) for dim in self._plane_order])
