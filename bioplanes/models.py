"""Value types shared between readers, the decoder and dataset views."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from bioplanes.coords import Coordinate


class PixelType(str, Enum):
    """Sample type of a plane, named as format libraries name them."""

    INT8 = "int8"
    UINT8 = "uint8"
    INT16 = "int16"
    UINT16 = "uint16"
    INT32 = "int32"
    UINT32 = "uint32"
    FLOAT = "float"
    DOUBLE = "double"

    @property
    def dtype(self):
        # type: () -> np.dtype
        return np.dtype(_DTYPES[self])

    @property
    def bytes_per_pixel(self):
        # type: () -> int
        return self.dtype.itemsize

    @classmethod
    def from_dtype(cls, dtype):
        # type: (object) -> PixelType
        """Look up the pixel type of a numpy dtype, ignoring byte order."""
        dtype = np.dtype(dtype)
        key = dtype.newbyteorder("=")
        for pixel_type, name in _DTYPES.items():
            if np.dtype(name) == key:
                return pixel_type
        raise ValueError(f"Unsupported dtype: {dtype}")


_DTYPES = {
    PixelType.INT8: "int8",
    PixelType.UINT8: "uint8",
    PixelType.INT16: "int16",
    PixelType.UINT16: "uint16",
    PixelType.INT32: "int32",
    PixelType.UINT32: "uint32",
    PixelType.FLOAT: "float32",
    PixelType.DOUBLE: "float64",
}


@dataclass(frozen=True)
class PlaneDescriptor:
    """Per-plane metadata reported alongside the raw bytes.

    Attributes:
        pixel_type: Sample type of the plane
        bits_per_pixel: Significant bits per sample (may be less than the width)
        little_endian: Byte order of the raw buffer
        multichannel: Plane carries more than one channel
        interleave_count: Channel samples stored per pixel position, 1 if none
        width: Plane width in pixels
        height: Plane height in pixels
    """

    pixel_type: PixelType
    bits_per_pixel: int
    little_endian: bool
    multichannel: bool = False
    interleave_count: int = 1
    width: int = 0
    height: int = 0


@dataclass(frozen=True)
class TypedImage:
    """A decoded single-channel plane ready for display.

    Attributes:
        pixels: 2D array (height, width) in native byte order
        width: Plane width in pixels
        height: Plane height in pixels
        bytes_per_pixel: Sample width in bytes
        bit_depth: Significant bits per sample
        coordinate: Where the plane sits in the dataset
        pixel_size_um: Physical pixel size, if calibrated
    """

    pixels: np.ndarray
    width: int
    height: int
    bytes_per_pixel: int
    bit_depth: int
    coordinate: Coordinate
    pixel_size_um: Optional[float] = None


@dataclass(frozen=True)
class DatasetSummary:
    """Dataset-wide constants computed once when a dataset is opened.

    Attributes:
        channel_names: One name per channel, never empty
        pixel_size_um: Calibration of the X axis
        z_step_um: Calibration of the Z axis, None without a Z axis
        intended_dimensions: Extent along each structural axis
        prefix: Display name of the dataset
        format_name: Name of the format reported by the reader
        plane_count: Number of planes in the raster sequence
    """

    channel_names: Tuple[str, ...]
    pixel_size_um: Optional[float]
    z_step_um: Optional[float]
    intended_dimensions: Coordinate
    prefix: str
    format_name: str = ""
    plane_count: int = 0
