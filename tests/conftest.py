from typing import List, Optional

import numpy as np
import pytest
from loguru import logger

from bioplanes import raster
from bioplanes.axes import CHANNEL, TIME, X, Y, AxisDescriptor, classify
from bioplanes.models import PixelType, PlaneDescriptor


def make_axes(*pairs, calibration=None):
    """Axis descriptors from (label, length) pairs in plane-layout order."""
    calibration = calibration or {}
    axes = []
    for index, (label, length) in enumerate(pairs):
        axes.append(
            AxisDescriptor(
                role=classify(label),
                index=index,
                length=length,
                calibration=calibration.get(label),
            )
        )
    return axes


def plane_samples(index, n_pixels, interleave=1):
    """Sample values of a synthetic plane: raster * 1000 + channel * 100 + pixel."""
    pixel = np.arange(n_pixels) % 100
    channels = [index * 1000 + c * 100 + pixel for c in range(interleave)]
    # pixel-major: all channel samples of a pixel are adjacent
    return np.stack(channels, axis=-1).reshape(-1)


class SyntheticReader:
    """Format reader serving generated planes from explicit axis descriptors."""

    format_name = "Synthetic"

    def __init__(
        self,
        axes,
        pixel_type=PixelType.UINT16,
        little_endian=True,
        name="/data/run1/synthetic.tif",
        frame_addressed=False,
        names=None,
    ):
        self._axes = list(axes)
        self.dataset_name = name
        self._pixel_type = pixel_type
        self._little_endian = little_endian
        self._frame_addressed = frame_addressed
        self._names = names
        ordered = sorted(self._axes, key=lambda ax: ax.index)
        self._raster_lengths = [
            ax.length for ax in ordered if not ax.role.is_planar and not ax.interleaved
        ]
        self._interleave = next(
            (ax.length for ax in ordered if ax.interleaved), 1
        )
        self.reads = []  # type: List[int]
        self.closed = False

    def axes(self):
        return list(self._axes)

    def plane_count(self):
        return raster.plane_count(self._raster_lengths)

    def channel_names(self):
        # type: () -> Optional[List[str]]
        return self._names

    def raster_to_position(self, index):
        if self._frame_addressed:
            return [index]
        return raster.raster_to_position(self._raster_lengths, index)

    def position_to_raster(self, position):
        if self._frame_addressed:
            return position[0]
        return raster.position_to_raster(self._raster_lengths, position)

    def read_plane_bytes(self, index):
        assert not self.closed
        self.reads.append(index)
        width = next(ax.length for ax in self._axes if ax.role == X)
        height = next(ax.length for ax in self._axes if ax.role == Y)
        samples = plane_samples(index, width * height, self._interleave)
        dtype = self._pixel_type.dtype.newbyteorder("<" if self._little_endian else ">")
        descriptor = PlaneDescriptor(
            pixel_type=self._pixel_type,
            bits_per_pixel=self._pixel_type.bytes_per_pixel * 8,
            little_endian=self._little_endian,
            multichannel=self._interleave > 1,
            interleave_count=self._interleave,
            width=width,
            height=height,
        )
        return samples.astype(dtype).tobytes(), descriptor

    def close(self):
        self.closed = True


@pytest.fixture
def timelapse_axes():
    # 2 channels x 10 time points of 512x512 planes
    return make_axes(
        ("X", 512), ("Y", 512), ("Channel", 2), ("Time", 10), calibration={"X": 0.65}
    )


@pytest.fixture
def timelapse_reader(timelapse_axes):
    return SyntheticReader(timelapse_axes)


@pytest.fixture
def stack_reader():
    axes = make_axes(
        ("X", 4),
        ("Y", 3),
        ("Z", 5),
        ("Channel", 3),
        ("Time", 2),
        ("Lifetime", 2),
        calibration={"X": 0.1, "Z": 0.5},
    )
    return SyntheticReader(axes, names=["DAPI", "GFP", "mCherry"])


@pytest.fixture
def rgb_reader():
    axes = [
        AxisDescriptor(role=CHANNEL, index=0, length=3, interleaved=True),
        AxisDescriptor(role=X, index=1, length=4),
        AxisDescriptor(role=Y, index=2, length=3),
        AxisDescriptor(role=TIME, index=3, length=4),
    ]
    return SyntheticReader(axes, pixel_type=PixelType.UINT8)


@pytest.fixture
def video_reader():
    # frame-addressed container reporting two structural axes
    axes = make_axes(("X", 4), ("Y", 3), ("Time", 6), ("Z", 1))
    return SyntheticReader(axes, frame_addressed=True)


@pytest.fixture
def log_messages():
    """Capture loguru messages emitted during a test."""
    messages = []
    handler_id = logger.add(lambda msg: messages.append(msg.record), level="DEBUG")
    yield messages
    logger.remove(handler_id)

