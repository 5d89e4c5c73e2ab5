"""Decode raw plane bytes into typed numpy sample arrays."""

from typing import Sequence

import numpy as np
from loguru import logger

from bioplanes.axes import CHANNEL, X, Y, AxisDescriptor, find_axis
from bioplanes.coords import Coordinate
from bioplanes.exceptions import DecodeError
from bioplanes.models import PlaneDescriptor, TypedImage

# Widest sample the displayable image type covers
MAX_DISPLAY_BYTES = 2

# Interleave counts that can be split into single channels
SUPPORTED_INTERLEAVE = (1, 3)


class PixelDecoder:
    """Turn one plane's bytes into a single-channel :class:`TypedImage`.

    Plane geometry comes from the dataset's classified X and Y axes, not from
    fixed ordinals. When a plane is multichannel and the channel axis is the
    first (fastest-varying) axis of the plane layout, channel samples are
    interleaved per pixel position and the channel named by the target
    coordinate is picked out by striding.

    Sample widths of 1 and 2 bytes are the supported output. 4-byte samples
    (uint32, int32, float) decode unchanged, never truncated, with a warning
    that they exceed the 16-bit display range. 8-byte samples are rejected.

    :param axes: Normalized axis descriptors of the dataset
    """

    def __init__(self, axes):
        # type: (Sequence[AxisDescriptor]) -> None
        x_axis = find_axis(axes, X)
        y_axis = find_axis(axes, Y)
        if x_axis is None or y_axis is None:
            raise ValueError("Decoding requires both an X and a Y axis")
        channel_axis = find_axis(axes, CHANNEL)

        self.width = x_axis.length
        self.height = y_axis.length
        self.pixel_size_um = x_axis.calibration
        self.channel_first = channel_axis is not None and channel_axis.index == 0
        self._warned_wide = False

    def interleave_count(self, descriptor):
        # type: (PlaneDescriptor) -> int
        """Number of channel samples stored per pixel position."""
        if descriptor.multichannel and self.channel_first:
            return max(1, descriptor.interleave_count)
        return 1

    def decode(self, raw, descriptor, target):
        # type: (bytes, PlaneDescriptor, Coordinate) -> TypedImage
        """Decode a raw plane for one target coordinate.

        :param raw: Raw plane bytes as returned by the format reader
        :param descriptor: Per-plane metadata of ``raw``
        :param target: Coordinate the image represents; its channel selects
            the sample of interleaved planes
        :return: Decoded image, shape (height, width), native byte order
        :raises DecodeError: On unsupported sample width or interleave count,
            a channel outside the interleave, or a byte length that does not
            match the plane geometry
        """
        pixel_type = descriptor.pixel_type
        bytes_per_pixel = pixel_type.bytes_per_pixel
        if bytes_per_pixel > 4:
            raise DecodeError(
                f"{pixel_type.value} samples ({bytes_per_pixel} bytes) are not supported"
            )
        if bytes_per_pixel > MAX_DISPLAY_BYTES and not self._warned_wide:
            logger.warning(
                f"{pixel_type.value} samples exceed the 16-bit display range, "
                "decoding without conversion"
            )
            self._warned_wide = True

        components = self.interleave_count(descriptor)
        if components not in SUPPORTED_INTERLEAVE:
            raise DecodeError(
                f"Cannot extract a channel from {components} interleaved samples"
            )

        expected = self.width * self.height * components * bytes_per_pixel
        if len(raw) != expected:
            raise DecodeError(
                f"Plane has {len(raw)} bytes, expected {expected} "
                f"({self.width}x{self.height}, {components} component(s), "
                f"{bytes_per_pixel} byte(s) per sample)"
            )

        byteorder = "<" if descriptor.little_endian else ">"
        samples = np.frombuffer(raw, dtype=pixel_type.dtype.newbyteorder(byteorder))

        if components > 1:
            channel = target.channel
            if channel >= components:
                raise DecodeError(
                    f"Channel {channel} outside {components} interleaved samples"
                )
            # sample i of the channel sits at components * i + channel
            samples = samples[channel::components]

        pixels = samples.astype(pixel_type.dtype).reshape(self.height, self.width)

        return TypedImage(
            pixels=pixels,
            width=self.width,
            height=self.height,
            bytes_per_pixel=bytes_per_pixel,
            bit_depth=descriptor.bits_per_pixel,
            coordinate=target,
            pixel_size_um=self.pixel_size_um,
        )
