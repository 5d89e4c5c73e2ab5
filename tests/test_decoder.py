import numpy as np
import pytest

from bioplanes.axes import CHANNEL, TIME, X, Y, AxisDescriptor
from bioplanes.coords import Coordinate
from bioplanes.decoder import PixelDecoder
from bioplanes.exceptions import DecodeError
from bioplanes.models import PixelType, PlaneDescriptor
from conftest import make_axes, plane_samples

WIDTH, HEIGHT = 4, 3


def planar_axes():
    return make_axes(("X", WIDTH), ("Y", HEIGHT), ("Time", 2), calibration={"X": 0.2})


def interleaved_axes(count=3):
    return [
        AxisDescriptor(role=CHANNEL, index=0, length=count, interleaved=True),
        AxisDescriptor(role=X, index=1, length=WIDTH),
        AxisDescriptor(role=Y, index=2, length=HEIGHT),
        AxisDescriptor(role=TIME, index=3, length=2),
    ]


def descriptor(pixel_type=PixelType.UINT16, little_endian=True, interleave=1):
    return PlaneDescriptor(
        pixel_type=pixel_type,
        bits_per_pixel=12 if pixel_type is PixelType.UINT16 else pixel_type.bytes_per_pixel * 8,
        little_endian=little_endian,
        multichannel=interleave > 1,
        interleave_count=interleave,
        width=WIDTH,
        height=HEIGHT,
    )


@pytest.mark.parametrize("little_endian", [True, False])
@pytest.mark.parametrize(
    "pixel_type", [PixelType.UINT8, PixelType.UINT16, PixelType.INT16]
)
def test_decode_honours_byte_order(pixel_type, little_endian):
    values = np.arange(WIDTH * HEIGHT).astype(pixel_type.dtype)
    order = "<" if little_endian else ">"
    raw = values.astype(pixel_type.dtype.newbyteorder(order)).tobytes()

    image = PixelDecoder(planar_axes()).decode(
        raw, descriptor(pixel_type, little_endian), Coordinate(time=1)
    )
    assert image.pixels.shape == (HEIGHT, WIDTH)
    assert image.pixels.dtype == pixel_type.dtype
    assert image.pixels.dtype.isnative
    np.testing.assert_array_equal(image.pixels.ravel(), values)
    assert image.width == WIDTH
    assert image.height == HEIGHT
    assert image.bytes_per_pixel == pixel_type.bytes_per_pixel
    assert image.coordinate == Coordinate(time=1)
    assert image.pixel_size_um == 0.2


def test_big_endian_uint16_values():
    raw = bytes([0x01, 0x02] * (WIDTH * HEIGHT))
    image = PixelDecoder(planar_axes()).decode(
        raw, descriptor(little_endian=False), Coordinate()
    )
    assert (image.pixels == 0x0102).all()
    assert image.bit_depth == 12


def test_decoded_pixels_are_writable_copies():
    raw = bytes(WIDTH * HEIGHT * 2)
    image = PixelDecoder(planar_axes()).decode(raw, descriptor(), Coordinate())
    image.pixels[0, 0] = 7
    assert raw == bytes(WIDTH * HEIGHT * 2)


@pytest.mark.parametrize("channel", [0, 1, 2])
@pytest.mark.parametrize("pixel_type", [PixelType.UINT8, PixelType.UINT16])
def test_interleave_extracts_every_third_sample(channel, pixel_type):
    samples = plane_samples(1, WIDTH * HEIGHT, interleave=3).astype(pixel_type.dtype)
    raw = samples.astype(pixel_type.dtype.newbyteorder("<")).tobytes()

    image = PixelDecoder(interleaved_axes()).decode(
        raw, descriptor(pixel_type, interleave=3), Coordinate(channel=channel, time=1)
    )
    np.testing.assert_array_equal(image.pixels.ravel(), samples[channel::3])
    assert image.pixels.shape == (HEIGHT, WIDTH)


def test_interleave_channel_out_of_range():
    raw = bytes(WIDTH * HEIGHT * 3)
    decoder = PixelDecoder(interleaved_axes())
    with pytest.raises(DecodeError, match="Channel 3"):
        decoder.decode(raw, descriptor(PixelType.UINT8, interleave=3), Coordinate(channel=3))


@pytest.mark.parametrize("count", [2, 4])
def test_unsupported_interleave_counts(count):
    raw = bytes(WIDTH * HEIGHT * count)
    decoder = PixelDecoder(interleaved_axes(count))
    with pytest.raises(DecodeError, match="interleaved"):
        decoder.decode(raw, descriptor(PixelType.UINT8, interleave=count), Coordinate())


def test_no_extraction_unless_channel_axis_leads():
    # multichannel plane whose channel axis is not first: bytes hold one channel
    axes = make_axes(("X", WIDTH), ("Y", HEIGHT), ("Channel", 3))
    decoder = PixelDecoder(axes)
    assert not decoder.channel_first
    assert decoder.interleave_count(descriptor(interleave=3)) == 1
    raw = bytes(WIDTH * HEIGHT * 2)
    image = decoder.decode(raw, descriptor(interleave=3), Coordinate(channel=2))
    assert image.pixels.shape == (HEIGHT, WIDTH)


@pytest.mark.parametrize("size", [0, 1, WIDTH * HEIGHT * 2 - 1, WIDTH * HEIGHT * 2 + 2])
def test_byte_length_mismatch(size):
    with pytest.raises(DecodeError, match="expected 24"):
        PixelDecoder(planar_axes()).decode(bytes(size), descriptor(), Coordinate())


def test_geometry_follows_classified_axes():
    # X and Y not at ordinals 0 and 1
    axes = make_axes(("Time", 2), ("Y", 5), ("X", 2))
    decoder = PixelDecoder(axes)
    assert (decoder.width, decoder.height) == (2, 5)
    image = decoder.decode(bytes(10), descriptor(PixelType.UINT8), Coordinate())
    assert image.pixels.shape == (5, 2)


@pytest.mark.parametrize("pixel_type", [PixelType.UINT32, PixelType.FLOAT])
def test_wide_samples_decode_without_truncation(pixel_type, log_messages):
    values = np.array([0, 1, 70000, 2**31 + 5] * 3).astype(pixel_type.dtype)
    raw = values.astype(pixel_type.dtype.newbyteorder(">")).tobytes()
    decoder = PixelDecoder(planar_axes())

    image = decoder.decode(raw, descriptor(pixel_type, little_endian=False), Coordinate())
    decoder.decode(raw, descriptor(pixel_type, little_endian=False), Coordinate())

    np.testing.assert_array_equal(image.pixels.ravel(), values)
    assert image.bytes_per_pixel == 4
    warnings = [r for r in log_messages if r["level"].name == "WARNING"]
    assert len(warnings) == 1


def test_double_samples_are_rejected():
    raw = bytes(WIDTH * HEIGHT * 8)
    with pytest.raises(DecodeError, match="not supported"):
        PixelDecoder(planar_axes()).decode(raw, descriptor(PixelType.DOUBLE), Coordinate())


def test_decoder_requires_planar_axes():
    with pytest.raises(ValueError):
        PixelDecoder([AxisDescriptor(role=X, index=0, length=4)])
