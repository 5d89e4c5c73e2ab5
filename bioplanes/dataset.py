"""Read-only, coordinate-addressed view of an imaging dataset.

A :class:`DatasetView` owns one open format reader. Axis metadata and the
dataset summary are computed once on open and never change: the dataset is
frozen. Every query reads and decodes planes afresh, one plane at a time,
with no caching. Views are not thread-safe; serialize calls or open one view
per thread.
"""

import re
from pathlib import Path
from typing import Iterator, List, Optional, Union

from loguru import logger

from bioplanes.axes import CHANNEL, Z, AxisRole, find_axis, normalize_axes, resolve_role
from bioplanes.coords import Coordinate
from bioplanes.decoder import PixelDecoder
from bioplanes.exceptions import FormatError, OpenError, ReaderIOError, UseAfterClose
from bioplanes.mapper import CoordinateMapper
from bioplanes.models import DatasetSummary, TypedImage
from bioplanes.readers import FormatReader, open_reader


def display_name(dataset_name):
    # type: (str) -> str
    """Base name of a dataset with any directory part stripped."""
    name = re.split(r"[\\/]", str(dataset_name).rstrip("/\\"))[-1]
    return name or str(dataset_name)


def channel_names_for(reader, channel_length):
    # type: (FormatReader, int) -> List[str]
    """Channel names for a dataset, never empty."""
    if channel_length == 0:
        # consumers expect at least one channel name
        return ["Ch: 0"]
    names = reader.channel_names()
    if names and len(names) == channel_length:
        return list(names)
    return [f"Ch: {i}" for i in range(channel_length)]


class DatasetView:
    """Query surface over one dataset.

    Example:
        >>> with DatasetView.open("timelapse.ome.tiff") as view:
        ...     image = view.get_image(Coordinate(channel=0, time=3))
        ...     matches = view.get_images_matching(Coordinate(time=3))

    :param reader: An open format reader, owned by the view from now on
    """

    def __init__(self, reader):
        # type: (FormatReader) -> None
        self._reader = reader
        try:
            self._axes = normalize_axes(reader.axes())
            self._plane_count = int(reader.plane_count())
            self._mapper = CoordinateMapper(self._axes, reader)
            self._decoder = PixelDecoder(self._axes)
        except (ValueError, FormatError) as e:
            reader.close()
            raise OpenError(f"Unusable axis metadata in {reader.dataset_name}: {e}") from e
        self._summary = self._build_summary()
        self._closed = False

        logger.debug(
            f"{self._summary.prefix} - {self._plane_count} plane(s), "
            f"format: {reader.format_name}, axes: {self.axes}"
        )

    @classmethod
    def open(cls, path, reader=None, **kwargs):
        # type: (Union[str, Path], Optional[FormatReader], object) -> DatasetView
        """Open a dataset.

        :param path: Path or URI of the dataset
        :param reader: Already-open reader to wrap instead of opening ``path``
        :param kwargs: Passed to the bioio reader (``scene``, ``reader``)
        :return: The dataset view
        :raises OpenError: If the path is unreadable or the format unrecognized
        """
        if reader is None:
            reader = open_reader(path, **kwargs)
        return cls(reader)

    def _build_summary(self):
        # type: () -> DatasetSummary
        channel_axis = find_axis(self._axes, CHANNEL)
        z_axis = find_axis(self._axes, Z)
        intended = Coordinate(channel=1, time=1, z=1)
        for role, length in self._mapper.extents().items():
            intended = intended.with_index(role, length)

        return DatasetSummary(
            channel_names=tuple(
                channel_names_for(
                    self._reader, channel_axis.length if channel_axis else 0
                )
            ),
            pixel_size_um=self._decoder.pixel_size_um,
            z_step_um=z_axis.calibration if z_axis else None,
            intended_dimensions=intended,
            prefix=display_name(self._reader.dataset_name),
            format_name=self._reader.format_name,
            plane_count=self._plane_count,
        )

    def _check_open(self):
        if self._closed:
            raise UseAfterClose(f"Dataset {self._summary.prefix} is closed")

    @property
    def summary(self):
        # type: () -> DatasetSummary
        self._check_open()
        return self._summary

    @property
    def name(self):
        # type: () -> str
        return self.summary.prefix

    @property
    def is_frozen(self):
        # type: () -> bool
        """Always True: datasets are read-only."""
        return True

    @property
    def mapper(self):
        # type: () -> CoordinateMapper
        self._check_open()
        return self._mapper

    @property
    def axes(self):
        # type: () -> List[AxisRole]
        """Structural axes in ordinal order."""
        self._check_open()
        return [ax.role for ax in self._mapper.structural_axes]

    def get_num_images(self):
        # type: () -> int
        self._check_open()
        return self._plane_count

    def get_axis_length(self, axis):
        # type: (Union[AxisRole, str]) -> int
        """Extent along an axis; 1 when the dataset has no such axis."""
        self._check_open()
        descriptor = find_axis(self._axes, resolve_role(axis))
        if descriptor is None:
            return 1
        return descriptor.length

    def get_max_indices(self):
        # type: () -> Coordinate
        """Zero-based maximum index along every structural axis."""
        self._check_open()
        return self._mapper.max_indices()

    def _read_image(self, index, coord):
        # type: (int, Coordinate) -> TypedImage
        raw, descriptor = self._reader.read_plane_bytes(index)
        return self._decoder.decode(raw, descriptor, coord)

    def _candidates(self, index):
        # type: (int) -> List[Coordinate]
        """Coordinates served by the plane at a raster index."""
        coord = self._mapper.raster_to_coordinate(index)
        channel_axis = find_axis(self._axes, CHANNEL)
        if channel_axis is not None and channel_axis.interleaved and self._decoder.channel_first:
            return [coord.with_index(CHANNEL, c) for c in range(channel_axis.length)]
        return [coord]

    def get_image(self, coord):
        # type: (Coordinate) -> Optional[TypedImage]
        """Decode the plane at a coordinate.

        :param coord: Full coordinate; omitted axes read 0
        :return: The image, or None when the coordinate has no plane
        :raises ReaderIOError: If the reader fails to read the plane
        :raises FormatError: If the reader rejects the plane request
        :raises DecodeError: If the plane bytes cannot be decoded
        """
        self._check_open()
        index = self._mapper.coordinate_to_raster(coord)
        if index is None or index < 0 or index >= self._plane_count:
            logger.debug(f"{self._summary.prefix} - no plane at {coord}")
            return None
        return self._read_image(index, coord)

    def get_any_image(self):
        # type: () -> Optional[TypedImage]
        """Decode the first plane in raster order, or None for an empty dataset."""
        self._check_open()
        if self._plane_count == 0:
            return None
        return self._read_image(0, self._candidates(0)[0])

    def iter_coords(self):
        # type: () -> Iterator[Coordinate]
        """Coordinate of every image, in raster order."""
        self._check_open()
        for index in range(self._plane_count):
            yield from self._candidates(index)

    def get_unordered_image_coords(self):
        # type: () -> List[Coordinate]
        return list(self.iter_coords())

    def _iter_matches(self, query):
        # type: (Coordinate) -> Iterator[tuple]
        for index in range(self._plane_count):
            matches = [c for c in self._candidates(index) if c.is_subspace_of(query)]
            if matches:
                yield index, matches

    def get_images_matching(self, query):
        # type: (Coordinate) -> List[TypedImage]
        """Decode every image whose coordinate matches a partial coordinate.

        Scans all planes; no index is kept. Interleaved multichannel planes
        contribute one image per matching channel.

        :param query: Partial coordinate; omitted axes match anything
        :return: Matching images in raster order
        """
        self._check_open()
        images = []
        for index, coords in self._iter_matches(query):
            raw, descriptor = self._reader.read_plane_bytes(index)
            for coord in coords:
                images.append(self._decoder.decode(raw, descriptor, coord))
        logger.debug(f"{self._summary.prefix} - {len(images)} image(s) match {query}")
        return images

    def has_image(self, query):
        # type: (Coordinate) -> bool
        """Whether any image matches a partial coordinate."""
        self._check_open()
        for _ in self._iter_matches(query):
            return True
        return False

    def iter_images(self):
        # type: () -> Iterator[TypedImage]
        """Decode every image lazily, holding one plane in memory at a time."""
        self._check_open()
        for index in range(self._plane_count):
            raw, descriptor = self._reader.read_plane_bytes(index)
            for coord in self._candidates(index):
                yield self._decoder.decode(raw, descriptor, coord)

    def close(self):
        # type: () -> None
        """Release the reader. Further queries raise :class:`UseAfterClose`."""
        if self._closed:
            return
        self._closed = True
        try:
            self._reader.close()
        except OSError as e:
            raise ReaderIOError(f"Failed to close {self._summary.prefix}: {e}") from e
        finally:
            self._reader = None
        logger.debug(f"{self._summary.prefix} - closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self):
        state = "closed" if self._closed else f"{self._plane_count} planes"
        return f"DatasetView({self._summary.prefix!r}, {state})"


def open_dataset(path, **kwargs):
    # type: (Union[str, Path], object) -> DatasetView
    """Open a dataset with the bioio-backed reader."""
    return DatasetView.open(path, **kwargs)
