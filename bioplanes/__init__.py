"""Coordinate-addressed access to the planes of multi-dimensional bioimages."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("bioplanes")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "uninstalled"

from bioplanes.axes import (
    CHANNEL,
    TIME,
    X,
    Y,
    Z,
    AxisDescriptor,
    AxisKind,
    AxisRole,
    classify,
)
from bioplanes.coords import Coordinate
from bioplanes.dataset import DatasetView, open_dataset
from bioplanes.decoder import PixelDecoder
from bioplanes.exceptions import (
    BioplanesError,
    DecodeError,
    FormatError,
    OpenError,
    ReaderIOError,
    UseAfterClose,
)
from bioplanes.mapper import CoordinateMapper
from bioplanes.models import DatasetSummary, PixelType, PlaneDescriptor, TypedImage
from bioplanes.readers import ArrayFormatReader, FormatReader, open_reader

__all__ = [
    "CHANNEL",
    "TIME",
    "X",
    "Y",
    "Z",
    "ArrayFormatReader",
    "AxisDescriptor",
    "AxisKind",
    "AxisRole",
    "BioplanesError",
    "Coordinate",
    "CoordinateMapper",
    "DatasetSummary",
    "DatasetView",
    "DecodeError",
    "FormatError",
    "FormatReader",
    "OpenError",
    "PixelDecoder",
    "PixelType",
    "PlaneDescriptor",
    "ReaderIOError",
    "TypedImage",
    "UseAfterClose",
    "classify",
    "open_dataset",
    "open_reader",
]
