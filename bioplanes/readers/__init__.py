"""Format readers: the boundary to the libraries that own the pixel bytes."""

from bioplanes.readers.array import ArrayFormatReader
from bioplanes.readers.base import FormatReader
from bioplanes.readers.layout import DimLayout, LayoutReader, layout_from_dims


def open_reader(image, **kwargs):
    # type: (object, object) -> FormatReader
    """Open a path or URI with the bioio-backed reader.

    :param image: Path to bioimage file, fsspec URI, or array-like object
    :return: An open format reader
    :raises OpenError: If bioio cannot read the image
    """
    # bioio pulls in its plugin machinery, defer it until a file is opened
    from bioplanes.readers.bioio_reader import BioioFormatReader

    return BioioFormatReader(image, **kwargs)


__all__ = [
    "ArrayFormatReader",
    "DimLayout",
    "FormatReader",
    "LayoutReader",
    "layout_from_dims",
    "open_reader",
]
