"""Boundary between bioplanes and the format library that owns the bytes."""

from typing import List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from bioplanes.axes import AxisDescriptor
from bioplanes.models import PlaneDescriptor


@runtime_checkable
class FormatReader(Protocol):
    """Capability expected from a wrapped format library.

    Implementations own a single open dataset (image group 0). Errors while
    reading planes are raised as ``ReaderIOError`` or ``FormatError``.
    """

    format_name: str
    dataset_name: str

    def axes(self) -> List[AxisDescriptor]:
        """Every axis of the dataset, X and Y included, in plane-layout order."""
        ...

    def plane_count(self) -> int:
        ...

    def channel_names(self) -> Optional[List[str]]:
        """Channel names from the format metadata, or None when it has none."""
        ...

    def read_plane_bytes(self, index: int) -> Tuple[bytes, PlaneDescriptor]:
        """Raw bytes of one plane plus its descriptor."""
        ...

    def raster_to_position(self, index: int) -> List[int]:
        """Native decomposition of a raster index into per-axis positions."""
        ...

    def position_to_raster(self, position: Sequence[int]) -> int:
        ...

    def close(self) -> None:
        ...
