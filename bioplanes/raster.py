"""Mixed-radix conversion between raster indices and per-axis positions.

The first axis varies fastest, the way format libraries lay out their plane
sequence (e.g. lengths ``[2, 10]`` put raster 3 at position ``[1, 1]``).
"""

from typing import List, Sequence


def plane_count(lengths):
    # type: (Sequence[int]) -> int
    count = 1
    for length in lengths:
        count *= int(length)
    return count


def raster_to_position(lengths, raster):
    # type: (Sequence[int], int) -> List[int]
    """Decompose a raster index into one position per axis.

    :param lengths: Extent of each non-planar axis, fastest-varying first
    :param raster: Linear plane index
    :return: Position along each axis
    :raises IndexError: If the raster index is outside the plane sequence
    """
    total = plane_count(lengths)
    if raster < 0 or raster >= total:
        raise IndexError(f"Raster index {raster} outside [0, {total})")

    position = []
    remainder = int(raster)
    for length in lengths:
        position.append(remainder % int(length))
        remainder //= int(length)
    return position


def position_to_raster(lengths, position):
    # type: (Sequence[int], Sequence[int]) -> int
    """Compose per-axis positions into a raster index.

    :param lengths: Extent of each non-planar axis, fastest-varying first
    :param position: Position along each axis
    :return: Linear plane index
    :raises ValueError: If the arity differs from ``lengths``
    :raises IndexError: If any position is outside its axis
    """
    if len(position) != len(lengths):
        raise ValueError(
            f"Position has {len(position)} entries, expected {len(lengths)}"
        )

    raster = 0
    offset = 1
    for axis, (pos, length) in enumerate(zip(position, lengths)):
        if pos < 0 or pos >= length:
            raise IndexError(f"Position {pos} outside axis {axis} of length {length}")
        raster += offset * int(pos)
        offset *= int(length)
    return raster
