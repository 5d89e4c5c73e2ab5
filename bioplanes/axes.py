"""Axis roles and classification of format axis labels.

Format libraries report axes by label. Each label is classified exactly once,
when a dataset is opened, into an :class:`AxisRole`; everything downstream
matches on the role instead of comparing strings.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, List, Optional

from loguru import logger


class AxisKind(str, Enum):
    X = "X"
    Y = "Y"
    CHANNEL = "Channel"
    TIME = "Time"
    Z = "Z"
    NAMED = "Named"


@dataclass(frozen=True)
class AxisRole:
    """Semantic role of an axis.

    :ivar kind: Role tag
    :ivar name: Literal format label, only set for ``AxisKind.NAMED``
    """

    kind: AxisKind
    name: Optional[str] = None

    def __post_init__(self):
        if self.kind is AxisKind.NAMED and not self.name:
            raise ValueError("Named axis roles require a label")
        if self.kind is not AxisKind.NAMED and self.name is not None:
            raise ValueError(f"Only named axis roles carry a label, got {self.name!r}")

    @classmethod
    def named(cls, label):
        # type: (str) -> AxisRole
        return cls(AxisKind.NAMED, label)

    @property
    def is_planar(self):
        # type: () -> bool
        return self.kind in (AxisKind.X, AxisKind.Y)

    @property
    def label(self):
        # type: () -> str
        return self.name if self.kind is AxisKind.NAMED else self.kind.value

    def __repr__(self):
        return f"AxisRole({self.label})"


X = AxisRole(AxisKind.X)
Y = AxisRole(AxisKind.Y)
CHANNEL = AxisRole(AxisKind.CHANNEL)
TIME = AxisRole(AxisKind.TIME)
Z = AxisRole(AxisKind.Z)

# Reserved labels of the wrapped format library, plus bioio's one-letter dims
_RESERVED_LABELS = {
    "X": X,
    "Y": Y,
    "Channel": CHANNEL,
    "C": CHANNEL,
    "Time": TIME,
    "T": TIME,
    "Z": Z,
}

# Short names accepted from callers (CLI, get_axis_length)
_ALIASES = {
    "channel": CHANNEL,
    "c": CHANNEL,
    "time": TIME,
    "t": TIME,
    "z": Z,
}


def classify(label):
    # type: (str) -> AxisRole
    """Map a format axis label to its role.

    Unrecognized labels always become a named role carrying the label, so no
    axis is ever dropped.

    :param label: Axis label as reported by the format library
    :return: The axis role
    """
    role = _RESERVED_LABELS.get(label)
    if role is not None:
        return role
    return AxisRole.named(label)


def resolve_role(axis):
    # type: (object) -> AxisRole
    """Turn a caller-supplied axis (role, role alias or named label) into a role."""
    if isinstance(axis, AxisRole):
        return axis
    if isinstance(axis, AxisKind):
        return AxisRole(axis)
    if not isinstance(axis, str) or not axis:
        raise TypeError(f"Expected an AxisRole or axis label, got {axis!r}")
    alias = _ALIASES.get(axis.lower())
    if alias is not None:
        return alias
    return classify(axis)


@dataclass(frozen=True)
class AxisDescriptor:
    """One axis of a dataset as reported by the format reader.

    :ivar role: Classified role
    :ivar index: Ordinal position of the axis in the plane layout
    :ivar length: Extent along the axis
    :ivar calibration: Physical step size along the axis, if known
    :ivar interleaved: Axis samples live inside each plane's byte buffer
    """

    role: AxisRole
    index: int
    length: int
    calibration: Optional[float] = None
    interleaved: bool = False

    def __post_init__(self):
        if self.index < 0:
            raise ValueError(f"Axis index must be non-negative, got {self.index}")
        if self.length < 1:
            raise ValueError(f"Axis {self.role.label} has invalid length {self.length}")


def find_axis(axes, role):
    # type: (Iterable[AxisDescriptor], AxisRole) -> Optional[AxisDescriptor]
    for axis in axes:
        if axis.role == role:
            return axis
    return None


def structural_axes(axes):
    # type: (Iterable[AxisDescriptor]) -> List[AxisDescriptor]
    """Non-X/Y axes ordered by ordinal position."""
    return sorted((ax for ax in axes if not ax.role.is_planar), key=lambda ax: ax.index)


def normalize_axes(axes):
    # type: (Iterable[AxisDescriptor]) -> List[AxisDescriptor]
    """Ensure X and Y each occur exactly once.

    Malformed metadata that lacks a planar axis gets it at its default ordinal
    (X at 0, Y at 1): an unclassified axis sitting there takes the role, a
    vacant ordinal gets a length-1 axis.

    :raises ValueError: If a planar axis repeats or its default ordinal is
        held by a channel, time or z axis
    """
    axes = sorted(axes, key=lambda ax: ax.index)
    for role, ordinal in ((X, 0), (Y, 1)):
        count = sum(1 for ax in axes if ax.role == role)
        if count > 1:
            raise ValueError(f"{role.label} axis occurs {count} times")
        if count == 1:
            continue

        occupant = next((ax for ax in axes if ax.index == ordinal), None)
        if occupant is None:
            logger.warning(f"No {role.label} axis reported, assuming length 1 at {ordinal}")
            axes.append(AxisDescriptor(role=role, index=ordinal, length=1))
            axes.sort(key=lambda ax: ax.index)
        elif occupant.role.kind is AxisKind.NAMED:
            logger.warning(
                f"No {role.label} axis reported, using axis {occupant.role.label!r} "
                f"at {ordinal}"
            )
            axes[axes.index(occupant)] = replace(occupant, role=role)
        else:
            raise ValueError(
                f"No {role.label} axis reported and ordinal {ordinal} "
                f"holds {occupant.role.label}"
            )
    return axes
