"""Circle values and precomputed circle point offsets."""

import math
from types import MappingProxyType
from typing import Mapping, NamedTuple, Tuple

Offset = Tuple[int, int]

# Radii searched by the coarse pass, on the downscaled edge image.
COARSE_RADII = range(5, 15)


class Circle(NamedTuple):
    """A circle in image coordinates: x is the column, y is the row."""

    x: int
    y: int
    r: int

    def __str__(self) -> str:
        return f"({self.x},{self.y},{self.r})"


def circle_points(r: int) -> Tuple[Offset, ...]:
    """
    Compute the (dx, dy) pixel offsets lying on a circle of radius r.

    The circle is sampled at 1 degree steps and rounded toward zero.
    Consecutive samples that land on the same pixel are collapsed.

    Args:
        r: Circle radius in pixels

    Returns:
        Tuple of (dx, dy) offsets
    """
    points = []
    last = (0, 0)
    for degree in range(360):
        theta = degree * math.pi / 180.0
        point = (int(r * math.cos(theta)), int(r * math.sin(theta)))
        if point != last:
            points.append(point)
            last = point
    return tuple(points)


def _build_table(radii) -> Mapping[int, Tuple[Offset, ...]]:
    return MappingProxyType({r: circle_points(r) for r in radii})


CIRCLE_POINTS = _build_table(COARSE_RADII)


def get_circle_points(r: int) -> Tuple[Offset, ...]:
    """Return cached offsets for r, computing them if r is outside the table."""
    cached = CIRCLE_POINTS.get(r)
    if cached is not None:
        return cached
    return circle_points(r)
