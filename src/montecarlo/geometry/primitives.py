# src/montecarlo/geometry/primitives.py
"""
Geometry primitives for the intersection experiment

Point, Circle and Region value types plus the containment predicates the
estimator counts with. Containment uses closed-disk semantics: a point
exactly on the boundary is inside.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import numpy as np


class InvalidGeometryError(ValueError):
    """Raised when a circle or region is constructed with degenerate geometry"""


@dataclass(frozen=True)
class Point:
    """Immutable 2D point"""
    x: float
    y: float


@dataclass(frozen=True)
class Circle:
    """
    Immutable circle defined by center and radius

    Raises:
        InvalidGeometryError: If radius is not a positive finite number
    """
    center: Point
    radius: float

    def __post_init__(self):
        if not math.isfinite(self.radius) or self.radius <= 0:
            raise InvalidGeometryError(f"Circle radius must be positive, got {self.radius}")

    @property
    def radius_squared(self) -> float:
        return self.radius * self.radius


@dataclass(frozen=True)
class Region:
    """
    Axis-aligned rectangle used as the sampling domain

    Bounds are validated at construction: x_min < x_max and y_min < y_max.
    """
    x_min: float
    x_max: float
    y_min: float
    y_max: float

    def __post_init__(self):
        bounds = (self.x_min, self.x_max, self.y_min, self.y_max)
        if not all(math.isfinite(b) for b in bounds):
            raise InvalidGeometryError(f"Region bounds must be finite, got {bounds}")
        if self.x_min >= self.x_max:
            raise InvalidGeometryError(f"Degenerate region: x_min {self.x_min} >= x_max {self.x_max}")
        if self.y_min >= self.y_max:
            raise InvalidGeometryError(f"Degenerate region: y_min {self.y_min} >= y_max {self.y_max}")

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    def area(self) -> float:
        """Width times height"""
        return self.width * self.height

    def contains(self, point: Point) -> bool:
        """Closed-bounds membership test"""
        return self.x_min <= point.x <= self.x_max and self.y_min <= point.y <= self.y_max

    def contains_region(self, other: 'Region') -> bool:
        return (self.x_min <= other.x_min and other.x_max <= self.x_max and
                self.y_min <= other.y_min and other.y_max <= self.y_max)


def point_in_circle(point: Point, circle: Circle) -> bool:
    """True iff squared distance from point to center is <= radius squared"""
    dx = point.x - circle.center.x
    dy = point.y - circle.center.y
    return dx * dx + dy * dy <= circle.radius_squared


def point_in_intersection(point: Point, circles: Iterable[Circle]) -> bool:
    """
    True iff the point lies in every circle

    Stops at the first circle that rejects the point. An empty collection
    accepts every point.
    """
    for circle in circles:
        if not point_in_circle(point, circle):
            return False
    return True


def points_in_intersection(xy: np.ndarray, circles: Sequence[Circle]) -> np.ndarray:
    """
    Vectorised containment mask for an (N, 2) array of sample coordinates

    Uses the same arithmetic as point_in_circle so both paths agree point
    for point.

    Args:
        xy: Array of shape (N, 2), columns are x and y
        circles: Circles that must all contain the point

    Returns:
        Boolean array of shape (N,)
    """
    xy = np.asarray(xy, dtype=np.float64)
    if xy.ndim != 2 or xy.shape[1] != 2:
        raise ValueError(f"Expected array of shape (N, 2), got {xy.shape}")

    inside = np.ones(xy.shape[0], dtype=bool)
    for circle in circles:
        dx = xy[:, 0] - circle.center.x
        dy = xy[:, 1] - circle.center.y
        inside &= dx * dx + dy * dy <= circle.radius_squared
    return inside


def intersection_bounding_box(circles: Sequence[Circle]) -> Optional[Region]:
    """
    Axis-aligned box that contains the intersection of the given circles

    The box is the overlap of the circles' own bounding boxes, so it may be
    larger than the tight bounds of the intersection but never smaller.

    Returns:
        Region, or None when the boxes do not overlap in a positive area
        (disjoint or tangent circles, whose intersection has zero area)

    Raises:
        InvalidGeometryError: If circles is empty
    """
    if not circles:
        raise InvalidGeometryError("Cannot bound the intersection of an empty circle set")

    x_min = max(c.center.x - c.radius for c in circles)
    x_max = min(c.center.x + c.radius for c in circles)
    y_min = max(c.center.y - c.radius for c in circles)
    y_max = min(c.center.y + c.radius for c in circles)
    if x_min >= x_max or y_min >= y_max:
        return None
    return Region(x_min=x_min, x_max=x_max, y_min=y_min, y_max=y_max)
