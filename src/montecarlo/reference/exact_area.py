# src/montecarlo/reference/exact_area.py
"""
Reference area of the circle intersection

exact_intersection_area() is valid only for the fixed three-circle set
{(1,1) r=1, (1.5,2) r=sqrt(5)/2, (2,1.5) r=sqrt(5)/2}: the quarter of the
unit disk lying in [1,2]x[1,2] plus two congruent circular segments that
bulge out of that square, one from each large circle.

numerical_intersection_area() is the general, slower cross-check.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

from scipy import integrate

from src.montecarlo.geometry.primitives import Circle, Region

logger = logging.getLogger(__name__)


def exact_intersection_area() -> float:
    """
    Closed-form intersection area of the fixed circle set

    pi/4 is the quarter unit disk, 1.25 * asin(0.8) - 1.0 is the area of the
    two segments cut by chords of length 1 from circles of radius sqrt(5)/2.
    """
    return 0.25 * math.pi + 1.25 * math.asin(0.8) - 1.0


def _chord_interval(x: float, circles: Sequence[Circle]) -> Tuple[float, float]:
    """y-interval common to every disk at abscissa x, (lower, upper)"""
    lower = -math.inf
    upper = math.inf
    for circle in circles:
        dx = x - circle.center.x
        h_sq = circle.radius_squared - dx * dx
        if h_sq < 0:
            return 0.0, 0.0
        h = math.sqrt(h_sq)
        lower = max(lower, circle.center.y - h)
        upper = min(upper, circle.center.y + h)
    return lower, upper


def _boundary_crossings_x(circles: Sequence[Circle]) -> List[float]:
    """x-coordinates where the boundaries of two circles intersect"""
    xs = []
    for i, first in enumerate(circles):
        for second in circles[i + 1:]:
            dx = second.center.x - first.center.x
            dy = second.center.y - first.center.y
            d = math.hypot(dx, dy)
            if d == 0 or d > first.radius + second.radius or d < abs(first.radius - second.radius):
                continue
            a = (first.radius ** 2 - second.radius ** 2 + d * d) / (2 * d)
            h = math.sqrt(max(first.radius ** 2 - a * a, 0.0))
            mid_x = first.center.x + a * dx / d
            xs.extend([mid_x - h * dy / d, mid_x + h * dy / d])
    return xs


def numerical_intersection_area(circles: Sequence[Circle], region: Optional[Region] = None,
                                epsabs: float = 1e-10, limit: int = 200) -> float:
    """
    Intersection area by integrating the vertical chord length over x

    The intersection of disks is convex, so every vertical line meets it in
    at most one interval.

    Args:
        circles: Non-empty circle set
        region: Optional clipping rectangle; when given, returns the part of
            the intersection inside it
        epsabs: Absolute tolerance passed to scipy.integrate.quad
        limit: Subinterval limit passed to scipy.integrate.quad

    Returns:
        Area as float, 0.0 if the circles do not overlap
    """
    if not circles:
        raise ValueError("Intersection area of an empty circle set is unbounded")

    x_lo = max(c.center.x - c.radius for c in circles)
    x_hi = min(c.center.x + c.radius for c in circles)
    if region is not None:
        x_lo = max(x_lo, region.x_min)
        x_hi = min(x_hi, region.x_max)
    if x_lo >= x_hi:
        return 0.0

    def chord_length(x: float) -> float:
        lower, upper = _chord_interval(x, circles)
        if region is not None:
            lower = max(lower, region.y_min)
            upper = min(upper, region.y_max)
        return max(0.0, upper - lower)

    # Chord length has kinks where boundaries cross
    crossings = _boundary_crossings_x(circles) + [c.center.x for c in circles]
    breakpoints = sorted({x for x in crossings if x_lo < x < x_hi})
    area, error = integrate.quad(chord_length, x_lo, x_hi, points=breakpoints or None,
                                 epsabs=epsabs, limit=limit)
    logger.debug(f"Numerical intersection area {area:.10f} (quad error estimate {error:.2e})")
    return area
