# src/montecarlo/geometry/circle_set.py
"""
Circle set and bounding regions of the experiment

The hard-coded configuration is exposed as module constants; the builders
read the same geometry from the 'geometry' config section so tests can
override it.
"""

import logging
import math
import re
from typing import Dict, Tuple, Union

from src.montecarlo.config.unified_config import UnifiedConfig
from src.montecarlo.geometry.primitives import Circle, Point, Region, intersection_bounding_box

logger = logging.getLogger(__name__)

HALF_SQRT_FIVE = math.sqrt(5.0) / 2.0

DEFAULT_CIRCLES: Tuple[Circle, ...] = (
    Circle(Point(1.0, 1.0), 1.0),
    Circle(Point(1.5, 2.0), HALF_SQRT_FIVE),
    Circle(Point(2.0, 1.5), HALF_SQRT_FIVE),
)

WIDE_REGION = Region(0.0, 3.0, 0.0, 3.0)
NARROW_REGION = Region(1.0, 2.0, 1.0, 2.0)

# Radius expressions accepted in config: a plain number or "sqrt(a)/b"
_SQRT_RATIO = re.compile(r'^\s*sqrt\(\s*([0-9.]+)\s*\)\s*(?:/\s*([0-9.]+))?\s*$')


def parse_radius(value: Union[int, float, str]) -> float:
    """
    Convert a configured radius to a float

    Args:
        value: Number, numeric string, or expression of the form "sqrt(a)/b"

    Raises:
        ValueError: If the expression is not recognised
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)

    if isinstance(value, str):
        match = _SQRT_RATIO.match(value)
        if match:
            radicand = float(match.group(1))
            divisor = float(match.group(2)) if match.group(2) else 1.0
            return math.sqrt(radicand) / divisor
        try:
            return float(value)
        except ValueError:
            pass

    raise ValueError(f"Unsupported radius expression: {value!r}")


def build_circle_set(config: UnifiedConfig) -> Tuple[Circle, ...]:
    """Build the ordered circle set from the geometry section"""
    geometry_config = config.get_section('geometry')
    circles_config = geometry_config['circles']

    circles = []
    for entry in circles_config:
        cx, cy = entry['center']
        circles.append(Circle(Point(float(cx), float(cy)), parse_radius(entry['radius'])))

    logger.debug(f"Built circle set with {len(circles)} circles")
    return tuple(circles)


def build_region(config: UnifiedConfig, name: str) -> Region:
    """Build a named sampling region (e.g. 'wide', 'narrow') from config"""
    regions_config: Dict = config.get_section('geometry')['regions']
    if name not in regions_config:
        raise KeyError(f"Region '{name}' not found in geometry.regions")

    bounds = regions_config[name]
    return Region(
        x_min=float(bounds['x_min']),
        x_max=float(bounds['x_max']),
        y_min=float(bounds['y_min']),
        y_max=float(bounds['y_max']),
    )


def region_clips_intersection(circles: Tuple[Circle, ...], region: Region) -> bool:
    """
    True if the region may cut off part of the circles' intersection

    An estimate over a clipping region converges to the clipped area, not
    to the full intersection area. An intersection of zero area cannot be
    clipped.
    """
    if not circles:
        return False
    bounding_box = intersection_bounding_box(circles)
    if bounding_box is None:
        return False
    return not region.contains_region(bounding_box)
