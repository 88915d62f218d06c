"""Geometry package - value types and containment predicates"""
from .primitives import (
    Point,
    Circle,
    Region,
    InvalidGeometryError,
    point_in_circle,
    point_in_intersection,
    points_in_intersection,
)

__all__ = [
    'Point',
    'Circle',
    'Region',
    'InvalidGeometryError',
    'point_in_circle',
    'point_in_intersection',
    'points_in_intersection',
]
