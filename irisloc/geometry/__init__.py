"""Circle geometry."""

from .circle import CIRCLE_POINTS, COARSE_RADII, Circle, circle_points, get_circle_points

__all__ = ['CIRCLE_POINTS', 'COARSE_RADII', 'Circle', 'circle_points', 'get_circle_points']
