"""Edge map generation and circle search."""

from .circle_detector import CircleSearchResult, HoughCircleSearch, circle_support
from .edge_detector import EdgeMapGenerator, sobel_edge

__all__ = ['CircleSearchResult', 'EdgeMapGenerator', 'HoughCircleSearch',
           'circle_support', 'sobel_edge']
